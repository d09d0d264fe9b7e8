"""Gallery domain services."""
