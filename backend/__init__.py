"""Gallery backend package."""
