"""Gallery API, domain services and viewer client."""
