"""Infrastructure adapters: logging, metrics, database."""
