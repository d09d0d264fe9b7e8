"""Router exports for FastAPI composition."""

from . import entries, health, uploads

__all__ = ["entries", "health", "uploads"]
