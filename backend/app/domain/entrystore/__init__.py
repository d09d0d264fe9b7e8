"""Append-only gallery entry store."""

from .gateway import (
    EntryStoreGateway,
    InMemoryEntryStoreGateway,
    PostgresEntryStoreGateway,
    build_entry_store_gateway,
)
from .models import Entry, normalize_caption

__all__ = [
    "Entry",
    "EntryStoreGateway",
    "InMemoryEntryStoreGateway",
    "PostgresEntryStoreGateway",
    "build_entry_store_gateway",
    "normalize_caption",
]
