"""Shared API dependencies."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from ..config import Settings, load_settings
from ..domain.entrystore.gateway import (
    EntryStoreGateway,
    build_entry_store_gateway,
)
from ..domain.uploads import BlobSink, UploadPipeline, build_blob_sink

__all__ = [
    "get_settings",
    "get_entry_gateway",
    "get_blob_sink",
    "get_upload_pipeline",
]


@lru_cache()
def get_settings() -> Settings:
    """Return the settings loaded once per process."""

    return load_settings()


@lru_cache()
def _entry_gateway_singleton() -> EntryStoreGateway:
    settings = get_settings()
    return build_entry_store_gateway(
        prefer_postgres=settings.entry_store_backend == "sql",
    )


def get_entry_gateway() -> EntryStoreGateway:
    """Return the process-wide EntryStore gateway instance."""

    return _entry_gateway_singleton()


@lru_cache()
def _blob_sink_singleton() -> BlobSink:
    return build_blob_sink(get_settings().blob_sink)


def get_blob_sink() -> BlobSink:
    """Return the configured BlobSink adapter."""

    return _blob_sink_singleton()


def get_upload_pipeline(
    entry_gateway: EntryStoreGateway = Depends(get_entry_gateway),
    blob_sink: BlobSink = Depends(get_blob_sink),
) -> UploadPipeline:
    """Build an upload pipeline over the injected gateway and sink."""

    return UploadPipeline(entry_gateway, blob_sink)
