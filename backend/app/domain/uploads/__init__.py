"""Operator upload flow."""

from .blob_sink import (
    BlobSink,
    BlobStoreResult,
    HttpBlobSink,
    LocalDirectoryBlobSink,
    build_blob_sink,
)
from .pipeline import UploadPipeline, UploadRequest

__all__ = [
    "BlobSink",
    "BlobStoreResult",
    "HttpBlobSink",
    "LocalDirectoryBlobSink",
    "UploadPipeline",
    "UploadRequest",
    "build_blob_sink",
]
