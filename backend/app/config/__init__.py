"""Config package exporting loader helpers."""

from .loader import (
    BlobSinkConfig,
    NoticeConfig,
    Settings,
    SyncConfig,
    ViewerConfig,
    load_settings,
)

__all__ = [
    "Settings",
    "SyncConfig",
    "ViewerConfig",
    "BlobSinkConfig",
    "NoticeConfig",
    "load_settings",
]
