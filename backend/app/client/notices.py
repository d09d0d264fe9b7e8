"""Transient, auto-dismissing notices for operator feedback."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..config import NoticeConfig
from ..domain.errors import (
    GalleryError,
    InputError,
    MetadataCommitFailedAfterUpload,
    UploadError,
    ValidationError,
)

__all__ = ["Notice", "NoticeBoard", "NoticeKind"]


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    message: str
    kind: NoticeKind
    expires_at: float


class NoticeBoard:
    """Holds at most one notice; a newer notice replaces the older one."""

    def __init__(
        self,
        *,
        success_seconds: float = 3.0,
        error_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._success_seconds = success_seconds
        self._error_seconds = error_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._notice: Optional[Notice] = None

    @classmethod
    def from_config(cls, config: NoticeConfig) -> "NoticeBoard":
        return cls(
            success_seconds=config.success_seconds,
            error_seconds=config.error_seconds,
        )

    def post_success(self, message: str) -> Notice:
        return self._post(message, NoticeKind.SUCCESS, self._success_seconds)

    def post_error(self, message: str) -> Notice:
        return self._post(message, NoticeKind.ERROR, self._error_seconds)

    def post_failure(self, error: GalleryError) -> Notice:
        """Translate an upload-path error into operator wording."""

        if isinstance(error, InputError) and error.code == "multiple_image_sources":
            message = "Please provide either a photo or an image URL, not both."
        elif isinstance(error, InputError):
            message = "Please select a photo or provide an image URL!"
        elif isinstance(error, UploadError):
            message = f"Upload failed: {error.reason}"
        elif isinstance(error, MetadataCommitFailedAfterUpload):
            message = "Photo stored but not saved to the gallery. Please retry saving."
        elif isinstance(error, ValidationError):
            message = str(error)
        else:
            message = "Failed to upload photo. Please try again."
        return self.post_error(message)

    def current(self) -> Optional[Notice]:
        with self._lock:
            notice = self._notice
            if notice is not None and self._clock() >= notice.expires_at:
                self._notice = None
                return None
            return notice

    def dismiss(self) -> None:
        with self._lock:
            self._notice = None

    def _post(self, message: str, kind: NoticeKind, ttl: float) -> Notice:
        notice = Notice(message=message, kind=kind, expires_at=self._clock() + ttl)
        with self._lock:
            self._notice = notice
        return notice
