"""Error taxonomy shared by the entry store, upload pipeline and viewer client."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "GalleryError",
    "ValidationError",
    "InputError",
    "StorageUnavailable",
    "UploadError",
    "MetadataCommitFailedAfterUpload",
]


class GalleryError(RuntimeError):
    """Base class carrying a stable error code and retry hint."""

    def __init__(self, message: str, *, code: str, retryable: bool) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable


class ValidationError(GalleryError):
    """Caller supplied input the store refuses to persist."""

    def __init__(self, message: str, *, code: str = "validation_error") -> None:
        super().__init__(message, code=code, retryable=False)


class InputError(ValidationError):
    """Upload request did not name exactly one image source."""

    def __init__(self, message: str, *, code: str = "no_image_source") -> None:
        super().__init__(message, code=code)


class StorageUnavailable(GalleryError):
    """The entry store could not be reached or did not answer in time."""

    def __init__(self, message: str = "entry store unavailable") -> None:
        super().__init__(message, code="storage_unavailable", retryable=True)


class UploadError(GalleryError):
    """Blob write failed; nothing was recorded in the entry store."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"upload failed: {reason}", code="upload_failed", retryable=True)
        self.reason = reason


class MetadataCommitFailedAfterUpload(GalleryError):
    """Blob write succeeded but appending the entry did not.

    The blob at ``image_ref`` is left in place. Retrying only the append with
    the carried ``image_ref`` and ``caption`` completes the operation without
    uploading again.
    """

    def __init__(
        self,
        image_ref: str,
        caption: Optional[str],
        cause: GalleryError,
    ) -> None:
        super().__init__(
            f"blob stored at {image_ref} but entry append failed: {cause}",
            code="metadata_commit_failed",
            retryable=True,
        )
        self.image_ref = image_ref
        self.caption = caption
        self.cause = cause
