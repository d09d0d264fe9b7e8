"""Upload pipeline: optional blob write followed by an entry append."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..entrystore.models import Entry, normalize_caption
from ..errors import (
    InputError,
    MetadataCommitFailedAfterUpload,
    StorageUnavailable,
    UploadError,
    ValidationError,
)
from ...infra.logging import get_logger
from ...infra.metrics import MetricsClient, get_metrics_client
from .blob_sink import BlobSink

__all__ = ["EntryAppender", "UploadRequest", "UploadPipeline"]

logger = get_logger(__name__)


class EntryAppender(Protocol):  # pragma: no cover - structural typing hook
    """Subset of the entry store the pipeline writes through."""

    def append_entry(self, image_ref: Optional[str], caption: Optional[str] = None) -> Entry: ...


@dataclass(frozen=True)
class UploadRequest:
    """One operator submission: file bytes or an already hosted URL."""

    file_bytes: Optional[bytes] = None
    image_url: Optional[str] = None
    caption: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return bool(self.file_bytes)

    @property
    def has_url(self) -> bool:
        return bool(self.image_url and self.image_url.strip())


class UploadPipeline:
    """Combines a BlobSink write with an EntryStore append.

    There is no rollback of the blob write. When the blob is stored but the
    append fails, ``MetadataCommitFailedAfterUpload`` carries the stored URL
    so ``retry_commit`` can finish the job without uploading again. Once the
    blob write has started the call runs to completion.
    """

    def __init__(
        self,
        entry_store: EntryAppender,
        blob_sink: BlobSink,
        *,
        metrics: Optional[MetricsClient] = None,
    ) -> None:
        self._entry_store = entry_store
        self._blob_sink = blob_sink
        self._metrics = metrics or get_metrics_client()

    def submit(self, request: UploadRequest) -> Entry:
        if not request.has_file and not request.has_url:
            logger.warning("upload_rejected_no_source")
            raise InputError("no image source")
        if request.has_file and request.has_url:
            logger.warning("upload_rejected_multiple_sources")
            raise InputError("multiple image sources", code="multiple_image_sources")

        caption = normalize_caption(request.caption)
        self._metrics.increment("upload_attempt_total")

        if not request.has_url:
            image_ref = self._store_blob(request)
            try:
                entry = self._entry_store.append_entry(image_ref, caption)
            except (ValidationError, StorageUnavailable) as exc:
                self._metrics.increment("upload_orphaned_blob_total")
                logger.error(
                    "upload_metadata_commit_failed",
                    extra={"image_ref": image_ref, "error_code": exc.code},
                )
                raise MetadataCommitFailedAfterUpload(image_ref, caption, exc) from exc
            source = "file"
        else:
            image_ref = (request.image_url or "").strip()
            entry = self._entry_store.append_entry(image_ref, caption)
            source = "url"

        self._metrics.increment("upload_success_total")
        logger.info(
            "upload_entry_created",
            extra={"entry_id": entry.entry_id, "source": source},
        )
        return entry

    def retry_commit(self, failure: MetadataCommitFailedAfterUpload) -> Entry:
        """Re-run only the append step for a blob that is already stored."""

        entry = self._entry_store.append_entry(failure.image_ref, failure.caption)
        self._metrics.increment("upload_commit_retry_success_total")
        logger.info(
            "upload_commit_retried",
            extra={"entry_id": entry.entry_id, "image_ref": failure.image_ref},
        )
        return entry

    def _store_blob(self, request: UploadRequest) -> str:
        result = self._blob_sink.store(
            request.file_bytes or b"",
            filename=request.filename,
            content_type=request.content_type,
        )
        if not result.ok:
            reason = result.error or "blob sink returned no url"
            self._metrics.increment("upload_blob_failed_total")
            logger.warning("upload_blob_store_failed", extra={"reason": reason})
            raise UploadError(reason)
        return result.url or ""
