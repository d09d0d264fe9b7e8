"""Operator-side upload flow: pipeline, notices and an immediate resync."""

from __future__ import annotations

from typing import Optional

from ..domain.entrystore.models import Entry
from ..domain.errors import (
    GalleryError,
    MetadataCommitFailedAfterUpload,
)
from ..domain.uploads import UploadPipeline, UploadRequest
from ..infra.logging import get_logger
from .notices import NoticeBoard
from .sync_cache import SyncCache

__all__ = ["OperatorConsole"]

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Photo uploaded successfully!"


class OperatorConsole:
    """Submits uploads and reports the outcome as a transient notice."""

    def __init__(
        self,
        pipeline: UploadPipeline,
        notices: NoticeBoard,
        cache: Optional[SyncCache] = None,
    ) -> None:
        self._pipeline = pipeline
        self._notices = notices
        self._cache = cache
        self.pending_commit: Optional[MetadataCommitFailedAfterUpload] = None

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    def submit(self, request: UploadRequest) -> Optional[Entry]:
        try:
            entry = self._pipeline.submit(request)
        except MetadataCommitFailedAfterUpload as exc:
            self.pending_commit = exc
            self._notices.post_failure(exc)
            return None
        except GalleryError as exc:
            logger.warning("operator_upload_failed", extra={"error_code": exc.code})
            self._notices.post_failure(exc)
            return None
        return self._succeeded(entry)

    def retry_pending_commit(self) -> Optional[Entry]:
        """Finish an upload whose blob is stored but whose entry is missing."""

        failure = self.pending_commit
        if failure is None:
            return None
        try:
            entry = self._pipeline.retry_commit(failure)
        except GalleryError as exc:
            logger.warning("operator_commit_retry_failed", extra={"error_code": exc.code})
            self._notices.post_failure(failure)
            return None
        self.pending_commit = None
        return self._succeeded(entry)

    def _succeeded(self, entry: Entry) -> Entry:
        self._notices.post_success(SUCCESS_MESSAGE)
        if self._cache is not None:
            self._cache.refresh()
        return entry
