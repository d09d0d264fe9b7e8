"""Tests for operator notices and the console upload flow."""

from __future__ import annotations

import pytest

from backend.app.client import NoticeBoard, NoticeKind, OperatorConsole, SyncCache
from backend.app.domain.entrystore.gateway import InMemoryEntryStoreGateway
from backend.app.domain.errors import (
    InputError,
    MetadataCommitFailedAfterUpload,
    StorageUnavailable,
    UploadError,
)
from backend.app.domain.uploads import BlobStoreResult, UploadPipeline, UploadRequest

pytestmark = [pytest.mark.client, pytest.mark.uploads]


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class StaticSink:
    backend_name = "static"

    def __init__(self, result: BlobStoreResult) -> None:
        self.result = result

    def store(self, data, *, filename=None, content_type=None):
        return self.result


class FlakyStore:
    def __init__(self, failures: int) -> None:
        self.inner = InMemoryEntryStoreGateway()
        self.failures = failures

    def append_entry(self, image_ref, caption=None):
        if self.failures > 0:
            self.failures -= 1
            raise StorageUnavailable("database down")
        return self.inner.append_entry(image_ref, caption)

    def list_entries(self):
        return self.inner.list_entries()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def notices(clock: FakeClock) -> NoticeBoard:
    return NoticeBoard(success_seconds=3, error_seconds=5, clock=clock)


def test_success_notice_expires_after_three_seconds(notices, clock):
    notices.post_success("done")

    clock.now = 102.5
    assert notices.current().kind is NoticeKind.SUCCESS
    clock.now = 103.0
    assert notices.current() is None


def test_error_notice_lasts_longer_and_replaces_previous(notices, clock):
    notices.post_success("done")
    notices.post_error("broken")

    clock.now += 4
    current = notices.current()
    assert current.message == "broken"
    assert current.kind is NoticeKind.ERROR
    notices.dismiss()
    assert notices.current() is None


@pytest.mark.parametrize(
    "error, message",
    [
        (InputError("no image source"), "Please select a photo or provide an image URL!"),
        (
            InputError("multiple image sources", code="multiple_image_sources"),
            "Please provide either a photo or an image URL, not both.",
        ),
        (UploadError("quota exceeded"), "Upload failed: quota exceeded"),
        (
            MetadataCommitFailedAfterUpload(
                "https://x/a.jpg", None, StorageUnavailable()
            ),
            "Photo stored but not saved to the gallery. Please retry saving.",
        ),
        (StorageUnavailable(), "Failed to upload photo. Please try again."),
    ],
)
def test_failures_map_to_operator_wording(notices, error, message):
    notice = notices.post_failure(error)

    assert notice.message == message
    assert notice.kind is NoticeKind.ERROR


def test_console_success_posts_notice_and_refreshes_cache(notices):
    gateway = InMemoryEntryStoreGateway()
    cache = SyncCache(gateway)
    pipeline = UploadPipeline(gateway, StaticSink(BlobStoreResult.success("https://b/1.jpg")))
    console = OperatorConsole(pipeline, notices, cache)

    entry = console.submit(UploadRequest(file_bytes=b"jpeg", caption="hello"))

    assert entry is not None
    assert notices.current().message == "Photo uploaded successfully!"
    assert [e.entry_id for e in cache.entries] == [entry.entry_id]


def test_console_missing_source_posts_error(notices):
    gateway = InMemoryEntryStoreGateway()
    pipeline = UploadPipeline(gateway, StaticSink(BlobStoreResult.success("https://b/1.jpg")))
    console = OperatorConsole(pipeline, notices)

    assert console.submit(UploadRequest(caption="just words")) is None
    assert notices.current().message == "Please select a photo or provide an image URL!"
    assert gateway.list_entries() == []


def test_console_blob_failure_posts_reason(notices):
    gateway = InMemoryEntryStoreGateway()
    pipeline = UploadPipeline(gateway, StaticSink(BlobStoreResult.failure("quota exceeded")))
    console = OperatorConsole(pipeline, notices)

    assert console.submit(UploadRequest(file_bytes=b"jpeg")) is None
    assert notices.current().message == "Upload failed: quota exceeded"
    assert gateway.list_entries() == []


def test_console_retries_pending_commit_without_reupload(notices):
    store = FlakyStore(failures=1)
    cache = SyncCache(store)
    pipeline = UploadPipeline(store, StaticSink(BlobStoreResult.success("https://b/2.jpg")))
    console = OperatorConsole(pipeline, notices, cache)

    assert console.submit(UploadRequest(file_bytes=b"jpeg", caption="later")) is None
    assert console.pending_commit is not None
    assert console.pending_commit.image_ref == "https://b/2.jpg"

    entry = console.retry_pending_commit()

    assert entry.image_ref == "https://b/2.jpg"
    assert entry.caption == "later"
    assert console.pending_commit is None
    assert notices.current().kind is NoticeKind.SUCCESS
    assert len(cache.entries) == 1
    assert console.retry_pending_commit() is None
