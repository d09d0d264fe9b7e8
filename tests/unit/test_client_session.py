"""Tests for building viewer and operator clients from settings."""

from __future__ import annotations

import time

import pytest

from backend.app.client import build_operator_console, open_viewer_session
from backend.app.config import (
    BlobSinkConfig,
    NoticeConfig,
    Settings,
    SyncConfig,
    ViewerConfig,
)
from backend.app.domain.uploads import UploadRequest

pytestmark = [pytest.mark.client, pytest.mark.config]

ENTRY = {
    "id": "a",
    "imageRef": "http://media.test/a.jpg",
    "caption": "hello",
    "createdAt": "2026-10-17T12:00:00Z",
}


class FakeResponse:
    def __init__(self, payload) -> None:
        self.status_code = 200
        self._payload = payload

    def json(self):
        return self._payload


class RoutingSession:
    """Answers GET with the stored list and POST by storing the entry."""

    def __init__(self) -> None:
        self.entries: list[dict] = []
        self.calls: list[tuple[str, str, float]] = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs["timeout"]))
        if method == "POST":
            self.entries.insert(0, dict(ENTRY))
            return FakeResponse(dict(ENTRY))
        return FakeResponse({"entries": list(self.entries)})

    def close(self):
        pass


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        sync=SyncConfig(
            api_base_url="http://api.test",
            poll_interval_seconds=7.0,
            request_timeout_seconds=2.5,
        ),
        viewer=ViewerConfig(min_swipe_distance=120),
        notices=NoticeConfig(success_seconds=1.0, error_seconds=2.0),
        blob_sink=BlobSinkConfig(
            root_path=str(tmp_path), public_base_url="http://media.test"
        ),
    )


def test_viewer_session_uses_configured_threshold_and_interval(settings):
    http = RoutingSession()
    http.entries = [dict(ENTRY, id=str(n)) for n in range(3)]
    gallery = open_viewer_session(settings, session=http)

    gallery.cache.refresh()
    gallery.viewer.select(1)

    assert gallery.cache.interval_seconds == 7.0
    assert gallery.viewer.length == 3
    assert gallery.viewer.min_swipe_distance == 120
    # 80px is a swipe under the default threshold but not under 120px
    assert gallery.viewer.swipe(0, 80).index == 1
    assert gallery.viewer.swipe(0, 130).index == 2
    assert http.calls[0] == ("GET", "http://api.test/entries", 2.5)
    gallery.close()


def test_operator_console_uses_configured_notice_lifetimes(settings, tmp_path):
    http = RoutingSession()
    gallery = open_viewer_session(settings, session=http)
    console = build_operator_console(settings, cache=gallery.cache, session=http)

    before = time.monotonic()
    entry = console.submit(
        UploadRequest(file_bytes=b"jpeg", filename="a.jpg", caption="hello")
    )
    notice = console.notices.current()

    assert entry is not None
    assert notice.message == "Photo uploaded successfully!"
    assert before + 0.5 < notice.expires_at <= time.monotonic() + 1.0
    assert [e.entry_id for e in gallery.cache.entries] == ["a"]
    assert len(list(tmp_path.iterdir())) == 1
    error = console.notices.post_error("broken")
    assert error.expires_at - notice.expires_at > 0.5
