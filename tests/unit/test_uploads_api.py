"""FastAPI tests for the /uploads endpoint."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.app.api.dependencies import get_blob_sink, get_entry_gateway
from backend.app.api.routers import uploads
from backend.app.domain.entrystore.gateway import InMemoryEntryStoreGateway
from backend.app.domain.errors import StorageUnavailable
from backend.app.domain.uploads import BlobStoreResult, LocalDirectoryBlobSink

pytestmark = [pytest.mark.api, pytest.mark.uploads]


class RejectingSink:
    backend_name = "test"

    def store(self, data, *, filename=None, content_type=None):
        return BlobStoreResult.failure("quota exceeded")


class UnavailableGateway:
    def append_entry(self, image_ref, caption=None):
        raise StorageUnavailable("database down")

    def list_entries(self):
        raise StorageUnavailable("database down")


def _build_client(gateway, sink) -> TestClient:
    app = FastAPI()
    app.include_router(uploads.router)
    app.dependency_overrides[get_entry_gateway] = lambda: gateway
    app.dependency_overrides[get_blob_sink] = lambda: sink
    return TestClient(app)


def test_file_upload_stores_blob_and_creates_entry(tmp_path):
    gateway = InMemoryEntryStoreGateway()
    sink = LocalDirectoryBlobSink(root=tmp_path, public_base_url="http://media.test")
    client = _build_client(gateway, sink)

    resp = client.post(
        "/uploads",
        files={"file": ("beach.jpg", b"jpeg-bytes", "image/jpeg")},
        data={"caption": "  Beach day  "},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["imageRef"].startswith("http://media.test/")
    assert body["imageRef"].endswith(".jpg")
    assert body["caption"] == "Beach day"
    stored_name = body["imageRef"].rsplit("/", 1)[-1]
    assert (tmp_path / stored_name).read_bytes() == b"jpeg-bytes"
    assert gateway.list_entries()[0].entry_id == body["id"]


def test_url_upload_skips_blob_sink():
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway, RejectingSink())

    resp = client.post("/uploads", data={"image_url": "https://x/y.jpg"})

    assert resp.status_code == 200
    assert resp.json()["imageRef"] == "https://x/y.jpg"
    assert resp.json()["caption"] is None


def test_missing_source_is_rejected():
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway, RejectingSink())

    resp = client.post("/uploads", data={"caption": "nothing attached"})

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error_code"] == "GALLERY-INPUT-MISSING"
    assert detail["details"]["reason"] == "no_image_source"
    assert gateway.list_entries() == []


def test_blob_failure_returns_502_without_entry():
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway, RejectingSink())

    resp = client.post(
        "/uploads", files={"file": ("a.png", b"png-bytes", "image/png")}
    )

    assert resp.status_code == 502
    assert resp.json()["detail"]["details"]["reason"] == "quota exceeded"
    assert gateway.list_entries() == []


def test_metadata_failure_after_upload_reports_stored_url(tmp_path):
    sink = LocalDirectoryBlobSink(root=tmp_path, public_base_url="http://media.test")
    client = _build_client(UnavailableGateway(), sink)

    resp = client.post(
        "/uploads",
        files={"file": ("a.png", b"png-bytes", "image/png")},
        data={"caption": "kept"},
    )

    assert resp.status_code == 500
    detail = resp.json()["detail"]
    assert detail["error_code"] == "METADATA_COMMIT_FAILED_AFTER_UPLOAD"
    assert detail["details"]["imageRef"].startswith("http://media.test/")
    assert detail["details"]["caption"] == "kept"


def test_url_upload_storage_failure_returns_503():
    client = _build_client(UnavailableGateway(), RejectingSink())

    resp = client.post("/uploads", data={"image_url": "https://x/y.jpg"})

    assert resp.status_code == 503


def test_file_and_url_together_are_rejected_with_own_message():
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway, RejectingSink())

    resp = client.post(
        "/uploads",
        files={"file": ("a.png", b"png-bytes", "image/png")},
        data={"image_url": "https://x/y.jpg"},
    )

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error_code"] == "GALLERY-INPUT-AMBIGUOUS"
    assert detail["details"]["reason"] == "multiple_image_sources"
    assert "not both" in detail["message"]
    assert gateway.list_entries() == []
