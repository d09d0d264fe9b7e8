"""FastAPI tests for the /entries endpoints."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.app.api.dependencies import get_entry_gateway
from backend.app.api.routers import entries
from backend.app.domain.entrystore.gateway import InMemoryEntryStoreGateway
from backend.app.domain.errors import StorageUnavailable

pytestmark = [pytest.mark.api, pytest.mark.entrystore]


class UnavailableGateway:
    def append_entry(self, image_ref, caption=None):
        raise StorageUnavailable("database down")

    def list_entries(self):
        raise StorageUnavailable("database down")


def _build_client(gateway) -> TestClient:
    app = FastAPI()
    app.include_router(entries.router)
    app.dependency_overrides[get_entry_gateway] = lambda: gateway
    return TestClient(app)


def test_post_then_get_returns_new_entry_first():
    gateway = InMemoryEntryStoreGateway()
    gateway.append_entry("https://x/older.jpg", "older")
    client = _build_client(gateway)

    created = client.post(
        "/entries", json={"imageRef": "https://x/y.jpg", "caption": "hi"}
    )

    assert created.status_code == 200
    body = created.json()
    assert body["id"]
    assert body["imageRef"] == "https://x/y.jpg"
    assert body["caption"] == "hi"
    assert body["createdAt"]

    listed = client.get("/entries")
    assert listed.status_code == 200
    items = listed.json()["entries"]
    assert [item["id"] for item in items][0] == body["id"]
    assert items[1]["caption"] == "older"


def test_get_returns_empty_list_for_empty_store():
    client = _build_client(InMemoryEntryStoreGateway())

    resp = client.get("/entries")

    assert resp.status_code == 200
    assert resp.json() == {"entries": []}


@pytest.mark.parametrize(
    "payload",
    [{}, {"imageRef": ""}, {"imageRef": "   "}, {"caption": "no image"}],
)
def test_post_without_image_ref_is_rejected(payload):
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway)

    resp = client.post("/entries", json=payload)

    assert resp.status_code == 400
    assert resp.json()["detail"]["error_code"] == "GALLERY-INVALID-REQUEST"
    assert gateway.list_entries() == []


def test_post_accepts_legacy_image_url_field_and_blank_caption():
    gateway = InMemoryEntryStoreGateway()
    client = _build_client(gateway)

    resp = client.post(
        "/entries", json={"image_url": "https://x/legacy.jpg", "caption": "  "}
    )

    assert resp.status_code == 200
    assert resp.json()["imageRef"] == "https://x/legacy.jpg"
    assert resp.json()["caption"] is None


def test_storage_failures_surface_as_500():
    client = _build_client(UnavailableGateway())

    listed = client.get("/entries")
    created = client.post("/entries", json={"imageRef": "https://x/y.jpg"})

    assert listed.status_code == 500
    assert created.status_code == 500
    assert listed.json()["detail"]["error_code"] == "GALLERY-STORAGE-UNAVAILABLE"
    assert created.json()["detail"]["message"] == "Failed to create gallery entry"
