"""Tests for the health endpoint."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.app.api.dependencies import get_settings
from backend.app.api.routers import health
from backend.app.config import Settings

pytestmark = [pytest.mark.api]


def test_healthz_reports_backends():
    app = FastAPI()
    app.include_router(health.router)
    app.dependency_overrides[get_settings] = lambda: Settings(
        environment="test", entry_store_backend="memory"
    )
    client = TestClient(app)

    resp = client.get("/healthz")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["environment"] == "test"
    assert body["entryStore"] == "memory"
    assert body["blobSink"] == "local"
    assert body["pollIntervalSeconds"] == 3.0
    assert isinstance(body["counters"], dict)
