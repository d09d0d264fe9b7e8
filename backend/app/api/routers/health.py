"""System health endpoint for frontend polling."""

from typing import Any

from fastapi import APIRouter, Depends

from ...api.dependencies import get_settings
from ...config import Settings
from ...infra.metrics import get_metrics_client

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthcheck(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    return {
        "status": "ok",
        "environment": settings.environment,
        "entryStore": settings.entry_store_backend,
        "blobSink": settings.blob_sink.backend,
        "pollIntervalSeconds": settings.sync.poll_interval_seconds,
        "counters": get_metrics_client().snapshot(),
    }
