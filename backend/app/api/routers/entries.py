"""Gallery entry endpoints: full-list read and append."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_entry_gateway
from ...api.schemas import (
    EntryCreateRequest,
    EntryListResponse,
    EntryResponse,
    http_error,
    serialize_entry,
)
from ...domain.entrystore.gateway import EntryStoreGateway
from ...domain.entrystore.models import normalize_caption
from ...domain.errors import StorageUnavailable, ValidationError
from ...infra.logging import get_logger
from ...infra.metrics import get_metrics_client

router = APIRouter(prefix="/entries", tags=["entries"])
logger = get_logger(__name__)
metrics = get_metrics_client()


@router.get(
    "",
    response_model=EntryListResponse,
    summary="List every gallery entry, newest first",
)
def list_entries(
    entry_gateway: EntryStoreGateway = Depends(get_entry_gateway),
) -> EntryListResponse:
    metrics.increment("entries_list_http_total")
    try:
        entries = entry_gateway.list_entries()
    except StorageUnavailable as exc:
        metrics.increment("entries_list_storage_error_total")
        logger.error("entries_list_failed", extra={"error": str(exc)})
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "GALLERY-STORAGE-UNAVAILABLE",
            "Failed to fetch gallery entries",
        ) from exc
    return EntryListResponse(entries=[serialize_entry(entry) for entry in entries])


@router.post(
    "",
    response_model=EntryResponse,
    status_code=status.HTTP_200_OK,
    summary="Append a gallery entry for an already hosted image",
)
def create_entry(
    payload: EntryCreateRequest,
    entry_gateway: EntryStoreGateway = Depends(get_entry_gateway),
) -> EntryResponse:
    metrics.increment("entries_create_http_total")
    try:
        entry = entry_gateway.append_entry(
            payload.image_ref,
            normalize_caption(payload.caption),
        )
    except ValidationError as exc:
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "GALLERY-INVALID-REQUEST",
            "Image URL is required",
            {"field": "imageRef"},
        ) from exc
    except StorageUnavailable as exc:
        metrics.increment("entries_create_storage_error_total")
        logger.error("entries_create_failed", extra={"error": str(exc)})
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "GALLERY-STORAGE-UNAVAILABLE",
            "Failed to create gallery entry",
        ) from exc
    logger.info("entries_api_entry_created", extra={"entry_id": entry.entry_id})
    return serialize_entry(entry)
