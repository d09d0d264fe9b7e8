"""Wire models and error helpers shared by the gallery routers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..domain.entrystore.models import Entry

__all__ = [
    "EntryCreateRequest",
    "EntryListResponse",
    "EntryResponse",
    "http_error",
    "serialize_entry",
]


class EntryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    image_ref: str = Field(alias="imageRef")
    caption: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")


class EntryListResponse(BaseModel):
    entries: List[EntryResponse] = Field(default_factory=list)


class EntryCreateRequest(BaseModel):
    image_ref: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("imageRef", "image_ref", "image_url"),
        description="URL of already hosted image content.",
    )
    caption: Optional[str] = Field(default=None, description="Optional caption.")


def serialize_entry(entry: Entry) -> EntryResponse:
    return EntryResponse(
        id=entry.entry_id,
        image_ref=entry.image_ref,
        caption=entry.caption,
        created_at=entry.created_at,
    )


def http_error(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )
