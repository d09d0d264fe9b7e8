"""EntryStore data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

__all__ = [
    "Entry",
    "normalize_caption",
    "utcnow",
]


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def normalize_caption(caption: Optional[str]) -> Optional[str]:
    """Trim a caption; blank captions collapse to ``None``."""

    if caption is None:
        return None
    trimmed = caption.strip()
    return trimmed or None


@dataclass(frozen=True)
class Entry:
    """One stored gallery record. Entries are never mutated after creation."""

    entry_id: str
    image_ref: str
    caption: Optional[str]
    created_at: datetime
    sequence: int = 0

    @classmethod
    def new(
        cls,
        *,
        image_ref: str,
        caption: Optional[str] = None,
        timestamp: Optional[datetime] = None,
        sequence: int = 0,
        entry_id: Optional[str] = None,
    ) -> "Entry":
        return cls(
            entry_id=entry_id or str(uuid4()),
            image_ref=image_ref,
            caption=caption,
            created_at=timestamp or utcnow(),
            sequence=sequence,
        )

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """Key that orders entries oldest first; reverse it for the gallery."""

        return (self.created_at, self.sequence)

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation shared by the API and the viewer client."""

        return {
            "id": self.entry_id,
            "imageRef": self.image_ref,
            "caption": self.caption,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], *, sequence: int = 0) -> "Entry":
        created_at = payload.get("createdAt") or payload.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        if not isinstance(created_at, datetime):
            raise ValueError("entry payload is missing createdAt")
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        image_ref = payload.get("imageRef") or payload.get("image_url")
        if not image_ref:
            raise ValueError("entry payload is missing imageRef")
        return cls(
            entry_id=str(payload["id"]),
            image_ref=str(image_ref),
            caption=payload.get("caption"),
            created_at=created_at,
            sequence=sequence,
        )
