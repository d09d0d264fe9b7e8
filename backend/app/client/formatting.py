"""Display helpers for entry metadata."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional


def format_created_at(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Render ``value`` as e.g. ``Oct 7, 2026, 09:05 AM``."""

    local = value.astimezone(tz) if tz is not None else value
    return f"{local:%b} {local.day}, {local.year}, {local:%I:%M %p}"
