"""Tests for entry display formatting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backend.app.client import format_created_at

pytestmark = [pytest.mark.client]


def test_formats_morning_timestamp_without_day_padding():
    value = datetime(2026, 10, 7, 9, 5, tzinfo=timezone.utc)

    assert format_created_at(value) == "Oct 7, 2026, 09:05 AM"


def test_converts_to_requested_timezone():
    value = datetime(2026, 1, 1, 3, 30, tzinfo=timezone.utc)
    eastern = timezone(timedelta(hours=-5))

    assert format_created_at(value, eastern) == "Dec 31, 2025, 10:30 PM"
