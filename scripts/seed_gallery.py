"""Seed script for the gallery_entries table.

Appends a handful of sample entries through the configured EntryStore so
local viewers and API calls have data to read without an operator upload.
"""

from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from backend.app.config import load_settings
from backend.app.domain.entrystore import Entry, build_entry_store_gateway
from backend.app.infra.logging import configure_logging

SEED_ENTRIES: Tuple[Tuple[str, Optional[str]], ...] = (
    ("https://picsum.photos/id/1015/1200/800", "River valley at dawn"),
    ("https://picsum.photos/id/1025/1200/800", None),
    ("https://picsum.photos/id/1035/1200/800", "Waterfall, late summer"),
    ("https://picsum.photos/id/1043/1200/800", "Old town rooftops"),
)


def seed_entries(count: Optional[int] = None) -> List[Entry]:
    """Append the static seed entries, oldest first."""

    settings = load_settings()
    gateway = build_entry_store_gateway(
        prefer_postgres=settings.entry_store_backend == "sql",
    )
    selected = SEED_ENTRIES if count is None else SEED_ENTRIES[:count]
    return [gateway.append_entry(image_ref, caption) for image_ref, caption in selected]


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of seed entries to append (default: all).",
    )
    args = parser.parse_args()
    configure_logging(load_settings().log_level)
    created = seed_entries(args.count)
    for entry in created:
        print(f"seeded {entry.entry_id} -> {entry.image_ref}")


if __name__ == "__main__":
    main()
