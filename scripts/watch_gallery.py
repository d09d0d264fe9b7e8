"""Follow a running gallery API and print each snapshot change.

Useful for checking that polling picks up operator uploads: run it, upload a
photo, and the new entry appears at the top within one poll interval. The
viewer cursor starts on the newest entry and follows refreshes.
"""

from __future__ import annotations

import argparse
import dataclasses
import time

from backend.app.client import Snapshot, format_created_at, open_viewer_session
from backend.app.config import load_settings
from backend.app.infra.logging import configure_logging


def _print_snapshot(snapshot: Snapshot) -> None:
    print(f"-- snapshot v{snapshot.version}: {len(snapshot)} entries")
    for position, entry in enumerate(snapshot):
        caption = entry.caption if entry.caption is not None else "(no caption)"
        print(f"{position:>3}  {format_created_at(entry.created_at)}  {caption}")


def main() -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-url", default=settings.sync.api_base_url)
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.sync.poll_interval_seconds,
        help="Seconds between polls.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Stop after this many seconds (0 runs until interrupted).",
    )
    args = parser.parse_args()
    configure_logging(settings.log_level)

    sync = dataclasses.replace(
        settings.sync,
        api_base_url=args.base_url.rstrip("/"),
        poll_interval_seconds=args.interval,
    )
    gallery = open_viewer_session(dataclasses.replace(settings, sync=sync))

    def _on_snapshot(snapshot: Snapshot) -> None:
        _print_snapshot(snapshot)
        if len(snapshot) and not gallery.viewer.is_open:
            gallery.viewer.select(0)
        current = gallery.viewer.current_entry()
        if current is not None:
            print(f"viewer at {gallery.viewer.index}: {current.image_ref}")

    gallery.cache.subscribe(_on_snapshot)
    started = time.monotonic()
    try:
        with gallery:
            while not args.duration or time.monotonic() - started < args.duration:
                time.sleep(0.2)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
