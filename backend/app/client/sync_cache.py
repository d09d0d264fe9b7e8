"""Client-side mirror of the entry store, refreshed by polling."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Protocol, Sequence, Tuple

from ..domain.entrystore.models import Entry, utcnow
from ..domain.errors import GalleryError
from ..infra.logging import get_logger

__all__ = ["EntryLister", "Snapshot", "SnapshotListener", "SyncCache"]

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 3.0


class EntryLister(Protocol):  # pragma: no cover - structural typing hook
    def list_entries(self) -> Sequence[Entry]: ...


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of the entry sequence from one successful poll."""

    entries: Tuple[Entry, ...] = ()
    version: int = 0
    fetched_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Entry:
        return self.entries[index]

    @property
    def content_key(self) -> Tuple[Tuple[str, str, Optional[str], datetime], ...]:
        return tuple(
            (entry.entry_id, entry.image_ref, entry.caption, entry.created_at)
            for entry in self.entries
        )


SnapshotListener = Callable[[Snapshot], None]


class SyncCache:
    """Polls an entry source on a fixed interval and republishes snapshots.

    ``activate`` polls immediately and then every ``interval_seconds`` on a
    single worker thread until ``deactivate``. A successful poll replaces the
    snapshot wholesale. A failed poll keeps the previous snapshot and is only
    logged. ``loading`` stays true until the first successful poll.
    """

    def __init__(
        self,
        source: EntryLister,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        name: str = "gallery-sync",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._interval = interval_seconds
        self._name = name
        self._snapshot = Snapshot()
        self._loading = True
        self._consecutive_failures = 0
        self._listeners: List[SnapshotListener] = []
        self._state_lock = threading.Lock()
        self._poll_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Snapshot:
        with self._state_lock:
            return self._snapshot

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self.snapshot.entries

    @property
    def loading(self) -> bool:
        with self._state_lock:
            return self._loading

    @property
    def consecutive_failures(self) -> int:
        with self._state_lock:
            return self._consecutive_failures

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` whenever a poll yields different entries."""

        with self._state_lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._state_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def activate(self) -> None:
        thread = self._thread
        if thread is not None:
            if thread.is_alive():
                if self._stop_event.is_set():
                    logger.warning(
                        "sync_cache_previous_worker_still_running",
                        extra={"cache": self._name},
                    )
                return
            self._thread = None
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.info(
            "sync_cache_activated",
            extra={"interval_seconds": self._interval, "cache": self._name},
        )

    def deactivate(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        self._wake_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning(
                    "sync_cache_worker_stop_timed_out",
                    extra={"cache": self._name, "timeout": timeout},
                )
                return
        self._thread = None
        logger.info("sync_cache_deactivated", extra={"cache": self._name})

    def refresh(self) -> None:
        """Poll now: wakes the worker when active, else polls inline."""

        if self.active:
            self._wake_event.set()
            return
        self.poll_once()

    def poll_once(self) -> bool:
        """Run one poll. Returns False when skipped or failed."""

        if not self._poll_lock.acquire(blocking=False):
            logger.debug("sync_poll_skipped_in_flight", extra={"cache": self._name})
            return False
        try:
            try:
                entries = tuple(self._source.list_entries())
            except GalleryError as exc:
                with self._state_lock:
                    self._consecutive_failures += 1
                    failures = self._consecutive_failures
                logger.warning(
                    "sync_poll_failed_keeping_snapshot",
                    extra={
                        "cache": self._name,
                        "error_code": exc.code,
                        "consecutive_failures": failures,
                    },
                )
                return False

            with self._state_lock:
                previous = self._snapshot
                was_loading = self._loading
                current = Snapshot(
                    entries=entries,
                    version=previous.version + 1,
                    fetched_at=utcnow(),
                )
                self._snapshot = current
                self._loading = False
                self._consecutive_failures = 0
                listeners = list(self._listeners)
            changed = was_loading or current.content_key != previous.content_key
        finally:
            self._poll_lock.release()

        if changed:
            logger.debug(
                "sync_snapshot_changed",
                extra={"cache": self._name, "entries": len(current), "version": current.version},
            )
            for listener in listeners:
                try:
                    listener(current)
                except Exception:
                    logger.exception("sync_listener_failed", extra={"cache": self._name})
        return True

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception("sync_poll_unexpected_error", extra={"cache": self._name})
            self._wake_event.wait(self._interval)
            self._wake_event.clear()

    def __enter__(self) -> "SyncCache":
        self.activate()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.deactivate()
