"""Full-screen viewer navigation over the entries known to a SyncCache."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import ViewerConfig
from ..domain.entrystore.models import Entry
from ..infra.logging import get_logger
from .sync_cache import Snapshot, SyncCache

__all__ = [
    "CLOSED",
    "KEY_CLOSE",
    "KEY_NEXT",
    "KEY_PREVIOUS",
    "ViewerState",
    "ViewerStateMachine",
]

logger = get_logger(__name__)

DEFAULT_MIN_SWIPE_DISTANCE = 50.0
KEY_PREVIOUS = "ArrowLeft"
KEY_NEXT = "ArrowRight"
KEY_CLOSE = "Escape"


@dataclass(frozen=True)
class ViewerState:
    """``index is None`` means Closed; otherwise Open(index)."""

    index: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.index is not None


CLOSED = ViewerState()


class ViewerStateMachine:
    """Cursor over the current sequence, driven by discrete input events.

    While open the cursor always indexes an element of the sequence. When a
    refreshed sequence shrinks underneath the cursor it is clamped to the new
    last index; an empty sequence closes the viewer. Navigation inputs at
    either end are no-ops, as is every input except ``select`` while closed.
    """

    def __init__(
        self,
        length: int = 0,
        *,
        min_swipe_distance: float = DEFAULT_MIN_SWIPE_DISTANCE,
    ) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        self._lock = threading.RLock()
        self._length = length
        self._state = CLOSED
        self._min_swipe_distance = float(min_swipe_distance)
        self._swipe_start: Optional[float] = None
        self._swipe_end: Optional[float] = None
        self._cache: Optional[SyncCache] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @classmethod
    def from_config(cls, config: ViewerConfig, length: int = 0) -> "ViewerStateMachine":
        return cls(length, min_swipe_distance=config.min_swipe_distance)

    @property
    def state(self) -> ViewerState:
        with self._lock:
            return self._state

    @property
    def index(self) -> Optional[int]:
        return self.state.index

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def length(self) -> int:
        with self._lock:
            return self._length

    @property
    def min_swipe_distance(self) -> float:
        return self._min_swipe_distance

    def select(self, index: int) -> ViewerState:
        with self._lock:
            if not 0 <= index < self._length:
                raise ValueError(
                    f"index {index} outside sequence of length {self._length}"
                )
            self._state = ViewerState(index)
            return self._state

    def previous(self) -> ViewerState:
        with self._lock:
            if self._state.index is not None and self._state.index > 0:
                self._state = ViewerState(self._state.index - 1)
            return self._state

    def next(self) -> ViewerState:
        with self._lock:
            index = self._state.index
            if index is not None and index < self._length - 1:
                self._state = ViewerState(index + 1)
            return self._state

    def close(self) -> ViewerState:
        with self._lock:
            self._state = CLOSED
            self._swipe_start = None
            self._swipe_end = None
            return self._state

    def dismiss_backdrop(self) -> ViewerState:
        return self.close()

    def handle_key(self, key: str) -> ViewerState:
        if key == KEY_CLOSE:
            return self.close()
        if key == KEY_PREVIOUS:
            return self.previous()
        if key == KEY_NEXT:
            return self.next()
        return self.state

    def begin_swipe(self, x: float) -> None:
        with self._lock:
            self._swipe_start = float(x)
            self._swipe_end = None

    def track_swipe(self, x: float) -> None:
        with self._lock:
            if self._swipe_start is not None:
                self._swipe_end = float(x)

    def end_swipe(self) -> ViewerState:
        with self._lock:
            start, end = self._swipe_start, self._swipe_end
            self._swipe_start = None
            self._swipe_end = None
        if start is None or end is None:
            return self.state
        return self.swipe(start, end)

    def swipe(self, start_x: float, end_x: float) -> ViewerState:
        """Classify a horizontal gesture; short displacements are taps."""

        displacement = float(end_x) - float(start_x)
        if abs(displacement) <= self._min_swipe_distance:
            return self.state
        if displacement > 0:
            return self.next()
        return self.previous()

    def set_length(self, length: int) -> ViewerState:
        if length < 0:
            raise ValueError("length must not be negative")
        with self._lock:
            self._length = length
            index = self._state.index
            if index is None or index < length:
                return self._state
            if length == 0:
                logger.info("viewer_closed_sequence_empty")
                self._state = CLOSED
            else:
                logger.info(
                    "viewer_cursor_clamped",
                    extra={"previous_index": index, "index": length - 1},
                )
                self._state = ViewerState(length - 1)
            return self._state

    def attach(self, cache: SyncCache) -> None:
        """Follow ``cache`` so every new snapshot re-applies the bounds."""

        self.detach()
        with self._lock:
            self._cache = cache
            self._unsubscribe = cache.subscribe(self._on_snapshot)
        self.set_length(len(cache.snapshot))

    def detach(self) -> None:
        with self._lock:
            unsubscribe = self._unsubscribe
            self._unsubscribe = None
            self._cache = None
        if unsubscribe is not None:
            unsubscribe()

    def current_entry(self) -> Optional[Entry]:
        with self._lock:
            cache = self._cache
        if cache is None:
            return None
        snapshot = cache.snapshot
        with self._lock:
            state = self.set_length(len(snapshot))
            if state.index is None:
                return None
            return snapshot[state.index]

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self.set_length(len(snapshot))
