"""Viewer and operator client for the gallery API."""

from .api_client import GalleryApiClient
from .formatting import format_created_at
from .notices import Notice, NoticeBoard, NoticeKind
from .console import OperatorConsole
from .session import ViewerSession, build_operator_console, open_viewer_session
from .sync_cache import Snapshot, SyncCache
from .viewer import CLOSED, ViewerState, ViewerStateMachine

__all__ = [
    "CLOSED",
    "GalleryApiClient",
    "Notice",
    "NoticeBoard",
    "NoticeKind",
    "OperatorConsole",
    "Snapshot",
    "SyncCache",
    "ViewerSession",
    "ViewerState",
    "ViewerStateMachine",
    "build_operator_console",
    "format_created_at",
    "open_viewer_session",
]
