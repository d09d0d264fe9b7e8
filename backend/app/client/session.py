"""Wire the viewer-side components from a settings profile."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..config import Settings, load_settings
from ..domain.uploads import UploadPipeline, build_blob_sink
from .api_client import GalleryApiClient
from .console import OperatorConsole
from .notices import NoticeBoard
from .sync_cache import SyncCache
from .viewer import ViewerStateMachine

__all__ = ["ViewerSession", "build_operator_console", "open_viewer_session"]


@dataclass
class ViewerSession:
    """API client, polling cache and viewer bound together for one viewer."""

    client: GalleryApiClient
    cache: SyncCache
    viewer: ViewerStateMachine

    def close(self) -> None:
        self.viewer.detach()
        self.cache.deactivate()
        self.client.close()

    def __enter__(self) -> "ViewerSession":
        self.cache.activate()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _api_client(
    settings: Settings, session: Optional[requests.Session]
) -> GalleryApiClient:
    return GalleryApiClient(
        settings.sync.api_base_url,
        timeout_seconds=settings.sync.request_timeout_seconds,
        session=session,
    )


def open_viewer_session(
    settings: Optional[Settings] = None,
    *,
    session: Optional[requests.Session] = None,
) -> ViewerSession:
    """Build an inactive session; enter it (or activate the cache) to poll."""

    settings = settings or load_settings()
    client = _api_client(settings, session)
    cache = SyncCache(client, interval_seconds=settings.sync.poll_interval_seconds)
    viewer = ViewerStateMachine.from_config(settings.viewer)
    viewer.attach(cache)
    return ViewerSession(client=client, cache=cache, viewer=viewer)


def build_operator_console(
    settings: Optional[Settings] = None,
    *,
    cache: Optional[SyncCache] = None,
    session: Optional[requests.Session] = None,
) -> OperatorConsole:
    """Console that uploads blobs locally and appends through the API."""

    settings = settings or load_settings()
    pipeline = UploadPipeline(
        _api_client(settings, session),
        build_blob_sink(settings.blob_sink),
    )
    return OperatorConsole(pipeline, NoticeBoard.from_config(settings.notices), cache)
