"""HTTP boundary between viewer clients and the gallery API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..domain.entrystore.models import Entry
from ..domain.errors import StorageUnavailable, ValidationError
from ..infra.logging import get_logger

__all__ = ["GalleryApiClient"]

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class GalleryApiClient:
    """Reads and appends entries through ``/entries``.

    Every request carries a timeout. Timeouts, connection failures, 5xx
    answers and malformed bodies surface as ``StorageUnavailable``; a 400
    answer surfaces as ``ValidationError``. The client also satisfies the
    append side of the entry store, so an upload pipeline can run against a
    remote API.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    @property
    def entries_url(self) -> str:
        return f"{self.base_url}/entries"

    def list_entries(self) -> List[Entry]:
        payload = self._request("GET", self.entries_url)
        raw_entries = payload.get("entries")
        if raw_entries is None:
            raw_entries = []
        if not isinstance(raw_entries, list):
            raise StorageUnavailable("entries payload is not a list")
        if not all(isinstance(item, dict) for item in raw_entries):
            raise StorageUnavailable("entries payload holds a non-object item")
        try:
            # The server already orders newest first; keep that order.
            return [
                Entry.from_payload(item, sequence=len(raw_entries) - position)
                for position, item in enumerate(raw_entries)
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageUnavailable(f"malformed entry payload: {exc}") from exc

    def append_entry(self, image_ref: Optional[str], caption: Optional[str] = None) -> Entry:
        body: Dict[str, Any] = {"imageRef": image_ref, "caption": caption}
        payload = self._request("POST", self.entries_url, json=body)
        try:
            return Entry.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageUnavailable(f"malformed entry payload: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._session.request(
                method, url, timeout=self.timeout_seconds, **kwargs
            )
        except requests.Timeout as exc:
            logger.warning("gallery_api_timeout", extra={"method": method, "url": url})
            raise StorageUnavailable("gallery API request timed out") from exc
        except requests.RequestException as exc:
            logger.warning(
                "gallery_api_unreachable",
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise StorageUnavailable(f"gallery API unreachable: {exc}") from exc

        if response.status_code == 400:
            raise ValidationError(_error_message(response) or "request rejected")
        if response.status_code >= 400:
            raise StorageUnavailable(
                _error_message(response) or f"gallery API answered {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise StorageUnavailable("gallery API returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise StorageUnavailable("gallery API returned an unexpected body")
        return payload


def _error_message(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail")
    if isinstance(detail, dict):
        return detail.get("message")
    if isinstance(detail, str):
        return detail
    error = payload.get("error")
    return str(error) if error else None
