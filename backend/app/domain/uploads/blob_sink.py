"""BlobSink boundary and the adapters the gallery ships with.

The blob store is an external service. ``store`` never raises for ordinary
failures; it reports them through ``BlobStoreResult.error`` so the upload
pipeline can abort before any metadata is written.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import requests

from ...config import BlobSinkConfig
from ...infra.logging import get_logger

__all__ = [
    "BlobSink",
    "BlobStoreResult",
    "HttpBlobSink",
    "LocalDirectoryBlobSink",
    "build_blob_sink",
]

logger = get_logger(__name__)

DEFAULT_BLOB_SUFFIX = ".bin"
CONTENT_TYPE_SUFFIXES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
}


@dataclass(frozen=True)
class BlobStoreResult:
    """Outcome of a blob write: exactly one of ``url`` / ``error`` is set."""

    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.url) and self.error is None

    @classmethod
    def success(cls, url: str) -> "BlobStoreResult":
        return cls(url=url)

    @classmethod
    def failure(cls, reason: str) -> "BlobStoreResult":
        return cls(error=reason)


class BlobSink(Protocol):  # pragma: no cover - structural typing hook
    """Accepts raw bytes and returns a stable retrievable URL."""

    backend_name: str

    def store(
        self,
        data: bytes,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobStoreResult: ...


def blob_name_for(
    data: bytes,
    *,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> str:
    """Content-addressed object name: sha256 of the bytes plus a suffix."""

    digest = hashlib.sha256(data).hexdigest()
    suffix = Path(filename).suffix.lower() if filename else ""
    if not suffix and content_type:
        suffix = CONTENT_TYPE_SUFFIXES.get(content_type.lower(), "")
    return f"{digest}{suffix or DEFAULT_BLOB_SUFFIX}"


@dataclass
class LocalDirectoryBlobSink:
    """Writes blobs under ``root`` and serves them from ``public_base_url``."""

    root: Path
    public_base_url: str
    backend_name: str = "local"

    def store(
        self,
        data: bytes,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobStoreResult:
        if not data:
            return BlobStoreResult.failure("empty payload")
        name = blob_name_for(data, filename=filename, content_type=content_type)
        target = Path(self.root).expanduser() / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if not target.exists():
                tmp_path = target.with_suffix(target.suffix + ".part")
                tmp_path.write_bytes(data)
                tmp_path.replace(target)
        except OSError as exc:
            logger.warning(
                "blob_sink_local_write_failed",
                extra={"path": str(target), "error": str(exc)},
            )
            return BlobStoreResult.failure(f"could not write blob: {exc}")
        url = f"{self.public_base_url.rstrip('/')}/{name}"
        logger.info(
            "blob_sink_local_stored",
            extra={"url": url, "size_bytes": len(data)},
        )
        return BlobStoreResult.success(url)


@dataclass
class HttpBlobSink:
    """Posts blobs to a remote upload endpoint that answers ``{"url": ...}``."""

    endpoint: str
    timeout_seconds: float = 30.0
    session: Optional[requests.Session] = None
    backend_name: str = "http"

    def store(
        self,
        data: bytes,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobStoreResult:
        if not data:
            return BlobStoreResult.failure("empty payload")
        http = self.session or requests
        files = {
            "file": (
                filename or blob_name_for(data, content_type=content_type),
                data,
                content_type or "application/octet-stream",
            )
        }
        try:
            response = http.post(self.endpoint, files=files, timeout=self.timeout_seconds)
        except requests.Timeout:
            logger.warning("blob_sink_http_timeout", extra={"endpoint": self.endpoint})
            return BlobStoreResult.failure("upload timed out")
        except requests.RequestException as exc:
            logger.warning(
                "blob_sink_http_error",
                extra={"endpoint": self.endpoint, "error": str(exc)},
            )
            return BlobStoreResult.failure(f"upload request failed: {exc}")

        payload = _json_or_none(response)
        if response.status_code >= 400:
            reason = (payload or {}).get("error") or f"HTTP {response.status_code}"
            logger.warning(
                "blob_sink_http_rejected",
                extra={"endpoint": self.endpoint, "status_code": response.status_code},
            )
            return BlobStoreResult.failure(str(reason))
        if not payload:
            return BlobStoreResult.failure("upload service returned no JSON body")
        if payload.get("error"):
            return BlobStoreResult.failure(str(payload["error"]))
        url = payload.get("url")
        if not isinstance(url, str) or not url.strip():
            return BlobStoreResult.failure("upload service returned no url")
        logger.info("blob_sink_http_stored", extra={"url": url, "size_bytes": len(data)})
        return BlobStoreResult.success(url.strip())


def build_blob_sink(config: BlobSinkConfig) -> BlobSink:
    """Return the adapter selected by ``blob_sink.backend``."""

    if config.backend == "http":
        if not config.endpoint:
            raise RuntimeError("blob_sink.endpoint is required for the http backend")
        return HttpBlobSink(endpoint=config.endpoint, timeout_seconds=config.timeout_seconds)
    return LocalDirectoryBlobSink(
        root=Path(config.root_path),
        public_base_url=config.public_base_url,
    )


def _json_or_none(response: requests.Response) -> Optional[dict]:
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None
