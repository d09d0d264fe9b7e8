"""Structured logging helpers shared by the API, domain and viewer client."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

__all__ = ["JsonLogFormatter", "configure_logging", "get_logger"]

ROOT_LOGGER_NAME = "gallery"

# Attributes present on every LogRecord; anything else arrived via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    """Render records as JSON lines, flattening ``extra`` context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger nested under the project root logger."""

    if name.startswith("backend.app."):
        name = name[len("backend.app.") :]
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a JSON stream handler to the project root logger once."""

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())
    if not any(getattr(handler, "_gallery_json", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonLogFormatter())
        handler._gallery_json = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
