"""EntryStore gateway implementations."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Protocol
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageUnavailable, ValidationError
from ...infra.logging import get_logger
from .models import Entry, utcnow

__all__ = [
    "EntryStoreGateway",
    "InMemoryEntryStoreGateway",
    "PostgresEntryStoreGateway",
    "GALLERY_ENTRIES_METADATA",
    "build_entry_store_gateway",
    "gallery_entries_table",
]

logger = get_logger(__name__)

GALLERY_ENTRIES_METADATA = MetaData()
# Key for pg_advisory_xact_lock; shared by every process appending entries.
APPEND_LOCK_KEY = 0x6761_6C6C


def gallery_entries_table(metadata: MetaData) -> Table:
    """Describe the ``gallery_entries`` table on ``metadata``."""

    return Table(
        "gallery_entries",
        metadata,
        Column("sequence", Integer, primary_key=True, autoincrement=True),
        Column("entry_id", String(36), nullable=False, unique=True),
        Column("image_ref", Text, nullable=False),
        Column("caption", Text, nullable=True),
        Column("created_at", DateTime(timezone=True), nullable=False),
    )


GALLERY_ENTRIES = gallery_entries_table(GALLERY_ENTRIES_METADATA)


class EntryStoreGateway(Protocol):  # pragma: no cover
    """Append-only store of gallery entries."""

    def append_entry(self, image_ref: Optional[str], caption: Optional[str] = None) -> Entry:
        """Persist a new entry atomically and return it."""

    def list_entries(self) -> List[Entry]:
        """Return every entry, newest first."""


class InMemoryEntryStoreGateway(EntryStoreGateway):
    """Simple in-memory EntryStore used for local development and tests."""

    def __init__(self) -> None:
        self._entries: List[Entry] = []
        self._lock = threading.Lock()
        self._sequence = 0
        self._last_created_at: Optional[datetime] = None

    def append_entry(self, image_ref: Optional[str], caption: Optional[str] = None) -> Entry:
        normalized_ref = _require_image_ref(image_ref)
        with self._lock:
            timestamp = _monotonic_timestamp(self._last_created_at)
            self._sequence += 1
            record = Entry.new(
                image_ref=normalized_ref,
                caption=caption,
                timestamp=timestamp,
                sequence=self._sequence,
            )
            self._entries.append(record)
            self._last_created_at = timestamp
        logger.info(
            "entry_appended",
            extra={"entry_id": record.entry_id, "store": "memory"},
        )
        return record

    def list_entries(self) -> List[Entry]:
        with self._lock:
            records = list(self._entries)
        records.sort(key=lambda entry: entry.sort_key, reverse=True)
        return records


class PostgresEntryStoreGateway(EntryStoreGateway):
    """SQLAlchemy-backed adapter that persists entries to PostgreSQL."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        table: Optional[Table] = None,
    ) -> None:
        if engine is None:
            from ...infra.db import get_engine

            engine = get_engine()
        self._engine = engine
        self._entries = table if table is not None else GALLERY_ENTRIES
        # Serializes the created_at clamp for writers in this process; the
        # advisory lock in lock_appends covers other processes.
        self._append_lock = threading.Lock()

    def append_entry(self, image_ref: Optional[str], caption: Optional[str] = None) -> Entry:
        normalized_ref = _require_image_ref(image_ref)
        table = self._entries
        with self._append_lock:
            try:
                with self._engine.begin() as conn:
                    lock_appends(conn)
                    last = conn.execute(select(func.max(table.c.created_at))).scalar()
                    timestamp = _monotonic_timestamp(_ensure_utc(last))
                    stmt = (
                        insert(table)
                        .values(
                            entry_id=str(uuid4()),
                            image_ref=normalized_ref,
                            caption=caption,
                            created_at=timestamp,
                        )
                        .returning(table)
                    )
                    row = conn.execute(stmt).mappings().first()
            except SQLAlchemyError as exc:
                logger.warning(
                    "entry_append_storage_error",
                    extra={"error": str(exc)},
                )
                raise StorageUnavailable("failed to append entry") from exc
        if row is None:  # pragma: no cover
            raise StorageUnavailable("insert returned no row")
        record = _row_to_entry(row)
        logger.info(
            "entry_appended",
            extra={"entry_id": record.entry_id, "store": "sql"},
        )
        return record

    def list_entries(self) -> List[Entry]:
        table = self._entries
        stmt = select(table).order_by(
            table.c.created_at.desc(),
            table.c.sequence.desc(),
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            logger.warning("entry_list_storage_error", extra={"error": str(exc)})
            raise StorageUnavailable("failed to list entries") from exc
        return [_row_to_entry(row) for row in rows]

    def ping(self) -> None:
        """Raise ``StorageUnavailable`` when the table cannot be queried."""

        try:
            with self._engine.connect() as conn:
                conn.execute(select(func.count()).select_from(self._entries)).scalar()
        except SQLAlchemyError as exc:
            raise StorageUnavailable("entry store unreachable") from exc


def build_entry_store_gateway(
    *,
    prefer_postgres: bool = True,
    fallback_to_memory: bool = False,
) -> EntryStoreGateway:
    """Factory that returns the desired EntryStore gateway implementation."""

    if prefer_postgres:
        try:
            gateway = PostgresEntryStoreGateway()
            if fallback_to_memory:
                gateway.ping()
            return gateway
        except (StorageUnavailable, SQLAlchemyError):
            if not fallback_to_memory:
                raise
            logger.warning(
                "postgres_entry_store_unavailable_falling_back",
                exc_info=True,
            )
    return InMemoryEntryStoreGateway()


def _require_image_ref(image_ref: Optional[str]) -> str:
    if image_ref is None or not isinstance(image_ref, str) or not image_ref.strip():
        logger.warning("entry_append_rejected_empty_image_ref")
        raise ValidationError("imageRef is required")
    return image_ref.strip()


def _monotonic_timestamp(last: Optional[datetime]) -> datetime:
    timestamp = utcnow()
    if last is not None and last > timestamp:
        return last
    return timestamp


def _ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_entry(row: Mapping[str, Any]) -> Entry:
    return Entry(
        entry_id=row["entry_id"],
        image_ref=row["image_ref"],
        caption=row.get("caption"),
        created_at=_ensure_utc(row["created_at"]),
        sequence=int(row["sequence"]),
    )


def lock_appends(conn: Any) -> None:
    """Hold the cross-process append lock until ``conn``'s transaction ends.

    Only PostgreSQL needs it; SQLite already serializes writers on the file.
    """

    if conn.dialect.name == "postgresql":
        conn.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": APPEND_LOCK_KEY},
        )
