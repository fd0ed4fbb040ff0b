"""Key/value slot storage the notes store persists into."""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError

from .db import get_engine, init_db, session_scope
from .models import Slot

NOTES_KEY = "notes_app_v1"
TAGS_KEY = "notes_app_tags_v1"
ACTIVE_KEY = "notes_app_active_v1"


class StorageError(Exception):
    """Raised when a slot cannot be read or written."""


@runtime_checkable
class SlotStore(Protocol):
    def read_slot(self, key: str) -> Optional[str]:
        """Return the stored text for ``key``, or None when absent."""
        ...

    def write_slot(self, key: str, value: str) -> None:
        ...


class MemorySlotStore:
    """Dict-backed slots; nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.slots: dict[str, str] = dict(initial or {})

    def read_slot(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write_slot(self, key: str, value: str) -> None:
        self.slots[key] = value


class SqliteSlotStore:
    """Durable slots, one row per key in a SQLite ``slot`` table."""

    def __init__(self, db_path: Path | None = None):
        self.engine = init_db(get_engine(db_path))

    def read_slot(self, key: str) -> Optional[str]:
        try:
            with session_scope(self.engine) as s:
                row = s.get(Slot, key)
                return None if row is None else row.value
        except SQLAlchemyError as e:
            raise StorageError(f"cannot read slot {key!r}: {e}") from e

    def write_slot(self, key: str, value: str) -> None:
        try:
            with session_scope(self.engine) as s:
                s.merge(Slot(key=key, value=value))
        except SQLAlchemyError as e:
            raise StorageError(f"cannot write slot {key!r}: {e}") from e
