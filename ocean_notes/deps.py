"""
Wiring for the one store a running application uses.

Entry points call :func:`get_store`; tests build a ``NotesStore`` directly or
call :func:`reset_store` after changing the environment.
"""

from __future__ import annotations
from threading import Lock
from typing import Annotated, Optional

from fastapi import Depends

from .config import Settings, load_settings
from .logging import get_logger
from .storage import MemorySlotStore, SlotStore, SqliteSlotStore
from .store import NotesStore

logger = get_logger("deps")

_STORE: Optional[NotesStore] = None
_STORE_LOCK = Lock()


def build_slot_store(settings: Settings) -> SlotStore:
    if settings.storage == "memory":
        return MemorySlotStore()
    return SqliteSlotStore(settings.db_path)


def open_store(settings: Optional[Settings] = None) -> NotesStore:
    settings = settings or load_settings()
    store = NotesStore(build_slot_store(settings))
    store.load()
    logger.debug("opened %s store with %d notes", settings.storage, len(store.notes))
    return store


def get_store() -> NotesStore:
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = open_store()
        return _STORE


def reset_store() -> None:
    """For tests: forget the store so the next access re-reads settings."""
    global _STORE
    with _STORE_LOCK:
        _STORE = None


StoreDep = Annotated[NotesStore, Depends(get_store)]
