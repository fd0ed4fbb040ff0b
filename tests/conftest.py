import pytest

from ocean_notes.clock import LogicalClock
from ocean_notes.db import reset_engine
from ocean_notes.deps import reset_store
from ocean_notes.storage import MemorySlotStore
from ocean_notes.store import NotesStore


@pytest.fixture
def store():
    # frozen wall clock: every timestamp is previous + 1
    return NotesStore(MemorySlotStore(), LogicalClock(lambda: 1_000))


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    path = tmp_path / "notes.db"
    monkeypatch.setenv("OCEAN_NOTES_DB_PATH", str(path))
    reset_engine()
    reset_store()
    yield path
    reset_store()
    reset_engine()
