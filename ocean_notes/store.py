from __future__ import annotations
from threading import RLock
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from .clock import LogicalClock
from .logging import get_logger
from .models import DEFAULT_COLOR, Note, NotePatch, new_note_id
from .query import NoteFilter, filter_notes
from .storage import (
    ACTIVE_KEY,
    NOTES_KEY,
    TAGS_KEY,
    SlotStore,
    StorageError,
)

logger = get_logger("store")

DEFAULT_TAGS = ("work", "personal", "ideas")

SEED_TITLE = "Welcome to Ocean Notes"
SEED_CONTENT = (
    "Create, edit, and organize your thoughts with a splash of color! \U0001F389\n\n"
    "Use the sidebar to filter by tags or sections, and try pinning important notes."
)
SEED_TAG = "ideas"
SEED_COLOR = "#FCE7F3"

_NOTES = TypeAdapter(list[Note])
_TAGS = TypeAdapter(list[str])
_ACTIVE = TypeAdapter(Optional[str])


class NotesStore:
    """
    In-memory notes, tag registry and active pointer, written through to a
    ``SlotStore`` after every successful mutation.

    Operations on an unknown note id change nothing and return False. Every
    public method runs under one reentrant lock, so the store can be shared by
    the HTTP worker threads.
    """

    def __init__(self, slots: SlotStore, clock: Optional[LogicalClock] = None):
        self.slots = slots
        self.clock = clock or LogicalClock()
        self._notes: list[Note] = []
        self._tags: list[str] = list(DEFAULT_TAGS)
        self._active: Optional[str] = None
        self.last_persist_error: Optional[StorageError] = None
        self._lock = RLock()

    # ---------- read access ----------
    @property
    def notes(self) -> list[Note]:
        with self._lock:
            return list(self._notes)

    @property
    def tags(self) -> list[str]:
        with self._lock:
            return list(self._tags)

    @property
    def active_note_id(self) -> Optional[str]:
        with self._lock:
            return self._active

    @property
    def active_note(self) -> Optional[Note]:
        with self._lock:
            return None if self._active is None else self.get_note(self._active)

    def get_note(self, note_id: str) -> Optional[Note]:
        with self._lock:
            idx = self._index(note_id)
            return None if idx is None else self._notes[idx]

    def get_filtered_notes(self, flt: Optional[NoteFilter] = None) -> list[Note]:
        with self._lock:
            return filter_notes(self._notes, flt)

    def _index(self, note_id: str) -> Optional[int]:
        for i, n in enumerate(self._notes):
            if n.id == note_id:
                return i
        return None

    # ---------- persistence ----------
    def _read(self, key: str, adapter: TypeAdapter, default):
        try:
            raw = self.slots.read_slot(key)
            if raw is None:
                return default
            return adapter.validate_json(raw)
        except (StorageError, ValidationError) as e:
            logger.warning("slot %s unreadable, using default: %s", key, e)
            return default

    def load(self) -> None:
        """
        Rehydrate from the slots. Each slot falls back to its own default when
        missing or malformed. An empty collection gets the welcome note.
        """
        with self._lock:
            self._notes = self._read(NOTES_KEY, _NOTES, [])
            self._tags = self._read(TAGS_KEY, _TAGS, list(DEFAULT_TAGS))
            self._active = self._read(ACTIVE_KEY, _ACTIVE, None)
            for n in self._notes:
                self.clock.observe(n.updated_at)

            if not self._notes:
                now = self.clock.now()
                seed = Note(
                    title=SEED_TITLE,
                    content=SEED_CONTENT,
                    created_at=now,
                    updated_at=now,
                    tags=(SEED_TAG,),
                    color=SEED_COLOR,
                    pinned=True,
                )
                self._notes.append(seed)
                self._active = seed.id
                logger.info("seeded welcome note %s", seed.id)
                self.persist()

    def persist(self) -> bool:
        """Write all three slots. Failures are logged and reported, never raised."""
        with self._lock:
            try:
                self.slots.write_slot(NOTES_KEY, _NOTES.dump_json(self._notes, by_alias=True).decode())
                self.slots.write_slot(TAGS_KEY, _TAGS.dump_json(self._tags).decode())
                self.slots.write_slot(ACTIVE_KEY, _ACTIVE.dump_json(self._active).decode())
            except StorageError as e:
                logger.warning("persist failed, keeping in-memory state: %s", e)
                self.last_persist_error = e
                return False
            self.last_persist_error = None
            return True

    # ---------- mutations ----------
    def _replace(self, idx: int, **changes) -> Note:
        note = self._notes[idx].model_copy(update={**changes, "updated_at": self.clock.now()})
        self._notes[idx] = note
        return note

    def create_note(self) -> str:
        with self._lock:
            now = self.clock.now()
            note = Note(created_at=now, updated_at=now, color=DEFAULT_COLOR)
            self._notes.insert(0, note)
            self._active = note.id
            logger.debug("created %s", note.id)
            self.persist()
            return note.id

    def update_note(self, note_id: str, patch: NotePatch) -> bool:
        """
        Merge the fields set on ``patch`` into the note and bump updated_at.
        An archived or trashed note never ends up pinned.
        """
        with self._lock:
            idx = self._index(note_id)
            if idx is None:
                return False
            changes = patch.changes()
            merged = {**self._notes[idx].model_dump(), **changes}
            if merged["archived"] or merged["trashed"]:
                changes["pinned"] = False
            self._replace(idx, **changes)
            self.persist()
            return True

    def pin_note(self, note_id: str, value: bool = True) -> bool:
        return self.update_note(note_id, NotePatch(pinned=value))

    def delete_note(self, note_id: str) -> bool:
        """First call moves the note to trash; a second call removes it."""
        with self._lock:
            idx = self._index(note_id)
            if idx is None:
                return False
            if self._notes[idx].trashed:
                del self._notes[idx]
                if self._active == note_id:
                    self._active = None
                logger.debug("purged %s", note_id)
            else:
                self._replace(idx, trashed=True, pinned=False, archived=False)
                logger.debug("trashed %s", note_id)
            self.persist()
            return True

    def restore_from_trash(self, note_id: str) -> bool:
        with self._lock:
            idx = self._index(note_id)
            if idx is None:
                return False
            self._replace(idx, trashed=False)
            self.persist()
            return True

    def archive_note(self, note_id: str) -> bool:
        # trashed is left as is
        with self._lock:
            idx = self._index(note_id)
            if idx is None:
                return False
            self._replace(idx, archived=True, pinned=False)
            self.persist()
            return True

    def unarchive_note(self, note_id: str) -> bool:
        with self._lock:
            idx = self._index(note_id)
            if idx is None:
                return False
            self._replace(idx, archived=False)
            self.persist()
            return True

    def set_active_note(self, note_id: Optional[str]) -> None:
        with self._lock:
            self._active = note_id
            self.persist()

    def add_tag(self, name: str) -> bool:
        tag = name.strip()
        if not tag:
            return False
        with self._lock:
            if tag in self._tags:
                return False
            self._tags.append(tag)
            self._tags.sort()
            self.persist()
            return True

    # ---------- bulk exchange ----------
    def export_notes(self) -> list[dict]:
        with self._lock:
            return [n.to_record() for n in self._notes]

    def import_notes(self, records: list[dict]) -> int:
        """
        Add note records (camelCase keys) in front of the collection.

        Missing timestamps are stamped now; an id already in use is replaced
        by a fresh one. Every record is validated before anything changes.
        Anything other than a list of objects raises ``ValueError``.
        """
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError("expected a list of note objects")
        with self._lock:
            taken = {n.id for n in self._notes}
            imported: list[Note] = []
            for record in records:
                data = dict(record)
                if "createdAt" not in data:
                    data["createdAt"] = self.clock.now()
                data.setdefault("updatedAt", data["createdAt"])
                note = Note.model_validate(data)
                if note.updated_at < note.created_at:
                    note = note.model_copy(update={"updated_at": note.created_at})
                if note.pinned and (note.archived or note.trashed):
                    note = note.model_copy(update={"pinned": False})
                if note.id in taken:
                    note = note.model_copy(update={"id": new_note_id()})
                taken.add(note.id)
                imported.append(note)
            if not imported:
                return 0
            for n in imported:
                self.clock.observe(n.updated_at)
            self._notes[:0] = imported
            self.persist()
            return len(imported)
