from __future__ import annotations
from typing import Iterable, Optional

from pydantic import BaseModel

from .models import Note, Section

ALL_TAGS = "all"


class NoteFilter(BaseModel):
    section: Section = Section.ALL
    tag: Optional[str] = None
    query: Optional[str] = None


def in_section(note: Note, section: Section) -> bool:
    if section is Section.PINNED:
        return note.pinned and not note.archived and not note.trashed
    if section is Section.ARCHIVED:
        return note.archived and not note.trashed
    if section is Section.TRASH:
        return note.trashed
    return not note.archived and not note.trashed


def matches_query(note: Note, query: str) -> bool:
    q = query.lower()
    return q in note.title.lower() or q in note.content.lower()


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    """Pinned first, then most recently updated. Stable for equal keys."""
    return sorted(notes, key=lambda n: (not n.pinned, -n.updated_at))


def filter_notes(notes: Iterable[Note], flt: Optional[NoteFilter] = None) -> list[Note]:
    """
    Return a new list of the notes matching ``flt``, ordered for display.

    - section: all (default) | pinned | archived | trash
    - tag: exact, case-sensitive membership; "all" disables it
    - query: case-insensitive substring of title or content
    """
    flt = flt or NoteFilter()
    out = [n for n in notes if in_section(n, flt.section)]
    if flt.tag and flt.tag != ALL_TAGS:
        out = [n for n in out if flt.tag in n.tags]
    if flt.query:
        out = [n for n in out if matches_query(n, flt.query)]
    return sort_notes(out)
