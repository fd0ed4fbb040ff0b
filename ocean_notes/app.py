from __future__ import annotations
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import load_settings
from .deps import StoreDep
from .logging import setup_logging
from .models import Note, NotePatch, Section
from .query import NoteFilter

setup_logging(load_settings().log_level)

app = FastAPI(title="Ocean Notes API")


# ---------- Schemas ----------
class TagCreate(BaseModel):
    name: str


class ActiveOut(BaseModel):
    id: Optional[str]
    note: Optional[Note] = None


def _require(found: bool, note_id: str) -> None:
    if not found:
        raise HTTPException(status_code=404, detail=f"Note '{note_id}' not found")


# ---------- Notes ----------
@app.get("/api/notes", response_model=list[Note])
def api_list_notes(
    store: StoreDep,
    section: Section = Section.ALL,
    tag: Optional[str] = None,
    q: Optional[str] = None,
):
    return store.get_filtered_notes(NoteFilter(section=section, tag=tag, query=q))


@app.post("/api/notes", response_model=Note, status_code=201)
def api_create_note(store: StoreDep, payload: Optional[NotePatch] = None):
    note_id = store.create_note()
    if payload is not None:
        store.update_note(note_id, payload)
    return store.get_note(note_id)


@app.get("/api/notes/{note_id}", response_model=Note)
def api_get_note(note_id: str, store: StoreDep):
    note = store.get_note(note_id)
    _require(note is not None, note_id)
    return note


@app.patch("/api/notes/{note_id}", response_model=Note)
def api_update_note(note_id: str, payload: NotePatch, store: StoreDep):
    _require(store.update_note(note_id, payload), note_id)
    return store.get_note(note_id)


@app.delete("/api/notes/{note_id}")
def api_delete_note(note_id: str, store: StoreDep):
    _require(store.delete_note(note_id), note_id)
    # a second delete purges, so the note may be gone now
    return {"ok": True, "purged": store.get_note(note_id) is None}


@app.post("/api/notes/{note_id}/restore", response_model=Note)
def api_restore(note_id: str, store: StoreDep):
    _require(store.restore_from_trash(note_id), note_id)
    return store.get_note(note_id)


@app.post("/api/notes/{note_id}/archive", response_model=Note)
def api_archive(note_id: str, store: StoreDep):
    _require(store.archive_note(note_id), note_id)
    return store.get_note(note_id)


@app.post("/api/notes/{note_id}/unarchive", response_model=Note)
def api_unarchive(note_id: str, store: StoreDep):
    _require(store.unarchive_note(note_id), note_id)
    return store.get_note(note_id)


@app.post("/api/notes/{note_id}/activate", response_model=ActiveOut)
def api_activate(note_id: str, store: StoreDep):
    _require(store.get_note(note_id) is not None, note_id)
    store.set_active_note(note_id)
    return ActiveOut(id=note_id, note=store.active_note)


# ---------- Active pointer / tags ----------
@app.get("/api/active", response_model=ActiveOut)
def api_active(store: StoreDep):
    return ActiveOut(id=store.active_note_id, note=store.active_note)


@app.delete("/api/active", response_model=ActiveOut)
def api_clear_active(store: StoreDep):
    store.set_active_note(None)
    return ActiveOut(id=None)


@app.get("/api/tags", response_model=list[str])
def api_tags(store: StoreDep):
    return store.tags


@app.post("/api/tags", response_model=list[str])
def api_add_tag(payload: TagCreate, store: StoreDep):
    store.add_tag(payload.name)
    return store.tags
