from __future__ import annotations
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional
import json

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from .config import load_settings
from .deps import get_store
from .logging import setup_logging
from .models import NotePatch, Section
from .query import NoteFilter
from .store import NotesStore

app = typer.Typer(help="Ocean Notes: local notes with tags, pins, archive and trash")
console = Console()


@app.callback()
def _boot():
    setup_logging(load_settings().log_level)


def _store() -> NotesStore:
    return get_store()


def _found(ok: bool, note_id: str) -> None:
    if not ok:
        console.print(f"[red]Not found[/]: {note_id}")
        raise typer.Exit(1)


def _stamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, UTC).isoformat(timespec="minutes")


def _split_tags(tags: str) -> list[str]:
    return [t.strip() for t in tags.split(",") if t.strip()]


@app.command()
def new(
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    content: Optional[str] = typer.Option(None, "--content", "-c"),
    tags: Optional[str] = typer.Option(None, "--tags", "-g", help="comma separated"),
):
    store = _store()
    note_id = store.create_note()
    fields = {"title": title, "content": content}
    fields = {k: v for k, v in fields.items() if v is not None}
    if tags is not None:
        fields["tags"] = _split_tags(tags)
    if fields:
        store.update_note(note_id, NotePatch(**fields))
    console.print(f"[green]Created[/] {note_id}")


@app.command("list")
def _list(
    section: Section = typer.Option(Section.ALL, "--section", "-s"),
    tag: Optional[str] = typer.Option(None, "--tag"),
    search: Optional[str] = typer.Option(None, "--search", "-q"),
):
    store = _store()
    notes = store.get_filtered_notes(NoteFilter(section=section, tag=tag, query=search))
    table = Table(title=f"Ocean Notes · {section.value}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Tags", style="magenta")
    table.add_column("Pinned")
    table.add_column("Updated")
    for n in notes:
        marker = "▶ " if n.id == store.active_note_id else ""
        table.add_row(
            marker + n.id, n.title or "[dim]Untitled[/]", ", ".join(n.tags),
            "✓" if n.pinned else "", _stamp(n.updated_at),
        )
    console.print(table)


@app.command()
def show(note_id: str):
    n = _store().get_note(note_id)
    _found(n is not None, note_id)
    state = [f for f in ("pinned", "archived", "trashed") if getattr(n, f)]
    console.rule(f"{n.title or 'Untitled'}")
    console.print(f"[dim]id:[/] {n.id}  [dim]updated:[/] {_stamp(n.updated_at)}")
    if n.tags:
        console.print(f"[dim]tags:[/] {', '.join(n.tags)}")
    if state:
        console.print(f"[dim]state:[/] {', '.join(state)}")
    console.print(Markdown(n.content or "_<empty>_"))


@app.command()
def edit(
    note_id: str,
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    content: Optional[str] = typer.Option(None, "--content", "-c"),
    tags: Optional[str] = typer.Option(None, "--tags", "-g"),
    color: Optional[str] = typer.Option(None, "--color"),
):
    fields = {"title": title, "content": content, "color": color}
    fields = {k: v for k, v in fields.items() if v is not None}
    if tags is not None:
        fields["tags"] = _split_tags(tags)
    _found(_store().update_note(note_id, NotePatch(**fields)), note_id)
    console.print(f"[green]Updated[/] {note_id}")


@app.command()
def delete(note_id: str):
    store = _store()
    _found(store.delete_note(note_id), note_id)
    if store.get_note(note_id) is None:
        console.print(f"[red]Purged[/] {note_id}")
    else:
        console.print(f"[yellow]Moved to trash[/] {note_id} (delete again to purge)")


@app.command()
def restore(note_id: str):
    _found(_store().restore_from_trash(note_id), note_id)
    console.print(f"[green]Restored[/] {note_id}")


@app.command()
def archive(note_id: str):
    _found(_store().archive_note(note_id), note_id)
    console.print(f"[yellow]Archived[/] {note_id}")


@app.command()
def unarchive(note_id: str):
    _found(_store().unarchive_note(note_id), note_id)
    console.print(f"[green]Unarchived[/] {note_id}")


@app.command()
def pin(note_id: str):
    store = _store()
    _found(store.pin_note(note_id, True), note_id)
    if store.get_note(note_id).pinned:
        console.print(f"[green]Pinned[/] {note_id}")
    else:
        console.print(f"[yellow]Not pinned[/] {note_id}: archived or trashed notes cannot be pinned")


@app.command()
def unpin(note_id: str):
    _found(_store().pin_note(note_id, False), note_id)
    console.print(f"[yellow]Unpinned[/] {note_id}")


@app.command()
def activate(
    note_id: Optional[str] = typer.Argument(None),
    clear: bool = typer.Option(False, "--clear", help="unset the active note"),
):
    store = _store()
    if clear:
        store.set_active_note(None)
        console.print("[yellow]No active note[/]")
        return
    if note_id is None:
        console.print("[red]Give a note id or --clear[/]")
        raise typer.Exit(2)
    _found(store.get_note(note_id) is not None, note_id)
    store.set_active_note(note_id)
    console.print(f"[green]Active[/] {note_id}")


@app.command()
def tags():
    for t in _store().tags:
        console.print(t)


@app.command("tag-add")
def tag_add(name: str):
    if _store().add_tag(name):
        console.print(f"[green]Added tag[/] {name.strip()}")
    else:
        console.print(f"[dim]Tag unchanged[/]: {name!r}")


@app.command()
def export(to: Path = typer.Option(..., "--to")):
    payload = _store().export_notes()
    to.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"[green]Exported[/] {len(payload)} notes → {to}")


@app.command("import")
def import_(from_: Path = typer.Option(..., "--from")):
    try:
        data = json.loads(from_.read_text(encoding="utf-8"))
        count = _store().import_notes(data)
    except ValidationError as e:
        console.print(f"[red]Invalid note record[/]: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        # malformed JSON or not a list of objects
        console.print(f"[red]Cannot import {from_}[/]: {e}")
        raise typer.Exit(1)
    console.print(f"[green]Imported[/] {count} notes")


def main():
    app()


if __name__ == "__main__":
    main()
