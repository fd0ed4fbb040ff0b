from __future__ import annotations
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import Field as SQLField, SQLModel

DEFAULT_COLOR = "#FFFFFF"


def new_note_id() -> str:
    return uuid4().hex


class Section(str, Enum):
    """Views the filter engine can scope a listing to."""
    ALL = "all"
    PINNED = "pinned"
    ARCHIVED = "archived"
    TRASH = "trash"


class Note(BaseModel):
    """
    A single note.

    Instances are immutable; the store swaps in an updated copy on every
    mutation. Serialized with camelCase keys (``createdAt``, ``updatedAt``).
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=new_note_id)
    title: str = ""
    content: str = ""
    created_at: int
    updated_at: int
    tags: tuple[str, ...] = ()
    color: Optional[str] = DEFAULT_COLOR
    pinned: bool = False
    archived: bool = False
    trashed: bool = False

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class NotePatch(BaseModel):
    """
    Partial update for a note. Only fields that were explicitly set are
    merged; ``color`` is the only field that may be set to ``None``.
    """
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[tuple[str, ...]] = None
    color: Optional[str] = None
    pinned: Optional[bool] = None
    archived: Optional[bool] = None
    trashed: Optional[bool] = None

    @field_validator("title", "content", "tags", "pinned", "archived", "trashed")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if "tags" in data:
            data["tags"] = tuple(data["tags"])
        return data


class Slot(SQLModel, table=True):
    """One persisted key/value slot."""
    key: str = SQLField(primary_key=True)
    value: str = ""
