from __future__ import annotations
from pathlib import Path
from contextlib import contextmanager
from typing import Iterator

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.engine import Engine

from .config import load_settings
from . import models  # noqa: F401  registers the slot table

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None  # current engine's URL, swapped when the configured path changes


def compute_url(db_path: Path | None = None) -> str:
    if db_path is None:
        db_path = load_settings().db_path
    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def get_engine(db_path: Path | None = None) -> Engine:
    global _ENGINE, _ENGINE_URL
    url = compute_url(db_path)
    if _ENGINE is None or _ENGINE_URL != url:
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(url, echo=False)
        _ENGINE_URL = url
    return _ENGINE


def reset_engine() -> None:
    """For tests: drop the cached engine so a new OCEAN_NOTES_DB_PATH is picked up."""
    global _ENGINE, _ENGINE_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None


def init_db(engine: Engine | None = None) -> Engine:
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    return engine


@contextmanager
def session_scope(engine: Engine | None = None) -> Iterator[Session]:
    session = Session(engine or get_engine(), expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
