"""
Logging configuration for Ocean Notes.
"""

import logging

from rich.logging import RichHandler

ROOT_LOGGER = "ocean_notes"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configure the ``ocean_notes`` logger hierarchy.

    Installs a single rich handler; calling it again only adjusts the level.

    :param level: Level name, e.g. ``"INFO"``
    :return: Root logger of the application
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level.upper())
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the application root, e.g. ``ocean_notes.store``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
