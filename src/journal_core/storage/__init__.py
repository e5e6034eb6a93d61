"""Storage classes for journal core."""

from .notes import Note, NoteStore, parse_datetime
from .settings import Settings

__all__ = [
    "Note",
    "NoteStore",
    "Settings",
    "parse_datetime",
]
