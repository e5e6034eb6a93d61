"""File-backed note store: one JSON object per line in notes.jsonl."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..constants import DEFAULT_FILTER_LIMIT, MAX_FILTER_LIMIT
from ..note_types import determine_note_type
from ..paths import Paths

log = logging.getLogger(__name__)


@dataclass
class Note:
    """A single journal entry."""

    id: str
    content: str | None
    note_type: str | None = None
    contexts: list[str] = field(default_factory=list)
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Note:
        """Build a Note leniently; missing fields become None or []."""
        return cls(
            id=str(data.get("id", "")),
            content=data.get("content"),
            note_type=data.get("note_type"),
            contexts=list(data.get("contexts") or []),
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime.

    Naive values are taken as UTC. Returns None when *value* can't be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _sort_key(note: Note) -> datetime:
    return parse_datetime(note.created_at) or datetime.min.replace(tzinfo=timezone.utc)


def _check_limit(limit: int | None) -> None:
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")


class NoteStore:
    """Note storage backed by ``paths.notes_file``.

    Usage:
        store = NoteStore(paths)
        note = store.add_note("Buy milk", contexts=["errands"])
        latest = store.fetch_notes(limit=MAX_USER_NOTES)
    """

    def __init__(self, paths: Paths) -> None:
        self.paths = paths

    @property
    def path(self) -> Path:
        return self.paths.notes_file

    def load_notes(self) -> list[Note]:
        """Read all notes in file order. Returns [] if missing."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        notes = []
        for lineno, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                log.warning("skipping malformed note at %s:%d", self.path, lineno)
                continue
            if isinstance(obj, dict):
                notes.append(Note.from_dict(obj))
        return notes

    def add_note(
        self,
        content: str,
        note_type: str | None = None,
        contexts: list[str] | None = None,
    ) -> Note:
        """Append a new note, detecting its type when none is given."""
        if not content or not content.strip():
            raise ValueError("note content must not be empty")
        note = Note(
            id=uuid.uuid4().hex,
            content=content.strip(),
            note_type=determine_note_type(content, note_type),
            contexts=list(contexts or []),
            created_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(note.to_dict()) + "\n")
        return note

    def fetch_notes(self, limit: int | None = None) -> list[Note]:
        """Return notes newest first, at most *limit* of them.

        Raises ValueError if *limit* is below 1.
        """
        _check_limit(limit)
        notes = sorted(self.load_notes(), key=_sort_key, reverse=True)
        if limit is not None:
            notes = notes[:limit]
        return notes

    def fetch_notes_by_ids(self, ids: list[str]) -> list[Note]:
        """Return the notes matching *ids*, in the order the ids were given.

        Unknown ids are dropped; repeated ids yield the note once.
        """
        by_id = {note.id: note for note in self.load_notes()}
        result = []
        seen: set[str] = set()
        for note_id in ids:
            if note_id in by_id and note_id not in seen:
                result.append(by_id[note_id])
                seen.add(note_id)
        return result

    def filter_notes(
        self,
        contexts: list[str] | None = None,
        note_type: str | None = None,
        created_after: str | None = None,
        created_before: str | None = None,
        limit: int | None = None,
    ) -> list[Note]:
        """Filter notes newest first.

        A note must carry ALL of *contexts*. Dates are inclusive bounds.
        *limit* defaults to DEFAULT_FILTER_LIMIT and is capped at MAX_FILTER_LIMIT;
        below 1 raises ValueError.
        """
        _check_limit(limit)
        limit = min(DEFAULT_FILTER_LIMIT if limit is None else limit, MAX_FILTER_LIMIT)
        after = parse_datetime(created_after)
        before = parse_datetime(created_before)

        matched = []
        for note in self.fetch_notes():
            if contexts and not all(c in note.contexts for c in contexts):
                continue
            if note_type and note.note_type != note_type:
                continue
            if after or before:
                created = parse_datetime(note.created_at)
                if created is None:
                    continue
                if after and created < after:
                    continue
                if before and created > before:
                    continue
            matched.append(note)
        return matched[:limit]

    def filter_options(self) -> dict[str, list[str]]:
        """Return the distinct contexts and note types in use, sorted."""
        contexts: set[str] = set()
        note_types: set[str] = set()
        for note in self.load_notes():
            contexts.update(c.strip() for c in note.contexts if c and c.strip())
            if note.note_type and note.note_type.strip():
                note_types.add(note.note_type.strip())
        return {
            "contexts": sorted(contexts),
            "note_types": sorted(note_types),
        }
