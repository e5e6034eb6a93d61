"""Prompt templates for note summarization."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timezone

from .storage.notes import Note, parse_datetime

SUMMARIZE_NOTES_PROMPT = """\
Create a succinct summary of the following {count} notes.

CRITICAL REQUIREMENTS:
- Maximum 3-4 bullet points per section
- Each bullet point should be ONE sentence maximum
- Focus on ONLY the most essential information
- Divide summary into sections like "At a Glance", "Action Items", "Key Takeaways"
- Use active, direct language as if conversing with the user.
- Perfect for a 30-second quick scan
- DO not repeat yourself.
- Be as concise as possible.
- Do not add any explanation, unnecessary text, or filler content. KEEP IT BRIEF.

Notes to summarize:
{notes}
"""

INVALID_DATE = "Invalid Date"


def format_note_date(value) -> str:
    """Render a note timestamp as M/D/YYYY using its UTC calendar date."""
    dt = parse_datetime(value)
    if dt is None:
        return INVALID_DATE
    dt = dt.astimezone(timezone.utc)
    return f"{dt.month}/{dt.day}/{dt.year}"


def _format_note(index: int, note: Note, include_metadata: bool) -> str:
    block = f"Note {index}"
    if include_metadata:
        block += f" ({note.note_type or 'note'})"
        if note.contexts:
            block += f" [Contexts: {', '.join(str(c) for c in note.contexts)}]"
        block += f" ({format_note_date(note.created_at)})"
    content = note.content if note.content is not None else ""
    return f"{block}:\n{content}\n\n"


def build_summary_prompt(notes: Sequence[Note], include_metadata: bool = True) -> str:
    """Serialize *notes* into a single summarization prompt.

    Notes are numbered from 1 in the order given. Nothing is reordered,
    deduplicated or truncated here; callers bound the list beforehand
    (see MAX_USER_NOTES). Malformed notes render as incomplete text
    rather than raising.
    """
    blocks = "".join(
        _format_note(i, note, include_metadata)
        for i, note in enumerate(notes, start=1)
    )
    return SUMMARIZE_NOTES_PROMPT.format(count=len(notes), notes=blocks)
