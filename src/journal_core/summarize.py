"""Summarize a set of notes: fetch, build the prompt, ask the model."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timezone

from .constants import MAX_USER_NOTES
from .llm.client import OllamaClient
from .performance import ExecutionTimer
from .prompts import build_summary_prompt, format_note_date
from .storage.notes import Note, NoteStore, parse_datetime

log = logging.getLogger(__name__)

NO_NOTES_MESSAGE = "No notes found with the provided IDs."
FAILURE_MESSAGE = "Failed to generate AI summary. Please try again."


@dataclass
class SummarizeResult:
    success: bool
    summary: str
    note_count: int
    message: str
    error: str | None = None
    date_range: str | None = None


def describe_date_range(notes: Sequence[Note]) -> str | None:
    """Describe how long a stretch of time *notes* cover.

    One day renders as the date, up to a week as days, up to 30 days as
    weeks, anything longer as "first - last". Notes without a usable
    timestamp are ignored.
    """
    dates = sorted(
        dt for dt in (parse_datetime(n.created_at) for n in notes) if dt is not None
    )
    if not dates:
        return None
    earliest, latest = dates[0], dates[-1]
    # Same UTC calendar day, matching how format_note_date renders it
    if earliest.astimezone(timezone.utc).date() == latest.astimezone(timezone.utc).date():
        return format_note_date(earliest)

    diff_days = math.ceil((latest - earliest).total_seconds() / 86400)
    if diff_days <= 7:
        return f"{diff_days} day{'s' if diff_days > 1 else ''}"
    if diff_days <= 30:
        weeks = math.ceil(diff_days / 7)
        return f"{weeks} week{'s' if weeks > 1 else ''}"
    return f"{format_note_date(earliest)} - {format_note_date(latest)}"


class NoteSummarizer:
    """Runs the fetch -> prompt -> model pipeline, timing each stage.

    At most *max_notes* notes go into one prompt.

    Usage:
        summarizer = NoteSummarizer(store, client, timer)
        result = await summarizer.summarize(["id1", "id2"])
    """

    def __init__(
        self,
        store: NoteStore,
        client: OllamaClient,
        timer: ExecutionTimer,
        max_notes: int = MAX_USER_NOTES,
    ) -> None:
        if max_notes < 1:
            raise ValueError("max_notes must be at least 1")
        self._store = store
        self._client = client
        self._timer = timer
        self.max_notes = max_notes

    async def summarize(
        self,
        note_ids: list[str],
        include_metadata: bool = True,
    ) -> SummarizeResult:
        """Summarize the notes with the given ids, in the order given."""
        try:
            notes = await self._timer.measure(
                "fetchNotesByIds",
                lambda: asyncio.to_thread(self._store.fetch_notes_by_ids, note_ids),
            )
        except Exception as exc:
            log.exception("failed to fetch notes for summary")
            return SummarizeResult(False, "", 0, FAILURE_MESSAGE, error=str(exc))
        return await self.summarize_notes(notes, include_metadata)

    async def summarize_latest(
        self,
        limit: int | None = None,
        include_metadata: bool = True,
    ) -> SummarizeResult:
        """Summarize the newest *limit* notes (default: max_notes)."""
        limit = limit or self.max_notes
        try:
            notes = await self._timer.measure(
                "fetchNotes",
                lambda: asyncio.to_thread(self._store.fetch_notes, limit),
            )
        except Exception as exc:
            log.exception("failed to fetch notes for summary")
            return SummarizeResult(False, "", 0, FAILURE_MESSAGE, error=str(exc))
        return await self.summarize_notes(notes, include_metadata)

    async def summarize_notes(
        self,
        notes: Sequence[Note],
        include_metadata: bool = True,
    ) -> SummarizeResult:
        """Summarize already-fetched notes, keeping the first max_notes."""
        if not notes:
            return SummarizeResult(False, "", 0, NO_NOTES_MESSAGE)

        notes = list(notes)[: self.max_notes]
        prompt = build_summary_prompt(notes, include_metadata)
        log.debug("summary prompt for %d notes (%d chars)", len(notes), len(prompt))
        try:
            summary = await self._timer.measure(
                "summarizeNotes",
                lambda: asyncio.to_thread(self._client.chat, prompt, command="summarize"),
            )
        except Exception as exc:
            log.exception("error generating AI summary")
            return SummarizeResult(False, "", 0, FAILURE_MESSAGE, error=str(exc))

        return SummarizeResult(
            success=True,
            summary=summary,
            note_count=len(notes),
            date_range=describe_date_range(notes) if include_metadata else None,
            message=(
                f"Generated AI-powered summary for {len(notes)} notes "
                "with intelligent analysis."
            ),
        )
