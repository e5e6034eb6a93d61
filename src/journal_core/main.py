"""Command-line entry point for journal core."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .constants import MAX_USER_NOTES
from .llm.client import OllamaClient
from .note_types import NOTE_TYPE_TODO, clean_todo_content
from .paths import Paths
from .performance import CsvLedger, ExecutionTimer, PerfConfig
from .prompts import build_summary_prompt, format_note_date
from .storage.notes import NoteStore
from .storage.settings import Settings
from .summarize import NoteSummarizer

log = logging.getLogger(__name__)


def _parse_contexts(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [c.strip() for c in raw.split(",") if c.strip()]


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return value


def _summary_limit(args: argparse.Namespace, settings: Settings) -> int:
    limit = args.limit or settings.max_user_notes
    if limit > MAX_USER_NOTES:
        log.warning("summaries are capped at %d notes, not %d", MAX_USER_NOTES, limit)
        limit = MAX_USER_NOTES
    return limit


def cmd_add(args: argparse.Namespace, store: NoteStore) -> int:
    try:
        note = store.add_note(
            args.content, note_type=args.type, contexts=_parse_contexts(args.contexts),
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Added {note.note_type} {note.id}")
    return 0


def cmd_list(args: argparse.Namespace, store: NoteStore) -> int:
    notes = store.filter_notes(
        contexts=_parse_contexts(args.contexts),
        note_type=args.type,
        created_after=args.after,
        created_before=args.before,
        limit=args.limit,
    )
    if not notes:
        print("No notes.")
        return 0
    for note in notes:
        first_line = (note.content or "").split("\n", 1)[0]
        if note.note_type == NOTE_TYPE_TODO:
            first_line = clean_todo_content(first_line)
        print(f"{note.id}  {format_note_date(note.created_at)}  "
              f"({note.note_type or 'note'})  {first_line}")
    return 0


def cmd_summarize(
    args: argparse.Namespace, store: NoteStore, settings: Settings,
) -> int:
    include_metadata = settings.include_metadata if args.metadata is None else args.metadata
    limit = _summary_limit(args, settings)

    if args.prompt_only:
        if args.ids:
            notes = store.fetch_notes_by_ids(args.ids)[:limit]
        else:
            notes = store.fetch_notes(limit)
        print(build_summary_prompt(notes, include_metadata), end="")
        return 0

    timer = ExecutionTimer(PerfConfig.from_env(), CsvLedger())
    summarizer = NoteSummarizer(store, OllamaClient(settings), timer, max_notes=limit)
    if args.ids:
        coro = summarizer.summarize(args.ids, include_metadata)
    else:
        coro = summarizer.summarize_latest(include_metadata=include_metadata)
    result = asyncio.run(coro)

    if not result.success:
        detail = f": {result.error}" if result.error else ""
        print(f"{result.message}{detail}", file=sys.stderr)
        return 1

    header = f"# Notes Summary ({result.note_count} notes"
    header += f" spanning {result.date_range})" if result.date_range else ")"
    print(header)
    print()
    print(result.summary)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Journal notes and AI summaries")
    parser.add_argument(
        "--data-dir", default="data",
        help="Data directory (default: data)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a note")
    add.add_argument("content", help="Note text")
    add.add_argument("--type", help="Note type (detected when omitted)")
    add.add_argument("--contexts", help="Comma-separated contexts")

    lst = sub.add_parser("list", help="List notes, newest first")
    lst.add_argument("--contexts", help="Only notes carrying all these contexts")
    lst.add_argument("--type", help="Only notes of this type")
    lst.add_argument("--after", help="Created at or after (ISO-8601)")
    lst.add_argument("--before", help="Created at or before (ISO-8601)")
    lst.add_argument("--limit", type=_positive_int, help="Maximum notes to show")

    summ = sub.add_parser("summarize", help="Summarize notes with the LLM")
    summ.add_argument("ids", nargs="*", help="Note ids (default: latest notes)")
    summ.add_argument(
        "--limit", type=_positive_int,
        help=f"How many notes to use (default: max_user_notes, at most {MAX_USER_NOTES})",
    )
    summ.add_argument(
        "--metadata", action=argparse.BooleanOptionalAction, default=None,
        help="Include note type, contexts and dates (default: include_metadata setting)",
    )
    summ.add_argument(
        "--prompt-only", action="store_true",
        help="Print the prompt instead of calling the model",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    paths = Paths(root=args.data_dir)
    store = NoteStore(paths)
    settings = Settings(paths)
    log.debug("using data dir %s", paths.root)

    if args.command == "add":
        return cmd_add(args, store)
    if args.command == "list":
        return cmd_list(args, store)
    return cmd_summarize(args, store, settings)


if __name__ == "__main__":
    sys.exit(main())
