"""Detect todo-like notes and resolve a note's type from its content."""

from __future__ import annotations

import re

NOTE_TYPE_NOTE = "note"
NOTE_TYPE_TODO = "todo"

# Leading words that mark a todo when followed by a word boundary.
TODO_KEYWORDS = (
    "todo", "task", "remember", "remind", "need to", "have to", "must",
    "should", "action item", "action", "follow up", "followup", "check",
    "review", "schedule", "book", "call", "email", "contact", "buy",
    "purchase", "get", "pick up", "pickup", "finish", "complete", "submit",
    "send", "prepare", "organize", "plan",
)

TODO_PATTERNS = (
    re.compile(r"^(?:to\s+)?do\b", re.IGNORECASE),
    re.compile(r"^(?:i\s+)?(?:need|have|must|should)\s+to\b", re.IGNORECASE),
    re.compile(r"^(?:don't\s+)?forget\s+to\b", re.IGNORECASE),
    re.compile(r"^(?:make\s+)?sure\s+to\b", re.IGNORECASE),
    re.compile(r"^remind\s+me\s+to\b", re.IGNORECASE),
    re.compile(r"^remember\s+to\b", re.IGNORECASE),
    re.compile(r"^\[\s*\]\s"),
    re.compile(r"^-\s*\[\s*\]\s"),
    re.compile(r"^\*\s*\[\s*\]\s"),
    re.compile(r"^\d+\.\s*\[\s*\]\s"),
)

# Phrases that mark a todo anywhere in the first line.
TODO_PHRASES = (
    "remind me to", "remember to", "don't forget", "dont forget",
    "need to do", "have to do", "action item:", "follow up on",
    "make sure to",
)

_CHECKBOX_PREFIXES = (
    re.compile(r"^[-*]\s*\[\s*\]\s*"),
    re.compile(r"^\d+\.\s*\[\s*\]\s*"),
    re.compile(r"^\[\s*\]\s*"),
)

_TODO_PREFIXES = (
    re.compile(r"^todo:?\s*", re.IGNORECASE),
    re.compile(r"^task:?\s*", re.IGNORECASE),
    re.compile(r"^remember\s+to\s*", re.IGNORECASE),
    re.compile(r"^remember:?\s*", re.IGNORECASE),
    re.compile(r"^remind\s+me\s+to\s*", re.IGNORECASE),
    re.compile(r"^remind\s+me:?\s*", re.IGNORECASE),
    re.compile(r"^(?:i\s+)?(?:need|have|must|should)\s+to\s*", re.IGNORECASE),
    re.compile(r"^(?:don't\s+)?forget\s+to\s*", re.IGNORECASE),
    re.compile(r"^(?:make\s+)?sure\s+to\s*", re.IGNORECASE),
    re.compile(r"^action\s+item:?\s*", re.IGNORECASE),
    re.compile(r"^follow\s+up:?\s*", re.IGNORECASE),
    re.compile(r"^(?:to\s+)?do\b:?\s*", re.IGNORECASE),
)

_KEYWORD_BOUNDARY = re.compile(r"[\s:\-.,!?]")


def is_todo_content(content: str | None) -> bool:
    """Return True if *content* reads like a todo item.

    Checks, in order: the regex patterns, a leading keyword followed by a
    boundary character, then todo phrases anywhere in the first line.
    """
    if not content or not isinstance(content, str):
        return False
    trimmed = content.strip()
    if not trimmed:
        return False

    for pattern in TODO_PATTERNS:
        if pattern.search(trimmed):
            return True

    lower = trimmed.lower()
    for keyword in TODO_KEYWORDS:
        if lower.startswith(keyword):
            next_char = lower[len(keyword):len(keyword) + 1]
            if not next_char or _KEYWORD_BOUNDARY.match(next_char):
                return True

    first_line = lower.split("\n", 1)[0]
    return any(phrase in first_line for phrase in TODO_PHRASES)


def determine_note_type(content: str, explicit_type: str | None = None) -> str:
    """Use *explicit_type* when given, otherwise detect from *content*."""
    if explicit_type:
        return explicit_type
    if is_todo_content(content):
        return NOTE_TYPE_TODO
    return NOTE_TYPE_NOTE


def clean_todo_content(content: str) -> str:
    """Strip checkbox markers and todo prefixes, leaving the task itself."""
    if not content:
        return content
    cleaned = content.strip()
    for pattern in _CHECKBOX_PREFIXES:
        cleaned = pattern.sub("", cleaned)
    for pattern in _TODO_PREFIXES:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()
