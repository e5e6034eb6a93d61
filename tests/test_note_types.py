"""Tests for journal_core.note_types."""

import pytest

from journal_core.note_types import (
    clean_todo_content,
    determine_note_type,
    is_todo_content,
)


class TestIsTodoContent:
    @pytest.mark.parametrize("text", [
        "todo: buy milk",
        "I need to call the bank",
        "don't forget to water plants",
        "remind me to email Sam",
        "- [ ] pack bags",
        "1. [ ] file taxes",
        "Buy eggs",
        "call: dentist",
        "Tomorrow remember to stretch",
    ])
    def test_todo(self, text):
        assert is_todo_content(text)

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        None,
        "Had a great walk today",
        "Booking systems are hard",
        "Getaway ideas for summer",
    ])
    def test_not_todo(self, text):
        assert not is_todo_content(text)

    def test_phrase_only_checked_on_first_line(self):
        assert not is_todo_content("Nice day\nremember to relax")


class TestDetermineNoteType:
    def test_explicit_wins(self):
        assert determine_note_type("buy milk", "journal") == "journal"

    def test_detects_todo(self):
        assert determine_note_type("buy milk") == "todo"

    def test_defaults_to_note(self):
        assert determine_note_type("The sky was pink") == "note"


class TestCleanTodoContent:
    def test_checkbox(self):
        assert clean_todo_content("- [ ] pack bags") == "pack bags"

    def test_prefix(self):
        assert clean_todo_content("TODO: buy milk") == "buy milk"

    def test_remind_me(self):
        assert clean_todo_content("remind me to call mom") == "call mom"

    def test_leaves_plain_text(self):
        assert clean_todo_content("Document review") == "Document review"

    def test_empty(self):
        assert clean_todo_content("") == ""
