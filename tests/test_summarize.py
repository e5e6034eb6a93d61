"""Tests for journal_core.summarize and journal_core.llm.client."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from journal_core.llm.client import OllamaClient
from journal_core.paths import Paths
from journal_core.performance import ExecutionRecord, ExecutionTimer, Mode, PerfConfig
from journal_core.storage.notes import Note, NoteStore
from journal_core.storage.settings import Settings
from journal_core.summarize import (
    FAILURE_MESSAGE,
    NO_NOTES_MESSAGE,
    NoteSummarizer,
    describe_date_range,
)


class MemoryLedger:
    def __init__(self) -> None:
        self.records: list[ExecutionRecord] = []

    def append(self, record: ExecutionRecord) -> None:
        self.records.append(record)


@pytest.fixture
def paths(tmp_path):
    return Paths(root=tmp_path / "data")


@pytest.fixture
def store(paths):
    s = NoteStore(paths)
    s.add_note("Buy milk", contexts=["errands"])
    s.add_note("Felt good after the run", note_type="journal")
    return s


@pytest.fixture
def mock_client():
    client = MagicMock(spec=OllamaClient)
    client.chat = MagicMock(return_value="## At a Glance\n- Milk.")
    return client


@pytest.fixture
def ledger():
    return MemoryLedger()


@pytest.fixture
def summarizer(store, mock_client, ledger):
    timer = ExecutionTimer(PerfConfig(mode=Mode.DEVELOPMENT, csv_logging=True), ledger)
    return NoteSummarizer(store, mock_client, timer)


def _note(created_at: str) -> Note:
    return Note(id=created_at, content="x", created_at=created_at)


class TestDescribeDateRange:
    def test_empty(self):
        assert describe_date_range([]) is None

    def test_same_day(self):
        notes = [_note("2024-01-15T08:00:00Z"), _note("2024-01-15T20:00:00Z")]
        assert describe_date_range(notes) == "1/15/2024"

    def test_days(self):
        notes = [_note("2024-01-15T08:00:00Z"), _note("2024-01-18T08:00:00Z")]
        assert describe_date_range(notes) == "3 days"

    def test_one_day(self):
        notes = [_note("2024-01-15T20:00:00Z"), _note("2024-01-16T08:00:00Z")]
        assert describe_date_range(notes) == "1 day"

    def test_weeks(self):
        notes = [_note("2024-01-01T00:00:00Z"), _note("2024-01-20T00:00:00Z")]
        assert describe_date_range(notes) == "3 weeks"

    def test_long_range(self):
        notes = [_note("2024-03-01T00:00:00Z"), _note("2024-01-01T00:00:00Z")]
        assert describe_date_range(notes) == "1/1/2024 - 3/1/2024"

    def test_same_utc_day_across_offsets(self):
        notes = [_note("2024-01-15T23:30:00-05:00"), _note("2024-01-16T04:40:00Z")]
        assert describe_date_range(notes) == "1/16/2024"

    def test_ignores_bad_dates(self):
        notes = [_note("garbage"), _note("2024-01-15T08:00:00Z")]
        assert describe_date_range(notes) == "1/15/2024"


class TestNoteSummarizer:
    async def test_summarize_by_ids(self, summarizer, store, mock_client, ledger):
        ids = [n.id for n in store.load_notes()]
        result = await summarizer.summarize(ids)

        assert result.success
        assert result.summary == "## At a Glance\n- Milk."
        assert result.note_count == 2
        assert result.error is None
        assert result.date_range is not None

        prompt = mock_client.chat.call_args.args[0]
        assert "the following 2 notes." in prompt
        assert "[Contexts: errands]" in prompt
        assert mock_client.chat.call_args.kwargs["command"] == "summarize"
        assert [r.function_name for r in ledger.records] == ["fetchNotesByIds", "summarizeNotes"]

    async def test_without_metadata(self, summarizer, store, mock_client):
        ids = [n.id for n in store.load_notes()]
        result = await summarizer.summarize(ids, include_metadata=False)
        prompt = mock_client.chat.call_args.args[0]
        assert "Note 1:\nBuy milk" in prompt
        assert result.date_range is None

    async def test_no_matching_notes(self, summarizer, mock_client):
        result = await summarizer.summarize(["nope"])
        assert not result.success
        assert result.note_count == 0
        assert result.message == NO_NOTES_MESSAGE
        mock_client.chat.assert_not_called()

    async def test_summarize_latest(self, summarizer, mock_client, ledger):
        result = await summarizer.summarize_latest(limit=1)
        assert result.note_count == 1
        assert ledger.records[0].function_name == "fetchNotes"

    async def test_model_failure(self, summarizer, store, mock_client, ledger, caplog):
        mock_client.chat = MagicMock(side_effect=RuntimeError("ollama down"))
        ids = [n.id for n in store.load_notes()]
        with caplog.at_level(logging.ERROR):
            result = await summarizer.summarize(ids)

        assert not result.success
        assert result.error == "ollama down"
        assert result.message == FAILURE_MESSAGE
        assert ledger.records[-1].status == "failure"
        assert "error generating AI summary" in caplog.text

    async def test_store_failure(self, mock_client, ledger):
        store = MagicMock(spec=NoteStore)
        store.fetch_notes_by_ids.side_effect = OSError("disk gone")
        summarizer = NoteSummarizer(store, mock_client, ExecutionTimer(PerfConfig(), ledger))
        result = await summarizer.summarize(["a"])
        assert not result.success
        assert result.error == "disk gone"

    async def test_bounds_note_count(self, summarizer, mock_client):
        notes = [Note(id=str(i), content=f"n{i}") for i in range(60)]
        result = await summarizer.summarize_notes(notes)
        assert result.note_count == 50
        assert "the following 50 notes." in mock_client.chat.call_args.args[0]

    async def test_max_notes_bounds_prompt(self, store, mock_client, ledger):
        timer = ExecutionTimer(PerfConfig(), ledger)
        summarizer = NoteSummarizer(store, mock_client, timer, max_notes=3)
        notes = [Note(id=str(i), content=f"n{i}") for i in range(5)]
        result = await summarizer.summarize_notes(notes)
        assert result.note_count == 3
        assert "Note 3" in mock_client.chat.call_args.args[0]
        assert "Note 4" not in mock_client.chat.call_args.args[0]

    async def test_latest_defaults_to_max_notes(self, store, mock_client, ledger):
        timer = ExecutionTimer(PerfConfig(), ledger)
        summarizer = NoteSummarizer(store, mock_client, timer, max_notes=1)
        result = await summarizer.summarize_latest()
        assert result.note_count == 1

    def test_max_notes_must_be_positive(self, store, mock_client):
        with pytest.raises(ValueError):
            NoteSummarizer(store, mock_client, ExecutionTimer(PerfConfig()), max_notes=0)

    async def test_negative_limit_fails(self, summarizer, mock_client):
        result = await summarizer.summarize_latest(limit=-1)
        assert not result.success
        assert "at least 1" in result.error
        mock_client.chat.assert_not_called()


class TestOllamaClient:
    @pytest.fixture
    def ollama(self):
        client = MagicMock()
        client.chat.return_value = {"message": {"content": "summary"}}
        return client

    def test_chat_uses_command_model(self, paths, ollama):
        settings = Settings(paths)
        settings.set("model_summarize", "qwen2.5")
        reply = OllamaClient(settings, client=ollama).chat("prompt", command="summarize")

        assert reply == "summary"
        kwargs = ollama.chat.call_args.kwargs
        assert kwargs["model"] == "qwen2.5"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
        assert kwargs["options"] == {"temperature": 0.3}

    def test_explicit_model_wins(self, paths, ollama):
        settings = Settings(paths)
        settings.set("model_summarize", "qwen2.5")
        OllamaClient(settings, client=ollama).chat("hi", command="summarize", model="m")
        assert ollama.chat.call_args.kwargs["model"] == "m"

    def test_system_message_first(self, paths, ollama):
        OllamaClient(Settings(paths), client=ollama).chat("hi", system="be brief")
        messages = ollama.chat.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    def test_host_from_settings(self, paths):
        settings = Settings(paths)
        settings.set("ollama_host", "http://gpu-box:11434")
        with patch("journal_core.llm.client.Client") as client_cls:
            OllamaClient(settings)
        client_cls.assert_called_once_with(host="http://gpu-box:11434")
