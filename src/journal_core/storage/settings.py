"""User preferences stored as JSON under the data directory."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..constants import MAX_USER_NOTES
from ..paths import Paths

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gemma3:1b"

# Commands whose model can be overridden with model_<command>.
MODEL_COMMANDS = ("summarize",)

DEFAULTS: dict[str, Any] = {
    "model": "",
    "ollama_host": "",
    "temperature": 0.3,
    "include_metadata": True,
    "max_user_notes": MAX_USER_NOTES,
}

_VALID_KEYS = set(DEFAULTS) | {f"model_{cmd}" for cmd in MODEL_COMMANDS}


class Settings:
    """Preferences file with defaults for every known key.

    Usage:
        settings = Settings(paths)
        settings.set("model_summarize", "llama3")
        model = settings.get_model("summarize")
    """

    def __init__(self, paths: Paths) -> None:
        self.paths = paths

    def load(self) -> dict[str, Any]:
        """Stored values over defaults. A missing or corrupt file yields defaults."""
        settings = dict(DEFAULTS)
        path = self.paths.settings_file
        try:
            stored = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return settings
        except json.JSONDecodeError as exc:
            log.warning("ignoring unreadable settings file %s: %s", path, exc)
            return settings
        if isinstance(stored, dict):
            settings.update(stored)
        return settings

    def get(self, key: str) -> Any:
        return self.load().get(key, DEFAULTS.get(key))

    def set(self, key: str, value: Any) -> None:
        """Persist one value. Unknown keys raise KeyError."""
        if not self.is_valid_key(key):
            raise KeyError(f"unknown setting: {key}")
        stored = self.load()
        stored[key] = value
        path = self.paths.settings_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(stored, indent=4) + "\n", encoding="utf-8")

    @staticmethod
    def is_valid_key(key: str) -> bool:
        return key in _VALID_KEYS

    @property
    def include_metadata(self) -> bool:
        return bool(self.get("include_metadata"))

    @property
    def max_user_notes(self) -> int:
        try:
            value = int(self.get("max_user_notes"))
        except (TypeError, ValueError):
            return MAX_USER_NOTES
        return value if value > 0 else MAX_USER_NOTES

    def get_model(self, command: str | None = None) -> str:
        """model_<command>, then model, then DEFAULT_MODEL."""
        settings = self.load()
        if command and settings.get(f"model_{command}"):
            return settings[f"model_{command}"]
        return settings.get("model") or DEFAULT_MODEL
