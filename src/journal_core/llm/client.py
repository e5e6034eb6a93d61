"""Text generation through a local Ollama server."""

from __future__ import annotations

import logging

from ollama import ChatResponse, Client

from ..storage.settings import Settings

log = logging.getLogger(__name__)


class OllamaClient:
    """Single-turn chat against Ollama, with the model picked per command.

    Usage:
        client = OllamaClient(settings)
        summary = client.chat(prompt, command="summarize")
    """

    def __init__(self, settings: Settings, client: Client | None = None) -> None:
        self._settings = settings
        self._client = client or Client(host=settings.get("ollama_host") or None)

    def chat(
        self,
        prompt: str,
        command: str | None = None,
        model: str | None = None,
        system: str | None = None,
    ) -> str:
        """Return the model's reply to *prompt*.

        An explicit *model* wins over the settings chain for *command*.
        """
        model = model or self._settings.get_model(command)
        messages = [{"role": "user", "content": prompt}]
        if system:
            messages.insert(0, {"role": "system", "content": system})
        log.debug("chat model=%s command=%s prompt_chars=%d", model, command, len(prompt))
        response: ChatResponse = self._client.chat(
            model=model,
            messages=messages,
            options={"temperature": self._settings.get("temperature")},
        )
        return response["message"]["content"]
