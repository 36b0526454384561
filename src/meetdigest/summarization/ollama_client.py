"""Ollama chat backend."""

from __future__ import annotations

import ollama

from meetdigest.summarization.base import LLMClient, Provider
from meetdigest.summarization.errors import LLMError
from meetdigest.summarization.prompts import clean_response

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


class OllamaClient(LLMClient):
    """Talks to a local (or remote) Ollama server."""

    def __init__(self, model: str, host: str | None = None) -> None:
        self._model = model
        self._host = host or DEFAULT_OLLAMA_HOST
        self._client = ollama.Client(host=self._host)

    def chat(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except Exception as exc:
            raise LLMError(
                f"ollama request to {self._host} failed: {exc}", provider=Provider.OLLAMA,
            ) from exc
        return clean_response(response["message"]["content"] or "")

    def is_available(self) -> bool:
        try:
            self._client.list()
            return True
        except Exception:
            return False
