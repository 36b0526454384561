"""Provider identifiers and the abstract LLM client."""

from __future__ import annotations

import abc
import enum
from typing import Protocol


class Provider(str, enum.Enum):
    """LLM backends. Only OLLAMA runs locally and gets chunked summarization."""

    OLLAMA = "ollama"
    OPENAI = "openai"
    CLAUDE = "claude"
    GROQ = "groq"
    OPENROUTER = "openrouter"

    @classmethod
    def parse(cls, value: str) -> Provider:
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ValueError(f"unknown provider '{value}' (expected one of: {allowed})") from None

    @property
    def is_local(self) -> bool:
        return self is Provider.OLLAMA


class LLMClient(abc.ABC):
    """Base class for chat backends."""

    @abc.abstractmethod
    def chat(self, system_prompt: str, user_prompt: str) -> str:
        """Send one system + user exchange and return the cleaned reply text."""

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Check if the backend is reachable."""


class LLMCall(Protocol):
    """Signature of the function the summarizer uses for every model call."""

    def __call__(
        self,
        provider: Provider,
        model: str,
        api_key: str,
        system_prompt: str,
        user_prompt: str,
        endpoint: str | None = None,
    ) -> str: ...
