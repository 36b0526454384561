from __future__ import annotations

from typing import TYPE_CHECKING

from meetdigest.summarization.base import Provider

if TYPE_CHECKING:
    from meetdigest.summarization.base import LLMClient


def create_client(
    provider: Provider,
    model: str,
    api_key: str = "",
    endpoint: str | None = None,
) -> LLMClient:
    """Create the chat backend for a provider."""
    if provider is Provider.OLLAMA:
        from meetdigest.summarization.ollama_client import OllamaClient

        return OllamaClient(model, host=endpoint)
    else:
        from meetdigest.summarization.openai_client import OpenAICompatibleClient

        return OpenAICompatibleClient(provider, model, api_key=api_key, endpoint=endpoint)


def call_llm(
    provider: Provider,
    model: str,
    api_key: str,
    system_prompt: str,
    user_prompt: str,
    endpoint: str | None = None,
) -> str:
    """Run a single chat exchange against the given provider. Raises LLMError on failure."""
    return create_client(provider, model, api_key, endpoint).chat(system_prompt, user_prompt)
