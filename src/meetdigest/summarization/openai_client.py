"""OpenAI-compatible chat backend (OpenAI, Claude, Groq, OpenRouter, LM Studio, llama.cpp server)."""

from __future__ import annotations

import openai

from meetdigest.summarization.base import LLMClient, Provider
from meetdigest.summarization.errors import LLMError
from meetdigest.summarization.prompts import clean_response

DEFAULT_BASE_URLS: dict[Provider, str] = {
    Provider.OPENAI: "https://api.openai.com/v1",
    Provider.CLAUDE: "https://api.anthropic.com/v1/",
    Provider.GROQ: "https://api.groq.com/openai/v1",
    Provider.OPENROUTER: "https://openrouter.ai/api/v1",
}


def _resolve_base_url(provider: Provider, endpoint: str | None) -> str:
    if not endpoint:
        return DEFAULT_BASE_URLS[provider]
    # Local servers (LM Studio etc.) are usually configured as a bare host
    if provider is Provider.OPENAI and not endpoint.rstrip("/").endswith("/v1"):
        return endpoint.rstrip("/") + "/v1"
    return endpoint


class OpenAICompatibleClient(LLMClient):
    """Talks to any endpoint that speaks the OpenAI chat completions API."""

    def __init__(
        self,
        provider: Provider,
        model: str,
        api_key: str = "",
        endpoint: str | None = None,
    ) -> None:
        if provider not in DEFAULT_BASE_URLS:
            raise ValueError(f"{provider.value} is not an OpenAI-compatible provider")
        self._provider = provider
        self._model = model
        self._base_url = _resolve_base_url(provider, endpoint)
        # Local servers need no API key but the client insists on one
        self._client = openai.OpenAI(base_url=self._base_url, api_key=api_key or "not-needed")

    def chat(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.OpenAIError as exc:
            raise LLMError(
                f"{self._provider.value} request to {self._base_url} failed: {exc}",
                provider=self._provider,
            ) from exc
        if not response.choices:
            raise LLMError(f"{self._provider.value} returned no choices", provider=self._provider)
        return clean_response(response.choices[0].message.content or "")

    def is_available(self) -> bool:
        try:
            self._client.models.list()
            return True
        except Exception:
            return False
