"""Error types raised by the summarization core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meetdigest.summarization.base import Provider


class MeetdigestError(Exception):
    """Base for all errors surfaced to the caller."""


class LLMError(MeetdigestError):
    """An LLM backend call failed. The original exception is kept as __cause__."""

    def __init__(self, message: str, *, provider: Provider | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class SummarizationError(MeetdigestError):
    """A summarization run could not produce a report."""


class TemplateError(MeetdigestError):
    """Base for template loading problems."""


class TemplateValidationError(TemplateError):
    """A template definition is malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TemplateNotFoundError(TemplateError):
    """No template is registered under the requested id."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"unknown template id '{template_id}'")
        self.template_id = template_id
