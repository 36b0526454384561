"""Shared fixtures for meetdigest tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from meetdigest.summarization.base import Provider
from meetdigest.summarization.errors import LLMError
from meetdigest.summarization.prompts import CHUNK_SYSTEM, COMBINE_SYSTEM
from meetdigest.summarization.templates import Template, TemplateRegistry, TemplateSection


@dataclass
class RecordedCall:
    provider: Provider
    model: str
    api_key: str
    system_prompt: str
    user_prompt: str
    endpoint: str | None

    @property
    def stage(self) -> str:
        if self.system_prompt == CHUNK_SYSTEM:
            return "chunk"
        if self.system_prompt == COMBINE_SYSTEM:
            return "combine"
        return "report"


@dataclass
class FakeLLM:
    """Stands in for call_llm. Records every call and answers per stage.

    fail_chunks holds 1-based chunk indices whose extraction call raises.
    """

    report: str = "# Weekly Sync\n\n**Summary**\n\nAll good."
    fail_chunks: set[int] = field(default_factory=set)
    fail_stages: set[str] = field(default_factory=set)
    calls: list[RecordedCall] = field(default_factory=list)

    def __call__(self, provider, model, api_key, system_prompt, user_prompt, endpoint=None) -> str:
        call = RecordedCall(provider, model, api_key, system_prompt, user_prompt, endpoint)
        self.calls.append(call)
        stage = call.stage
        if stage in self.fail_stages:
            raise LLMError(f"{stage} failed", provider=provider)
        if stage == "chunk":
            index = len(self.calls_for("chunk"))
            if index in self.fail_chunks:
                raise LLMError(f"chunk {index} failed", provider=provider)
            return f"- point from chunk {index}"
        if stage == "combine":
            return "- combined points"
        return self.report

    def calls_for(self, stage: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.stage == stage]


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def simple_template() -> Template:
    return Template(
        name="Test Template",
        description="A test template",
        sections=(
            TemplateSection(title="Summary", instruction="Provide a summary", format="paragraph"),
            TemplateSection(
                title="Action Items",
                instruction="List the tasks.",
                format="list",
                item_format="Name: Task (due date)",
            ),
        ),
    )


@pytest.fixture
def registry(simple_template) -> TemplateRegistry:
    return TemplateRegistry({"standard_meeting": simple_template, "custom": simple_template})


@pytest.fixture
def long_transcript() -> str:
    """About 10,000 estimated tokens of speaker-labelled text."""
    line = "SPEAKER_00: We reviewed the budget and agreed to ship the release next week.\n"
    text = line * (40000 // len(line) + 1)
    return text[:40000]
