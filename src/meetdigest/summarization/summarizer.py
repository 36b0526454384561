"""Multi-stage meeting summarization: chunk extraction, combining, templated report."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import NamedTuple

from meetdigest.summarization import call_llm
from meetdigest.summarization.base import LLMCall, Provider
from meetdigest.summarization.chunking import chunk_text, estimate_tokens
from meetdigest.summarization.errors import LLMError, SummarizationError, TemplateError
from meetdigest.summarization.prompts import (
    Prompt,
    build_chunk_prompt,
    build_combine_prompt,
    build_report_prompt,
    clean_response,
)
from meetdigest.summarization.templates import Template, TemplateRegistry

logger = logging.getLogger(__name__)

# Tokens kept free in each chunk for the extraction prompt itself
DEFAULT_HEADROOM_TOKENS = 300
DEFAULT_OVERLAP_TOKENS = 100

ProgressCallback = Callable[[str, int, int], None]


class SummaryResult(NamedTuple):
    markdown: str
    chunk_count: int


class SummaryPipeline:
    """Turns a transcript into a templated markdown report.

    Cloud providers and short transcripts get a single report call. Long
    transcripts sent to a local Ollama model are split into chunks first;
    each chunk is reduced to bullet points, the bullet lists are merged, and
    the merged list is fed to the report call.

    The pipeline holds no per-run state, so one instance can serve
    concurrent runs from different threads.
    """

    def __init__(
        self,
        templates: TemplateRegistry,
        llm_call: LLMCall | None = None,
        *,
        headroom_tokens: int = DEFAULT_HEADROOM_TOKENS,
        overlap_tokens: int = DEFAULT_OVERLAP_TOKENS,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._templates = templates
        self._llm_call = llm_call or call_llm
        self._headroom_tokens = headroom_tokens
        self._overlap_tokens = overlap_tokens
        self._on_progress = on_progress

    def generate(
        self,
        provider: Provider,
        model: str,
        api_key: str,
        transcript: str,
        custom_context: str,
        template_id: str,
        token_threshold: int,
        endpoint: str | None = None,
    ) -> SummaryResult:
        """Summarize a transcript. Returns the cleaned report and the number of chunks used."""
        if token_threshold <= self._headroom_tokens:
            raise ValueError(
                f"token_threshold must be greater than {self._headroom_tokens}, got {token_threshold}"
            )

        template = self._resolve_template(template_id)

        def call(prompt: Prompt) -> str:
            return self._llm_call(provider, model, api_key, prompt.system, prompt.user, endpoint)

        total_tokens = estimate_tokens(transcript)
        logger.info(
            "Summarizing %d tokens with %s/%s (threshold %d)",
            total_tokens, provider.value, model, token_threshold,
        )

        if not provider.is_local or total_tokens < token_threshold:
            logger.info("Using single-pass summarization")
            content, chunk_count = transcript, 1
        else:
            logger.info("Using multi-level summarization")
            content, chunk_count = self._summarize_chunks(call, transcript, token_threshold)

        logger.info("Generating final report with template '%s'", template_id)
        self._report("report", 1, 1)
        raw = call(build_report_prompt(template_id, template, content, custom_context))
        return SummaryResult(clean_response(raw), chunk_count)

    def _resolve_template(self, template_id: str) -> Template:
        try:
            return self._templates.lookup(template_id)
        except TemplateError as exc:
            raise SummarizationError(f"template '{template_id}' could not be loaded: {exc}") from exc

    def _summarize_chunks(
        self, call: Callable[[Prompt], str], transcript: str, token_threshold: int,
    ) -> tuple[str, int]:
        chunks = chunk_text(transcript, token_threshold - self._headroom_tokens, self._overlap_tokens)
        summaries, failures = self._extract(call, chunks)

        if not summaries:
            raise SummarizationError(
                f"multi-level summarization failed: no chunk was processed successfully "
                f"({failures} of {len(chunks)} failed)"
            )
        logger.info("Processed %d of %d chunks successfully", len(summaries), len(chunks))

        if len(summaries) == 1:
            return summaries[0], 1

        logger.info("Combining %d chunk summaries", len(summaries))
        self._report("combine", 1, 1)
        return call(build_combine_prompt(summaries)), len(summaries)

    def _extract(self, call: Callable[[Prompt], str], chunks: list[str]) -> tuple[list[str], int]:
        """Run extraction over chunks in order, skipping the ones that fail."""
        summaries: list[str] = []
        failures = 0
        total = len(chunks)
        for i, chunk in enumerate(chunks, start=1):
            self._report("chunk", i, total)
            try:
                summaries.append(call(build_chunk_prompt(chunk)))
            except LLMError as exc:
                failures += 1
                logger.warning("Failed processing chunk %d/%d: %s", i, total, exc)
                continue
            logger.info("Chunk %d/%d processed", i, total)
        return summaries, failures

    def _report(self, stage: str, index: int, total: int) -> None:
        if self._on_progress is not None:
            self._on_progress(stage, index, total)
