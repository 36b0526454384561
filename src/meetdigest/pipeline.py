"""Run orchestration: transcript file -> summary pipeline -> report on disk."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import click

from meetdigest.config import Config
from meetdigest.output.markdown import extract_title, format_report, slugify
from meetdigest.progress import Spinner
from meetdigest.summarization import create_client
from meetdigest.summarization.errors import MeetdigestError
from meetdigest.summarization.summarizer import SummaryPipeline, SummaryResult
from meetdigest.summarization.templates import TemplateRegistry

logger = logging.getLogger(__name__)


def _get_output_dir(config: Config) -> Path:
    """Create and return a timestamped output directory."""
    base = config.output.resolved_dir
    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M")
    out_dir = base / timestamp
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def build_registry(config: Config) -> TemplateRegistry:
    """Built-in templates overlaid with the ones defined in the config file."""
    return TemplateRegistry.builtin().with_user_templates(config.templates)


def _create_client(config: Config):
    summ = config.summarization
    return create_client(summ.resolved_provider, summ.model, summ.resolved_api_key, summ.endpoint)


def _progress_label(model: str, stage: str, index: int, total: int) -> str:
    if stage == "chunk":
        return f"Summarizing chunk {index}/{total} with {model}"
    if stage == "combine":
        return f"Combining chunk summaries with {model}"
    return f"Writing report with {model}"


def summarize_text(config: Config, transcript_text: str, spinner: Spinner | None = None) -> SummaryResult:
    """Run the summary pipeline for a transcript using the configured provider and template."""
    summ = config.summarization

    def on_progress(stage: str, index: int, total: int) -> None:
        if spinner is not None:
            spinner.update(_progress_label(summ.model, stage, index, total))

    pipeline = SummaryPipeline(
        build_registry(config),
        headroom_tokens=summ.prompt_headroom,
        overlap_tokens=summ.chunk_overlap,
        on_progress=on_progress,
    )
    return pipeline.generate(
        summ.resolved_provider,
        summ.model,
        summ.resolved_api_key,
        transcript_text,
        summ.context,
        summ.template,
        summ.token_threshold,
        endpoint=summ.endpoint,
    )


def _rename_with_title(out_dir: Path, markdown: str) -> Path:
    """Append a slug of the report title to the output dir. Returns the final dir."""
    title = extract_title(markdown)
    title_slug = slugify(title) if title else ""
    if not title_slug:
        return out_dir

    new_dir = out_dir.parent / f"{out_dir.name}_{title_slug}"
    try:
        out_dir.rename(new_dir)
    except OSError:
        logger.warning("Could not rename output directory", exc_info=True)
        return out_dir
    return new_dir


def run_summarize(config: Config, transcript_file: str) -> None:
    """Summarize a transcript file."""
    transcript_text = Path(transcript_file).read_text()
    if not transcript_text.strip():
        click.echo(f"Error: {transcript_file} is empty.", err=True)
        raise SystemExit(1)

    summ = config.summarization
    try:
        client = _create_client(config)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from None

    if not client.is_available():
        click.echo(
            f"Error: {summ.provider} is not reachable at {summ.endpoint or 'its default endpoint'}. "
            "Is the server running?",
            err=True,
        )
        raise SystemExit(1)

    label = f"Summarizing with {summ.model}"
    try:
        with Spinner(label) as spinner:
            result = summarize_text(config, transcript_text, spinner=spinner)
            spinner.update(label)
    except (MeetdigestError, ValueError) as exc:
        click.echo(f"\nError: {exc}", err=True)
        raise SystemExit(1) from None

    out_dir = _get_output_dir(config)
    report = format_report(result.markdown)
    (out_dir / "summary.md").write_text(report)
    out_dir = _rename_with_title(out_dir, report)
    summary_path = out_dir / "summary.md"

    click.echo(f"\n{report}")
    if result.chunk_count > 1:
        click.echo(f"Summarized in {result.chunk_count} chunks.")
    click.echo(f"Summary saved to {summary_path}")
