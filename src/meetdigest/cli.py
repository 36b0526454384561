"""CLI entry point for meetdigest."""

from __future__ import annotations

import logging
import os
import subprocess

import click

from meetdigest.config import Config, ensure_config_file
from meetdigest.summarization.base import Provider


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Turn meeting transcripts into structured markdown reports."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = Config.load()


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--template", "-t", "template_id", default=None, help="Report template id (see `meetdigest templates`).")
@click.option(
    "--provider",
    type=click.Choice([p.value for p in Provider]),
    default=None,
    help="LLM provider.",
)
@click.option("--model", default=None, help="Model name for the provider.")
@click.option("--context", "context_text", default=None, help="Background information for the report.")
@click.option(
    "--context-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read background information from a file.",
)
@click.option("--threshold", type=click.IntRange(min=1), default=None, help="Token count above which ollama input is chunked.")
@click.pass_context
def summarize(
    ctx: click.Context,
    file: str,
    template_id: str | None,
    provider: str | None,
    model: str | None,
    context_text: str | None,
    context_file: str | None,
    threshold: int | None,
) -> None:
    """Summarize a transcript file."""
    config = ctx.obj["config"]
    summ = config.summarization

    if context_text and context_file:
        raise click.UsageError("Use either --context or --context-file, not both.")

    if provider:
        summ.provider = provider
    if model:
        summ.model = model
    if template_id:
        summ.template = template_id
    if threshold is not None:
        summ.token_threshold = threshold
    if context_text is not None:
        summ.context = context_text
    if context_file:
        with open(context_file) as f:
            summ.context = f.read()

    from meetdigest.pipeline import run_summarize
    run_summarize(config, file)


@cli.command()
@click.pass_context
def templates(ctx: click.Context) -> None:
    """List available report templates."""
    from meetdigest.pipeline import build_registry

    config = ctx.obj["config"]
    default = config.summarization.template
    for template_id, template in build_registry(config).items():
        marker = "*" if template_id == default else " "
        click.echo(f"{marker} {template_id:<18s} {template.name}: {template.description}")


@cli.command("config")
def config_cmd() -> None:
    """Open the configuration file in your editor."""
    path = ensure_config_file()
    editor = os.environ.get("EDITOR", "nano")
    click.echo(f"Opening {path} with {editor}...")
    subprocess.run([editor, str(path)])
