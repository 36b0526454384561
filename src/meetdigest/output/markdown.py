"""Markdown report helpers."""

from __future__ import annotations

import re


def extract_title(markdown: str) -> str | None:
    """Return the text of the first H1 heading, or None if there is none."""
    for line in markdown.splitlines():
        if line.startswith("# "):
            return line[2:].strip() or None
    return None


def slugify(text: str, max_length: int = 50) -> str:
    """Convert text to a filesystem-safe slug."""
    slug = text.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"[\s]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug[:max_length].rstrip("-")


def format_report(markdown: str) -> str:
    """Normalize a report for writing to disk: stripped, single trailing newline."""
    return markdown.strip() + "\n"
