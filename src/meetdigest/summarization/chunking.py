"""Token estimation and overlapping transcript chunking."""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)

# Thresholds and chunk sizes are calibrated against this ratio, not a real tokenizer.
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def chunk_text(text: str, chunk_size_tokens: int, overlap_tokens: int) -> list[str]:
    """Split text into overlapping windows sized in estimated tokens.

    Each window is cut at the last whitespace before its nominal end so words
    stay intact. If a window has no whitespace the raw boundary is used.
    Windows never leave a gap: when snapping moves a cut back past the next
    nominal start, the next window starts at the cut instead.
    """
    if not text or chunk_size_tokens <= 0:
        return []

    chunk_chars = chunk_size_tokens * CHARS_PER_TOKEN
    overlap_chars = max(overlap_tokens, 0) * CHARS_PER_TOKEN
    total = len(text)

    if total <= chunk_chars:
        logger.info("Text fits in one chunk (%d chars)", total)
        return [text]

    step = max(chunk_chars - overlap_chars, 1)
    chunks: list[str] = []
    start = 0

    while start < total:
        end = min(start + chunk_chars, total)
        if end < total:
            boundary = end
            while boundary > start and not text[boundary].isspace():
                boundary -= 1
            if boundary > start:
                end = boundary

        chunks.append(text[start:end])
        if end == total:
            break
        start = min(start + step, end)

    logger.info(
        "Created %d chunks (chunk_size=%d tokens, overlap=%d tokens)",
        len(chunks), chunk_size_tokens, overlap_tokens,
    )
    return chunks
