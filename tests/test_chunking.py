"""Tests for token estimation and chunking."""

from __future__ import annotations

from meetdigest.summarization.chunking import chunk_text, estimate_tokens


def _words(n: int) -> str:
    return " ".join(f"w{i}" for i in range(n))


def _spans(text: str, chunks: list[str]) -> list[tuple[int, int]]:
    """Locate each chunk in text, searching forward from the previous chunk's start."""
    spans = []
    pos = 0
    for chunk in chunks:
        start = text.index(chunk, pos)
        spans.append((start, start + len(chunk)))
        pos = start
    return spans


class TestEstimateTokens:
    def test_empty(self):
        assert estimate_tokens("") == 0

    def test_exact_multiple(self):
        assert estimate_tokens("abcdefgh") == 2

    def test_rounds_up(self):
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("a") == 1


class TestChunkText:
    def test_empty_text(self):
        assert chunk_text("", 100, 10) == []

    def test_zero_chunk_size(self):
        assert chunk_text("some text", 0, 0) == []

    def test_short_text_single_chunk_unmodified(self):
        text = "  Hello world.\nSecond line.  "
        assert chunk_text(text, 100, 10) == [text]

    def test_text_exactly_at_budget_is_single_chunk(self):
        text = "a" * 40
        assert chunk_text(text, 10, 2) == [text]

    def test_splits_long_text(self):
        text = _words(500)
        chunks = chunk_text(text, 50, 10)
        assert len(chunks) > 1
        assert all(len(c) <= 200 for c in chunks)

    def test_cuts_on_whitespace(self):
        text = _words(500)
        words = set(text.split())
        for chunk in chunk_text(text, 50, 10)[:-1]:
            # the last word of every non-final chunk is a complete word
            assert chunk.split()[-1] in words
            assert not chunk.endswith(" ")

    def test_full_coverage_without_gaps(self):
        text = _words(2000)
        chunks = chunk_text(text, 40, 5)
        spans = _spans(text, chunks)
        assert spans[0][0] == 0
        assert spans[-1][1] == len(text)
        for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
            assert next_start <= prev_end

    def test_zero_overlap_terminates_and_covers(self):
        text = _words(1000)
        chunks = chunk_text(text, 25, 0)
        spans = _spans(text, chunks)
        assert spans[-1][1] == len(text)
        for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
            assert next_start <= prev_end

    def test_overlap_larger_than_chunk_still_progresses(self):
        text = _words(200)
        chunks = chunk_text(text, 10, 50)
        assert chunks
        assert chunks[-1].endswith("w199")

    def test_no_whitespace_falls_back_to_raw_boundary(self):
        text = "x" * 1000
        chunks = chunk_text(text, 50, 0)
        assert chunks == ["x" * 200] * 5

    def test_overlap_repeats_content(self):
        text = "x" * 1000
        chunks = chunk_text(text, 50, 10)
        # step is 200 - 40 = 160 chars
        assert len(chunks[0]) == 200
        assert "".join(c[:160] for c in chunks[:-1]) + chunks[-1] == text

    def test_every_word_survives(self):
        text = _words(3000)
        chunks = chunk_text(text, 100, 10)
        seen = set()
        for chunk in chunks:
            seen.update(chunk.split())
        assert set(text.split()) <= seen
