"""Tests for run orchestration."""

from __future__ import annotations

from unittest import mock

import pytest

from meetdigest.config import Config
from meetdigest.summarization.errors import SummarizationError
from meetdigest.summarization.summarizer import SummaryResult


def _config(tmp_path) -> Config:
    config = Config()
    config.output.dir = str(tmp_path / "out")
    return config


class TestBuildRegistry:
    def test_includes_user_templates(self):
        from meetdigest.pipeline import build_registry

        config = Config()
        config.templates["standup"] = {
            "name": "Standup",
            "description": "Daily",
            "sections": [{"title": "Blockers", "instruction": "List blockers", "format": "list"}],
        }
        registry = build_registry(config)
        assert "standup" in registry
        assert "standard_meeting" in registry


class TestRenameWithTitle:
    def test_appends_slug(self, tmp_path):
        from meetdigest.pipeline import _rename_with_title

        out_dir = tmp_path / "2026-01-01_1000"
        out_dir.mkdir()
        new_dir = _rename_with_title(out_dir, "# Budget Review\n\nbody")
        assert new_dir.name == "2026-01-01_1000_budget-review"
        assert new_dir.exists()

    def test_no_title_keeps_dir(self, tmp_path):
        from meetdigest.pipeline import _rename_with_title

        out_dir = tmp_path / "2026-01-01_1000"
        out_dir.mkdir()
        assert _rename_with_title(out_dir, "no heading") == out_dir


class TestSummarizeText:
    def test_uses_config(self, tmp_path):
        from meetdigest.pipeline import summarize_text

        config = _config(tmp_path)
        config.summarization.provider = "openai"
        config.summarization.model = "gpt-test"
        config.summarization.api_key = "sk-test"
        config.summarization.template = "client_meeting"
        config.summarization.context = "ACME onboarding"

        with mock.patch(
            "meetdigest.pipeline.SummaryPipeline.generate", return_value=SummaryResult("# T", 1),
        ) as mock_generate:
            result = summarize_text(config, "Alice: hi")

        assert result == SummaryResult("# T", 1)
        args = mock_generate.call_args[0]
        assert args[0].value == "openai"
        assert args[1:] == ("gpt-test", "sk-test", "Alice: hi", "ACME onboarding", "client_meeting", 4000)

    def test_spinner_follows_progress(self, tmp_path, fake_llm):
        from meetdigest.pipeline import summarize_text

        spinner = mock.MagicMock()
        with mock.patch("meetdigest.summarization.summarizer.call_llm", fake_llm):
            summarize_text(_config(tmp_path), "Alice: hi", spinner=spinner)

        spinner.update.assert_called_with("Writing report with mistral")


class TestRunSummarize:
    def _client(self, available=True):
        client = mock.MagicMock()
        client.is_available.return_value = available
        return client

    def test_writes_report(self, tmp_path):
        from meetdigest.pipeline import run_summarize

        transcript = tmp_path / "transcript.txt"
        transcript.write_text("Alice: we agreed on the budget.")
        config = _config(tmp_path)

        with (
            mock.patch("meetdigest.pipeline._create_client", return_value=self._client()),
            mock.patch(
                "meetdigest.pipeline.summarize_text",
                return_value=SummaryResult("# Budget Review\n\n**Summary**\n\nAgreed.", 1),
            ),
        ):
            run_summarize(config, str(transcript))

        written = list((tmp_path / "out").glob("*_budget-review/summary.md"))
        assert len(written) == 1
        assert written[0].read_text() == "# Budget Review\n\n**Summary**\n\nAgreed.\n"

    def test_unavailable_backend_exits(self, tmp_path):
        from meetdigest.pipeline import run_summarize

        transcript = tmp_path / "transcript.txt"
        transcript.write_text("Alice: hi")

        with mock.patch("meetdigest.pipeline._create_client", return_value=self._client(available=False)):
            with pytest.raises(SystemExit):
                run_summarize(_config(tmp_path), str(transcript))
        assert not (tmp_path / "out").exists()

    def test_pipeline_error_exits_without_report(self, tmp_path, capsys):
        from meetdigest.pipeline import run_summarize

        transcript = tmp_path / "transcript.txt"
        transcript.write_text("Alice: hi")

        with (
            mock.patch("meetdigest.pipeline._create_client", return_value=self._client()),
            mock.patch(
                "meetdigest.pipeline.summarize_text",
                side_effect=SummarizationError("no chunk was processed successfully"),
            ),
        ):
            with pytest.raises(SystemExit):
                run_summarize(_config(tmp_path), str(transcript))

        assert "no chunk was processed successfully" in capsys.readouterr().err
        assert not (tmp_path / "out").exists()

    def test_empty_transcript_exits(self, tmp_path):
        from meetdigest.pipeline import run_summarize

        transcript = tmp_path / "transcript.txt"
        transcript.write_text("  \n")
        with pytest.raises(SystemExit):
            run_summarize(_config(tmp_path), str(transcript))
