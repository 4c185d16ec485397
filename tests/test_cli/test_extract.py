"""Tests for the extract CLI command."""

import json

import pytest
from click.testing import CliRunner

from src.cli import main


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def runner():
    return CliRunner()


LUNCH = "Let's have lunch at Joe's Diner tomorrow at 12:30pm to discuss the project."


class TestExtractCommand:
    """Tests for `event-extractor extract`."""

    def test_extract_text(self, runner):
        result = runner.invoke(
            main,
            ["extract", LUNCH, "--subject", "Catch up", "--reference-date", "2024-03-15"],
        )

        assert result.exit_code == 0, result.output
        events = json.loads(result.stdout)
        assert len(events) == 1
        assert events[0]["title"] == "lunch"
        assert events[0]["date"] == "2024-03-16"
        assert events[0]["time"] == "12:30"
        assert events[0]["location"] == "Joe's Diner"
        assert events[0]["type"] == "social"

    def test_extract_from_file(self, runner, tmp_path):
        message = tmp_path / "message.txt"
        message.write_text(LUNCH)

        result = runner.invoke(
            main, ["extract", "--file", str(message), "--reference-date", "2024-03-15"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["date"] == "2024-03-16"

    def test_extract_from_stdin(self, runner):
        result = runner.invoke(
            main, ["extract", "--file", "-", "--reference-date", "2024-03-15"], input=LUNCH
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["time"] == "12:30"

    def test_no_events_prints_empty_array(self, runner):
        result = runner.invoke(main, ["extract", "Thanks for your help with the report."])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []

    def test_min_confidence_override(self, runner):
        result = runner.invoke(
            main,
            ["extract", "Lunch tomorrow at 12:30pm", "--min-confidence", "0.95"],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []

    def test_missing_input(self, runner):
        result = runner.invoke(main, ["extract"])

        assert result.exit_code == 2
        assert "Provide the message TEXT or --file" in result.output

    def test_bad_reference_date(self, runner):
        result = runner.invoke(main, ["extract", LUNCH, "--reference-date", "15/03/2024"])

        assert result.exit_code == 2

    def test_debug_flag(self, runner, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        result = runner.invoke(main, ["--debug", "extract", LUNCH, "--reference-date", "2024-03-15"])

        assert result.exit_code == 0, result.output
