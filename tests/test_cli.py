"""Smoke tests for the CLI."""

import json
from datetime import datetime

import pytest
from typer.testing import CliRunner

from daytrace.cli import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def day_file(tmp_path):
    """Write a small day of activity to disk."""
    data = {
        "day": "2026-03-02",
        "visits": [
            {
                "url": "https://realpython.com/async-io-python/",
                "title": "Python asyncio event loop tutorial - Real Python",
                "timestamp": datetime(2026, 3, 2, 10, 1).isoformat(),
            },
            {
                "url": "https://docs.python.org/3/library/asyncio-eventloop.html",
                "title": "Python asyncio event loop internals explained",
                "timestamp": datetime(2026, 3, 2, 10, 3).isoformat(),
            },
        ],
        "searches": [
            {
                "query": "python asyncio event loop",
                "timestamp": datetime(2026, 3, 2, 10, 0).isoformat(),
                "engine": "google",
            },
        ],
        "turns": [
            {
                "prompt": "Explain how asyncio tasks are scheduled",
                "timestamp": datetime(2026, 3, 2, 11, 0).isoformat(),
                "conversation_file": "one.jsonl",
            },
        ],
    }
    path = tmp_path / "day.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def config_file(tmp_path):
    """An empty config file so the run uses defaults."""
    path = tmp_path / ".daytrace.toml"
    path.write_text("")
    return path


class TestCLI:
    """Tests for the CLI entry point."""

    def test_main_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "extract" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "daytrace" in result.output

    def test_extract_json(self, runner: CliRunner, day_file, config_file) -> None:
        result = runner.invoke(
            app, ["extract", str(day_file), "--json", "--config", str(config_file)]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert set(payload) == {"clusters", "task_sessions", "missions", "unified_sessions"}
        assert len(payload["clusters"]) == 1
        assert payload["task_sessions"][0]["task_type"] == "learning"
        assert payload["missions"][0]["label"] == "python asyncio event loop"
        assert payload["unified_sessions"] == []

    def test_extract_tables(self, runner: CliRunner, day_file, config_file) -> None:
        result = runner.invoke(
            app, ["extract", str(day_file), "--config", str(config_file)]
        )
        assert result.exit_code == 0, result.output
        assert "Article clusters (1)" in result.output
        assert "Search missions (1)" in result.output

    def test_extract_missing_file(self, runner: CliRunner, tmp_path, config_file) -> None:
        result = runner.invoke(
            app, ["extract", str(tmp_path / "missing.json"), "--config", str(config_file)]
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_extract_out_of_range_flag(self, runner: CliRunner, day_file, config_file) -> None:
        result = runner.invoke(
            app,
            ["extract", str(day_file), "--config", str(config_file), "--similarity", "1.5"],
        )
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "similarity_threshold" in result.output

    def test_extract_out_of_range_env(
        self, runner: CliRunner, day_file, config_file, monkeypatch
    ) -> None:
        monkeypatch.setenv("DAYTRACE_SIMILARITY_THRESHOLD", "7")
        result = runner.invoke(app, ["extract", str(day_file), "--config", str(config_file)])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "environment" in result.output

    def test_extract_undecodable_file(self, runner: CliRunner, tmp_path, config_file) -> None:
        path = tmp_path / "day.json"
        path.write_bytes(b'{"visits": [{"url": "\xff\xfe"}]}')
        result = runner.invoke(app, ["extract", str(path), "--config", str(config_file)])
        assert result.exit_code == 1
        assert "Error" in result.output
