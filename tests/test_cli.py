"""Tests for the agentmatrix CLI.

Tests cover:
- run: JSON output on the mock path, table output, default selections
- frameworks / models: catalog listings
- configuration errors exit with status 1
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from agentmatrix.cli import cli

# Strip any real credentials from the host environment.
_CLEAN_ENV = {
    "OPENAI_API_KEY": None,
    "AGENTMATRIX_OPENAI_API_KEY": None,
    "AGENTMATRIX_LANGGRAPH_API_KEY": None,
    "AGENTMATRIX_AUTOGEN_API_KEY": None,
    "AGENTMATRIX_CREWAI_API_KEY": None,
    "AGENTMATRIX_LLAMAINDEX_API_KEY": None,
    "AGENTMATRIX_MAX_WORKERS": None,
    "AGENTMATRIX_LOG_LEVEL": None,
    "AGENTMATRIX_MOCK_LATENCY": "0",
    "COLUMNS": "200",
}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner(env=_CLEAN_ENV)


def _invoke(runner: CliRunner, args: list[str]):
    with runner.isolated_filesystem():
        return runner.invoke(cli, args)


class TestRunCommand:
    def test_json_single_combination_on_mock_path(self, runner):
        result = _invoke(runner, ["run", "Summarize AI agents", "-f", "langgraph", "-m", "gpt-41", "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["task"] == "Summarize AI agents"
        [run] = payload["runs"]
        assert run["id"] == "langgraph-gpt-41"
        assert run["source"] == "mock"
        assert run["tokens"] == 250
        assert run["cost"] == 0.0025
        assert run["quality"] == 95
        assert "error" not in run
        assert payload["highlights"]["average_tokens"] == 250

    def test_default_selection(self, runner):
        result = _invoke(runner, ["run", "Plan a launch", "--json"])

        assert result.exit_code == 0, result.output
        ids = [run["id"] for run in json.loads(result.stdout)["runs"]]
        assert ids == [
            "langgraph-gpt-41",
            "langgraph-claude-37",
            "autogen-gpt-41",
            "autogen-claude-37",
            "crewai-gpt-41",
            "crewai-claude-37",
            "llamaindex-gpt-41",
            "llamaindex-claude-37",
        ]

    def test_unknown_framework_is_reported_per_combination(self, runner):
        result = _invoke(runner, ["run", "t", "-f", "haystack", "-m", "gpt-41", "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert "haystack" in payload["runs"][0]["error"]
        assert payload["highlights"] is None

    def test_table_output(self, runner):
        result = _invoke(runner, ["run", "t", "-f", "crewai", "-m", "llama-33"])

        assert result.exit_code == 0, result.output
        assert "crewai" in result.stdout
        assert "llama-33" in result.stdout
        assert "mock" in result.stdout
        assert "Average tokens" in result.stdout

    def test_verbose_prints_outputs(self, runner):
        result = _invoke(runner, ["run", "t", "-f", "autogen", "-m", "gpt-41", "-v"])

        assert result.exit_code == 0, result.output
        assert "== autogen-gpt-41" in result.stdout
        assert "Initialized AutoGen" in result.stdout
        assert "[MOCK AutoGen OUTPUT" in result.stdout

    def test_invalid_config_exits_1(self):
        runner = CliRunner(env={**_CLEAN_ENV, "AGENTMATRIX_TIMEOUT": "soon"})
        result = _invoke(runner, ["run", "t", "--json"])

        assert result.exit_code == 1
        assert "AGENTMATRIX_TIMEOUT" in result.output


class TestCatalogCommands:
    def test_frameworks(self, runner):
        result = _invoke(runner, ["frameworks"])

        assert result.exit_code == 0, result.output
        for name in ("langgraph", "autogen", "crewai", "llamaindex", "LangGraph"):
            assert name in result.stdout

    def test_models(self, runner):
        result = _invoke(runner, ["models"])

        assert result.exit_code == 0, result.output
        for model_id in ("gpt-41", "claude-37", "llama-33", "gemini-20"):
            assert model_id in result.stdout
        assert "0.0035" in result.stdout
        assert "$0.002 per 1k" in result.stdout
