"""Unit tests for the CLI — Typer command registration and snapshot output.

The boto3 bridge is replaced with an in-memory client so no network call
is made.
"""

from __future__ import annotations

import logging

import pytest
from typer.testing import CliRunner

from pipewatch.cli.app import app
from pipewatch.cli.commands import snapshot_cmd as snapshot_module

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Commands reconfigure logging; restore the root logger afterwards."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


@pytest.fixture
def fake_remote(monkeypatch, make_client, make_state_payload):
    """Swap the boto3 bridge in the snapshot command for a fake client."""
    client = make_client(
        {
            "integration-api": make_state_payload(
                "integration-api",
                [("Build", [("Compile", "Succeeded")]), ("Deploy", [("Push", "Failed")])],
            ),
            "integration-web": RuntimeError("throttled"),
            "other-batch": make_state_payload("other-batch"),
        }
    )
    monkeypatch.setattr(snapshot_module, "CodePipelineClient", lambda *args, **kwargs: client)
    return client


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "watch" in result.output
        assert "snapshot" in result.output

    def test_watch_command_exists(self):
        result = runner.invoke(app, ["watch", "--help"])
        assert result.exit_code == 0
        assert "--pattern" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "pipewatch" in result.output


# ---------------------------------------------------------------------------
# Test: snapshot command
# ---------------------------------------------------------------------------


class TestSnapshotCommand:
    def test_prints_watched_pipelines(self, fake_remote):
        result = runner.invoke(app, ["snapshot"])
        assert result.exit_code == 0, result.output
        assert "integration-api" in result.output
        assert "Failed" in result.output
        assert "other-batch" not in result.output

    def test_reports_unavailable_pipelines(self, fake_remote):
        result = runner.invoke(app, ["snapshot"])
        assert "Unavailable" in result.output
        assert "integration-web" in result.output

    def test_detail_panel(self, fake_remote):
        result = runner.invoke(app, ["snapshot", "--detail", "integration-api"])
        assert result.exit_code == 0, result.output
        assert "Compile" in result.output
        assert "Push" in result.output

    def test_unknown_detail_exits_nonzero(self, fake_remote):
        result = runner.invoke(app, ["snapshot", "--detail", "missing"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_pattern_option(self, fake_remote):
        result = runner.invoke(app, ["snapshot", "--pattern", "^other"])
        assert result.exit_code == 0, result.output
        assert "other-batch" in result.output
        assert "integration-api" not in result.output

    def test_list_failure_exits_nonzero(self, monkeypatch, make_client):
        client = make_client({}, list_error=ConnectionError("endpoint unreachable"))
        monkeypatch.setattr(snapshot_module, "CodePipelineClient", lambda *args, **kwargs: client)
        result = runner.invoke(app, ["snapshot"])
        assert result.exit_code == 1
        assert "Refresh failed" in result.output

    def test_invalid_pattern_is_a_usage_error(self, fake_remote):
        result = runner.invoke(app, ["snapshot", "--pattern", "([bad"])
        assert result.exit_code == 2
