"""Tests for the jadechat command line."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from jadechat.cli import cli, cli_entry
from jadechat.exceptions import ModelSetupError


def test_segment_reads_stdin_and_prints_json_lines():
    runner = CliRunner()
    result = runner.invoke(cli, ["segment"], input="intro\n```\nx = 1\n```\n$$\ny\n$$")

    assert result.exit_code == 0
    rows = [json.loads(line) for line in result.output.splitlines()]
    assert rows == [
        {"index": 0, "kind": "markdown", "text": "intro"},
        {"index": 1, "kind": "code", "text": "x = 1"},
        {"index": 2, "kind": "latex", "text": "y"},
    ]


def test_segment_kind_filter_keeps_original_indices(tmp_path):
    source = tmp_path / "message.md"
    source.write_text("intro\n```\nx = 1\n```\noutro", encoding="utf-8")

    result = CliRunner().invoke(cli, ["segment", str(source), "--kind", "code"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"index": 1, "kind": "code", "text": "x = 1"}


def test_segment_rejects_unknown_kind():
    result = CliRunner().invoke(cli, ["segment", "--kind", "table"], input="x")
    assert result.exit_code == 2


def test_render_prints_html():
    result = CliRunner().invoke(cli, ["render"], input="hi\n```\n<b>\n```")

    assert result.exit_code == 0
    assert '<div class="markdown" data-key="segment-0">' in result.output
    assert "<code>&lt;b&gt;</code>" in result.output


def test_chat_prints_final_segments(scripted_backend):
    scripted_backend.chunks = ["Sure:\n", "```\nls\n```"]

    result = CliRunner().invoke(cli, ["chat", "list files", "--instructions", "Be terse."])

    assert result.exit_code == 0, result.output
    assert result.output == "--- markdown\nSure:\n--- code\nls\n"
    assert scripted_backend.sessions[0].instructions == "Be terse."


@pytest.mark.parametrize(
    ("args", "name"),
    [
        (["chat", "hi", "--instructions", "   "], "'--instructions'"),
        (["chat", "  \n"], "'PROMPT'"),
    ],
)
def test_chat_rejects_blank_text_as_usage_error(scripted_backend, args, name):
    result = CliRunner().invoke(cli, args)

    assert result.exit_code == 2
    assert f"Invalid value for {name}: must not be blank" in result.output
    assert scripted_backend.sessions == []


def test_doctor_reports_available():
    with patch("jadechat.cli.require_apple_fm", return_value=(object(), object())) as check:
        result = CliRunner().invoke(cli, ["doctor"])

    assert result.exit_code == 0
    assert "available" in result.output
    check.assert_called_once_with("jadechat doctor")


def test_cli_entry_handles_setup_error(capfd):
    with (
        patch("jadechat.cli.cli", side_effect=ModelSetupError("jadechat doctor", "setup failed")),
        pytest.raises(SystemExit) as exc_info,
    ):
        cli_entry()

    assert exc_info.value.code == 2
    captured = capfd.readouterr()
    assert "setup failed" in captured.err
