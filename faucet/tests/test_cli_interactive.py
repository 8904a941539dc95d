"""Tests for interactive CLI loop functionality.

Covers:
- _run_cli_interactive: REPL-like command loop
- EOF/KeyboardInterrupt handling
- JSON argument parsing and error results
"""

import json
from unittest.mock import patch

import pytest

from faucet.adapters.cli.commands import CLICommandHandler
from faucet.core.models import WEI_PER_UNIT
from faucet.harness.environment import SandboxEnvironment
from faucet.main import _parse_command_line, _run_cli_interactive


@pytest.fixture
def handler() -> CLICommandHandler:
    """Create a handler over a small sandbox."""
    return CLICommandHandler(SandboxEnvironment(account_count=3, initial_balance=10 * WEI_PER_UNIT))


def printed_results(output: str) -> list[dict]:
    """Decode the JSON documents the loop printed, in order."""
    decoder = json.JSONDecoder()
    results = []
    index = 0
    output = output.strip()
    while index < len(output):
        result, index = decoder.raw_decode(output, index)
        results.append(result)
        while index < len(output) and output[index].isspace():
            index += 1
    return results


class TestParseCommandLine:
    def test_command_with_arguments(self) -> None:
        assert _parse_command_line('WITHDRAW {"caller": 1, "amount": "0.05"}') == (
            "withdraw",
            {"caller": 1, "amount": "0.05"},
        )

    def test_command_without_arguments(self) -> None:
        assert _parse_command_line("status") == ("status", {})

    @pytest.mark.parametrize("line", ["deploy not-json", 'deploy "x"', "deploy [0]", "deploy 5"])
    def test_rejects_bad_arguments(self, line: str) -> None:
        with pytest.raises(ValueError):
            _parse_command_line(line)


@pytest.mark.asyncio
class TestInteractiveCLILoop:
    """Test suite for interactive CLI loop."""

    async def test_cli_reads_and_executes_commands(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ['deploy {"caller": 0, "value": "0.2"}', "status", "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        results = printed_results(capsys.readouterr().out)
        assert [r["status"] for r in results] == ["success", "success"]
        assert results[1]["balance"] == "0.2"

    async def test_cli_survives_non_object_arguments(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ['deploy "x"', "status", "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        results = printed_results(capsys.readouterr().out)
        assert results[0]["status"] == "error"
        assert "JSON object" in results[0]["message"]
        # status still runs; no store has been deployed
        assert results[1]["status"] == "error"
        assert results[1]["operation"] == "status"

    async def test_cli_handles_json_parse_errors(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ["deploy not-valid-json", "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        results = printed_results(capsys.readouterr().out)
        assert results[0]["status"] == "error"
        assert "Invalid JSON" in results[0]["message"]

    async def test_cli_reports_unknown_commands(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("builtins.input", side_effect=["selfdestruct", "exit"]):
            await _run_cli_interactive(handler)

        results = printed_results(capsys.readouterr().out)
        assert "Unknown command" in results[0]["message"]

    async def test_cli_survives_unexpected_errors(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch(
            "faucet.main.run_command", side_effect=[RuntimeError("sandbox exploded"), {"status": "success"}]
        ):
            with patch("builtins.input", side_effect=["status", "status", "exit"]):
                await _run_cli_interactive(handler)

        results = printed_results(capsys.readouterr().out)
        assert results == [
            {"status": "error", "message": "sandbox exploded"},
            {"status": "success"},
        ]

    async def test_cli_handles_eof(self, handler: CLICommandHandler) -> None:
        """Test that CLI handles EOF (Ctrl+D) gracefully."""

        def input_with_eof(_: str) -> str:
            raise EOFError()

        with patch("builtins.input", side_effect=input_with_eof):
            await _run_cli_interactive(handler)

    async def test_cli_handles_keyboard_interrupt(self, handler: CLICommandHandler) -> None:
        """Test that CLI handles KeyboardInterrupt (Ctrl+C) gracefully."""
        call_count = [0]

        def input_with_interrupt(_: str) -> str:
            call_count[0] += 1
            if call_count[0] == 1:
                raise KeyboardInterrupt()
            return "exit"

        with patch("builtins.input", side_effect=input_with_interrupt):
            await _run_cli_interactive(handler)

        assert call_count[0] == 2
