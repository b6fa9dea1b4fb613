from __future__ import annotations

import io
from pathlib import Path

import pytest

from atr import cli
from attempt_runner import AttemptOptions, QuitRequested


def test_cli_run_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "--dir", str(tmp_path), "--", "true"])
    output = capsys.readouterr().out
    assert code == 0
    assert "Result" in output
    assert "'success': True" in output


def test_cli_run_failure(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "--", "false"])
    output = capsys.readouterr().out
    assert code == 1
    assert "Exited with code 1, expected 0: false" in output
    assert "exit_mismatch" in output


def test_cli_run_capture_and_expected_exit(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "--capture", "--expected-exit", "3", "--", "sh", "-c", "echo captured; exit 3"])
    output = capsys.readouterr().out
    assert code == 0
    assert "captured" in output


def test_cli_run_without_separator(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["run", "true"]) == 0


def test_cli_attempt_no_debug(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["attempt", "--no-debug", "--max-attempts", "2", "--delay", "0", "--", "false"])
    output = capsys.readouterr().out
    assert code == 1
    assert "Attempting (2/2): false" in output
    assert "Max attempts reached." in output


def test_cli_attempt_success(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["attempt", "--", "true"])
    output = capsys.readouterr().out
    assert code == 0
    assert "Attempting (1/3): true" in output


def test_cli_attempt_quit_returns_exit_code(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def _quit(options: AttemptOptions, command: list[str]) -> bool:
        raise QuitRequested(exit_code=1)

    monkeypatch.setattr(cli, "attempt", _quit)
    code = cli.main(["attempt", "--", "false"])
    assert code == 1
    assert "Quit requested from debugger." in capsys.readouterr().out


def test_cli_attempt_reads_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "retry.toml"
    config.write_text(
        "[options]\nmax_attempts = 4\nretry_delay_seconds = 0.5\ndebug_on_exhaustion = false\n",
        encoding="utf-8",
    )
    seen: list[AttemptOptions] = []

    def _record(options: AttemptOptions, command: list[str]) -> bool:
        seen.append(options)
        return True

    monkeypatch.setattr(cli, "attempt", _record)
    code = cli.main(["attempt", "--config", str(config), "--max-attempts", "2", "--", "make"])

    assert code == 0
    assert seen[0].max_attempts == 2
    assert seen[0].retry_delay_seconds == 0.5
    assert seen[0].debug_on_exhaustion is False


def test_cli_check_flag_disables_continue(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[AttemptOptions] = []

    def _record(options: AttemptOptions, command: list[str]) -> bool:
        seen.append(options)
        return False

    monkeypatch.setattr(cli, "attempt", _record)
    assert cli.main(["attempt", "--check", "--", "make", "test"]) == 1
    assert seen[0].continue_on_nonzero is False


def test_cli_missing_config_file_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["attempt", "--config", str(tmp_path / "missing.toml"), "--", "true"])
    assert exc.value.code == 2
    assert "config file not found" in capsys.readouterr().out


def test_cli_invalid_config_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "retry.toml"
    config.write_text("[options]\nretries = 4\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["attempt", "--config", str(config), "--", "true"])
    assert exc.value.code == 2
    assert "Unknown option" in capsys.readouterr().out


def test_cli_requires_a_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["run", "--capture"])
    assert exc.value.code == 2
    assert "a command to run is required" in capsys.readouterr().out


def test_cli_subcommand_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["attempt", "--help"])
    output = capsys.readouterr().out
    assert exc.value.code == 0
    assert "Debugger commands:" in output


def test_cli_top_level_help_examples(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--help"])
    output = capsys.readouterr().out
    assert exc.value.code == 0
    assert "Quick Examples:" in output
    assert "python -m atr run -- make test" in output


def test_cli_print_help_writes_to_requested_stream(capsys: pytest.CaptureFixture[str]) -> None:
    parser = cli.build_parser()
    buffer = io.StringIO()
    parser.print_help(file=buffer)
    output = capsys.readouterr().out
    assert output == ""
    help_text = buffer.getvalue()
    assert "Usage:" in help_text
    assert "attempt-runner CLI" in help_text
