from __future__ import annotations

import argparse
from dataclasses import fields, replace
from functools import partial
from pathlib import Path
from typing import Any, Never, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich_argparse import RawTextRichHelpFormatter
from attempt_runner import AttemptOptions, QuitRequested, attempt, execute

_CONSOLE = Console(no_color=False, soft_wrap=True)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m atr")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def _result_payload(value: object) -> dict[str, Any]:
    """Convert an execute result into a printable mapping.

    Example:
        ```python
        payload = _result_payload(result)
        ```
    """
    payload = {field.name: getattr(value, field.name) for field in fields(value)}  # type: ignore[arg-type]
    if payload.get("failure") is not None:
        payload["failure"] = payload["failure"].value
    return payload


def _add_execute_arguments(parser: argparse.ArgumentParser) -> None:
    """Register options shared by `run` and `attempt`.

    Example:
        ```python
        _add_execute_arguments(run_cmd)
        ```
    """
    parser.add_argument(
        "--config",
        help=(
            "TOML file with default options, under [options] or at the root.\n"
            "Flags given on the command line override file values."
        ),
    )
    parser.add_argument(
        "--dir",
        dest="working_directory",
        help="Working directory for the command (default: current directory).",
    )
    parser.add_argument(
        "--expected-exit",
        dest="expected_exit_code",
        type=int,
        help="Exit code that counts as success (default: 0).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Treat a non-zero exit as a fault inside the process runner.",
    )
    parser.add_argument(
        "cmd",
        nargs=argparse.REMAINDER,
        metavar="-- COMMAND ...",
        help="Program and arguments to run.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for running and retrying commands.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m atr",
        description=(
            "attempt-runner CLI\n"
            "Run a command once, or retry it with a delay and an\n"
            "interactive debugger when every attempt fails."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m atr run -- make test\n"
            "  python -m atr run --capture --dir /tmp -- ls -l\n"
            "  python -m atr attempt --max-attempts 5 --delay 2 -- curl -f http://localhost:8080/health\n"
            "  python -m atr attempt --no-debug --expected-exit 1 -- grep needle haystack.txt\n"
            "  python -m atr attempt --config retry.toml -- ./deploy.sh"
        ),
        formatter_class=_HELP_FORMATTER,
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Run a command once and report its classified result.",
        description=(
            "Run a command once.\n"
            "Exits 0 when the command exits with the expected code, 1 otherwise."
        ),
        epilog=(
            "Examples:\n"
            "  python -m atr run -- true\n"
            "  python -m atr run --capture -- git status --short"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    run_cmd.add_argument(
        "--capture",
        action="store_true",
        help="Capture stdout into the result instead of streaming it.",
    )
    _add_execute_arguments(run_cmd)

    attempt_cmd = sub.add_parser(
        "attempt",
        help="Retry a command and open the debugger when attempts run out.",
        description=(
            "Retry a command up to --max-attempts times with --delay between tries.\n"
            "When every attempt fails the interactive debugger opens unless --no-debug is set."
        ),
        epilog=(
            "Debugger commands:\n"
            "  h help, p print, r redo, s shell, pass, fail, q quit"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    attempt_cmd.add_argument(
        "--max-attempts",
        type=int,
        help="Maximum number of invocations (default: 3).",
    )
    attempt_cmd.add_argument(
        "--delay",
        dest="retry_delay_seconds",
        type=float,
        help="Seconds to wait between attempts (default: 3.0).",
    )
    attempt_cmd.add_argument(
        "--no-debug",
        action="store_true",
        help="Return failure on exhaustion instead of opening the debugger.",
    )
    _add_execute_arguments(attempt_cmd)

    return parser


def _command_vector(parser: argparse.ArgumentParser, args: argparse.Namespace) -> list[str]:
    """Return the command to run, dropping a leading `--` separator.

    Example:
        ```python
        cmd = _command_vector(parser, args)
        ```
    """
    cmd = list(args.cmd)
    if cmd and cmd[0] == "--":
        cmd = cmd[1:]
    if not cmd:
        parser.error("a command to run is required after the options")
    return cmd


def build_options(args: argparse.Namespace) -> AttemptOptions:
    """Merge config file values with explicit command line flags.

    Example:
        ```python
        options = build_options(args)
        ```
    """
    options = AttemptOptions.from_file(args.config) if args.config else AttemptOptions()
    overrides: dict[str, Any] = {}
    if args.working_directory is not None:
        overrides["working_directory"] = args.working_directory
    if args.expected_exit_code is not None:
        overrides["expected_exit_code"] = args.expected_exit_code
    if args.check:
        overrides["continue_on_nonzero"] = False
    if getattr(args, "capture", False):
        overrides["capture_output"] = True
    if getattr(args, "max_attempts", None) is not None:
        overrides["max_attempts"] = args.max_attempts
    if getattr(args, "retry_delay_seconds", None) is not None:
        overrides["retry_delay_seconds"] = args.retry_delay_seconds
    if getattr(args, "no_debug", False):
        overrides["debug_on_exhaustion"] = False
    return replace(options, **overrides)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `atr` CLI command handler.

    Example:
        ```python
        code = main(["attempt", "--no-debug", "--", "false"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    cmd = _command_vector(parser, args)
    if args.config and not Path(args.config).is_file():
        parser.error(f"config file not found: {args.config}")
    try:
        options = build_options(args)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "run":
        result = execute(options.execute_options(), cmd)
        style = "green" if result.success else "red"
        _CONSOLE.print(Panel.fit(Pretty(_result_payload(result)), title="Result", border_style=style))
        return 0 if result.success else 1
    if args.command == "attempt":
        try:
            succeeded = attempt(options, cmd)
        except QuitRequested as exc:
            _CONSOLE.print(Panel.fit("Quit requested from debugger.", style="bold yellow"))
            return exc.exit_code
        return 0 if succeeded else 1

    parser.error("Unhandled command")
