from __future__ import annotations

import os
import shlex
import subprocess
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from rich.text import Text

from . import console
from .execution.engine import ProcessEngine
from .execution.types import QuitRequested
from .executor import command_string, execute
from .options import ExecuteOptions

DEFAULT_SHELL = "/usr/bin/env bash"
PROMPT = Text("(debug)> ", style=console.WARNING_STYLE)
HELP_TEXT = (
    "Available options:\n"
    "  h help   Print this help message.\n"
    "  p print  Print the command and expected exit code.\n"
    "  r redo   Redo the command. If successful, exit debugger.\n"
    "  s shell  Invoke an interactive shell.\n"
    "    pass   Pass this step and continue the original program.\n"
    "    fail   Fail this step and continue the original program.\n"
    "  q quit   Quit the whole program."
)


class DebugCommand(Enum):
    """Commands understood by the debugger prompt."""

    HELP = ("h", "help")
    PRINT = ("p", "print")
    REDO = ("r", "redo")
    SHELL = ("s", "shell")
    PASS = ("pass",)
    FAIL = ("fail",)
    QUIT = ("q", "quit")
    UNKNOWN = ()


def parse_debug_command(text: str) -> DebugCommand:
    """Map one line of operator input to a `DebugCommand`.

    Matching ignores case and surrounding whitespace; anything unrecognized
    becomes `DebugCommand.UNKNOWN`.

    Example:
        ```python
        assert parse_debug_command(" R ") is DebugCommand.REDO
        assert parse_debug_command("retry") is DebugCommand.UNKNOWN
        ```
    """
    word = text.strip().lower()
    for command in DebugCommand:
        if word in command.value:
            return command
    return DebugCommand.UNKNOWN


def _read_operator_line(prompt: Text) -> str:
    """Prompt on the shared console and read one line from stdin.

    Example:
        ```python
        line = _read_operator_line(PROMPT)
        ```
    """
    return console.CONSOLE.input(prompt)


def _run_shell(working_directory: str | Path) -> None:
    """Open the operator's interactive shell and block until it exits.

    Example:
        ```python
        _run_shell("/tmp")
        ```
    """
    shell = os.environ.get("SHELL") or DEFAULT_SHELL
    subprocess.run(shlex.split(shell), cwd=working_directory, check=False)


def debug(
    options: ExecuteOptions,
    command: Sequence[str],
    *,
    engine: ProcessEngine | None = None,
    read_line: Callable[[Text], str] | None = None,
    shell_runner: Callable[[str | Path], None] | None = None,
) -> bool:
    """Interactively recover a command that exhausted its attempts.

    Loops over operator input until a terminating command. Returns True for
    ``pass`` or a successful ``redo``, False for ``fail`` or end of input.
    ``quit`` raises `QuitRequested` for the caller to act on.

    Example:
        ```python
        accepted = debug(ExecuteOptions(), ["make", "test"])
        ```
    """
    read = read_line or _read_operator_line
    open_shell = shell_runner or _run_shell
    cmd_str = command_string(command)

    while True:
        try:
            line = read(PROMPT)
        except EOFError:
            console.warning("End of input, failing this step.")
            return False

        choice = parse_debug_command(line)
        if choice is DebugCommand.HELP:
            console.plain(HELP_TEXT)
        elif choice is DebugCommand.PRINT:
            console.plain(f"Execute command: {cmd_str}")
            console.plain(f"Expected exit code: {options.expected_exit_code}")
            console.plain(f"Execute options: {options!r}")
        elif choice is DebugCommand.REDO:
            if execute(options, command, engine=engine).success:
                return True
        elif choice is DebugCommand.SHELL:
            try:
                open_shell(options.working_directory)
            except OSError as exc:
                console.error("Could not start shell:", str(exc))
        elif choice is DebugCommand.PASS:
            return True
        elif choice is DebugCommand.FAIL:
            return False
        elif choice is DebugCommand.QUIT:
            raise QuitRequested(exit_code=1)
        else:
            console.plain(f"Unknown option '{line.strip()}'. Use 'help' for help.")
