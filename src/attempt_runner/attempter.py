from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Sequence

from rich.text import Text

from . import console
from .debugger import debug
from .execution.engine import ProcessEngine
from .executor import command_string, command_validation_error, execute
from .options import AttemptOptions


def attempt(
    options: AttemptOptions,
    command: Sequence[str],
    *,
    engine: ProcessEngine | None = None,
    sleep: Callable[[float], None] = time.sleep,
    read_line: Callable[[Text], str] | None = None,
    shell_runner: Callable[[str | Path], None] | None = None,
) -> bool:
    """Run a command up to ``options.max_attempts`` times.

    Returns True on a successful invocation, or when the debugger (entered on
    exhaustion if ``debug_on_exhaustion`` is set) passes the step or a redo
    succeeds. Invalid options return False without running anything.
    `QuitRequested` from the debugger propagates to the caller.

    Example:
        ```python
        ok = attempt(AttemptOptions(max_attempts=3, retry_delay_seconds=1.0), ["curl", "-f", url])
        ```
    """
    problem = options.validation_error() or command_validation_error(command)
    if problem is not None:
        console.error(problem)
        return False

    execute_opts = options.execute_options()
    cmd_str = command_string(command)
    max_attempts = options.max_attempts

    attempt_number = 1
    while True:
        console.info(f"Attempting ({attempt_number}/{max_attempts}):", cmd_str)
        if execute(execute_opts, command, engine=engine).success:
            return True
        if attempt_number >= max_attempts:
            break
        console.info(f"Retry in {float(options.retry_delay_seconds)} seconds.")
        sleep(options.retry_delay_seconds)
        attempt_number += 1

    console.warning("Max attempts reached.")
    if not options.debug_on_exhaustion:
        return False
    console.info("Invoking debugger. Use 'help' for help.")
    return debug(
        execute_opts,
        command,
        engine=engine,
        read_line=read_line,
        shell_runner=shell_runner,
    )
