from __future__ import annotations

from typing import Any, Sequence

from . import console
from .execution.engine import ProcessEngine
from .execution.subprocess_engine import SubprocessEngine
from .execution.types import (
    ExecuteResult,
    FailureKind,
    ProcessRequest,
    signal_from_exit_code,
)
from .options import ExecuteOptions


def command_string(command: Sequence[str]) -> str:
    """Join a command vector for display.

    Example:
        ```python
        assert command_string(["ls", "-l"]) == "ls -l"
        ```
    """
    return " ".join(str(part) for part in command)


def command_validation_error(command: Sequence[str]) -> str | None:
    """Return a description of an invalid command vector, or None.

    Example:
        ```python
        assert command_validation_error([]) == "Command cannot be empty."
        ```
    """
    if not command or not command[0]:
        return "Command cannot be empty."
    return None


def _fault_details(exc: BaseException) -> dict[str, Any]:
    """Collect an exception's type, message and attributes for dumping.

    Example:
        ```python
        details = _fault_details(ValueError("bad"))
        ```
    """
    details: dict[str, Any] = {
        "type": f"{type(exc).__module__}.{type(exc).__qualname__}",
        "message": str(exc),
        "args": exc.args,
    }
    details.update({key: value for key, value in vars(exc).items() if not key.startswith("_")})
    if exc.__cause__ is not None:
        details["cause"] = repr(exc.__cause__)
    return details


def _classify(exit_code: int, expected: int, cmd_str: str, captured: str | None) -> ExecuteResult:
    """Turn a completed invocation's exit code into a result, reporting failures.

    Example:
        ```python
        result = _classify(1, 0, "false", None)
        ```
    """
    result = ExecuteResult(
        success=False,
        exit_code=exit_code,
        expected_exit_code=expected,
        captured_output=captured,
    )
    if exit_code == expected:
        result.success = True
        return result
    signal_number = signal_from_exit_code(exit_code)
    if signal_number is not None:
        console.warning(f"Likely terminated by signal {signal_number}:", cmd_str)
        result.failure = FailureKind.SIGNAL_TERMINATION
        return result
    console.error(f"Exited with code {exit_code}, expected {expected}:", cmd_str)
    result.failure = FailureKind.EXIT_MISMATCH
    return result


def execute(
    options: ExecuteOptions,
    command: Sequence[str],
    *,
    engine: ProcessEngine | None = None,
) -> ExecuteResult:
    """Run a command once and classify its exit code.

    Never raises: invalid options, launch failures and unexpected faults all
    come back as a result with ``success=False`` and a printed diagnostic.

    Example:
        ```python
        result = execute(ExecuteOptions(working_directory="/tmp"), ["ls", "-l"])
        if not result.success:
            print(result.failure)
        ```
    """
    problem = options.validation_error() or command_validation_error(command)
    if problem is not None:
        console.error(problem)
        return ExecuteResult(success=False, failure=FailureKind.VALIDATION)

    cmd_str = command_string(command)
    runner = engine or SubprocessEngine()
    try:
        outcome = runner.run(
            ProcessRequest(
                command=command,
                working_directory=options.working_directory,
                capture_output=options.capture_output,
                check=not options.continue_on_nonzero,
            )
        )
    except OSError as exc:
        console.error("I/O exception during execution:", cmd_str)
        console.error("    Message:", str(exc))
        return ExecuteResult(
            success=False,
            expected_exit_code=options.expected_exit_code,
            error=exc,
            failure=FailureKind.LAUNCH_FAILURE,
        )
    except Exception as exc:
        console.error("Execution failed:", cmd_str)
        console.error("    Exception:")
        console.dump(_fault_details(exc))
        return ExecuteResult(
            success=False,
            expected_exit_code=options.expected_exit_code,
            error=exc,
            failure=FailureKind.UNEXPECTED_FAULT,
        )

    captured = outcome.stdout if options.capture_output else None
    return _classify(outcome.returncode, options.expected_exit_code, cmd_str, captured)
