from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

SIGNAL_EXIT_BASE = 128
SIGNAL_EXIT_CEILING = 255


class FailureKind(Enum):
    """Classification attached to a negative `ExecuteResult`."""

    VALIDATION = "validation"
    SIGNAL_TERMINATION = "signal_termination"
    EXIT_MISMATCH = "exit_mismatch"
    LAUNCH_FAILURE = "launch_failure"
    UNEXPECTED_FAULT = "unexpected_fault"


@dataclass(slots=True)
class ProcessRequest:
    """Normalized request sent to a process engine.

    Example:
        ```python
        req = ProcessRequest(command=["ls", "-l"], working_directory="/tmp", capture_output=True, check=False)
        ```
    """

    command: Sequence[str]
    working_directory: str | Path
    capture_output: bool
    check: bool


@dataclass(slots=True)
class ProcessOutcome:
    """Normalized response returned by a process engine.

    Example:
        ```python
        out = ProcessOutcome(returncode=0, stdout="hello\\n")
        ```
    """

    returncode: int
    stdout: str | None = None


@dataclass(slots=True)
class ExecuteResult:
    """Classified result of one invocation returned by `execute`.

    Example:
        ```python
        result = ExecuteResult(success=True, exit_code=0, expected_exit_code=0)
        ```
    """

    success: bool
    exit_code: int | None = None
    expected_exit_code: int | None = None
    captured_output: str | None = None
    error: BaseException | None = None
    failure: FailureKind | None = None

    @property
    def signal_number(self) -> int | None:
        """Return the signal inferred from the exit code, if any.

        Shells report a signalled child as ``128 + N``; Python reports a
        directly signalled child as ``-N``.

        Example:
            ```python
            assert ExecuteResult(success=False, exit_code=137).signal_number == 9
            ```
        """
        return signal_from_exit_code(self.exit_code)


def signal_from_exit_code(exit_code: int | None) -> int | None:
    """Return the signal number encoded in an exit code, or None.

    The shell range is exclusive on both ends: 128 and 255 are ordinary codes.

    Example:
        ```python
        assert signal_from_exit_code(143) == 15
        assert signal_from_exit_code(255) is None
        ```
    """
    if exit_code is None:
        return None
    if SIGNAL_EXIT_BASE < exit_code < SIGNAL_EXIT_CEILING:
        return exit_code - SIGNAL_EXIT_BASE
    if exit_code < 0:
        return -exit_code
    return None


class QuitRequested(Exception):
    """Operator asked to terminate the whole program from the debugger.

    Raised instead of exiting the interpreter so an embedding host decides
    how to stop. The CLI converts it into a process exit status.

    Example:
        ```python
        raise QuitRequested(exit_code=1)
        ```
    """

    def __init__(self, exit_code: int = 1) -> None:
        """Store the exit status the caller should terminate with.

        Example:
            ```python
            request = QuitRequested(exit_code=1)
            ```
        """
        super().__init__(f"Quit requested with exit code {exit_code}")
        self.exit_code = exit_code
