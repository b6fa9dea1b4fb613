from __future__ import annotations

import math
import threading
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


def _default_options_path() -> Path:
    """Return bundled default options TOML path.

    Example:
        ```python
        path = _default_options_path()
        ```
    """
    return Path(__file__).with_name("default_options.toml")


def _read_options_toml(path: Path) -> dict[str, Any]:
    """Read an options TOML file and return the options table.

    Keys may sit under an ``[options]`` table or at the document root.

    Example:
        ```python
        raw = _read_options_toml(Path("/tmp/options.toml"))
        ```
    """
    if not path.exists():
        return {
            "working_directory": ".",
            "capture_output": False,
            "expected_exit_code": 0,
            "continue_on_nonzero": True,
            "max_attempts": 3,
            "retry_delay_seconds": 3.0,
            "debug_on_exhaustion": True,
        }
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    options_obj = raw.get("options", raw)
    if not isinstance(options_obj, dict):
        raise ValueError("Options config must be a TOML table")
    return options_obj


def _is_int(value: Any) -> bool:
    """Return True for real integers, rejecting booleans.

    Example:
        ```python
        assert _is_int(3) and not _is_int(True)
        ```
    """
    return isinstance(value, int) and not isinstance(value, bool)


_DEFAULT_OPTIONS_RAW = _read_options_toml(_default_options_path())
DEFAULT_WORKING_DIRECTORY = str(_DEFAULT_OPTIONS_RAW.get("working_directory", "."))
DEFAULT_CAPTURE_OUTPUT = bool(_DEFAULT_OPTIONS_RAW.get("capture_output", False))
DEFAULT_EXPECTED_EXIT_CODE = int(_DEFAULT_OPTIONS_RAW.get("expected_exit_code", 0))
DEFAULT_CONTINUE_ON_NONZERO = bool(_DEFAULT_OPTIONS_RAW.get("continue_on_nonzero", True))
DEFAULT_MAX_ATTEMPTS = int(_DEFAULT_OPTIONS_RAW.get("max_attempts", 3))
DEFAULT_RETRY_DELAY_SECONDS = float(_DEFAULT_OPTIONS_RAW.get("retry_delay_seconds", 3.0))
DEFAULT_DEBUG_ON_EXHAUSTION = bool(_DEFAULT_OPTIONS_RAW.get("debug_on_exhaustion", True))
MAX_RETRY_DELAY_SECONDS = threading.TIMEOUT_MAX


@dataclass(frozen=True, slots=True)
class ExecuteOptions:
    """Options for a single command invocation.

    Values are not checked on construction; `validation_error` reports the
    first problem so callers can turn it into a negative result.

    Example:
        ```python
        options = ExecuteOptions(working_directory="/tmp", capture_output=True)
        ```
    """

    working_directory: str | Path = DEFAULT_WORKING_DIRECTORY
    capture_output: bool = DEFAULT_CAPTURE_OUTPUT
    expected_exit_code: int = DEFAULT_EXPECTED_EXIT_CODE
    continue_on_nonzero: bool = DEFAULT_CONTINUE_ON_NONZERO

    def validation_error(self) -> str | None:
        """Return a description of the first invalid field, or None.

        Example:
            ```python
            assert ExecuteOptions().validation_error() is None
            ```
        """
        if any(getattr(self, f.name) is None for f in fields(self)):
            return f"Found None in execute options: {self!r}"
        if not isinstance(self.working_directory, (str, Path)):
            return "Execute option working_directory must be a path."
        directory = Path(self.working_directory)
        if not directory.is_dir():
            return f"Execute option working_directory does not exist: {directory.absolute()}"
        if not isinstance(self.capture_output, bool):
            return "Execute option capture_output must be a boolean."
        if not _is_int(self.expected_exit_code):
            return "Execute option expected_exit_code must be an integer."
        if not isinstance(self.continue_on_nonzero, bool):
            return "Execute option continue_on_nonzero must be a boolean."
        return None

    @classmethod
    def from_file(cls, config_path: str | Path) -> "ExecuteOptions":
        """Create options from a TOML file, filling missing keys with defaults.

        Attempt-only keys are accepted and ignored so one file can configure
        both `execute` and `attempt`.

        Example:
            ```python
            options = ExecuteOptions.from_file("/tmp/options.toml")
            ```
        """
        raw = _read_options_toml(Path(config_path))
        known = {f.name for f in fields(AttemptOptions)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown option(s) in {config_path}: {', '.join(unknown)}")
        own = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in raw.items() if key in own})


@dataclass(frozen=True, slots=True)
class AttemptOptions(ExecuteOptions):
    """Options for a bounded retry cycle around `execute`.

    Example:
        ```python
        options = AttemptOptions(max_attempts=5, retry_delay_seconds=0.5, debug_on_exhaustion=False)
        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS
    debug_on_exhaustion: bool = DEFAULT_DEBUG_ON_EXHAUSTION

    def validation_error(self) -> str | None:
        """Return a description of the first invalid field, or None.

        Example:
            ```python
            assert AttemptOptions(max_attempts=0).validation_error() is not None
            ```
        """
        if any(getattr(self, f.name) is None for f in fields(self)):
            return f"Found None in attempt options: {self!r}"
        if not _is_int(self.max_attempts) or self.max_attempts <= 0:
            return "Attempt option max_attempts must be a positive integer."
        delay = self.retry_delay_seconds
        if not (_is_int(delay) or isinstance(delay, float)):
            return "Attempt option retry_delay_seconds must be a non-negative number of seconds."
        if not 0 <= delay <= MAX_RETRY_DELAY_SECONDS or not math.isfinite(delay):
            return (
                "Attempt option retry_delay_seconds must be a non-negative number of seconds"
                f" no larger than {MAX_RETRY_DELAY_SECONDS:.0f}."
            )
        if not isinstance(self.debug_on_exhaustion, bool):
            return "Attempt option debug_on_exhaustion must be a boolean."
        return self.execute_options().validation_error()

    def execute_options(self) -> ExecuteOptions:
        """Return the per-invocation subset of these options.

        Example:
            ```python
            execute_opts = AttemptOptions(expected_exit_code=2).execute_options()
            ```
        """
        return ExecuteOptions(
            working_directory=self.working_directory,
            capture_output=self.capture_output,
            expected_exit_code=self.expected_exit_code,
            continue_on_nonzero=self.continue_on_nonzero,
        )
