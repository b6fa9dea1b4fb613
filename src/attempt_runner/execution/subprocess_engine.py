from __future__ import annotations

import subprocess

from .types import ProcessOutcome, ProcessRequest


class SubprocessEngine:
    """Run commands as local child processes with `subprocess.run`.

    Stderr is always inherited. Stdout is inherited or captured as UTF-8 text,
    with undecodable bytes replaced.

    Example:
        ```python
        engine = SubprocessEngine()
        outcome = engine.run(ProcessRequest(["echo", "hi"], ".", capture_output=True, check=False))
        ```
    """

    def run(self, request: ProcessRequest) -> ProcessOutcome:
        """Execute one request and wait for the child to exit.

        Example:
            ```python
            outcome = SubprocessEngine().run(ProcessRequest(["true"], "/tmp", capture_output=False, check=False))
            ```
        """
        completed = subprocess.run(
            list(request.command),
            cwd=request.working_directory,
            stdout=subprocess.PIPE if request.capture_output else None,
            encoding="utf-8",
            errors="replace",
            check=request.check,
        )
        return ProcessOutcome(
            returncode=completed.returncode,
            stdout=completed.stdout if request.capture_output else None,
        )
