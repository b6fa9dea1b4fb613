from __future__ import annotations

from typing import Protocol

from .types import ProcessOutcome, ProcessRequest


class ProcessEngine(Protocol):
    def run(self, request: ProcessRequest) -> ProcessOutcome:
        """Spawn one command, wait for it, and return its outcome.

        Launch problems surface as `OSError`; a failing child with
        ``request.check`` set surfaces as `subprocess.CalledProcessError`.

        Example:
            ```python
            outcome = engine.run(ProcessRequest(["true"], ".", capture_output=False, check=False))
            ```
        """
        ...
