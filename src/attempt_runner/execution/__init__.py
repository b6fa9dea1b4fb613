from .engine import ProcessEngine
from .subprocess_engine import SubprocessEngine
from .types import ExecuteResult, FailureKind, ProcessOutcome, ProcessRequest, QuitRequested

__all__ = [
    "ExecuteResult",
    "FailureKind",
    "ProcessEngine",
    "ProcessOutcome",
    "ProcessRequest",
    "QuitRequested",
    "SubprocessEngine",
]
