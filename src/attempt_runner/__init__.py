from .attempter import attempt
from .debugger import DebugCommand, debug, parse_debug_command
from .execution import ExecuteResult, FailureKind, QuitRequested, SubprocessEngine
from .executor import execute
from .options import AttemptOptions, ExecuteOptions

__all__ = [
    "AttemptOptions",
    "DebugCommand",
    "ExecuteOptions",
    "ExecuteResult",
    "FailureKind",
    "QuitRequested",
    "SubprocessEngine",
    "attempt",
    "debug",
    "execute",
    "parse_debug_command",
]
