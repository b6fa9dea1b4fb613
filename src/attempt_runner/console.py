from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.pretty import Pretty
from rich.text import Text

CONSOLE = Console(soft_wrap=True)

ERROR_STYLE = "red"
WARNING_STYLE = "yellow"


def _line(prefix: str, message: str, style: str | None, detail: str | None) -> Text:
    """Build one diagnostic line without interpreting Rich markup.

    Example:
        ```python
        text = _line("[X]", "Command cannot be empty.", "red", None)
        ```
    """
    head = Text(f"{prefix} {message}", style=style or "")
    if detail is None:
        return head
    return Text.assemble(head, " ", detail)


def error(message: str, detail: str | None = None) -> None:
    """Print an error diagnostic, optionally followed by unstyled detail.

    Example:
        ```python
        error("Exited with code 1, expected 0:", "false")
        ```
    """
    CONSOLE.print(_line("[X]", message, ERROR_STYLE, detail))


def warning(message: str, detail: str | None = None) -> None:
    """Print a warning diagnostic.

    Example:
        ```python
        warning("Max attempts reached.")
        ```
    """
    CONSOLE.print(_line("[!]", message, WARNING_STYLE, detail))


def info(message: str, detail: str | None = None) -> None:
    """Print a progress diagnostic.

    Example:
        ```python
        info("Retry in 3.0 seconds.")
        ```
    """
    CONSOLE.print(_line("[*]", message, None, detail))


def dump(value: Any) -> None:
    """Pretty-print a structured value, such as an exception, indented.

    Example:
        ```python
        dump(RuntimeError("boom"))
        ```
    """
    CONSOLE.print(Pretty(value, indent_guides=False), style=ERROR_STYLE)


def plain(message: str) -> None:
    """Print a line verbatim.

    Example:
        ```python
        plain("Available options:")
        ```
    """
    CONSOLE.print(Text(message))
