"""Consoles and verbosity shared by the fontchain commands.

Diagnostics always go to stderr so the resolved family, JSON payloads and
preambles written to stdout stay machine-readable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NoReturn

from rich.console import Console
from rich.text import Text
import typer

from fontchain.core.exceptions import FontchainError, exception_hint, exception_messages


@dataclass(slots=True)
class CLIState:
    """Diagnostic settings chosen on the command line."""

    verbosity: int = 0
    debug: bool = False
    # Consoles resolve sys.stdout/sys.stderr at print time, so output
    # redirection by test runners is honoured.
    console: Console = field(default_factory=Console, repr=False)
    err_console: Console = field(
        default_factory=lambda: Console(stderr=True, highlight=False), repr=False
    )


_state = CLIState()


def get_cli_state() -> CLIState:
    """Return the settings of the current invocation."""
    return _state


def set_cli_state(*, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Install fresh settings for a new invocation."""
    global _state
    _state = CLIState(verbosity=max(0, verbosity), debug=debug)
    return _state


def describe_exception(exc: BaseException) -> str:
    """Return the message of ``exc`` followed by its root cause, when different."""
    message = str(exc).strip() or type(exc).__name__
    hint = exception_hint(exc)
    if hint and hint not in message:
        return f"{message} ({hint})"
    return message


def _render(label: str, style: str, message: str, exception: BaseException | None) -> None:
    state = get_cli_state()
    text = Text.assemble((f"{label}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        details = [entry for entry in exception_messages(exception) if entry not in message]
        details.append(f"type: {type(exception).__name__}")
        text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_info(message: str) -> None:
    """Print ``message`` when at least one ``-v`` was given."""
    state = get_cli_state()
    if state.verbosity >= 1:
        state.err_console.print(message, style="dim", markup=False)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    _render("warning", "yellow", message, exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    _render("error", "red", message, exception)


def abort(exc: FontchainError) -> NoReturn:
    """Report a domain error and leave the command with status 1."""
    emit_error(describe_exception(exc), exception=exc)
    raise typer.Exit(code=1) from exc


__all__ = [
    "CLIState",
    "abort",
    "describe_exception",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_cli_state",
    "set_cli_state",
]
