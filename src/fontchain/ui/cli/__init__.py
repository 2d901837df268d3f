"""Public CLI exports for fontchain."""

from __future__ import annotations

from .app import app, main
from .state import emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
]
