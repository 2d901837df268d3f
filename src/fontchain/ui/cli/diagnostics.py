"""Route resolver and packaging diagnostics to the CLI consoles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fontchain.core.diagnostics import format_event_message

from .state import emit_error, emit_info, emit_warning


class CliEmitter:
    """Emitter printing warnings and errors on stderr and events under ``-v``."""

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            emit_info(message)


__all__ = ["CliEmitter"]
