"""Diagnostic abstractions shared by the resolver, probes and policy checks."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module.

    Library entry points fall back to it when no emitter is supplied, so
    diagnostics reach the host application's logging configuration.
    """

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "font_resolved":
        family = data.get("family") or "<unknown>"
        index = data.get("index")
        if data.get("matched", True):
            return f"Resolved body font: {family} (chain position {index})"
        return f"No preferred font installed, using generic fallback: {family}"

    if name == "font_probe":
        probe = data.get("probe") or "<unknown>"
        count = data.get("count", 0)
        return f"Font probe {probe} reported {count} families"

    if name == "artifact_checked":
        path = data.get("path") or "<unknown>"
        size = data.get("size")
        fonts = data.get("font_assets", 0)
        details = [f"{size} bytes"] if size is not None else []
        details.append(f"{fonts} font assets")
        return f"Checked artifact {path} ({', '.join(details)})"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "format_event_message",
]
