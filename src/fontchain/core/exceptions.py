"""Exception hierarchy for font resolution and export policy checks."""

from __future__ import annotations


class FontchainError(RuntimeError):
    """Base exception for fontchain failures."""


class InvalidInputError(FontchainError, ValueError):
    """Raised when a font chain has nothing to select from."""


class FontProbeError(FontchainError):
    """Raised when the host font inventory cannot be enumerated."""


class PackagingPolicyError(FontchainError):
    """Raised when a distribution artifact violates the bundled-font policy."""


class ConfigError(FontchainError):
    """Raised when a configuration file cannot be loaded or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "FontProbeError",
    "FontchainError",
    "InvalidInputError",
    "PackagingPolicyError",
    "exception_hint",
    "exception_messages",
]
