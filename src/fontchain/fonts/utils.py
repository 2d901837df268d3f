"""Shared helpers for font handling."""

from __future__ import annotations

from collections.abc import Iterable


def normalize_family(name: str) -> str:
    """Return a normalised font family key suitable for lookups."""
    return "".join(ch for ch in name.casefold() if ch not in {" ", "-", "_"})


def split_families(value: str) -> list[str]:
    """Split a comma-separated fontconfig family field into names."""
    return [part.strip() for part in value.split(",") if part.strip()]


def duplicate_families(names: Iterable[str]) -> list[str]:
    """Return the names whose normalised key already appeared earlier."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in names:
        key = normalize_family(name)
        if key in seen:
            duplicates.append(name)
        else:
            seen.add(key)
    return duplicates


__all__ = ["duplicate_families", "normalize_family", "split_families"]
