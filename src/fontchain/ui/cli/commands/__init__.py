"""CLI command implementations exposed via `fontchain.ui.cli`."""

from __future__ import annotations

from .dist import check_dist
from .fonts import list_fonts
from .resolve import preamble, resolve


__all__ = ["check_dist", "list_fonts", "preamble", "resolve"]
