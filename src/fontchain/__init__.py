"""fontchain: fallback-chain font resolution for Typst PDF export."""

from __future__ import annotations

from fontchain.core.exceptions import (
    ConfigError,
    FontchainError,
    FontProbeError,
    InvalidInputError,
    PackagingPolicyError,
)
from fontchain.fonts import (
    DEFAULT_FONT_CHAIN,
    FontAvailabilityProbe,
    FontResolver,
    ResolvedFont,
    StaticProbe,
    resolve,
)
from fontchain.version import get_version


__version__ = get_version()

__all__ = [
    "DEFAULT_FONT_CHAIN",
    "ConfigError",
    "FontAvailabilityProbe",
    "FontProbeError",
    "FontResolver",
    "FontchainError",
    "InvalidInputError",
    "PackagingPolicyError",
    "ResolvedFont",
    "StaticProbe",
    "__version__",
    "resolve",
]
