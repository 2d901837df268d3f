"""Font selection for document export.

Architecture
: `resolve` walks a preference-ordered `FontChain` and returns the first
  family the host reports as installed, or the final generic entry when none
  is. `FontResolver` carries a configured chain plus an injected probe.
: Probes implementing `FontAvailabilityProbe` report installed families:
  `TypstProbe` asks the renderer, `FontconfigProbe` reads `fc-list`,
  `StaticProbe` answers from configuration and `CachedProbe` memoises any of
  them for a render session.

Goal
: Keep branded typography when the host has it, degrade to widely available
  families otherwise, and never ship font files with the package.
"""

from fontchain.fonts.chain import (
    DEFAULT_FONT_CHAIN,
    FontChain,
    FontResolver,
    ResolvedFont,
    font_chain,
    resolve,
)
from fontchain.fonts.probe import (
    CachedProbe,
    CompositeProbe,
    FontAvailabilityProbe,
    FontconfigProbe,
    StaticProbe,
    TypstProbe,
    find_typst_command,
    probe_from_config,
    quarto_supports_typst,
)


__all__ = [
    "DEFAULT_FONT_CHAIN",
    "CachedProbe",
    "CompositeProbe",
    "FontAvailabilityProbe",
    "FontChain",
    "FontResolver",
    "FontconfigProbe",
    "ResolvedFont",
    "StaticProbe",
    "TypstProbe",
    "find_typst_command",
    "font_chain",
    "probe_from_config",
    "quarto_supports_typst",
    "resolve",
]
