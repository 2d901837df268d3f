"""Select the body-text font family from a preference-ordered fallback chain.

The chain encodes organisational preference: a branded family first, widely
distributed families next, and a generic family last. Resolution walks the
chain and keeps the first family the host reports as installed. When nothing
matches, the last entry is returned verbatim so the renderer substitutes its
own default; the chain therefore never fails to produce a family.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from fontchain.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from fontchain.core.exceptions import FontProbeError, InvalidInputError
from fontchain.fonts.probe import FontAvailabilityProbe


logger = logging.getLogger(__name__)

FontChain = tuple[str, ...]

DEFAULT_FONT_CHAIN: FontChain = ("Mari", "Roboto", "Arial", "Helvetica", "sans-serif")


@dataclass(frozen=True, slots=True)
class ResolvedFont:
    """Family selected for a render together with its position in the chain."""

    name: str
    index: int
    matched: bool = True

    def to_context(self) -> dict[str, object]:
        """Convert the selection into a template-friendly mapping."""
        return {
            "font_family": self.name,
            "font_index": self.index,
            "font_matched": self.matched,
        }


def font_chain(values: Iterable[str] | str) -> FontChain:
    """Normalise ``values`` into a chain, dropping blank entries."""
    if isinstance(values, str):
        values = [values]
    chain = tuple(value.strip() for value in values if value and value.strip())
    if not chain:
        raise InvalidInputError("Font chain must contain at least one family name.")
    return chain


def resolve(chain: Iterable[str] | str, available: Iterable[str]) -> ResolvedFont:
    """Return the first family of ``chain`` present in ``available``.

    Falls back to the last chain entry when none is available. Raises
    :class:`InvalidInputError` when ``chain`` is empty.
    """
    candidates: FontChain = (chain,) if isinstance(chain, str) else tuple(chain)
    if not candidates:
        raise InvalidInputError("Cannot resolve a font from an empty chain.")
    installed = available if isinstance(available, (set, frozenset)) else frozenset(available)
    for index, family in enumerate(candidates):
        if family in installed:
            return ResolvedFont(name=family, index=index)
    last = len(candidates) - 1
    return ResolvedFont(name=candidates[last], index=last, matched=False)


class FontResolver:
    """Resolve body-text fonts against a configured chain and host probe."""

    def __init__(
        self,
        chain: Iterable[str] | str = DEFAULT_FONT_CHAIN,
        *,
        probe: FontAvailabilityProbe | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.chain: FontChain = (chain,) if isinstance(chain, str) else tuple(chain)
        if not self.chain:
            raise InvalidInputError("Font chain must contain at least one family name.")
        self.probe = probe
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)

    def resolve(self, available: Iterable[str]) -> ResolvedFont:
        """Resolve the configured chain against an explicit availability set."""
        result = resolve(self.chain, available)
        self._report(result)
        return result

    def resolve_for_host(self) -> ResolvedFont:
        """Query the configured probe and resolve against its answer."""
        if self.probe is None:
            raise InvalidInputError("No font availability probe configured.")
        try:
            available = self.probe.available_families()
        except FontProbeError as exc:
            self.emitter.warning(
                "Unable to enumerate host fonts; using the generic fallback.", exc
            )
            available = frozenset()
        else:
            self.emitter.event(
                "font_probe",
                {"probe": type(self.probe).__name__, "count": len(available)},
            )
        return self.resolve(available)

    def _report(self, result: ResolvedFont) -> None:
        if not result.matched:
            preferred = ", ".join(self.chain[:-1]) or result.name
            self.emitter.warning(
                f"None of {preferred} is installed; requesting generic family '{result.name}'."
            )
        else:
            logger.debug("Resolved font '%s' at chain index %d.", result.name, result.index)
        self.emitter.event(
            "font_resolved",
            {"family": result.name, "index": result.index, "matched": result.matched},
        )


__all__ = [
    "DEFAULT_FONT_CHAIN",
    "FontChain",
    "FontResolver",
    "ResolvedFont",
    "font_chain",
    "resolve",
]
