"""Typst helpers carrying the font chain into exported documents."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from fontchain.core.exceptions import InvalidInputError
from fontchain.fonts.chain import FontChain, ResolvedFont, font_chain


TEMPLATE_ROOT = Path(__file__).parent / "templates"
FONT_PREAMBLE_TEMPLATE = "font_preamble.typ"


def escape_typst_string(value: str | None) -> str:
    """Escape backslashes and double quotes for a Typst string literal."""
    if not value:
        return ""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def typst_font_array(chain: Iterable[str] | str) -> str:
    """Render ``chain`` as a Typst array literal of strings."""
    entries = [f'"{escape_typst_string(name)}"' for name in font_chain(chain)]
    if len(entries) == 1:
        return f"({entries[0]},)"
    return f"({', '.join(entries)})"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_ROOT)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def _resolved_position(chain: FontChain, resolved: ResolvedFont | None) -> int | None:
    """Return the index of ``resolved`` within the normalised ``chain``."""
    if resolved is None or not resolved.matched:
        return None
    name = resolved.name.strip()
    if name not in chain:
        raise InvalidInputError(f"Resolved family '{resolved.name}' is not part of the chain.")
    return chain.index(name)


def render_font_preamble(
    chain: Iterable[str] | str, resolved: ResolvedFont | None = None
) -> str:
    """Render the ``#set text(font: ...)`` preamble for a Typst document.

    When ``resolved`` matched, the emitted list starts at the resolved family
    and keeps the later entries for Typst's per-glyph fallback.
    """
    normalized = font_chain(chain)
    position = _resolved_position(normalized, resolved)
    effective = normalized if position is None else normalized[position:]
    template = _environment().get_template(FONT_PREAMBLE_TEMPLATE)
    return template.render(
        resolved=resolved,
        position=position,
        total=len(normalized),
        font_array=typst_font_array(effective),
    )


def font_context(chain: Iterable[str] | str, resolved: ResolvedFont) -> dict[str, object]:
    """Return the template context describing the body font selection."""
    normalized = font_chain(chain)
    context: dict[str, object] = {"font_chain": list(normalized)}
    context.update(resolved.to_context())
    context["font_preamble"] = render_font_preamble(normalized, resolved)
    return context


__all__ = [
    "FONT_PREAMBLE_TEMPLATE",
    "TEMPLATE_ROOT",
    "escape_typst_string",
    "font_context",
    "render_font_preamble",
    "typst_font_array",
]
