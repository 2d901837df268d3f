"""Shared Typer option definitions and resolver wiring for CLI commands."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from fontchain.core.config import FontchainConfig, load_config
from fontchain.fonts.chain import FontResolver, font_chain
from fontchain.fonts.probe import probe_from_config

from .diagnostics import CliEmitter


CHAIN_PANEL = "Font Chain"
PROBE_PANEL = "Host Fonts"


class ProbeKind(str, Enum):
    """Host font probes selectable from the command line."""

    typst = "typst"
    fontconfig = "fontconfig"
    static = "static"
    none = "none"


ChainOption = Annotated[
    list[str] | None,
    typer.Option(
        "--chain",
        "-c",
        help="Font family in preference order (repeat for each entry, generic family last).",
        rich_help_panel=CHAIN_PANEL,
    ),
]

AvailableOption = Annotated[
    list[str] | None,
    typer.Option(
        "--available",
        "-a",
        help="Treat this family as installed (repeatable). Implies --probe static.",
        rich_help_panel=PROBE_PANEL,
    ),
]

ProbeOption = Annotated[
    ProbeKind | None,
    typer.Option(
        "--probe",
        help="How installed fonts are discovered.",
        case_sensitive=False,
        rich_help_panel=PROBE_PANEL,
    ),
]

FontPathOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--font-path",
        help="Additional font directory forwarded to Typst (repeatable).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=PROBE_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="YAML configuration file with a 'fonts' section.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=CHAIN_PANEL,
    ),
]


def build_config(
    *,
    config_path: Path | None = None,
    chain: list[str] | None = None,
    available: list[str] | None = None,
    probe: ProbeKind | None = None,
    font_paths: list[Path] | None = None,
) -> FontchainConfig:
    """Merge a configuration file with command line overrides."""
    config = load_config(config_path) if config_path else FontchainConfig()
    if chain:
        config.chain = list(font_chain(chain))
    if available:
        config.available = [name.strip() for name in available if name.strip()]
        if probe is None:
            config.probe = "static"
    if probe is not None:
        config.probe = probe.value
    if font_paths:
        config.font_paths = [*config.font_paths, *font_paths]
    return config


def build_resolver(config: FontchainConfig) -> FontResolver:
    """Create a resolver wired to the configured probe and the CLI emitter."""
    return FontResolver(
        font_chain(config.chain),
        probe=probe_from_config(config),
        emitter=CliEmitter(),
    )


__all__ = [
    "AvailableOption",
    "ChainOption",
    "ConfigOption",
    "FontPathOption",
    "ProbeKind",
    "ProbeOption",
    "build_config",
    "build_resolver",
]
