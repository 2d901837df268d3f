"""Resolve the body font and print it or the matching Typst preamble."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from fontchain.core.exceptions import ConfigError, InvalidInputError
from fontchain.typst import font_context, render_font_preamble

from .._options import (
    AvailableOption,
    ChainOption,
    ConfigOption,
    FontPathOption,
    ProbeOption,
    build_config,
    build_resolver,
)
from ..state import abort, emit_error


def resolve(
    chain: ChainOption = None,
    available: AvailableOption = None,
    probe: ProbeOption = None,
    font_path: FontPathOption = None,
    config: ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the full selection as JSON."),
    ] = False,
) -> None:
    """Print the font family the renderer should use for body text."""
    try:
        settings = build_config(
            config_path=config,
            chain=chain,
            available=available,
            probe=probe,
            font_paths=font_path,
        )
        resolver = build_resolver(settings)
        result = resolver.resolve_for_host()
    except (ConfigError, InvalidInputError) as exc:
        abort(exc)

    if as_json:
        payload = font_context(resolver.chain, result)
        payload.pop("font_preamble", None)
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(result.name)


def preamble(
    chain: ChainOption = None,
    available: AvailableOption = None,
    probe: ProbeOption = None,
    font_path: FontPathOption = None,
    config: ConfigOption = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the preamble to this file instead of stdout.",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """Print the Typst '#set text(font: ...)' preamble for the resolved chain."""
    try:
        settings = build_config(
            config_path=config,
            chain=chain,
            available=available,
            probe=probe,
            font_paths=font_path,
        )
        resolver = build_resolver(settings)
        result = resolver.resolve_for_host()
    except (ConfigError, InvalidInputError) as exc:
        abort(exc)

    text = render_font_preamble(resolver.chain, result)
    if output is None:
        typer.echo(text, nl=False)
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
    except OSError as exc:
        emit_error(f"Failed to write Typst preamble to {output}", exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["preamble", "resolve"]
