"""List the font families a host probe reports."""

from __future__ import annotations

from fontchain.core.exceptions import ConfigError, FontProbeError
from fontchain.fonts.probe import probe_from_config

from .._options import ConfigOption, FontPathOption, ProbeOption, build_config
from ..state import abort, get_cli_state


def list_fonts(
    probe: ProbeOption = None,
    font_path: FontPathOption = None,
    config: ConfigOption = None,
) -> None:
    """Print a table of installed font families, marking chain members."""
    from rich import box
    from rich.table import Table

    try:
        settings = build_config(config_path=config, probe=probe, font_paths=font_path)
        families = probe_from_config(settings).available_families()
    except (ConfigError, FontProbeError) as exc:
        abort(exc)

    chain = list(settings.chain)
    table = Table(
        title=f"Available Fonts ({settings.probe})",
        box=box.SQUARE,
        header_style="bold cyan",
    )
    table.add_column("Family", style="magenta")
    table.add_column("Chain position", justify="right", style="green")

    for family in sorted(families, key=str.casefold):
        position = str(chain.index(family) + 1) if family in chain else "-"
        table.add_row(family, position)

    console = get_cli_state().console
    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {len(families)} families")


__all__ = ["list_fonts"]
