"""Typer application wiring for the fontchain CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from fontchain.core.exceptions import FontchainError
from fontchain.version import get_version

from .commands import check_dist, list_fonts, preamble, resolve
from .state import describe_exception, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Resolve document fonts from a fallback chain and police bundled fonts.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fontchain {get_version()}")
        raise typer.Exit()


@app.callback()
def configure(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase diagnostic detail (repeat for more).",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on unexpected errors."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Print the installed version and exit.",
        ),
    ] = False,
) -> None:
    """Configure diagnostics shared by every command."""
    set_cli_state(verbosity=verbose, debug=debug)


app.command("resolve")(resolve)
app.command("preamble")(preamble)
app.command("fonts")(list_fonts)
app.command("check-dist")(check_dist)


def main() -> None:
    """Console script entry point.

    Errors escaping a command are reported with their root cause; ``--debug``
    prints the full traceback instead.
    """
    try:
        app()
    except Exception as exc:
        state = get_cli_state()
        if state.debug:
            from rich.traceback import Traceback

            state.err_console.print(
                Traceback.from_exception(
                    type(exc), exc, exc.__traceback__, show_locals=state.verbosity >= 2
                )
            )
        elif isinstance(exc, FontchainError):
            emit_error(describe_exception(exc), exception=exc)
        else:
            emit_error(
                f"Unexpected {type(exc).__name__}: {describe_exception(exc)} "
                "(rerun with --debug for a traceback)",
                exception=exc,
            )
        raise SystemExit(1) from exc


__all__ = ["app", "main"]
