"""Verify that a built distribution ships no font assets."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontchain.core.exceptions import InvalidInputError, PackagingPolicyError
from fontchain.packaging import check_artifact

from ..diagnostics import CliEmitter
from ..state import abort


def check_dist(
    artifact: Annotated[
        Path,
        typer.Argument(
            help="Wheel, zip or source tarball to inspect.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    reference: Annotated[
        Path | None,
        typer.Option(
            "--reference",
            help="Build that bundled fonts; the artifact must be smaller.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    min_reduction: Annotated[
        float,
        typer.Option(
            "--min-reduction",
            help="Required size saving against --reference, as a fraction (0.2 = 20%).",
            min=0.0,
            max=0.99,
        ),
    ] = 0.0,
) -> None:
    """Fail when ARTIFACT bundles fonts or is not smaller than the reference."""
    try:
        report = check_artifact(
            artifact,
            reference=reference,
            min_reduction=min_reduction,
            emitter=CliEmitter(),
        )
    except (PackagingPolicyError, InvalidInputError) as exc:
        abort(exc)

    typer.echo(
        f"{artifact.name}: {len(report.members)} entries, {report.size} bytes, no font assets"
    )


__all__ = ["check_dist"]
