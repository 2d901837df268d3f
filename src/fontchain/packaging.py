"""Inspect built distributions for bundled font assets.

Font files are never shipped with the package; renderers rely on the host
through the fallback chain instead. These helpers read the listing of a
wheel, zip or source tarball produced by the build pipeline and verify that
no font asset slipped in and that the artifact stays smaller than a build
that bundled fonts.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase
import logging
from pathlib import Path, PurePosixPath
import tarfile
import zipfile

from fontchain.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from fontchain.core.exceptions import InvalidInputError, PackagingPolicyError


logger = logging.getLogger(__name__)

FONT_ASSET_PATTERNS: tuple[str, ...] = (
    "*.ttf",
    "*.otf",
    "*.ttc",
    "*.woff",
    "*.woff2",
    "*.pfb",
    "*.afm",
)
# Non-code members below a directory with one of these names are font assets.
FONT_DIRECTORY_NAMES: frozenset[str] = frozenset({"fonts", "font"})

_CODE_SUFFIXES = {".py", ".pyc", ".pyi", ".typed"}

_ZIP_SUFFIXES = {".whl", ".zip"}
_TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar", ".tar.bz2", ".tar.xz")


@dataclass(frozen=True, slots=True)
class ArtifactReport:
    """Listing summary of a distribution artifact."""

    path: Path
    size: int
    members: tuple[str, ...]
    font_assets: tuple[str, ...]

    @property
    def has_font_assets(self) -> bool:
        return bool(self.font_assets)

    def reduction_against(self, reference: ArtifactReport) -> float:
        """Return the fractional size saving relative to ``reference``."""
        if reference.size <= 0:
            return 0.0
        return 1.0 - (self.size / reference.size)


def _is_tar(path: Path) -> bool:
    return path.name.lower().endswith(_TAR_SUFFIXES)


def list_artifact(path: Path) -> tuple[str, ...]:
    """Return the member names of a wheel, zip or tar archive."""
    if not path.is_file():
        raise PackagingPolicyError(f"Artifact not found: {path}")
    try:
        if path.suffix.lower() in _ZIP_SUFFIXES:
            with zipfile.ZipFile(path) as archive:
                return tuple(archive.namelist())
        if _is_tar(path):
            with tarfile.open(path) as archive:
                return tuple(
                    f"{member.name}/" if member.isdir() else member.name
                    for member in archive.getmembers()
                )
    except (zipfile.BadZipFile, tarfile.TarError, OSError) as exc:
        raise PackagingPolicyError(f"Unable to read artifact {path}: {exc}") from exc
    raise PackagingPolicyError(f"Unsupported artifact type: {path.name}")


def find_font_assets(
    names: Iterable[str], patterns: Iterable[str] = FONT_ASSET_PATTERNS
) -> tuple[str, ...]:
    """Return the entries of ``names`` that look like font assets.

    A file matches when its name matches one of ``patterns`` or when it is a
    non-code member of a ``fonts/`` folder. Directory entries never match.
    """
    compiled = tuple(pattern.lower() for pattern in patterns)
    matches: list[str] = []
    for name in names:
        if name.endswith("/"):
            continue
        member = PurePosixPath(name.lower())
        if any(fnmatchcase(member.name, pattern) for pattern in compiled):
            matches.append(name)
        elif member.suffix not in _CODE_SUFFIXES and FONT_DIRECTORY_NAMES.intersection(
            member.parts[:-1]
        ):
            matches.append(name)
    return tuple(matches)


def inspect_artifact(path: Path) -> ArtifactReport:
    """Read ``path`` and summarise its size and font assets."""
    members = list_artifact(path)
    return ArtifactReport(
        path=path,
        size=path.stat().st_size,
        members=members,
        font_assets=find_font_assets(members),
    )


def check_artifact(
    path: Path,
    *,
    reference: Path | None = None,
    min_reduction: float = 0.0,
    emitter: DiagnosticEmitter | None = None,
) -> ArtifactReport:
    """Verify that ``path`` bundles no fonts and is smaller than ``reference``.

    ``min_reduction`` is the fraction of the reference size the artifact must
    save; ``0.0`` only requires it to be strictly smaller.
    """
    if not 0.0 <= min_reduction < 1.0:
        raise InvalidInputError("min_reduction must be within [0, 1).")
    emitter = emitter or LoggingEmitter(logger_obj=logger)

    report = inspect_artifact(path)
    emitter.event(
        "artifact_checked",
        {"path": str(path), "size": report.size, "font_assets": len(report.font_assets)},
    )
    if report.has_font_assets:
        preview = ", ".join(report.font_assets[:5])
        more = len(report.font_assets) - 5
        if more > 0:
            preview += f" (+{more} more)"
        raise PackagingPolicyError(
            f"{path.name} bundles {len(report.font_assets)} font asset(s): {preview}"
        )

    if reference is not None:
        baseline = inspect_artifact(reference)
        reduction = report.reduction_against(baseline)
        logger.info(
            "%s is %d bytes, reference %s is %d bytes (%.1f%% smaller).",
            path.name,
            report.size,
            reference.name,
            baseline.size,
            reduction * 100,
        )
        if report.size >= baseline.size or reduction < min_reduction:
            raise PackagingPolicyError(
                f"{path.name} ({report.size} bytes) is not smaller than "
                f"{reference.name} ({baseline.size} bytes) by at least "
                f"{min_reduction:.0%}."
            )
    return report


__all__ = [
    "FONT_ASSET_PATTERNS",
    "ArtifactReport",
    "check_artifact",
    "find_font_assets",
    "inspect_artifact",
    "list_artifact",
]
