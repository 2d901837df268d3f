"""Probes reporting which font families the host can render."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import lru_cache
import logging
import os
from pathlib import Path
import re
import shutil
import subprocess
import threading
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from fontchain.core.exceptions import FontProbeError
from fontchain.fonts.utils import split_families


if TYPE_CHECKING:
    from fontchain.core.config import FontchainConfig


logger = logging.getLogger(__name__)

SKIP_FONT_CHECKS_ENV = "FONTCHAIN_SKIP_FONT_CHECKS"


@runtime_checkable
class FontAvailabilityProbe(Protocol):
    """Capability returning the font families visible on the current host."""

    def available_families(self) -> frozenset[str]: ...


def font_checks_disabled() -> bool:
    """Return True when host font probing is disabled through the environment."""
    value = os.environ.get(SKIP_FONT_CHECKS_ENV, "").strip().lower()
    return value not in {"", "0", "false", "no"}


MIN_QUARTO_VERSION: tuple[int, int, int] = (1, 4, 0)
_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


def parse_version(text: str) -> tuple[int, int, int] | None:
    """Extract ``major.minor[.patch]`` from version output such as ``Quarto 1.4.557``."""
    match = _VERSION_RE.search(text or "")
    if match is None:
        return None
    major, minor, patch = match.groups()
    return (int(major), int(minor), int(patch or 0))


@lru_cache(maxsize=1)
def quarto_version() -> tuple[int, int, int] | None:
    """Return the installed Quarto version, or None when it cannot be determined.

    The answer is cached for the session; call ``quarto_version.cache_clear()``
    after installing or upgrading Quarto.
    """
    if shutil.which("quarto") is None:
        return None
    try:
        output = _run(["quarto", "--version"], 10.0)
    except FontProbeError as exc:
        logger.debug("Unable to query the Quarto version: %s", exc)
        return None
    version = parse_version(output)
    if version is None:
        logger.warning("Could not parse Quarto version from %r.", output.strip())
    return version


def quarto_supports_typst(min_version: tuple[int, int, int] = MIN_QUARTO_VERSION) -> bool:
    """Return True when the installed Quarto bundles a usable Typst."""
    version = quarto_version()
    return version is not None and version >= min_version


def find_typst_command() -> tuple[str, ...] | None:
    """Return the argv prefix used to invoke Typst, preferring a standalone binary."""
    if shutil.which("typst") is not None:
        return ("typst",)
    if quarto_supports_typst():
        return ("quarto", "typst")
    if shutil.which("quarto") is not None:
        logger.debug(
            "Quarto %s is older than %s; its Typst cannot be used.",
            ".".join(map(str, quarto_version() or ())) or "<unknown>",
            ".".join(map(str, MIN_QUARTO_VERSION)),
        )
    return None


def _run(argv: Sequence[str], timeout: float) -> str:
    try:
        proc = subprocess.run(
            list(argv),
            check=True,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise FontProbeError(f"'{' '.join(argv)}' timed out after {timeout:g}s") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip().splitlines()
        suffix = f": {detail[-1]}" if detail else ""
        raise FontProbeError(
            f"'{' '.join(argv)}' exited with status {exc.returncode}{suffix}"
        ) from exc
    except OSError as exc:
        raise FontProbeError(f"Unable to run '{argv[0]}': {exc}") from exc
    return proc.stdout


class StaticProbe:
    """Probe answering with a fixed set of families."""

    def __init__(self, families: Iterable[str] = ()) -> None:
        self._families = frozenset(families)

    def available_families(self) -> frozenset[str]:
        return self._families

    def __repr__(self) -> str:
        return f"StaticProbe({sorted(self._families)!r})"


class FontconfigProbe:
    """Enumerate families through ``fc-list``."""

    def __init__(self, *, timeout: float = 10.0) -> None:
        self.timeout = timeout

    def available_families(self) -> frozenset[str]:
        if font_checks_disabled():
            return frozenset()
        if shutil.which("fc-list") is None:
            logger.debug("fc-list not found; reporting no installed fonts.")
            return frozenset()
        output = _run(["fc-list", "-f", "%{family}\n"], self.timeout)
        families: set[str] = set()
        for line in output.splitlines():
            families.update(split_families(line))
        return frozenset(families)


class TypstProbe:
    """Ask the Typst renderer which families it can see.

    Uses ``typst fonts`` when a standalone binary is installed and the copy
    bundled with Quarto otherwise. Extra ``font_paths`` are forwarded as
    ``--font-path`` arguments.
    """

    def __init__(
        self,
        *,
        font_paths: Iterable[Path] = (),
        timeout: float = 30.0,
        command: Sequence[str] | None = None,
    ) -> None:
        self.font_paths = tuple(Path(path) for path in font_paths)
        self.timeout = timeout
        self.command = tuple(command) if command else None

    def argv(self) -> list[str]:
        """Return the full command line used to list fonts."""
        command = self.command or find_typst_command()
        if command is None:
            raise FontProbeError(
                "Typst is not available. Install Typst or Quarto "
                f"(>= {'.'.join(map(str, MIN_QUARTO_VERSION))}) to export PDFs."
            )
        argv = [*command, "fonts"]
        for path in self.font_paths:
            argv.extend(["--font-path", str(path)])
        return argv

    def available_families(self) -> frozenset[str]:
        if font_checks_disabled():
            return frozenset()
        output = _run(self.argv(), self.timeout)
        return frozenset(line.strip() for line in output.splitlines() if line.strip())


class CachedProbe:
    """Memoise another probe for the lifetime of a render session."""

    def __init__(self, inner: FontAvailabilityProbe) -> None:
        self.inner = inner
        self._families: frozenset[str] | None = None
        self._lock = threading.Lock()

    def available_families(self) -> frozenset[str]:
        with self._lock:
            if self._families is None:
                self._families = self.inner.available_families()
            return self._families

    def invalidate(self) -> None:
        """Drop the memoised answer so the next query hits the inner probe."""
        with self._lock:
            self._families = None


class CompositeProbe:
    """Union of the families reported by several probes.

    A probe that fails is logged and skipped; the error is raised only when
    every probe failed.
    """

    def __init__(self, *probes: FontAvailabilityProbe) -> None:
        self.probes = probes

    def available_families(self) -> frozenset[str]:
        families: set[str] = set()
        failure: FontProbeError | None = None
        answered = False
        for probe in self.probes:
            try:
                families.update(probe.available_families())
            except FontProbeError as exc:
                logger.warning(
                    "%s failed, keeping the other answers: %s", type(probe).__name__, exc
                )
                failure = exc
            else:
                answered = True
        if not answered and failure is not None:
            raise failure
        return frozenset(families)


def probe_from_config(config: FontchainConfig) -> FontAvailabilityProbe:
    """Build the probe described by ``config``, cached for the session."""
    if config.probe == "static":
        return StaticProbe(config.available)
    if config.probe == "none":
        return StaticProbe()
    if config.probe == "fontconfig":
        inner: FontAvailabilityProbe = FontconfigProbe(timeout=config.timeout)
    else:
        inner = TypstProbe(font_paths=config.font_paths, timeout=config.timeout)
    if config.available:
        inner = CompositeProbe(inner, StaticProbe(config.available))
    return CachedProbe(inner)


__all__ = [
    "MIN_QUARTO_VERSION",
    "SKIP_FONT_CHECKS_ENV",
    "CachedProbe",
    "CompositeProbe",
    "FontAvailabilityProbe",
    "FontconfigProbe",
    "StaticProbe",
    "TypstProbe",
    "find_typst_command",
    "font_checks_disabled",
    "parse_version",
    "probe_from_config",
    "quarto_supports_typst",
    "quarto_version",
]
