"""Configuration model for font resolution.

FontchainConfig

`chain` (`list[str]`)
: Preference-ordered font families requested for body text. The last entry
  should be a generic family such as `sans-serif` so every renderer can
  honour it.

`probe` (`"typst" | "fontconfig" | "static" | "none"`)
: How host font availability is determined. `typst` asks the renderer
  itself, `fontconfig` runs `fc-list`, `static` trusts `available`, and
  `none` reports no fonts at all (always the generic fallback).

`available` (`list[str]`)
: Families treated as installed. Used alone by the `static` probe and merged
  into the answer of the other probes.

`font_paths` (`list[Path]`)
: Extra font directories forwarded to Typst. Relative entries resolve
  against the configuration file.

`timeout` (`float`)
: Seconds allowed for a host probe before it is abandoned.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal
import warnings

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from fontchain.core.exceptions import ConfigError
from fontchain.fonts.chain import DEFAULT_FONT_CHAIN
from fontchain.fonts.utils import duplicate_families


class FontchainConfig(BaseModel):
    """Validated font resolution settings."""

    model_config = ConfigDict(extra="forbid")

    chain: list[str] = Field(default_factory=lambda: list(DEFAULT_FONT_CHAIN))
    probe: Literal["typst", "fontconfig", "static", "none"] = "typst"
    available: list[str] = Field(default_factory=list)
    font_paths: list[Path] = Field(default_factory=list)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("chain")
    @classmethod
    def _validate_chain(cls, value: list[str]) -> list[str]:
        cleaned = [entry.strip() for entry in value if entry and entry.strip()]
        if not cleaned:
            raise ValueError("chain must contain at least one font family")
        duplicates = duplicate_families(cleaned)
        if duplicates:
            warnings.warn(
                f"Font chain lists {', '.join(duplicates)} more than once; "
                "only the first occurrence can ever be selected.",
                stacklevel=2,
            )
        return cleaned

    @field_validator("available")
    @classmethod
    def _strip_available(cls, value: list[str]) -> list[str]:
        return [entry.strip() for entry in value if entry and entry.strip()]


def _extract_payload(raw: Any, source: Path) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a mapping in {source}, got {type(raw).__name__}.")
    fonts = raw.get("fonts", raw)
    if fonts is None:
        return {}
    if not isinstance(fonts, dict):
        raise ConfigError(f"Expected 'fonts' to be a mapping in {source}.")
    return dict(fonts)


def load_config(path: Path) -> FontchainConfig:
    """Load and validate a YAML configuration file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    payload = _extract_payload(raw, path)
    try:
        config = FontchainConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid font configuration in {path}: {exc}") from exc

    base_dir = path.parent
    config.font_paths = [
        entry if entry.is_absolute() else (base_dir / entry).resolve()
        for entry in config.font_paths
    ]
    return config


__all__ = ["FontchainConfig", "load_config"]
