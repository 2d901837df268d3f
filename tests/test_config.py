from __future__ import annotations

from pathlib import Path

import pytest

from fontchain.core.config import FontchainConfig, load_config
from fontchain.core.exceptions import ConfigError
from fontchain.fonts.chain import DEFAULT_FONT_CHAIN


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_use_default_chain_and_typst_probe() -> None:
    config = FontchainConfig()
    assert tuple(config.chain) == DEFAULT_FONT_CHAIN
    assert config.probe == "typst"
    assert config.available == []
    assert config.timeout == 30.0


def test_defaults_are_not_shared_between_instances() -> None:
    first = FontchainConfig()
    first.chain.append("serif")
    assert tuple(FontchainConfig().chain) == DEFAULT_FONT_CHAIN


def test_load_config_reads_fonts_section(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "fontchain.yml",
        """\
fonts:
  chain: [Inter, " Arial ", sans-serif]
  probe: static
  available: [Arial]
  font_paths: [assets/fonts]
  timeout: 5
""",
    )
    config = load_config(path)
    assert config.chain == ["Inter", "Arial", "sans-serif"]
    assert config.probe == "static"
    assert config.available == ["Arial"]
    assert config.font_paths == [(tmp_path / "assets" / "fonts").resolve()]
    assert config.timeout == 5


def test_load_config_accepts_bare_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path / "fonts.yml", "probe: fontconfig\n")
    config = load_config(path)
    assert config.probe == "fontconfig"
    assert tuple(config.chain) == DEFAULT_FONT_CHAIN


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path / "empty.yml", ""))
    assert config == FontchainConfig()


def test_absolute_font_paths_are_kept(tmp_path: Path) -> None:
    target = tmp_path / "shared"
    path = _write(tmp_path / "cfg.yml", f"fonts:\n  font_paths: ['{target}']\n")
    assert load_config(path).font_paths == [target]


@pytest.mark.parametrize(
    "payload",
    [
        "fonts:\n  chain: []\n",
        "fonts:\n  chain: ['', '  ']\n",
        "fonts:\n  probe: registry\n",
        "fonts:\n  timeout: 0\n",
        "fonts:\n  colour: blue\n",
        "fonts: [Arial]\n",
        "- Arial\n",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, payload: str) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path / "bad.yml", payload))


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(_write(tmp_path / "broken.yml", "fonts: [unclosed\n"))


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yml")


def test_duplicate_chain_entries_warn() -> None:
    with pytest.warns(UserWarning, match="more than once"):
        config = FontchainConfig(chain=["Roboto", "Arial", "roboto", "sans-serif"])
    assert config.chain == ["Roboto", "Arial", "roboto", "sans-serif"]
