from __future__ import annotations

import logging
from pathlib import Path
import subprocess
import threading
import types

import pytest

from fontchain.core.config import FontchainConfig
from fontchain.core.exceptions import FontProbeError
from fontchain.fonts import probe as probe_module
from fontchain.fonts.chain import FontResolver, ResolvedFont
from fontchain.fonts.probe import (
    SKIP_FONT_CHECKS_ENV,
    CachedProbe,
    CompositeProbe,
    FontAvailabilityProbe,
    FontconfigProbe,
    StaticProbe,
    TypstProbe,
    find_typst_command,
    parse_version,
    probe_from_config,
    quarto_supports_typst,
    quarto_version,
)


@pytest.fixture(autouse=True)
def _enable_font_checks(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(SKIP_FONT_CHECKS_ENV, raising=False)
    quarto_version.cache_clear()
    yield
    quarto_version.cache_clear()


def _which(*installed: str):
    def fake_which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in installed else None

    return fake_which


def _fake_run(stdout: str, calls: list[list[str]]):
    def fake_run(argv, **kwargs):
        calls.append(list(argv))
        assert kwargs["check"] is True
        assert kwargs["timeout"] > 0
        return types.SimpleNamespace(stdout=stdout, returncode=0)

    return fake_run


def _fake_quarto(version: str, stdout: str, calls: list[list[str]]):
    def fake_run(argv, **kwargs):
        calls.append(list(argv))
        assert kwargs["timeout"] > 0
        output = version if list(argv) == ["quarto", "--version"] else stdout
        return types.SimpleNamespace(stdout=output, returncode=0)

    return fake_run


class CountingProbe:
    def __init__(self) -> None:
        self.calls = 0

    def available_families(self) -> frozenset[str]:
        self.calls += 1
        return frozenset({"Roboto"})


def test_static_probe_satisfies_protocol() -> None:
    probe = StaticProbe(["Arial", "Arial", "Roboto"])
    assert isinstance(probe, FontAvailabilityProbe)
    assert probe.available_families() == frozenset({"Arial", "Roboto"})


def test_find_typst_prefers_standalone_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which("typst", "quarto"))
    assert find_typst_command() == ("typst",)


@pytest.mark.parametrize("version", ["1.4.557", "1.5.0", "Quarto 1.4.0", "2.0"])
def test_find_typst_falls_back_to_recent_quarto(
    monkeypatch: pytest.MonkeyPatch, version: str
) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(probe_module.shutil, "which", _which("quarto"))
    monkeypatch.setattr(probe_module.subprocess, "run", _fake_quarto(version + "\n", "", calls))
    assert find_typst_command() == ("quarto", "typst")
    assert calls == [["quarto", "--version"]]


@pytest.mark.parametrize("version", ["1.3.450", "0.9", "unknown build", ""])
def test_find_typst_rejects_old_or_unparseable_quarto(
    monkeypatch: pytest.MonkeyPatch, version: str
) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which("quarto"))
    monkeypatch.setattr(probe_module.subprocess, "run", _fake_quarto(version, "", []))
    assert find_typst_command() is None
    with pytest.raises(FontProbeError, match=r"Quarto \(>= 1\.4\.0\)"):
        TypstProbe().argv()


def test_quarto_version_is_queried_once_per_session(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(probe_module.shutil, "which", _which("quarto"))
    monkeypatch.setattr(probe_module.subprocess, "run", _fake_quarto("1.6.39", "", calls))

    assert quarto_version() == (1, 6, 39)
    assert quarto_supports_typst()
    assert find_typst_command() == ("quarto", "typst")
    assert calls == [["quarto", "--version"]]


def test_quarto_version_failure_disables_quarto(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which("quarto"))

    def broken_run(argv, **_kwargs):
        raise subprocess.CalledProcessError(1, argv, output="", stderr="deno: crashed\n")

    monkeypatch.setattr(probe_module.subprocess, "run", broken_run)
    assert quarto_version() is None
    assert find_typst_command() is None


def test_parse_version_accepts_partial_versions() -> None:
    assert parse_version("1.4.557") == (1, 4, 557)
    assert parse_version("Quarto 1.5") == (1, 5, 0)
    assert parse_version("no digits") is None
    assert parse_version("1.4") == (1, 4, 0)


def test_find_typst_returns_none_without_renderer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    assert find_typst_command() is None


def test_typst_probe_parses_one_family_per_line(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(probe_module.shutil, "which", _which("quarto"))
    monkeypatch.setattr(
        probe_module.subprocess,
        "run",
        _fake_quarto("1.4.557\n", "Roboto\nDejaVu Sans\n\n  Mari  \n", calls),
    )

    families = TypstProbe(font_paths=[Path("/opt/fonts")]).available_families()

    assert families == frozenset({"Roboto", "DejaVu Sans", "Mari"})
    assert calls == [
        ["quarto", "--version"],
        ["quarto", "typst", "fonts", "--font-path", "/opt/fonts"],
    ]


def test_typst_probe_honours_explicit_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    monkeypatch.setattr(probe_module.subprocess, "run", _fake_run("Arial\n", calls))

    assert TypstProbe(command=["/opt/typst/bin/typst"]).available_families() == {"Arial"}
    assert calls == [["/opt/typst/bin/typst", "fonts"]]


def test_typst_probe_without_renderer_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    with pytest.raises(FontProbeError, match="Typst is not available"):
        TypstProbe().available_families()


def test_typst_probe_wraps_process_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which("typst"))

    def failing_run(argv, **_kwargs):
        raise subprocess.CalledProcessError(2, argv, output="", stderr="error: bad font path\n")

    monkeypatch.setattr(probe_module.subprocess, "run", failing_run)
    with pytest.raises(FontProbeError, match="bad font path") as excinfo:
        TypstProbe().available_families()
    assert isinstance(excinfo.value.__cause__, subprocess.CalledProcessError)


def test_typst_probe_wraps_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which("typst"))

    def slow_run(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

    monkeypatch.setattr(probe_module.subprocess, "run", slow_run)
    with pytest.raises(FontProbeError, match="timed out"):
        TypstProbe(timeout=0.5).available_families()


def test_skip_env_disables_host_probes(monkeypatch: pytest.MonkeyPatch) -> None:
    def unexpected_run(*_args, **_kwargs):
        raise AssertionError("probe should not run")

    monkeypatch.setenv(SKIP_FONT_CHECKS_ENV, "1")
    monkeypatch.setattr(probe_module.subprocess, "run", unexpected_run)
    assert TypstProbe().available_families() == frozenset()
    assert FontconfigProbe().available_families() == frozenset()


def test_fontconfig_probe_splits_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(probe_module.shutil, "which", _which("fc-list"))
    monkeypatch.setattr(
        probe_module.subprocess,
        "run",
        _fake_run("DejaVu Sans,DejaVu Sans Condensed\nRoboto\nRoboto\n", calls),
    )

    families = FontconfigProbe().available_families()

    assert families == frozenset({"DejaVu Sans", "DejaVu Sans Condensed", "Roboto"})
    assert calls == [["fc-list", "-f", "%{family}\n"]]


def test_fontconfig_probe_without_fc_list_reports_nothing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    assert FontconfigProbe().available_families() == frozenset()


def test_cached_probe_queries_inner_once() -> None:
    inner = CountingProbe()
    cached = CachedProbe(inner)

    threads = [threading.Thread(target=cached.available_families) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert cached.available_families() == {"Roboto"}
    assert inner.calls == 1

    cached.invalidate()
    cached.available_families()
    assert inner.calls == 2


def test_composite_probe_unions_answers() -> None:
    probe = CompositeProbe(StaticProbe({"Arial"}), StaticProbe({"Roboto", "Arial"}))
    assert probe.available_families() == frozenset({"Arial", "Roboto"})


class BrokenProbe:
    def available_families(self) -> frozenset[str]:
        raise FontProbeError("Typst is not available.")


def test_composite_probe_keeps_answers_when_one_probe_fails(
    caplog: pytest.LogCaptureFixture,
) -> None:
    probe = CompositeProbe(BrokenProbe(), StaticProbe({"Mari"}))
    with caplog.at_level(logging.WARNING, logger="fontchain.fonts.probe"):
        assert probe.available_families() == frozenset({"Mari"})
    assert "BrokenProbe failed" in caplog.text


def test_composite_probe_raises_when_every_probe_fails() -> None:
    with pytest.raises(FontProbeError, match="Typst is not available"):
        CompositeProbe(BrokenProbe(), BrokenProbe()).available_families()


def test_declared_families_survive_missing_renderer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    probe = probe_from_config(FontchainConfig(probe="typst", available=["Mari"]))

    assert probe.available_families() == {"Mari"}
    assert FontResolver(probe=probe).resolve_for_host() == ResolvedFont("Mari", 0)


def test_probe_from_config_static_and_none() -> None:
    static = probe_from_config(FontchainConfig(probe="static", available=["Mari"]))
    assert static.available_families() == {"Mari"}
    empty = probe_from_config(FontchainConfig(probe="none", available=["Mari"]))
    assert empty.available_families() == frozenset()


def test_probe_from_config_wraps_host_probes(tmp_path: Path) -> None:
    probe = probe_from_config(
        FontchainConfig(probe="typst", font_paths=[tmp_path], timeout=5)
    )
    assert isinstance(probe, CachedProbe)
    assert isinstance(probe.inner, TypstProbe)
    assert probe.inner.font_paths == (tmp_path,)
    assert probe.inner.timeout == 5

    fontconfig = probe_from_config(FontchainConfig(probe="fontconfig"))
    assert isinstance(fontconfig, CachedProbe)
    assert isinstance(fontconfig.inner, FontconfigProbe)


def test_probe_from_config_merges_declared_families(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module.shutil, "which", _which())
    probe = probe_from_config(FontchainConfig(probe="fontconfig", available=["Mari"]))
    assert probe.available_families() == {"Mari"}
