from __future__ import annotations

import logging

import pytest

from fontchain.core.diagnostics import LoggingEmitter, format_event_message
from fontchain.core.exceptions import FontProbeError, exception_hint, exception_messages


def test_format_font_resolved_event() -> None:
    assert (
        format_event_message("font_resolved", {"family": "Arial", "index": 2, "matched": True})
        == "Resolved body font: Arial (chain position 2)"
    )
    assert "generic fallback: sans-serif" in format_event_message(
        "font_resolved", {"family": "sans-serif", "index": 4, "matched": False}
    )


def test_format_probe_and_artifact_events() -> None:
    assert format_event_message("font_probe", {"probe": "typst", "count": 3}) == (
        "Font probe typst reported 3 families"
    )
    message = format_event_message(
        "artifact_checked", {"path": "dist/x.whl", "size": 10, "font_assets": 0}
    )
    assert message == "Checked artifact dist/x.whl (10 bytes, 0 font assets)"
    assert format_event_message("unknown", {}) is None


def test_logging_emitter_forwards_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("fontchain.test"))
    with caplog.at_level(logging.INFO, logger="fontchain.test"):
        emitter.event("font_resolved", {"family": "Mari", "index": 0})
        emitter.warning("probe slow")
    messages = [record.getMessage() for record in caplog.records]
    assert "Resolved body font: Mari (chain position 0)" in messages
    assert "probe slow" in messages


def test_exception_hint_follows_cause_chain() -> None:
    try:
        try:
            raise OSError("fc-list: not executable")
        except OSError as inner:
            raise FontProbeError("Unable to run 'fc-list'") from inner
    except FontProbeError as exc:
        assert exception_messages(exc) == ["Unable to run 'fc-list'", "fc-list: not executable"]
        assert exception_hint(exc) == "fc-list: not executable"
