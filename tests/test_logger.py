"""Tests for the diagnostic logger and event log."""

import pytest

from agentloop.events import EventKind, EventLog
from agentloop.utils.logger import Logger, LogLevel, get_level, parse_level, set_level


@pytest.fixture(autouse=True)
def restore_level():
    original = get_level()
    yield
    set_level(original)


def test_logs_go_to_stderr(capsys):
    set_level("debug")
    Logger("Agent").info("hello", {"round": 1})

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[INFO] [Agent] hello" in captured.err
    assert '"round": 1' in captured.err


def test_level_filtering(capsys):
    set_level("warning")
    log = Logger("Agent")
    log.info("hidden")
    log.warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_error_includes_exception_details(capsys):
    Logger("Agent").error("failed", ValueError("bad value"))

    err = capsys.readouterr().err
    assert "ValueError" in err
    assert "bad value" in err


def test_child_context(capsys):
    set_level("info")
    Logger("Agent").child("Tools").info("nested")
    assert "[Agent:Tools] nested" in capsys.readouterr().err


@pytest.mark.parametrize("name, level", [
    ("debug", LogLevel.DEBUG),
    ("WARN", LogLevel.WARNING),
    (" error ", LogLevel.ERROR),
    ("nonsense", LogLevel.INFO),
])
def test_parse_level(name, level):
    assert parse_level(name) == level


def test_event_log_records_and_logs(capsys):
    set_level("info")
    events = EventLog()
    event = events.record(EventKind.TOOL_NOT_FOUND, tool_name="ghost", tool_call_id="c1")

    assert events.events == (event,)
    assert events.of_kind(EventKind.TOOL_NOT_FOUND) == [event]
    assert events.of_kind(EventKind.TOOL_CALL_FAILED) == []
    assert "tool_not_found" in capsys.readouterr().err
