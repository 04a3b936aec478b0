"""Software-only simulation / demo - no real systems will be contacted or modified."""
import asyncio
from datetime import datetime, timezone

import pytest
import structlog
from structlog.testing import capture_logs

from harness.services.formatter import RecordFormatter
from harness.sinks.base import FanoutSink
from harness.sinks import console as console_module
from harness.sinks.console import ConsoleSink
from harness.sinks.memory import MemorySink
from harness.utils.logical_clock import LogicalClock
from harness.utils.severity import is_enabled, normalize_severity

INSTANT = datetime(2024, 5, 1, 10, 20, 30, 123000, tzinfo=timezone.utc)


def test_normalize_severity_aliases():
    assert normalize_severity("WARNING") == "warn"
    assert normalize_severity("fatal") == "error"
    assert normalize_severity(30) == "info"
    assert normalize_severity(60) == "error"
    with pytest.raises(ValueError):
        normalize_severity("loud")


def test_is_enabled_respects_threshold():
    assert is_enabled("error", "warn")
    assert is_enabled("warn", "warn")
    assert not is_enabled("info", "warn")
    assert is_enabled("debug", "silly")


def test_formatter_protects_reserved_fields():
    formatter = RecordFormatter(LogicalClock(), source="host-a")
    document = formatter.format("info", "hello", {"timestamp": "x", "severity": "debug", "textpayload": "y", "f2": 42}, timestamp=INSTANT)
    assert document == {
        "timestamp": "2024-05-01T10:20:30.123000Z",
        "severity": "info",
        "textpayload": "hello",
        "source": "host-a",
        "f2": 42,
    }


def test_formatter_serializes_exceptions():
    formatter = RecordFormatter(source="host-a")
    try:
        raise RuntimeError("Oops, something went wrong!")
    except RuntimeError as exc:
        document = formatter.format("error", "Caught an error:", {"error": exc})
    assert document["error"]["type"] == "RuntimeError"
    assert document["error"]["message"] == "Oops, something went wrong!"
    assert "Traceback" in document["error"]["stack"]


def test_formatter_stamps_in_call_order():
    formatter = RecordFormatter(source="host-a")
    stamps = [formatter.format("info", str(index), timestamp=INSTANT)["timestamp"] for index in range(5)]
    assert stamps == sorted(stamps)
    assert len(set(stamps)) == 5


def test_fanout_filters_per_child():
    cloud = MemorySink(min_level="info")
    console = MemorySink(min_level="warn")
    sink = FanoutSink(cloud, console)
    sink.info("only cloud")
    sink.record_warning("both")
    sink.record("debug", "nobody")
    assert cloud.messages() == ["only cloud", "both"]
    assert console.messages() == ["both"]

    asyncio.run(sink.close())
    assert cloud.closed and console.closed


def _capture_console(monkeypatch):
    monkeypatch.setattr(console_module, "logger", structlog.get_logger("logpulse"))
    return capture_logs()


def test_console_sink_nests_user_fields(monkeypatch):
    with _capture_console(monkeypatch) as entries:
        sink = ConsoleSink(min_level="info")
        sink.record("error", "boom", {"severity": "debug", "text": "shadow", "f2": 42})
        sink.record("debug", "filtered")

    assert len(entries) == 1
    entry = entries[0]
    assert entry["event"] == "app.log"
    assert entry["log_level"] == "error"
    assert entry["text"] == "boom"
    assert entry["severity"] == "error"
    assert entry["fields"] == {"severity": "debug", "text": "shadow", "f2": 42}


def test_console_sink_accepts_structlog_key_names(monkeypatch):
    cloud = MemorySink()
    with _capture_console(monkeypatch) as entries:
        sink = FanoutSink(cloud, ConsoleSink("info"))
        sink.record("warn", "user event", {"event": "login", "level": "x", "logger": "y", "timestamp": "z"})

    assert entries[0]["event"] == "app.log"
    assert entries[0]["log_level"] == "warning"
    assert entries[0]["fields"]["event"] == "login"
    assert cloud.records[0]["event"] == "login"
