"""Software-only simulation / demo - no real systems will be contacted or modified."""
import asyncio
import sys

from harness.config import Settings, _local_timezone
from harness.demo import FLUSH_MARKER, SAMPLE_FIELDS, install_exception_hook, run_demo
from harness.models.schemas import LoadParameters
from harness.services.load_generator import BEGIN_MARKER, END_MARKER
from harness.sinks.bulk import BulkShippingSink
from harness.sinks.factory import build_sink, sink_mode
from harness.sinks.memory import MemorySink


def test_run_demo_logs_samples_then_stress_then_flushes(memory_sink, fake_time):
    params = LoadParameters(duration_seconds=1, lines_per_burst=2, burst_interval_ms=500, slices_per_second=5, busy_fraction_percent=50)
    asyncio.run(run_demo(memory_sink, params, sleep=fake_time.sleep, monotonic=fake_time.monotonic))

    messages = memory_sink.messages()
    assert messages[0] == "Hello, LogPulse shipping logs to the cloud!"
    assert messages.index("Test application finished") < messages.index(BEGIN_MARKER)
    assert messages.index(END_MARKER) == len(messages) - 2
    assert messages[-1] == FLUSH_MARKER
    assert memory_sink.closed

    with_fields = next(record for record in memory_sink.records if record["textpayload"] == "message with more fields")
    assert {key: with_fields[key] for key in SAMPLE_FIELDS} == SAMPLE_FIELDS
    caught = next(record for record in memory_sink.records if record["textpayload"] == "Caught an error:")
    assert caught["error"]["type"] == "RuntimeError"
    internal = next(record for record in memory_sink.records if record["textpayload"] == "Test internal severity field")
    assert internal["severity"] == "error"


def test_exception_hook_ships_and_closes(monkeypatch):
    seen = []
    monkeypatch.setattr(sys, "excepthook", lambda *args: seen.append(args[0]))
    sink = MemorySink()
    install_exception_hook(sink)

    sys.excepthook(ValueError, ValueError("boom"), None)

    assert sink.records[-1]["textpayload"] == "Uncaught Exception"
    assert sink.records[-1]["error"]["message"] == "boom"
    assert sink.closed
    assert seen == [ValueError]


def test_settings_read_token_from_environment(monkeypatch):
    monkeypatch.setenv("CLOUD_LOGGING_AUTH_TOKEN", "agent:secret")
    settings = Settings()
    assert settings.shipping_enabled
    assert settings.auth_token == "agent:secret"
    assert settings.stress_parameters() == LoadParameters()

    sink = build_sink(settings)
    assert sink_mode(sink) == "shipping"
    assert isinstance(sink.sinks[0], BulkShippingSink)


def test_build_sink_without_token_is_dry_run():
    sink = build_sink(Settings())
    assert sink_mode(sink) == "dry-run"
    assert isinstance(sink.sinks[0], MemorySink)


def test_dry_run_sink_keeps_only_newest_records():
    sink = build_sink(Settings(buffer_limit=3))
    dry_run = sink.sinks[0]
    for index in range(5):
        sink.info(f"message {index}")
    assert dry_run.stored == 5
    assert dry_run.messages() == ["message 2", "message 3", "message 4"]


def test_timezone_prefers_tz_environment(monkeypatch):
    monkeypatch.setenv("TZ", "Europe/Berlin")
    assert _local_timezone() == "Europe/Berlin"
    monkeypatch.setenv("TZ", ":/usr/share/zoneinfo/America/New_York")
    assert _local_timezone() == "America/New_York"


def test_timezone_reads_localtime_link(monkeypatch, tmp_path):
    monkeypatch.delenv("TZ", raising=False)
    zone_file = tmp_path / "zoneinfo" / "Asia" / "Tokyo"
    zone_file.parent.mkdir(parents=True)
    zone_file.write_bytes(b"TZif")
    link = tmp_path / "localtime"
    link.symlink_to(zone_file)
    assert _local_timezone(localtime=link) == "Asia/Tokyo"
    assert _local_timezone(localtime=tmp_path / "missing") == "UTC"
