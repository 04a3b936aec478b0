"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from functools import lru_cache

from ..config import Settings, get_settings
from ..logging_config import logger
from .base import FanoutSink, LogSink
from .bulk import BulkShippingSink
from .console import ConsoleSink
from .memory import MemorySink


def build_cloud_sink(settings: Settings) -> LogSink:
    if settings.shipping_enabled:
        return BulkShippingSink(settings)
    logger.info("sink.dry_run", reason="CLOUD_LOGGING_AUTH_TOKEN not set")
    return MemorySink(min_level=settings.min_level, max_records=settings.buffer_limit)


def build_sink(settings: Settings | None = None) -> FanoutSink:
    settings = settings or get_settings()
    return FanoutSink(build_cloud_sink(settings), ConsoleSink(settings.console_level))


def sink_mode(sink: LogSink) -> str:
    children = sink.sinks if isinstance(sink, FanoutSink) else [sink]
    if any(isinstance(child, BulkShippingSink) for child in children):
        return "shipping"
    return "dry-run"


@lru_cache()
def get_app_sink() -> LogSink:
    return build_sink()
