"""Software-only simulation / demo - no real systems will be contacted or modified.

Example application: logs a few sample messages through the configured sinks, runs
the stress test, then waits for the final flush.
"""
from __future__ import annotations

import asyncio
import sys
from types import TracebackType
from typing import Any, Callable, Optional, Type

from .config import get_settings
from .logging_config import logger, setup_logging
from .models.schemas import LoadParameters
from .services.load_generator import run_stress_test
from .sinks.base import LogSink, deliver
from .sinks.factory import build_sink

FLUSH_MARKER = "==========-----------==========-----------==========----------- WAITING FOR FINAL FLUSH"
SAMPLE_FIELDS = {"hello": "world", "f2": 42, "f3": "v3", "f4": "v4"}

ExceptHook = Callable[[Type[BaseException], BaseException, Optional[TracebackType]], Any]


async def log_samples(sink: LogSink) -> None:
    await deliver(sink.info("Hello, LogPulse shipping logs to the cloud!"))
    await deliver(sink.warn("This is a warning message"))
    await deliver(sink.error("This is an error message"))
    await deliver(sink.error("Test internal severity field", severity="debug"))
    await deliver(sink.info("message with more fields", **SAMPLE_FIELDS))


async def run_app(sink: LogSink) -> None:
    await deliver(sink.info("Test application started"))
    try:
        raise RuntimeError("Oops, something went wrong!")
    except RuntimeError as exc:
        await deliver(sink.error("Caught an error:", error=exc))
    await deliver(sink.info("Test application finished"))


async def run_demo(sink: LogSink, params: LoadParameters, **options: Any) -> None:
    await log_samples(sink)
    await run_app(sink)
    await run_stress_test(sink, params, **options)
    await deliver(sink.info(FLUSH_MARKER))
    await sink.close()


async def _force_flush_and_close(sink: LogSink, pending: Any) -> None:
    await deliver(pending)
    await sink.close()


def install_exception_hook(sink: LogSink) -> ExceptHook:
    """Ship uncaught exceptions before the interpreter exits with status 1."""
    previous = sys.excepthook

    def _hook(exc_type: Type[BaseException], exc_value: BaseException, exc_tb: Optional[TracebackType]) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            try:
                pending = sink.record("error", "Uncaught Exception", {"error": exc_value})
                asyncio.run(_force_flush_and_close(sink, pending))
            except Exception as flush_error:
                logger.error("sink.final_flush_failed", error=str(flush_error))
        previous(exc_type, exc_value, exc_tb)

    sys.excepthook = _hook
    return previous


def main() -> int:
    setup_logging()
    settings = get_settings()
    sink = build_sink(settings)
    install_exception_hook(sink)
    asyncio.run(run_demo(sink, settings.stress_parameters()))
    return 0
