"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Mapping, Optional

from ..utils.severity import is_enabled, normalize_severity


class SinkError(Exception):
    """Raised when a sink cannot accept a record."""


async def deliver(result: Any) -> None:
    """Await a sink call result when the sink returned an awaitable."""
    if inspect.isawaitable(result):
        await result


class LogSink:
    """Destination for structured log records.

    ``record`` may complete synchronously (return ``None``) or hand back an
    awaitable; callers go through :func:`deliver` so both shapes work.
    """

    def __init__(self, min_level: str = "silly") -> None:
        self.min_level = normalize_severity(min_level)

    def accepts(self, severity: str) -> bool:
        return is_enabled(severity, self.min_level)

    def record(self, severity: str, message: str, fields: Optional[Mapping[str, Any]] = None) -> Optional[Awaitable[None]]:
        raise NotImplementedError

    def record_warning(self, message: str) -> Optional[Awaitable[None]]:
        return self.record("warn", message)

    def info(self, message: str, **fields: Any) -> Optional[Awaitable[None]]:
        return self.record("info", message, fields or None)

    def warn(self, message: str, **fields: Any) -> Optional[Awaitable[None]]:
        return self.record("warn", message, fields or None)

    def error(self, message: str, **fields: Any) -> Optional[Awaitable[None]]:
        return self.record("error", message, fields or None)

    async def flush(self) -> None:
        return None

    async def close(self) -> None:
        await self.flush()


class FanoutSink(LogSink):
    """Forwards every record to each child sink that accepts its severity."""

    def __init__(self, *sinks: LogSink) -> None:
        super().__init__()
        self.sinks = list(sinks)

    def record(self, severity: str, message: str, fields: Optional[Mapping[str, Any]] = None) -> Optional[Awaitable[None]]:
        pending = []
        for sink in self.sinks:
            if not sink.accepts(severity):
                continue
            result = sink.record(severity, message, fields)
            if inspect.isawaitable(result):
                pending.append(result)
        if not pending:
            return None
        return self._await_all(pending)

    @staticmethod
    async def _await_all(pending: list) -> None:
        for item in pending:
            await item

    async def flush(self) -> None:
        await asyncio.gather(*(sink.flush() for sink in self.sinks))

    async def close(self) -> None:
        await asyncio.gather(*(sink.close() for sink in self.sinks))
