"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..logging_config import logger
from ..utils.severity import normalize_severity
from .base import LogSink

_STRUCTLOG_METHODS = {
    "error": "error",
    "warn": "warning",
    "info": "info",
    "http": "info",
    "verbose": "debug",
    "debug": "debug",
    "silly": "debug",
}


class ConsoleSink(LogSink):
    def __init__(self, min_level: str = "warn") -> None:
        super().__init__(min_level)

    def record(self, severity: str, message: str, fields: Optional[Mapping[str, Any]] = None) -> None:
        level = normalize_severity(severity)
        if not self.accepts(level):
            return
        method = getattr(logger, _STRUCTLOG_METHODS[level])
        # user keys may include event, level or logger
        method("app.log", text=message, severity=level, fields=dict(fields or {}))
