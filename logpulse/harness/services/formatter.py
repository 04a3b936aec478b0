"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import socket
import traceback
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..utils.logical_clock import LogicalClock
from ..utils.severity import normalize_severity

FIELD_TIMESTAMP = "timestamp"
FIELD_SEVERITY = "severity"
FIELD_MESSAGE = "textpayload"
RESERVED_FIELDS = frozenset({FIELD_TIMESTAMP, FIELD_SEVERITY, FIELD_MESSAGE})


def _serialize_value(value: Any) -> Any:
    if isinstance(value, BaseException):
        return {
            "type": type(value).__name__,
            "message": str(value),
            "stack": "".join(traceback.format_exception(type(value), value, value.__traceback__)),
        }
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class RecordFormatter:
    """Turns a (severity, message, fields) call into the document shipped to the cloud.

    Owns the ``LogicalClock`` of its sink so every outgoing document is stamped by
    exactly one formatting path.
    """

    def __init__(self, clock: Optional[LogicalClock] = None, source: Optional[str] = None) -> None:
        self.clock = clock or LogicalClock()
        self.source = source or socket.gethostname()

    def format(
        self,
        severity: str,
        message: str,
        fields: Optional[Mapping[str, Any]] = None,
        timestamp: datetime | None = None,
    ) -> Dict[str, Any]:
        meta = {key: _serialize_value(value) for key, value in (fields or {}).items() if key not in RESERVED_FIELDS}
        document: Dict[str, Any] = {
            FIELD_TIMESTAMP: self.clock.stamp(timestamp),
            FIELD_SEVERITY: normalize_severity(severity),
            FIELD_MESSAGE: message,
            "source": self.source,
        }
        meta.pop("source", None)
        document.update(meta)
        return document
