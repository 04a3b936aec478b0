"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Optional

from ..services.formatter import RecordFormatter
from .base import LogSink, SinkError


class MemorySink(LogSink):
    """Keeps formatted records in memory. Used for dry runs when no token is configured.

    With ``max_records`` set only the newest records are kept; ``stored`` still
    counts every accepted record.
    """

    def __init__(
        self,
        min_level: str = "silly",
        formatter: Optional[RecordFormatter] = None,
        fail_after: Optional[int] = None,
        max_records: Optional[int] = None,
    ) -> None:
        super().__init__(min_level)
        self.formatter = formatter or RecordFormatter()
        self.fail_after = fail_after
        self.records: Deque[Dict[str, Any]] = deque(maxlen=max_records)
        self.stored = 0
        self.closed = False

    def record(self, severity: str, message: str, fields: Optional[Mapping[str, Any]] = None) -> None:
        if self.closed:
            raise SinkError("sink is closed")
        if self.fail_after is not None and self.stored >= self.fail_after:
            raise SinkError(f"sink rejected record after {self.fail_after} records")
        if not self.accepts(severity):
            return
        self.records.append(self.formatter.format(severity, message, fields))
        self.stored += 1

    def messages(self, severity: Optional[str] = None) -> List[str]:
        return [item["textpayload"] for item in self.records if severity is None or item["severity"] == severity]

    async def close(self) -> None:
        self.closed = True
