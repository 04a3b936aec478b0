"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import asyncio
import json
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, List, Mapping, Optional

import httpx

from ..config import Settings, get_settings
from ..logging_config import logger
from ..services.formatter import RecordFormatter
from ..utils.severity import BUNYAN_SEVERITY_MAP
from .base import LogSink, SinkError

MAX_BACKOFF_SECONDS = 30.0


class ShippingError(SinkError):
    """Raised when a batch could not be delivered after all retries."""


class BulkShippingSink(LogSink):
    """Buffers formatted records and ships them to an Elasticsearch ``_bulk`` endpoint.

    A background task flushes the buffer every ``flush_interval_ms``. When the buffer
    is full the oldest record is dropped. Failed batches are retried with exponential
    backoff and dropped once ``max_retries`` is exhausted.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        formatter: Optional[RecordFormatter] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        super().__init__(self.settings.min_level)
        self.formatter = formatter or RecordFormatter(source=self.settings.source)
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self._buffer: Deque[Dict[str, Any]] = deque()
        self._flush_task: Optional[asyncio.Task] = None
        self._flush_lock: Optional[asyncio.Lock] = None
        self._closed = False
        self.dropped = 0
        self.shipped = 0

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def bulk_url(self) -> str:
        return f"{str(self.settings.ingest_url).rstrip('/')}/_bulk"

    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/x-ndjson",
            "X-Timezone": self.settings.timezone,
        }
        if self.settings.auth_token:
            headers["Authorization"] = f"Bearer {self.settings.auth_token}"
        if self.settings.send_severity_map:
            headers["X-Severity-Map"] = BUNYAN_SEVERITY_MAP
        return headers

    def index_for(self, document: Mapping[str, Any]) -> str:
        day = str(document.get("timestamp", ""))[:10].replace("-", ".")
        return f"{self.settings.index_prefix}-{day}"

    def record(self, severity: str, message: str, fields: Optional[Mapping[str, Any]] = None) -> None:
        if self._closed:
            raise SinkError("sink is closed")
        if not self.accepts(severity):
            return
        document = self.formatter.format(severity, message, fields)
        if len(self._buffer) >= self.settings.buffer_limit:
            self._buffer.popleft()
            self.dropped += 1
            logger.warning("sink.buffer_overflow", limit=self.settings.buffer_limit, dropped=self.dropped)
        self._buffer.append(document)
        self._ensure_flush_loop()

    def _ensure_flush_loop(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = self._flush_task
        if task is not None and not task.done() and task.get_loop() is loop:
            return
        self._flush_task = loop.create_task(self._flush_loop())

    async def _flush_loop(self) -> None:
        interval = self.settings.flush_interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            try:
                await self.flush()
            except ShippingError as exc:
                logger.error("sink.ship_failed", error=str(exc), cause=repr(exc.__cause__))
            except Exception:
                logger.exception("sink.flush_loop_error")

    def _lock(self) -> asyncio.Lock:
        if self._flush_lock is None:
            self._flush_lock = asyncio.Lock()
        return self._flush_lock

    async def flush(self) -> None:
        async with self._lock():
            while self._buffer:
                size = min(len(self._buffer), self.settings.buffer_limit)
                batch = [self._buffer.popleft() for _ in range(size)]
                await self._ship(batch)

    def build_body(self, batch: List[Dict[str, Any]]) -> str:
        lines: List[str] = []
        for document in batch:
            lines.append(json.dumps({"index": {"_index": self.index_for(document)}}))
            lines.append(json.dumps(document, default=str))
        return "\n".join(lines) + "\n"

    async def _ship(self, batch: List[Dict[str, Any]]) -> None:
        body = self.build_body(batch)
        await self._call_with_retry(body, len(batch))
        self.shipped += len(batch)
        logger.debug("sink.flushed", count=len(batch), shipped=self.shipped)

    async def _call_with_retry(self, body: str, count: int) -> None:
        backoff = 0.5
        last_error: Exception | None = None
        attempts = self.settings.max_retries + 1
        for attempt in range(attempts):
            try:
                await self._post(body)
                return
            except httpx.HTTPError as exc:
                last_error = exc
                if attempt + 1 < attempts:
                    await self._sleep(backoff)
                    backoff = min(backoff * 2, MAX_BACKOFF_SECONDS)
        raise ShippingError(f"bulk shipping failed for {count} records") from last_error

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)
        return self._client

    async def _post(self, body: str) -> None:
        response = await self._get_client().post(self.bulk_url, content=body.encode("utf-8"), headers=self.headers())
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError:
            return
        if isinstance(payload, dict) and payload.get("errors"):
            failed = [item for item in payload.get("items", []) if (item.get("index") or {}).get("error")]
            logger.warning("sink.bulk_partial_failure", failed=len(failed))

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        task, self._flush_task = self._flush_task, None
        if task is not None and not task.done():
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if task.get_loop() is loop:
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        try:
            await self.flush()
        finally:
            if self._owns_client and self._client is not None:
                await self._client.aclose()
                self._client = None
