"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import asyncio
import math
import random
import time
from typing import Awaitable, Callable, Optional

from ..logging_config import logger
from ..models.schemas import LoadParameters
from ..sinks.base import LogSink, deliver

RANDOM_WORDS = ["apple", "banana", "cherry", "dog", "elephant", "fish", "grape", "house", "igloo", "jungle"]
WORDS_PER_LINE = 15
BEGIN_MARKER = "==========-----------==========-----------==========----------- BEGIN STRESS TESTING"
END_MARKER = "==========-----------==========-----------==========----------- END STRESS TESTING"
SECOND_MS = 1000.0


def second_marker(second: int) -> str:
    return f"=================================================== Background FUNCTION ================ clock={second} =============================="


class LoadGenerator:
    """Drives synthetic log bursts against a sink while saturating the CPU on a duty cycle.

    Both activities share one event loop. The busy part of each CPU slice never yields,
    so the emission activity (and any pending sink I/O) is starved for that window.
    """

    def __init__(
        self,
        sink: LogSink,
        params: LoadParameters,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        monotonic: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.sink = sink
        self.params = params
        self._sleep = sleep
        self._monotonic = monotonic
        self._rng = rng or random.Random()
        self.bursts_emitted = 0
        self.lines_emitted = 0
        self.seconds_completed = 0

    @property
    def total_bursts(self) -> int:
        return max(1, math.ceil(self.params.duration_seconds / (self.params.burst_interval_ms / SECOND_MS)))

    @property
    def total_seconds(self) -> int:
        return math.ceil(self.params.duration_seconds)

    def _random_line(self, line: int) -> str:
        words = " ".join(self._rng.choice(RANDOM_WORDS) for _ in range(WORDS_PER_LINE))
        return f"Line {line}: {words}"

    async def emit_bursts(self) -> None:
        line = 0
        interval = self.params.burst_interval_ms / SECOND_MS
        for burst in range(1, self.total_bursts + 1):
            for _ in range(self.params.lines_per_burst):
                line += 1
                await deliver(self.sink.record("info", self._random_line(line), {"line": line, "burst": burst}))
                self.lines_emitted = line
            self.bursts_emitted = burst
            if burst < self.total_bursts:
                await self._sleep(interval)

    def _spin(self, busy_ms: float) -> None:
        deadline = self._monotonic() + busy_ms / SECOND_MS
        rng = self._rng
        while self._monotonic() < deadline:
            math.sqrt(rng.random() * rng.random())

    @property
    def slices_per_cycle(self) -> int:
        # 1000 / slice_ms, rounded to absorb float noise
        return math.ceil(round(SECOND_MS / self.params.slice_ms, 6))

    async def stress_second(self) -> None:
        busy_ms = self.params.busy_window_ms
        idle_seconds = self.params.idle_window_ms / SECOND_MS
        for _ in range(self.slices_per_cycle):
            self._spin(busy_ms)
            await self._sleep(idle_seconds)

    async def saturate_cpu(self) -> None:
        for second in range(1, self.total_seconds + 1):
            await deliver(self.sink.record_warning(second_marker(second)))
            await self.stress_second()
            self.seconds_completed = second

    async def run(self) -> None:
        params = self.params
        logger.info(
            "stress.begin",
            duration_seconds=params.duration_seconds,
            bursts=self.total_bursts,
            lines_per_burst=params.lines_per_burst,
            busy_fraction_percent=params.busy_fraction_percent,
        )
        await deliver(self.sink.record("info", BEGIN_MARKER))
        tasks = [
            asyncio.ensure_future(self.emit_bursts()),
            asyncio.ensure_future(self.saturate_cpu()),
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning("stress.aborted", bursts=self.bursts_emitted, seconds=self.seconds_completed)
            raise
        await deliver(self.sink.record("info", END_MARKER))
        logger.info("stress.end", lines=self.lines_emitted, seconds=self.seconds_completed)


async def run_stress_test(sink: LogSink, params: LoadParameters, **options) -> None:
    await LoadGenerator(sink, params, **options).run()
