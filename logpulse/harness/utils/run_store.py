"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from ..models.schemas import LoadParameters, StressRun

STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class RunStore:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.runs: Dict[str, StressRun] = {}

    async def create(self, parameters: LoadParameters) -> StressRun:
        async with self._lock:
            run = StressRun(
                id=str(uuid.uuid4()),
                status=STATUS_RUNNING,
                parameters=parameters,
                started_at=datetime.utcnow(),
            )
            self.runs[run.id] = run
            return run

    async def finish(self, run_id: str, error: Optional[BaseException] = None) -> StressRun:
        async with self._lock:
            run = self.runs[run_id]
            updated = run.model_copy(
                update={
                    "status": STATUS_FAILED if error is not None else STATUS_COMPLETED,
                    "finished_at": datetime.utcnow(),
                    "error": f"{type(error).__name__}: {error}" if error is not None else None,
                }
            )
            self.runs[run_id] = updated
            return updated

    def get(self, run_id: str) -> Optional[StressRun]:
        return self.runs.get(run_id)

    def list_runs(self) -> List[StressRun]:
        return sorted(self.runs.values(), key=lambda run: run.started_at, reverse=True)

    def active_count(self) -> int:
        return sum(1 for run in self.runs.values() if run.status == STATUS_RUNNING)


run_store = RunStore()
