"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from ..config import get_settings
from ..logging_config import logger
from ..models.schemas import StressRun, StressRunList, StressRunRequest
from ..services.load_generator import run_stress_test
from ..sinks.base import LogSink
from ..sinks.factory import get_app_sink
from ..utils.run_store import run_store

router = APIRouter(prefix="/api/v1/stress", tags=["stress"])


async def _execute_run(run_id: str, sink: LogSink) -> None:
    run = run_store.get(run_id)
    if run is None:  # pragma: no cover - store reset mid-run
        return
    with structlog.contextvars.bound_contextvars(run_id=run_id):
        try:
            await run_stress_test(sink, run.parameters)
        except Exception as exc:
            logger.warning("stress.run_failed", error=str(exc))
            await run_store.finish(run_id, exc)
            return
        await run_store.finish(run_id)
        logger.info("stress.run_completed")


@router.post("", response_model=StressRun, status_code=202)
async def start_stress_run(
    payload: StressRunRequest,
    background_tasks: BackgroundTasks,
    sink: LogSink = Depends(get_app_sink),
) -> StressRun:
    parameters = payload.parameters or get_settings().stress_parameters()
    run = await run_store.create(parameters)
    background_tasks.add_task(_execute_run, run.id, sink)
    logger.info("stress.run_started", run_id=run.id)
    return run


@router.get("", response_model=StressRunList)
async def list_stress_runs() -> StressRunList:
    return StressRunList(items=run_store.list_runs())


@router.get("/{run_id}", response_model=StressRun)
async def get_stress_run(run_id: str) -> StressRun:
    run = run_store.get(run_id)
    if run is None:
        raise HTTPException(status_code=404, detail={"error_code": "RUN_NOT_FOUND", "message": "Stress run not found"})
    return run
