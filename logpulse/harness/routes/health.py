"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.schemas import SystemHealth
from ..sinks.base import LogSink
from ..sinks.factory import get_app_sink, sink_mode
from ..utils.run_store import run_store

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=SystemHealth)
async def health(sink: LogSink = Depends(get_app_sink)) -> SystemHealth:
    components = {
        "sink": sink_mode(sink),
        "runs": str(run_store.active_count()),
    }
    return SystemHealth(status="ok", components=components)
