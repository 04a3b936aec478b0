"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from fastapi import APIRouter

from ..models.schemas import StampRequest, StampResponse
from ..utils.logical_clock import LogicalClock

router = APIRouter(prefix="/api/v1", tags=["clock"])
clock = LogicalClock()


@router.post("/stamp", response_model=StampResponse)
async def stamp(request: StampRequest) -> StampResponse:
    return StampResponse(timestamp=clock.stamp(request.instant))
