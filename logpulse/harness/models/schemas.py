"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with attribute extraction enabled."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SystemHealth(BaseSchema):
    status: str
    components: Dict[str, str] = Field(default_factory=dict)


class LoadParameters(BaseSchema):
    """Shape of one stress run.

    Accepts both snake_case and the camelCase names used by the JavaScript examples
    (``durationSeconds``, ``burstIntervalMs`` ...). Immutable once built.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True, alias_generator=to_camel)

    duration_seconds: float = Field(5, gt=0)
    lines_per_burst: int = Field(100, gt=0)
    burst_interval_ms: float = Field(100.0, gt=0)
    slices_per_second: float = Field(100, gt=0)
    busy_fraction_percent: float = Field(90, ge=0, le=100)

    @property
    def slice_ms(self) -> float:
        return 1000.0 / self.slices_per_second

    @property
    def busy_window_ms(self) -> float:
        return self.slice_ms * (self.busy_fraction_percent / 100.0)

    @property
    def idle_window_ms(self) -> float:
        return self.slice_ms * (1 - (self.busy_fraction_percent / 100.0))


class StressRunRequest(BaseSchema):
    parameters: Optional[LoadParameters] = None


class StressRun(BaseSchema):
    id: str
    status: str
    parameters: LoadParameters
    started_at: datetime
    finished_at: Optional[datetime] = None
    error: Optional[str] = None


class StressRunList(BaseSchema):
    items: List[StressRun] = Field(default_factory=list)


class StampRequest(BaseSchema):
    instant: Optional[datetime] = None


class StampResponse(BaseSchema):
    timestamp: str
