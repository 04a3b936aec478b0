"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.schemas import LoadParameters

LOCALTIME_PATH = Path("/etc/localtime")


def _zone_key(path: str) -> str | None:
    if "zoneinfo/" in path:
        return path.split("zoneinfo/", 1)[1]
    return None


def _local_timezone(*, localtime: Path = LOCALTIME_PATH) -> str:
    """IANA name of the host zone, e.g. ``Europe/Berlin``."""
    configured = os.environ.get("TZ", "").lstrip(":")
    if configured:
        return _zone_key(configured) or configured
    try:
        target = str(localtime.resolve())
    except OSError:
        return "UTC"
    return _zone_key(target) or "UTC"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")

    app_name: str = "LogPulse"
    # Customize the region from us to eu if needed
    ingest_url: AnyUrl = Field("https://es8.ingest-us.engine.sparklogs.app/", alias="CLOUD_LOGGING_INGEST_URL")
    auth_token: str | None = Field(default=None, alias="CLOUD_LOGGING_AUTH_TOKEN")
    index_prefix: str = "app-logs"
    flush_interval_ms: int = Field(default=2000, gt=0)
    buffer_limit: int = Field(default=4000, gt=0)
    max_retries: int = Field(default=20, ge=0)
    request_timeout_seconds: float = 30.0
    min_level: str = "info"
    console_level: str = "warn"
    timezone: str = Field(default_factory=_local_timezone)
    send_severity_map: bool = False
    source: str | None = None

    stress_duration_seconds: float = 5
    stress_lines_per_burst: int = 100
    stress_burst_interval_ms: float = 100.0
    stress_slices_per_second: float = 100
    stress_busy_fraction_percent: float = 90

    def stress_parameters(self) -> LoadParameters:
        return LoadParameters(
            duration_seconds=self.stress_duration_seconds,
            lines_per_burst=self.stress_lines_per_burst,
            burst_interval_ms=self.stress_burst_interval_ms,
            slices_per_second=self.stress_slices_per_second,
            busy_fraction_percent=self.stress_busy_fraction_percent,
        )

    @property
    def shipping_enabled(self) -> bool:
        return bool(self.auth_token)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
