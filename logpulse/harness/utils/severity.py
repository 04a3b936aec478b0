"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from typing import Dict

SEVERITY_LEVELS: Dict[str, int] = {
    "error": 0,
    "warn": 1,
    "info": 2,
    "http": 3,
    "verbose": 4,
    "debug": 5,
    "silly": 6,
}

SEVERITY_ALIASES: Dict[str, str] = {
    "warning": "warn",
    "fatal": "error",
    "critical": "error",
    "trace": "silly",
}

# Bunyan numeric levels
NUMERIC_LEVELS: Dict[int, str] = {
    10: "silly",
    20: "debug",
    30: "info",
    40: "warn",
    50: "error",
    60: "error",
}

BUNYAN_SEVERITY_MAP = "10=TRACE,20=DEBUG,30=INFO,40=WARN,50=ERROR,60=FATAL"


def normalize_severity(value: str | int) -> str:
    if isinstance(value, int):
        if value not in NUMERIC_LEVELS:
            raise ValueError(f"Unknown numeric severity: {value}")
        return NUMERIC_LEVELS[value]
    candidate = value.strip().lower()
    candidate = SEVERITY_ALIASES.get(candidate, candidate)
    if candidate not in SEVERITY_LEVELS:
        raise ValueError(f"Unknown severity: {value}")
    return candidate


def is_enabled(level: str | int, threshold: str | int) -> bool:
    return SEVERITY_LEVELS[normalize_severity(level)] <= SEVERITY_LEVELS[normalize_severity(threshold)]
