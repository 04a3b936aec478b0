"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from harness.app import app
from harness.sinks.factory import get_app_sink
from harness.sinks.memory import MemorySink
from harness.utils.run_store import RunStore, run_store


class FakeTime:
    """Monotonic clock that advances on every read, with a sleep that advances it and yields."""

    def __init__(self, tick: float = 0.001) -> None:
        self.now = 0.0
        self.tick = tick
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        self.now += self.tick
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in ("CLOUD_LOGGING_AUTH_TOKEN", "CLOUD_LOGGING_INGEST_URL"):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_runs():
    fresh = RunStore()
    run_store.__dict__.clear()
    run_store.__dict__.update(fresh.__dict__)
    yield


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture()
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture()
def client(memory_sink: MemorySink):
    app.dependency_overrides[get_app_sink] = lambda: memory_sink
    yield TestClient(app)
    app.dependency_overrides.clear()
