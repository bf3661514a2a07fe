"""Shared test fixtures: a controllable clock, stores and engine factories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import numpy as np
import pytest

from telemetry_engine.engine import TelemetryEngine
from telemetry_engine.models.config import SimulatorConfig
from telemetry_store.memory import InMemoryStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


# 03:00, deep night for the circadian scenarios
NIGHT_START = datetime(2026, 3, 10, 3, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NIGHT_START)


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    return InMemoryStore(clock=clock)


@pytest.fixture
def make_engine(
    store: InMemoryStore, clock: FakeClock
) -> Callable[..., TelemetryEngine]:
    """Factory fixture for engines wired to the shared store and clock.

    Usage:
        engine = make_engine(realistic_noise=False, on_reading=readings.append)
    """

    def factory(seed: int = 42, **config_kwargs) -> TelemetryEngine:
        config = SimulatorConfig(**config_kwargs)
        return TelemetryEngine(
            store,
            config,
            rng=np.random.default_rng(seed),
            clock=clock,
        )

    return factory


@pytest.fixture
def run_ticks(clock: FakeClock) -> Callable[..., list]:
    """Tick an engine *n* times, advancing the clock by the tick interval after each."""

    def runner(engine: TelemetryEngine, n: int, step_s: float = 3.0) -> list:
        readings = []
        for _ in range(n):
            readings.append(engine.tick())
            clock.advance(step_s)
        return readings

    return runner
