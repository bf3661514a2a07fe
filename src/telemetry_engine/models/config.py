"""Simulator configuration supplied by the host at construction time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from telemetry_engine.models.enums import DEFAULT_INTERVAL_MS
from telemetry_engine.models.reading import Reading


@dataclass
class SimulatorConfig:
    """Tick interval, noise switch, RNG seed and listener callbacks."""

    interval_ms: int = DEFAULT_INTERVAL_MS
    realistic_noise: bool = True
    seed: int | None = None  # None = fresh entropy each run
    on_reading: Callable[[Reading], None] | None = None
    on_battery_low: Callable[[float], None] | None = None
