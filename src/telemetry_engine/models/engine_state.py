"""Mutable engine state — the only entity that changes between ticks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from telemetry_engine.models.enums import (
    BATTERY_FULL,
    HYDRATION_START,
    Channel,
    PhysiologicalState,
)

# Values a freshly powered bracelet starts from
SEED_VALUES: dict[Channel, float] = {
    Channel.HEART_RATE: 65.0,
    Channel.HRV: 55.0,
    Channel.BLOOD_OXYGEN: 97.0,
    Channel.SKIN_TEMPERATURE: 36.5,
    Channel.STRESS: 20.0,
    Channel.MUSCLE_OXYGEN: 72.0,
    Channel.RESPIRATORY_RATE: 14.0,
    Channel.VO2: 4.0,
    Channel.LACTATE: 0.8,
    Channel.CADENCE: 0.0,
}


@dataclass
class EngineState:
    """Smoothed channel values plus session-scoped accumulators.

    One instance per simulated device. Nothing here is shared between
    engines; a host wanting two bracelets constructs two states.
    """

    values: dict[Channel, float] = field(default_factory=lambda: dict(SEED_VALUES))
    current_state: PhysiologicalState = PhysiologicalState.RESTING
    battery_level: float = BATTERY_FULL
    tick_count: int = 0

    # Activity session tracking
    session_start_time: datetime | None = None
    session_id: int | None = None
    activity_tick_count: int = 0
    last_activity_seen_at: datetime | None = None
    session_ended_at: datetime | None = None

    training_load: float = 0.0
    hydration_level: float = HYDRATION_START

    def value(self, channel: Channel) -> float:
        return self.values[channel]

    @property
    def heart_rate(self) -> float:
        return self.values[Channel.HEART_RATE]

    def reset(self) -> None:
        """Restore seeded defaults. Only called on an explicit engine reset."""
        fresh = EngineState()
        self.__dict__.update(fresh.__dict__)
