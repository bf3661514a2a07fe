"""Reading — immutable snapshot emitted once per tick."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from telemetry_engine.models.enums import Channel, FatigueLevel, PhysiologicalState


@dataclass(frozen=True)
class Reading:
    """All channel values for one tick, already rounded to display precision.

    The engine keeps no history of these; ownership passes to the sink and
    to listeners.
    """

    heart_rate: int
    hrv: int
    blood_oxygen: float
    skin_temperature: float
    stress_level: int
    muscle_oxygen: float
    respiratory_rate: int
    vo2_estimate: float
    lactate_estimate: float
    cadence: int
    muscle_fatigue: FatigueLevel

    state: PhysiologicalState
    battery_level: float
    training_load: int
    hydration_level: int
    recovery_time_min: int
    timestamp: datetime

    def channel(self, channel: Channel) -> float:
        return {
            Channel.HEART_RATE: self.heart_rate,
            Channel.HRV: self.hrv,
            Channel.BLOOD_OXYGEN: self.blood_oxygen,
            Channel.SKIN_TEMPERATURE: self.skin_temperature,
            Channel.STRESS: self.stress_level,
            Channel.MUSCLE_OXYGEN: self.muscle_oxygen,
            Channel.RESPIRATORY_RATE: self.respiratory_rate,
            Channel.VO2: self.vo2_estimate,
            Channel.LACTATE: self.lactate_estimate,
            Channel.CADENCE: self.cadence,
        }[channel]

    def to_record(self) -> dict[str, Any]:
        """Flat, JSON-friendly dict for persistence sinks."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "heart_rate": self.heart_rate,
            "hrv": self.hrv,
            "blood_oxygen": self.blood_oxygen,
            "skin_temperature": self.skin_temperature,
            "stress_level": self.stress_level,
            "muscle_oxygen": self.muscle_oxygen,
            "muscle_fatigue": self.muscle_fatigue.label,
            "respiratory_rate": self.respiratory_rate,
            "vo2_estimate": self.vo2_estimate,
            "lactate_estimate": self.lactate_estimate,
            "cadence": self.cadence,
            "state": self.state.label,
            "battery_level": self.battery_level,
            "training_load": self.training_load,
            "hydration_level": self.hydration_level,
            "recovery_time_min": self.recovery_time_min,
        }
