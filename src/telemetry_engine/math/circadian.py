"""Circadian offsets applied to heart rate, HRV and stress targets.

Heart rate bottoms out around 03:00-04:00 and peaks mid-afternoon, HRV is
elevated overnight, and stress is lowest in the morning.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from telemetry_engine.models.enums import (
    CIRCADIAN_HR_AMPLITUDE,
    CIRCADIAN_HRV_DAY_PENALTY,
    CIRCADIAN_HRV_NIGHT_BONUS,
    CIRCADIAN_STRESS_AMPLITUDE,
    Channel,
)


@dataclass(frozen=True)
class CircadianOffsets:
    """Additive target adjustments for one wall-clock hour."""

    hr: float = 0.0
    hrv: float = 0.0
    stress: float = 0.0

    def for_channel(self, channel: Channel) -> float:
        if channel == Channel.HEART_RATE:
            return self.hr
        if channel == Channel.HRV:
            return self.hrv
        if channel == Channel.STRESS:
            return self.stress
        return 0.0


def is_night_hour(hour: int) -> bool:
    """22:00 through 06:59 counts as night."""
    return hour >= 22 or hour <= 6


def circadian_offsets(hour: int) -> CircadianOffsets:
    """Compute circadian offsets for an hour of day (0-23).

    hr     = 5 · sin((hour - 4) · π/12)
    hrv    = +8 at night, -3 during the day
    stress = 8 · sin((hour - 8) · π/10)
    """
    hr = CIRCADIAN_HR_AMPLITUDE * math.sin((hour - 4) * math.pi / 12)
    hrv = CIRCADIAN_HRV_NIGHT_BONUS if is_night_hour(hour) else CIRCADIAN_HRV_DAY_PENALTY
    stress = CIRCADIAN_STRESS_AMPLITUDE * math.sin((hour - 8) * math.pi / 10)
    return CircadianOffsets(hr=hr, hrv=hrv, stress=stress)
