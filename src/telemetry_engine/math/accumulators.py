"""Session-level accumulators: training load, hydration, recovery time, battery.

All functions take the previous value and the resolved state and return the
new value; the engine owns where the values live.
"""

from __future__ import annotations

from telemetry_engine.math.signal_model import clamp
from telemetry_engine.models.enums import (
    ACTIVE_STATES,
    BATTERY_DRAIN_PER_TICK,
    HYDRATION_ACTIVE_DRAIN,
    HYDRATION_INTENSE_DRAIN,
    HYDRATION_MAX,
    HYDRATION_REST_RECOVERY,
    LOW_BATTERY_THRESHOLD,
    RECOVERY_HR_FLOOR,
    RECOVERY_MIN_PER_BPM,
    RECOVERY_MIN_PER_LOAD,
    TRAINING_LOAD_INCREMENT,
    TRAINING_LOAD_MAX,
    PhysiologicalState,
)


def is_active_state(state: PhysiologicalState) -> bool:
    """Warm-up and the three activity intensities count as exercise."""
    return state in ACTIVE_STATES


def training_load_increment(state: PhysiologicalState) -> float:
    return TRAINING_LOAD_INCREMENT.get(state, 0.0)


def accumulate_training_load(load: float, state: PhysiologicalState) -> float:
    """Add the intensity-weighted increment for one tick, capped at 100.

    Load is never decayed here; it only resets when a new activity session
    is first observed.
    """
    return clamp(load + training_load_increment(state), 0.0, TRAINING_LOAD_MAX)


def update_hydration(level: float, state: PhysiologicalState) -> float:
    """Drain during exercise, recover slowly otherwise."""
    if is_active_state(state):
        drain = (
            HYDRATION_INTENSE_DRAIN
            if state == PhysiologicalState.INTENSE_ACTIVITY
            else HYDRATION_ACTIVE_DRAIN
        )
        return max(0.0, level - drain)
    return min(HYDRATION_MAX, level + HYDRATION_REST_RECOVERY)


def recovery_time_minutes(training_load: float, heart_rate: float) -> int:
    """Estimated minutes to full recovery from current load and heart rate.

    round(load × 2.5 + max(0, HR − 80) × 0.5)
    """
    return int(round(
        training_load * RECOVERY_MIN_PER_LOAD
        + max(0.0, heart_rate - RECOVERY_HR_FLOOR) * RECOVERY_MIN_PER_BPM
    ))


def drain_battery(level: float) -> float:
    return max(0.0, level - BATTERY_DRAIN_PER_TICK)


def crossed_low_battery(
    previous: float, current: float, threshold: float = LOW_BATTERY_THRESHOLD
) -> bool:
    """True only on the tick the battery first drops to or below *threshold*."""
    return previous > threshold >= current
