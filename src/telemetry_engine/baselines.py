"""Channel baseline table and activity-type → state lookup.

Ranges describe where each channel hovers once the wearer has settled
into a state; the signal model smooths towards their midpoints.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from telemetry_engine.models.baseline import ChannelBaseline
from telemetry_engine.models.enums import ActivityType, FatigueLevel, PhysiologicalState

STATE_BASELINES: Mapping[PhysiologicalState, ChannelBaseline] = MappingProxyType({
    PhysiologicalState.RESTING: ChannelBaseline(
        hr=(58, 72),
        hrv=(45, 70),
        spo2=(96, 99),
        temp=(36.2, 36.8),
        stress=(10, 30),
        smo2=(70, 80),
        rr=(12, 16),
        vo2=(3, 5),
        lactate=(0.5, 1.2),
        cadence=(0, 0),
        fatigue=FatigueLevel.LOW,
    ),
    PhysiologicalState.SLEEPING: ChannelBaseline(
        hr=(48, 60),
        hrv=(55, 85),
        spo2=(95, 98),
        temp=(35.8, 36.4),
        stress=(5, 15),
        smo2=(72, 82),
        rr=(10, 14),
        vo2=(2.5, 3.5),
        lactate=(0.4, 0.8),
        cadence=(0, 0),
        fatigue=FatigueLevel.LOW,
    ),
    PhysiologicalState.WARMUP: ChannelBaseline(
        hr=(90, 115),
        hrv=(30, 45),
        spo2=(95, 98),
        temp=(36.5, 37.0),
        stress=(20, 35),
        smo2=(58, 70),
        rr=(18, 24),
        vo2=(15, 25),
        lactate=(1.0, 2.0),
        cadence=(60, 100),
        fatigue=FatigueLevel.LOW,
    ),
    PhysiologicalState.LIGHT_ACTIVITY: ChannelBaseline(
        hr=(80, 105),
        hrv=(30, 50),
        spo2=(95, 98),
        temp=(36.5, 37.2),
        stress=(20, 40),
        smo2=(60, 72),
        rr=(16, 22),
        vo2=(10, 20),
        lactate=(0.8, 1.8),
        cadence=(80, 120),
        fatigue=FatigueLevel.LOW,
    ),
    PhysiologicalState.MODERATE_ACTIVITY: ChannelBaseline(
        hr=(110, 140),
        hrv=(20, 40),
        spo2=(94, 97),
        temp=(37.0, 37.8),
        stress=(35, 55),
        smo2=(50, 65),
        rr=(22, 32),
        vo2=(25, 40),
        lactate=(2.0, 4.0),
        cadence=(70, 100),
        fatigue=FatigueLevel.MEDIUM,
    ),
    PhysiologicalState.INTENSE_ACTIVITY: ChannelBaseline(
        hr=(150, 185),
        hrv=(10, 25),
        spo2=(92, 96),
        temp=(37.5, 38.5),
        stress=(55, 80),
        smo2=(35, 55),
        rr=(30, 45),
        vo2=(40, 60),
        lactate=(4.0, 8.0),
        cadence=(140, 180),
        fatigue=FatigueLevel.HIGH,
    ),
    PhysiologicalState.RECOVERY: ChannelBaseline(
        hr=(75, 95),
        hrv=(35, 55),
        spo2=(95, 98),
        temp=(36.8, 37.4),
        stress=(25, 45),
        smo2=(60, 75),
        rr=(14, 20),
        vo2=(8, 15),
        lactate=(1.5, 3.0),
        cadence=(0, 20),
        fatigue=FatigueLevel.MEDIUM,
    ),
    PhysiologicalState.COOLDOWN: ChannelBaseline(
        hr=(85, 110),
        hrv=(28, 45),
        spo2=(95, 98),
        temp=(37.0, 37.6),
        stress=(25, 40),
        smo2=(55, 68),
        rr=(18, 26),
        vo2=(12, 22),
        lactate=(2.0, 4.0),
        cadence=(30, 60),
        fatigue=FatigueLevel.MEDIUM,
    ),
    PhysiologicalState.STRESSED: ChannelBaseline(
        hr=(78, 95),
        hrv=(20, 35),
        spo2=(95, 98),
        temp=(36.5, 37.2),
        stress=(60, 85),
        smo2=(62, 74),
        rr=(18, 26),
        vo2=(5, 10),
        lactate=(0.8, 1.5),
        cadence=(0, 0),
        fatigue=FatigueLevel.MEDIUM,
    ),
})


def baseline_for(state: PhysiologicalState) -> ChannelBaseline:
    return STATE_BASELINES[state]


# Steady-state physiology per activity once warm-up is over; every ActivityType is listed
_ACTIVITY_BASE_STATE: dict[ActivityType, PhysiologicalState] = {
    ActivityType.RUNNING: PhysiologicalState.INTENSE_ACTIVITY,
    ActivityType.STRENGTH: PhysiologicalState.INTENSE_ACTIVITY,
    ActivityType.HIIT: PhysiologicalState.INTENSE_ACTIVITY,
    ActivityType.CYCLING: PhysiologicalState.MODERATE_ACTIVITY,
    ActivityType.SWIMMING: PhysiologicalState.MODERATE_ACTIVITY,
    ActivityType.OTHER: PhysiologicalState.MODERATE_ACTIVITY,
    ActivityType.WALKING: PhysiologicalState.LIGHT_ACTIVITY,
    ActivityType.YOGA: PhysiologicalState.LIGHT_ACTIVITY,
    ActivityType.STRETCHING: PhysiologicalState.LIGHT_ACTIVITY,
    ActivityType.MEDITATION: PhysiologicalState.RESTING,
}


def base_state_for(activity_type: ActivityType) -> PhysiologicalState:
    """Map an activity type to the state it settles into after warm-up."""
    return _ACTIVITY_BASE_STATE.get(activity_type, PhysiologicalState.MODERATE_ACTIVITY)
