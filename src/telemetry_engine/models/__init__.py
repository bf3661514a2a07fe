"""Data models for the telemetry engine."""

from telemetry_engine.models.baseline import ChannelBaseline
from telemetry_engine.models.engine_state import SEED_VALUES, EngineState
from telemetry_engine.models.enums import (
    ActivityType,
    Channel,
    FatigueLevel,
    PhysiologicalState,
)
from telemetry_engine.models.reading import Reading
from telemetry_engine.models.sessions import (
    ActivitySessionSignal,
    DeviceState,
    SleepSessionSignal,
)

__all__ = [
    "ActivitySessionSignal",
    "ActivityType",
    "Channel",
    "ChannelBaseline",
    "DeviceState",
    "EngineState",
    "FatigueLevel",
    "PhysiologicalState",
    "Reading",
    "SEED_VALUES",
    "SleepSessionSignal",
]
