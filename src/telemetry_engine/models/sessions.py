"""Session signals consumed by the engine and device state it reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from telemetry_engine.models.enums import ActivityType


@dataclass(frozen=True)
class ActivitySessionSignal:
    """An open activity session as reported by the persistence layer."""

    activity_type: ActivityType
    start_time: datetime
    session_id: int | None = None


@dataclass(frozen=True)
class SleepSessionSignal:
    """An open sleep session. Only its presence matters to the resolver."""

    start_time: datetime | None = None
    session_id: int | None = None


@dataclass(frozen=True)
class DeviceState:
    """Bracelet connection status written to the sink."""

    battery_level: float | None = None
    connected: bool | None = None
    simulating: bool | None = None
    last_sync: datetime | None = None
