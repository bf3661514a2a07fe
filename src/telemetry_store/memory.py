"""In-process telemetry store for demos and tests.

Keeps sessions, readings and the device row in memory and exposes the
reading history as a pandas DataFrame for quick analysis.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import pandas as pd

from telemetry_engine.engine import local_now
from telemetry_engine.models.enums import ActivityType
from telemetry_engine.models.reading import Reading
from telemetry_engine.models.sessions import (
    ActivitySessionSignal,
    DeviceState,
    SleepSessionSignal,
)
from telemetry_store.base import TelemetryStore
from telemetry_store.exceptions import (
    SessionLookupError,
    SessionStateError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

READING_SOURCE = "bracelet_sim"

# Channels averaged per hour, matching the dashboard's hourly chart
_HOURLY_COLUMNS = ["heart_rate", "hrv", "stress_level", "blood_oxygen"]


class InMemoryStore(TelemetryStore):
    """Dict/list-backed TelemetryStore.

    ``fail_writes`` and ``fail_lookups`` simulate unavailable storage so
    callers can exercise their degraded paths.
    """

    def __init__(self, clock: Callable[[], datetime] = local_now) -> None:
        self._clock = clock
        self._next_session_id = 1
        self._activity: ActivitySessionSignal | None = None
        self._sleep: SleepSessionSignal | None = None
        self.readings: list[Reading] = []
        self.records: list[dict[str, Any]] = []
        self.device: dict[str, Any] = {
            "battery_level": 100.0,
            "connected": False,
            "simulating": False,
            "firmware_version": "1.0.0",
            "last_sync": None,
        }
        self.fail_writes = False
        self.fail_lookups = False

    # ------------------------------------------------------------------
    # Session management (host side)
    # ------------------------------------------------------------------

    def start_activity(
        self, activity_type: ActivityType | str, start_time: datetime | None = None
    ) -> int:
        """Open an activity session and return its id."""
        if self._activity is not None:
            raise SessionStateError(
                "An activity session is already open", self._activity.session_id
            )
        if isinstance(activity_type, str):
            activity_type = ActivityType.parse(activity_type)
        session_id = self._allocate_id()
        self._activity = ActivitySessionSignal(
            activity_type=activity_type,
            start_time=start_time or self._clock(),
            session_id=session_id,
        )
        logger.info("Started %s session %d", activity_type.name.lower(), session_id)
        return session_id

    def end_activity(self) -> int | None:
        """Close the open activity session, if any, and return its id."""
        if self._activity is None:
            return None
        session_id = self._activity.session_id
        self._activity = None
        logger.info("Ended activity session %s", session_id)
        return session_id

    def start_sleep(self, start_time: datetime | None = None) -> int:
        if self._sleep is not None:
            raise SessionStateError("A sleep session is already open", self._sleep.session_id)
        session_id = self._allocate_id()
        self._sleep = SleepSessionSignal(start_time=start_time or self._clock(), session_id=session_id)
        return session_id

    def end_sleep(self) -> int | None:
        if self._sleep is None:
            return None
        session_id = self._sleep.session_id
        self._sleep = None
        return session_id

    # ------------------------------------------------------------------
    # TelemetryStore
    # ------------------------------------------------------------------

    def lookup_active_activity_session(self) -> ActivitySessionSignal | None:
        if self.fail_lookups:
            raise SessionLookupError("activity session lookup unavailable")
        return self._activity

    def lookup_active_sleep_session(self) -> SleepSessionSignal | None:
        if self.fail_lookups:
            raise SessionLookupError("sleep session lookup unavailable")
        return self._sleep

    def persist_reading(
        self, reading: Reading, activity_session_id: int | None = None
    ) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("in-memory store is in failure mode")
        record = reading.to_record()
        record["source"] = READING_SOURCE
        record["activity_session_id"] = activity_session_id
        self.readings.append(reading)
        self.records.append(record)

    def persist_device_state(self, state: DeviceState) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("in-memory store is in failure mode")
        for key in ("battery_level", "connected", "simulating", "last_sync"):
            value = getattr(state, key)
            if value is not None:
                self.device[key] = value

    # ------------------------------------------------------------------
    # History queries
    # ------------------------------------------------------------------

    @property
    def latest(self) -> Reading | None:
        return self.readings[-1] if self.readings else None

    def readings_frame(self) -> pd.DataFrame:
        """All stored readings as a DataFrame indexed by UTC timestamp."""
        if not self.records:
            return pd.DataFrame()
        df = pd.DataFrame.from_records(self.records)
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
        return df.set_index("timestamp").sort_index()

    def hourly_averages(self) -> pd.DataFrame:
        """Mean heart rate, HRV, stress and SpO2 per clock hour."""
        df = self.readings_frame()
        if df.empty:
            return pd.DataFrame(columns=_HOURLY_COLUMNS)
        return df[_HOURLY_COLUMNS].resample("1h").mean().dropna(how="all")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _allocate_id(self) -> int:
        session_id = self._next_session_id
        self._next_session_id += 1
        return session_id
