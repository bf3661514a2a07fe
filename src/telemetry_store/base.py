"""Abstract base class for the stores a simulated bracelet talks to."""

from __future__ import annotations

from abc import ABC, abstractmethod

from telemetry_engine.models.reading import Reading
from telemetry_engine.models.sessions import (
    ActivitySessionSignal,
    DeviceState,
    SleepSessionSignal,
)


class TelemetryStore(ABC):
    """Session lookups and persistence sinks injected into the engine.

    The store owns the truth of whether a session is open; the engine only
    asks. Implementations may raise any StoreError subclass; the engine
    logs and discards them.
    """

    @abstractmethod
    def lookup_active_activity_session(self) -> ActivitySessionSignal | None:
        """Return the open activity session, or None."""
        ...

    @abstractmethod
    def lookup_active_sleep_session(self) -> SleepSessionSignal | None:
        """Return the open sleep session, or None."""
        ...

    @abstractmethod
    def persist_reading(
        self, reading: Reading, activity_session_id: int | None = None
    ) -> None:
        """Append one reading, tagged with the activity session it belongs to."""
        ...

    @abstractmethod
    def persist_device_state(self, state: DeviceState) -> None:
        """Merge the non-None fields of *state* into the stored device row."""
        ...
