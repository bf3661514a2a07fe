"""Telemetry stores — session lookups and persistence sinks for the engine."""

from telemetry_store.base import TelemetryStore
from telemetry_store.exceptions import (
    SessionLookupError,
    SessionStateError,
    StoreError,
    StoreUnavailableError,
)
from telemetry_store.memory import InMemoryStore
from telemetry_store.sqlite_store import SQLiteStore

__all__ = [
    "InMemoryStore",
    "SQLiteStore",
    "SessionLookupError",
    "SessionStateError",
    "StoreError",
    "StoreUnavailableError",
    "TelemetryStore",
]
