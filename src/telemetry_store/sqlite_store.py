"""SQLite-backed telemetry store.

Schema mirrors the companion app's local database: a ``vitals`` table of
readings, open/closed ``activity_sessions`` and ``sleep_sessions``, and a
single-row ``bracelet_state`` table.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

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
from telemetry_store.memory import READING_SOURCE

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS vitals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    heart_rate REAL NOT NULL,
    hrv REAL NOT NULL,
    blood_oxygen REAL NOT NULL,
    skin_temperature REAL NOT NULL,
    stress_level REAL NOT NULL,
    muscle_oxygen REAL,
    muscle_fatigue TEXT,
    respiratory_rate REAL,
    vo2_estimate REAL,
    lactate_estimate REAL,
    cadence REAL,
    state TEXT,
    training_load REAL,
    hydration_level REAL,
    recovery_time_min REAL,
    source TEXT DEFAULT 'bracelet',
    activity_session_id INTEGER,
    FOREIGN KEY (activity_session_id) REFERENCES activity_sessions(id)
);

CREATE TABLE IF NOT EXISTS activity_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    type TEXT NOT NULL,
    start_time TEXT NOT NULL,
    end_time TEXT,
    is_active INTEGER DEFAULT 1
);

CREATE TABLE IF NOT EXISTS sleep_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    start_time TEXT NOT NULL,
    end_time TEXT,
    is_active INTEGER DEFAULT 1
);

CREATE TABLE IF NOT EXISTS bracelet_state (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    is_connected INTEGER DEFAULT 0,
    battery_level REAL DEFAULT 100,
    firmware_version TEXT DEFAULT '1.0.0',
    last_sync TEXT,
    is_simulating INTEGER DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_vitals_timestamp ON vitals(timestamp);
CREATE INDEX IF NOT EXISTS idx_vitals_activity ON vitals(activity_session_id);

INSERT OR IGNORE INTO bracelet_state (id, is_connected, battery_level, is_simulating)
VALUES (1, 0, 100, 1);
"""

_VITAL_COLUMNS = (
    "timestamp",
    "heart_rate",
    "hrv",
    "blood_oxygen",
    "skin_temperature",
    "stress_level",
    "muscle_oxygen",
    "muscle_fatigue",
    "respiratory_rate",
    "vo2_estimate",
    "lactate_estimate",
    "cadence",
    "state",
    "training_load",
    "hydration_level",
    "recovery_time_min",
)


class SQLiteStore(TelemetryStore):
    """TelemetryStore persisted to a SQLite file (or ``":memory:"``).

    The connection is shared with the scheduler thread, so every statement
    runs under a lock.
    """

    def __init__(
        self, path: Path | str = ":memory:", clock: Callable[[], datetime] = local_now
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        if str(path) != ":memory:":
            Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            path = Path(path).expanduser()
        try:
            self._conn = sqlite3.connect(str(path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open telemetry database {path}: {exc}") from exc
        logger.debug("Opened telemetry database %s", path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Session management (host side)
    # ------------------------------------------------------------------

    def start_activity(
        self, activity_type: ActivityType | str, start_time: datetime | None = None
    ) -> int:
        if isinstance(activity_type, str):
            activity_type = ActivityType.parse(activity_type)
        if self.lookup_active_activity_session() is not None:
            raise SessionStateError("An activity session is already open")
        started = (start_time or self._clock()).isoformat()
        cur = self._write(
            "INSERT INTO activity_sessions (type, start_time, is_active) VALUES (?, ?, 1)",
            (activity_type.name.lower(), started),
        )
        logger.info("Started %s session %d", activity_type.name.lower(), cur.lastrowid)
        return int(cur.lastrowid)  # type: ignore[arg-type]

    def end_activity(self) -> int | None:
        active = self.lookup_active_activity_session()
        if active is None:
            return None
        self._write(
            "UPDATE activity_sessions SET end_time = ?, is_active = 0 WHERE id = ?",
            (self._clock().isoformat(), active.session_id),
        )
        logger.info("Ended activity session %s", active.session_id)
        return active.session_id

    def start_sleep(self, start_time: datetime | None = None) -> int:
        if self.lookup_active_sleep_session() is not None:
            raise SessionStateError("A sleep session is already open")
        cur = self._write(
            "INSERT INTO sleep_sessions (start_time, is_active) VALUES (?, 1)",
            ((start_time or self._clock()).isoformat(),),
        )
        return int(cur.lastrowid)  # type: ignore[arg-type]

    def end_sleep(self) -> int | None:
        active = self.lookup_active_sleep_session()
        if active is None:
            return None
        self._write(
            "UPDATE sleep_sessions SET end_time = ?, is_active = 0 WHERE id = ?",
            (self._clock().isoformat(), active.session_id),
        )
        return active.session_id

    # ------------------------------------------------------------------
    # TelemetryStore
    # ------------------------------------------------------------------

    def lookup_active_activity_session(self) -> ActivitySessionSignal | None:
        row = self._fetch_one(
            "SELECT id, type, start_time FROM activity_sessions "
            "WHERE is_active = 1 ORDER BY start_time DESC LIMIT 1"
        )
        if row is None:
            return None
        return ActivitySessionSignal(
            activity_type=ActivityType.parse(row["type"]),
            start_time=datetime.fromisoformat(row["start_time"]),
            session_id=row["id"],
        )

    def lookup_active_sleep_session(self) -> SleepSessionSignal | None:
        row = self._fetch_one(
            "SELECT id, start_time FROM sleep_sessions "
            "WHERE is_active = 1 ORDER BY start_time DESC LIMIT 1"
        )
        if row is None:
            return None
        return SleepSessionSignal(
            start_time=datetime.fromisoformat(row["start_time"]),
            session_id=row["id"],
        )

    def persist_reading(
        self, reading: Reading, activity_session_id: int | None = None
    ) -> None:
        record = reading.to_record()
        columns = (*_VITAL_COLUMNS, "source", "activity_session_id")
        values = (*(record[c] for c in _VITAL_COLUMNS), READING_SOURCE, activity_session_id)
        placeholders = ", ".join("?" for _ in columns)
        self._write(
            f"INSERT INTO vitals ({', '.join(columns)}) VALUES ({placeholders})",
            values,
        )

    def persist_device_state(self, state: DeviceState) -> None:
        fields: list[str] = []
        values: list[object] = []
        if state.connected is not None:
            fields.append("is_connected = ?")
            values.append(int(state.connected))
        if state.battery_level is not None:
            fields.append("battery_level = ?")
            values.append(state.battery_level)
        if state.last_sync is not None:
            fields.append("last_sync = ?")
            values.append(state.last_sync.isoformat())
        if state.simulating is not None:
            fields.append("is_simulating = ?")
            values.append(int(state.simulating))
        if not fields:
            return
        self._write(f"UPDATE bracelet_state SET {', '.join(fields)} WHERE id = 1", tuple(values))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def device_state(self) -> DeviceState:
        row = self._fetch_one("SELECT * FROM bracelet_state WHERE id = 1")
        if row is None:
            raise StoreUnavailableError("bracelet_state row is missing")
        return DeviceState(
            battery_level=row["battery_level"],
            connected=bool(row["is_connected"]),
            simulating=bool(row["is_simulating"]),
            last_sync=datetime.fromisoformat(row["last_sync"]) if row["last_sync"] else None,
        )

    def vital_count(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS n FROM vitals")
        return int(row["n"]) if row is not None else 0

    def latest_vital(self) -> dict | None:
        row = self._fetch_one("SELECT * FROM vitals ORDER BY id DESC LIMIT 1")
        return dict(row) if row is not None else None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            with self._lock, self._conn:
                return self._conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Telemetry write failed: {exc}") from exc

    def _fetch_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        try:
            with self._lock:
                return self._conn.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise SessionLookupError(f"Telemetry query failed: {exc}") from exc
