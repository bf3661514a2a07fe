"""TelemetryEngine — one tick of the bracelet simulation pipeline."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING, Callable

import numpy as np

from telemetry_engine.baselines import baseline_for
from telemetry_engine.math.accumulators import (
    accumulate_training_load,
    crossed_low_battery,
    drain_battery,
    recovery_time_minutes,
    update_hydration,
)
from telemetry_engine.math.circadian import circadian_offsets
from telemetry_engine.math.signal_model import (
    advance_channel,
    muscle_fatigue,
    round_channel,
)
from telemetry_engine.models.config import SimulatorConfig
from telemetry_engine.models.engine_state import EngineState
from telemetry_engine.models.enums import BATTERY_FULL, Channel, PhysiologicalState
from telemetry_engine.models.reading import Reading
from telemetry_engine.models.sessions import (
    ActivitySessionSignal,
    DeviceState,
    SleepSessionSignal,
)
from telemetry_engine.resolver import StateResolver

if TYPE_CHECKING:
    from telemetry_store.base import TelemetryStore

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    """Timezone-aware local wall-clock time."""
    return datetime.now().astimezone()


class TelemetryEngine:
    """Owns the mutable EngineState and advances it one tick at a time.

    Each tick runs, in order: resolve state → advance every channel →
    update accumulators → build Reading → persist → on_reading → low-battery
    edge check. Nothing raised by the store or by listeners escapes tick().

    Usage:
        engine = TelemetryEngine(store)
        reading = engine.tick()
    """

    def __init__(
        self,
        store: TelemetryStore,
        config: SimulatorConfig | None = None,
        *,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] = local_now,
        resolver: StateResolver | None = None,
        state: EngineState | None = None,
    ) -> None:
        self.store = store
        self.config = config or SimulatorConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.clock = clock
        self.resolver = resolver or StateResolver()
        self.state = state or EngineState()
        self._forced_state: PhysiologicalState | None = None
        self._connected = True
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> PhysiologicalState:
        return self.state.current_state

    @property
    def battery_level(self) -> float:
        return round(self.state.battery_level, 1)

    def last_reading(self) -> Reading:
        """Snapshot of the current values without advancing any channel."""
        with self._lock:
            return self._build_reading(self.clock())

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def force_state(self, state: PhysiologicalState) -> None:
        """Override the state resolved on the next tick (demo/testing hook)."""
        with self._lock:
            self._forced_state = state
            self.state.current_state = state

    def set_connected(self, connected: bool) -> None:
        """Toggle device-state writes; waits for an in-flight tick to finish."""
        with self._lock:
            self._connected = connected

    def reset_battery(self) -> None:
        with self._lock:
            self.state.battery_level = BATTERY_FULL

    def reset(self) -> None:
        """Return every channel and accumulator to its seeded default."""
        with self._lock:
            self.state.reset()
            self._forced_state = None

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> Reading:
        """Advance the simulation by one tick and return the new Reading."""
        with self._lock:
            now = self.clock()
            activity = self._lookup_activity()
            sleep = self._lookup_sleep()

            resolved = self._resolve(now, activity, sleep)
            if self._forced_state is not None:
                resolved = self._forced_state
                self._forced_state = None
            self.state.current_state = resolved

            self._advance_channels(resolved, now.hour)

            previous_battery = self.state.battery_level
            self._update_accumulators(resolved)
            self.state.tick_count += 1

            reading = self._build_reading(now)
            logger.debug(
                "Tick %d: state=%s hr=%d battery=%.1f",
                self.state.tick_count,
                resolved.label,
                reading.heart_rate,
                reading.battery_level,
            )

            self._persist(reading, activity.session_id if activity else None)
            self._notify_reading(reading)

            if crossed_low_battery(previous_battery, self.state.battery_level):
                self._notify_battery_low(reading.battery_level)

            return reading

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lookup_activity(self) -> ActivitySessionSignal | None:
        try:
            return self.store.lookup_active_activity_session()
        except Exception as exc:
            logger.debug("Activity session lookup failed, assuming none: %s", exc)
            return None

    def _lookup_sleep(self) -> SleepSessionSignal | None:
        try:
            return self.store.lookup_active_sleep_session()
        except Exception as exc:
            logger.debug("Sleep session lookup failed, assuming none: %s", exc)
            return None

    def _resolve(
        self,
        now: datetime,
        activity: ActivitySessionSignal | None,
        sleep: SleepSessionSignal | None,
    ) -> PhysiologicalState:
        try:
            return self.resolver.resolve(now, activity, sleep, self.state)
        except Exception as exc:
            logger.warning("State resolution failed, assuming resting: %s", exc)
            return PhysiologicalState.RESTING

    def _advance_channels(self, resolved: PhysiologicalState, hour: int) -> None:
        baseline = baseline_for(resolved)
        offsets = circadian_offsets(hour)
        for channel in Channel:
            self.state.values[channel] = advance_channel(
                channel,
                self.state.values[channel],
                baseline,
                offsets,
                self.rng,
                with_noise=self.config.realistic_noise,
            )

    def _update_accumulators(self, resolved: PhysiologicalState) -> None:
        self.state.training_load = accumulate_training_load(self.state.training_load, resolved)
        self.state.hydration_level = update_hydration(self.state.hydration_level, resolved)
        self.state.battery_level = drain_battery(self.state.battery_level)

    def _build_reading(self, now: datetime) -> Reading:
        values = self.state.values
        baseline = baseline_for(self.state.current_state)
        return Reading(
            heart_rate=round_channel(Channel.HEART_RATE, values[Channel.HEART_RATE]),
            hrv=round_channel(Channel.HRV, values[Channel.HRV]),
            blood_oxygen=round_channel(Channel.BLOOD_OXYGEN, values[Channel.BLOOD_OXYGEN]),
            skin_temperature=round_channel(
                Channel.SKIN_TEMPERATURE, values[Channel.SKIN_TEMPERATURE]
            ),
            stress_level=round_channel(Channel.STRESS, values[Channel.STRESS]),
            muscle_oxygen=round_channel(Channel.MUSCLE_OXYGEN, values[Channel.MUSCLE_OXYGEN]),
            respiratory_rate=round_channel(
                Channel.RESPIRATORY_RATE, values[Channel.RESPIRATORY_RATE]
            ),
            vo2_estimate=round_channel(Channel.VO2, values[Channel.VO2]),
            lactate_estimate=round_channel(Channel.LACTATE, values[Channel.LACTATE]),
            cadence=round_channel(Channel.CADENCE, values[Channel.CADENCE]),
            muscle_fatigue=muscle_fatigue(values[Channel.MUSCLE_OXYGEN], baseline.fatigue),
            state=self.state.current_state,
            battery_level=round(self.state.battery_level, 1),
            training_load=int(round(self.state.training_load)),
            hydration_level=int(round(self.state.hydration_level)),
            recovery_time_min=recovery_time_minutes(
                self.state.training_load, values[Channel.HEART_RATE]
            ),
            timestamp=now,
        )

    def _persist(self, reading: Reading, activity_session_id: int | None) -> None:
        try:
            self.store.persist_reading(reading, activity_session_id=activity_session_id)
            if not self._connected:
                return
            self.store.persist_device_state(
                DeviceState(
                    battery_level=reading.battery_level,
                    connected=True,
                    last_sync=reading.timestamp,
                )
            )
        except Exception as exc:
            logger.warning("Failed to persist reading at %s: %s", reading.timestamp, exc)

    def _notify_reading(self, reading: Reading) -> None:
        if self.config.on_reading is None:
            return
        try:
            self.config.on_reading(reading)
        except Exception as exc:
            logger.warning("on_reading listener raised: %s", exc)

    def _notify_battery_low(self, level: float) -> None:
        logger.info("Battery low: %.1f%%", level)
        if self.config.on_battery_low is None:
            return
        try:
            self.config.on_battery_low(level)
        except Exception as exc:
            logger.warning("on_battery_low listener raised: %s", exc)
