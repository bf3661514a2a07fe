"""BraceletSimulator — public control surface and periodic tick driver.

The simulator is a thin adapter around TelemetryEngine.tick(): it marks the
bracelet connected, takes one immediate reading, and then lets an
APScheduler background scheduler call tick() every ``interval_ms``.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable

from apscheduler.schedulers.background import BackgroundScheduler

from telemetry_engine.engine import TelemetryEngine
from telemetry_engine.models.config import SimulatorConfig
from telemetry_engine.models.enums import PhysiologicalState
from telemetry_engine.models.reading import Reading
from telemetry_engine.models.sessions import DeviceState

if TYPE_CHECKING:
    from telemetry_store.base import TelemetryStore

logger = logging.getLogger(__name__)

_TICK_JOB_ID = "bracelet_tick"


class BraceletSimulator:
    """Start/stop/reconfigure a simulated bracelet.

    States: stopped → running → stopped. Calling start() while running, or
    stop() while stopped, is a no-op. Calls from different threads should
    be serialized by the host.

    Usage:
        sim = BraceletSimulator(store, SimulatorConfig(on_reading=print))
        sim.start()
        ...
        sim.stop()
    """

    def __init__(
        self,
        store: TelemetryStore,
        config: SimulatorConfig | None = None,
        *,
        engine: TelemetryEngine | None = None,
        scheduler_factory: Callable[[], BackgroundScheduler] = BackgroundScheduler,
    ) -> None:
        self.store = store
        self.config = config or SimulatorConfig()
        self.engine = engine or TelemetryEngine(store, self.config)
        self._scheduler_factory = scheduler_factory
        self._scheduler: BackgroundScheduler | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Connect, take one immediate reading, then tick every interval."""
        with self._lock:
            if self._scheduler is not None:
                return

            self.engine.set_connected(True)
            self._write_device_state(DeviceState(connected=True, simulating=True))
            self.engine.tick()

            scheduler = self._scheduler_factory()
            scheduler.add_job(
                self.engine.tick,
                "interval",
                seconds=self.config.interval_ms / 1000,
                id=_TICK_JOB_ID,
                max_instances=1,
                coalesce=True,
            )
            scheduler.start()
            self._scheduler = scheduler
            logger.info("Bracelet simulator started (interval %d ms)", self.config.interval_ms)

    def stop(self) -> None:
        """Cancel the recurring tick and mark the bracelet disconnected."""
        with self._lock:
            if self._scheduler is not None:
                self._scheduler.shutdown(wait=False)
                self._scheduler = None
                logger.info("Bracelet simulator stopped")
            # A tick still running on the scheduler thread must not re-mark us connected
            self.engine.set_connected(False)
            self._write_device_state(DeviceState(connected=False, simulating=False))

    def is_running(self) -> bool:
        return self._scheduler is not None

    # ------------------------------------------------------------------
    # Reconfiguration
    # ------------------------------------------------------------------

    def set_interval(self, ms: int) -> None:
        """Change the tick interval, re-arming the schedule if running.

        Non-positive intervals are ignored. Accumulated state is untouched.
        """
        if ms <= 0:
            logger.warning("Ignoring non-positive tick interval: %s ms", ms)
            return
        with self._lock:
            self.config.interval_ms = ms
            if self._scheduler is not None:
                self._scheduler.reschedule_job(
                    _TICK_JOB_ID, trigger="interval", seconds=ms / 1000
                )
            logger.info("Tick interval set to %d ms", ms)

    def force_state(self, state: PhysiologicalState) -> None:
        self.engine.force_state(state)

    def reset_battery(self) -> None:
        self.engine.reset_battery()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_last_reading(self) -> Reading:
        return self.engine.last_reading()

    def get_current_state(self) -> PhysiologicalState:
        return self.engine.current_state

    def get_battery_level(self) -> float:
        return self.engine.battery_level

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write_device_state(self, state: DeviceState) -> None:
        try:
            self.store.persist_device_state(state)
        except Exception as exc:
            logger.warning("Failed to persist device state: %s", exc)
