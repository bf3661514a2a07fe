"""Bracelet simulator host — runs the telemetry engine against a SQLite store.

Usage:
    python -m scheduler.simulate --once 20              # 20 synchronous ticks
    python -m scheduler.simulate --daemon               # tick every interval until Ctrl+C
    python -m scheduler.simulate --once 100 --activity running
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from telemetry_engine import BraceletSimulator, SimulatorConfig, TelemetryEngine
from telemetry_engine.models.enums import ActivityType
from telemetry_engine.models.reading import Reading
from telemetry_store import SessionStateError, SQLiteStore

from scheduler.config import DB_PATH, INTERVAL_MS, LOG_LEVEL, REALISTIC_NOISE, SEED

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _log_reading(reading: Reading) -> None:
    logger.info(
        "%s HR=%d HRV=%d SpO2=%.1f temp=%.1f stress=%d load=%d hydration=%d battery=%.1f",
        reading.state.label,
        reading.heart_rate,
        reading.hrv,
        reading.blood_oxygen,
        reading.skin_temperature,
        reading.stress_level,
        reading.training_load,
        reading.hydration_level,
        reading.battery_level,
    )


def _on_battery_low(level: float) -> None:
    logger.warning("Bracelet battery low (%.1f%%), charge soon", level)


def _open_sessions(store: SQLiteStore, activity: str | None, sleep: bool) -> None:
    try:
        if activity:
            store.start_activity(activity)
        if sleep:
            store.start_sleep()
    except SessionStateError as exc:
        logger.info("Reusing open session: %s", exc)


def run_once(store: SQLiteStore, config: SimulatorConfig, ticks: int) -> list[Reading]:
    """Run *ticks* ticks back to back and return the readings."""
    engine = TelemetryEngine(store, config)
    readings = [engine.tick() for _ in range(ticks)]
    logger.info("Completed %d ticks, %d vitals stored", ticks, store.vital_count())
    return readings


def run_daemon(store: SQLiteStore, config: SimulatorConfig) -> None:
    """Tick on the background scheduler until interrupted."""
    simulator = BraceletSimulator(store, config)
    simulator.start()
    try:
        while True:
            time.sleep(1)
    except (KeyboardInterrupt, SystemExit):
        logger.info("Interrupted")
    finally:
        simulator.stop()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Simulated health-bracelet telemetry")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", type=int, metavar="N", help="Run N ticks and exit")
    group.add_argument("--daemon", action="store_true", help="Tick on a schedule until Ctrl+C")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="SQLite database path")
    parser.add_argument("--interval", type=int, default=INTERVAL_MS, help="Tick interval (ms)")
    parser.add_argument(
        "--activity",
        choices=[t.name.lower() for t in ActivityType],
        help="Open an activity session before ticking",
    )
    parser.add_argument("--sleep", action="store_true", help="Open a sleep session before ticking")
    args = parser.parse_args(argv)

    config = SimulatorConfig(
        interval_ms=args.interval,
        realistic_noise=REALISTIC_NOISE,
        seed=SEED,
        on_reading=_log_reading,
        on_battery_low=_on_battery_low,
    )
    store = SQLiteStore(args.db)
    _open_sessions(store, args.activity, args.sleep)

    try:
        if args.once is not None:
            run_once(store, config, args.once)
        else:
            run_daemon(store, config)
    finally:
        store.close()


if __name__ == "__main__":
    main()
