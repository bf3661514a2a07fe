"""Physiological telemetry simulation engine for a virtual health bracelet."""

from telemetry_engine.engine import TelemetryEngine
from telemetry_engine.models.config import SimulatorConfig
from telemetry_engine.simulator import BraceletSimulator

__all__ = [
    "BraceletSimulator",
    "SimulatorConfig",
    "TelemetryEngine",
]
