"""Enumerations and simulation constants for the telemetry engine.

Thresholds and rates below are tuning constants of the simulated bracelet,
not physiological reference values.
"""

from enum import IntEnum, auto


class PhysiologicalState(IntEnum):
    """Physiological state the wearer is simulated to be in.

    Exactly one state is current at any tick. States are resolved fresh
    every tick from session signals rather than stored as a transition table.
    """

    RESTING = auto()
    SLEEPING = auto()
    WARMUP = auto()
    LIGHT_ACTIVITY = auto()
    MODERATE_ACTIVITY = auto()
    INTENSE_ACTIVITY = auto()
    RECOVERY = auto()
    COOLDOWN = auto()
    STRESSED = auto()

    @property
    def label(self) -> str:
        """Lowercase name used by persistence sinks (e.g. "intense_activity")."""
        return self.name.lower()


class ActivityType(IntEnum):
    """Activity types a host application can open a session for."""

    RUNNING = auto()
    WALKING = auto()
    CYCLING = auto()
    STRENGTH = auto()
    YOGA = auto()
    MEDITATION = auto()
    SWIMMING = auto()
    HIIT = auto()
    STRETCHING = auto()
    OTHER = auto()

    @classmethod
    def parse(cls, name: str | None) -> "ActivityType":
        """Map a persisted activity name to the enum, falling back to OTHER."""
        if not name:
            return cls.OTHER
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return cls.OTHER


class FatigueLevel(IntEnum):
    """Categorical muscle fatigue, ordered by severity."""

    LOW = auto()
    MEDIUM = auto()
    HIGH = auto()

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Channel(IntEnum):
    """The ten simulated biosignal channels."""

    HEART_RATE = auto()
    HRV = auto()
    BLOOD_OXYGEN = auto()
    SKIN_TEMPERATURE = auto()
    STRESS = auto()
    MUSCLE_OXYGEN = auto()
    RESPIRATORY_RATE = auto()
    VO2 = auto()
    LACTATE = auto()
    CADENCE = auto()


# ---------------------------------------------------------------------------
# Scheduler defaults
# ---------------------------------------------------------------------------
DEFAULT_INTERVAL_MS = 3000

# ---------------------------------------------------------------------------
# State resolution windows (seconds)
# ---------------------------------------------------------------------------
WARMUP_WINDOW_S = 180.0  # First 3 minutes of any non-resting session
COOLDOWN_WINDOW_S = 300.0  # First 5 minutes after a session ends
# Recovery length after the cooldown window. The device firmware never ends
# Recovery on its own; 15 min is a simulator tuning choice so Resting resumes.
RECOVERY_WINDOW_S = 900.0

# ---------------------------------------------------------------------------
# Signal model
# ---------------------------------------------------------------------------
BASE_SMOOTHING_FACTOR = 0.3
TEMPERATURE_SMOOTHING_MULTIPLIER = 0.5
VO2_SMOOTHING_MULTIPLIER = 0.4
LACTATE_SMOOTHING_MULTIPLIER = 0.3

# Muscle oxygen (SmO2 %) below which fatigue is escalated
SMO2_HIGH_FATIGUE_THRESHOLD = 45.0
SMO2_MEDIUM_FATIGUE_THRESHOLD = 60.0

# Circadian amplitudes
CIRCADIAN_HR_AMPLITUDE = 5.0  # bpm, lowest around 04:00
CIRCADIAN_HRV_NIGHT_BONUS = 8.0  # ms, 22:00-06:59
CIRCADIAN_HRV_DAY_PENALTY = -3.0
CIRCADIAN_STRESS_AMPLITUDE = 8.0

# ---------------------------------------------------------------------------
# Session accumulators (per tick)
# ---------------------------------------------------------------------------
TRAINING_LOAD_MAX = 100.0
TRAINING_LOAD_INCREMENT = {
    PhysiologicalState.INTENSE_ACTIVITY: 0.6,
    PhysiologicalState.MODERATE_ACTIVITY: 0.35,
    PhysiologicalState.WARMUP: 0.2,
    PhysiologicalState.LIGHT_ACTIVITY: 0.15,
}
ACTIVE_STATES = frozenset(TRAINING_LOAD_INCREMENT)

HYDRATION_START = 95.0
HYDRATION_MAX = 100.0
HYDRATION_INTENSE_DRAIN = 0.15
HYDRATION_ACTIVE_DRAIN = 0.06
HYDRATION_REST_RECOVERY = 0.02

# Recovery estimate: minutes per unit of training load, and per bpm above the floor
RECOVERY_MIN_PER_LOAD = 2.5
RECOVERY_MIN_PER_BPM = 0.5
RECOVERY_HR_FLOOR = 80.0

BATTERY_FULL = 100.0
BATTERY_DRAIN_PER_TICK = 0.01
LOW_BATTERY_THRESHOLD = 15.0
