"""Per-state physiological baseline ranges."""

from __future__ import annotations

from dataclasses import dataclass, fields

from telemetry_engine.models.enums import Channel, FatigueLevel

Range = tuple[float, float]

_CHANNEL_FIELDS: dict[Channel, str] = {
    Channel.HEART_RATE: "hr",
    Channel.HRV: "hrv",
    Channel.BLOOD_OXYGEN: "spo2",
    Channel.SKIN_TEMPERATURE: "temp",
    Channel.STRESS: "stress",
    Channel.MUSCLE_OXYGEN: "smo2",
    Channel.RESPIRATORY_RATE: "rr",
    Channel.VO2: "vo2",
    Channel.LACTATE: "lactate",
    Channel.CADENCE: "cadence",
}


@dataclass(frozen=True)
class ChannelBaseline:
    """Closed range per channel for one physiological state.

    Ranges are (lower, upper) with lower <= upper, checked on construction.
    """

    hr: Range  # bpm
    hrv: Range  # ms RMSSD
    spo2: Range  # %
    temp: Range  # °C skin
    stress: Range  # 0-100
    smo2: Range  # muscle oxygen %
    rr: Range  # breaths/min
    vo2: Range  # ml/kg/min
    lactate: Range  # mmol/L
    cadence: Range  # steps or strokes/min
    fatigue: FatigueLevel = FatigueLevel.LOW

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "fatigue":
                continue
            lo, hi = getattr(self, f.name)
            if lo > hi:
                raise ValueError(f"{f.name} range lower bound {lo} exceeds upper bound {hi}")

    def range_for(self, channel: Channel) -> Range:
        return getattr(self, _CHANNEL_FIELDS[channel])

    def midpoint(self, channel: Channel) -> float:
        lo, hi = self.range_for(channel)
        return (lo + hi) / 2

    def width(self, channel: Channel) -> float:
        lo, hi = self.range_for(channel)
        return hi - lo
