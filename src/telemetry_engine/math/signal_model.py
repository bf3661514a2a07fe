"""Per-channel signal model: smooth towards a target, add noise, clamp.

Each tick a channel moves a fixed fraction of the way from its previous
value to the midpoint of the current state's baseline range, receives
Gaussian noise, and is clamped to that range widened by a channel slack
(never below the physical floor of lactate and cadence).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from telemetry_engine.math.circadian import CircadianOffsets
from telemetry_engine.models.baseline import ChannelBaseline
from telemetry_engine.models.enums import (
    BASE_SMOOTHING_FACTOR,
    LACTATE_SMOOTHING_MULTIPLIER,
    SMO2_HIGH_FATIGUE_THRESHOLD,
    SMO2_MEDIUM_FATIGUE_THRESHOLD,
    TEMPERATURE_SMOOTHING_MULTIPLIER,
    VO2_SMOOTHING_MULTIPLIER,
    Channel,
    FatigueLevel,
)


@dataclass(frozen=True)
class ChannelSpec:
    """Smoothing, noise and clamping parameters for one channel."""

    smoothing: float
    noise_amplitude: float
    slack: float = 0.0
    floor: float | None = None  # physical minimum, applied inside range - slack
    decimals: int = 0


CHANNEL_SPECS: dict[Channel, ChannelSpec] = {
    Channel.HEART_RATE: ChannelSpec(BASE_SMOOTHING_FACTOR, 2.0, slack=5.0),
    Channel.HRV: ChannelSpec(BASE_SMOOTHING_FACTOR, 3.0, slack=5.0),
    Channel.BLOOD_OXYGEN: ChannelSpec(BASE_SMOOTHING_FACTOR, 0.3, decimals=1),
    Channel.SKIN_TEMPERATURE: ChannelSpec(
        BASE_SMOOTHING_FACTOR * TEMPERATURE_SMOOTHING_MULTIPLIER, 0.05, decimals=1
    ),
    Channel.STRESS: ChannelSpec(BASE_SMOOTHING_FACTOR, 3.0),
    Channel.MUSCLE_OXYGEN: ChannelSpec(BASE_SMOOTHING_FACTOR, 2.0, decimals=1),
    Channel.RESPIRATORY_RATE: ChannelSpec(BASE_SMOOTHING_FACTOR, 1.0),
    Channel.VO2: ChannelSpec(
        BASE_SMOOTHING_FACTOR * VO2_SMOOTHING_MULTIPLIER, 1.5, decimals=1
    ),
    Channel.LACTATE: ChannelSpec(
        BASE_SMOOTHING_FACTOR * LACTATE_SMOOTHING_MULTIPLIER,
        0.2,
        slack=0.5,
        floor=0.3,
        decimals=1,
    ),
    Channel.CADENCE: ChannelSpec(BASE_SMOOTHING_FACTOR, 3.0, slack=5.0, floor=0.0),
}


def lerp(current: float, target: float, factor: float) -> float:
    return current + (target - current) * factor


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def gaussian_noise(amplitude: float, rng: np.random.Generator) -> float:
    """Zero-mean Gaussian sample scaled by *amplitude* (Box–Muller).

    u1 is drawn from (0, 1] so the log term stays finite.
    """
    if amplitude <= 0:
        return 0.0
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2) * amplitude


def channel_bounds(channel: Channel, baseline: ChannelBaseline) -> tuple[float, float]:
    """Clamp interval for *channel* while in the state described by *baseline*."""
    spec = CHANNEL_SPECS[channel]
    lo, hi = baseline.range_for(channel)
    lower = lo - spec.slack
    if spec.floor is not None:
        lower = max(spec.floor, lower)
    return lower, hi + spec.slack


def channel_target(
    channel: Channel, baseline: ChannelBaseline, offsets: CircadianOffsets
) -> float:
    return baseline.midpoint(channel) + offsets.for_channel(channel)


def max_step(channel: Channel, baseline: ChannelBaseline) -> float:
    """Largest expected one-tick change within a steady state."""
    spec = CHANNEL_SPECS[channel]
    return spec.noise_amplitude + spec.smoothing * baseline.width(channel)


def advance(
    previous: float,
    target: float,
    bounds: tuple[float, float],
    smoothing: float,
    noise: float = 0.0,
) -> float:
    """One smoothing step: clamp(lerp(previous, target, smoothing) + noise)."""
    return clamp(lerp(previous, target, smoothing) + noise, *bounds)


def advance_channel(
    channel: Channel,
    previous: float,
    baseline: ChannelBaseline,
    offsets: CircadianOffsets,
    rng: np.random.Generator,
    with_noise: bool = True,
) -> float:
    """Advance one channel by a tick towards its state target."""
    spec = CHANNEL_SPECS[channel]
    noise = gaussian_noise(spec.noise_amplitude, rng) if with_noise else 0.0
    return advance(
        previous,
        channel_target(channel, baseline, offsets),
        channel_bounds(channel, baseline),
        spec.smoothing,
        noise,
    )


def round_channel(channel: Channel, value: float) -> float:
    """Round to the channel's display precision (int or one decimal)."""
    decimals = CHANNEL_SPECS[channel].decimals
    if decimals == 0:
        return int(round(value))
    return round(value, decimals)


def muscle_fatigue(smo2: float, default: FatigueLevel) -> FatigueLevel:
    """Escalate fatigue when muscle oxygenation drops."""
    if smo2 < SMO2_HIGH_FATIGUE_THRESHOLD:
        return FatigueLevel.HIGH
    if smo2 < SMO2_MEDIUM_FATIGUE_THRESHOLD:
        return FatigueLevel.MEDIUM
    return default
