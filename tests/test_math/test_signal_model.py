"""Tests for the per-channel signal model."""

from __future__ import annotations

import numpy as np
import pytest

from telemetry_engine.baselines import STATE_BASELINES
from telemetry_engine.math.circadian import CircadianOffsets
from telemetry_engine.math.signal_model import (
    CHANNEL_SPECS,
    advance,
    advance_channel,
    channel_bounds,
    channel_target,
    clamp,
    gaussian_noise,
    lerp,
    max_step,
    muscle_fatigue,
    round_channel,
)
from telemetry_engine.models.enums import Channel, FatigueLevel, PhysiologicalState

RESTING = STATE_BASELINES[PhysiologicalState.RESTING]
INTENSE = STATE_BASELINES[PhysiologicalState.INTENSE_ACTIVITY]


class TestPrimitives:
    def test_lerp_moves_fraction_of_gap(self) -> None:
        assert lerp(0.0, 10.0, 0.3) == pytest.approx(3.0)
        assert lerp(10.0, 0.0, 0.5) == pytest.approx(5.0)

    def test_lerp_zero_factor_keeps_value(self) -> None:
        assert lerp(7.0, 100.0, 0.0) == 7.0

    def test_clamp(self) -> None:
        assert clamp(5.0, 0.0, 10.0) == 5.0
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(11.0, 0.0, 10.0) == 10.0

    def test_advance_without_noise_is_lerp(self) -> None:
        assert advance(60.0, 70.0, (0.0, 200.0), 0.3) == pytest.approx(63.0)

    def test_advance_clamps(self) -> None:
        assert advance(60.0, 70.0, (0.0, 61.0), 0.3) == 61.0
        assert advance(60.0, 70.0, (0.0, 200.0), 0.3, noise=-100.0) == 0.0


class TestGaussianNoise:
    def test_zero_amplitude_is_silent(self) -> None:
        rng = np.random.default_rng(0)
        assert gaussian_noise(0.0, rng) == 0.0

    def test_mean_and_spread(self) -> None:
        rng = np.random.default_rng(0)
        samples = np.array([gaussian_noise(2.0, rng) for _ in range(20_000)])
        assert abs(samples.mean()) < 0.05
        assert samples.std() == pytest.approx(2.0, rel=0.05)

    def test_always_finite(self) -> None:
        rng = np.random.default_rng(1)
        assert all(np.isfinite(gaussian_noise(1.0, rng)) for _ in range(5_000))


class TestChannelSpecs:
    def test_every_channel_has_parameters(self) -> None:
        assert set(CHANNEL_SPECS) == set(Channel)

    def test_slow_channels_smooth_less(self) -> None:
        assert CHANNEL_SPECS[Channel.SKIN_TEMPERATURE].smoothing == pytest.approx(0.15)
        assert CHANNEL_SPECS[Channel.VO2].smoothing == pytest.approx(0.12)
        assert CHANNEL_SPECS[Channel.LACTATE].smoothing == pytest.approx(0.09)
        assert CHANNEL_SPECS[Channel.HEART_RATE].smoothing == pytest.approx(0.3)

    def test_noise_amplitudes(self) -> None:
        expected = {
            Channel.HEART_RATE: 2.0,
            Channel.HRV: 3.0,
            Channel.BLOOD_OXYGEN: 0.3,
            Channel.SKIN_TEMPERATURE: 0.05,
            Channel.STRESS: 3.0,
            Channel.MUSCLE_OXYGEN: 2.0,
            Channel.RESPIRATORY_RATE: 1.0,
            Channel.VO2: 1.5,
            Channel.LACTATE: 0.2,
            Channel.CADENCE: 3.0,
        }
        for channel, amplitude in expected.items():
            assert CHANNEL_SPECS[channel].noise_amplitude == amplitude


class TestBoundsAndTargets:
    def test_heart_rate_has_slack(self) -> None:
        assert channel_bounds(Channel.HEART_RATE, RESTING) == (53, 77)

    def test_spo2_has_no_slack(self) -> None:
        assert channel_bounds(Channel.BLOOD_OXYGEN, RESTING) == (96, 99)

    def test_lactate_and_cadence_follow_state_range(self) -> None:
        assert channel_bounds(Channel.LACTATE, INTENSE) == pytest.approx((3.5, 8.5))
        assert channel_bounds(Channel.CADENCE, INTENSE) == (135.0, 185.0)

    def test_physical_floor_caps_slack(self) -> None:
        sleeping = STATE_BASELINES[PhysiologicalState.SLEEPING]
        assert channel_bounds(Channel.LACTATE, sleeping) == pytest.approx((0.3, 1.3))
        assert channel_bounds(Channel.CADENCE, RESTING) == (0.0, 5.0)

    def test_every_bound_within_range_plus_slack(self) -> None:
        for baseline in STATE_BASELINES.values():
            for channel, spec in CHANNEL_SPECS.items():
                lo, hi = baseline.range_for(channel)
                lower, upper = channel_bounds(channel, baseline)
                assert lo - spec.slack <= lower <= lo
                assert upper == hi + spec.slack

    def test_target_is_midpoint_plus_offset(self) -> None:
        offsets = CircadianOffsets(hr=5.0, hrv=-3.0, stress=2.0)
        assert channel_target(Channel.HEART_RATE, RESTING, offsets) == pytest.approx(70.0)
        assert channel_target(Channel.HRV, RESTING, offsets) == pytest.approx(54.5)
        assert channel_target(Channel.BLOOD_OXYGEN, RESTING, offsets) == pytest.approx(97.5)

    def test_max_step(self) -> None:
        # noise 2 + 0.3 × width 14
        assert max_step(Channel.HEART_RATE, RESTING) == pytest.approx(6.2)


class TestAdvanceChannel:
    def test_converges_to_target_without_noise(self) -> None:
        rng = np.random.default_rng(0)
        value = 65.0
        for _ in range(60):
            value = advance_channel(
                Channel.HEART_RATE, value, INTENSE, CircadianOffsets(), rng, with_noise=False
            )
        assert value == pytest.approx(167.5, abs=0.01)

    def test_stays_within_bounds_with_noise(self) -> None:
        rng = np.random.default_rng(7)
        lo, hi = channel_bounds(Channel.BLOOD_OXYGEN, INTENSE)
        value = 99.0
        for _ in range(500):
            value = advance_channel(Channel.BLOOD_OXYGEN, value, INTENSE, CircadianOffsets(), rng)
            assert lo <= value <= hi


class TestRounding:
    def test_integer_channels(self) -> None:
        assert round_channel(Channel.HEART_RATE, 72.6) == 73
        assert isinstance(round_channel(Channel.CADENCE, 150.2), int)

    def test_one_decimal_channels(self) -> None:
        assert round_channel(Channel.BLOOD_OXYGEN, 97.46) == pytest.approx(97.5)
        assert round_channel(Channel.SKIN_TEMPERATURE, 36.54) == pytest.approx(36.5)
        assert round_channel(Channel.LACTATE, 4.04) == pytest.approx(4.0)


class TestMuscleFatigue:
    def test_low_smo2_is_high_fatigue(self) -> None:
        assert muscle_fatigue(40.0, FatigueLevel.LOW) == FatigueLevel.HIGH

    def test_mid_smo2_is_medium_fatigue(self) -> None:
        assert muscle_fatigue(50.0, FatigueLevel.LOW) == FatigueLevel.MEDIUM

    def test_otherwise_baseline_default(self) -> None:
        assert muscle_fatigue(70.0, FatigueLevel.LOW) == FatigueLevel.LOW
        assert muscle_fatigue(70.0, FatigueLevel.HIGH) == FatigueLevel.HIGH

    def test_threshold_is_exclusive(self) -> None:
        assert muscle_fatigue(60.0, FatigueLevel.LOW) == FatigueLevel.LOW
        assert muscle_fatigue(45.0, FatigueLevel.LOW) == FatigueLevel.MEDIUM
