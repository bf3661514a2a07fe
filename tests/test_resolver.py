"""Tests for the StateResolver priority order and session bookkeeping."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from telemetry_engine.models.engine_state import EngineState
from telemetry_engine.models.enums import ActivityType, PhysiologicalState
from telemetry_engine.models.sessions import ActivitySessionSignal, SleepSessionSignal
from telemetry_engine.resolver import StateResolver

T0 = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def _at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def _activity(
    activity_type: ActivityType = ActivityType.RUNNING, session_id: int | None = 1
) -> ActivitySessionSignal:
    return ActivitySessionSignal(activity_type=activity_type, start_time=T0, session_id=session_id)


@pytest.fixture
def resolver() -> StateResolver:
    return StateResolver()


@pytest.fixture
def state() -> EngineState:
    return EngineState()


class TestIdle:
    def test_no_signals_is_resting(self, resolver: StateResolver, state: EngineState) -> None:
        assert resolver.resolve(T0, None, None, state) == PhysiologicalState.RESTING

    def test_sleep_session_is_sleeping(self, resolver: StateResolver, state: EngineState) -> None:
        sleep = SleepSessionSignal(start_time=T0, session_id=3)
        assert resolver.resolve(T0, None, sleep, state) == PhysiologicalState.SLEEPING


class TestActivity:
    def test_warmup_then_base_state(self, resolver: StateResolver, state: EngineState) -> None:
        activity = _activity()
        assert resolver.resolve(_at(60), activity, None, state) == PhysiologicalState.WARMUP
        assert resolver.resolve(_at(179), activity, None, state) == PhysiologicalState.WARMUP
        assert (
            resolver.resolve(_at(180), activity, None, state)
            == PhysiologicalState.INTENSE_ACTIVITY
        )

    def test_meditation_skips_warmup(self, resolver: StateResolver, state: EngineState) -> None:
        activity = _activity(ActivityType.MEDITATION)
        assert resolver.resolve(_at(10), activity, None, state) == PhysiologicalState.RESTING

    def test_activity_beats_sleep(self, resolver: StateResolver, state: EngineState) -> None:
        sleep = SleepSessionSignal(start_time=T0)
        resolved = resolver.resolve(_at(400), _activity(ActivityType.WALKING), sleep, state)
        assert resolved == PhysiologicalState.LIGHT_ACTIVITY

    def test_new_session_resets_bookkeeping(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        state.training_load = 40.0
        resolver.resolve(_at(5), _activity(), None, state)
        assert state.training_load == 0.0
        assert state.session_start_time == _at(5)
        assert state.session_id == 1
        assert state.activity_tick_count == 1

    def test_same_session_keeps_load(self, resolver: StateResolver, state: EngineState) -> None:
        resolver.resolve(_at(0), _activity(), None, state)
        state.training_load = 12.0
        resolver.resolve(_at(3), _activity(), None, state)
        assert state.training_load == 12.0
        assert state.activity_tick_count == 2

    def test_different_session_id_is_new_session(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        resolver.resolve(_at(0), _activity(session_id=1), None, state)
        state.training_load = 30.0
        resolver.resolve(_at(3), _activity(session_id=2), None, state)
        assert state.training_load == 0.0
        assert state.session_id == 2


class TestPostSession:
    def _run_session(self, resolver: StateResolver, state: EngineState, until_s: float) -> None:
        for t in range(0, int(until_s) + 1, 3):
            resolver.resolve(_at(t), _activity(), None, state)

    def test_end_noticed_is_cooldown(self, resolver: StateResolver, state: EngineState) -> None:
        self._run_session(resolver, state, 600)
        assert resolver.resolve(_at(603), None, None, state) == PhysiologicalState.COOLDOWN
        assert state.session_start_time is None
        assert state.session_ended_at == _at(600)

    def test_cooldown_recovery_resting(self, resolver: StateResolver, state: EngineState) -> None:
        self._run_session(resolver, state, 600)
        resolver.resolve(_at(603), None, None, state)

        assert resolver.resolve(_at(600 + 299), None, None, state) == PhysiologicalState.COOLDOWN
        assert resolver.resolve(_at(600 + 300), None, None, state) == PhysiologicalState.RECOVERY
        assert resolver.resolve(_at(600 + 1199), None, None, state) == PhysiologicalState.RECOVERY
        assert resolver.resolve(_at(600 + 1200), None, None, state) == PhysiologicalState.RESTING
        assert state.session_ended_at is None

    def test_late_notice_goes_straight_to_recovery(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        self._run_session(resolver, state, 60)
        assert resolver.resolve(_at(60 + 400), None, None, state) == PhysiologicalState.RECOVERY

    def test_post_session_beats_sleep(self, resolver: StateResolver, state: EngineState) -> None:
        self._run_session(resolver, state, 300)
        sleep = SleepSessionSignal(start_time=_at(301))
        assert resolver.resolve(_at(303), None, sleep, state) == PhysiologicalState.COOLDOWN

    def test_new_session_clears_post_session_window(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        self._run_session(resolver, state, 300)
        resolver.resolve(_at(303), None, None, state)
        resolver.resolve(_at(306), _activity(session_id=2), None, state)
        assert state.session_ended_at is None

    def test_custom_windows(self, state: EngineState) -> None:
        resolver = StateResolver(warmup_window_s=0, cooldown_window_s=10, recovery_window_s=10)
        assert resolver.resolve(_at(0), _activity(), None, state) == PhysiologicalState.INTENSE_ACTIVITY
        assert resolver.resolve(_at(5), None, None, state) == PhysiologicalState.COOLDOWN
        assert resolver.resolve(_at(15), None, None, state) == PhysiologicalState.RECOVERY
        assert resolver.resolve(_at(25), None, None, state) == PhysiologicalState.RESTING


class TestTimestampAwareness:
    def test_naive_session_start_read_as_local_time(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        naive_start = (T0 - timedelta(minutes=10)).astimezone().replace(tzinfo=None)
        activity = ActivitySessionSignal(
            activity_type=ActivityType.RUNNING, start_time=naive_start, session_id=1
        )
        assert resolver.resolve(T0, activity, None, state) == PhysiologicalState.INTENSE_ACTIVITY

    def test_aware_session_start_with_naive_clock(
        self, resolver: StateResolver, state: EngineState
    ) -> None:
        now = (T0 + timedelta(seconds=60)).astimezone().replace(tzinfo=None)
        assert resolver.resolve(now, _activity(), None, state) == PhysiologicalState.WARMUP
