"""State resolver — decides the current physiological state each tick.

The resolver never opens or closes sessions; it only reads the optional
session signals handed to it and updates the session bookkeeping on the
engine state (start time, tick count, training-load reset, end time).
"""

from __future__ import annotations

import logging
from datetime import datetime

from telemetry_engine.baselines import base_state_for
from telemetry_engine.models.engine_state import EngineState
from telemetry_engine.models.enums import (
    COOLDOWN_WINDOW_S,
    RECOVERY_WINDOW_S,
    WARMUP_WINDOW_S,
    PhysiologicalState,
)
from telemetry_engine.models.sessions import ActivitySessionSignal, SleepSessionSignal

logger = logging.getLogger(__name__)


def _comparable(ts: datetime, now: datetime) -> datetime:
    """Align *ts* with the awareness of *now*; naive stored times are read as local time."""
    if (ts.tzinfo is None) == (now.tzinfo is None):
        return ts
    if ts.tzinfo is None:
        return ts.astimezone()
    return ts.astimezone().replace(tzinfo=None)


class StateResolver:
    """Resolves a PhysiologicalState from session signals.

    Priority order:
        1. open activity session   → WARMUP for the first 3 min, then the
           activity's base state
        2. recently ended activity → COOLDOWN for 5 min, then RECOVERY
        3. open sleep session      → SLEEPING
        4. otherwise               → RESTING
    """

    def __init__(
        self,
        warmup_window_s: float = WARMUP_WINDOW_S,
        cooldown_window_s: float = COOLDOWN_WINDOW_S,
        recovery_window_s: float = RECOVERY_WINDOW_S,
    ) -> None:
        self.warmup_window_s = warmup_window_s
        self.cooldown_window_s = cooldown_window_s
        self.recovery_window_s = recovery_window_s

    def resolve(
        self,
        now: datetime,
        activity: ActivitySessionSignal | None,
        sleep: SleepSessionSignal | None,
        state: EngineState,
    ) -> PhysiologicalState:
        if activity is not None:
            return self._resolve_activity(now, activity, state)

        if state.session_start_time is not None:
            self._close_session(now, state)
            # The tick that notices the end always reports cooldown or recovery
            since_end_s = (now - state.session_ended_at).total_seconds()  # type: ignore[operator]
            if since_end_s < self.cooldown_window_s:
                return PhysiologicalState.COOLDOWN
            return PhysiologicalState.RECOVERY

        if state.session_ended_at is not None:
            post = self._resolve_post_session(now, state)
            if post is not None:
                return post

        if sleep is not None:
            return PhysiologicalState.SLEEPING
        return PhysiologicalState.RESTING

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve_activity(
        self, now: datetime, activity: ActivitySessionSignal, state: EngineState
    ) -> PhysiologicalState:
        is_new_session = state.session_start_time is None or (
            activity.session_id is not None
            and state.session_id is not None
            and activity.session_id != state.session_id
        )
        if is_new_session:
            logger.debug(
                "New %s session observed, resetting training load",
                activity.activity_type.name.lower(),
            )
            state.session_start_time = now
            state.session_id = activity.session_id
            state.activity_tick_count = 0
            state.training_load = 0.0
            state.session_ended_at = None

        state.activity_tick_count += 1
        state.last_activity_seen_at = now

        base_state = base_state_for(activity.activity_type)
        elapsed_s = (now - _comparable(activity.start_time, now)).total_seconds()
        if elapsed_s < self.warmup_window_s and base_state != PhysiologicalState.RESTING:
            return PhysiologicalState.WARMUP
        return base_state

    @staticmethod
    def _close_session(now: datetime, state: EngineState) -> None:
        """Record the effective end of the session that just disappeared."""
        state.session_ended_at = state.last_activity_seen_at or now
        state.session_start_time = None
        state.session_id = None
        state.activity_tick_count = 0
        state.last_activity_seen_at = None

    def _resolve_post_session(
        self, now: datetime, state: EngineState
    ) -> PhysiologicalState | None:
        since_end_s = (now - state.session_ended_at).total_seconds()  # type: ignore[operator]
        if since_end_s < self.cooldown_window_s:
            return PhysiologicalState.COOLDOWN
        if since_end_s < self.cooldown_window_s + self.recovery_window_s:
            return PhysiologicalState.RECOVERY
        state.session_ended_at = None
        return None
