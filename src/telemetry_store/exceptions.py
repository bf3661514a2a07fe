"""Custom exception hierarchy for telemetry stores."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all telemetry_store errors."""


class StoreUnavailableError(StoreError):
    """The backing storage could not be opened or written."""


class SessionLookupError(StoreError):
    """An active-session query failed."""


class SessionStateError(StoreError):
    """A session operation conflicts with the stored session state."""

    def __init__(self, message: str, session_id: int | None = None) -> None:
        super().__init__(message)
        self.session_id = session_id
