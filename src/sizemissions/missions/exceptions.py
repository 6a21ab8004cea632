"""Mission engine errors. Routers translate these into HTTP status codes."""

from __future__ import annotations


class MissionError(Exception):
    """Base class for all mission engine errors."""


class MissionNotFoundError(MissionError, LookupError):
    def __init__(self, code: str) -> None:
        super().__init__(f"Mission not found: {code}")
        self.code = code


class ProfileNotFoundError(MissionError, LookupError):
    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id


class InvalidTransitionError(MissionError, ValueError):
    """The requested transition is not allowed from the mission's current status."""


class EventValidationError(MissionError, ValueError):
    """Unknown event type or a payload that does not match its schema."""


class StorageFailureError(MissionError, RuntimeError):
    """A write failed mid-operation; the transaction was rolled back and the call is safe to retry."""
