from __future__ import annotations


class TrackerError(ValueError):
    """Base class for failures reported by the tracker core to its caller."""


class AlreadyExistsError(TrackerError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User already exists: {user_id}")
        self.user_id = user_id


class NotFoundError(TrackerError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class NoSessionsError(TrackerError):
    def __init__(self, user_id: str) -> None:
        super().__init__("No sessions found for user")
        self.user_id = user_id


class InvalidInputError(TrackerError):
    """Raised when a timestamp, month or day count cannot be parsed."""
