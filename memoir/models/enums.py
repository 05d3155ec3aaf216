"""Enums for model fields."""

from enum import Enum


class TimerStatus(str, Enum):
    """State of the user's idle-detection timer."""

    ACTIVE = "active"
    PAUSED = "paused"
    INACTIVE = "inactive"

    @classmethod
    def from_request(cls, value: str) -> "TimerStatus":
        """Map the uppercase API form (PAUSED, ACTIVE, INACTIVE) to a stored value."""
        return cls(value.lower())
