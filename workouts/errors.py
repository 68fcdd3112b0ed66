"""Error types raised by the workout store and checklist."""

from __future__ import annotations


class WorkoutError(Exception):
    """Base class for recoverable workout checklist errors."""


class ValidationError(WorkoutError, ValueError):
    """Rejected input: blank item name, unknown weekday, unknown history mode."""


class OutOfRangeError(WorkoutError, LookupError):
    """A toggle/remove referenced an item id or position that no longer exists."""


class StorageCorruptionError(WorkoutError):
    """A persisted value could not be decoded. Handled inside the store."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored value {key!r} is unreadable: {reason}")
        self.key = key
        self.reason = reason
