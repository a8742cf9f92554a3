"""Exceptions raised by the task assistant.

Every error carries a human-readable message that the command parser turns
into a response; none of them are meant to end the session.
"""

from typing import Any, List, Optional


class TaskbotError(Exception):
    """Base class for all task assistant errors."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        self.message = message
        self.suggestions = suggestions or []
        super().__init__(message)


class InvalidDateError(TaskbotError):
    """Raised when date text does not match the task date format."""

    def __init__(self, value: str, expected_format: str = "yyyy-MM-dd HH:mm"):
        self.value = value
        self.expected_format = expected_format
        super().__init__(
            f"Invalid date '{value}'. Please use the format {expected_format}.",
            suggestions=[f"e.g. 2023-08-31 12:00 ({expected_format})"],
        )


class IndexOutOfRangeError(TaskbotError, IndexError):
    """Raised when a task index is missing, not a number or out of bounds."""

    def __init__(self, index: Any, size: int):
        self.index = index
        self.size = size
        if size:
            message = f"Task index {index!r} is out of range (0 to {size - 1})."
        else:
            message = f"Task index {index!r} is out of range, the list is empty."
        super().__init__(message)


class ValidationError(TaskbotError, ValueError):
    """Raised when command text is missing required parts."""


class StorageError(TaskbotError):
    """Raised when the task file cannot be read or written."""

    def __init__(self, message: str, path: Any = None):
        self.path = path
        super().__init__(message)
