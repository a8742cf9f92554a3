"""Datetime utilities for task dates.

Task dates use a single fixed input format, ``yyyy-MM-dd HH:mm``. This module
is the only place that format is parsed, so deadlines and events agree on what
a valid date looks like.
"""

import re
from datetime import datetime, timezone

from ..errors import InvalidDateError

TASK_DATETIME_FORMAT = "%Y-%m-%d %H:%M"
TASK_DATETIME_PATTERN = "yyyy-MM-dd HH:mm"
DISPLAY_DATETIME_FORMAT = "%b %d %Y %H:%M"

# strptime alone accepts unpadded fields such as "2023-8-1 9:05"
_TASK_DATETIME_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}")


def now_utc() -> datetime:
    """Return current datetime in UTC timezone.

    Returns:
        Current datetime with timezone=UTC
    """
    return datetime.now(timezone.utc)


def parse_task_datetime(text: str) -> datetime:
    """Parse task date text into a datetime.

    Args:
        text: Date text in ``yyyy-MM-dd HH:mm`` form

    Returns:
        The parsed (naive, wall-clock) datetime

    Raises:
        InvalidDateError: If the text does not match the format or names an
            impossible date such as February 30th.
    """
    candidate = text.strip() if isinstance(text, str) else text
    if not isinstance(candidate, str) or not _TASK_DATETIME_RE.fullmatch(candidate):
        raise InvalidDateError(str(text), TASK_DATETIME_PATTERN)

    try:
        return datetime.strptime(candidate, TASK_DATETIME_FORMAT)
    except ValueError as e:
        raise InvalidDateError(str(text), TASK_DATETIME_PATTERN) from e


def to_storage_string(dt: datetime) -> str:
    """Format a datetime the way it is written to the task file."""
    return dt.strftime(TASK_DATETIME_FORMAT)


def to_display_string(dt: datetime, date_format: str = DISPLAY_DATETIME_FORMAT) -> str:
    """Format a datetime for responses shown to the user."""
    return dt.strftime(date_format)
