"""Task data model for the task assistant."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, Tuple, Type, Union

from .errors import ValidationError
from .utils.datetime import (
    DISPLAY_DATETIME_FORMAT,
    parse_task_datetime,
    to_display_string,
    to_storage_string,
)

FIELD_SEPARATOR = " | "
LINE_BREAK_MESSAGE = "Task description cannot contain line breaks!"

DateInput = Union[str, datetime]


class TaskKind(Enum):
    """Task variants, valued by their one-letter marker."""
    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"


def _coerce_datetime(value: DateInput) -> datetime:
    if isinstance(value, datetime):
        return value
    return parse_task_datetime(value)


@dataclass
class Task:
    """A tracked unit of work.

    Equality covers the variant, the description and the date fields. The
    completion flag is left out so a finished copy of a task still counts as
    a duplicate of the open one.
    """

    description: str
    completed: bool = field(default=False, init=False, compare=False)

    kind: ClassVar[TaskKind]
    date_field_count: ClassVar[int] = 0

    def __post_init__(self):
        # Records are one per line in the task file
        if "\n" in self.description or "\r" in self.description:
            raise ValidationError(LINE_BREAK_MESSAGE)
        self.description = self.description.strip()

    def mark(self):
        """Mark the task as done."""
        self.completed = True

    def unmark(self):
        """Mark the task as not done."""
        self.completed = False

    @property
    def key(self) -> Tuple:
        """Hashable identity used to detect duplicates."""
        return (self.kind, self.description) + self._dates()

    def _dates(self) -> Tuple[datetime, ...]:
        return ()

    def _display_suffix(self, date_format: str) -> str:
        return ""

    def to_display(self, date_format: str = DISPLAY_DATETIME_FORMAT) -> str:
        """Render the task for list and find responses."""
        status = "X" if self.completed else " "
        return (
            f"[{self.kind.value}][{status}] {self.description}"
            f"{self._display_suffix(date_format)}"
        )

    def to_persistence(self) -> str:
        """Render the task as a single line for the task file.

        Dates come before the description so the description may contain
        any text, separators included.
        """
        fields = [self.kind.value, "1" if self.completed else "0"]
        fields.extend(to_storage_string(dt) for dt in self._dates())
        fields.append(self.description)
        return FIELD_SEPARATOR.join(fields)

    @classmethod
    def from_persistence(cls, line: str) -> "Task":
        """Rebuild a task from a line written by ``to_persistence``.

        Raises:
            ValueError: If the line is not a valid task record. Bad dates
                raise ``InvalidDateError``, which is a ``TaskbotError``.
        """
        marker, _, rest = line.partition(FIELD_SEPARATOR)
        try:
            kind = TaskKind(marker.strip())
        except ValueError:
            raise ValueError(f"Unknown task marker in record: {line!r}") from None

        task_cls = TASK_TYPES[kind]
        date_count = task_cls.date_field_count
        parts = rest.split(FIELD_SEPARATOR, date_count + 1)
        if len(parts) != date_count + 2:
            raise ValueError(f"Malformed {kind.name.lower()} record: {line!r}")

        done, *dates, description = parts
        if done not in ("0", "1"):
            raise ValueError(f"Invalid completion flag in record: {line!r}")
        if not description:
            raise ValueError(f"Missing description in record: {line!r}")

        task = task_cls(description, *dates)
        if done == "1":
            task.mark()
        return task

    def __str__(self) -> str:
        return self.to_display()


@dataclass
class Todo(Task):
    """A task with no dates."""

    kind: ClassVar[TaskKind] = TaskKind.TODO
    date_field_count: ClassVar[int] = 0


@dataclass
class Deadline(Task):
    """A task that has to be done by a given time."""

    due_at: DateInput

    kind: ClassVar[TaskKind] = TaskKind.DEADLINE
    date_field_count: ClassVar[int] = 1

    def __post_init__(self):
        super().__post_init__()
        self.due_at = _coerce_datetime(self.due_at)

    def _dates(self) -> Tuple[datetime, ...]:
        return (self.due_at,)

    def _display_suffix(self, date_format: str) -> str:
        return f" (by: {to_display_string(self.due_at, date_format)})"


@dataclass
class Event(Task):
    """A task that spans a start and an end time."""

    start_at: DateInput
    end_at: DateInput

    kind: ClassVar[TaskKind] = TaskKind.EVENT
    date_field_count: ClassVar[int] = 2

    def __post_init__(self):
        super().__post_init__()
        self.start_at = _coerce_datetime(self.start_at)
        self.end_at = _coerce_datetime(self.end_at)

    def _dates(self) -> Tuple[datetime, ...]:
        return (self.start_at, self.end_at)

    def _display_suffix(self, date_format: str) -> str:
        start = to_display_string(self.start_at, date_format)
        end = to_display_string(self.end_at, date_format)
        return f" (from: {start} to: {end})"


TASK_TYPES: Dict[TaskKind, Type[Task]] = {
    TaskKind.TODO: Todo,
    TaskKind.DEADLINE: Deadline,
    TaskKind.EVENT: Event,
}
