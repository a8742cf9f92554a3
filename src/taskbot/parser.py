"""Command parser for the task assistant.

Turns one line of user input into a command kind, runs it against the task
list and returns the response text. Storage and UI are collaborators: the
parser owns the task list and only hands them read-only views.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from fuzzywuzzy import fuzz, process

from .errors import (
    IndexOutOfRangeError,
    InvalidDateError,
    StorageError,
    ValidationError,
)
from .task import Deadline, Event, Task, Todo
from .task_list import TaskList
from .ui import Ui

logger = logging.getLogger(__name__)

BY_MARKER = " /by "
TO_MARKER = " /to "

_BY_RE = re.compile(r"\b /by \b")
_TO_RE = re.compile(r"\b /to \b")
_INDEX_RE = re.compile(r"[+-]?\d+")

EMPTY_DESCRIPTION_MESSAGE = "Task description cannot be empty!"
EVENT_MARKERS_MESSAGE = (
    "An event must contain a description, start and end specified with `/by` and `/to`!"
)
EVENT_EMPTY_MESSAGE = "Description, /by and /to cannot be empty!"
DEADLINE_EMPTY_MESSAGE = "Deadline description and /by cannot be empty!"
FIND_EMPTY_MESSAGE = "Please tell me what to look for, e.g. `find book`."


class CommandKind(Enum):
    """Kinds of command a line of input can resolve to."""
    INVALID = "invalid"
    BYE = "bye"
    LIST = "list"
    MARK = "mark"
    UNMARK = "unmark"
    DELETE = "delete"
    FIND = "find"
    TODO = "todo"
    DEADLINE = "deadline"
    EVENT = "event"
    DUPLICATES = "duplicates"


# Precedence table: every keyword that prefixes the input matches, and the
# last matching entry in this order wins.
COMMAND_KEYWORDS: Tuple[Tuple[str, CommandKind], ...] = (
    ("invalid", CommandKind.INVALID),
    ("bye", CommandKind.BYE),
    ("list", CommandKind.LIST),
    ("mark", CommandKind.MARK),
    ("unmark", CommandKind.UNMARK),
    ("delete", CommandKind.DELETE),
    ("find", CommandKind.FIND),
    ("todo", CommandKind.TODO),
    ("deadline", CommandKind.DEADLINE),
    ("event", CommandKind.EVENT),
    ("duplicates", CommandKind.DUPLICATES),
)

TASK_KINDS = frozenset({CommandKind.TODO, CommandKind.DEADLINE, CommandKind.EVENT})


@dataclass
class CommandResult:
    """Outcome of handling one line of input."""
    kind: CommandKind
    message: str

    @property
    def is_exit(self) -> bool:
        """True when the session should end after showing the message."""
        return self.kind is CommandKind.BYE


def classify_command(
    text: str,
    keywords: Sequence[Tuple[str, CommandKind]] = COMMAND_KEYWORDS,
) -> CommandKind:
    """Resolve raw input to a command kind.

    Each keyword is tested as a case-sensitive prefix of ``text``. When more
    than one matches, the one listed last in ``keywords`` wins. Input that
    matches nothing is ``CommandKind.INVALID``.
    """
    kind = CommandKind.INVALID
    for keyword, candidate in keywords:
        if text.startswith(keyword):
            kind = candidate
    return kind


def keyword_for(kind: CommandKind,
                keywords: Sequence[Tuple[str, CommandKind]] = COMMAND_KEYWORDS) -> str:
    for keyword, candidate in keywords:
        if candidate is kind:
            return keyword
    raise KeyError(kind)


def suggest_command(text: str) -> Optional[str]:
    """Return the keyword closest to the first word of ``text``, if any."""
    words = text.split()
    if not words:
        return None
    choices = [keyword for keyword, kind in COMMAND_KEYWORDS if kind is not CommandKind.INVALID]
    matches = process.extractBests(words[0], choices, scorer=fuzz.ratio,
                                   score_cutoff=70, limit=1)
    return matches[0][0] if matches else None


def parse_index(text: str, size: int) -> int:
    """Read the task index from the second word of a command.

    Raises:
        IndexOutOfRangeError: If the word is missing or not an integer.
            Bounds are checked by the task list.
    """
    words = text.split()
    if len(words) < 2 or not _INDEX_RE.fullmatch(words[1]):
        raise IndexOutOfRangeError(words[1] if len(words) > 1 else None, size)
    return int(words[1])


def get_task_info(text: str, keyword: str) -> str:
    """Strip the command keyword and its separating space from ``text``."""
    prefix = keyword + " "
    if text.startswith(prefix):
        text = text[len(prefix):]
    return text.strip()


def _segment_after(text: str, marker: str) -> str:
    parts = text.split(marker)
    return parts[1] if len(parts) > 1 else ""


def extract_deadline_fields(info: str) -> Tuple[str, str]:
    """Split deadline text into ``(description, due_at_text)``.

    Raises:
        ValidationError: If either side of ``/by`` is empty.
    """
    parts = info.split(BY_MARKER, 1)
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValidationError(DEADLINE_EMPTY_MESSAGE)
    return parts[0].strip(), parts[1].strip()


def extract_event_fields(info: str) -> Tuple[str, str, str]:
    """Split event text into ``(description, start_text, end_text)``.

    ``/by`` gives the start and ``/to`` the end. They may appear in either
    order; the description is whatever precedes both.

    Raises:
        ValidationError: If a marker is missing or any field is empty.
    """
    if not _BY_RE.search(info) or not _TO_RE.search(info):
        raise ValidationError(EVENT_MARKERS_MESSAGE)

    start = _segment_after(info, BY_MARKER).split(TO_MARKER)[0].strip()
    end = _segment_after(info, TO_MARKER).split(BY_MARKER)[0].strip()
    description = info.split(TO_MARKER)[0].split(BY_MARKER)[0].strip()

    if not description or not start or not end:
        raise ValidationError(EVENT_EMPTY_MESSAGE)
    return description, start, end


def build_task(kind: CommandKind, text: str) -> Task:
    """Build the task described by a todo, deadline or event command.

    Raises:
        ValidationError: If required parts of the command are missing.
        InvalidDateError: If a date does not match the task date format.
    """
    if len(text.split()) < 2:
        raise ValidationError(EMPTY_DESCRIPTION_MESSAGE)

    info = get_task_info(text, keyword_for(kind))
    if kind is CommandKind.TODO:
        return Todo(info)
    if kind is CommandKind.DEADLINE:
        return Deadline(*extract_deadline_fields(info))
    if kind is CommandKind.EVENT:
        return Event(*extract_event_fields(info))
    raise ValueError(f"{kind.value} does not create a task")


class CommandParser:
    """Runs commands against a task list it owns."""

    def __init__(self, ui: Ui, task_list: TaskList, storage):
        self.ui = ui
        self.task_list = task_list
        self.storage = storage
        self._handlers: Dict[CommandKind, Callable[[str], str]] = {
            CommandKind.INVALID: self._handle_invalid,
            CommandKind.BYE: self._handle_bye,
            CommandKind.LIST: self._handle_list,
            CommandKind.MARK: self._handle_mark,
            CommandKind.UNMARK: self._handle_unmark,
            CommandKind.DELETE: self._handle_delete,
            CommandKind.FIND: self._handle_find,
            CommandKind.DUPLICATES: self._handle_duplicates,
        }

    def handle(self, text: str) -> CommandResult:
        """Classify and run one line of input."""
        kind = classify_command(text)
        logger.debug("Classified %r as %s", text, kind.value)

        if kind in TASK_KINDS:
            message = self._handle_add_task(kind, text)
        else:
            try:
                message = self._handlers[kind](text)
            except ValidationError as e:
                message = self.ui.show_validation_error(e.message)
        return CommandResult(kind=kind, message=message)

    def parse_command(self, text: str) -> str:
        """Run one line of input and return only the response text."""
        return self.handle(text).message

    def _save_and_respond(self, message: str) -> str:
        # A failed save keeps the in-memory change; the user is told.
        try:
            self.storage.save(self.task_list.get_tasks())
        except StorageError as e:
            logger.error("Failed to save tasks: %s", e)
            return f"{message}\n{self.ui.show_save_tasks_error(e)}"
        return message

    def _handle_invalid(self, text: str) -> str:
        return self.ui.show_invalid_command_error(suggest_command(text))

    def _handle_bye(self, text: str) -> str:
        return self.ui.show_bye_message()

    def _handle_list(self, text: str) -> str:
        return self.ui.show_task_list(self.task_list.get_tasks())

    def _handle_mark(self, text: str) -> str:
        try:
            task = self.task_list.mark_task(parse_index(text, len(self.task_list)))
        except IndexOutOfRangeError as e:
            logger.debug("Rejected mark: %s", e)
            return self.ui.show_invalid_index_error(len(self.task_list))
        return self._save_and_respond(self.ui.show_marked_task(task))

    def _handle_unmark(self, text: str) -> str:
        try:
            task = self.task_list.unmark_task(parse_index(text, len(self.task_list)))
        except IndexOutOfRangeError as e:
            logger.debug("Rejected unmark: %s", e)
            return self.ui.show_invalid_index_error(len(self.task_list))
        return self._save_and_respond(self.ui.show_unmarked_task(task))

    def _handle_delete(self, text: str) -> str:
        try:
            task = self.task_list.delete_task(parse_index(text, len(self.task_list)))
        except IndexOutOfRangeError as e:
            logger.debug("Rejected delete: %s", e)
            return self.ui.show_invalid_index_error(len(self.task_list))
        return self._save_and_respond(
            self.ui.show_delete_task_message(task, len(self.task_list))
        )

    def _handle_find(self, text: str) -> str:
        _, separator, query = text.partition(" ")
        if not separator:
            raise ValidationError(FIND_EMPTY_MESSAGE)
        return self.ui.show_find_results(self.task_list.find_indexed(query))

    def _handle_duplicates(self, text: str) -> str:
        duplicates = self.task_list.remove_duplicates()
        message = self.ui.show_duplicates_removed(duplicates.get_tasks())
        if not len(duplicates):
            return message
        return self._save_and_respond(message)

    def _handle_add_task(self, kind: CommandKind, text: str) -> str:
        try:
            task = build_task(kind, text)
        except (ValidationError, InvalidDateError) as e:
            return self.ui.show_add_task_error(e.message, e.suggestions)

        num_tasks = self.task_list.add_task(task)
        logger.info("Added %s task: %s", kind.value, task.description)
        return self._save_and_respond(self.ui.show_add_task_message(task, num_tasks))
