"""Taskbot - a personal task-tracking assistant driven by text commands."""

__version__ = "0.1.0"
__author__ = "Taskbot Team"

from .task import Task, TaskKind, Todo, Deadline, Event
from .task_list import TaskList
from .parser import CommandKind, CommandParser, CommandResult, classify_command

__all__ = [
    "Task",
    "TaskKind",
    "Todo",
    "Deadline",
    "Event",
    "TaskList",
    "CommandKind",
    "CommandParser",
    "CommandResult",
    "classify_command",
    "__version__",
]
