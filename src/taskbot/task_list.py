"""Ordered in-memory task list."""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import IndexOutOfRangeError
from .task import Task

logger = logging.getLogger(__name__)


class TaskList:
    """An ordered, index-addressed collection of tasks.

    Index 0 is the first task added. Indices shift down by one after a
    deletion. Structurally equal tasks may coexist until
    ``remove_duplicates`` is called.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks or [])

    def add_task(self, task: Task) -> int:
        """Append a task and return the new number of tasks."""
        self._tasks.append(task)
        return len(self._tasks)

    def get_tasks(self) -> Tuple[Task, ...]:
        """Return a read-only view of the tasks in insertion order."""
        return tuple(self._tasks)

    def get_num_tasks(self) -> int:
        return len(self._tasks)

    def _check_index(self, index: int) -> None:
        # Negative indices are rejected rather than counted from the end
        if not 0 <= index < len(self._tasks):
            raise IndexOutOfRangeError(index, len(self._tasks))

    def mark_task(self, index: int) -> Task:
        """Mark the task at ``index`` as done and return it.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside ``[0, count)``.
        """
        self._check_index(index)
        task = self._tasks[index]
        task.mark()
        return task

    def unmark_task(self, index: int) -> Task:
        """Mark the task at ``index`` as not done and return it.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside ``[0, count)``.
        """
        self._check_index(index)
        task = self._tasks[index]
        task.unmark()
        return task

    def delete_task(self, index: int) -> Task:
        """Remove and return the task at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside ``[0, count)``.
                The list is left unchanged.
        """
        self._check_index(index)
        return self._tasks.pop(index)

    def find(self, substring: str) -> List[Task]:
        """Return tasks whose description contains ``substring``.

        Matching is case-sensitive. An empty substring matches every task.
        """
        return [task for _, task in self.find_indexed(substring)]

    def find_indexed(self, substring: str) -> List[Tuple[int, Task]]:
        """Like ``find``, but pairs each match with its index in this list."""
        return [
            (index, task) for index, task in enumerate(self._tasks)
            if substring in task.description
        ]

    def remove_duplicates(self) -> "TaskList":
        """Drop every repeat of an earlier task.

        The first occurrence of each task stays in place. Returns a new
        TaskList holding the removed tasks in their original order.
        """
        seen = set()
        kept: List[Task] = []
        removed: List[Task] = []

        for task in self._tasks:
            key = task.key
            if key in seen:
                removed.append(task)
            else:
                seen.add(key)
                kept.append(task)

        if removed:
            logger.debug("Removing %d duplicate task(s)", len(removed))
            self._tasks = kept
        return TaskList(removed)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.get_tasks())

    def __str__(self) -> str:
        return "\n".join(
            f"{index}. {task.to_display()}" for index, task in enumerate(self._tasks)
        )
