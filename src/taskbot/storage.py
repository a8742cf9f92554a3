"""Storage layer for the task assistant using a markdown file with YAML frontmatter."""

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

import frontmatter
import yaml

from .config import ConfigModel
from .errors import StorageError, TaskbotError
from .task import Task
from .task_list import TaskList
from .utils.datetime import now_utc

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
TASKS_HEADING = "# Tasks"


class TaskFileFormat:
    """Handles conversion between tasks and the task file contents."""

    @staticmethod
    def to_markdown(tasks: Sequence[Task]) -> str:
        """Render tasks as a markdown document with frontmatter metadata."""
        metadata = {
            "title": "Tasks",
            "format_version": FORMAT_VERSION,
            "task_count": len(tasks),
            "saved_at": now_utc().isoformat(timespec="seconds"),
        }

        content_lines = [TASKS_HEADING, ""]
        content_lines.extend(task.to_persistence() for task in tasks)

        post = frontmatter.Post("\n".join(content_lines), **metadata)
        return frontmatter.dumps(post) + "\n"

    @staticmethod
    def from_markdown(content: str) -> Tuple[dict, List[Task]]:
        """Parse a task file back into its metadata and tasks.

        Lines that are not valid task records are skipped with a warning.
        """
        post = frontmatter.loads(content)

        tasks = []
        for line_no, line in enumerate(post.content.split("\n"), start=1):
            line = line.strip()
            # Skip blank lines and headings
            if not line or line.startswith("#"):
                continue
            try:
                tasks.append(Task.from_persistence(line))
            except (ValueError, TaskbotError) as e:
                logger.warning("Skipping unreadable task record on line %d: %s", line_no, e)

        expected = post.metadata.get("task_count")
        if expected is not None and expected != len(tasks):
            logger.warning("Task file declares %s tasks but %d were read", expected, len(tasks))

        return dict(post.metadata), tasks


class Storage:
    """File-based storage for the task list."""

    def __init__(self, config: ConfigModel):
        self.config = config
        self.path: Path = config.get_tasks_path()

    def load(self) -> TaskList:
        """Load the saved tasks, or an empty list when nothing was saved yet.

        Raises:
            StorageError: If the file exists but cannot be read or parsed.
        """
        if not self.path.exists():
            logger.debug("No task file at %s, starting empty", self.path)
            return TaskList()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
            _, tasks = TaskFileFormat.from_markdown(content)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read tasks from {self.path}: {e}", self.path) from e

        logger.info("Loaded %d task(s) from %s", len(tasks), self.path)
        return TaskList(tasks)

    def save(self, tasks: Sequence[Task]) -> None:
        """Write all tasks to the task file.

        Raises:
            StorageError: If the file cannot be written.
        """
        content = TaskFileFormat.to_markdown(tasks)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Could not save tasks to {self.path}: {e}", self.path) from e

        logger.info("Saved %d task(s) to %s", len(tasks), self.path)
