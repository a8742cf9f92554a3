"""Response text and terminal output for the task assistant."""

from typing import Iterable, Optional, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .task import Task
from .utils.datetime import DISPLAY_DATETIME_FORMAT

BOT_NAME = "Taskbot"


class Ui:
    """Builds response strings and prints them.

    The ``show_*`` methods only format text. They receive tasks or read-only
    task sequences and never change the task list.
    """

    def __init__(self, console: Optional[Console] = None,
                 date_format: str = DISPLAY_DATETIME_FORMAT):
        self.console = console or Console()
        self.date_format = date_format

    def _render(self, task: Task) -> str:
        return task.to_display(self.date_format)

    def _render_numbered(self, indexed: Iterable[Tuple[int, Task]]) -> str:
        return "\n".join(f"{index}. {self._render(task)}" for index, task in indexed)

    def _count(self, num_tasks: int) -> str:
        noun = "task" if num_tasks == 1 else "tasks"
        return f"Now you have {num_tasks} {noun} in the list."

    # Output

    def display(self, message: str, style: str = "") -> None:
        """Print a response inside a panel."""
        # Text() keeps user descriptions such as "[red]" from being read as markup
        self.console.print(Panel(Text(message), style=style or "none", expand=False))

    def show_welcome(self) -> None:
        self.display(f"Hello! I'm {BOT_NAME}.\nWhat can I do for you?", style="cyan")

    # Responses

    def show_bye_message(self) -> str:
        return "Bye. Hope to see you again soon!"

    def show_task_list(self, tasks: Sequence[Task]) -> str:
        if not tasks:
            return "Your task list is empty."
        return "Here are the tasks in your list:\n" + self._render_numbered(enumerate(tasks))

    def show_marked_task(self, task: Task) -> str:
        return f"Nice! I've marked this task as done:\n  {self._render(task)}"

    def show_unmarked_task(self, task: Task) -> str:
        return f"OK, I've marked this task as not done yet:\n  {self._render(task)}"

    def show_invalid_index_error(self, num_tasks: int) -> str:
        if num_tasks == 0:
            return "Invalid task index! Your task list is empty."
        return (
            "Invalid task index! Please give a number from "
            f"0 to {num_tasks - 1}, e.g. `mark 0`."
        )

    def show_delete_task_message(self, task: Task, num_tasks: int) -> str:
        return (
            f"Noted. I've removed this task:\n  {self._render(task)}\n"
            f"{self._count(num_tasks)}"
        )

    def show_add_task_message(self, task: Task, num_tasks: int) -> str:
        return (
            f"Got it. I've added this task:\n  {self._render(task)}\n"
            f"{self._count(num_tasks)}"
        )

    def show_add_task_error(self, message: str,
                            suggestions: Optional[Sequence[str]] = None) -> str:
        lines = [f"OOPS!!! {message}"]
        lines.extend(f"Hint: {suggestion}" for suggestion in suggestions or [])
        return "\n".join(lines)

    def show_validation_error(self, message: str) -> str:
        return f"OOPS!!! {message}"

    def show_invalid_command_error(self, suggestion: Optional[str] = None) -> str:
        message = "OOPS!!! I'm sorry, but I don't know what that means :-("
        if suggestion:
            message += f"\nDid you mean `{suggestion}`?"
        return message

    def show_find_results(self, matches: Sequence[Tuple[int, Task]]) -> str:
        """Show matches numbered by their index in the task list."""
        if not matches:
            return "No matching tasks found."
        return "Here are the matching tasks in your list:\n" + self._render_numbered(matches)

    def show_duplicates_removed(self, tasks: Sequence[Task]) -> str:
        if not tasks:
            return "No duplicate tasks found."
        return (
            "The following duplicate tasks were removed:\n"
            + "\n".join(f"- {self._render(task)}" for task in tasks)
        )

    def show_save_tasks_error(self, error: Exception) -> str:
        return f"Warning: your tasks could not be saved ({error})."

    def show_load_tasks_error(self, error: Exception) -> str:
        return f"Warning: saved tasks could not be loaded ({error}). Starting with an empty list."
