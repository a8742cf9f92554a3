"""Tests for the command parser."""

from datetime import datetime

import pytest

from taskbot.errors import ValidationError
from taskbot.parser import (
    COMMAND_KEYWORDS,
    CommandKind,
    CommandParser,
    build_task,
    classify_command,
    extract_deadline_fields,
    extract_event_fields,
    get_task_info,
    parse_index,
    suggest_command,
)
from taskbot.task import Deadline, Event, Todo
from taskbot.task_list import TaskList
from taskbot.ui import Ui

from conftest import FakeStorage


class TestClassifyCommand:
    """Test resolving input to a command kind."""

    @pytest.mark.parametrize("text,expected", [
        ("bye", CommandKind.BYE),
        ("list", CommandKind.LIST),
        ("mark 1", CommandKind.MARK),
        ("unmark 1", CommandKind.UNMARK),
        ("delete 0", CommandKind.DELETE),
        ("find book", CommandKind.FIND),
        ("todo read", CommandKind.TODO),
        ("deadline x /by 2023-08-31 12:00", CommandKind.DEADLINE),
        ("event x /by a /to b", CommandKind.EVENT),
        ("duplicates", CommandKind.DUPLICATES),
        ("invalid", CommandKind.INVALID),
    ])
    def test_keywords(self, text, expected):
        assert classify_command(text) is expected

    def test_unknown_input_is_invalid(self):
        assert classify_command("hello there") is CommandKind.INVALID
        assert classify_command("") is CommandKind.INVALID

    def test_prefix_match_only(self):
        """Test that keywords must start the input and match case."""
        assert classify_command("listing") is CommandKind.LIST
        assert classify_command("please list") is CommandKind.INVALID
        assert classify_command("List") is CommandKind.INVALID

    def test_keyword_order_is_fixed(self):
        assert [keyword for keyword, _ in COMMAND_KEYWORDS] == [
            "invalid", "bye", "list", "mark", "unmark", "delete",
            "find", "todo", "deadline", "event", "duplicates",
        ]

    def test_last_matching_keyword_wins(self):
        """Test that later entries override earlier ones on shared prefixes."""
        keywords = (
            ("d", CommandKind.DELETE),
            ("de", CommandKind.DEADLINE),
            ("del", CommandKind.DUPLICATES),
        )
        assert classify_command("delete 0", keywords) is CommandKind.DUPLICATES
        assert classify_command("deadline", keywords) is CommandKind.DEADLINE
        assert classify_command("done", keywords) is CommandKind.DELETE

    def test_earlier_entry_loses_even_if_longer(self):
        keywords = (
            ("delete", CommandKind.DELETE),
            ("d", CommandKind.LIST),
        )
        assert classify_command("delete 0", keywords) is CommandKind.LIST


class TestExtraction:
    """Test pulling task fields out of command text."""

    def test_get_task_info_strips_keyword(self):
        assert get_task_info("todo read book", "todo") == "read book"
        assert get_task_info("todoread book", "todo") == "todoread book"

    def test_event_order_independent(self):
        """Test that /by and /to can come in either order."""
        forward = extract_event_fields("trip /by 2023-08-31 12:00 /to 2023-09-01 12:00")
        reverse = extract_event_fields("trip /to 2023-09-01 12:00 /by 2023-08-31 12:00")

        assert forward == ("trip", "2023-08-31 12:00", "2023-09-01 12:00")
        assert reverse == forward

    @pytest.mark.parametrize("info", [
        "trip",
        "trip /by 2023-08-31 12:00",
        "trip /to 2023-09-01 12:00",
        "/by 2023-08-31 12:00 /to 2023-09-01 12:00",
        "trip /by2023-08-31 12:00 /to 2023-09-01 12:00",
    ])
    def test_event_missing_markers(self, info):
        with pytest.raises(ValidationError) as exc_info:
            extract_event_fields(info)
        assert "/by" in exc_info.value.message and "/to" in exc_info.value.message

    def test_event_empty_segment(self):
        """Test that an empty field is a validation error, not a crash."""
        with pytest.raises(ValidationError) as exc_info:
            extract_event_fields("trip /by  /to x /by y /to z")
        assert exc_info.value.message == "Description, /by and /to cannot be empty!"

    def test_deadline_fields(self):
        assert extract_deadline_fields("return book /by 2023-08-31 12:00") == (
            "return book", "2023-08-31 12:00"
        )

    def test_deadline_splits_once(self):
        assert extract_deadline_fields("a /by b /by c") == ("a", "b /by c")

    @pytest.mark.parametrize("info", [
        "return book",
        "return book /by ",
        " /by 2023-08-31 12:00",
        "return book /by",
    ])
    def test_deadline_missing_parts(self, info):
        with pytest.raises(ValidationError) as exc_info:
            extract_deadline_fields(info)
        assert exc_info.value.message == "Deadline description and /by cannot be empty!"

    def test_build_event(self):
        event = build_task(
            CommandKind.EVENT, "event trip /to 2023-09-01 12:00 /by 2023-08-31 12:00"
        )
        assert isinstance(event, Event)
        assert event.description == "trip"
        assert event.start_at == datetime(2023, 8, 31, 12, 0)
        assert event.end_at == datetime(2023, 9, 1, 12, 0)

    def test_build_task_requires_two_words(self):
        with pytest.raises(ValidationError):
            build_task(CommandKind.TODO, "todo")
        with pytest.raises(ValidationError):
            build_task(CommandKind.TODO, "todo    ")

    def test_parse_index(self):
        assert parse_index("mark 2", 3) == 2
        assert parse_index("mark -1", 3) == -1

    @pytest.mark.parametrize("text", ["mark", "mark one", "mark 1.5", "mark 1_0"])
    def test_parse_index_rejects_non_numbers(self, text):
        with pytest.raises(IndexError):
            parse_index(text, 3)

    def test_suggest_command(self):
        assert suggest_command("lst") == "list"
        assert suggest_command("delet 1") == "delete"
        assert suggest_command("xyzzy") is None
        assert suggest_command("") is None


class TestCommandParser:
    """Test handling whole commands."""

    def test_add_todo(self, parser, task_list, storage):
        response = parser.parse_command("todo read book")

        assert "Got it. I've added this task:" in response
        assert "[T][ ] read book" in response
        assert "Now you have 1 task in the list." in response
        assert task_list.get_tasks() == (Todo("read book"),)
        assert storage.saved == [[Todo("read book")]]

    def test_add_deadline(self, parser, task_list):
        response = parser.parse_command("deadline return book /by 2023-08-31 12:00")

        assert "[D][ ] return book (by: Aug 31 2023 12:00)" in response
        assert task_list.get_tasks() == (Deadline("return book", "2023-08-31 12:00"),)

    @pytest.mark.parametrize("text", [
        "event trip /by 2023-08-31 12:00 /to 2023-09-01 12:00",
        "event trip /to 2023-09-01 12:00 /by 2023-08-31 12:00",
    ])
    def test_add_event_either_order(self, parser, task_list, text):
        parser.parse_command(text)
        assert task_list.get_tasks() == (
            Event("trip", "2023-08-31 12:00", "2023-09-01 12:00"),
        )

    def test_empty_description(self, parser, task_list, storage):
        response = parser.parse_command("todo")

        assert "Task description cannot be empty!" in response
        assert len(task_list) == 0
        assert storage.saved == []

    def test_invalid_date_is_reported(self, parser, task_list, storage):
        response = parser.parse_command("deadline d /by not-a-date")

        assert "Invalid date 'not-a-date'" in response
        assert len(task_list) == 0
        assert storage.saved == []

    def test_invalid_date_shows_format_hint(self, parser):
        response = parser.parse_command("deadline d /by not-a-date")

        assert "\nHint: e.g. 2023-08-31 12:00" in response

    def test_description_with_line_break_is_rejected(self, parser, task_list, storage):
        response = parser.parse_command("todo buy milk\nT | 1 | injected")

        assert "cannot contain line breaks" in response
        assert len(task_list) == 0
        assert storage.saved == []

    def test_event_without_markers(self, parser, task_list):
        response = parser.parse_command("event party")

        assert "An event must contain a description" in response
        assert len(task_list) == 0

    def test_list(self, parser):
        assert parser.parse_command("list") == "Your task list is empty."

        parser.parse_command("todo a")
        parser.parse_command("todo b")
        assert parser.parse_command("list") == (
            "Here are the tasks in your list:\n0. [T][ ] a\n1. [T][ ] b"
        )

    def test_mark_and_unmark(self, parser, task_list, storage):
        parser.parse_command("todo a")

        response = parser.parse_command("mark 0")
        assert "Nice! I've marked this task as done:" in response
        assert task_list.get_tasks()[0].completed

        response = parser.parse_command("unmark 0")
        assert "not done yet" in response
        assert not task_list.get_tasks()[0].completed
        assert len(storage.saved) == 3

    @pytest.mark.parametrize("text", ["mark", "mark x", "mark 5", "mark -1", "unmark 9"])
    def test_invalid_index(self, parser, task_list, storage, text):
        parser.parse_command("todo a")
        saves = len(storage.saved)

        response = parser.parse_command(text)

        assert response.startswith("Invalid task index!")
        assert not task_list.get_tasks()[0].completed
        assert len(storage.saved) == saves

    def test_delete(self, parser, task_list):
        parser.parse_command("todo a")
        parser.parse_command("todo b")

        response = parser.parse_command("delete 0")

        assert "Noted. I've removed this task:\n  [T][ ] a" in response
        assert "Now you have 1 task in the list." in response
        assert task_list.get_tasks() == (Todo("b"),)

    def test_delete_invalid_index(self, parser, task_list):
        parser.parse_command("todo a")

        response = parser.parse_command("delete 1")

        assert response.startswith("Invalid task index!")
        assert len(task_list) == 1

    def test_find(self, parser):
        parser.parse_command("todo read book")
        parser.parse_command("todo buy milk")

        response = parser.parse_command("find book")

        assert response == "Here are the matching tasks in your list:\n0. [T][ ] read book"
        assert parser.parse_command("find swim") == "No matching tasks found."

    def test_find_numbers_match_list_indices(self, parser, task_list):
        """Test that a number shown by find can be passed straight to mark."""
        parser.parse_command("todo buy milk")
        parser.parse_command("todo read book")

        response = parser.parse_command("find book")
        assert response == "Here are the matching tasks in your list:\n1. [T][ ] read book"

        parser.parse_command("mark 1")
        milk, book = task_list.get_tasks()
        assert book.completed
        assert not milk.completed

    def test_find_without_query(self, parser):
        result = parser.handle("find")

        assert result.kind is CommandKind.FIND
        assert "what to look for" in result.message

    def test_find_with_empty_query_lists_all(self, parser):
        parser.parse_command("todo a")
        parser.parse_command("todo b")

        response = parser.parse_command("find ")

        assert "[T][ ] a" in response and "[T][ ] b" in response

    def test_duplicates(self, parser, task_list, storage):
        for text in ("todo a", "todo a", "todo b"):
            parser.parse_command(text)
        saves = len(storage.saved)

        response = parser.parse_command("duplicates")

        assert response == "The following duplicate tasks were removed:\n- [T][ ] a"
        assert task_list.get_tasks() == (Todo("a"), Todo("b"))
        assert len(storage.saved) == saves + 1

    def test_no_duplicates(self, parser, storage):
        parser.parse_command("todo a")
        saves = len(storage.saved)

        assert parser.parse_command("duplicates") == "No duplicate tasks found."
        assert len(storage.saved) == saves

    def test_bye(self, parser):
        result = parser.handle("bye")

        assert result.is_exit
        assert result.message == "Bye. Hope to see you again soon!"
        assert not parser.handle("list").is_exit

    def test_invalid_command(self, parser):
        response = parser.parse_command("blah")
        assert "I don't know what that means" in response
        assert "Did you mean" not in response

    def test_invalid_command_suggestion(self, parser):
        response = parser.parse_command("lst")
        assert "Did you mean `list`?" in response

    def test_save_failure_keeps_mutation(self):
        task_list = TaskList()
        parser = CommandParser(Ui(), task_list, FakeStorage(fail=True))

        response = parser.parse_command("todo read book")

        assert "Got it. I've added this task:" in response
        assert "could not be saved" in response
        assert len(task_list) == 1
