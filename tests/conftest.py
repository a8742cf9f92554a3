"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskbot.config import Config, ConfigModel  # noqa: E402
from taskbot.errors import StorageError  # noqa: E402
from taskbot.parser import CommandParser  # noqa: E402
from taskbot.task_list import TaskList  # noqa: E402
from taskbot.ui import Ui  # noqa: E402


class FakeStorage:
    """Records every save instead of touching the filesystem."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    def save(self, tasks):
        if self.fail:
            raise StorageError("disk full", "/nowhere/tasks.md")
        self.saved.append(list(tasks))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config and task files out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    Config.reset()
    yield home
    Config.reset()


@pytest.fixture
def config(tmp_path):
    return ConfigModel(data_dir=str(tmp_path / "data"))


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def task_list():
    return TaskList()


@pytest.fixture
def parser(task_list, storage):
    return CommandParser(Ui(), task_list, storage)
