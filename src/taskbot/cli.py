"""Command-line interface for taskbot."""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from .config import ConfigModel, get_config, load_config
from .errors import StorageError
from .parser import CommandKind, CommandParser
from .storage import Storage
from .task_list import TaskList
from .ui import Ui

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_log_level(level_name) -> int:
    """Turn a config value such as "info", "INFO" or 20 into a level number."""
    text = str(level_name).strip()
    if text.isdigit():
        return int(text)
    level = getattr(logging, text.upper(), None)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level_name, verbose: bool = False) -> None:
    """Configure the root logger once for the whole process."""
    level = logging.DEBUG if verbose else resolve_log_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_session(config: ConfigModel, console: Optional[Console] = None) -> CommandParser:
    """Wire the UI, storage and saved tasks into a command parser."""
    ui = Ui(
        console or Console(no_color=config.no_color),
        date_format=config.display_date_format,
    )
    storage = Storage(config)

    try:
        task_list = storage.load()
    except StorageError as e:
        logger.error("Could not load tasks: %s", e)
        ui.display(ui.show_load_tasks_error(e), style="yellow")
        task_list = TaskList()

    return CommandParser(ui, task_list, storage)


@click.group(invoke_without_command=True)
@click.option("--config", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--data-dir", type=click.Path(file_okay=False), help="Directory holding the task file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, data_dir, verbose):
    """Taskbot - a personal task-tracking assistant."""
    ctx.ensure_object(dict)

    if config:
        cfg = load_config(Path(config))
    else:
        cfg = get_config()

    if data_dir:
        cfg = dataclasses.replace(cfg, data_dir=data_dir)

    configure_logging(cfg.log_level, verbose)
    ctx.obj["config"] = cfg
    ctx.obj["session"] = create_session(cfg)

    # Start an interactive session when no command is given
    if ctx.invoked_subcommand is None:
        ctx.invoke(chat)


@main.command()
@click.pass_context
def chat(ctx):
    """Start an interactive session; type `bye` to leave."""
    session: CommandParser = ctx.obj["session"]
    prompt = ctx.obj["config"].prompt
    ui = session.ui

    ui.show_welcome()
    while True:
        try:
            line = ui.console.input(prompt)
        except (EOFError, KeyboardInterrupt):
            ui.display(ui.show_bye_message())
            break

        if not line.strip():
            continue

        result = session.handle(line)
        ui.display(result.message)
        if result.is_exit:
            break


@main.command("do", context_settings={"ignore_unknown_options": True})
@click.argument("words", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def do_command(ctx, words):
    """Run a single command, e.g. `taskbot do todo read book`."""
    session: CommandParser = ctx.obj["session"]
    result = session.handle(" ".join(words))
    session.ui.display(result.message)

    if result.kind is CommandKind.INVALID:
        sys.exit(1)


if __name__ == "__main__":
    main()
