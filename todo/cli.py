"""Command-line interface for todo-cli.

This module provides the CLI for managing the task list using argparse.
It supports the following commands:
- add: Create a new task
- list: Show all tasks
- done: Mark a task as completed
- delete: Delete a task

Each invocation loads the task file, applies at most one change, saves
the file if something changed, and prints the resulting list.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from todo.config import Settings, load_settings
from todo.exceptions import TodoError
from todo.logging_setup import setup_logging
from todo.models import Task, is_zero_time
from todo.store import TaskStore
from todo.theme import Styler, colors_enabled
from todo.user import prompt_name, read_name, save_name

logger = logging.getLogger(__name__)

RULE = "─" * 40


@dataclass
class Context:
    """Everything a command handler needs.

    Attributes:
        store: Loaded TaskStore
        name: Display name used in the header and messages
        style: Styler for colored output on stdout
        err_style: Styler for messages on stderr, defaults to ``style``
    """

    store: TaskStore
    name: str
    style: Styler
    err_style: Optional[Styler] = None

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        style = self.err_style or self.style
        print(style.error(f"Error: {message}"), file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="todo",
        description="Your personal command line task manager"
    )
    parser.add_argument("--file", help="Task file to use (default: $TODO_FILE or .todos.json)")
    parser.add_argument("--name", help="Set the display name and remember it")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a new todo")
    add_parser.add_argument("words", nargs="*", metavar="text", help="Todo text")
    add_parser.set_defaults(handler=cmd_add)

    # List command
    list_parser = subparsers.add_parser("list", aliases=["ls"], help="Show all todos")
    list_parser.set_defaults(handler=cmd_list)

    # Done command
    done_parser = subparsers.add_parser("done", aliases=["complete"], help="Mark a todo as done")
    done_parser.add_argument("number", type=int, help="Todo number as shown by list")
    done_parser.set_defaults(handler=cmd_done)

    # Delete command
    delete_parser = subparsers.add_parser("delete", aliases=["del", "rm"], help="Remove a todo")
    delete_parser.add_argument("number", type=int, help="Todo number as shown by list")
    delete_parser.set_defaults(handler=cmd_delete)

    return parser


def print_header(name: str, style: Styler) -> None:
    print(style.header(f"\n{name}'s Todo List"))
    print(style.muted("Your Personal Command Line Task Manager"))
    print(RULE)


def print_usage(style: Styler) -> None:
    """Print the command overview shown when no command is given."""
    print(style.heading("\nUsage:"))
    print("  todo [--file PATH] [--name NAME] [--no-color] <command> [arguments]")

    print(style.heading("\nAvailable Commands:"))
    commands = [
        ("list", "Show all your todos"),
        ("add <todo text>", "Create a new todo"),
        ("done <number>", "Mark a todo as done"),
        ("delete <number>", "Remove a todo"),
    ]
    for usage, description in commands:
        print(f"  {style.command(usage.ljust(20))} {description}")

    print(style.heading("\nExamples:"))
    for example in ('todo add "Buy groceries"', "todo list", "todo done 1", "todo delete 2"):
        print(style.example(f"  {example}"))
    print()


def format_task(number: int, task: Task, style: Styler) -> str:
    """Format one task line, e.g. ``☐ [1] Buy milk (added Jan 2)``."""
    if task.done:
        line = style.success(f"✓ [{number}] {task.description}")
    else:
        line = f"☐ [{number}] {task.description}"
    created = task.created_at
    if is_zero_time(created):
        return line
    return line + style.muted(f" (added {created:%b} {created.day})")


def print_task_list(ctx: Context) -> None:
    """Print the task list with a completion summary."""
    style = ctx.style
    if len(ctx.store) == 0:
        print(style.warning(
            f"\n{ctx.name}, your todo list is empty! "
            'Add one with: todo add "your todo"'
        ))
        return

    print(style.header(f"\n{ctx.name}'s Todos:"))
    print(RULE)
    for number, task in enumerate(ctx.store, start=1):
        print(format_task(number, task, style))
    print(RULE)

    total, completed, pending = ctx.store.counts()
    print(
        style.muted(f"Total: {total}  ")
        + style.success(f"Completed: {completed}  ")
        + style.warning(f"Pending: {pending}")
    )

    if completed == total:
        print(style.success(f"\nAmazing job {ctx.name}! All tasks completed!"))
    elif completed > 0:
        print(style.header(f"\nKeep going {ctx.name}! You're making great progress!"))


def cmd_add(args: argparse.Namespace, ctx: Context) -> int:
    """Handle the 'add' command.

    Args:
        args: Parsed command-line arguments
        ctx: Command context

    Returns:
        Exit code (0 for success, 1 for error)
    """
    text = " ".join(args.words).strip()
    if not text:
        ctx.error("No todo text provided")
        return 1

    ctx.store.add(text)
    ctx.store.store()
    print(ctx.style.success(f"Added todo: {text}"))
    print_task_list(ctx)
    return 0


def cmd_list(args: argparse.Namespace, ctx: Context) -> int:
    """Handle the 'list' command.

    Returns:
        Exit code (always 0)
    """
    print_task_list(ctx)
    return 0


def cmd_done(args: argparse.Namespace, ctx: Context) -> int:
    """Handle the 'done' command.

    Raises:
        InvalidIndexError: If the number is not in the list
        StorageError: If the task file could not be written
    """
    ctx.store.complete(args.number)
    ctx.store.store()
    print(ctx.style.success(f"Completed todo #{args.number}"))
    print_task_list(ctx)
    return 0


def cmd_delete(args: argparse.Namespace, ctx: Context) -> int:
    """Handle the 'delete' command.

    Raises:
        InvalidIndexError: If the number is not in the list
        StorageError: If the task file could not be written
    """
    ctx.store.delete(args.number)
    ctx.store.store()
    print(ctx.style.warning(f"Deleted todo #{args.number}"))
    print_task_list(ctx)
    return 0


def get_user_name(
    settings: Settings,
    style: Styler,
    new_name: Optional[str] = None,
    read_line: Callable[[str], str] = input,
) -> str:
    """Return the display name, asking for it on first run.

    Args:
        settings: Runtime settings holding the user file path
        style: Styler for the greeting
        new_name: Name given on the command line; saved when not blank
        read_line: Function used to read the answer to the prompt
    """
    if new_name is not None and new_name.strip():
        name = new_name.strip()
        save_name(settings.user_file, name)
        return name

    name = read_name(settings.user_file)
    if name is not None:
        return name

    print(style.header("\nWelcome to Todo App!"))
    name = prompt_name(read_line)
    save_name(settings.user_file, name)
    print(style.success(f"\nNice to meet you, {name}!"))
    return name


def main(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    read_line: Callable[[str], str] = input,
) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]
        environ: Environment to read settings from. If None, uses os.environ
        read_line: Function used to read the display name on first run

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = load_settings(environ).with_overrides(
        todo_file=Path(args.file) if args.file else None,
        color=False if args.no_color else None,
    )
    setup_logging(settings.log_level)
    style = Styler(colors_enabled(settings.color, sys.stdout))
    err_style = Styler(colors_enabled(settings.color, sys.stderr))

    name = get_user_name(settings, style, new_name=args.name, read_line=read_line)

    if args.command is None:
        print_header(name, style)
        print_usage(style)
        return 0

    store = TaskStore.from_path(settings.todo_file)
    ctx = Context(store=store, name=name, style=style, err_style=err_style)

    try:
        store.load()
        return args.handler(args, ctx)
    except TodoError as exc:
        logger.debug("Command %r failed", args.command, exc_info=True)
        ctx.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
