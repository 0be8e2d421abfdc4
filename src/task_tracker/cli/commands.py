# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from datetime import date
from enum import Enum
from typing import TypeVar

from ..core import clock
from ..core.errors import TaskTrackerError, ValidationError
from ..core.state import AppState
from ..tasks import task_query
from ..tasks.task_export import export_to_text, render_task, render_tasks
from ..tasks.task_models import Category, Priority, Task
from ..tasks.task_stats import TaskStatistics
from .bootstrap import save_state

CommandHandler = Callable[[AppState, list[str]], str]

E = TypeVar("E", bound=Enum)

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are split shell-style, so quoted values may contain spaces.
        Core errors come back as "Error: ..." replies.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Error: cannot parse arguments ({e})."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except TaskTrackerError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Save and quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _parse_id(raw: str) -> int:
    try:
        return int(raw.rstrip("."))
    except ValueError:
        raise ValidationError(f"Invalid ID format: {raw!r}") from None


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise ValidationError(f"Invalid date {raw!r}. Please use yyyy-mm-dd.") from None


def _parse_int(raw: str, label: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Invalid {label}: {raw!r}") from None


def _parse_choice(enum_cls: type[E], raw: str) -> E:
    """Menu-style enum input: a 1-based number or a name."""
    members = list(enum_cls)
    if raw.strip().isdigit():
        n = int(raw)
        if 1 <= n <= len(members):
            return members[n - 1]
    return enum_cls.from_name(raw)  # type: ignore[attr-defined]


def _split_options(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """Separate key=value options from positional words."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in allowed:
            options[key.lower()] = value
        elif sep and key.isidentifier():
            raise ValidationError(f"Unknown option {key!r}. Allowed: {', '.join(sorted(allowed))}")
        else:
            positional.append(arg)
    return positional, options


def _single_id(args: list[str], usage: str) -> int:
    if len(args) != 1:
        raise ValidationError(f"Usage: {usage}")
    return _parse_id(args[0])


def _changed(state: AppState) -> None:
    state.dirty = True
    if getattr(state.settings, "autosave", False):
        save_state(state)


def _listing(header: str, tasks: list[Task], empty: str, footer: str = "Total") -> str:
    if not tasks:
        return empty
    return f"{header}\n{'=' * len(header)}\n{render_tasks(tasks)}\n\n{footer}: {len(tasks)} tasks"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


ADD_OPTIONS = {"title", "desc", "due", "priority", "category", "hours", "tags"}


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk due=2024-01-10 priority=high category=shopping hours=1 tags=home,errand
    """
    words, opts = _split_options(args, ADD_OPTIONS)
    title = opts.get("title") or " ".join(words)
    if "due" not in opts:
        raise ValidationError("Due date is required: due=yyyy-mm-dd")
    due = _parse_date(opts["due"])

    task = state.tasks.create(
        title,
        opts.get("desc", "").strip(),
        due,
        _parse_choice(Priority, opts.get("priority", "medium")),
        _parse_choice(Category, opts.get("category", "other")),
        estimated_hours=_parse_int(opts.get("hours", "0"), "hours"),
        tags=[t for t in opts.get("tags", "").split(",") if t.strip()],
    )
    _changed(state)

    lines = ["Task added successfully!"]
    if due < clock.today():
        lines.append("Warning: Due date is in the past!")
    lines.append(render_task(task))
    return "\n".join(lines)


UPDATE_OPTIONS = {"title", "desc", "due", "priority", "category", "hours"}


def cmd_update(state: AppState, args: list[str]) -> str:
    """/update <id> [title=..] [desc=..] [due=..] [priority=..] [category=..] [hours=N]"""
    words, opts = _split_options(args, UPDATE_OPTIONS)
    if len(words) != 1 or not opts:
        raise ValidationError(
            "Usage: /update <id> [title=..] [desc=..] [due=..] [priority=..] [category=..] [hours=N]"
        )
    task = state.tasks.get(_parse_id(words[0]))

    # A bad value must leave the task untouched.
    due = _parse_date(opts["due"]) if "due" in opts else None
    priority = _parse_choice(Priority, opts["priority"]) if "priority" in opts else None
    category = _parse_choice(Category, opts["category"]) if "category" in opts else None
    hours = _parse_int(opts["hours"], "hours") if "hours" in opts else None

    if "title" in opts:
        task.set_title(opts["title"])
    if "desc" in opts:
        task.set_description(opts["desc"])
    if due is not None:
        task.set_due_date(due)
    if priority is not None:
        task.set_priority(priority)
    if category is not None:
        task.set_category(category)
    if hours is not None:
        task.set_estimated_hours(hours)
    _changed(state)
    return f"Task updated successfully!\n{render_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _single_id(args, "/delete <id>")
    state.tasks.get(task_id)
    state.tasks.remove(task_id)
    _changed(state)
    return f"Task {task_id} deleted."


def cmd_done(state: AppState, args: list[str]) -> str:
    task = state.tasks.get(_single_id(args, "/done <id>"))
    task.mark_complete()
    _changed(state)
    return f"Task marked as complete!\n{render_task(task)}"


def cmd_undone(state: AppState, args: list[str]) -> str:
    task = state.tasks.get(_single_id(args, "/undone <id>"))
    task.mark_incomplete()
    _changed(state)
    return f"Task marked as incomplete!\n{render_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    return _listing("ALL TASKS", list(state.tasks.all()), "No tasks available.")


def cmd_pending(state: AppState, args: list[str]) -> str:
    return _listing(
        "PENDING TASKS", task_query.pending(state.tasks.all()), "No pending tasks!", "Total pending"
    )


def cmd_show(state: AppState, args: list[str]) -> str:
    return render_task(state.tasks.get(_single_id(args, "/show <id>")))


def cmd_search(state: AppState, args: list[str]) -> str:
    keyword = " ".join(args).strip()
    if not keyword:
        raise ValidationError("Usage: /search <keyword>")
    results = task_query.search(state.tasks.all(), keyword)
    return _listing(
        f"Search Results for '{keyword.lower()}'",
        results,
        f"No tasks found matching: {keyword.lower()}",
        "Found",
    )


FILTER_USAGE = "/filter category|priority|status|tag <value> | /filter overdue"


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        raise ValidationError(f"Usage: {FILTER_USAGE}")
    kind = args[0].lower()
    tasks = state.tasks.all()

    if kind == "overdue":
        result = task_query.filter_by_overdue(tasks)
    elif len(args) != 2:
        raise ValidationError(f"Usage: {FILTER_USAGE}")
    elif kind == "category":
        result = task_query.filter_by_category(tasks, _parse_choice(Category, args[1]))
    elif kind == "priority":
        result = task_query.filter_by_priority(tasks, _parse_choice(Priority, args[1]))
    elif kind == "status":
        result = task_query.filter_by_status(tasks, args[1])
    elif kind == "tag":
        result = task_query.filter_by_tag(tasks, args[1])
    else:
        raise ValidationError(f"Usage: {FILTER_USAGE}")

    return _listing("Filtered Tasks", result, "No tasks match the filter.", "Found")


SORT_TITLES = {
    "due": "Sorted by Due Date",
    "priority": "Sorted by Priority",
    "created": "Sorted by Creation Date",
    "title": "Sorted by Title",
}


def cmd_sort(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        raise ValidationError(f"Usage: /sort {'|'.join(task_query.SORTERS)}")
    key = args[0].lower()
    result = task_query.sort_tasks(state.tasks.all(), key)
    return _listing(SORT_TITLES[key], result, "No tasks available.")


def cmd_tag(state: AppState, args: list[str]) -> str:
    """
    /tag <id>               -> show tags
    /tag <id> add <tag>     -> add a tag
    /tag <id> remove <tag>  -> remove a tag
    """
    if not args:
        raise ValidationError("Usage: /tag <id> [add|remove <tag>]")
    task = state.tasks.get(_parse_id(args[0]))
    if len(args) == 1:
        return f"Current tags: {', '.join(task.tags) or '(none)'}"
    if len(args) < 3 or args[1].lower() not in ("add", "remove", "rm"):
        raise ValidationError("Usage: /tag <id> [add|remove <tag>]")

    tag = " ".join(args[2:])
    if args[1].lower() == "add":
        changed = task.add_tag(tag)
        msg = "Tag added!" if changed else "Tag already present."
    else:
        changed = task.remove_tag(tag)
        msg = "Tag removed!" if changed else "Tag not found."
    if changed:
        _changed(state)
    return f"{msg}\nUpdated tags: {', '.join(task.tags) or '(none)'}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = TaskStatistics(state.tasks.all()).summary()
    lines = [
        "TASK STATISTICS",
        "======================",
        f"Total Tasks: {s.total}",
        f"Completed: {s.completed} ({s.completion_rate:.1f}%)",
        f"Pending: {s.pending}",
        f"Overdue: {s.overdue}",
        "",
        "By Category:",
    ]
    lines.extend(f"  {cat.name}: {n}" for cat, n in s.by_category.items())
    lines.append("")
    lines.append("By Priority:")
    lines.extend(f"  {pri.name}: {n}" for pri, n in s.by_priority.items())
    if s.most_urgent is not None:
        lines.append("")
        lines.append(
            f"Most Urgent Task: {s.most_urgent.title} (Due: {s.most_urgent.due_date.isoformat()})"
        )
    return "\n".join(lines)


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    if len(args) > 1:
        raise ValidationError("Usage: /upcoming [days]")
    days = _parse_int(args[0], "number of days") if args else int(
        getattr(state.settings, "upcoming_days", 7)
    )
    result = task_query.upcoming(state.tasks.all(), days)
    return _listing(
        f"UPCOMING TASKS (Next {days} days)",
        result,
        f"No tasks due in the next {days} days.",
        "Total upcoming",
    )


def cmd_export(state: AppState, args: list[str]) -> str:
    if len(args) > 1:
        raise ValidationError("Usage: /export [path]")
    path = args[0] if args else getattr(state.settings, "export_path", "tasks_export.txt")
    try:
        count = export_to_text(state.tasks.all(), path)
    except OSError as e:
        logger.exception("Export to %s failed", path)
        return f"Error exporting tasks: {e}"
    return f"Exported {count} tasks to '{path}'"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> due=yyyy-mm-dd [desc=..] [priority=..] [category=..] [hours=N] [tags=a,b]",
)
registry.register(
    "update", cmd_update, help_text="Update fields: /update <id> [title=..] [due=..] [priority=..] ...", aliases=["edit"]
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("done", cmd_done, help_text="Mark complete: /done <id>.")
registry.register("undone", cmd_undone, help_text="Mark incomplete: /undone <id>.")
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("pending", cmd_pending, help_text="List pending tasks.")
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("search", cmd_search, help_text="Search title/description/tags: /search <keyword>.")
registry.register("filter", cmd_filter, help_text=f"Filter tasks: {FILTER_USAGE}.")
registry.register("sort", cmd_sort, help_text="Sort tasks: /sort due|priority|created|title.")
registry.register("tag", cmd_tag, help_text="Manage tags: /tag <id> [add|remove <tag>].")
registry.register("stats", cmd_stats, help_text="Show statistics.")
registry.register("upcoming", cmd_upcoming, help_text="Tasks due soon: /upcoming [days].")
registry.register("export", cmd_export, help_text="Export to a text file: /export [path].")
