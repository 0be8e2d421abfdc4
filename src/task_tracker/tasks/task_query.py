# src/task_tracker/tasks/task_query.py

"""
Pure query helpers over task sequences.

Every function takes any iterable of Task and returns a new list. Inputs are
never mutated, and all sorts are stable, so ties keep input order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, timedelta

from ..core import clock
from ..core.errors import ValidationError
from .task_models import Category, Priority, Task, TaskStatusFilter, normalize_tag

TaskList = list[Task]


def search(tasks: Iterable[Task], keyword: str) -> TaskList:
    """Case-insensitive substring match against title, description and tags."""
    kw = keyword.strip().lower()
    return [
        t
        for t in tasks
        if kw in t.title.lower()
        or kw in t.description.lower()
        or any(kw in tag for tag in t.tags)
    ]


# ---- filters ----


def filter_by_category(tasks: Iterable[Task], category: Category | str) -> TaskList:
    wanted = Category.from_name(category)
    return [t for t in tasks if t.category is wanted]


def filter_by_priority(tasks: Iterable[Task], priority: Priority | str) -> TaskList:
    wanted = Priority.from_name(priority)
    return [t for t in tasks if t.priority is wanted]


def filter_by_status(tasks: Iterable[Task], status: TaskStatusFilter | str) -> TaskList:
    want_completed = TaskStatusFilter.from_name(status) is TaskStatusFilter.COMPLETED
    return [t for t in tasks if t.completed == want_completed]


def filter_by_overdue(tasks: Iterable[Task], today: date | None = None) -> TaskList:
    today = today or clock.today()
    return [t for t in tasks if t.is_overdue(today)]


def filter_by_tag(tasks: Iterable[Task], tag: str) -> TaskList:
    norm = normalize_tag(tag)
    return [t for t in tasks if norm in t.tags]


def pending(tasks: Iterable[Task]) -> TaskList:
    return filter_by_status(tasks, TaskStatusFilter.PENDING)


def upcoming(tasks: Iterable[Task], days: int, today: date | None = None) -> TaskList:
    """Pending tasks due within [today, today + days], earliest first."""
    if isinstance(days, bool) or not isinstance(days, int) or days < 0:
        raise ValidationError(f"Days to look ahead must be a non-negative integer, got {days!r}")
    start = today or clock.today()
    end = start + timedelta(days=days)
    window = [t for t in tasks if not t.completed and start <= t.due_date <= end]
    return sort_by_due_date(window)


# ---- sorting ----


def sort_by_due_date(tasks: Iterable[Task]) -> TaskList:
    return sorted(tasks, key=lambda t: t.due_date)


def sort_by_priority(tasks: Iterable[Task]) -> TaskList:
    return sorted(tasks, key=lambda t: -int(t.priority))


def sort_by_created_date(tasks: Iterable[Task]) -> TaskList:
    # reverse=True keeps equal timestamps in input order
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def sort_by_title(tasks: Iterable[Task]) -> TaskList:
    return sorted(tasks, key=lambda t: t.title)


SORTERS: dict[str, Callable[[Iterable[Task]], TaskList]] = {
    "due": sort_by_due_date,
    "priority": sort_by_priority,
    "created": sort_by_created_date,
    "title": sort_by_title,
}


def sort_tasks(tasks: Iterable[Task], key: str) -> TaskList:
    sorter = SORTERS.get(key.strip().lower())
    if sorter is None:
        raise ValidationError(f"Invalid sort key: {key!r}. Expected one of: {', '.join(SORTERS)}")
    return sorter(tasks)
