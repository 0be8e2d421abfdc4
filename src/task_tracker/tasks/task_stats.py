# src/task_tracker/tasks/task_stats.py

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TypeVar

from ..core import clock
from .task_models import Category, Priority, Task

E = TypeVar("E", bound=Enum)


def _ordered_counts(counts: Counter[E], enum_cls: type[E]) -> dict[E, int]:
    # Declaration order; values that never occur are left out.
    return {m: counts[m] for m in enum_cls if counts[m]}


@dataclass(frozen=True, slots=True)
class StatsSummary:
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: float
    by_category: dict[Category, int]
    by_priority: dict[Priority, int]
    most_urgent: Task | None


class TaskStatistics:
    """
    Aggregates over a snapshot of tasks.

    The task list is copied at construction. Overdue checks use `today` when
    given, otherwise the clock's date at the moment `overdue` is read.
    """

    def __init__(self, tasks: Iterable[Task], today: date | None = None) -> None:
        self._tasks = list(tasks)
        self._today = today

    @property
    def total(self) -> int:
        return len(self._tasks)

    @property
    def completed(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    @property
    def pending(self) -> int:
        return self.total - self.completed

    @property
    def overdue(self) -> int:
        return sum(1 for t in self._tasks if t.is_overdue(self._today or clock.today()))

    def completion_rate(self) -> float:
        """Percentage of completed tasks; 0.0 for an empty snapshot."""
        if not self._tasks:
            return 0.0
        return self.completed / self.total * 100

    def by_category(self) -> dict[Category, int]:
        return _ordered_counts(Counter(t.category for t in self._tasks), Category)

    def by_priority(self) -> dict[Priority, int]:
        return _ordered_counts(Counter(t.priority for t in self._tasks), Priority)

    def most_urgent(self) -> Task | None:
        """Earliest-due pending task; equal due dates go to the higher priority."""
        open_tasks = [t for t in self._tasks if not t.completed]
        if not open_tasks:
            return None
        return min(open_tasks, key=lambda t: (t.due_date, -int(t.priority)))

    def summary(self) -> StatsSummary:
        return StatsSummary(
            total=self.total,
            completed=self.completed,
            pending=self.pending,
            overdue=self.overdue,
            completion_rate=self.completion_rate(),
            by_category=self.by_category(),
            by_priority=self.by_priority(),
            most_urgent=self.most_urgent(),
        )
