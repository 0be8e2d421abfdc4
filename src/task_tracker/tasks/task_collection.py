# src/task_tracker/tasks/task_collection.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import date

from ..core.errors import NotFoundError, ValidationError
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)


class TaskCollection:
    """
    Insertion-ordered id -> Task mapping.

    The collection owns id assignment:
    - ids start at 1 and only move forward
    - ids of deleted tasks are never handed out again
    - restore() advances the counter past every loaded id

    Not safe for concurrent mutation; callers must synchronize externally.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._next_id: int = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # ---- mutation ----

    def create(
        self,
        title: str,
        description: str,
        due_date: date,
        priority: Priority | str,
        category: Category | str,
        *,
        estimated_hours: int = 0,
        tags: Iterable[str] = (),
    ) -> Task:
        # The id is only taken once the task is fully built; a rejected title
        # or tag leaves the counter where it was.
        task = Task.create(self._next_id, title, description, due_date, priority, category)
        if estimated_hours:
            task.set_estimated_hours(estimated_hours)
        for tag in tags:
            task.add_tag(tag)
        self._allocate_id()
        self._tasks[task.id] = task
        logger.debug(
            "Task created id=%s priority=%s category=%s due=%s",
            task.id,
            task.priority.name,
            task.category.name,
            task.due_date,
        )
        return task

    def add(self, task: Task) -> None:
        if task.id in self._tasks:
            raise ValidationError(f"Duplicate task id: {task.id}")
        self._tasks[task.id] = task
        if task.id >= self._next_id:
            self._next_id = task.id + 1

    def remove(self, task_id: int) -> bool:
        task = self._tasks.pop(task_id, None)
        if task is None:
            return False
        logger.debug("Task removed id=%s", task_id)
        return True

    def restore(self, loaded: Mapping[int, Task], next_id: int | None = None) -> None:
        """
        Replace the contents with `loaded` (kept in mapping order).

        The counter becomes max(max loaded id + 1, next_id), or 1 for an empty
        load without a persisted counter.
        """
        for key, task in loaded.items():
            if key != task.id:
                raise ValidationError(f"Snapshot key {key} does not match task id {task.id}")
        self._tasks = dict(loaded)
        floor = max(self._tasks, default=0) + 1
        self._next_id = max(floor, next_id or 1)
        logger.info("TaskCollection restored tasks=%d next_id=%d", len(self._tasks), self._next_id)

    # ---- lookup ----

    def get(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def find(self, task_id: int) -> Task | None:
        return self._tasks.get(task_id)

    def all(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __iter__(self) -> Iterator[Task]:
        return self.all()

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks
