# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..core.errors import SnapshotError
from .task_collection import TaskCollection
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotStore:
    """
    JSON snapshot of a whole TaskCollection.

    File layout:
        {"version": 1, "next_id": <int>, "tasks": [<task dict>, ...]}

    - dates and timestamps are ISO-8601 strings
    - enums are stored by name
    - saves go through a .tmp sibling and os.replace (atomic on the same filesystem)
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- (de)serialization ----

    @staticmethod
    def _task_to_dict(task: Task) -> dict[str, Any]:
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "due_date": task.due_date.isoformat(),
            "created_at": task.created_at.isoformat(),
            "last_modified_at": task.last_modified_at.isoformat(),
            "completed": task.completed,
            "completed_at": task.completed_at.isoformat() if task.completed_at else None,
            "priority": task.priority.name,
            "category": task.category.name,
            "tags": list(task.tags),
            "estimated_hours": task.estimated_hours,
        }

    @staticmethod
    def _dict_to_task(raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise TypeError(f"task entry must be an object, got {type(raw).__name__}")
        if not isinstance(raw.get("title"), str):
            raise TypeError(f"task {raw.get('id')!r} has no string title")
        completed_at = raw.get("completed_at")
        return Task(
            id=int(raw["id"]),
            title=raw["title"],
            description=str(raw.get("description") or ""),
            due_date=date.fromisoformat(raw["due_date"]),
            priority=Priority.from_name(raw["priority"]),
            category=Category.from_name(raw["category"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            last_modified_at=datetime.fromisoformat(raw["last_modified_at"]),
            completed=bool(raw.get("completed", False)),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
            tags=[str(t) for t in raw.get("tags") or []],
            estimated_hours=int(raw.get("estimated_hours") or 0),
        )

    def to_dict(self, collection: TaskCollection) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "next_id": collection.next_id,
            "tasks": [self._task_to_dict(t) for t in collection.all()],
        }

    def from_dict(self, data: Any) -> TaskCollection:
        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            raise SnapshotError(f"Unexpected snapshot layout in {self._path}")
        try:
            tasks = [self._dict_to_task(raw) for raw in data["tasks"]]
            next_id = data.get("next_id")
            collection = TaskCollection()
            collection.restore(
                {t.id: t for t in tasks},
                next_id=int(next_id) if next_id is not None else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed task entry in {self._path}: {e}") from e
        if len(collection) != len(tasks):
            raise SnapshotError(f"Duplicate task ids in {self._path}")
        return collection

    # ---- disk ----

    def load(self) -> TaskCollection:
        """Load the snapshot; a missing file yields an empty collection (counter at 1)."""
        if not self._path.exists():
            logger.info("No snapshot at %s, starting fresh.", self._path)
            return TaskCollection()
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Cannot read snapshot {self._path}: {e}") from e
        collection = self.from_dict(data)
        logger.info("Loaded %d tasks from %s", len(collection), self._path)
        return collection

    def save(self, collection: TaskCollection) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self.to_dict(collection), ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        logger.info("Saved %d tasks to %s", len(collection), self._path)
