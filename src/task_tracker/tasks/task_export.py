# src/task_tracker/tasks/task_export.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

from ..core import clock
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

RULE_WIDTH = 50

PRIORITY_MARKERS = {
    Priority.LOW: "[ ]",
    Priority.MEDIUM: "[!]",
    Priority.HIGH: "[!!]",
    Priority.URGENT: "[!!!]",
}


def status_label(task: Task, today: date | None = None) -> str:
    if task.completed:
        return "Completed"
    if task.is_overdue(today):
        return "OVERDUE"
    return "Pending"


def render_task(task: Task, today: date | None = None) -> str:
    """Multi-line, human-readable block for console listings and text export."""
    today = today or clock.today()
    lines = [
        f"{PRIORITY_MARKERS[task.priority]} [{task.id}] {task.title}",
        f"   Description: {task.description}",
        f"   Due: {task.due_date.isoformat()} | Category: {task.category.name} | "
        f"Priority: {task.priority.name} | Status: {status_label(task, today)}",
    ]
    if task.tags:
        lines.append(f"   Tags: {', '.join(task.tags)}")
    if task.estimated_hours > 0:
        lines.append(f"   Estimated: {task.estimated_hours} hours")

    if task.completed and task.completed_at is not None:
        lines.append(f"   Completed on: {task.completed_at:%Y-%m-%d} at {task.completed_at:%H:%M}")
    else:
        days = task.days_until_due(today)
        if days >= 0:
            lines.append(f"   Days until due: {days}")

    lines.append(
        f"   Created: {task.created_at:%b %d, %Y %H:%M} | Modified: {task.last_modified_at:%b %d, %Y %H:%M}"
    )
    return "\n".join(lines)


def render_tasks(tasks: Iterable[Task], today: date | None = None) -> str:
    return "\n\n".join(render_task(t, today) for t in tasks)


def export_to_text(tasks: Iterable[Task], path: str | Path, now: datetime | None = None) -> int:
    """Write a plain-text export of `tasks` to `path`; returns the number of tasks written."""
    now = now or clock.now()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    out = [f"TASK EXPORT - {now.isoformat(timespec='seconds')}", "=" * RULE_WIDTH]
    count = 0
    for task in tasks:
        out.append(render_task(task, now.date()))
        out.append("-" * RULE_WIDTH)
        count += 1
    out.append("")
    out.append(f"Total tasks exported: {count}")

    path.write_text("\n".join(out) + "\n", "utf-8")
    logger.info("Exported %d tasks to %s", count, path)
    return count
