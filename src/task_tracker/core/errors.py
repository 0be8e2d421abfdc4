# src/task_tracker/core/errors.py

"""
Typed errors surfaced by the core.

Handlers in cli/commands.py turn these into reply text; nothing in the core
terminates the process.
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for all task tracker errors."""


class ValidationError(TaskTrackerError, ValueError):
    """Invalid input: bad enum name, blank title/tag, negative day window, duplicate id."""


class NotFoundError(TaskTrackerError, KeyError):
    def __init__(self, task_id: int) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task not found with ID: {self.task_id}"


class SnapshotError(TaskTrackerError):
    """Snapshot file exists but cannot be read or parsed."""
