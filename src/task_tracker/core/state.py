# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_collection import TaskCollection
from ..tasks.task_store import SnapshotStore


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same attributes).
    settings: object

    tasks: TaskCollection
    store: SnapshotStore

    # True when the collection changed since the last save.
    dirty: bool = False
