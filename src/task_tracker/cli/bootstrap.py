# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- restores the task collection from the snapshot and wires it into AppState,
- persists the collection back on exit (or after each change with autosave).
"""

from __future__ import annotations

import logging
import os

from ..config import get_settings
from ..core.errors import SnapshotError
from ..core.state import AppState
from ..tasks.task_collection import TaskCollection
from ..tasks.task_store import SnapshotStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_path.parent.mkdir(parents=True, exist_ok=True)


def load_collection(store: SnapshotStore) -> TaskCollection:
    """
    Load the snapshot; an unreadable one is moved aside to <name>.corrupt
    so the next save cannot overwrite it, and an empty collection is returned.
    """
    try:
        return store.load()
    except SnapshotError:
        logger.exception("Failed to load snapshot %s", store.path)
        aside = store.path.with_name(store.path.name + ".corrupt")
        os.replace(store.path, aside)
        logger.warning("Moved unreadable snapshot to %s; starting with no tasks.", aside)
        return TaskCollection()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SnapshotStore(settings.snapshot_path)
    return AppState(settings=settings, tasks=load_collection(store), store=store)


def save_state(state: AppState) -> bool:
    """Persist the collection; returns False (after logging) if the write failed."""
    try:
        state.store.save(state.tasks)
    except OSError:
        logger.exception("Failed to save tasks to %s", state.store.path)
        return False
    state.dirty = False
    return True
