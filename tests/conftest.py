# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core import clock as clock_module
from task_tracker.core.state import AppState
from task_tracker.tasks.task_collection import TaskCollection
from task_tracker.tasks.task_store import SnapshotStore

START = datetime(2024, 1, 1, 9, 0, 0)


class FakeClock:
    """
    Controllable wall clock.

    Installed over task_tracker.core.clock.now, so every model/query call
    sees the same pinned time until the test advances it.
    """

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture()
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(clock_module, "now", fake.now)
    return fake


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and cli modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        snapshot_path=tmp_path / "tasks.json",
        export_path=tmp_path / "tasks_export.txt",
        upcoming_days=7,
        autosave=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    return AppState(
        settings=settings,
        tasks=TaskCollection(),
        store=SnapshotStore(settings.snapshot_path),
    )
