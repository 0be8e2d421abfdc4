# src/task_tracker/core/clock.py

"""Wall-clock indirection so the model and queries can be pinned in tests."""

from __future__ import annotations

from datetime import date, datetime


def now() -> datetime:
    return datetime.now()


def today() -> date:
    return now().date()
