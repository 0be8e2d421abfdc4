# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum, StrEnum
from typing import TypeVar

from ..core import clock
from ..core.errors import ValidationError

E = TypeVar("E", bound=Enum)


def _parse_member(enum_cls: type[E], raw: E | str, label: str) -> E:
    """Strict by-name lookup (case-insensitive, surrounding whitespace ignored)."""
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        try:
            return enum_cls[raw.strip().upper()]
        except KeyError:
            pass
    choices = ", ".join(m.name for m in enum_cls)
    raise ValidationError(f"Invalid {label}: {raw!r}. Expected one of: {choices}")


class Priority(IntEnum):
    """Task priority; integer value is the rank (URGENT is highest)."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4

    @classmethod
    def from_name(cls, raw: Priority | str) -> Priority:
        return _parse_member(cls, raw, "priority")


class Category(StrEnum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    SHOPPING = "shopping"
    HEALTH = "health"
    FINANCE = "finance"
    OTHER = "other"

    @classmethod
    def from_name(cls, raw: Category | str) -> Category:
        return _parse_member(cls, raw, "category")


class TaskStatusFilter(StrEnum):
    """Status criterion accepted by filter_by_status."""

    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def from_name(cls, raw: TaskStatusFilter | str) -> TaskStatusFilter:
        return _parse_member(cls, raw, "status")


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


@dataclass(slots=True)
class Task:
    """
    A single tracked task.

    Every mutator below touches `last_modified_at`, except the tag operations
    when they turn out to be no-ops (duplicate add, absent remove).

    Not safe for concurrent mutation from several threads without external locking.
    """

    id: int
    title: str
    description: str
    due_date: date
    priority: Priority
    category: Category
    created_at: datetime
    last_modified_at: datetime

    completed: bool = False
    completed_at: datetime | None = None
    tags: list[str] = field(default_factory=list)
    estimated_hours: int = 0

    def __post_init__(self) -> None:
        if self.completed != (self.completed_at is not None):
            raise ValidationError(
                f"Task {self.id}: completed={self.completed} disagrees with completed_at={self.completed_at}"
            )
        self.estimated_hours = max(0, int(self.estimated_hours))
        clean: list[str] = []
        for t in self.tags:
            n = normalize_tag(t)
            if n and n not in clean:
                clean.append(n)
        self.tags = clean

    @classmethod
    def create(
        cls,
        id: int,
        title: str,
        description: str,
        due_date: date,
        priority: Priority | str,
        category: Category | str,
    ) -> Task:
        if not title or not title.strip():
            raise ValidationError("Title cannot be empty")
        ts = clock.now()
        return cls(
            id=id,
            title=title.strip(),
            description=description,
            due_date=due_date,
            priority=Priority.from_name(priority),
            category=Category.from_name(category),
            created_at=ts,
            last_modified_at=ts,
        )

    # ---- mutators ----

    def _touch(self) -> None:
        self.last_modified_at = clock.now()

    def set_title(self, title: str) -> None:
        self.title = title
        self._touch()

    def set_description(self, description: str) -> None:
        self.description = description
        self._touch()

    def set_due_date(self, due_date: date) -> None:
        self.due_date = due_date
        self._touch()

    def set_priority(self, priority: Priority | str) -> None:
        self.priority = Priority.from_name(priority)
        self._touch()

    def set_category(self, category: Category | str) -> None:
        self.category = Category.from_name(category)
        self._touch()

    def set_estimated_hours(self, hours: int) -> None:
        self.estimated_hours = max(0, int(hours))
        self._touch()

    def mark_complete(self) -> None:
        ts = clock.now()
        self.completed = True
        self.completed_at = ts
        self.last_modified_at = ts

    def mark_incomplete(self) -> None:
        self.completed = False
        self.completed_at = None
        self._touch()

    def add_tag(self, tag: str) -> bool:
        """Add a normalized tag. Returns False (and leaves the timestamp alone) for duplicates."""
        norm = normalize_tag(tag)
        if not norm:
            raise ValidationError("Tag cannot be empty")
        if norm in self.tags:
            return False
        self.tags.append(norm)
        self._touch()
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove a normalized tag. Absent tags are a no-op without a timestamp change."""
        norm = normalize_tag(tag)
        if norm not in self.tags:
            return False
        self.tags.remove(norm)
        self._touch()
        return True

    def has_tag(self, tag: str) -> bool:
        return normalize_tag(tag) in self.tags

    # ---- derived ----

    def is_overdue(self, today: date | None = None) -> bool:
        today = today or clock.today()
        return not self.completed and self.due_date < today

    def days_until_due(self, today: date | None = None) -> int:
        today = today or clock.today()
        return (self.due_date - today).days
