"""Data models for tasks."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 — Pydantic needs these at runtime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class Priority(StrEnum):
    """Task priority, ordered Low < Medium < High."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank

    def next(self) -> Priority:
        """The next priority in the Low → Medium → High → Low cycle."""
        members = list(Priority)
        return members[(members.index(self) + 1) % len(members)]


_RANKS = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


def _coerce_priority(value: object) -> object:
    # Older task files wrote "Low"/"Medium"/"High"
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Task(BaseModel):
    """A to-do item. Sub-tasks are owned exclusively by their parent."""

    id: int
    description: str
    project: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    completed: bool = False
    created_at: datetime | None = None
    sub_tasks: list[Task] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def lower_priority(cls, v: object) -> object:
        return _coerce_priority(v)

    def is_overdue(self, today: date) -> bool:
        return not self.completed and self.due_date is not None and self.due_date < today

    def walk(self) -> list[Task]:
        """This task followed by all of its descendants, pre-order."""
        out = [self]
        for sub in self.sub_tasks:
            out.extend(sub.walk())
        return out


class TaskPatch(BaseModel):
    """Field changes for ``TaskStore.edit``; only explicitly set fields apply."""

    description: str | None = None
    project: str | None = None
    priority: Priority | None = None
    due_date: date | None = None
    completed: bool | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def lower_priority(cls, v: object) -> object:
        return _coerce_priority(v)

    def changes(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in self.model_fields_set}
