"""Data models for notes."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from pathlib import Path  # noqa: TC003 — Pydantic needs Path at runtime

from pydantic import BaseModel, Field

DAILY_STEM_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _now() -> datetime:
    return datetime.now(UTC)


class Note(BaseModel):
    """A Markdown note, keyed by its path relative to the notes directory."""

    path: Path
    title: str
    content: str = ""
    body: str = ""
    tags: list[str] = Field(default_factory=list)
    created: datetime = Field(default_factory=_now)
    modified: datetime = Field(default_factory=_now)

    @property
    def day(self) -> date | None:
        """Calendar date encoded in a daily note's filename, if any."""
        stem = self.path.stem
        if not DAILY_STEM_PATTERN.match(stem):
            return None
        try:
            return date.fromisoformat(stem)
        except ValueError:
            return None

    @property
    def is_daily(self) -> bool:
        return self.day is not None
