"""Calendar index — which days have a daily note, and where it lives."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import date
    from pathlib import Path

    from marknote.notes.models import Note

logger = logging.getLogger(__name__)

_WEEKS = calendar.Calendar(firstweekday=calendar.MONDAY)


@dataclass(frozen=True)
class CalendarIndex:
    """Immutable date → daily-note path mapping."""

    days: Mapping[date, Path]

    @classmethod
    def build(cls, notes: Iterable[Note], daily_folder: str = "daily-notes") -> CalendarIndex:
        """Index every note whose filename stem is ``YYYY-MM-DD``.

        If several files claim one date, the one inside *daily_folder*
        wins, then the lexicographically smallest path.
        """
        days: dict[date, Path] = {}
        for note in notes:
            day = note.day
            if day is None:
                continue
            current = days.get(day)
            if current is None:
                days[day] = note.path
                continue
            winner = min(current, note.path, key=lambda p: (_rank(p, daily_folder), str(p)))
            logger.warning(
                "Two daily notes for %s: %s and %s, using %s", day, current, note.path, winner
            )
            days[day] = winner
        return cls(MappingProxyType(days))

    @classmethod
    def empty(cls) -> CalendarIndex:
        return cls(MappingProxyType({}))

    def dates_with_notes(self, month: int, year: int) -> set[date]:
        """Days of the given month that have a daily note."""
        return {d for d in self.days if d.year == year and d.month == month}

    def resolve_day(self, day: date) -> Path | None:
        """Path of the daily note for *day*, if one exists."""
        return self.days.get(day)


def _rank(path: Path, daily_folder: str) -> int:
    return 0 if daily_folder in path.parent.parts else 1


def month_grid(year: int, month: int) -> list[list[date | None]]:
    """Weeks of the month (Monday first); days outside the month are None."""
    return [
        [d if d.month == month else None for d in week]
        for week in _WEEKS.monthdatescalendar(year, month)
    ]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pointer by *delta* months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
