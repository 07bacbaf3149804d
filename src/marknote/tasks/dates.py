"""Due-date input parsing for the task prompt."""

from __future__ import annotations

from datetime import date, datetime, timedelta

_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%Y/%m/%d")


def parse_due_date(text: str, today: date) -> date | None:
    """Parse a due date typed by the user.

    Accepts ISO dates, ``d/m/Y``, and the keywords ``today``, ``tomorrow``
    and ``next week``. Empty input means "no due date" and returns None.
    Raises ValueError for anything else.
    """
    lower = text.strip().lower()
    if not lower:
        return None
    if lower == "today":
        return today
    if lower == "tomorrow":
        return today + timedelta(days=1)
    if lower == "next week":
        return today + timedelta(days=7 - today.weekday())

    for fmt in _FORMATS:
        try:
            return datetime.strptime(lower, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Not a date: {text.strip()}")
