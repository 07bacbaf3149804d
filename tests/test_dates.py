"""Tests for due-date parsing."""

from __future__ import annotations

from datetime import date

import pytest

from marknote.tasks.dates import parse_due_date

TODAY = date(2024, 1, 17)  # a Wednesday


class TestParseDueDate:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", None),
            ("   ", None),
            ("today", TODAY),
            ("Tomorrow", date(2024, 1, 18)),
            ("next week", date(2024, 1, 22)),
            ("2024-03-01", date(2024, 3, 1)),
            ("01/03/2024", date(2024, 3, 1)),
        ],
    )
    def test_accepted(self, text: str, expected: date | None) -> None:
        assert parse_due_date(text, TODAY) == expected

    @pytest.mark.parametrize("text", ["someday", "2024-13-01", "32/01/2024"])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ValueError, match="Not a date"):
            parse_due_date(text, TODAY)
