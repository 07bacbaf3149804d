"""Tests for the renderer's read-only snapshot."""

from __future__ import annotations

import dataclasses
import json
from datetime import date

import pytest

from conftest import press
from marknote.app.snapshot import take_snapshot
from marknote.app.state import Mode, View


class TestSnapshot:
    def test_note_rows_and_editor(self, make_state) -> None:
        state = make_state({"hello.md": "---\ntags: [greeting]\n---\n# Hello\nworld\n"})
        snap = take_snapshot(state)
        assert snap.view is View.NOTE_LIST
        assert [(r.title, r.tags) for r in snap.notes] == [("Hello", ("greeting",))]
        assert snap.editor is None

        press(state, "enter", "i", "!")
        snap = take_snapshot(state)
        assert snap.mode is Mode.INSERT
        assert snap.editor is not None
        assert snap.editor.dirty
        assert snap.editor.text.endswith("world\n!")
        assert (snap.editor.cursor_row, snap.editor.cursor_col) == (5, 1)
        assert snap.dirty
        assert snap.notes[0].dirty

    def test_is_frozen(self, make_state) -> None:
        snap = take_snapshot(make_state())
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.status = "changed"  # type: ignore[misc]

    def test_task_rows(self, make_state) -> None:
        state = make_state(
            tasks_json=json.dumps(
                [
                    {
                        "id": 1,
                        "description": "parent",
                        "due_date": "2024-01-01",
                        "sub_tasks": [{"id": 2, "description": "child", "completed": True}],
                    }
                ]
            )
        )
        rows = take_snapshot(state).tasks
        assert [(r.depth, r.id, r.overdue, r.done) for r in rows] == [
            (0, 1, True, False),
            (1, 2, False, True),
        ]
        assert rows[0].due == "2024-01-01"
        assert rows[0].priority == "medium"

    def test_calendar_cells(self, make_state) -> None:
        state = make_state({"daily-notes/2024-01-03.md": "# Wed\n"})
        cal = take_snapshot(state).calendar
        assert (cal.year, cal.month) == (2024, 1)
        cells = {c.day: c for week in cal.weeks for c in week if c is not None}
        assert len(cells) == 31
        assert cells[3].has_note
        assert cells[15].is_today and cells[15].is_selected
        assert not cells[16].has_note

    def test_pending_prompt_replaces_status(self, make_state) -> None:
        state = make_state({"a.md": "# A\n"})
        press(state, "d")
        snap = take_snapshot(state)
        assert snap.pending
        assert snap.status == "Delete 'A'? (y/n)"

    def test_prompt_fields(self, make_state) -> None:
        state = make_state()
        press(state, "a", "x")
        snap = take_snapshot(state)
        assert snap.prompt_label == "New note title: "
        assert snap.prompt_text == "x"
        assert state.today == date(2024, 1, 15)
