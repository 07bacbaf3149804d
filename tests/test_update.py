"""Tests for the state machine, driven through key presses and messages."""

from __future__ import annotations

import json
import os
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from conftest import press, type_text
from marknote.app import messages as m
from marknote.app.state import Focus, Mode, View
from marknote.app.update import slugify, update

if TYPE_CHECKING:
    from marknote.app.state import AppState
    from marknote.config import Settings


def _fail_writes(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args: object, **kwargs: object) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", boom)


def _command(state: AppState, line: str) -> AppState:
    press(state, ":")
    type_text(state, line)
    return press(state, "enter")


@pytest.fixture()
def hello(make_state) -> AppState:
    return make_state({"hello.md": "# Hello\nworld\n"})


class TestInsertMode:
    def test_typing_stays_in_memory_until_write(self, hello: AppState, settings: Settings) -> None:
        on_disk = settings.notes_dir / "hello.md"
        press(hello, "enter")
        assert hello.view is View.EDITOR
        assert hello.active_note == Path("hello.md")

        press(hello, "i")
        assert hello.mode is Mode.INSERT
        press(hello, "x")
        assert hello.buffers[Path("hello.md")].text == "# Hello\nworld\nx"
        assert on_disk.read_text() == "# Hello\nworld\n"

        press(hello, "esc")
        assert hello.mode is Mode.NORMAL
        assert hello.dirty
        assert on_disk.read_text() == "# Hello\nworld\n"

        _command(hello, "w")
        assert on_disk.read_text() == "# Hello\nworld\nx"
        assert not hello.dirty
        assert hello.status == "Saved 1 note(s)."

    def test_enter_and_backspace(self, hello: AppState) -> None:
        press(hello, "enter", "i", "enter", "a", "b", "backspace")
        assert hello.buffers[Path("hello.md")].text == "# Hello\nworld\n\na"

    def test_insert_ignored_outside_editor(self, hello: AppState) -> None:
        update(hello, m.EnterInsert())
        assert hello.mode is Mode.NORMAL
        update(hello, m.InsertChar("z"))
        assert hello.buffers == {}

    def test_leaving_editor_keeps_buffer(self, hello: AppState) -> None:
        press(hello, "enter", "i", "!", "esc", "c")
        assert hello.view is View.CALENDAR
        assert hello.active_note is None
        assert hello.dirty_paths() == [Path("hello.md")]


class TestCommands:
    def test_write_with_nothing_dirty(self, hello: AppState) -> None:
        _command(hello, "w")
        assert hello.status == "No changes to save."
        assert hello.running

    def test_unknown_command(self, hello: AppState) -> None:
        _command(hello, "frobnicate")
        assert hello.status == "Not a command: frobnicate"
        assert hello.mode is Mode.NORMAL

    def test_backspace_on_empty_line_leaves_command_mode(self, hello: AppState) -> None:
        press(hello, ":", "backspace")
        assert hello.mode is Mode.NORMAL

    def test_new_command(self, hello: AppState, settings: Settings) -> None:
        _command(hello, "new Reading List")
        assert (settings.notes_dir / "reading-list.md").read_text() == "# Reading List\n\n"
        assert hello.view is View.EDITOR
        assert hello.mode is Mode.INSERT

    def test_today_command(self, hello: AppState, settings: Settings) -> None:
        _command(hello, "today")
        daily = settings.daily_dir / "2024-01-15.md"
        assert daily.exists()
        assert hello.active_note == Path("daily-notes/2024-01-15.md")

    def test_wq_saves_and_quits(self, hello: AppState, settings: Settings) -> None:
        press(hello, "enter", "i", "x", "esc")
        _command(hello, "wq")
        assert not hello.running
        assert (settings.notes_dir / "hello.md").read_text().endswith("x")

    def test_wq_does_not_quit_when_save_fails(
        self, hello: AppState, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        press(hello, "enter", "i", "x", "esc")
        _fail_writes(monkeypatch)
        _command(hello, "wq")
        assert hello.running
        assert hello.status.startswith("Error saving")
        assert hello.dirty_paths() == [Path("hello.md")]
        assert (settings.notes_dir / "hello.md").read_text() == "# Hello\nworld\n"

    def test_force_quit(self, hello: AppState) -> None:
        press(hello, "enter", "i", "x", "esc")
        _command(hello, "q!")
        assert not hello.running


class TestQuit:
    def test_clean_quit(self, hello: AppState) -> None:
        press(hello, "q")
        assert not hello.running

    def test_unsaved_changes_need_confirmation(self, hello: AppState) -> None:
        press(hello, "enter", "i", "x", "esc", "q")
        assert hello.running
        assert hello.pending is not None
        press(hello, "y")
        assert not hello.running

    def test_repeated_quit_confirms(self, hello: AppState) -> None:
        press(hello, "enter", "i", "x", "esc", "q", "q")
        assert not hello.running

    def test_quit_confirmation_cancelled(self, hello: AppState) -> None:
        press(hello, "enter", "i", "x", "esc", "q", "n")
        assert hello.running
        assert hello.pending is None
        assert hello.status == "Cancelled."

    def test_quit_ignored_in_insert_mode(self, hello: AppState) -> None:
        press(hello, "enter", "i")
        update(hello, m.Quit())
        assert hello.running
        assert hello.mode is Mode.INSERT

    def test_quit_ignored_in_prompt_mode(self, hello: AppState) -> None:
        press(hello, "a")
        assert hello.mode is Mode.PROMPT
        update(hello, m.Quit())
        assert hello.running
        assert hello.mode is Mode.PROMPT

    def test_help_ignored_in_insert_mode(self, hello: AppState) -> None:
        press(hello, "enter", "i")
        update(hello, m.ToggleHelp())
        assert hello.view is View.EDITOR
        assert hello.mode is Mode.INSERT


class TestDeleteConfirmation:
    def test_two_step_delete(self, hello: AppState, settings: Settings) -> None:
        press(hello, "d")
        assert hello.pending is not None
        assert (settings.notes_dir / "hello.md").exists()
        press(hello, "d")
        assert hello.pending is None
        assert not (settings.notes_dir / "hello.md").exists()
        assert "hello.md" not in hello.notes

    def test_confirm_with_y(self, hello: AppState) -> None:
        press(hello, "d", "y")
        assert len(hello.notes) == 0

    def test_intervening_message_cancels(self, hello: AppState) -> None:
        press(hello, "d", "j")
        assert hello.pending is None
        assert hello.status == "Cancelled."
        press(hello, "y")
        assert "hello.md" in hello.notes

    def test_cancel_does_not_execute_the_cancelling_message(self, hello: AppState) -> None:
        press(hello, "d", "c")
        assert hello.view is View.NOTE_LIST
        assert "hello.md" in hello.notes

    def test_tick_keeps_confirmation(self, hello: AppState) -> None:
        press(hello, "d")
        update(hello, m.Tick(datetime(2024, 1, 16, 8, 0)))
        assert hello.pending is not None
        assert hello.today == date(2024, 1, 16)
        press(hello, "y")
        assert len(hello.notes) == 0

    def test_delete_from_editor_closes_it(self, hello: AppState) -> None:
        press(hello, "enter", "d", "y")
        assert hello.view is View.NOTE_LIST
        assert hello.active_note is None
        assert hello.buffers == {}


class TestNotePrompts:
    def test_new_note(self, hello: AppState, settings: Settings) -> None:
        press(hello, "a")
        assert hello.mode is Mode.PROMPT
        type_text(hello, "My Idea")
        press(hello, "enter")
        assert (settings.notes_dir / "my-idea.md").exists()
        assert hello.mode is Mode.INSERT
        assert hello.prompt is None

    def test_new_note_conflict_keeps_prompt(self, hello: AppState) -> None:
        press(hello, "a")
        type_text(hello, "Hello")
        press(hello, "enter")
        assert hello.status == "Already exists: hello.md"
        assert hello.mode is Mode.PROMPT
        press(hello, "esc")
        assert hello.mode is Mode.NORMAL
        assert hello.prompt is None

    def test_empty_input_is_rejected(self, hello: AppState) -> None:
        press(hello, "a", "enter")
        assert hello.status == "Input cannot be empty"
        assert hello.mode is Mode.PROMPT

    def test_rename(self, hello: AppState, settings: Settings) -> None:
        press(hello, "r")
        assert hello.prompt is not None
        assert hello.prompt.text == "hello"
        press(hello, *["backspace"] * 5)
        type_text(hello, "greetings")
        press(hello, "enter")
        assert (settings.notes_dir / "greetings.md").exists()
        assert not (settings.notes_dir / "hello.md").exists()
        assert hello.mode is Mode.NORMAL

    def test_rename_conflict_changes_nothing(self, make_state, settings: Settings) -> None:
        state = make_state({"a.md": "# A\n", "b.md": "# B\n"})
        selected = state.selected_note()
        assert selected is not None
        other = "b" if selected.path.stem == "a" else "a"
        press(state, "r", "backspace")
        type_text(state, other)
        press(state, "enter")
        assert state.status == f"Already exists: {other}.md"
        assert (settings.notes_dir / "a.md").read_text() == "# A\n"
        assert (settings.notes_dir / "b.md").read_text() == "# B\n"
        assert len(state.notes) == 2

    def test_rename_moves_open_buffer(self, hello: AppState) -> None:
        press(hello, "enter", "i", "x", "esc", "r", "backspace")
        press(hello, "enter")
        assert hello.active_note == Path("hell.md")
        assert Path("hell.md") in hello.buffers

    def test_add_tag_persists(self, hello: AppState, settings: Settings) -> None:
        press(hello, "t")
        type_text(hello, "#work")
        press(hello, "enter")
        assert hello.notes.get("hello.md").tags == ["work"]
        assert "work" in (settings.notes_dir / "hello.md").read_text()
        assert hello.tags == ["work"]

    def test_add_tag_to_dirty_buffer_stays_in_memory(
        self, hello: AppState, settings: Settings
    ) -> None:
        press(hello, "enter", "i", "x", "esc", "t")
        type_text(hello, "draft")
        press(hello, "enter")
        assert "draft" in hello.buffers[Path("hello.md")].text
        assert "draft" not in (settings.notes_dir / "hello.md").read_text()
        assert "unsaved" in hello.status


class TestViews:
    def test_switching(self, hello: AppState) -> None:
        press(hello, "c")
        assert hello.view is View.CALENDAR
        press(hello, "T")
        assert hello.view is View.TASKS
        press(hello, "?")
        assert hello.view is View.HELP
        press(hello, "q")
        assert hello.view is View.HELP
        press(hello, "esc")
        assert hello.view is View.TASKS
        press(hello, "n")
        assert hello.view is View.NOTE_LIST

    def test_esc_from_editor(self, hello: AppState) -> None:
        press(hello, "enter", "esc")
        assert hello.view is View.NOTE_LIST
        assert hello.active_note is None

    def test_tag_filter(self, make_state) -> None:
        state = make_state(
            {
                "a.md": "---\ntags: [work]\n---\n# A\n",
                "b.md": "---\ntags: [home]\n---\n# B\n",
            }
        )
        assert state.tags == ["home", "work"]
        press(state, "tab")
        assert state.focus is Focus.TAGS
        press(state, "j", "enter")
        assert state.active_tag == "work"
        assert [n.path for n in state.visible_notes()] == [Path("a.md")]
        press(state, "enter")
        assert state.active_tag is None
        assert len(state.visible_notes()) == 2


class TestSearch:
    def test_incremental_search_and_commit(self, make_state) -> None:
        state = make_state({"rust.md": "# Rust\nownership\n", "tui.md": "# TUI\ncurses\n"})
        press(state, "/")
        assert state.mode is Mode.SEARCH
        assert state.view is View.SEARCH
        type_text(state, "own")
        assert state.results.notes == (Path("rust.md"),)
        press(state, "enter")
        assert state.mode is Mode.NORMAL
        assert state.view is View.NOTE_LIST
        assert [n.path for n in state.visible_notes()] == [Path("rust.md")]
        press(state, "esc")
        assert state.query == ""
        assert len(state.visible_notes()) == 2

    def test_escape_clears_query(self, make_state) -> None:
        state = make_state({"rust.md": "# Rust\n", "tui.md": "# TUI\n"})
        press(state, "/", "r", "u", "esc")
        assert state.query == ""
        assert state.mode is Mode.NORMAL
        assert state.view is View.NOTE_LIST
        assert len(state.visible_notes()) == 2


class TestCalendar:
    def test_navigation(self, hello: AppState) -> None:
        press(hello, "c", "l")
        assert hello.selected_day == date(2024, 1, 16)
        press(hello, "k")
        assert hello.selected_day == date(2024, 1, 9)
        press(hello, ">")
        assert (hello.calendar_year, hello.calendar_month) == (2024, 2)
        press(hello, "h")
        assert hello.selected_day == date(2024, 2, 8)
        press(hello, "t")
        assert hello.selected_day == date(2024, 1, 15)
        assert hello.calendar_month == 1

    def test_week_move_follows_month(self, hello: AppState) -> None:
        press(hello, "c", "j", "j", "j")
        assert hello.selected_day == date(2024, 2, 5)
        assert hello.calendar_month == 2

    def test_open_creates_daily_note(self, hello: AppState, settings: Settings) -> None:
        press(hello, "c", "enter")
        path = settings.daily_dir / "2024-01-15.md"
        assert path.exists()
        assert hello.view is View.EDITOR
        note = hello.notes.get("daily-notes/2024-01-15.md")
        assert note.tags == ["daily"]
        assert hello.calendar.resolve_day(date(2024, 1, 15)) == note.path

    def test_open_existing_daily_note(self, make_state) -> None:
        state = make_state({"daily-notes/2024-01-15.md": "# Monday\n"})
        press(state, "c", "enter")
        assert state.active_note == Path("daily-notes/2024-01-15.md")
        assert len(state.notes) == 1


class TestTasks:
    def _tasks_on_disk(self, settings: Settings) -> list[dict]:
        return json.loads(settings.tasks_path.read_text())

    def test_add_edit_and_delete(self, hello: AppState, settings: Settings) -> None:
        press(hello, "T", "a")
        type_text(hello, "buy milk")
        press(hello, "enter")
        assert [t["description"] for t in self._tasks_on_disk(settings)] == ["buy milk"]

        press(hello, "A")
        type_text(hello, "check fridge")
        press(hello, "enter")
        assert hello.selected_task().description == "check fridge"
        assert self._tasks_on_disk(settings)[0]["sub_tasks"][0]["description"] == "check fridge"

        press(hello, "k", "e", *["backspace"] * 4)
        type_text(hello, "bread")
        press(hello, "enter")
        assert self._tasks_on_disk(settings)[0]["description"] == "buy bread"

        press(hello, "d")
        assert "1 sub-task" in hello.status
        press(hello, "y")
        assert self._tasks_on_disk(settings) == []
        assert len(hello.tasks) == 0

    def test_toggle_priority_project_due(self, hello: AppState, settings: Settings) -> None:
        press(hello, "T", "a")
        type_text(hello, "file taxes")
        press(hello, "enter", " ", "p", "P")
        type_text(hello, "admin")
        press(hello, "enter", "D")
        type_text(hello, "tomorrow")
        press(hello, "enter")
        record = self._tasks_on_disk(settings)[0]
        assert record["completed"] is True
        assert record["priority"] == "high"
        assert record["project"] == "admin"
        assert record["due_date"] == "2024-01-16"

    def test_invalid_due_date_keeps_prompt(self, hello: AppState) -> None:
        press(hello, "T", "a")
        type_text(hello, "x")
        press(hello, "enter", "D")
        type_text(hello, "someday")
        press(hello, "enter")
        assert hello.status == "Not a date: someday"
        assert hello.mode is Mode.PROMPT

    def test_failed_auto_save_can_be_retried(
        self, hello: AppState, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        with monkeypatch.context() as patch:
            _fail_writes(patch)
            press(hello, "T", "a")
            type_text(hello, "later")
            press(hello, "enter")
            assert hello.status.startswith("Error auto-saving tasks")
            assert hello.tasks.dirty
        _command(hello, "w")
        assert hello.status == "Tasks saved."
        assert self._tasks_on_disk(settings)[0]["description"] == "later"

    def test_task_search(self, make_state) -> None:
        state = make_state(
            tasks_json=json.dumps(
                [
                    {"id": 1, "description": "buy milk", "project": "home"},
                    {"id": 2, "description": "write report", "project": "work"},
                ]
            )
        )
        press(state, "/")
        type_text(state, "#work")
        press(state, "enter", "T")
        assert [t.id for _, t in state.visible_tasks()] == [2]


class TestBackgroundEvents:
    def test_external_edit_refreshes_clean_note(self, hello: AppState, settings: Settings) -> None:
        (settings.notes_dir / "hello.md").write_text("# Changed\n")
        update(hello, m.DiskChanged(Path("hello.md"), "modified"))
        assert hello.notes.get("hello.md").title == "Changed"
        assert "Reloaded" in hello.status

    def test_external_edit_keeps_dirty_buffer(self, hello: AppState, settings: Settings) -> None:
        press(hello, "enter", "i", "x", "esc")
        (settings.notes_dir / "hello.md").write_text("# Changed\n")
        update(hello, m.DiskChanged(Path("hello.md"), "modified"))
        assert hello.buffers[Path("hello.md")].text.endswith("x")
        assert "unsaved edits are kept" in hello.status

    def test_external_create_and_delete(self, hello: AppState, settings: Settings) -> None:
        (settings.notes_dir / "new.md").write_text("# New\n")
        update(hello, m.DiskChanged(Path("new.md"), "created"))
        assert "new.md" in hello.notes
        (settings.notes_dir / "new.md").unlink()
        update(hello, m.DiskChanged(Path("new.md"), "deleted"))
        assert "new.md" not in hello.notes

    def test_tick_updates_today_only(self, hello: AppState) -> None:
        status = hello.status
        update(hello, m.Tick(datetime(2024, 2, 1, 0, 0, 1)))
        assert hello.today == date(2024, 2, 1)
        assert hello.status == status


class TestTotality:
    @pytest.mark.parametrize(
        "message",
        [m.Open(), m.RenameNote(), m.DeleteNote(), m.AddTag(), m.ToggleTask(), m.Submit(), m.Backspace()],
    )
    def test_empty_state_ignores_message(self, make_state, message: m.Message) -> None:
        state = make_state()
        update(state, message)
        assert state.pending is None
        assert state.view is View.NOTE_LIST
        assert state.running


class TestSlugify:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [("My Idea", "my-idea"), ("  Rust: ownership!  ", "rust-ownership"), ("???", "untitled")],
    )
    def test_slugify(self, title: str, expected: str) -> None:
        assert slugify(title) == expected
