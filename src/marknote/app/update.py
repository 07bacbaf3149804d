"""The state machine — the only code that mutates ``AppState``.

``update(state, message)`` is total: every message is handled for every
state, and combinations that mean nothing (e.g. ``InsertChar`` in Normal
mode) leave the state unchanged. Store errors never escape; they become a
status message and the failed operation has no effect.

Side effects are synchronous: saving a note or the task file happens
inside ``update`` before it returns, and every store mutation is followed
by a rebuild of the derived indices.
"""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from marknote.app import messages as m
from marknote.app.editor import EditBuffer
from marknote.app.keymap import translate
from marknote.app.state import (
    Focus,
    Mode,
    PendingAction,
    Prompt,
    PromptKind,
    View,
    clamp_selection,
    rebuild_indices,
)
from marknote.errors import IoFailure, MarknoteError
from marknote.index.calendar import shift_month
from marknote.notes.frontmatter import parse_note_text, set_tags
from marknote.notes.security import PathTraversalError
from marknote.tasks.dates import parse_due_date
from marknote.tasks.models import Task, TaskPatch

if TYPE_CHECKING:
    from collections.abc import Callable

    from marknote.app.state import AppState
    from marknote.notes.models import Note

logger = logging.getLogger(__name__)

DAILY_TEMPLATE = """\
---
tags: [daily]
---

# {date_display}

"""

# Events that are not user input and so never answer a confirmation
_BACKGROUND = (m.Tick, m.DiskChanged)


def update(state: AppState, message: m.Message) -> AppState:
    """Apply *message* to *state* and return it."""
    if isinstance(message, m.KeyPress):
        translated = translate(state, message.key)
        if translated is None:
            if state.pending is not None:
                _cancel_pending(state)
            return state
        message = translated

    if state.pending is not None and not isinstance(message, _BACKGROUND):
        pending = state.pending
        if _confirms(pending, message):
            state.pending = None
            _guarded(state, _execute_pending, pending)
        else:
            _cancel_pending(state)
        return state

    handler = _HANDLERS.get(type(message))
    if handler is None:
        logger.debug("Ignoring unhandled message %r", message)
        return state
    _guarded(state, handler, message)
    return state


def _guarded(state: AppState, fn: Callable[[AppState, object], None], arg: object) -> None:
    try:
        fn(state, arg)
    except IoFailure as e:
        logger.warning("%s", e)
        state.status = f"Error: {e}"
    except (MarknoteError, PathTraversalError) as e:
        logger.info("%s", e)
        state.status = str(e)


# ---------------------------------------------------------------------------
# Confirmation
# ---------------------------------------------------------------------------


def _confirms(pending: PendingAction, message: m.Message) -> bool:
    if isinstance(message, m.Confirm):
        return True
    repeats = {
        "delete_note": m.DeleteNote,
        "delete_task": m.DeleteTask,
        "quit": m.Quit,
    }
    return isinstance(message, repeats[pending.kind])


def _cancel_pending(state: AppState) -> None:
    state.pending = None
    state.status = "Cancelled."


def _execute_pending(state: AppState, pending: object) -> None:
    assert isinstance(pending, PendingAction)
    if pending.kind == "quit":
        state.running = False
        return

    if pending.kind == "delete_note":
        assert isinstance(pending.target, Path)
        note = state.notes.delete(pending.target)
        state.buffers.pop(note.path, None)
        if state.active_note == note.path:
            state.active_note = None
            if state.view is View.EDITOR:
                state.view = View.NOTE_LIST
            state.mode = Mode.NORMAL
        rebuild_indices(state)
        state.status = f"'{note.title}' deleted."
        return

    assert isinstance(pending.target, int)
    task = state.tasks.delete(pending.target)
    _after_task_change(state)
    if state.status.startswith("Error"):
        return
    state.status = f"'{task.description}' deleted."


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


def _move_vertical(state: AppState, step: int) -> None:
    if state.mode is Mode.INSERT or (state.mode is Mode.NORMAL and state.view is View.EDITOR):
        buf = _active_buffer(state)
        if buf is not None:
            buf.move_up() if step < 0 else buf.move_down()
        return
    if state.mode is not Mode.NORMAL:
        return

    if state.view is View.NOTE_LIST:
        if state.focus is Focus.TAGS:
            state.tag_index = _wrap(state.tag_index + step, len(state.tags))
        else:
            state.note_index = _wrap(state.note_index + step, len(state.visible_notes()))
    elif state.view is View.TASKS:
        state.task_index = _wrap(state.task_index + step, len(state.visible_tasks()))
    elif state.view is View.CALENDAR:
        _select_day(state, _selected_day(state) + timedelta(days=7 * step))


def _move_horizontal(state: AppState, step: int) -> None:
    if state.mode is Mode.INSERT or (state.mode is Mode.NORMAL and state.view is View.EDITOR):
        buf = _active_buffer(state)
        if buf is not None:
            buf.move_left() if step < 0 else buf.move_right()
        return
    if state.mode is Mode.NORMAL and state.view is View.CALENDAR:
        _select_day(state, _selected_day(state) + timedelta(days=step))


def _move_up(state: AppState, _: object) -> None:
    _move_vertical(state, -1)


def _move_down(state: AppState, _: object) -> None:
    _move_vertical(state, 1)


def _move_left(state: AppState, _: object) -> None:
    _move_horizontal(state, -1)


def _move_right(state: AppState, _: object) -> None:
    _move_horizontal(state, 1)


def _open(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL:
        return
    if state.view is View.NOTE_LIST:
        if state.focus is Focus.TAGS:
            _toggle_tag_filter(state)
            return
        note = state.selected_note()
        if note is not None:
            _open_note(state, note)
    elif state.view is View.CALENDAR:
        _open_day(state, _selected_day(state))


def _switch_view(state: AppState, message: object) -> None:
    assert isinstance(message, m.SwitchView)
    if state.mode is not Mode.NORMAL:
        return
    target = message.view
    if target is View.HELP:
        _toggle_help(state, message)
        return
    if target is View.SEARCH:
        _enter_search(state, message)
        return
    if target is View.EDITOR:
        note = state.current_note()
        if note is not None:
            _open_note(state, note)
        return
    _leave_view(state)
    state.view = target
    state.previous_view = None


def _leave_view(state: AppState) -> None:
    """Reset view-local selection when leaving the editor; buffers stay."""
    if state.view is View.EDITOR:
        if state.active_note is not None:
            visible = [n.path for n in state.visible_notes()]
            if state.active_note in visible:
                state.note_index = visible.index(state.active_note)
        state.active_note = None
        state.focus = Focus.NOTES


def _toggle_help(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL:
        return
    if state.view is View.HELP:
        state.view = state.previous_view or View.NOTE_LIST
        state.previous_view = None
    else:
        state.previous_view = state.view
        state.view = View.HELP


def _toggle_focus(state: AppState, _: object) -> None:
    if state.mode is Mode.NORMAL and state.view is View.NOTE_LIST:
        state.focus = Focus.TAGS if state.focus is Focus.NOTES else Focus.NOTES


def _toggle_tag_filter(state: AppState) -> None:
    if not state.tags:
        return
    tag = state.tags[min(state.tag_index, len(state.tags) - 1)]
    state.active_tag = None if state.active_tag == tag else tag
    state.note_index = 0
    state.status = f"Filtering by #{tag}" if state.active_tag else "Tag filter cleared."


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _enter_insert(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL or state.view is not View.EDITOR:
        return
    buf = _active_buffer(state)
    if buf is None:
        return
    buf.move_end()
    state.mode = Mode.INSERT
    state.status = "-- INSERT --"


def _enter_command(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL:
        return
    state.mode = Mode.COMMAND
    state.command_line = ""
    state.status = ":"


def _enter_search(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL:
        return
    _leave_view(state)
    state.mode = Mode.SEARCH
    state.view = View.SEARCH
    state.previous_view = None
    _set_query(state, "")
    state.status = "/"


def _set_query(state: AppState, query: str) -> None:
    state.query = query
    state.results = state.search.search(query)
    state.note_index = 0
    state.task_index = 0
    clamp_selection(state)


def _insert_char(state: AppState, message: object) -> None:
    assert isinstance(message, m.InsertChar)
    if state.mode is Mode.INSERT:
        buf = _active_buffer(state)
        if buf is not None:
            buf.insert(message.char)
    elif state.mode is Mode.COMMAND:
        state.command_line += message.char
        state.status = f":{state.command_line}"
    elif state.mode is Mode.SEARCH:
        _set_query(state, state.query + message.char)
        state.status = f"/{state.query}"
    elif state.mode is Mode.PROMPT and state.prompt is not None:
        state.prompt = Prompt(state.prompt.kind, state.prompt.text + message.char, state.prompt.target)


def _backspace(state: AppState, _: object) -> None:
    if state.mode is Mode.INSERT:
        buf = _active_buffer(state)
        if buf is not None:
            buf.backspace()
    elif state.mode is Mode.COMMAND:
        if not state.command_line:
            _cancel(state, None)
            return
        state.command_line = state.command_line[:-1]
        state.status = f":{state.command_line}"
    elif state.mode is Mode.SEARCH:
        _set_query(state, state.query[:-1])
        state.status = f"/{state.query}"
    elif state.mode is Mode.PROMPT and state.prompt is not None:
        state.prompt = Prompt(state.prompt.kind, state.prompt.text[:-1], state.prompt.target)


def _new_line(state: AppState, _: object) -> None:
    if state.mode is Mode.INSERT:
        buf = _active_buffer(state)
        if buf is not None:
            buf.insert("\n")


def _submit(state: AppState, _: object) -> None:
    if state.mode is Mode.COMMAND:
        line = state.command_line
        state.command_line = ""
        state.mode = Mode.NORMAL
        state.status = ""
        _command_submit(state, m.CommandSubmit(line))
    elif state.mode is Mode.SEARCH:
        state.mode = Mode.NORMAL
        state.view = View.NOTE_LIST
        state.focus = Focus.NOTES
        state.note_index = 0
        if state.query:
            state.status = (
                f"/{state.query}: {len(state.results.notes)} note(s), "
                f"{len(state.results.tasks)} task(s)"
            )
        else:
            state.status = ""
    elif state.mode is Mode.PROMPT and state.prompt is not None:
        _submit_prompt(state, state.prompt)


def _cancel(state: AppState, _: object) -> None:
    if state.mode is Mode.INSERT:
        state.mode = Mode.NORMAL
        state.status = ""
    elif state.mode is Mode.COMMAND:
        state.mode = Mode.NORMAL
        state.command_line = ""
        state.status = ""
    elif state.mode is Mode.SEARCH:
        state.mode = Mode.NORMAL
        state.view = View.NOTE_LIST
        _set_query(state, "")
        state.status = ""
    elif state.mode is Mode.PROMPT:
        state.mode = Mode.NORMAL
        state.prompt = None
        state.status = ""
    elif state.view is View.EDITOR:
        _leave_view(state)
        state.view = View.NOTE_LIST
    elif state.view is View.HELP:
        _toggle_help(state, None)
    elif state.query or state.active_tag is not None:
        state.active_tag = None
        _set_query(state, "")
        state.status = "Filter cleared."


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _command_submit(state: AppState, message: object) -> None:
    assert isinstance(message, m.CommandSubmit)
    line = message.command.strip().removeprefix(":").strip()
    name, _, arg = line.partition(" ")
    arg = arg.strip()

    if not name:
        return
    if name in ("w", "write"):
        _save_all(state)
    elif name in ("q", "quit"):
        _quit(state, None)
    elif name in ("q!", "quit!"):
        state.running = False
    elif name in ("wq", "x"):
        if _save_all(state):
            state.running = False
    elif name == "new":
        if not arg:
            state.status = "Usage: :new <title>"
            return
        _create_note(state, arg)
    elif name == "today":
        _go_today(state, None)
        _open_day(state, state.today)
    elif name == "help":
        _toggle_help(state, None)
    else:
        state.status = f"Not a command: {line}"


def _save(state: AppState, _: object) -> None:
    _save_all(state)


def _save_all(state: AppState) -> bool:
    """Persist every dirty buffer and the task file. True if nothing failed."""
    dirty = state.dirty_paths()
    if not dirty and not state.tasks.dirty:
        state.status = "No changes to save."
        return True

    failures: list[str] = []
    saved = 0
    for path in dirty:
        buf = state.buffers[path]
        try:
            if path in state.notes:
                state.notes.update_content(path, buf.text)
            else:
                state.notes.create(path, buf.text)
        except MarknoteError as e:
            failures.append(str(e))
            continue
        saved += 1
    if state.tasks.dirty:
        try:
            state.tasks.save()
        except IoFailure as e:
            failures.append(str(e))

    # Clean buffers other than the open one are no longer needed
    for path in list(state.buffers):
        if path != state.active_note and path not in state.dirty_paths():
            del state.buffers[path]
    rebuild_indices(state)

    if failures:
        state.status = "Error saving: " + "; ".join(failures)
        return False
    state.status = f"Saved {saved} note(s)." if saved else "Tasks saved."
    return True


def _quit(state: AppState, _: object) -> None:
    if state.mode is not Mode.NORMAL:
        return
    if state.dirty:
        prompt = "You have unsaved changes. Quit without saving? (y/n)"
        state.pending = PendingAction("quit", None, prompt)
        state.status = prompt
        return
    state.running = False


def _force_quit(state: AppState, _: object) -> None:
    state.running = False


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def _open_note(state: AppState, note: Note) -> None:
    if note.path not in state.buffers:
        state.buffers[note.path] = EditBuffer(note.content, cursor=0)
    state.active_note = note.path
    state.view = View.EDITOR
    state.previous_view = None
    state.focus = Focus.NOTES
    state.status = ""


def _active_buffer(state: AppState) -> EditBuffer | None:
    path = state.active_note
    if path is None:
        return None
    buf = state.buffers.get(path)
    if buf is None and path in state.notes:
        buf = state.buffers[path] = EditBuffer(state.notes.get(path).content)
    return buf


def slugify(title: str) -> str:
    """Filename stem for a note title."""
    slug = re.sub(r"[^\w\s-]", "", title).strip().lower()
    slug = re.sub(r"[\s_]+", "-", slug)[:60].strip("-")
    return slug or "untitled"


def _create_note(state: AppState, title: str) -> None:
    note = state.notes.create(Path(f"{slugify(title)}.md"), f"# {title}\n\n")
    rebuild_indices(state)
    _open_note(state, note)
    _active_buffer(state).move_end()  # type: ignore[union-attr]
    state.mode = Mode.INSERT
    state.status = "-- INSERT --"


def _open_day(state: AppState, day: date) -> None:
    path = state.calendar.resolve_day(day)
    if path is None:
        content = DAILY_TEMPLATE.format(date_display=day.strftime("%A, %B %d, %Y"))
        note = state.notes.create(Path(state.daily_folder) / f"{day.isoformat()}.md", content)
        rebuild_indices(state)
        state.status = f"Created daily note {note.path}"
    else:
        note = state.notes.get(path)
    _select_day(state, day)
    _open_note(state, note)


def _new_note(state: AppState, _: object) -> None:
    if state.mode is Mode.NORMAL:
        _start_prompt(state, Prompt(PromptKind.NEW_NOTE))


def _rename_note(state: AppState, _: object) -> None:
    note = state.current_note()
    if state.mode is Mode.NORMAL and note is not None:
        _start_prompt(state, Prompt(PromptKind.RENAME_NOTE, note.path.stem, note.path))


def _delete_note(state: AppState, _: object) -> None:
    note = state.current_note()
    if state.mode is not Mode.NORMAL or note is None:
        return
    prompt = f"Delete '{note.title}'? (y/n)"
    state.pending = PendingAction("delete_note", note.path, prompt)
    state.status = prompt


def _add_tag(state: AppState, _: object) -> None:
    note = state.current_note()
    if state.mode is Mode.NORMAL and note is not None:
        _start_prompt(state, Prompt(PromptKind.ADD_TAG, "", note.path))


def _apply_rename(state: AppState, old: Path, name: str) -> None:
    filename = name if name.endswith(".md") else f"{name}.md"
    note = state.notes.rename(old, old.parent / filename)
    if old in state.buffers:
        state.buffers[note.path] = state.buffers.pop(old)
    if state.active_note == old:
        state.active_note = note.path
    rebuild_indices(state)
    state.status = f"Renamed to {note.path}"


def _apply_tag(state: AppState, path: Path, tag: str) -> None:
    buf = state.buffers.get(path)
    if buf is not None and path in state.dirty_paths():
        parsed = parse_note_text(buf.text, path.stem)
        if tag not in parsed.tags:
            buf.text = set_tags(buf.text, [*parsed.tags, tag])
            buf.cursor = min(buf.cursor, len(buf.text))
        state.status = f"Tagged with #{tag} (unsaved)"
        return

    note = state.notes.add_tag(path, tag)
    if buf is not None:
        buf.text = note.content
        buf.cursor = min(buf.cursor, len(buf.text))
    rebuild_indices(state)
    state.status = f"Tagged '{note.title}' with #{tag}"


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def _selected_day(state: AppState) -> date:
    return state.selected_day or state.today


def _select_day(state: AppState, day: date) -> None:
    state.selected_day = day
    state.calendar_year, state.calendar_month = day.year, day.month


def _shift_displayed_month(state: AppState, delta: int) -> None:
    if state.mode is not Mode.NORMAL or state.view is not View.CALENDAR:
        return
    year, month = shift_month(state.calendar_year, state.calendar_month, delta)
    state.calendar_year, state.calendar_month = year, month
    day = _selected_day(state).day
    while True:
        try:
            state.selected_day = date(year, month, day)
            break
        except ValueError:
            day -= 1


def _prev_month(state: AppState, _: object) -> None:
    _shift_displayed_month(state, -1)


def _next_month(state: AppState, _: object) -> None:
    _shift_displayed_month(state, 1)


def _go_today(state: AppState, _: object) -> None:
    _select_day(state, state.today)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def _task_prompt(kind: PromptKind) -> Callable[[AppState, object], None]:
    def start(state: AppState, _: object) -> None:
        if state.mode is not Mode.NORMAL or state.view is not View.TASKS:
            return
        if kind is PromptKind.NEW_TASK:
            _start_prompt(state, Prompt(kind))
            return
        task = state.selected_task()
        if task is None:
            return
        text = {
            PromptKind.EDIT_TASK: task.description,
            PromptKind.SET_PROJECT: task.project or "",
            PromptKind.SET_DUE: task.due_date.isoformat() if task.due_date else "",
        }.get(kind, "")
        _start_prompt(state, Prompt(kind, text, task.id))

    return start


def _toggle_task(state: AppState, _: object) -> None:
    task = state.selected_task()
    if state.mode is Mode.NORMAL and state.view is View.TASKS and task is not None:
        updated = state.tasks.toggle_complete(task.id)
        _after_task_change(state, select=updated.id)


def _cycle_priority(state: AppState, _: object) -> None:
    task = state.selected_task()
    if state.mode is Mode.NORMAL and state.view is View.TASKS and task is not None:
        updated = state.tasks.cycle_priority(task.id)
        _after_task_change(state, select=updated.id)
        if not state.status.startswith("Error"):
            state.status = f"Priority: {updated.priority.value}"


def _delete_task(state: AppState, _: object) -> None:
    task = state.selected_task()
    if state.mode is not Mode.NORMAL or state.view is not View.TASKS or task is None:
        return
    subs = len(task.walk()) - 1
    extra = f" and {subs} sub-task(s)" if subs else ""
    prompt = f"Delete '{task.description}'{extra}? (y/n)"
    state.pending = PendingAction("delete_task", task.id, prompt)
    state.status = prompt


def _after_task_change(state: AppState, select: int | None = None) -> None:
    """Auto-save tasks, refresh indices and optionally select a task."""
    state.status = ""
    try:
        state.tasks.save()
    except IoFailure as e:
        state.status = f"Error auto-saving tasks: {e}"
    rebuild_indices(state)
    if select is not None:
        ids = [t.id for _, t in state.visible_tasks()]
        if select in ids:
            state.task_index = ids.index(select)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def _start_prompt(state: AppState, prompt: Prompt) -> None:
    state.prompt = prompt
    state.mode = Mode.PROMPT
    state.status = ""


def _submit_prompt(state: AppState, prompt: Prompt) -> None:
    """Run the prompt's action; on error the prompt stays open for correction."""
    text = prompt.text.strip()
    kind = prompt.kind

    if not text and kind not in (PromptKind.SET_PROJECT, PromptKind.SET_DUE):
        state.status = "Input cannot be empty"
        return

    if kind is PromptKind.NEW_NOTE:
        _create_note(state, text)
        state.prompt = None
        return

    if kind is PromptKind.RENAME_NOTE:
        assert isinstance(prompt.target, Path)
        _apply_rename(state, prompt.target, text)
    elif kind is PromptKind.ADD_TAG:
        assert isinstance(prompt.target, Path)
        _apply_tag(state, prompt.target, text.lstrip("#"))
    elif kind is PromptKind.NEW_TASK:
        task = state.tasks.add(Task(id=0, description=text))
        _after_task_change(state, select=task.id)
    elif kind is PromptKind.NEW_SUBTASK:
        assert isinstance(prompt.target, int)
        task = state.tasks.add(Task(id=0, description=text), parent_id=prompt.target)
        _after_task_change(state, select=task.id)
    else:
        assert isinstance(prompt.target, int)
        if kind is PromptKind.EDIT_TASK:
            patch = TaskPatch(description=text)
        elif kind is PromptKind.SET_PROJECT:
            patch = TaskPatch(project=text or None)
        else:
            try:
                patch = TaskPatch(due_date=parse_due_date(text, state.today))
            except ValueError as e:
                state.status = str(e)
                return
        task = state.tasks.edit(prompt.target, patch)
        _after_task_change(state, select=task.id)

    state.prompt = None
    state.mode = Mode.NORMAL


# ---------------------------------------------------------------------------
# Background events
# ---------------------------------------------------------------------------


def _tick(state: AppState, message: object) -> None:
    assert isinstance(message, m.Tick)
    state.today = message.now.date()


def _disk_changed(state: AppState, message: object) -> None:
    assert isinstance(message, m.DiskChanged)
    key = state.notes.key(message.path)
    before = state.notes.get(key).content if key in state.notes else None

    if key in state.buffers and key in state.dirty_paths():
        state.status = f"{key} changed on disk; your unsaved edits are kept"
        return

    note = state.notes.refresh(key)
    buf = state.buffers.get(key)
    if note is None:
        state.buffers.pop(key, None)
        if state.active_note == key:
            state.active_note = None
            state.view = View.NOTE_LIST
            state.mode = Mode.NORMAL
    elif buf is not None:
        buf.text = note.content
        buf.cursor = min(buf.cursor, len(buf.text))
    rebuild_indices(state)

    after = note.content if note is not None else None
    if before != after:
        if note is None:
            state.status = f"{key} was removed on disk"
        else:
            state.status = f"Reloaded {key} from disk"


def _wrap(index: int, length: int) -> int:
    if length == 0:
        return 0
    return index % length


_HANDLERS: dict[type, Callable[[AppState, object], None]] = {
    m.MoveUp: _move_up,
    m.MoveDown: _move_down,
    m.MoveLeft: _move_left,
    m.MoveRight: _move_right,
    m.Open: _open,
    m.SwitchView: _switch_view,
    m.ToggleHelp: _toggle_help,
    m.ToggleFocus: _toggle_focus,
    m.EnterInsert: _enter_insert,
    m.EnterCommand: _enter_command,
    m.EnterSearch: _enter_search,
    m.InsertChar: _insert_char,
    m.Backspace: _backspace,
    m.NewLine: _new_line,
    m.Submit: _submit,
    m.Cancel: _cancel,
    m.CommandSubmit: _command_submit,
    m.Save: _save,
    m.Quit: _quit,
    m.ForceQuit: _force_quit,
    m.NewNote: _new_note,
    m.RenameNote: _rename_note,
    m.DeleteNote: _delete_note,
    m.AddTag: _add_tag,
    m.PrevMonth: _prev_month,
    m.NextMonth: _next_month,
    m.GoToday: _go_today,
    m.NewTask: _task_prompt(PromptKind.NEW_TASK),
    m.NewSubTask: _task_prompt(PromptKind.NEW_SUBTASK),
    m.EditTask: _task_prompt(PromptKind.EDIT_TASK),
    m.SetProject: _task_prompt(PromptKind.SET_PROJECT),
    m.SetDue: _task_prompt(PromptKind.SET_DUE),
    m.ToggleTask: _toggle_task,
    m.CyclePriority: _cycle_priority,
    m.DeleteTask: _delete_task,
    m.Tick: _tick,
    m.DiskChanged: _disk_changed,
}
