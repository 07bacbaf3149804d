"""Read-only snapshot of ``AppState`` for the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from marknote.index.calendar import month_grid

if TYPE_CHECKING:
    from datetime import date

    from marknote.app.state import AppState, Focus, Mode, View


@dataclass(frozen=True, slots=True)
class NoteRow:
    title: str
    path: str
    tags: tuple[str, ...]
    modified: str
    dirty: bool


@dataclass(frozen=True, slots=True)
class TaskRow:
    depth: int
    id: int
    description: str
    project: str | None
    priority: str
    due: str | None
    done: bool
    overdue: bool


@dataclass(frozen=True, slots=True)
class EditorView:
    title: str
    path: str
    text: str
    cursor_row: int
    cursor_col: int
    dirty: bool


@dataclass(frozen=True, slots=True)
class DayCell:
    day: int
    has_note: bool
    is_today: bool
    is_selected: bool


@dataclass(frozen=True, slots=True)
class CalendarView:
    year: int
    month: int
    weeks: tuple[tuple[DayCell | None, ...], ...]


@dataclass(frozen=True, slots=True)
class Snapshot:
    view: View
    mode: Mode
    focus: Focus
    status: str
    notes: tuple[NoteRow, ...]
    tasks: tuple[TaskRow, ...]
    note_index: int
    task_index: int
    tags: tuple[str, ...]
    tag_index: int
    active_tag: str | None
    query: str
    command_line: str
    prompt_label: str | None
    prompt_text: str
    pending: bool
    editor: EditorView | None
    calendar: CalendarView
    dirty: bool


def take_snapshot(state: AppState) -> Snapshot:
    """Copy everything the renderer needs out of *state*."""
    dirty_paths = set(state.dirty_paths())
    notes = tuple(
        NoteRow(
            title=n.title,
            path=n.path.as_posix(),
            tags=tuple(n.tags),
            modified=n.modified.astimezone().strftime("%Y-%m-%d %H:%M"),
            dirty=n.path in dirty_paths,
        )
        for n in state.visible_notes()
    )
    tasks = tuple(
        TaskRow(
            depth=depth,
            id=t.id,
            description=t.description,
            project=t.project,
            priority=t.priority.value,
            due=t.due_date.isoformat() if t.due_date else None,
            done=t.completed,
            overdue=t.is_overdue(state.today),
        )
        for depth, t in state.visible_tasks()
    )
    prompt = state.prompt
    if state.pending is not None:
        status = state.pending.prompt
    else:
        status = state.status

    return Snapshot(
        view=state.view,
        mode=state.mode,
        focus=state.focus,
        status=status,
        notes=notes,
        tasks=tasks,
        note_index=state.note_index,
        task_index=state.task_index,
        tags=tuple(state.tags),
        tag_index=state.tag_index,
        active_tag=state.active_tag,
        query=state.query,
        command_line=state.command_line,
        prompt_label=prompt.label if prompt else None,
        prompt_text=prompt.text if prompt else "",
        pending=state.pending is not None,
        editor=_editor_view(state, dirty_paths),
        calendar=_calendar_view(state),
        dirty=state.dirty,
    )


def _editor_view(state: AppState, dirty_paths: set) -> EditorView | None:
    path = state.active_note
    if path is None:
        return None
    buf = state.buffers.get(path)
    if buf is None:
        if path not in state.notes:
            return None
        text, cursor = state.notes.get(path).content, (0, 0)
    else:
        text, cursor = buf.text, buf.position()
    title = state.notes.get(path).title if path in state.notes else path.stem
    return EditorView(
        title=title,
        path=path.as_posix(),
        text=text,
        cursor_row=cursor[0],
        cursor_col=cursor[1],
        dirty=path in dirty_paths,
    )


def _calendar_view(state: AppState) -> CalendarView:
    year, month = state.calendar_year, state.calendar_month
    with_notes = state.calendar.dates_with_notes(month, year)

    def cell(day: date | None) -> DayCell | None:
        if day is None:
            return None
        return DayCell(
            day=day.day,
            has_note=day in with_notes,
            is_today=day == state.today,
            is_selected=day == state.selected_day,
        )

    weeks = tuple(tuple(cell(d) for d in week) for week in month_grid(year, month))
    return CalendarView(year=year, month=month, weeks=weeks)
