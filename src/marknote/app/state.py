"""Application state — the single root owned by the processing loop.

``AppState`` owns both stores and the derived indices. Only
``marknote.app.update.update`` mutates it; everything else reads it, and
the renderer only ever sees a ``Snapshot`` taken from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from marknote.index.calendar import CalendarIndex
from marknote.index.search import SearchIndex, SearchResult, all_tags
from marknote.notes.store import NoteStore
from marknote.tasks.store import TaskStore

if TYPE_CHECKING:
    from marknote.app.editor import EditBuffer
    from marknote.config import Settings
    from marknote.errors import ParseWarning
    from marknote.notes.models import Note
    from marknote.tasks.models import Task

logger = logging.getLogger(__name__)


class View(StrEnum):
    NOTE_LIST = "notes"
    EDITOR = "editor"
    CALENDAR = "calendar"
    TASKS = "tasks"
    SEARCH = "search"
    HELP = "help"


class Mode(StrEnum):
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"
    SEARCH = "search"
    PROMPT = "prompt"


class Focus(StrEnum):
    NOTES = "notes"
    TAGS = "tags"


class PromptKind(StrEnum):
    NEW_NOTE = "New note title: "
    RENAME_NOTE = "Rename note to: "
    ADD_TAG = "Add tag: "
    NEW_TASK = "New task: "
    NEW_SUBTASK = "New sub-task: "
    EDIT_TASK = "Edit task: "
    SET_PROJECT = "Project: "
    SET_DUE = "Due date (YYYY-MM-DD, today, tomorrow; empty clears): "


@dataclass(frozen=True, slots=True)
class Prompt:
    """A single-line input in progress."""

    kind: PromptKind
    text: str = ""
    target: Path | int | None = None

    @property
    def label(self) -> str:
        return self.kind.value


@dataclass(frozen=True, slots=True)
class PendingAction:
    """A destructive action waiting for confirmation."""

    kind: Literal["delete_note", "delete_task", "quit"]
    target: Path | int | None
    prompt: str


@dataclass
class AppState:
    """Everything the application knows. See module docstring."""

    notes: NoteStore
    tasks: TaskStore
    daily_folder: str = "daily-notes"
    today: date = field(default_factory=date.today)

    search: SearchIndex = field(default_factory=SearchIndex.empty)
    calendar: CalendarIndex = field(default_factory=CalendarIndex.empty)
    results: SearchResult = field(default_factory=SearchResult)
    tags: list[str] = field(default_factory=list)

    view: View = View.NOTE_LIST
    previous_view: View | None = None
    mode: Mode = Mode.NORMAL
    focus: Focus = Focus.NOTES

    note_index: int = 0
    task_index: int = 0
    tag_index: int = 0
    active_tag: str | None = None

    query: str = ""
    command_line: str = ""
    prompt: Prompt | None = None
    pending: PendingAction | None = None

    buffers: dict[Path, EditBuffer] = field(default_factory=dict)
    active_note: Path | None = None

    calendar_year: int = 0
    calendar_month: int = 0
    selected_day: date | None = None

    status: str = ""
    warnings: list[ParseWarning] = field(default_factory=list)
    running: bool = True

    def __post_init__(self) -> None:
        if self.selected_day is None:
            self.selected_day = self.today
        if not self.calendar_month:
            self.calendar_year, self.calendar_month = self.today.year, self.today.month

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: Settings, today: date | None = None) -> AppState:
        """Build an empty state wired to the configured note and task locations."""
        return cls(
            notes=NoteStore(settings.notes_dir),
            tasks=TaskStore(settings.tasks_path),
            daily_folder=settings.daily_folder,
            today=today or date.today(),
        )

    def load(self) -> None:
        """Load both stores from disk and build the indices.

        Per-file problems become warnings and a status message; loading
        itself never fails.
        """
        report = self.notes.load()
        self.warnings = [*report.warnings, *self.tasks.load()]
        rebuild_indices(self)
        if self.warnings:
            self.status = f"Loaded with {len(self.warnings)} warning(s): {self.warnings[0]}"
            for warning in self.warnings:
                logger.warning("Load warning: %s", warning)
        else:
            self.status = "Welcome to marknote! Press ? for help, q to quit."

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def visible_notes(self) -> list[Note]:
        """Notes shown in the list: current query results, then the tag filter."""
        out: list[Note] = []
        for path in self.results.notes:
            if path not in self.notes:
                continue
            note = self.notes.get(path)
            if self.active_tag is not None and self.active_tag not in note.tags:
                continue
            out.append(note)
        return out

    def visible_tasks(self) -> list[tuple[int, Task]]:
        """Tasks shown in the task view, as (depth, task), filtered by the query."""
        wanted = set(self.results.tasks)
        return [(depth, t) for depth, t in self.tasks.flatten() if t.id in wanted]

    def selected_note(self) -> Note | None:
        notes = self.visible_notes()
        if not notes:
            return None
        return notes[min(self.note_index, len(notes) - 1)]

    def selected_task(self) -> Task | None:
        tasks = self.visible_tasks()
        if not tasks:
            return None
        return tasks[min(self.task_index, len(tasks) - 1)][1]

    def current_note(self) -> Note | None:
        """The note the editor has open, or the list selection elsewhere."""
        if self.view is View.EDITOR and self.active_note is not None:
            if self.active_note in self.notes:
                return self.notes.get(self.active_note)
            return None
        return self.selected_note()

    def dirty_paths(self) -> list[Path]:
        """Notes whose edit buffer differs from the stored content."""
        dirty: list[Path] = []
        for path, buf in sorted(self.buffers.items()):
            if path not in self.notes or buf.text != self.notes.get(path).content:
                dirty.append(path)
        return dirty

    @property
    def dirty(self) -> bool:
        return bool(self.dirty_paths()) or self.tasks.dirty


def rebuild_indices(state: AppState) -> None:
    """Recompute every derived index from the stores and re-run the query."""
    notes = state.notes.notes()
    state.search = SearchIndex.build(notes, state.tasks.flatten())
    state.calendar = CalendarIndex.build(notes, state.daily_folder)
    state.tags = all_tags(notes)
    if state.active_tag is not None and state.active_tag not in state.tags:
        state.active_tag = None
    state.results = state.search.search(state.query)
    clamp_selection(state)


def clamp_selection(state: AppState) -> None:
    """Keep selection indices inside their lists."""
    state.note_index = _clamp(state.note_index, len(state.visible_notes()))
    state.task_index = _clamp(state.task_index, len(state.visible_tasks()))
    state.tag_index = _clamp(state.tag_index, len(state.tags))


def _clamp(index: int, length: int) -> int:
    if length == 0:
        return 0
    return max(0, min(index, length - 1))
