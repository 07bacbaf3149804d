"""Messages consumed by the state machine.

Each message is an immutable description of one input or event. The
terminal layer produces ``KeyPress`` values; the key map translates them
into the semantic messages below, which tests may also feed directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from marknote.app.state import View


# ---------------------------------------------------------------------------
# Raw input and external events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class KeyPress:
    """One key: a printable character, or a name such as ``esc``/``enter``/``up``."""

    key: str


@dataclass(frozen=True, slots=True)
class Tick:
    """Timer event; carries the wall-clock time."""

    now: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class DiskChanged:
    """A note file changed outside the application."""

    path: Path
    kind: str  # created | modified | deleted


# ---------------------------------------------------------------------------
# Navigation and modes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoveUp:
    pass


@dataclass(frozen=True, slots=True)
class MoveDown:
    pass


@dataclass(frozen=True, slots=True)
class MoveLeft:
    pass


@dataclass(frozen=True, slots=True)
class MoveRight:
    pass


@dataclass(frozen=True, slots=True)
class Open:
    """Open the selected note or calendar day."""


@dataclass(frozen=True, slots=True)
class SwitchView:
    view: View


@dataclass(frozen=True, slots=True)
class ToggleHelp:
    pass


@dataclass(frozen=True, slots=True)
class ToggleFocus:
    """Switch the note list between the notes pane and the tag pane."""


@dataclass(frozen=True, slots=True)
class EnterInsert:
    pass


@dataclass(frozen=True, slots=True)
class EnterCommand:
    pass


@dataclass(frozen=True, slots=True)
class EnterSearch:
    pass


# ---------------------------------------------------------------------------
# Line and text input
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InsertChar:
    char: str


@dataclass(frozen=True, slots=True)
class Backspace:
    pass


@dataclass(frozen=True, slots=True)
class NewLine:
    pass


@dataclass(frozen=True, slots=True)
class Submit:
    """Enter in Command, Search or Prompt mode."""


@dataclass(frozen=True, slots=True)
class Cancel:
    """Escape."""


@dataclass(frozen=True, slots=True)
class Confirm:
    """Answer yes to a pending confirmation."""


@dataclass(frozen=True, slots=True)
class CommandSubmit:
    """Run a command line (without the leading colon)."""

    command: str


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Save:
    pass


@dataclass(frozen=True, slots=True)
class Quit:
    pass


@dataclass(frozen=True, slots=True)
class ForceQuit:
    pass


@dataclass(frozen=True, slots=True)
class NewNote:
    pass


@dataclass(frozen=True, slots=True)
class RenameNote:
    pass


@dataclass(frozen=True, slots=True)
class DeleteNote:
    pass


@dataclass(frozen=True, slots=True)
class AddTag:
    pass


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PrevMonth:
    pass


@dataclass(frozen=True, slots=True)
class NextMonth:
    pass


@dataclass(frozen=True, slots=True)
class GoToday:
    pass


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NewTask:
    pass


@dataclass(frozen=True, slots=True)
class NewSubTask:
    pass


@dataclass(frozen=True, slots=True)
class EditTask:
    pass


@dataclass(frozen=True, slots=True)
class SetProject:
    pass


@dataclass(frozen=True, slots=True)
class SetDue:
    pass


@dataclass(frozen=True, slots=True)
class ToggleTask:
    pass


@dataclass(frozen=True, slots=True)
class CyclePriority:
    pass


@dataclass(frozen=True, slots=True)
class DeleteTask:
    pass


type Message = (
    KeyPress
    | Tick
    | DiskChanged
    | MoveUp
    | MoveDown
    | MoveLeft
    | MoveRight
    | Open
    | SwitchView
    | ToggleHelp
    | ToggleFocus
    | EnterInsert
    | EnterCommand
    | EnterSearch
    | InsertChar
    | Backspace
    | NewLine
    | Submit
    | Cancel
    | Confirm
    | CommandSubmit
    | Save
    | Quit
    | ForceQuit
    | NewNote
    | RenameNote
    | DeleteNote
    | AddTag
    | PrevMonth
    | NextMonth
    | GoToday
    | NewTask
    | NewSubTask
    | EditTask
    | SetProject
    | SetDue
    | ToggleTask
    | CyclePriority
    | DeleteTask
)
