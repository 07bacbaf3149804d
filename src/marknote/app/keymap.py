"""Key map — translates a raw ``KeyPress`` into a semantic message.

Translation is a pure function of the key and the current mode, view,
focus and pending confirmation. Unmapped keys translate to None.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marknote.app import messages as m
from marknote.app.state import Focus, Mode, View

if TYPE_CHECKING:
    from marknote.app.state import AppState

_ARROWS: dict[str, m.Message] = {
    "up": m.MoveUp(),
    "down": m.MoveDown(),
    "left": m.MoveLeft(),
    "right": m.MoveRight(),
}

_VIM_VERTICAL: dict[str, m.Message] = {
    "j": m.MoveDown(),
    "k": m.MoveUp(),
    "down": m.MoveDown(),
    "up": m.MoveUp(),
}

_VIEW_KEYS: dict[View, dict[str, m.Message]] = {
    View.NOTE_LIST: {
        **_VIM_VERTICAL,
        "enter": m.Open(),
        "a": m.NewNote(),
        "r": m.RenameNote(),
        "d": m.DeleteNote(),
        "t": m.AddTag(),
        "tab": m.ToggleFocus(),
        "esc": m.Cancel(),
    },
    View.EDITOR: {
        "i": m.EnterInsert(),
        "t": m.AddTag(),
        "r": m.RenameNote(),
        "d": m.DeleteNote(),
        "esc": m.Cancel(),
        **_ARROWS,
    },
    View.CALENDAR: {
        "h": m.MoveLeft(),
        "l": m.MoveRight(),
        "j": m.MoveDown(),
        "k": m.MoveUp(),
        **_ARROWS,
        "<": m.PrevMonth(),
        ">": m.NextMonth(),
        "H": m.PrevMonth(),
        "L": m.NextMonth(),
        "t": m.GoToday(),
        "enter": m.Open(),
    },
    View.TASKS: {
        **_VIM_VERTICAL,
        "a": m.NewTask(),
        "A": m.NewSubTask(),
        "e": m.EditTask(),
        "P": m.SetProject(),
        "D": m.SetDue(),
        "p": m.CyclePriority(),
        " ": m.ToggleTask(),
        "x": m.ToggleTask(),
        "d": m.DeleteTask(),
        "esc": m.Cancel(),
    },
    View.HELP: {
        "?": m.ToggleHelp(),
        "esc": m.ToggleHelp(),
    },
}

_TAG_PANE_KEYS: dict[str, m.Message] = {
    **_VIM_VERTICAL,
    "enter": m.Open(),
    "tab": m.ToggleFocus(),
    "esc": m.ToggleFocus(),
}

_GLOBAL_KEYS: dict[str, m.Message] = {
    ":": m.EnterCommand(),
    "/": m.EnterSearch(),
    "?": m.ToggleHelp(),
    "q": m.Quit(),
    "n": m.SwitchView(View.NOTE_LIST),
    "c": m.SwitchView(View.CALENDAR),
    "T": m.SwitchView(View.TASKS),
}


def translate(state: AppState, key: str) -> m.Message | None:
    """Map *key* to a message for the current state."""
    if state.pending is not None:
        if key in ("y", "Y"):
            return m.Confirm()
        if key in ("n", "N", "esc"):
            return m.Cancel()

    if state.mode is Mode.INSERT:
        return _insert_key(key)
    if state.mode in (Mode.COMMAND, Mode.SEARCH, Mode.PROMPT):
        return _line_key(key)

    if state.view is View.NOTE_LIST and state.focus is Focus.TAGS:
        table = _TAG_PANE_KEYS
    else:
        table = _VIEW_KEYS.get(state.view, {})
    if key in table:
        return table[key]
    if state.view is View.HELP:
        return None
    return _GLOBAL_KEYS.get(key)


def _insert_key(key: str) -> m.Message | None:
    if key == "esc":
        return m.Cancel()
    if key == "enter":
        return m.NewLine()
    if key == "backspace":
        return m.Backspace()
    if key == "tab":
        return m.InsertChar("\t")
    if key in _ARROWS:
        return _ARROWS[key]
    if len(key) == 1 and key.isprintable():
        return m.InsertChar(key)
    return None


def _line_key(key: str) -> m.Message | None:
    if key == "esc":
        return m.Cancel()
    if key == "enter":
        return m.Submit()
    if key == "backspace":
        return m.Backspace()
    if len(key) == 1 and key.isprintable():
        return m.InsertChar(key)
    return None
