"""Draw a ``Snapshot`` with curses. Stateless: the whole screen is redrawn each time."""

from __future__ import annotations

import calendar
import curses
from typing import TYPE_CHECKING

from marknote.app.state import Focus, Mode, View

if TYPE_CHECKING:
    from marknote.app.snapshot import CalendarView, EditorView, Snapshot

HELP_LINES = (
    "Global (Normal mode)",
    "  n notes   c calendar   T tasks   / search   : command   ? help   q quit",
    "",
    "Notes",
    "  j/k move   Enter open   a new   r rename   d delete   t add tag",
    "  Tab tag pane (Enter toggles the tag filter)   Esc clear filter",
    "",
    "Editor",
    "  i insert   Esc back   arrows move   t tag   r rename   d delete",
    "",
    "Calendar",
    "  h/l day   j/k week   < > month   t today   Enter open or create daily note",
    "",
    "Tasks",
    "  j/k move   a add   A sub-task   e edit   P project   D due date",
    "  p priority   Space/x toggle done   d delete",
    "",
    "Commands",
    "  :w save   :q quit   :q! force quit   :wq save and quit",
    "  :new <title>   :today   :help",
)

# Color pair ids
_ACCENT = 1
_SELECTED = 2
_LOW = 3
_TAGS = 4
_HIGH = 5
_MEDIUM = 6
_STATUS = 7
_OVERDUE = 9


def init_colors() -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(_ACCENT, curses.COLOR_CYAN, -1)
    curses.init_pair(_SELECTED, -1, curses.COLOR_CYAN)
    curses.init_pair(_LOW, curses.COLOR_GREEN, -1)
    curses.init_pair(_TAGS, curses.COLOR_MAGENTA, -1)
    curses.init_pair(_HIGH, curses.COLOR_RED, -1)
    curses.init_pair(_MEDIUM, curses.COLOR_YELLOW, -1)
    curses.init_pair(_STATUS, curses.COLOR_WHITE, curses.COLOR_BLUE)
    curses.init_pair(_OVERDUE, curses.COLOR_BLUE, -1)


def _put(win: curses.window, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x >= width:
        return
    try:
        win.addnstr(y, x, text, max(0, width - x - 1), attr)
    except curses.error:
        pass


def render(win: curses.window, snap: Snapshot) -> None:
    win.erase()
    height, width = win.getmaxyx()
    body_height = height - 2

    header = f" marknote | {snap.view.value}"
    if snap.dirty:
        header += " [+]"
    _put(win, 0, 0, header.ljust(width), curses.color_pair(_STATUS) | curses.A_BOLD)

    if snap.view is View.HELP:
        _draw_help(win, body_height)
    elif snap.view is View.EDITOR and snap.editor is not None:
        _draw_editor(win, snap.editor, body_height, insert=snap.mode is Mode.INSERT)
    elif snap.view is View.CALENDAR:
        _draw_calendar(win, snap.calendar)
    elif snap.view is View.TASKS:
        _draw_tasks(win, snap, body_height)
    else:
        _draw_notes(win, snap, body_height, width)

    _draw_status(win, snap, height - 1, width)
    win.refresh()


def _draw_notes(win: curses.window, snap: Snapshot, body_height: int, width: int) -> None:
    tag_width = min(24, width // 4)
    list_x = tag_width + 2

    _put(win, 1, 1, "Tags", curses.A_BOLD)
    for i, tag in enumerate(snap.tags[: body_height - 1]):
        attr = curses.color_pair(_TAGS)
        if tag == snap.active_tag:
            attr |= curses.A_BOLD
        if snap.focus is Focus.TAGS and i == snap.tag_index:
            attr |= curses.A_REVERSE
        _put(win, 2 + i, 1, f"#{tag}"[: tag_width - 1], attr)

    title = "Notes"
    if snap.query:
        title += f"  /{snap.query}"
    if snap.active_tag:
        title += f"  #{snap.active_tag}"
    _put(win, 1, list_x, title, curses.A_BOLD)

    if not snap.notes:
        _put(win, 2, list_x, "(no notes)", curses.A_DIM)
    offset = max(0, snap.note_index - (body_height - 2))
    for i, row in enumerate(snap.notes[offset : offset + body_height - 1]):
        idx = offset + i
        marker = "*" if row.dirty else " "
        tags = " ".join(f"#{t}" for t in row.tags)
        line = f"{marker} {row.title}  {row.modified}  {tags}"
        attr = curses.A_NORMAL
        if snap.focus is Focus.NOTES and idx == snap.note_index:
            attr |= curses.A_REVERSE
        _put(win, 2 + i, list_x, line, attr)


def _draw_editor(win: curses.window, editor: EditorView, body_height: int, *, insert: bool) -> None:
    marker = " [modified]" if editor.dirty else ""
    _put(win, 1, 1, f"{editor.title} ({editor.path}){marker}", curses.color_pair(_ACCENT) | curses.A_BOLD)

    lines = editor.text.split("\n")
    visible = body_height - 1
    top = max(0, editor.cursor_row - visible + 1)
    for i, line in enumerate(lines[top : top + visible]):
        _put(win, 2 + i, 1, line.replace("\t", "    "))

    if insert:
        row = editor.cursor_row - top + 2
        col = len(lines[editor.cursor_row][: editor.cursor_col].replace("\t", "    ")) + 1
        try:
            curses.curs_set(1)
            win.move(row, col)
        except curses.error:
            pass
    else:
        try:
            curses.curs_set(0)
        except curses.error:
            pass


def _draw_calendar(win: curses.window, cal: CalendarView) -> None:
    title = f"{calendar.month_name[cal.month]} {cal.year}"
    _put(win, 1, 2, title, curses.color_pair(_ACCENT) | curses.A_BOLD)
    _put(win, 2, 2, " ".join(f"{d:>3}" for d in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su")), curses.A_BOLD)
    for w, week in enumerate(cal.weeks):
        for d, cell in enumerate(week):
            if cell is None:
                continue
            attr = curses.A_NORMAL
            if cell.has_note:
                attr |= curses.color_pair(_LOW) | curses.A_BOLD
            if cell.is_today:
                attr |= curses.A_UNDERLINE
            if cell.is_selected:
                attr |= curses.A_REVERSE
            _put(win, 3 + w, 2 + d * 4, f"{cell.day:>3}", attr)
    _put(win, 4 + len(cal.weeks), 2, "Enter opens the day's note (created if missing)", curses.A_DIM)


def _draw_tasks(win: curses.window, snap: Snapshot, body_height: int) -> None:
    title = "Tasks"
    if snap.query:
        title += f"  /{snap.query}"
    _put(win, 1, 1, title, curses.A_BOLD)
    if not snap.tasks:
        _put(win, 2, 1, "(no tasks; press a to add one)", curses.A_DIM)
    offset = max(0, snap.task_index - (body_height - 2))
    for i, row in enumerate(snap.tasks[offset : offset + body_height - 1]):
        idx = offset + i
        box = "[x]" if row.done else "[ ]"
        line = f"{'  ' * row.depth}{box} {row.description}"
        if row.project:
            line += f"  +{row.project}"
        if row.due:
            line += f"  due {row.due}"
        attr = {
            "high": curses.color_pair(_HIGH),
            "medium": curses.color_pair(_MEDIUM),
            "low": curses.color_pair(_LOW),
        }.get(row.priority, curses.A_NORMAL)
        if row.overdue:
            attr = curses.color_pair(_OVERDUE) | curses.A_BOLD
        if row.done:
            attr = curses.A_DIM
        if idx == snap.task_index:
            attr |= curses.A_REVERSE
        _put(win, 2 + i, 1, line, attr)


def _draw_help(win: curses.window, body_height: int) -> None:
    for i, line in enumerate(HELP_LINES[:body_height]):
        attr = curses.A_BOLD if line and not line.startswith(" ") else curses.A_NORMAL
        _put(win, 1 + i, 2, line, attr)


def _draw_status(win: curses.window, snap: Snapshot, y: int, width: int) -> None:
    if snap.mode is Mode.COMMAND:
        text = f":{snap.command_line}"
    elif snap.mode is Mode.SEARCH:
        text = f"/{snap.query}"
    elif snap.mode is Mode.PROMPT and snap.prompt_label is not None:
        text = f"{snap.prompt_label}{snap.prompt_text}"
        if snap.status:
            text = f"{snap.status} | {text}"
    else:
        text = snap.status
    attr = curses.A_BOLD if snap.pending else curses.A_NORMAL
    mode = f" {snap.mode.value.upper()} "
    _put(win, y, 0, mode, curses.color_pair(_STATUS))
    _put(win, y, len(mode) + 1, text.ljust(width - len(mode) - 2), attr)
