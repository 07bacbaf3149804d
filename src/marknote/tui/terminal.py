"""Terminal loop: curses keys and watcher events in, one message at a time."""

from __future__ import annotations

import curses
import logging
import queue
import time
from typing import TYPE_CHECKING

from marknote.app.messages import DiskChanged, KeyPress, Tick
from marknote.app.snapshot import take_snapshot
from marknote.app.update import update
from marknote.tui.render import init_colors, render

if TYPE_CHECKING:
    from pathlib import Path

    from marknote.app.messages import Message
    from marknote.app.state import AppState
    from marknote.config import UIConfig

logger = logging.getLogger(__name__)

_KEY_NAMES = {
    27: "esc",
    10: "enter",
    13: "enter",
    curses.KEY_ENTER: "enter",
    9: "tab",
    127: "backspace",
    8: "backspace",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
}


def key_name(code: int | str) -> str | None:
    """Name a key as read by ``get_wch``; None for keys the app ignores."""
    if isinstance(code, str):
        if len(code) == 1 and ord(code) in _KEY_NAMES:
            return _KEY_NAMES[ord(code)]
        return code if code.isprintable() else None
    return _KEY_NAMES.get(code)


class EventQueue:
    """Thread-safe inbox for messages produced off the UI thread."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Message] = queue.Queue()

    def put(self, message: Message) -> None:
        self._queue.put(message)

    def disk_changed(self, path: Path, kind: str) -> None:
        """Callback for ``NoteWatcher``; runs on the observer thread."""
        self._queue.put(DiskChanged(path, kind))

    def drain(self) -> list[Message]:
        out: list[Message] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out


def run(state: AppState, events: EventQueue, ui: UIConfig) -> AppState:
    """Run the UI until the state stops running."""
    return curses.wrapper(_loop, state, events, ui)


def _loop(stdscr: curses.window, state: AppState, events: EventQueue, ui: UIConfig) -> AppState:
    curses.curs_set(0)
    curses.set_escdelay(25)
    init_colors()
    stdscr.keypad(True)
    stdscr.timeout(ui.poll_ms)

    last_tick = time.monotonic()
    render(stdscr, take_snapshot(state))
    while state.running:
        changed = False

        for message in events.drain():
            update(state, message)
            changed = True

        now = time.monotonic()
        if now - last_tick >= ui.tick_seconds:
            last_tick = now
            update(state, Tick())
            changed = True

        try:
            code = stdscr.get_wch()
        except curses.error:
            code = None
        if code == curses.KEY_RESIZE:
            changed = True
        elif code is not None:
            name = key_name(code)
            if name is not None:
                logger.debug("key %r", name)
                update(state, KeyPress(name))
                changed = True

        if changed and state.running:
            render(stdscr, take_snapshot(state))
    return state
