"""Shared fixtures: a throwaway config root and a loaded application state."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from marknote.app.messages import KeyPress
from marknote.app.state import AppState
from marknote.app.update import update
from marknote.config import Settings

if TYPE_CHECKING:
    from pathlib import Path

TODAY = date(2024, 1, 15)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    s = Settings(root=tmp_path / "marknote")
    s.ensure_layout()
    return s


@pytest.fixture()
def make_state(settings: Settings):
    """Factory: write the given notes to disk, then load a fresh AppState."""

    def factory(notes: dict[str, str] | None = None, tasks_json: str | None = None) -> AppState:
        for rel, text in (notes or {}).items():
            target = settings.notes_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        if tasks_json is not None:
            settings.tasks_path.write_text(tasks_json, encoding="utf-8")
        state = AppState.from_settings(settings, today=TODAY)
        state.load()
        return state

    return factory


def press(state: AppState, *keys: str) -> AppState:
    """Feed key names through the state machine one at a time."""
    for key in keys:
        update(state, KeyPress(key))
    return state


def type_text(state: AppState, text: str) -> AppState:
    return press(state, *list(text))
