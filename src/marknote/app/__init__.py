"""Application core — state, messages, key map and the update function."""

from marknote.app.snapshot import Snapshot, take_snapshot
from marknote.app.state import AppState, Focus, Mode, View
from marknote.app.update import update

__all__ = ["AppState", "Focus", "Mode", "Snapshot", "View", "take_snapshot", "update"]
