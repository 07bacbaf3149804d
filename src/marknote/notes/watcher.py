"""Notes directory watcher — reports external edits of note files.

The watchdog observer runs on its own thread; the callback it invokes must
only hand the change over (e.g. put a message on a queue). It never touches
application state directly.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

if TYPE_CHECKING:
    from collections.abc import Callable

    from marknote.config import WatchConfig

logger = logging.getLogger(__name__)


class _NoteEventHandler(FileSystemEventHandler):
    """Handles file system events for visible .md files under the notes root."""

    def __init__(
        self,
        notes_root: Path,
        on_change: Callable[[Path, str], None],
        debounce_ms: int = 0,
    ) -> None:
        self.notes_root = notes_root
        self.on_change = on_change
        self.debounce_s = debounce_ms / 1000.0
        self._pending: dict[Path, threading.Timer] = {}
        self._lock = threading.Lock()

    def relative(self, path: str | bytes) -> Path | None:
        """Return the note key for *path*, or None if it is not a watched note."""
        p = Path(path.decode() if isinstance(path, bytes) else path)
        if p.suffix != ".md":
            return None
        try:
            rel = p.relative_to(self.notes_root)
        except ValueError:
            return None
        if any(part.startswith(".") for part in rel.parts):
            return None
        return rel

    def _emit(self, path: str | bytes, kind: str) -> None:
        rel = self.relative(path)
        if rel is None:
            return
        if self.debounce_s <= 0:
            self._fire(rel, kind)
            return
        # Coalesce bursts of events for one note into a single trailing call
        with self._lock:
            pending = self._pending.pop(rel, None)
            if pending is not None:
                pending.cancel()
            timer = threading.Timer(self.debounce_s, self._fire, args=(rel, kind))
            timer.daemon = True
            self._pending[rel] = timer
            timer.start()

    def _fire(self, rel: Path, kind: str) -> None:
        with self._lock:
            self._pending.pop(rel, None)
        logger.debug("Note %s: %s", kind, rel)
        self.on_change(rel, kind)

    def cancel_pending(self) -> None:
        with self._lock:
            for timer in self._pending.values():
                timer.cancel()
            self._pending.clear()

    def on_created(self, event: FileCreatedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self._emit(event.src_path, "created")

    def on_modified(self, event: FileModifiedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self._emit(event.src_path, "modified")

    def on_deleted(self, event: FileDeletedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self._emit(event.src_path, "deleted")

    def on_moved(self, event: FileMovedEvent) -> None:  # type: ignore[override]
        # Atomic saves land as a move from a hidden temp file onto the note.
        if not event.is_directory:
            self._emit(event.src_path, "deleted")
            self._emit(event.dest_path, "modified")


class NoteWatcher:
    """Watches the notes directory for changes made outside marknote.

    Usage:
        watcher = NoteWatcher(notes_dir, config, on_change=queue_message)
        watcher.start()  # non-blocking
        ...
        watcher.stop()
    """

    def __init__(
        self,
        notes_root: Path,
        config: WatchConfig,
        on_change: Callable[[Path, str], None],
    ) -> None:
        self.notes_root = notes_root
        self.config = config
        self.handler = _NoteEventHandler(
            notes_root=notes_root.resolve(),
            on_change=on_change,
            debounce_ms=config.debounce_ms,
        )
        self._observer: Observer | None = None

    def start(self) -> None:
        """Start watching the notes directory (non-blocking)."""
        if not self.config.enabled:
            logger.info("Note watcher disabled by configuration")
            return
        self._observer = Observer()
        self._observer.schedule(self.handler, str(self.notes_root.resolve()), recursive=True)
        self._observer.start()
        logger.info("Watching notes at %s", self.notes_root)

    def stop(self) -> None:
        """Stop the watcher."""
        if self._observer:
            self._observer.stop()
            self.handler.cancel_pending()
            self._observer.join()
            self._observer = None
            logger.info("Note watcher stopped")
