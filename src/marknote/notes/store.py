"""Note store — the canonical in-memory note collection and its Markdown files.

Keys are paths relative to the notes root. Every mutation writes through
to disk before the in-memory collection changes, so a failed write has no
partial effect. The store knows nothing about search or calendar indices;
the state machine rebuilds those after each mutation.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from marknote.errors import ConflictError, IoFailure, NotFoundError, ParseWarning
from marknote.fileio import atomic_write_text
from marknote.notes.frontmatter import parse_note_text, set_tags
from marknote.notes.models import Note
from marknote.notes.security import PathTraversalError, validate_note_path

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Outcome of a directory scan."""

    loaded: int = 0
    warnings: list[ParseWarning] = field(default_factory=list)


class NoteStore:
    """Owns every Note, keyed by relative path."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._notes: dict[Path, Note] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str | Path):
            return False
        try:
            return self.key(path) in self._notes
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._notes)

    def get(self, path: str | Path) -> Note:
        key = self.key(path)
        try:
            return self._notes[key]
        except KeyError:
            raise NotFoundError(key) from None

    def notes(self) -> list[Note]:
        """Snapshot of all notes, ordered by path."""
        return [self._notes[k] for k in sorted(self._notes)]

    def key(self, path: str | Path) -> Path:
        """Normalize *path* to its store key (relative to the root)."""
        return validate_note_path(path, self.root)

    def abspath(self, path: str | Path) -> Path:
        return self.root / self.key(path)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, directory: Path | None = None) -> LoadReport:
        """Scan *directory* (default: the root) for Markdown notes.

        Hidden files and folders are skipped. Files that cannot be read are
        recorded as warnings; the scan itself never fails.
        """
        if directory is not None:
            self.root = directory
        report = LoadReport()
        notes: dict[Path, Note] = {}

        if not self.root.is_dir():
            logger.info("Notes directory %s does not exist yet", self.root)
            self._notes = notes
            return report

        for md_file in sorted(self.root.rglob("*.md")):
            rel = md_file.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if not md_file.is_file():
                continue
            try:
                key = self.key(rel)
            except PathTraversalError:
                logger.warning("Skipping %s: it links outside the notes folder", md_file)
                report.warnings.append(ParseWarning(rel, "links outside the notes folder"))
                continue
            if key != rel:
                # A link to another note under the root; that note loads under its own path
                logger.info("Skipping %s: alias of %s", md_file, key)
                report.warnings.append(ParseWarning(rel, f"alias of {key}, skipped"))
                continue
            try:
                note, warning = self._read(rel)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable note %s: %s", md_file, e)
                report.warnings.append(ParseWarning(rel, f"unreadable ({e.__class__.__name__})"))
                continue
            if warning is not None:
                report.warnings.append(warning)
            notes[rel] = note

        self._notes = notes
        report.loaded = len(notes)
        logger.info("Loaded %d notes from %s", report.loaded, self.root)
        return report

    def refresh(self, path: str | Path) -> Note | None:
        """Re-read one note from disk after an external change.

        Returns the refreshed note, or None if the file is gone (the entry
        is dropped).
        """
        key = self.key(path)
        if not (self.root / key).is_file():
            if self._notes.pop(key, None) is not None:
                logger.info("Note %s removed on disk", key)
            return None
        try:
            note, _ = self._read(key)
        except UnicodeDecodeError:
            logger.warning("Note %s is no longer valid UTF-8, keeping loaded copy", key)
            return self._notes.get(key)
        except OSError as e:
            raise IoFailure(self.root / key, e) from e
        self._notes[key] = note
        return note

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, path: str | Path, initial_body: str = "") -> Note:
        """Create a note and write it to disk before returning."""
        key = self.key(path)
        target = self.root / key
        if key in self._notes or target.exists():
            raise ConflictError(key)

        atomic_write_text(target, initial_body)
        now = datetime.now(UTC)
        note, _ = self._build(key, initial_body, created=now, modified=now)
        self._notes[key] = note
        logger.info("Created note %s", key)
        return note

    def rename(self, old_path: str | Path, new_path: str | Path) -> Note:
        """Move a note file and re-key it in one step."""
        old_key = self.key(old_path)
        new_key = self.key(new_path)
        if old_key not in self._notes:
            raise NotFoundError(old_key)
        new_target = self.root / new_key
        if new_key in self._notes or new_target.exists():
            raise ConflictError(new_key)

        old_note = self._notes[old_key]
        try:
            new_target.parent.mkdir(parents=True, exist_ok=True)
            os.rename(self.root / old_key, new_target)
        except OSError as e:
            raise IoFailure(self.root / old_key, e) from e

        note, _ = self._build(
            new_key, old_note.content, created=old_note.created, modified=old_note.modified
        )
        notes = dict(self._notes)
        del notes[old_key]
        notes[new_key] = note
        self._notes = notes
        logger.info("Renamed note %s -> %s", old_key, new_key)
        return note

    def update_content(self, path: str | Path, new_body: str) -> Note:
        """Replace a note's full text, re-parse it and write it through."""
        key = self.key(path)
        old_note = self._notes.get(key)
        if old_note is None:
            raise NotFoundError(key)

        atomic_write_text(self.root / key, new_body)
        note, _ = self._build(key, new_body, created=old_note.created, modified=_bump(old_note))
        self._notes[key] = note
        logger.debug("Updated note %s", key)
        return note

    def add_tag(self, path: str | Path, tag: str) -> Note:
        """Add *tag* to a note's front matter and persist it."""
        note = self.get(path)
        tag = tag.strip()
        if not tag or tag in note.tags:
            return note
        return self.update_content(note.path, set_tags(note.content, [*note.tags, tag]))

    def delete(self, path: str | Path) -> Note:
        """Remove a note file and its entry."""
        key = self.key(path)
        note = self._notes.get(key)
        if note is None:
            raise NotFoundError(key)
        try:
            (self.root / key).unlink(missing_ok=True)
        except OSError as e:
            raise IoFailure(self.root / key, e) from e
        del self._notes[key]
        logger.info("Deleted note %s", key)
        return note

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self, key: Path) -> tuple[Note, ParseWarning | None]:
        filepath = self.root / key
        text = filepath.read_text(encoding="utf-8")
        stat = filepath.stat()
        birth = getattr(stat, "st_birthtime", None) or min(stat.st_ctime, stat.st_mtime)
        note, warning = self._build(
            key,
            text,
            created=datetime.fromtimestamp(birth, tz=UTC),
            modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
        )
        return note, ParseWarning(key, warning) if warning else None

    def _build(
        self, key: Path, text: str, *, created: datetime, modified: datetime
    ) -> tuple[Note, str | None]:
        parsed = parse_note_text(text, key.stem)
        if parsed.warning:
            logger.warning("Note %s: %s", key, parsed.warning)
        note = Note(
            path=key,
            title=parsed.title,
            content=text,
            body=parsed.body,
            tags=parsed.tags,
            created=created,
            modified=modified,
        )
        return note, parsed.warning


def _bump(note: Note) -> datetime:
    """A modified time strictly after the note's current one."""
    return max(datetime.now(UTC), note.modified + timedelta(microseconds=1))
