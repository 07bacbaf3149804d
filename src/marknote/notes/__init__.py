"""Note storage — parsing, persisting and watching Markdown note files."""

from marknote.notes.frontmatter import normalize_tags, parse_note_text, set_tags
from marknote.notes.models import Note
from marknote.notes.security import PathTraversalError, validate_note_path
from marknote.notes.store import LoadReport, NoteStore
from marknote.notes.watcher import NoteWatcher

__all__ = [
    "LoadReport",
    "Note",
    "NoteStore",
    "NoteWatcher",
    "PathTraversalError",
    "normalize_tags",
    "parse_note_text",
    "set_tags",
    "validate_note_path",
]
