"""Path traversal protection for note operations."""

from __future__ import annotations

from pathlib import Path


class PathTraversalError(ValueError):
    """Raised when a note path escapes the notes root."""

    def __init__(self, user_path: str, notes_root: Path) -> None:
        self.user_path = user_path
        self.notes_root = notes_root
        super().__init__(
            f"Path traversal blocked: '{user_path}' escapes notes root '{notes_root}'"
        )


def validate_note_path(user_path: str | Path, notes_root: Path) -> Path:
    """Resolve a note path and verify it stays within the notes root.

    Returns the path relative to the root, which is the note's key.
    Raises PathTraversalError if the resolved path escapes notes_root.
    """
    resolved_root = notes_root.resolve()
    candidate = (resolved_root / user_path).resolve()
    try:
        rel = candidate.relative_to(resolved_root)
    except ValueError:
        raise PathTraversalError(str(user_path), notes_root) from None
    if not rel.parts:
        raise PathTraversalError(str(user_path), notes_root)
    return rel
