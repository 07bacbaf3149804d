"""Tests for note path traversal protection."""

from __future__ import annotations

from pathlib import Path

import pytest

from marknote.notes.security import PathTraversalError, validate_note_path


@pytest.fixture()
def notes_root(tmp_path: Path) -> Path:
    root = tmp_path / "notes"
    (root / "daily-notes").mkdir(parents=True)
    return root


class TestValidateNotePath:
    def test_relative_path_is_its_own_key(self, notes_root: Path) -> None:
        assert validate_note_path("ideas.md", notes_root) == Path("ideas.md")

    def test_nested_path(self, notes_root: Path) -> None:
        key = validate_note_path("daily-notes/2024-01-15.md", notes_root)
        assert key == Path("daily-notes/2024-01-15.md")

    def test_absolute_path_inside_root(self, notes_root: Path) -> None:
        assert validate_note_path(notes_root / "a.md", notes_root) == Path("a.md")

    def test_dot_segments_are_normalized(self, notes_root: Path) -> None:
        assert validate_note_path("daily-notes/../a.md", notes_root) == Path("a.md")

    def test_parent_traversal(self, notes_root: Path) -> None:
        with pytest.raises(PathTraversalError) as exc_info:
            validate_note_path("../../etc/passwd", notes_root)
        assert exc_info.value.user_path == "../../etc/passwd"
        assert exc_info.value.notes_root == notes_root

    def test_absolute_path_outside(self, notes_root: Path) -> None:
        with pytest.raises(PathTraversalError):
            validate_note_path("/etc/passwd", notes_root)

    def test_root_itself_is_not_a_note(self, notes_root: Path) -> None:
        with pytest.raises(PathTraversalError):
            validate_note_path(".", notes_root)

    def test_error_is_value_error_subclass(self) -> None:
        assert issubclass(PathTraversalError, ValueError)
