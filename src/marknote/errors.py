"""Error kinds shared by the note and task stores.

Store operations raise these; the state machine turns them into status
messages. Parse-level problems are collected as ``ParseWarning`` records
instead of being raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class MarknoteError(Exception):
    """Base class for store errors that surface to the user."""


class NotFoundError(MarknoteError):
    """An operation referenced a note path or task id that is not present."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Not found: {key}")


class ConflictError(MarknoteError):
    """A create or rename target already exists."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Already exists: {key}")


class IoFailure(MarknoteError):
    """A filesystem read, write or permission error."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"I/O error on {path}: {reason}")


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """A degraded parse: malformed front matter, task JSON or an unreadable file."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"
