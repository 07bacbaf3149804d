"""Search/filter index over notes and tasks.

The index is a read-only view built from store snapshots and rebuilt
wholesale after any store mutation. Queries are a linear scan; at the
scale of a personal note collection that is fast enough per keystroke.

Query syntax:
    word      — substring of a note's title/body (or a task's description),
                or an exact tag (or task project); case-insensitive
    #word     — exact tag (notes) or exact project (tasks) only
Multiple words must all match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from pathlib import Path

    from marknote.notes.models import Note
    from marknote.tasks.models import Task


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Matching note paths and task ids, in display order."""

    notes: tuple[Path, ...] = ()
    tasks: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class _NoteEntry:
    path: Path
    modified: datetime
    text: str  # lower-cased title + body
    tags: frozenset[str]


@dataclass(frozen=True, slots=True)
class _TaskEntry:
    task_id: int
    description: str
    project: str


@dataclass(frozen=True, slots=True)
class QueryToken:
    text: str
    tag_only: bool


def parse_query(query: str) -> tuple[QueryToken, ...]:
    """Normalize a query string into its token set (order kept, duplicates dropped)."""
    tokens: list[QueryToken] = []
    for word in query.lower().split():
        if word.startswith("#") and len(word) > 1:
            token = QueryToken(word[1:], tag_only=True)
        elif word == "#":
            continue
        else:
            token = QueryToken(word, tag_only=False)
        if token not in tokens:
            tokens.append(token)
    return tuple(tokens)


class SearchIndex:
    """Immutable search structure over one snapshot of the stores."""

    def __init__(self, notes: tuple[_NoteEntry, ...], tasks: tuple[_TaskEntry, ...]) -> None:
        self._notes = notes
        self._tasks = tasks

    @classmethod
    def build(cls, notes: Iterable[Note], tasks: Iterable[tuple[int, Task]]) -> SearchIndex:
        """Build from a note snapshot and a pre-order ``(depth, task)`` listing."""
        note_entries = sorted(
            (
                _NoteEntry(
                    path=n.path,
                    modified=n.modified,
                    text=f"{n.title}\n{n.body}".lower(),
                    tags=frozenset(t.lower() for t in n.tags),
                )
                for n in notes
            ),
            # Most recently modified first, ties broken by path
            key=lambda e: (-e.modified.timestamp(), str(e.path)),
        )
        task_entries = tuple(
            _TaskEntry(
                task_id=t.id,
                description=t.description.lower(),
                project=(t.project or "").lower(),
            )
            for _, t in tasks
        )
        return cls(tuple(note_entries), task_entries)

    @classmethod
    def empty(cls) -> SearchIndex:
        return cls((), ())

    def search(self, query: str) -> SearchResult:
        """Evaluate *query*. The empty query matches everything."""
        tokens = parse_query(query)
        notes = tuple(e.path for e in self._notes if all(_note_matches(e, tok) for tok in tokens))
        tasks = tuple(
            e.task_id for e in self._tasks if all(_task_matches(e, tok) for tok in tokens)
        )
        return SearchResult(notes=notes, tasks=tasks)


def _note_matches(entry: _NoteEntry, token: QueryToken) -> bool:
    if token.text in entry.tags:
        return True
    return not token.tag_only and token.text in entry.text


def _task_matches(entry: _TaskEntry, token: QueryToken) -> bool:
    if token.text == entry.project:
        return True
    return not token.tag_only and token.text in entry.description


def all_tags(notes: Iterable[Note]) -> list[str]:
    """Sorted, de-duplicated tags across *notes* (the tag pane)."""
    return sorted({tag for note in notes for tag in note.tags})
