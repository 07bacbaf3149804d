"""Task store — the task tree and its single JSON file.

The whole collection is rewritten on every save through a temp file that
replaces the original only once fully written; a failed save leaves the
previous file on disk and the store dirty.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from marknote.errors import IoFailure, NotFoundError, ParseWarning
from marknote.fileio import atomic_write_text
from marknote.tasks.models import Task, TaskPatch

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(list[Task])


class TaskStore:
    """Owns the task tree. Ids are assigned here and never reused."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._tasks: list[Task] = []
        self._next_id = 1
        self.dirty = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.flatten())

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, int) and self._find(task_id) is not None

    def tasks(self) -> list[Task]:
        """Top-level tasks (each owning its sub-tasks)."""
        return list(self._tasks)

    def flatten(self) -> list[tuple[int, Task]]:
        """Every task as (depth, task), pre-order."""
        out: list[tuple[int, Task]] = []

        def visit(items: list[Task], depth: int) -> None:
            for task in items:
                out.append((depth, task))
                visit(task.sub_tasks, depth + 1)

        visit(self._tasks, 0)
        return out

    def get(self, task_id: int) -> Task:
        found = self._find(task_id)
        if found is None:
            raise NotFoundError(f"task {task_id}")
        return found[1][found[2]]

    @property
    def next_id(self) -> int:
        return self._next_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> list[ParseWarning]:
        """Read the task file. Missing or empty files mean no tasks.

        Malformed content degrades to an empty collection plus a warning.
        """
        warnings: list[ParseWarning] = []
        tasks: list[Task] = []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raw = ""
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.path, e)
            warnings.append(ParseWarning(self.path, f"unreadable ({e.__class__.__name__})"))
            raw = ""

        if raw.strip():
            try:
                tasks = _TASK_LIST.validate_python(json.loads(raw))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Malformed task file %s: %s", self.path, e)
                warnings.append(ParseWarning(self.path, "malformed task file, starting empty"))
                tasks = []

        self._tasks = tasks
        highest = max((t.id for _, t in self.flatten()), default=0)
        self._next_id = max(self._next_id, highest + 1)
        self.dirty = False
        logger.info("Loaded %d tasks from %s", len(self.flatten()), self.path)
        return warnings

    def dumps(self) -> str:
        data = [t.model_dump(mode="json", exclude_none=True) for t in self._tasks]
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    def save(self) -> None:
        """Rewrite the whole task file atomically."""
        try:
            atomic_write_text(self.path, self.dumps())
        except IoFailure:
            self.dirty = True
            raise
        self.dirty = False
        logger.debug("Saved %d tasks", len(self.flatten()))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, task: Task, parent_id: int | None = None) -> Task:
        """Insert *task* (and any sub-tasks it carries) with fresh ids."""
        siblings = self._tasks
        if parent_id is not None:
            siblings = self.get(parent_id).sub_tasks
        new_task = self._assign_ids(task)
        if new_task.created_at is None:
            new_task.created_at = datetime.now(UTC)
        siblings.append(new_task)
        self.dirty = True
        logger.debug("Added task %d", new_task.id)
        return new_task

    def edit(self, task_id: int, patch: TaskPatch) -> Task:
        task = self.get(task_id)
        changes = patch.changes()
        if "description" in changes and not (changes["description"] or "").strip():
            raise ValueError("Task description cannot be empty")
        return self._replace(task_id, task.model_copy(update=changes))

    def toggle_complete(self, task_id: int) -> Task:
        task = self.get(task_id)
        return self._replace(task_id, task.model_copy(update={"completed": not task.completed}))

    def cycle_priority(self, task_id: int) -> Task:
        task = self.get(task_id)
        return self._replace(task_id, task.model_copy(update={"priority": task.priority.next()}))

    def delete(self, task_id: int) -> Task:
        """Remove a task together with its whole subtree."""
        found = self._find(task_id)
        if found is None:
            raise NotFoundError(f"task {task_id}")
        _, siblings, idx = found
        removed = siblings.pop(idx)
        self.dirty = True
        logger.debug("Deleted task %d with %d descendants", task_id, len(removed.walk()) - 1)
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, task_id: int) -> tuple[Task | None, list[Task], int] | None:
        """Locate a task: (parent or None, sibling list, index)."""
        stack: list[tuple[Task | None, list[Task]]] = [(None, self._tasks)]
        while stack:
            parent, items = stack.pop()
            for idx, task in enumerate(items):
                if task.id == task_id:
                    return parent, items, idx
                stack.append((task, task.sub_tasks))
        return None

    def _replace(self, task_id: int, new_task: Task) -> Task:
        found = self._find(task_id)
        if found is None:
            raise NotFoundError(f"task {task_id}")
        _, siblings, idx = found
        siblings[idx] = new_task
        self.dirty = True
        return new_task

    def _assign_ids(self, task: Task) -> Task:
        task_id = self._next_id
        self._next_id += 1
        subs = [self._assign_ids(sub) for sub in task.sub_tasks]
        return task.model_copy(update={"id": task_id, "sub_tasks": subs})
