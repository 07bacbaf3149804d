"""Task storage — a JSON-backed tree of tasks and sub-tasks."""

from marknote.tasks.dates import parse_due_date
from marknote.tasks.models import Priority, Task, TaskPatch
from marknote.tasks.store import TaskStore

__all__ = ["Priority", "Task", "TaskPatch", "TaskStore", "parse_due_date"]
