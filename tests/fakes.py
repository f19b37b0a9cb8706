# tests/fakes.py

from __future__ import annotations

import itertools
import time
from dataclasses import replace

from qwix_planner.tasks.task_models import Task, TaskPriority

NOW = 1_800_000_000.0
DAY = 24 * 60 * 60


def make_task(
    task_id: str,
    *,
    priority: str = "medium",
    deps: list[str] | None = None,
    completed: bool = False,
    deadline: float | None = None,
    estimated_minutes: float | None = None,
    title: str | None = None,
    tags: list[str] | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        completed=completed,
        priority=TaskPriority(priority),
        deadline=deadline,
        dependencies=list(deps or []),
        estimated_minutes=estimated_minutes,
        created_at=NOW - DAY,
        tags=list(tags or []),
    )


class InMemoryTaskRepo:
    """
    In-memory TaskRepo.

    Keeps insertion order like TaskStore so scheduling tests do not need SQLite.
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self._ids = itertools.count(1)

    def count_tasks(self) -> int:
        return len(self.tasks)

    def get_task(self, task_id: str) -> Task | None:
        return self.tasks.get(task_id)

    def list_tasks(self, *, include_completed: bool = True) -> list[Task]:
        return [t for t in self.tasks.values() if include_completed or not t.completed]

    def add_task(
        self,
        *,
        title: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        deadline: float | None = None,
        dependencies: list[str] | None = None,
        estimated_minutes: float | None = None,
        description: str = "",
        tags: list[str] | None = None,
        task_id: str | None = None,
        created_at: float | None = None,
    ) -> str:
        new_id = task_id or f"t{next(self._ids)}"
        if new_id in self.tasks:
            raise ValueError(f"task id already exists: {new_id}")
        self.tasks[new_id] = Task(
            id=new_id,
            title=title.strip(),
            priority=TaskPriority(priority),
            deadline=deadline,
            dependencies=list(dependencies or []),
            estimated_minutes=estimated_minutes,
            created_at=time.time() if created_at is None else created_at,
            description=description,
            tags=list(tags or []),
        )
        return new_id

    def update_task_fields(self, task_id: str, **fields) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return False
        clear_deadline = fields.pop("clear_deadline", False)
        changes = {k: v for k, v in fields.items() if v is not None}
        if clear_deadline:
            changes["deadline"] = None
        self.tasks[task_id] = replace(task, **changes)
        return True

    def set_completed(self, task_id, completed, *, now_ts=None, actual_minutes=None) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return False
        if completed:
            self.tasks[task_id] = replace(
                task,
                completed=True,
                completed_at=time.time() if now_ts is None else now_ts,
                actual_minutes=actual_minutes,
            )
        else:
            self.tasks[task_id] = replace(task, completed=False, completed_at=None, actual_minutes=None)
        return True

    def delete_task(self, task_id: str) -> bool:
        return self.tasks.pop(task_id, None) is not None

    def close(self) -> None:
        return
