# src/qwix_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task, TaskPriority


class TaskRepo(Protocol):
    """Persistence collaborator: hands task collections in, takes edits back."""

    def count_tasks(self) -> int: ...
    def get_task(self, task_id: str) -> Task | None: ...
    def list_tasks(self, *, include_completed: bool = True) -> list[Task]: ...

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
    ) -> str: ...

    def update_task_fields(
            self,
            task_id: str,
            *,
            title: str | None = None,
            priority: TaskPriority | None = None,
            deadline: float | None = None,
            clear_deadline: bool = False,
            dependencies: list[str] | None = None,
            estimated_minutes: float | None = None,
            description: str | None = None,
            tags: list[str] | None = None,
            started_at: float | None = None,
    ) -> bool: ...

    def set_completed(
            self,
            task_id: str,
            completed: bool,
            *,
            now_ts: float | None = None,
            actual_minutes: float | None = None,
    ) -> bool: ...

    def delete_task(self, task_id: str) -> bool: ...
    def close(self) -> None: ...
