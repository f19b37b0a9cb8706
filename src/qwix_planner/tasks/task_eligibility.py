# src/qwix_planner/tasks/task_eligibility.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task


def _completion_index(tasks: Iterable[Task]) -> dict[str, bool]:
    # first task wins on duplicate ids
    out: dict[str, bool] = {}
    for t in tasks:
        out.setdefault(t.id, t.completed)
    return out


def can_task_start(task: Task, all_tasks: Iterable[Task]) -> bool:
    """
    True if every dependency of `task` is a completed task in `all_tasks`.

    A dependency id that matches no task counts as not completed, so it blocks the task.
    """
    if not task.dependencies:
        return True

    completed_by_id = _completion_index(all_tasks)
    return all(completed_by_id.get(dep_id, False) for dep_id in task.dependencies)


def split_ready_blocked(tasks: list[Task]) -> tuple[list[Task], list[Task]]:
    """Partition incomplete tasks into (ready, blocked), keeping input order."""
    completed_by_id = _completion_index(tasks)
    ready: list[Task] = []
    blocked: list[Task] = []
    for task in tasks:
        if task.completed:
            continue
        if all(completed_by_id.get(dep_id, False) for dep_id in task.dependencies or []):
            ready.append(task)
        else:
            blocked.append(task)
    return ready, blocked
