# src/qwix_planner/tasks/task_api.py

from __future__ import annotations

import logging
import math
import time

from ..core.state import AppState
from .task_models import Task, TaskPriority

logger = logging.getLogger(__name__)


def _require_task(state: AppState, task_id: str) -> Task:
    task = state.task_store.get_task(task_id)
    if task is None:
        raise KeyError(task_id)
    return task


def _positive_minutes(value: float | None) -> bool:
    return value is None or (math.isfinite(value) and value > 0)


def create_task(
    state: AppState,
    *,
    title: str,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    deadline: float | None = None,
    dependencies: list[str] | None = None,
    estimated_minutes: float | None = None,
    description: str = "",
    tags: list[str] | None = None,
    task_id: str | None = None,
) -> Task:
    """
    Validate and store a new task.

    Rules:
    - title must not be empty
    - estimated_minutes, when given, must be a positive finite number
    - dependencies must name existing tasks and must not name the task itself
    """
    if not title or not title.strip():
        raise ValueError("title is required")

    try:
        prio = TaskPriority(str(priority).strip().lower())
    except ValueError:
        raise ValueError(f"unknown priority: {priority!r} (use low, medium or high)") from None

    if not _positive_minutes(estimated_minutes):
        raise ValueError("estimated duration must be positive")

    deps: list[str] = []
    for dep_id in dependencies or []:
        dep_id = dep_id.strip()
        if not dep_id or dep_id in deps:
            continue
        if task_id is not None and dep_id == task_id:
            raise ValueError("a task cannot depend on itself")
        if state.task_store.get_task(dep_id) is None:
            raise ValueError(f"unknown dependency: {dep_id}")
        deps.append(dep_id)

    new_id = state.task_store.add_task(
        title=title,
        priority=prio,
        deadline=deadline,
        dependencies=deps,
        estimated_minutes=estimated_minutes,
        description=description,
        tags=[t.strip() for t in tags or [] if t.strip()],
        task_id=task_id,
    )
    logger.info("Task created id=%s title=%r deps=%s", new_id, title, deps)
    return _require_task(state, new_id)


def complete_task(
    state: AppState,
    task_id: str,
    *,
    actual_minutes: float | None = None,
    now_ts: float | None = None,
) -> Task:
    if not _positive_minutes(actual_minutes):
        raise ValueError("actual duration must be positive")
    _require_task(state, task_id)
    state.task_store.set_completed(
        task_id,
        True,
        now_ts=time.time() if now_ts is None else now_ts,
        actual_minutes=actual_minutes,
    )
    logger.info("Task %s -> completed", task_id)
    return _require_task(state, task_id)


def reopen_task(state: AppState, task_id: str) -> Task:
    _require_task(state, task_id)
    state.task_store.set_completed(task_id, False)
    logger.info("Task %s -> reopened", task_id)
    return _require_task(state, task_id)


def add_dependency(state: AppState, task_id: str, prerequisite_id: str) -> Task:
    """Make task_id depend on prerequisite_id. Cycles between several tasks are allowed."""
    if task_id == prerequisite_id:
        raise ValueError("a task cannot depend on itself")
    task = _require_task(state, task_id)
    _require_task(state, prerequisite_id)

    if prerequisite_id in task.dependencies:
        return task

    state.task_store.update_task_fields(task_id, dependencies=[*task.dependencies, prerequisite_id])
    logger.info("Dependency added %s -> %s", prerequisite_id, task_id)
    return _require_task(state, task_id)


def remove_dependency(state: AppState, task_id: str, prerequisite_id: str) -> Task:
    task = _require_task(state, task_id)
    if prerequisite_id not in task.dependencies:
        return task
    state.task_store.update_task_fields(
        task_id,
        dependencies=[d for d in task.dependencies if d != prerequisite_id],
    )
    logger.info("Dependency removed %s -> %s", prerequisite_id, task_id)
    return _require_task(state, task_id)


def delete_task(state: AppState, task_id: str) -> None:
    if not state.task_store.delete_task(task_id):
        raise KeyError(task_id)
    logger.info("Task %s deleted", task_id)
