# src/qwix_planner/tasks/task_stats.py

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from .task_models import Task, TaskPriority

HOUR_SECONDS = 60 * 60
UPCOMING_WINDOW_SECONDS = 48 * HOUR_SECONDS


@dataclass(slots=True, frozen=True)
class TaskStats:
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    upcoming_deadlines: int
    completion_rate: float
    avg_completion_hours: float
    estimated_vs_actual_ratio: float
    priority_distribution: dict[str, int] = field(default_factory=dict)
    tag_distribution: dict[str, int] = field(default_factory=dict)


def compute_task_stats(tasks: Iterable[Task], *, now_ts: float | None = None) -> TaskStats:
    """
    Aggregate numbers for the analytics view.

    - overdue: incomplete with a deadline already passed
    - upcoming: incomplete with a deadline within the next 48 hours
    - avg_completion_hours: created -> completed, over completed tasks
    - estimated_vs_actual_ratio: sum(actual) / sum(estimated) over completed tasks that have both
    """
    task_list = list(tasks)
    now = time.time() if now_ts is None else now_ts

    completed = [t for t in task_list if t.completed]
    pending = [t for t in task_list if not t.completed]

    overdue = sum(1 for t in pending if t.deadline is not None and t.deadline < now)
    upcoming = sum(
        1 for t in pending if t.deadline is not None and now < t.deadline < now + UPCOMING_WINDOW_SECONDS
    )

    completion_rate = (len(completed) / len(task_list) * 100.0) if task_list else 0.0

    avg_hours = 0.0
    if completed:
        total_hours = 0.0
        for t in completed:
            if t.completed_at is None:
                continue
            total_hours += (t.completed_at - t.created_at) / HOUR_SECONDS
        avg_hours = total_hours / len(completed)

    est_sum = 0.0
    act_sum = 0.0
    for t in completed:
        if t.estimated_minutes and t.actual_minutes:
            est_sum += t.estimated_minutes
            act_sum += t.actual_minutes
    ratio = (act_sum / est_sum) if est_sum > 0 else 0.0

    priorities = {p.value: 0 for p in (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)}
    tags: dict[str, int] = {}
    for t in task_list:
        priorities[str(t.priority)] = priorities.get(str(t.priority), 0) + 1
        for tag in t.tags or []:
            tags[tag] = tags.get(tag, 0) + 1

    return TaskStats(
        total_tasks=len(task_list),
        completed_tasks=len(completed),
        overdue_tasks=overdue,
        upcoming_deadlines=upcoming,
        completion_rate=completion_rate,
        avg_completion_hours=avg_hours,
        estimated_vs_actual_ratio=ratio,
        priority_distribution=priorities,
        tag_distribution=tags,
    )
