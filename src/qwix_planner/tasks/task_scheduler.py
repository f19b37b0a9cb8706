# src/qwix_planner/tasks/task_scheduler.py

from __future__ import annotations

"""
Schedule composer.

Produces the recommended work sequence:
- precedence comes from the topological order (a task never lands ahead of an
  incomplete prerequisite),
- among tasks that are free at the same point, higher activation goes first
  (ties keep topological position),
- completed tasks come last.

If the activation path fails for any reason, a simpler deterministic scorer is used instead
(ready tasks by score, then blocked tasks, then completed ones). Callers never see an exception
for bad task data.
"""

import heapq
import logging
import math
import time
from collections.abc import Iterable
from functools import cmp_to_key

from .task_activation import SPREAD_FACTOR, SPREAD_ITERATIONS, calculate_activation
from .task_eligibility import split_ready_blocked
from .task_graph import build_atom_space
from .task_models import Task, TaskPriority
from .task_toposort import topological_sort

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60

PRIORITY_WEIGHT: dict[TaskPriority, float] = {
    TaskPriority.HIGH: 30.0,
    TaskPriority.MEDIUM: 20.0,
    TaskPriority.LOW: 10.0,
}
DEADLINE_MAX_BONUS = 50.0
DEADLINE_BONUS_PER_DAY = 5.0
DEADLINE_SOON_BONUS = 15.0
DURATION_MAX_BONUS = 10.0
NO_DEPENDENCY_BONUS = 5.0


# ---- fallback scorer ----


def calculate_task_score(task: Task, *, now_ts: float | None = None) -> float:
    """
    Deterministic score, higher means do it sooner.

    priority weight + deadline proximity (capped, plus a bonus under 24h)
    + small bonus for short estimates + bonus for tasks without dependencies.
    """
    score = PRIORITY_WEIGHT.get(task.priority, 0.0)

    if task.deadline is not None:
        now = time.time() if now_ts is None else now_ts
        seconds_left = task.deadline - now
        days_left = max(0, math.floor(seconds_left / DAY_SECONDS))
        score += max(0.0, DEADLINE_MAX_BONUS - days_left * DEADLINE_BONUS_PER_DAY)
        if seconds_left < DAY_SECONDS:
            score += DEADLINE_SOON_BONUS

    if task.estimated_minutes and task.estimated_minutes > 0:
        score += max(0.0, DURATION_MAX_BONUS - task.estimated_minutes / 60.0)

    if not task.dependencies:
        score += NO_DEPENDENCY_BONUS

    return score


def fallback_task_order(tasks: Iterable[Task], *, now_ts: float | None = None) -> list[Task]:
    """Ready tasks by score, then blocked tasks, then completed tasks."""
    task_list = list(tasks)
    now = time.time() if now_ts is None else now_ts

    scores = {id(t): calculate_task_score(t, now_ts=now) for t in task_list}
    ready, blocked = split_ready_blocked(task_list)
    completed = [t for t in task_list if t.completed]

    ready.sort(key=lambda t: scores[id(t)], reverse=True)

    def compare_blocked(a: Task, b: Task) -> int:
        # direct dependency between two blocked tasks wins over score
        if a.id in (b.dependencies or []):
            return -1
        if b.id in (a.dependencies or []):
            return 1
        diff = scores[id(b)] - scores[id(a)]
        return (diff > 0) - (diff < 0)

    blocked.sort(key=cmp_to_key(compare_blocked))

    return ready + blocked + completed


# ---- activation-based composer ----


def compose_order(topo_order: list[Task], activation: dict[str, float]) -> list[Task]:
    """
    Merge a topological order with activation scores.

    Incomplete tasks are emitted one at a time: among those whose incomplete prerequisites
    were all emitted already, the highest activation wins (ties: earlier topological position).
    When nothing is free (cycle), the earliest remaining task is released.
    """
    incomplete = [t for t in topo_order if not t.completed]
    completed = [t for t in topo_order if t.completed]
    n = len(incomplete)

    position: dict[str, int] = {}
    for i, task in enumerate(incomplete):
        position.setdefault(task.id, i)

    waiting = [0] * n
    dependents: dict[str, list[int]] = {}
    for i, task in enumerate(incomplete):
        prereqs = {d for d in task.dependencies or [] if d in position and d != task.id}
        waiting[i] = len(prereqs)
        for dep_id in prereqs:
            dependents.setdefault(dep_id, []).append(i)

    def entry(i: int) -> tuple[float, int]:
        return (-activation.get(incomplete[i].id, 0.0), i)

    heap = [entry(i) for i in range(n) if waiting[i] == 0]
    heapq.heapify(heap)

    emitted = [False] * n
    out: list[Task] = []
    cursor = 0

    while len(out) < n:
        if heap:
            _, i = heapq.heappop(heap)
            if emitted[i]:
                continue
        else:
            while emitted[cursor]:
                cursor += 1
            i = cursor
            logger.debug("No free task left; releasing %s to break a cycle", incomplete[i].id)

        emitted[i] = True
        task = incomplete[i]
        out.append(task)

        if position[task.id] != i:
            continue
        for j in dependents.get(task.id, []):
            waiting[j] -= 1
            if waiting[j] == 0 and not emitted[j]:
                heapq.heappush(heap, entry(j))

    return out + completed


def get_optimized_task_order(
    tasks: Iterable[Task],
    *,
    now_ts: float | None = None,
    spread_factor: float = SPREAD_FACTOR,
    iterations: int = SPREAD_ITERATIONS,
) -> list[Task]:
    """Recommended work sequence over all tasks (incomplete first, completed last)."""
    task_list = list(tasks)
    if not task_list:
        return []

    now = time.time() if now_ts is None else now_ts

    try:
        graph = build_atom_space(task_list)
        topo = topological_sort(task_list, graph=graph)
        activation = calculate_activation(
            task_list,
            now_ts=now,
            spread_factor=spread_factor,
            iterations=iterations,
            graph=graph,
        )
        return compose_order(topo, activation)
    except Exception:
        logger.exception("Activation scheduling failed for %d tasks; using fallback order", len(task_list))
        return fallback_task_order(task_list, now_ts=now)


def get_recommended_next_task(
    tasks: Iterable[Task],
    *,
    now_ts: float | None = None,
    spread_factor: float = SPREAD_FACTOR,
    iterations: int = SPREAD_ITERATIONS,
) -> Task | None:
    """First incomplete task of the optimized order, or None."""
    for task in get_optimized_task_order(
        tasks,
        now_ts=now_ts,
        spread_factor=spread_factor,
        iterations=iterations,
    ):
        if not task.completed:
            return task
    return None
