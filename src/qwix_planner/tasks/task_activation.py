# src/qwix_planner/tasks/task_activation.py

from __future__ import annotations

"""
Spreading-activation urgency scores.

Seed phase: each task starts from its priority (high 1.0, medium 0.6, low 0.3), raised
(never lowered) by deadline proximity: overdue -> 1.0, < 1 day -> 0.9, < 3 days -> 0.7.

Propagation phase: for a fixed number of rounds every prerequisite passes
`activation * spread_factor` to each task that depends on it. All updates of one round
read the snapshot taken at the start of that round.

Values are not clamped; consumers that need a bounded number scale it themselves.
Deadline handling reads the clock, so two calls at different instants may differ.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from .task_graph import AtomSpace, AtomType, build_atom_space
from .task_models import Task, TaskPriority

logger = logging.getLogger(__name__)

SPREAD_FACTOR = 0.3
SPREAD_ITERATIONS = 3

DAY_SECONDS = 24 * 60 * 60

PRIORITY_ACTIVATION: dict[TaskPriority, float] = {
    TaskPriority.HIGH: 1.0,
    TaskPriority.MEDIUM: 0.6,
    TaskPriority.LOW: 0.3,
}


@dataclass(slots=True, frozen=True)
class ActivationResult:
    """One bar of the activation chart."""

    task_id: str
    title: str
    value: float
    color: str


def seed_activation(task: Task, *, now_ts: float | None = None) -> float:
    """Initial activation in [0, 1] from priority and deadline proximity."""
    value = PRIORITY_ACTIVATION.get(task.priority, 0.0)

    if task.deadline is not None:
        now = time.time() if now_ts is None else now_ts
        days_left = (task.deadline - now) / DAY_SECONDS
        if days_left < 0:
            value = max(value, 1.0)
        elif days_left < 1:
            value = max(value, 0.9)
        elif days_left < 3:
            value = max(value, 0.7)

    return value


def spread_activation(
    graph: AtomSpace,
    seeds: dict[str, float],
    *,
    spread_factor: float = SPREAD_FACTOR,
    iterations: int = SPREAD_ITERATIONS,
) -> dict[str, float]:
    """
    Run `iterations` rounds of simultaneous propagation over the graph's dependency links.

    Only ids present in `seeds` send or receive activation.
    """
    activation = dict(seeds)

    # prerequisite -> dependents, each dependent listed once per prerequisite
    dependents: dict[str, list[str]] = {}
    for link in graph.atoms_by_type(AtomType.DEPENDENCY_LINK):
        source, target = link.outgoing
        if source in activation and target in activation:
            dependents.setdefault(source, []).append(target)

    for _ in range(max(0, int(iterations))):
        snapshot = dict(activation)
        for source, targets in dependents.items():
            flow = snapshot[source] * spread_factor
            for target in targets:
                activation[target] += flow

    return activation


def calculate_activation(
    tasks: Iterable[Task],
    *,
    now_ts: float | None = None,
    spread_factor: float = SPREAD_FACTOR,
    iterations: int = SPREAD_ITERATIONS,
    graph: AtomSpace | None = None,
) -> dict[str, float]:
    """
    Activation per task id.

    A prebuilt graph may be passed in to avoid rebuilding it; otherwise one is built
    from `tasks` for this call only.
    """
    task_list = list(tasks)
    now = time.time() if now_ts is None else now_ts

    if graph is None:
        graph = build_atom_space(task_list)

    seeds: dict[str, float] = {}
    for task in task_list:
        seeds[task.id] = seed_activation(task, now_ts=now)

    activation = spread_activation(graph, seeds, spread_factor=spread_factor, iterations=iterations)
    logger.debug("Activation computed for %d tasks (factor=%s rounds=%s)", len(activation), spread_factor, iterations)
    return activation


def activation_color(value: float) -> str:
    if value > 0.8:
        return "#ef4444"
    if value > 0.5:
        return "#f97316"
    if value > 0.3:
        return "#3b82f6"
    return "#22c55e"


def activation_chart(
    tasks: Iterable[Task],
    *,
    limit: int = 8,
    now_ts: float | None = None,
    spread_factor: float = SPREAD_FACTOR,
    iterations: int = SPREAD_ITERATIONS,
) -> list[ActivationResult]:
    """Top `limit` incomplete tasks by activation, rounded to 2 decimals, highest first."""
    task_list = list(tasks)
    activation = calculate_activation(
        task_list,
        now_ts=now_ts,
        spread_factor=spread_factor,
        iterations=iterations,
    )

    rows: list[ActivationResult] = []
    for task in task_list:
        if task.completed:
            continue
        value = activation.get(task.id, 0.0)
        rows.append(
            ActivationResult(
                task_id=task.id,
                title=task.title,
                value=round(value, 2),
                color=activation_color(value),
            )
        )

    rows.sort(key=lambda r: r.value, reverse=True)
    return rows[: max(0, int(limit))]
