# src/qwix_planner/tasks/task_toposort.py

from __future__ import annotations

"""
Dependency-respecting task order.

Depth-first postorder with three colors (unvisited / in progress / done), walked with an
explicit stack so large graphs cannot hit the recursion limit. Each task is emitted after all
of its existing dependencies; ids that match no task are skipped.

Cycles never raise. When one is found the partial result is discarded in favour of:
    [tasks not finished, in input order] + [finished tasks, in emitted order]
so the caller always gets every input task back.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from .task_graph import AtomSpace, AtomType
from .task_models import Task

logger = logging.getLogger(__name__)


class _Mark(Enum):
    IN_PROGRESS = 1
    DONE = 2


def _dependencies_of(task: Task, graph: AtomSpace | None) -> tuple[str, ...]:
    if graph is not None:
        atom = graph.get(task.id)
        if atom is not None and atom.type == AtomType.TASK_NODE:
            return atom.outgoing
    return tuple(task.dependencies or ())


def topological_sort(tasks: Iterable[Task], *, graph: AtomSpace | None = None) -> list[Task]:
    """
    Order tasks so that prerequisites come before dependents.

    Visit order is input order. `graph` is optional; when given, dependency ids are read from
    its TaskNode atoms.

    Task ids must be unique (the store enforces it); with repeated ids, later copies may be
    dropped from the result.
    """
    task_list = list(tasks)

    by_id: dict[str, Task] = {}
    for task in task_list:
        by_id.setdefault(task.id, task)

    marks: dict[str, _Mark] = {}
    ordered: list[Task] = []

    def visit(root_id: str) -> bool:
        """Returns False as soon as a cycle is reached."""
        marks[root_id] = _Mark.IN_PROGRESS
        stack = [(root_id, iter(_dependencies_of(by_id[root_id], graph)))]

        while stack:
            node_id, deps = stack[-1]
            for dep_id in deps:
                dep = by_id.get(dep_id)
                if dep is None:
                    continue
                mark = marks.get(dep_id)
                if mark is _Mark.IN_PROGRESS:
                    logger.warning("Dependency cycle detected at task %s (via %s)", dep_id, node_id)
                    return False
                if mark is None:
                    marks[dep_id] = _Mark.IN_PROGRESS
                    stack.append((dep_id, iter(_dependencies_of(dep, graph))))
                    break
            else:
                stack.pop()
                marks[node_id] = _Mark.DONE
                ordered.append(by_id[node_id])

        return True

    for task in task_list:
        if marks.get(task.id) is _Mark.DONE:
            continue
        if not visit(task.id):
            pending = [t for t in task_list if marks.get(t.id) is not _Mark.DONE]
            return pending + ordered

    return ordered
