# src/qwix_planner/tasks/task_graph.py

from __future__ import annotations

"""
Task graph model.

Derives two views from a task collection:
- DependencyLink records (prerequisite -> dependent) for graph renderers,
- an AtomSpace: typed atoms (TaskNode / DependencyLink) with outgoing references,
  consumed by the activation engine and the topological scheduler.

The atom space is a derived value. build_atom_space() returns a fresh instance owned by the
caller; nothing here keeps process-wide state.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .task_models import DependencyLink, Task

logger = logging.getLogger(__name__)


class AtomType(StrEnum):
    TASK_NODE = "TaskNode"
    DEPENDENCY_LINK = "DependencyLink"


@dataclass(slots=True, frozen=True)
class Atom:
    id: str
    type: AtomType
    value: dict[str, Any]
    outgoing: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class AtomSpaceStats:
    task_nodes: int
    dependency_links: int
    total_atoms: int


def link_atom_id(source: str, target: str) -> str:
    return f"rel-{source}-{target}"


@dataclass(slots=True)
class AtomSpace:
    """Atoms keyed by id. Insertion order is kept, so queries are deterministic."""

    _atoms: dict[str, Atom] = field(default_factory=dict)

    def add(self, atom: Atom) -> None:
        self._atoms[atom.id] = atom

    def get(self, atom_id: str) -> Atom | None:
        return self._atoms.get(atom_id)

    def atoms_by_type(self, atom_type: AtomType) -> list[Atom]:
        return [a for a in self._atoms.values() if a.type == atom_type]

    def stats(self) -> AtomSpaceStats:
        task_nodes = 0
        links = 0
        for atom in self._atoms.values():
            if atom.type == AtomType.TASK_NODE:
                task_nodes += 1
            elif atom.type == AtomType.DEPENDENCY_LINK:
                links += 1
        return AtomSpaceStats(task_nodes=task_nodes, dependency_links=links, total_atoms=len(self._atoms))

    def __len__(self) -> int:
        return len(self._atoms)

    def __contains__(self, atom_id: object) -> bool:
        return atom_id in self._atoms


def get_dependency_links(tasks: Iterable[Task]) -> list[DependencyLink]:
    """
    One link per (prerequisite, dependent) pair: {source: dep_id, target: task.id}.
    A dependency id repeated on the same task yields a single link.

    Dangling dependency ids are kept; deciding how to draw them is the renderer's job.
    Order: tasks in input order, dependencies in stored order.
    """
    links: list[DependencyLink] = []
    seen: set[tuple[str, str]] = set()
    for task in tasks:
        for dep_id in task.dependencies or []:
            pair = (dep_id, task.id)
            if pair in seen:
                continue
            seen.add(pair)
            links.append(DependencyLink(source=dep_id, target=task.id))
    return links


def _task_node(task: Task) -> Atom:
    return Atom(
        id=task.id,
        type=AtomType.TASK_NODE,
        value={
            "title": task.title,
            "priority": task.priority,
            "completed": task.completed,
            "estimated_minutes": task.estimated_minutes,
            "deadline": task.deadline,
        },
        outgoing=tuple(task.dependencies or ()),
    )


def build_atom_space(tasks: Iterable[Task]) -> AtomSpace:
    """
    Build a new AtomSpace from tasks.

    - one TaskNode per task (outgoing = the task's dependency ids),
    - one DependencyLink per (prerequisite, dependent) pair, id "rel-<dep>-<task>",
      outgoing = (prerequisite, dependent).

    TaskNodes are added first so that a link id can never shadow a task id.
    """
    task_list = list(tasks)
    space = AtomSpace()

    for task in task_list:
        space.add(_task_node(task))

    for task in task_list:
        for dep_id in task.dependencies or []:
            link_id = link_atom_id(dep_id, task.id)
            if link_id in space:
                continue
            space.add(
                Atom(
                    id=link_id,
                    type=AtomType.DEPENDENCY_LINK,
                    value={"label": "depends_on"},
                    outgoing=(dep_id, task.id),
                )
            )

    logger.debug("Atom space built: %s", space.stats())
    return space


def resolve_dependency_path(graph: AtomSpace, start_id: str, end_id: str) -> list[str]:
    """
    Find a chain of tasks connecting start_id to end_id through dependency links.

    Links are walked in both directions (prerequisite <-> dependent). Returns the path
    including both endpoints, or [] if there is none.
    """
    start = graph.get(start_id)
    if start is None or start.type != AtomType.TASK_NODE:
        return []
    if start_id == end_id:
        return [start_id]

    # Undirected adjacency in link order.
    adjacency: dict[str, list[str]] = {}
    for link in graph.atoms_by_type(AtomType.DEPENDENCY_LINK):
        a, b = link.outgoing
        if a == b:
            continue
        adjacency.setdefault(a, []).append(b)
        adjacency.setdefault(b, []).append(a)

    visited = {start_id}
    path = [start_id]
    stack = [iter(adjacency.get(start_id, []))]

    while stack:
        for nxt in stack[-1]:
            if nxt in visited:
                continue
            visited.add(nxt)
            path.append(nxt)
            if nxt == end_id:
                return path
            if nxt not in graph:
                # dangling reference: can end a path, never continues one
                path.pop()
                continue
            stack.append(iter(adjacency.get(nxt, [])))
            break
        else:
            stack.pop()
            path.pop()

    return []
