# tests/test_task_graph.py

from __future__ import annotations

from qwix_planner.tasks.task_graph import (
    AtomType,
    build_atom_space,
    get_dependency_links,
    resolve_dependency_path,
)
from qwix_planner.tasks.task_models import DependencyLink

from .fakes import make_task


def test_dependency_links_follow_task_then_dependency_order() -> None:
    tasks = [
        make_task("a"),
        make_task("b", deps=["a"]),
        make_task("c", deps=["b", "a", "ghost"]),
    ]

    links = get_dependency_links(tasks)

    assert links == [
        DependencyLink(source="a", target="b"),
        DependencyLink(source="b", target="c"),
        DependencyLink(source="a", target="c"),
        DependencyLink(source="ghost", target="c"),
    ]
    # pure: same input, same output
    assert get_dependency_links(tasks) == links


def test_dependency_links_empty() -> None:
    assert get_dependency_links([]) == []
    assert get_dependency_links([make_task("a")]) == []


def test_atom_space_has_task_nodes_and_links() -> None:
    tasks = [make_task("1"), make_task("2", deps=["1"]), make_task("3", deps=["1", "2", "1"])]

    space = build_atom_space(tasks)
    stats = space.stats()

    assert stats.task_nodes == 3
    # duplicate "1" on task 3 collapses into one link atom
    assert stats.dependency_links == 3
    assert stats.total_atoms == 6

    link = space.get("rel-1-2")
    assert link is not None
    assert link.type == AtomType.DEPENDENCY_LINK
    assert link.outgoing == ("1", "2")
    assert link.value == {"label": "depends_on"}

    node = space.get("3")
    assert node is not None
    assert node.type == AtomType.TASK_NODE
    assert node.outgoing == ("1", "2", "1")
    assert node.value["title"] == "Task 3"


def test_each_build_returns_an_independent_space() -> None:
    first = build_atom_space([make_task("a"), make_task("b", deps=["a"])])
    second = build_atom_space([make_task("x")])

    assert len(first) == 3
    assert len(second) == 1
    assert first.get("x") is None


def test_repeated_dependency_id_yields_one_link() -> None:
    tasks = [make_task("a"), make_task("b", deps=["a", "a"])]

    links = get_dependency_links(tasks)

    assert links == [DependencyLink(source="a", target="b")]
    assert build_atom_space(tasks).stats().dependency_links == len(links)


def test_resolve_dependency_path_walks_links_both_ways() -> None:
    tasks = [make_task("a"), make_task("b", deps=["a"]), make_task("c", deps=["b"]), make_task("z")]
    space = build_atom_space(tasks)

    assert resolve_dependency_path(space, "a", "c") == ["a", "b", "c"]
    assert resolve_dependency_path(space, "c", "a") == ["c", "b", "a"]
    assert resolve_dependency_path(space, "a", "a") == ["a"]
    assert resolve_dependency_path(space, "a", "z") == []
    assert resolve_dependency_path(space, "unknown", "a") == []


def test_resolve_dependency_path_does_not_pass_through_dangling_ids() -> None:
    # a and b share a missing prerequisite; that is not a path between them
    space = build_atom_space([make_task("a", deps=["ghost"]), make_task("b", deps=["ghost"])])

    assert resolve_dependency_path(space, "a", "b") == []
    assert resolve_dependency_path(space, "a", "ghost") == ["a", "ghost"]
