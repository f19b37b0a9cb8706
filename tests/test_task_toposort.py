# tests/test_task_toposort.py

from __future__ import annotations

from qwix_planner.tasks.task_graph import build_atom_space
from qwix_planner.tasks.task_toposort import topological_sort

from .fakes import make_task


def _ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def _assert_respects_edges(tasks, ordered) -> None:
    pos = {t.id: i for i, t in enumerate(ordered)}
    for task in tasks:
        for dep_id in task.dependencies:
            if dep_id in pos:
                assert pos[dep_id] < pos[task.id], f"{dep_id} must come before {task.id}"


def test_prerequisites_come_first() -> None:
    tasks = [
        make_task("deploy", deps=["test", "build"]),
        make_task("test", deps=["build"]),
        make_task("build", deps=["design"]),
        make_task("design"),
        make_task("docs", deps=["design"]),
    ]

    ordered = topological_sort(tasks)

    assert sorted(_ids(ordered)) == sorted(_ids(tasks))
    assert len(ordered) == len(tasks)
    _assert_respects_edges(tasks, ordered)
    assert _ids(ordered) == ["design", "build", "test", "deploy", "docs"]


def test_independent_tasks_keep_input_order() -> None:
    tasks = [make_task("c"), make_task("a"), make_task("b")]
    assert _ids(topological_sort(tasks)) == ["c", "a", "b"]


def test_graph_argument_gives_same_result() -> None:
    tasks = [make_task("b", deps=["a"]), make_task("a")]
    assert _ids(topological_sort(tasks, graph=build_atom_space(tasks))) == ["a", "b"]


def test_missing_dependency_is_skipped() -> None:
    tasks = [make_task("b", deps=["ghost", "a"]), make_task("a")]
    assert _ids(topological_sort(tasks)) == ["a", "b"]


def test_two_cycle_returns_both_once() -> None:
    tasks = [make_task("a", deps=["b"]), make_task("b", deps=["a"])]

    ordered = topological_sort(tasks)

    assert _ids(ordered) == ["a", "b"]


def test_cycle_pushes_unfinished_tasks_to_the_front() -> None:
    tasks = [
        make_task("x"),
        make_task("a", deps=["b"]),
        make_task("b", deps=["a"]),
        make_task("y", deps=["x"]),
    ]

    ordered = topological_sort(tasks)

    # x finished before the cycle was hit; everything else keeps input order up front
    assert _ids(ordered) == ["a", "b", "y", "x"]


def test_self_dependency_is_treated_as_a_cycle() -> None:
    tasks = [make_task("ok"), make_task("loop", deps=["loop"])]
    assert _ids(topological_sort(tasks)) == ["loop", "ok"]


def test_empty() -> None:
    assert topological_sort([]) == []


def test_long_chain_does_not_recurse() -> None:
    n = 5000
    tasks = [make_task(f"t{i}", deps=[f"t{i - 1}"] if i else []) for i in range(n)]
    tasks.reverse()

    ordered = topological_sort(tasks)

    assert _ids(ordered) == [f"t{i}" for i in range(n)]
