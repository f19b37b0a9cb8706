# tests/test_commands.py

from __future__ import annotations

from qwix_planner.cli.commands import CommandRegistry, parse_deadline, registry


def test_command_registry_routes_and_maps_errors(state) -> None:
    reg = CommandRegistry()
    called = {"ok": 0}

    def ok(state, args):
        called["ok"] += 1
        return "ok " + " ".join(args)

    def bad_value(state, args):
        raise ValueError("nope")

    def bad_key(state, args):
        raise KeyError("abc")

    reg.register("ok", ok, "ok", aliases=["k"])
    reg.register("bad", bad_value, "bad")
    reg.register("gone", bad_key, "gone")

    assert reg.handle(state, "/ok a b") == "ok a b"
    assert reg.handle(state, "/K") == "ok "
    assert called["ok"] == 2
    assert reg.handle(state, "/bad") == "Error: nope"
    assert reg.handle(state, "/gone") == "No such task: abc"


def test_command_registry_unknown_and_non_command(state) -> None:
    assert registry.handle(state, "hello") is None
    assert "Unknown command" in (registry.handle(state, "/nope") or "")
    assert "Empty command" in (registry.handle(state, "/") or "")


def test_add_list_next_done_flow(state) -> None:
    reply = registry.handle(state, "/add Design the API priority=high est=60 tags=work")
    assert reply is not None and reply.startswith("Added [")

    design = state.task_store.list_tasks()[0]
    assert design.title == "Design the API"
    assert design.estimated_minutes == 60
    assert design.tags == ["work"]

    reply = registry.handle(state, f"/add Build it after={design.id}")
    assert reply is not None and reply.endswith("blocked")
    build = state.task_store.list_tasks()[1]

    listing = registry.handle(state, "/list") or ""
    assert listing.index(f"[{design.id}]") < listing.index(f"[{build.id}]")

    assert design.id in (registry.handle(state, "/next") or "")

    assert "Completed" in (registry.handle(state, f"/done {design.id} actual=45") or "")
    assert build.id in (registry.handle(state, "/next") or "")

    registry.handle(state, f"/done {build.id}")
    assert "Nothing to do" in (registry.handle(state, "/next") or "")


def test_graph_and_analytics_commands(state) -> None:
    registry.handle(state, "/add A priority=high")
    a = state.task_store.list_tasks()[0]
    registry.handle(state, f"/add B after={a.id}")
    b = state.task_store.list_tasks()[1]

    assert f"{a.id} -> {b.id}" in (registry.handle(state, "/links") or "")
    atoms = registry.handle(state, "/atoms") or ""
    assert "Task nodes: 2" in atoms and "Dependency links: 1" in atoms and "Total atoms: 3" in atoms
    assert f"{a.id} - {b.id}" in (registry.handle(state, f"/path {a.id} {b.id}") or "")
    assert b.id in (registry.handle(state, "/activation") or "")
    assert "Total: 2" in (registry.handle(state, "/stats") or "")


def test_user_errors_become_messages(state) -> None:
    assert (registry.handle(state, "/done missing") or "").startswith("No such task")
    assert (registry.handle(state, "/add X after=missing") or "").startswith("Error:")
    assert (registry.handle(state, "/add X due=tomorrow") or "").startswith("Error:")
    assert (registry.handle(state, "/add X est=soon") or "").startswith("Error:")
    assert (registry.handle(state, "/add X priority=huge") or "").startswith("Error:")
    assert state.task_store.count_tasks() == 0


def test_parse_deadline_date_means_end_of_day() -> None:
    assert parse_deadline("2030-01-02") > parse_deadline("2030-01-02T12:00")
    assert parse_deadline("2030-01-02") < parse_deadline("2030-01-03T00:00")


def test_unknown_key_value_words_stay_in_the_title(state) -> None:
    registry.handle(state, "/add set x=1 in config priority=low")

    task = state.task_store.list_tasks()[0]
    assert task.title == "set x=1 in config"
    assert task.priority == "low"


def test_non_finite_estimates_are_rejected(state) -> None:
    assert (registry.handle(state, "/add thing est=nan") or "").startswith("Error:")
    assert (registry.handle(state, "/add thing est=inf") or "").startswith("Error:")
    assert state.task_store.count_tasks() == 0
