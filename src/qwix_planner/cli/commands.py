# src/qwix_planner/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, time as dt_time

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_activation import activation_chart
from ..tasks.task_eligibility import can_task_start
from ..tasks.task_graph import build_atom_space, get_dependency_links, resolve_dependency_path
from ..tasks.task_models import Task
from ..tasks.task_scheduler import get_optimized_task_order, get_recommended_next_task
from ..tasks.task_stats import compute_task_stats

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /next, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        ValueError / KeyError from handlers are user mistakes and become the reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except KeyError as e:
            return f"No such task: {e.args[0] if e.args else '?'}"
        except ValueError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

ADD_OPTIONS = frozenset({"priority", "due", "est", "after", "tags"})
DONE_OPTIONS = frozenset({"actual"})


# ---- helpers ----


def _scheduler_kwargs(state: AppState) -> dict[str, float | int]:
    settings = state.settings
    return {
        "spread_factor": float(getattr(settings, "spread_factor", 0.3)),
        "iterations": int(getattr(settings, "spread_iterations", 3)),
    }


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def parse_deadline(raw: str) -> float:
    """
    "YYYY-MM-DD" (end of that day, local time) or "YYYY-MM-DDTHH:MM" -> epoch seconds.
    """
    try:
        if "T" in raw or " " in raw:
            dt = datetime.fromisoformat(raw)
        else:
            dt = datetime.combine(datetime.fromisoformat(raw).date(), dt_time(23, 59, 59))
    except ValueError:
        raise ValueError(f"bad date: {raw!r} (use YYYY-MM-DD or YYYY-MM-DDTHH:MM)") from None
    return dt.timestamp()


def _parse_number(raw: str, what: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{what} must be a number of minutes, got {raw!r}") from None


def _split_options(args: list[str], known: frozenset[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value options. Tokens with other keys stay words."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in known:
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def _csv(raw: str) -> list[str]:
    return [p.strip() for p in raw.split(",") if p.strip()]


def format_task(task: Task, all_tasks: list[Task]) -> str:
    if task.completed:
        flag = "done"
    elif can_task_start(task, all_tasks):
        flag = "ready"
    else:
        flag = "blocked"

    details = [str(task.priority)]
    if task.deadline is not None:
        details.append(f"due {_fmt_ts(task.deadline)}")
    if task.estimated_minutes:
        details.append(f"est {task.estimated_minutes:g}m")
    if task.dependencies:
        details.append("after " + ",".join(task.dependencies))
    return f"[{task.id}] {task.title} ({', '.join(details)}) {flag}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    tasks = state.task_store.list_tasks()
    open_count = sum(1 for t in tasks if not t.completed)
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({open_count} open)\n"
        f"  Database: {getattr(settings, 'tasks_db_path', '?')}\n"
        f"  Spreading activation: factor={getattr(settings, 'spread_factor', 0.3)} "
        f"rounds={getattr(settings, 'spread_iterations', 3)}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [priority=low|medium|high] [due=YYYY-MM-DD[THH:MM]] [est=<minutes>]
         [after=<id,id>] [tags=<a,b>]
    """
    words, opts = _split_options(args, ADD_OPTIONS)
    title = " ".join(words).strip()
    if not title:
        return "Usage: /add <title> [priority=..] [due=YYYY-MM-DD] [est=<min>] [after=<id,id>] [tags=<a,b>]"

    task = task_api.create_task(
        state,
        title=title,
        priority=opts.get("priority", "medium"),
        deadline=parse_deadline(opts["due"]) if "due" in opts else None,
        dependencies=_csv(opts.get("after", "")),
        estimated_minutes=_parse_number(opts["est"], "est") if "est" in opts else None,
        tags=_csv(opts.get("tags", "")),
    )
    return f"Added {format_task(task, state.task_store.list_tasks())}"


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks yet. Use /add <title> to create one."
    ordered = get_optimized_task_order(tasks, **_scheduler_kwargs(state))
    lines = ["Recommended order:"]
    for i, task in enumerate(ordered, start=1):
        lines.append(f"{i}. {format_task(task, tasks)}")
    return "\n".join(lines)


def cmd_next(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    task = get_recommended_next_task(tasks, **_scheduler_kwargs(state))
    if task is None:
        return "Nothing to do: all tasks are completed."
    return f"Next: {format_task(task, tasks)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    words, opts = _split_options(args, DONE_OPTIONS)
    if not words:
        return "Usage: /done <id> [actual=<minutes>]"
    actual = _parse_number(opts["actual"], "actual") if "actual" in opts else None
    task = task_api.complete_task(state, words[0], actual_minutes=actual)
    return f"Completed: {task.title}"


def cmd_undo(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /undo <id>"
    task = task_api.reopen_task(state, args[0])
    return f"Reopened: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task_api.delete_task(state, args[0])
    return f"Deleted task {args[0]}."


def cmd_dep(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /dep <id> <prerequisite id>"
    task = task_api.add_dependency(state, args[0], args[1])
    return f"Updated {format_task(task, state.task_store.list_tasks())}"


def cmd_undep(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /undep <id> <prerequisite id>"
    task = task_api.remove_dependency(state, args[0], args[1])
    return f"Updated {format_task(task, state.task_store.list_tasks())}"


def cmd_links(state: AppState, args: list[str]) -> str:
    links = get_dependency_links(state.task_store.list_tasks())
    if not links:
        return "No dependency links."
    return "\n".join(["Dependency links (prerequisite -> task):"] + [f"  {link.source} -> {link.target}" for link in links])


def cmd_activation(state: AppState, args: list[str]) -> str:
    settings = state.settings
    rows = activation_chart(
        state.task_store.list_tasks(),
        limit=int(getattr(settings, "chart_limit", 8)),
        spread_factor=float(getattr(settings, "spread_factor", 0.3)),
        iterations=int(getattr(settings, "spread_iterations", 3)),
    )
    if not rows:
        return "No activation data available."
    lines = ["Activation (higher = do sooner):"]
    for r in rows:
        lines.append(f"  {r.value:5.2f} {r.color} [{r.task_id}] {r.title}")
    return "\n".join(lines)


def cmd_atoms(state: AppState, args: list[str]) -> str:
    stats = build_atom_space(state.task_store.list_tasks()).stats()
    return (
        "Atom space:\n"
        f"  Task nodes: {stats.task_nodes}\n"
        f"  Dependency links: {stats.dependency_links}\n"
        f"  Total atoms: {stats.total_atoms}"
    )


def cmd_path(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /path <from id> <to id>"
    graph = build_atom_space(state.task_store.list_tasks())
    path = resolve_dependency_path(graph, args[0], args[1])
    if not path:
        return f"No dependency path between {args[0]} and {args[1]}."
    return "Path: " + " - ".join(path)


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = compute_task_stats(state.task_store.list_tasks())
    prio = ", ".join(f"{k}={v}" for k, v in s.priority_distribution.items())
    lines = [
        "Task stats:",
        f"  Total: {s.total_tasks}  Completed: {s.completed_tasks} ({s.completion_rate:.0f}%)",
        f"  Overdue: {s.overdue_tasks}  Due within 48h: {s.upcoming_deadlines}",
        f"  Avg completion time: {s.avg_completion_hours:.1f}h",
        f"  Actual / estimated: {s.estimated_vs_actual_ratio:.2f}",
        f"  Priorities: {prio}",
    ]
    if s.tag_distribution:
        lines.append("  Tags: " + ", ".join(f"{k}={v}" for k, v in s.tag_distribution.items()))
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts and scheduler settings.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [priority=high] [due=YYYY-MM-DD] [est=30] [after=id,id] [tags=a,b].",
)
registry.register("list", cmd_list, help_text="Show all tasks in recommended order.", aliases=["ls"])
registry.register("next", cmd_next, help_text="Show the recommended next task.")
registry.register("done", cmd_done, help_text="Complete a task: /done <id> [actual=<minutes>].")
registry.register("undo", cmd_undo, help_text="Reopen a completed task: /undo <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("dep", cmd_dep, help_text="Add a dependency: /dep <id> <prerequisite id>.")
registry.register("undep", cmd_undep, help_text="Remove a dependency: /undep <id> <prerequisite id>.")
registry.register("links", cmd_links, help_text="List dependency links.")
registry.register("activation", cmd_activation, help_text="Show spreading-activation scores.", aliases=["act"])
registry.register("atoms", cmd_atoms, help_text="Atom space counts.")
registry.register("path", cmd_path, help_text="Dependency path between two tasks: /path <a> <b>.")
registry.register("stats", cmd_stats, help_text="Task statistics.")
