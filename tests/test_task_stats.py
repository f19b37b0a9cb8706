# tests/test_task_stats.py

from __future__ import annotations

from dataclasses import replace

import pytest

from qwix_planner.tasks.task_stats import compute_task_stats

from .fakes import DAY, NOW, make_task


def test_stats_on_mixed_collection() -> None:
    finished = replace(
        make_task("a", priority="high", completed=True, estimated_minutes=60, tags=["work"]),
        completed_at=NOW - DAY + 2 * 3600,
        actual_minutes=90,
    )
    finished_no_actual = replace(
        make_task("b", priority="low", completed=True, estimated_minutes=30),
        completed_at=NOW - DAY + 4 * 3600,
    )
    tasks = [
        finished,
        finished_no_actual,
        make_task("late", deadline=NOW - 60, tags=["work", "home"]),
        make_task("soon", deadline=NOW + DAY),
        make_task("later", deadline=NOW + 5 * DAY),
    ]

    s = compute_task_stats(tasks, now_ts=NOW)

    assert s.total_tasks == 5
    assert s.completed_tasks == 2
    assert s.overdue_tasks == 1
    assert s.upcoming_deadlines == 1
    assert s.completion_rate == pytest.approx(40.0)
    assert s.avg_completion_hours == pytest.approx(3.0)
    assert s.estimated_vs_actual_ratio == pytest.approx(1.5)
    assert s.priority_distribution == {"high": 1, "medium": 3, "low": 1}
    assert s.tag_distribution == {"work": 2, "home": 1}


def test_stats_on_empty_collection() -> None:
    s = compute_task_stats([], now_ts=NOW)
    assert s.total_tasks == 0
    assert s.completion_rate == 0.0
    assert s.avg_completion_hours == 0.0
    assert s.estimated_vs_actual_ratio == 0.0
