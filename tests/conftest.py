# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from qwix_planner.core.state import AppState
from qwix_planner.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="qwix-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        spread_factor=0.3,
        spread_iterations=3,
        chart_limit=8,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with a real SQLite TaskStore in tmp_path.

    NOTE: the store's correctness (insertion order especially) is part of what we test.
    """
    return AppState(settings=settings, task_store=TaskStore(settings.tasks_db_path))
