# src/qwix_planner/cli/bootstrap.py

"""
Wiring for the console app: settings -> data directories -> TaskStore -> AppState.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Open the task database named by `settings` (or get_settings()) and return the app state.

    The data directory and the database's parent directory are created when missing.
    """
    if settings is None:
        settings = get_settings()

    for directory in (settings.data_dir, settings.tasks_db_path.parent):
        directory.mkdir(parents=True, exist_ok=True)

    store = TaskStore(settings.tasks_db_path)
    logger.debug("Task store opened at %s (%d tasks)", settings.tasks_db_path, store.count_tasks())
    return AppState(settings=settings, task_store=store)
