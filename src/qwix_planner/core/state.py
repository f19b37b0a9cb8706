# src/qwix_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: object

    task_store: TaskRepo
