# src/qwix_planner/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass(slots=True)
class Task:
    """
    A unit of personal work.

    Notes:
    - dependencies holds ids of prerequisite tasks; ids that match no task are tolerated
      (they block eligibility but are skipped when ordering).
    - all timestamps are epoch seconds, durations are minutes.
    """

    id: str
    title: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: float | None = None
    dependencies: list[str] = field(default_factory=list)
    estimated_minutes: float | None = None
    created_at: float = 0.0
    completed_at: float | None = None
    actual_minutes: float | None = None

    description: str = ""
    tags: list[str] = field(default_factory=list)
    started_at: float | None = None


@dataclass(slots=True, frozen=True)
class DependencyLink:
    """Edge prerequisite -> dependent, used by graph renderers."""

    source: str
    target: str
