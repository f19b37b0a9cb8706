# src/qwix_planner/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
import uuid
from pathlib import Path
from typing import Any

from .task_models import Task, TaskPriority

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Ordering:
    - list_tasks() returns tasks in insertion order (the scheduler visits tasks in input order)

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    deadline REAL,
                    dependencies TEXT NOT NULL DEFAULT '[]',
                    estimated_minutes REAL,
                    created_at REAL NOT NULL,
                    completed_at REAL,
                    actual_minutes REAL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("tags", "TEXT NOT NULL DEFAULT '[]'")
            add_col("started_at", "REAL")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(completed, deadline)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _list_to_str(items: list[str] | None) -> str:
        return json.dumps([str(x) for x in items or []], ensure_ascii=False)

    @staticmethod
    def _str_to_list(s: str | None) -> list[str]:
        if not s:
            return []
        try:
            val = json.loads(s)
        except json.JSONDecodeError:
            logger.warning("Corrupt list column value %r; using []", s)
            return []
        return [str(x) for x in val] if isinstance(val, list) else []

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            completed=bool(row["completed"]),
            priority=TaskPriority.from_db(row["priority"]),
            deadline=float(row["deadline"]) if row["deadline"] is not None else None,
            dependencies=self._str_to_list(row["dependencies"]),
            estimated_minutes=(
                float(row["estimated_minutes"]) if row["estimated_minutes"] is not None else None
            ),
            created_at=float(row["created_at"] or 0.0),
            completed_at=float(row["completed_at"]) if row["completed_at"] is not None else None,
            actual_minutes=float(row["actual_minutes"]) if row["actual_minutes"] is not None else None,
            description=str(row["description"] or ""),
            tags=self._str_to_list(row["tags"]),
            started_at=float(row["started_at"]) if row["started_at"] is not None else None,
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        deadline: float | None = None,
        dependencies: list[str] | None = None,
        estimated_minutes: float | None = None,
        description: str = "",
        tags: list[str] | None = None,
        task_id: str | None = None,
        created_at: float | None = None,
    ) -> str:
        if not title or not title.strip():
            raise ValueError("title is required")

        new_id = task_id or uuid.uuid4().hex[:8]
        now = time.time() if created_at is None else float(created_at)

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, title, completed, priority, deadline, dependencies,
                    estimated_minutes, created_at, description, tags
                )
                VALUES (?, ?, 0, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    new_id,
                    title.strip(),
                    TaskPriority(priority).value,
                    deadline,
                    self._list_to_str(dependencies),
                    estimated_minutes,
                    now,
                    description.strip(),
                    self._list_to_str(tags),
                ),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ValueError(f"task id already exists: {new_id}") from e
        finally:
            conn.close()

        logger.debug("Task added id=%s priority=%s deadline=%s deps=%s", new_id, priority, deadline, dependencies)
        return new_id

    def get_task(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (str(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self, *, include_completed: bool = True) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if include_completed:
                cur.execute("SELECT * FROM tasks ORDER BY seq ASC")
            else:
                cur.execute("SELECT * FROM tasks WHERE completed = 0 ORDER BY seq ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task_fields(
        self,
        task_id: str,
        *,
        title: str | None = None,
        priority: TaskPriority | None = None,
        deadline: float | None = None,
        clear_deadline: bool = False,
        dependencies: list[str] | None = None,
        estimated_minutes: float | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        started_at: float | None = None,
    ) -> bool:
        """None means "leave unchanged". Returns False if no row matched."""
        fields: list[str] = []
        params: list[Any] = []

        if title is not None:
            fields.append("title = ?")
            params.append(title.strip())

        if priority is not None:
            fields.append("priority = ?")
            params.append(TaskPriority(priority).value)

        if clear_deadline:
            fields.append("deadline = NULL")
        elif deadline is not None:
            fields.append("deadline = ?")
            params.append(float(deadline))

        if dependencies is not None:
            fields.append("dependencies = ?")
            params.append(self._list_to_str(dependencies))

        if estimated_minutes is not None:
            fields.append("estimated_minutes = ?")
            params.append(float(estimated_minutes))

        if description is not None:
            fields.append("description = ?")
            params.append(description.strip())

        if tags is not None:
            fields.append("tags = ?")
            params.append(self._list_to_str(tags))

        if started_at is not None:
            fields.append("started_at = ?")
            params.append(float(started_at))

        if not fields:
            return self.get_task(task_id) is not None

        params.append(str(task_id))
        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def set_completed(
        self,
        task_id: str,
        completed: bool,
        *,
        now_ts: float | None = None,
        actual_minutes: float | None = None,
    ) -> bool:
        """
        Mark a task done (stamps completed_at, records actual_minutes if given)
        or reopen it (clears both).
        """
        if completed:
            ts = time.time() if now_ts is None else float(now_ts)
            sql = "UPDATE tasks SET completed = 1, completed_at = ?, actual_minutes = ? WHERE id = ?"
            params: tuple[Any, ...] = (ts, actual_minutes, str(task_id))
        else:
            sql = "UPDATE tasks SET completed = 0, completed_at = NULL, actual_minutes = NULL WHERE id = ?"
            params = (str(task_id),)

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_task(self, task_id: str) -> bool:
        """
        Delete one task. Other tasks keep their references to it; a dangling dependency
        simply keeps its dependents blocked.
        """
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (str(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
