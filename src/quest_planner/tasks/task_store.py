# src/quest_planner/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from .task_models import MilestoneTag, Task, TaskStatus, finite_ms

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite quest store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "quests.sqlite3") -> None:
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
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS quests (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'active',
                    start_ms INTEGER,
                    end_ms INTEGER,
                    deadline_ms INTEGER,
                    milestones TEXT NOT NULL DEFAULT '[]',
                    parent_id INTEGER,
                    color TEXT,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(quests)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE quests ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("status", "TEXT NOT NULL DEFAULT 'active'")
            add_col("start_ms", "INTEGER")
            add_col("end_ms", "INTEGER")
            add_col("deadline_ms", "INTEGER")
            add_col("milestones", "TEXT NOT NULL DEFAULT '[]'")
            add_col("parent_id", "INTEGER")
            add_col("color", "TEXT")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_quests_start ON quests(start_ms)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_quests_status ON quests(status)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _milestones_to_str(milestones: Iterable[MilestoneTag] | None) -> str:
        if not milestones:
            return "[]"
        return json.dumps(sorted(str(m) for m in milestones))

    @staticmethod
    def _str_to_milestones(s: str | None) -> frozenset[MilestoneTag]:
        if not s:
            return frozenset()
        try:
            val = json.loads(s)
        except json.JSONDecodeError:
            logger.warning("Unreadable milestones column: %r", s)
            return frozenset()
        return MilestoneTag.parse_many(val) if isinstance(val, list) else frozenset()

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            status=TaskStatus.from_db(row["status"]),
            start_ms=row["start_ms"],
            end_ms=row["end_ms"],
            deadline_ms=row["deadline_ms"],
            milestones=self._str_to_milestones(row["milestones"]),
            parent_id=row["parent_id"],
            color=row["color"],
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM quests")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        start_ms: int | None = None,
        end_ms: int | None = None,
        deadline_ms: int | None = None,
        milestones: Iterable[MilestoneTag] | None = None,
        parent_id: int | None = None,
        color: str | None = None,
        status: TaskStatus = TaskStatus.ACTIVE,
    ) -> int:
        if not title or not title.strip():
            raise ValueError("title is required")

        start_ms = finite_ms(start_ms)
        end_ms = finite_ms(end_ms)
        deadline_ms = finite_ms(deadline_ms)
        if start_ms is not None and end_ms is not None and start_ms > end_ms:
            raise ValueError("start_ms must not be after end_ms")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO quests(
                    title, status, start_ms, end_ms, deadline_ms,
                    milestones, parent_id, color, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    title.strip(),
                    status.value,
                    start_ms,
                    end_ms,
                    deadline_ms,
                    self._milestones_to_str(milestones),
                    parent_id,
                    color,
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for quests insert")
            task_id = int(rowid)
            logger.debug(
                "Quest added id=%s start_ms=%s end_ms=%s deadline_ms=%s",
                task_id,
                start_ms,
                end_ms,
                deadline_ms,
            )
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM quests WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All quests in creation order (the planner keeps this order for ties)."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM quests ORDER BY id ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task(
        self,
        task_id: int,
        *,
        start_ms: int | None = None,
        end_ms: int | None = None,
        deadline_ms: int | None = None,
        title: str | None = None,
    ) -> None:
        """Partial update; fields left as None are not touched."""
        fields: list[str] = []
        params: list[object] = []

        if start_ms is not None:
            fields.append("start_ms = ?")
            params.append(int(start_ms))

        if end_ms is not None:
            fields.append("end_ms = ?")
            params.append(int(end_ms))

        if deadline_ms is not None:
            fields.append("deadline_ms = ?")
            params.append(int(deadline_ms))

        if title is not None:
            if not title.strip():
                raise ValueError("title must not be empty")
            fields.append("title = ?")
            params.append(title.strip())

        if not fields:
            return

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(int(task_id))

        sql = f"UPDATE quests SET {', '.join(fields)} WHERE id = ?"

        conn = self._get_conn()
        try:
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()
        logger.debug("Quest updated id=%s start_ms=%s end_ms=%s", task_id, start_ms, end_ms)

    def update_task_status(self, task_id: int, new_status: TaskStatus) -> None:
        now = time.time()
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE quests SET status = ?, updated_at = ? WHERE id = ?",
                (new_status.value, now, int(task_id)),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM quests WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
