"""SQLite-backed central store keyed by project path.

Holds the goal forest of each project, free-form project memory, per-role
model overrides and delegation statistics. Every call opens its own
connection and commits its own transaction; nothing is cached in memory
between calls.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from pydantic import ValidationError

from makerAgent.models import AgentRoleConfig, AgentStat, Goal, GoalStatus, dump_forest, load_forest
from makerAgent.utils.error_handler import StoreUnavailableError

LOGGER = logging.getLogger(__name__)


class CentralStore:
    """Transactional string/blob map keyed by project path."""

    def __init__(self, db_path: str):
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        db_dir = os.path.dirname(db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

        self.db_path = db_path
        self._init_db()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open store {self.db_path}: {e}") from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Store operation failed on {self.db_path}: {e}") from e
        finally:
            conn.close()

    def _init_db(self):
        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS project_goals (
                    project TEXT PRIMARY KEY,
                    goals_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS project_memories (
                    project TEXT PRIMARY KEY,
                    content TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS role_configs (
                    project TEXT NOT NULL,
                    team TEXT NOT NULL,
                    role TEXT NOT NULL,
                    config_json TEXT NOT NULL,
                    PRIMARY KEY (project, team, role)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS agent_stats (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    stat_json TEXT NOT NULL
                )
            """)

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def get_goals(self, project: str) -> List[Goal]:
        """Return the goal forest of ``project`` (empty when none is recorded)."""
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT goals_json FROM project_goals WHERE project = ?", (project,)
            ).fetchone()
        if not row:
            return []
        try:
            return load_forest(row[0])
        except ValidationError as e:
            raise StoreUnavailableError(f"Stored goals of {project} are unreadable: {e}") from e

    def set_goals(self, project: str, goals: List[Goal]) -> None:
        """Replace the whole forest of ``project`` in one transaction."""
        now = datetime.now(timezone.utc).isoformat()
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO project_goals (project, goals_json, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(project) DO UPDATE
                   SET goals_json = excluded.goals_json, updated_at = excluded.updated_at""",
                (project, dump_forest(goals), now),
            )

    def add_goal(self, project: str, goal: Goal) -> None:
        """Append a root goal.

        Read and write are separate transactions: two concurrent callers can
        each read the same forest and the later write drops the earlier goal.
        """
        goals = self.get_goals(project)
        goals.append(goal)
        self.set_goals(project, goals)

    def update_goal(self, project: str, goal: Goal) -> bool:
        """Replace the root goal with ``goal.id``.

        Returns:
            True if a root goal was replaced, False if no root has that id
            (nothing is written in that case).
        """
        goals = self.get_goals(project)
        for index, existing in enumerate(goals):
            if existing.id == goal.id:
                goals[index] = goal
                self.set_goals(project, goals)
                return True
        LOGGER.debug(f"update_goal: no root goal {goal.id} in {project}")
        return False

    def are_goals_pending(self, project: str) -> bool:
        """True when at least one root goal is not COMPLETED."""
        return any(goal.status != GoalStatus.COMPLETED for goal in self.get_goals(project))

    # ------------------------------------------------------------------
    # Project memory
    # ------------------------------------------------------------------

    def save_memory(self, project: str, content: str) -> None:
        """Append a timestamped memory block for ``project``."""
        block = f"--- Saved: {datetime.now(timezone.utc).isoformat()} ---\n{content}"
        existing = self.get_memory(project)
        if existing is not None:
            block = existing + "\n\n" + block
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO project_memories (project, content) VALUES (?, ?)
                   ON CONFLICT(project) DO UPDATE SET content = excluded.content""",
                (project, block),
            )

    def get_memory(self, project: str) -> Optional[str]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT content FROM project_memories WHERE project = ?", (project,)
            ).fetchone()
        return row[0] if row else None

    def list_memory_projects(self) -> List[str]:
        """Project paths that have memory or goals recorded."""
        with self._transaction() as conn:
            rows = conn.execute(
                """SELECT project FROM project_memories
                   UNION SELECT project FROM project_goals
                   ORDER BY project"""
            ).fetchall()
        return [row[0] for row in rows]

    # ------------------------------------------------------------------
    # Role configs
    # ------------------------------------------------------------------

    def save_role_config(self, project: str, team: str, role: str, config: AgentRoleConfig) -> None:
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO role_configs (project, team, role, config_json) VALUES (?, ?, ?, ?)
                   ON CONFLICT(project, team, role) DO UPDATE SET config_json = excluded.config_json""",
                (project, team, role, config.serialize()),
            )

    def get_role_configs(self, project: str, team: str) -> Dict[str, AgentRoleConfig]:
        """Stored overrides for ``(project, team)``; invalid rows are skipped with a warning."""
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT role, config_json FROM role_configs WHERE project = ? AND team = ?",
                (project, team),
            ).fetchall()

        configs: Dict[str, AgentRoleConfig] = {}
        for role, raw in rows:
            try:
                configs[role] = AgentRoleConfig.parse(raw)
            except ValueError as e:
                LOGGER.warning(f"Ignoring saved config for {role}: {e}")
        return configs

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def save_agent_stat(self, stat: AgentStat) -> None:
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO agent_stats (stat_json) VALUES (?)",
                (json.dumps(stat.to_dict(), ensure_ascii=False),),
            )

    def get_agent_stats(self, limit: Optional[int] = None) -> List[AgentStat]:
        """Return stats oldest first; ``limit`` keeps only the most recent ones."""
        with self._transaction() as conn:
            if limit is None:
                rows = conn.execute("SELECT stat_json FROM agent_stats ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT stat_json FROM (SELECT id, stat_json FROM agent_stats ORDER BY id DESC LIMIT ?) ORDER BY id",
                    (limit,),
                ).fetchall()
        return [AgentStat.from_dict(json.loads(row[0])) for row in rows]


__all__ = ["CentralStore"]
