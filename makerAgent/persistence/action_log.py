"""Append-only activity log of user input, agent responses and system events."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from makerAgent.utils.error_handler import StoreUnavailableError


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One role/content record with its timestamp as written in the log."""

    timestamp: str
    role: str
    content: str

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.role}: {self.content}"


class ActionLog:
    """Per-project action log stored in SQLite."""

    def __init__(self, db_path: str, project: str):
        db_dir = os.path.dirname(db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

        self.db_path = db_path
        self.project = project
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open action log {self.db_path}: {e}") from e

    def _init_db(self):
        conn = self._connect()
        try:
            with conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS action_logs (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        project TEXT NOT NULL,
                        timestamp TEXT NOT NULL,
                        role TEXT NOT NULL,
                        content TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot initialize action log: {e}") from e
        finally:
            conn.close()

    def _append(self, entry: LogEntry) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO action_logs (project, timestamp, role, content) VALUES (?, ?, ?, ?)",
                    (self.project, entry.timestamp, entry.role, entry.content),
                )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot append to action log: {e}") from e
        finally:
            conn.close()

    def log(self, role: str, content: str) -> LogEntry:
        """Record an entry stamped with the current local time."""
        entry = LogEntry(timestamp=datetime.now().isoformat(), role=role, content=content)
        self._append(entry)
        return entry

    def import_entry(self, role: str, content: str, timestamp: str) -> LogEntry:
        """Record an entry keeping the timestamp it was exported with."""
        entry = LogEntry(timestamp=timestamp, role=role, content=content)
        self._append(entry)
        return entry

    def get_entries(self, limit: Optional[int] = None) -> List[LogEntry]:
        """Entries oldest first; ``limit`` keeps only the most recent ones."""
        conn = self._connect()
        try:
            if limit is None:
                rows = conn.execute(
                    "SELECT timestamp, role, content FROM action_logs WHERE project = ? ORDER BY id",
                    (self.project,),
                ).fetchall()
            else:
                rows = conn.execute(
                    """SELECT timestamp, role, content FROM (
                           SELECT id, timestamp, role, content FROM action_logs
                           WHERE project = ? ORDER BY id DESC LIMIT ?
                       ) ORDER BY id""",
                    (self.project, limit),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot read action log: {e}") from e
        finally:
            conn.close()
        return [LogEntry(*row) for row in rows]

    def get_logs(self) -> List[str]:
        return [str(entry) for entry in self.get_entries()]

    def get_recent_logs(self, limit: int) -> List[str]:
        return [str(entry) for entry in self.get_entries(limit=limit)]


__all__ = ["ActionLog", "LogEntry"]
