"""Explicit registry of store handles.

Created once at startup and passed to the components that need storage;
``close()`` drops every handle at shutdown.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from .action_log import ActionLog
from .central_store import CentralStore

LOGGER = logging.getLogger(__name__)

CENTRAL_DB_NAME = "central_memory.db"
ACTION_LOG_DB_NAME = "action_logs.db"


class StoreRegistry:
    """Owns the central store and one action log per project."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self._central: Optional[CentralStore] = None
        self._action_logs: Dict[str, ActionLog] = {}
        self._closed = False

    def open(self) -> "StoreRegistry":
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._closed = False
        LOGGER.info(f"StoreRegistry opened: {self.data_dir.resolve()}")
        return self

    def close(self) -> None:
        self._central = None
        self._action_logs.clear()
        self._closed = True
        LOGGER.info("StoreRegistry closed")

    def __enter__(self) -> "StoreRegistry":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("StoreRegistry is closed")

    def central(self) -> CentralStore:
        self._ensure_open()
        if self._central is None:
            self._central = CentralStore(str(self.data_dir / CENTRAL_DB_NAME))
        return self._central

    def action_log(self, project: str) -> ActionLog:
        self._ensure_open()
        if project not in self._action_logs:
            self._action_logs[project] = ActionLog(str(self.data_dir / ACTION_LOG_DB_NAME), project)
        return self._action_logs[project]


__all__ = ["StoreRegistry", "CENTRAL_DB_NAME", "ACTION_LOG_DB_NAME"]
