"""Persistence utilities."""

from .action_log import ActionLog, LogEntry
from .central_store import CentralStore
from .checkpointer import build_checkpointer
from .registry import StoreRegistry

__all__ = ["ActionLog", "LogEntry", "CentralStore", "StoreRegistry", "build_checkpointer"]
