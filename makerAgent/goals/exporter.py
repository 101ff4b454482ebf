"""Render goal trees and action logs as editable plain-text documents.

The output is the input format of ``makerAgent.goals.importer``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from makerAgent.models import Goal, GoalStatus
from makerAgent.persistence.action_log import ActionLog, LogEntry
from makerAgent.persistence.central_store import CentralStore

LOGGER = logging.getLogger(__name__)

INDENT = "  "

STATUS_ICONS = {
    GoalStatus.COMPLETED: "✅",
    GoalStatus.IN_PROGRESS: "\U0001F504",
    GoalStatus.FAILED: "❌",
    GoalStatus.PENDING: "⏳",
}


def render_goal_line(goal: Goal, depth: int = 0, include_ids: bool = False) -> str:
    line = f"{INDENT * depth}- {STATUS_ICONS[goal.status]} **[{goal.status.value}]** {goal.description}"
    if include_ids:
        line += f" (id: {goal.id})"
    return line


def render_goal_document(forest: Iterable[Goal], include_ids: bool = False) -> str:
    """Render a forest as an indented bullet list, two spaces per level.

    ``include_ids`` is for display only; documents meant to be re-imported
    should be rendered without ids.
    """
    lines: List[str] = []

    def visit(goal: Goal, depth: int) -> None:
        lines.append(render_goal_line(goal, depth, include_ids))
        for child in goal.sub_goals:
            visit(child, depth + 1)

    for root in forest:
        visit(root, 0)
    return "\n".join(lines) + ("\n" if lines else "")


def render_log_document(entries: Iterable[LogEntry]) -> str:
    blocks = [f"### {entry.role} - {entry.timestamp}\n{entry.content}\n---\n" for entry in entries]
    return "\n".join(blocks)


def export_goals(store: CentralStore, project: str, path: Path | str) -> int:
    """Write the project's forest to ``path``; returns the number of goals written."""
    forest = store.get_goals(project)
    Path(path).write_text(render_goal_document(forest), encoding="utf-8")
    count = sum(1 for root in forest for _ in root.walk())
    LOGGER.info(f"Exported {count} goals of {project} to {path}")
    return count


def export_logs(action_log: ActionLog, path: Path | str) -> int:
    entries = action_log.get_entries()
    Path(path).write_text(render_log_document(entries), encoding="utf-8")
    LOGGER.info(f"Exported {len(entries)} log entries to {path}")
    return len(entries)


__all__ = [
    "STATUS_ICONS",
    "render_goal_line",
    "render_goal_document",
    "render_log_document",
    "export_goals",
    "export_logs",
]
