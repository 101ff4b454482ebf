"""Goal import/export and stimulus ranking."""

from .exporter import export_goals, export_logs, render_goal_document, render_log_document
from .importer import import_goals, import_logs, parse_goal_document, parse_log_document
from .stimulus import (
    ALL_COMPLETE_MESSAGE,
    NO_GOALS_MESSAGE,
    StimulusItem,
    collect_stimulus_items,
    get_goal_stimulus,
    rank_stimulus_items,
    render_stimulus,
)

__all__ = [
    "parse_goal_document",
    "parse_log_document",
    "import_goals",
    "import_logs",
    "render_goal_document",
    "render_log_document",
    "export_goals",
    "export_logs",
    "StimulusItem",
    "collect_stimulus_items",
    "rank_stimulus_items",
    "render_stimulus",
    "get_goal_stimulus",
    "NO_GOALS_MESSAGE",
    "ALL_COMPLETE_MESSAGE",
]
