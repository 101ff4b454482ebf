"""Goal stimulus: a short, prioritised report of outstanding work.

The report is injected into the coordinator's context, so it only lists
actionable leaves and caps the pending section.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from makerAgent.models import Goal, GoalStatus
from makerAgent.persistence.central_store import CentralStore

PATH_SEPARATOR = " > "
DEFAULT_PENDING_LIMIT = 5

REPORT_HEADER = "GOAL STIMULUS REPORT:"
FAILED_HEADER = "[CRITICAL ATTENTION REQUIRED - FAILED]"
IN_PROGRESS_HEADER = "[CURRENT FOCUS - IN PROGRESS]"
PENDING_HEADER = "[UPCOMING TASKS - PENDING]"
TRUNCATION_MARKER = "  ... (and more)"

NO_GOALS_MESSAGE = "No goals defined for this project."
ALL_COMPLETE_MESSAGE = "All goals are currently marked as COMPLETED."

STATUS_SCORES = {
    GoalStatus.FAILED: 1,
    GoalStatus.IN_PROGRESS: 2,
    GoalStatus.PENDING: 3,
}


@dataclass(frozen=True, slots=True)
class StimulusItem:
    status: GoalStatus
    path: str


def is_effective_leaf(goal: Goal) -> bool:
    """No sub-goals, or every sub-goal is COMPLETED."""
    return all(child.status == GoalStatus.COMPLETED for child in goal.sub_goals)


def collect_stimulus_items(forest: Iterable[Goal], parent_path: str = "") -> List[StimulusItem]:
    """Collect the effective leaves of every non-completed branch, in traversal order."""
    items: List[StimulusItem] = []
    for goal in forest:
        if goal.status == GoalStatus.COMPLETED:
            continue

        path = f"{parent_path}{PATH_SEPARATOR}{goal.description}" if parent_path else goal.description

        if is_effective_leaf(goal):
            items.append(StimulusItem(status=goal.status, path=path))
        else:
            items.extend(collect_stimulus_items(goal.sub_goals, path))
    return items


def rank_stimulus_items(items: Iterable[StimulusItem]) -> List[StimulusItem]:
    """Stable sort: FAILED, then IN_PROGRESS, then PENDING."""
    return sorted(items, key=lambda item: STATUS_SCORES.get(item.status, 4))


def render_stimulus(forest: List[Goal], pending_limit: int = DEFAULT_PENDING_LIMIT) -> str:
    """Render the stimulus report for a forest.

    Returns NO_GOALS_MESSAGE for an empty forest and ALL_COMPLETE_MESSAGE
    when nothing is left to do.
    """
    if not forest:
        return NO_GOALS_MESSAGE

    items = rank_stimulus_items(collect_stimulus_items(forest))
    if not items:
        return ALL_COMPLETE_MESSAGE

    failed = [item for item in items if item.status == GoalStatus.FAILED]
    in_progress = [item for item in items if item.status == GoalStatus.IN_PROGRESS]
    pending = [item for item in items if item.status == GoalStatus.PENDING]

    lines = [REPORT_HEADER]

    if failed:
        lines += ["", FAILED_HEADER]
        lines += [f"! {item.path}" for item in failed]

    if in_progress:
        lines += ["", IN_PROGRESS_HEADER]
        lines += [f"> {item.path}" for item in in_progress]

    if pending:
        lines += ["", PENDING_HEADER]
        lines += [f"- {item.path}" for item in pending[:pending_limit]]
        if len(pending) > pending_limit:
            lines.append(TRUNCATION_MARKER)

    return "\n".join(lines) + "\n"


def get_goal_stimulus(store: CentralStore, project: str, pending_limit: Optional[int] = None) -> str:
    """Read the project's forest from the store and render its stimulus report."""
    if pending_limit is None:
        pending_limit = DEFAULT_PENDING_LIMIT
    return render_stimulus(store.get_goals(project), pending_limit=pending_limit)


__all__ = [
    "StimulusItem",
    "NO_GOALS_MESSAGE",
    "ALL_COMPLETE_MESSAGE",
    "TRUNCATION_MARKER",
    "FAILED_HEADER",
    "IN_PROGRESS_HEADER",
    "PENDING_HEADER",
    "is_effective_leaf",
    "collect_stimulus_items",
    "rank_stimulus_items",
    "render_stimulus",
    "get_goal_stimulus",
]
