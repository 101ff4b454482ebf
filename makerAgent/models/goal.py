"""Hierarchical goal model.

A project's goals form a forest: every Goal owns its ``sub_goals`` exclusively,
so a goal never appears under two parents and a subtree never contains a cycle.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GoalStatus(str, Enum):
    """Lifecycle state of a goal."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Goal(BaseModel):
    """One unit of trackable work and its ordered children.

    Mutate through ``set_status``, ``set_description`` and ``add_sub_goal``;
    each of them refreshes ``updated_at``.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), frozen=True)
    description: str
    status: GoalStatus = GoalStatus.PENDING
    sub_goals: List["Goal"] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def set_status(self, status: GoalStatus | str) -> None:
        self.status = GoalStatus(status)
        self.updated_at = _now()

    def set_description(self, description: str) -> None:
        self.description = description
        self.updated_at = _now()

    def add_sub_goal(self, sub_goal: "Goal") -> None:
        """Append ``sub_goal`` as the last child.

        Raises:
            ValueError: if the goal would end up under two parents or inside
                its own subtree.
        """
        if sub_goal is self or sub_goal.find(self.id) is not None:
            raise ValueError(f"Goal {sub_goal.id} cannot become a descendant of itself")
        if self.find(sub_goal.id) is not None:
            raise ValueError(f"Goal {sub_goal.id} already belongs to this tree")
        self.sub_goals.append(sub_goal)
        self.updated_at = _now()

    def walk(self) -> Iterator["Goal"]:
        """Pre-order traversal of this goal and its descendants."""
        yield self
        for child in self.sub_goals:
            yield from child.walk()

    def find(self, goal_id: str) -> Optional["Goal"]:
        for goal in self.walk():
            if goal.id == goal_id:
                return goal
        return None

    def __str__(self) -> str:
        return f"[{self.status.value}] {self.description} (ID: {self.id})"


Goal.model_rebuild()

GoalForest = List[Goal]

_FOREST_ADAPTER = TypeAdapter(List[Goal])


def find_goal(forest: GoalForest, goal_id: str) -> Optional[Goal]:
    """Locate a goal anywhere in ``forest``."""
    for root in forest:
        found = root.find(goal_id)
        if found is not None:
            return found
    return None


def attach_goal(forest: GoalForest, goal: Goal, parent_id: Optional[str] = None) -> None:
    """Add ``goal`` to ``forest`` as a root, or as the last child of ``parent_id``.

    Ownership is checked across the whole forest, not just the parent's tree.

    Raises:
        KeyError: If ``parent_id`` is not in the forest
        ValueError: If ``goal`` or one of its descendants is already in the forest
    """
    for node in goal.walk():
        if find_goal(forest, node.id) is not None:
            raise ValueError(f"Goal {node.id} already belongs to this forest")

    if parent_id is None:
        forest.append(goal)
        return

    parent = find_goal(forest, parent_id)
    if parent is None:
        raise KeyError(parent_id)
    parent.add_sub_goal(goal)


def dump_forest(forest: GoalForest) -> str:
    """Serialize a forest to JSON through the Goal schema."""
    return _FOREST_ADAPTER.dump_json(forest).decode("utf-8")


def load_forest(raw: str | bytes) -> GoalForest:
    """Parse a forest previously written by ``dump_forest``."""
    return _FOREST_ADAPTER.validate_json(raw)


__all__ = [
    "Goal",
    "GoalStatus",
    "GoalForest",
    "find_goal",
    "attach_goal",
    "dump_forest",
    "load_forest",
]
