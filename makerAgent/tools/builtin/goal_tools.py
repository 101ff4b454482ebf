"""Goal-tracking capabilities bound to one project's forest."""

import logging
from typing import List, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from makerAgent.goals.exporter import render_goal_document
from makerAgent.goals.stimulus import DEFAULT_PENDING_LIMIT, render_stimulus
from makerAgent.models import Goal, GoalStatus, attach_goal, find_goal
from makerAgent.persistence.central_store import CentralStore
from makerAgent.utils.error_handler import safe_tool_call, tool_error, tool_result

LOGGER = logging.getLogger(__name__)

VALID_STATUSES = ", ".join(status.value for status in GoalStatus)


class AddGoalInput(BaseModel):
    description: str = Field(..., description="What has to be achieved.")
    parent_id: Optional[str] = Field(
        default=None,
        description="Id of the goal this one belongs to. Omit to create a top-level goal.",
    )


class NoArgsInput(BaseModel):
    pass


class UpdateGoalInput(BaseModel):
    goal_id: str = Field(..., description="Id of the goal to update (see list_goals).")
    status: Optional[str] = Field(default=None, description=f"New status: one of {VALID_STATUSES}.")
    description: Optional[str] = Field(default=None, description="New description.")


def _parse_status(raw: str) -> Optional[GoalStatus]:
    try:
        return GoalStatus(raw.strip().upper())
    except ValueError:
        return None


def create_goal_tools(
    store: CentralStore,
    project: str,
    pending_limit: int = DEFAULT_PENDING_LIMIT,
) -> List[BaseTool]:
    """Build add_goal, list_goals, update_goal and get_goal_stimulus for ``project``.

    Every call re-reads the forest from the store and writes the whole
    forest back.
    """

    @safe_tool_call("add_goal")
    def add_goal(description: str, parent_id: Optional[str] = None) -> str:
        description = description.strip()
        if not description:
            return tool_error("Goal description must not be empty")

        goal = Goal(description=description)
        if parent_id is None:
            store.add_goal(project, goal)
        else:
            forest = store.get_goals(project)
            try:
                attach_goal(forest, goal, parent_id)
            except KeyError:
                return tool_error(f"Parent goal not found: {parent_id}")
            store.set_goals(project, forest)

        LOGGER.info(f"Added goal {goal.id} to {project}")
        return tool_result(goal_id=goal.id, status=f"Goal added: {goal}")

    @safe_tool_call("list_goals")
    def list_goals() -> str:
        forest = store.get_goals(project)
        if not forest:
            return tool_result(goals="No goals defined for this project.")
        return tool_result(goals=render_goal_document(forest, include_ids=True))

    @safe_tool_call("update_goal")
    def update_goal(goal_id: str, status: Optional[str] = None, description: Optional[str] = None) -> str:
        if status is None and description is None:
            return tool_error("Nothing to update: provide status and/or description")

        new_status = None
        if status is not None:
            new_status = _parse_status(status)
            if new_status is None:
                return tool_error(f"Invalid status '{status}'. Use one of {VALID_STATUSES}")

        forest = store.get_goals(project)
        goal = find_goal(forest, goal_id)
        if goal is None:
            return tool_error(f"Goal not found: {goal_id}")

        if new_status is not None:
            goal.set_status(new_status)
        if description is not None:
            goal.set_description(description.strip())

        if not store.update_goal(project, goal):
            # Nested goal: the store only replaces roots
            store.set_goals(project, forest)

        LOGGER.info(f"Updated goal {goal_id} in {project}")
        return tool_result(status=f"Goal updated: {goal}")

    @safe_tool_call("get_goal_stimulus")
    def get_goal_stimulus() -> str:
        return tool_result(report=render_stimulus(store.get_goals(project), pending_limit=pending_limit))

    return [
        StructuredTool.from_function(
            func=add_goal,
            name="add_goal",
            description="Adds a goal to the project. Pass parent_id to nest it under an existing goal.",
            args_schema=AddGoalInput,
        ),
        StructuredTool.from_function(
            func=list_goals,
            name="list_goals",
            description="Lists all project goals as an indented tree with their status and id.",
            args_schema=NoArgsInput,
        ),
        StructuredTool.from_function(
            func=update_goal,
            name="update_goal",
            description="Updates the status and/or description of a goal identified by its id.",
            args_schema=UpdateGoalInput,
        ),
        StructuredTool.from_function(
            func=get_goal_stimulus,
            name="get_goal_stimulus",
            description="Returns a prioritised report of failed, in-progress and upcoming goals.",
            args_schema=NoArgsInput,
        ),
    ]


__all__ = ["AddGoalInput", "UpdateGoalInput", "create_goal_tools"]
