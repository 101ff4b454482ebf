"""Coordinator capabilities over central memory and the action log."""

import logging
from typing import List, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from makerAgent.persistence.action_log import ActionLog
from makerAgent.persistence.central_store import CentralStore
from makerAgent.utils.error_handler import safe_tool_call, tool_result

LOGGER = logging.getLogger(__name__)

NO_MEMORY_MESSAGE = "No memory found for this project."
NO_PROJECTS_MESSAGE = "No projects found in central memory."


class SaveMemoryInput(BaseModel):
    content: str = Field(..., description="The summary content to save.")


class ReadMemoryInput(BaseModel):
    project_path: Optional[str] = Field(
        default=None,
        description="Optional absolute path to the project. Defaults to the current project.",
    )


class ActionLogsInput(BaseModel):
    limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Only return the most recent entries. Omit for the full history.",
    )


class NoArgsInput(BaseModel):
    pass


def create_memory_tools(store: CentralStore, action_log: ActionLog, project: str) -> List[BaseTool]:
    """Build the memory and log capabilities for the coordinator of ``project``."""

    @safe_tool_call("save_central_memory")
    def save_central_memory(content: str) -> str:
        store.save_memory(project, content)
        LOGGER.info(f"Saved central memory for {project} ({len(content)} chars)")
        return tool_result(status=f"Memory saved successfully for {project}")

    @safe_tool_call("read_central_memory")
    def read_central_memory(project_path: Optional[str] = None) -> str:
        target = project_path.strip() if project_path and project_path.strip() else project
        memory = store.get_memory(target)
        return tool_result(memory=memory if memory is not None else NO_MEMORY_MESSAGE)

    @safe_tool_call("list_central_memory_projects")
    def list_central_memory_projects() -> str:
        projects = store.list_memory_projects()
        if not projects:
            return tool_result(projects=NO_PROJECTS_MESSAGE)
        return tool_result(projects="\n".join(projects))

    @safe_tool_call("get_action_logs")
    def get_action_logs(limit: Optional[int] = None) -> str:
        logs = action_log.get_logs() if limit is None else action_log.get_recent_logs(limit)
        return tool_result(logs="".join(f"{line}\n" for line in logs))

    return [
        StructuredTool.from_function(
            func=save_central_memory,
            name="save_central_memory",
            description="Saves a summary or memory of the current project to the central database.",
            args_schema=SaveMemoryInput,
        ),
        StructuredTool.from_function(
            func=read_central_memory,
            name="read_central_memory",
            description=(
                "Reads the stored memory for a project. "
                "If no path is provided, reads the current project's memory."
            ),
            args_schema=ReadMemoryInput,
        ),
        StructuredTool.from_function(
            func=list_central_memory_projects,
            name="list_central_memory_projects",
            description="Lists all project paths that have data stored in the central database.",
            args_schema=NoArgsInput,
        ),
        StructuredTool.from_function(
            func=get_action_logs,
            name="get_action_logs",
            description="Retrieves the history of user actions and agent responses.",
            args_schema=ActionLogsInput,
        ),
    ]


__all__ = ["NO_MEMORY_MESSAGE", "NO_PROJECTS_MESSAGE", "create_memory_tools"]
