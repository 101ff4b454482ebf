"""Assembles the coordinator and its delegation capabilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.tools import BaseTool

from makerAgent.agents.delegation import DelegationEngine, build_delegation_tool
from makerAgent.agents.roles import RoleDefinition, build_context_info
from makerAgent.goals.stimulus import render_stimulus
from makerAgent.graph.builder import build_role_graph
from makerAgent.persistence.action_log import ActionLog
from makerAgent.persistence.central_store import CentralStore
from makerAgent.tools.registry import CapabilityRegistry

LOGGER = logging.getLogger(__name__)

SESSION_SUMMARY_FILE = "session_summary.txt"
RECENT_LOG_LIMIT = 10


class AgentManager:
    """Owns the role set of one session.

    Worker capability lists are resolved against the registry in the
    constructor, so a role naming an unknown capability fails at startup
    rather than mid-conversation. The coordinator itself never gets a
    capability that starts OS processes.
    """

    def __init__(
        self,
        store: CentralStore,
        action_log: ActionLog,
        project: str,
        engine: DelegationEngine,
        coordinator: RoleDefinition,
        workers: Sequence[RoleDefinition],
        capabilities: CapabilityRegistry,
        context_info: Optional[str] = None,
        pending_limit: int = 5,
    ):
        self.store = store
        self.action_log = action_log
        self.project = project
        self.engine = engine
        self.coordinator = coordinator
        self.workers = list(workers)
        self.capabilities = capabilities
        self.context_info = context_info if context_info is not None else build_context_info()
        self.pending_limit = pending_limit

        spawning = [name for name in coordinator.capabilities if capabilities.spawns_process(name)]
        if spawning:
            raise ValueError(
                f"{coordinator.name} cannot hold process capabilities ({', '.join(spawning)}); "
                "give them to a worker role"
            )

        self.worker_tools: Dict[str, List[BaseTool]] = {
            role.name: capabilities.select(role.capabilities) for role in self.workers
        }
        self.delegation_tools: List[BaseTool] = []
        for role in self.workers:
            tool = build_delegation_tool(engine, role, self.worker_tools[role.name], self.context_info)
            capabilities.register_tool(tool)
            self.delegation_tools.append(tool)

        self.coordinator_tools: List[BaseTool] = self.delegation_tools + capabilities.select(
            coordinator.capabilities
        )
        LOGGER.info(
            f"Coordinator ready with {len(self.delegation_tools)} roles and "
            f"{len(self.coordinator_tools)} tools"
        )

    def role_names(self) -> List[str]:
        return [self.coordinator.name] + [role.name for role in self.workers]

    def find_role(self, name: str) -> Optional[RoleDefinition]:
        """Case-insensitive lookup among coordinator and workers."""
        for role in [self.coordinator] + self.workers:
            if role.name.lower() == name.lower():
                return role
        return None

    def session_context(self, cwd: Optional[Path] = None) -> str:
        """Previous session summary and recent action log lines, if any."""
        parts: List[str] = []

        summary_path = (cwd or Path.cwd()) / SESSION_SUMMARY_FILE
        if summary_path.is_file():
            try:
                parts.append("\n\nPREVIOUS SESSION CONTEXT:\n" + summary_path.read_text(encoding="utf-8"))
            except OSError as e:
                LOGGER.warning(f"Could not read {summary_path}: {e}")

        recent = self.action_log.get_recent_logs(RECENT_LOG_LIMIT)
        if recent:
            parts.append("\n\nRECENT CONVERSATION HISTORY (From Logs):\n" + "".join(f"{line}\n" for line in recent))

        return "".join(parts)

    def coordinator_instruction(self, session_context: str = "") -> str:
        """Coordinator instruction with context and the current goal stimulus."""
        stimulus = render_stimulus(self.store.get_goals(self.project), pending_limit=self.pending_limit)
        return (
            f"{self.coordinator.instruction.rstrip()}\n"
            f"{self.context_info}"
            f"{session_context}"
            f"\n\n{stimulus}"
        )

    def build_coordinator(self, model: Any, checkpointer: Optional[Any] = None):
        """Compile the coordinator graph over its fixed tool list."""
        return build_role_graph(model, self.coordinator_tools, checkpointer=checkpointer)


__all__ = ["AgentManager", "SESSION_SUMMARY_FILE", "RECENT_LOG_LIMIT"]
