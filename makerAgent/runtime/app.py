"""Runtime assembly for the coordinator session."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from makerAgent.agents import AgentManager, DelegationEngine, load_roles
from makerAgent.agents.roles import COORDINATOR
from makerAgent.config import Settings, get_settings, resolve_project_path
from makerAgent.hitl import CommandGate
from makerAgent.models import AgentRoleConfig
from makerAgent.persistence import ActionLog, CentralStore, StoreRegistry, build_checkpointer
from makerAgent.tools import CapabilityMeta, CapabilityRegistry
from makerAgent.tools.builtin import (
    create_goal_tools,
    create_memory_tools,
    create_run_shell_tool,
    list_directory,
    read_file,
    read_image,
    write_file,
)
from makerAgent.utils.message_utils import extract_text

from .model_resolver import ModelResolver, build_model_resolver

LOGGER = logging.getLogger(__name__)


def _create_command_gate(settings: Settings) -> CommandGate:
    path = settings.storage.denylist_config_path
    return CommandGate(resolve_project_path(path) if path else None)


def build_capability_registry(
    store: CentralStore,
    action_log: ActionLog,
    project: str,
    settings: Settings,
    gate: Optional[CommandGate] = None,
) -> CapabilityRegistry:
    """Register every built-in capability for ``project``."""
    registry = CapabilityRegistry()

    for tool in (read_file, write_file, list_directory, read_image):
        registry.register_tool(tool)

    run_shell = create_run_shell_tool(
        gate or _create_command_gate(settings),
        timeout_seconds=settings.governance.shell_timeout_seconds,
    )
    registry.register_tool(run_shell)
    registry.register_meta(CapabilityMeta(name=run_shell.name, spawns_process=True))

    for tool in create_goal_tools(store, project, pending_limit=settings.governance.stimulus_pending_limit):
        registry.register_tool(tool)

    for tool in create_memory_tools(store, action_log, project):
        registry.register_tool(tool)

    LOGGER.info(f"Registered {len(registry.names())} capabilities")
    return registry


@dataclass
class MakerApp:
    """A running coordinator session bound to one project."""

    project: str
    team: str
    stores: StoreRegistry
    manager: AgentManager
    engine: DelegationEngine
    model_resolver: ModelResolver
    max_loops: int
    session_context: str = ""
    thread_id: str = field(default_factory=lambda: f"coordinator-{uuid.uuid4().hex}")
    _graph: Any = None
    _checkpointer: Any = None
    _started: bool = False

    @property
    def store(self) -> CentralStore:
        return self.stores.central()

    @property
    def action_log(self) -> ActionLog:
        return self.stores.action_log(self.project)

    def coordinator_config(self) -> AgentRoleConfig:
        return self.engine.resolve_role_config(COORDINATOR)

    def rebuild(self) -> None:
        """Rebuild the coordinator graph, e.g. after a model change. History is kept."""
        model = self.model_resolver(self.coordinator_config())
        if self._checkpointer is None:
            self._checkpointer = build_checkpointer()
        self._graph = self.manager.build_coordinator(model, checkpointer=self._checkpointer)

    def reset(self) -> str:
        """Start a fresh coordinator conversation."""
        self.thread_id = f"coordinator-{uuid.uuid4().hex}"
        self._started = False
        self.action_log.log("SYSTEM", "Session reset by user.")
        return self.thread_id

    async def chat(self, text: str) -> str:
        """Send one user turn to the coordinator and return its reply text."""
        if self._graph is None:
            self.rebuild()

        self.action_log.log("USER", text)

        messages = []
        if not self._started:
            # The stimulus is taken once, when the conversation starts
            messages.append(SystemMessage(content=self.manager.coordinator_instruction(self.session_context)))
        messages.append(HumanMessage(content=text))
        self._started = True

        config = {
            "configurable": {"thread_id": self.thread_id},
            "recursion_limit": self.max_loops * 2 + 1,
        }
        try:
            state = await self._graph.ainvoke(
                {"messages": messages, "role": COORDINATOR, "iterations": 0, "max_iterations": self.max_loops},
                config=config,
            )
        except Exception as e:
            self.action_log.log("ERROR", str(e))
            raise

        reply = extract_text(state["messages"][-1].content)
        self.action_log.log("AGENT", reply)
        return reply

    def close(self) -> None:
        self.stores.close()


def build_application(
    project: Optional[str] = None,
    settings: Optional[Settings] = None,
    model_resolver: Optional[ModelResolver] = None,
    stores: Optional[StoreRegistry] = None,
    gate: Optional[CommandGate] = None,
    context_info: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> MakerApp:
    """Build the coordinator session.

    Args:
        project: Project key; defaults to the absolute working directory
        settings: Settings (defaults to the cached ``get_settings()``)
        model_resolver: Maps a role config to a chat model; tests inject fakes
        stores: Store registry; opened on ``settings.storage.data_dir`` if omitted
        gate: Command gate for run_shell
        context_info: Date/working-directory block shared by all instructions
        cwd: Directory searched for the previous session summary

    Returns:
        MakerApp with stores opened and the coordinator graph compiled lazily
    """
    settings = settings or get_settings()
    project = project or str(Path.cwd().resolve())
    stores = stores or StoreRegistry(settings.storage.data_dir).open()
    model_resolver = model_resolver or build_model_resolver(settings)

    store = stores.central()
    action_log = stores.action_log(project)

    capabilities = build_capability_registry(store, action_log, project, settings, gate=gate)

    engine = DelegationEngine(
        store=store,
        action_log=action_log,
        project=project,
        default_config=settings.models.default_role_config(),
        model_resolver=model_resolver,
        team=settings.storage.team,
        max_loops=settings.governance.max_loops,
        queue_size=settings.governance.delegation_queue_size,
        prompt_log_max_length=settings.observability.log_prompt_max_length,
    )

    coordinator, workers = load_roles(settings.storage.roles_config_path)
    manager = AgentManager(
        store=store,
        action_log=action_log,
        project=project,
        engine=engine,
        coordinator=coordinator,
        workers=workers,
        capabilities=capabilities,
        context_info=context_info,
        pending_limit=settings.governance.stimulus_pending_limit,
    )

    return MakerApp(
        project=project,
        team=settings.storage.team,
        stores=stores,
        manager=manager,
        engine=engine,
        model_resolver=model_resolver,
        max_loops=settings.governance.max_loops,
        session_context=manager.session_context(cwd),
    )


__all__ = ["MakerApp", "build_application", "build_capability_registry"]
