"""Delegation of sub-tasks from the coordinator to specialist roles.

Each delegation runs a nested, isolated conversation to completion and hands
the accumulated text back as the result of the coordinator's tool call:

- the role's model config is resolved per call (stored override or default);
- the session gets a fresh thread id and a fresh checkpointer;
- the capability list is fixed by the role, never by the instruction text;
- a producer task streams graph updates into a bounded queue and the caller
  drains it until a completion sentinel arrives.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from makerAgent.agents.roles import RoleDefinition, identity_note
from makerAgent.graph.builder import build_role_graph
from makerAgent.models import AgentRoleConfig, AgentStat
from makerAgent.persistence.action_log import ActionLog
from makerAgent.persistence.central_store import CentralStore
from makerAgent.persistence.checkpointer import build_checkpointer
from makerAgent.utils.error_handler import StoreUnavailableError
from makerAgent.utils.logging_utils import log_delegation_end, log_delegation_start, log_error, log_prompt
from makerAgent.utils.message_utils import extract_text

LOGGER = logging.getLogger(__name__)

SYSTEM_ROLE = "SYSTEM"
DEFAULT_QUEUE_SIZE = 64
DEFAULT_MAX_LOOPS = 50

_DONE = object()


@dataclass(frozen=True)
class DelegationRequest:
    """Everything one delegated run needs; built fresh per call."""

    role_name: str
    fixed_instruction: str
    model_config: AgentRoleConfig
    user_instruction: str
    capabilities: Tuple[BaseTool, ...]


class DelegationInput(BaseModel):
    instruction: str = Field(..., description="Complete, self-contained instructions for the agent.")


class DelegationEngine:
    """Runs isolated role conversations for one project and team."""

    def __init__(
        self,
        store: CentralStore,
        action_log: ActionLog,
        project: str,
        default_config: AgentRoleConfig,
        model_resolver: Callable[[AgentRoleConfig], Any],
        team: str = "default",
        max_loops: int = DEFAULT_MAX_LOOPS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        checkpointer_factory: Callable[[], Any] = build_checkpointer,
        prompt_log_max_length: int = 500,
    ):
        self.store = store
        self.action_log = action_log
        self.project = project
        self.team = team
        self.default_config = default_config
        self.model_resolver = model_resolver
        self.max_loops = max_loops
        self.queue_size = queue_size
        self.checkpointer_factory = checkpointer_factory
        self.prompt_log_max_length = prompt_log_max_length
        self._lock = asyncio.Lock()

    def resolve_role_config(self, role_name: str) -> AgentRoleConfig:
        """Stored override for ``(project, team, role)``, else the default."""
        overrides = self.store.get_role_configs(self.project, self.team)
        return overrides.get(role_name, self.default_config)

    def build_request(
        self,
        role: RoleDefinition,
        capabilities: Sequence[BaseTool],
        instruction: str,
        context_info: str = "",
    ) -> DelegationRequest:
        config = self.resolve_role_config(role.name)
        return DelegationRequest(
            role_name=role.name,
            fixed_instruction=role.fixed_instruction(context_info) + identity_note(config),
            model_config=config,
            user_instruction=instruction,
            capabilities=tuple(capabilities),
        )

    async def execute(self, request: DelegationRequest) -> str:
        """Run the request to completion and return the worker's text.

        Delegations run one at a time: a coordinator turn asking several
        roles at once gets them in sequence.

        Worker failures come back as ``"Error executing sub-agent <role>: <msg>"``.
        Store failures propagate.
        """
        async with self._lock:
            return await self._execute(request)

    async def _execute(self, request: DelegationRequest) -> str:
        config = request.model_config
        self.action_log.log(
            SYSTEM_ROLE,
            f"Executing {request.role_name} using {config.provider.value} ({config.model_name})",
        )
        log_delegation_start(LOGGER, request.role_name, str(config), request.user_instruction)

        start = time.monotonic()
        success = True
        output = ""
        try:
            output = await self._drain(request)
            return output
        except StoreUnavailableError:
            success = False
            raise
        except Exception as e:
            success = False
            log_error(LOGGER, e, context=f"delegation to {request.role_name}")
            output = f"Error executing sub-agent {request.role_name}: {e}"
            return output
        finally:
            duration_ms = int((time.monotonic() - start) * 1000)
            log_delegation_end(LOGGER, request.role_name, duration_ms, success, len(output))
            self.store.save_agent_stat(
                AgentStat(
                    role=request.role_name,
                    provider=config.provider.value,
                    model=config.model_name,
                    duration_ms=duration_ms,
                    success=success,
                    input_length=len(request.user_instruction),
                    output_length=len(output) if success else 0,
                )
            )

    async def _drain(self, request: DelegationRequest) -> str:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        producer = asyncio.create_task(self._produce(request, queue))

        fragments: List[str] = []
        try:
            while True:
                item = await queue.get()
                if item is _DONE:
                    break
                fragments.append(item)
        except BaseException:
            producer.cancel()
            raise

        # Re-raises whatever ended the worker run
        await producer
        return "".join(fragments)

    async def _produce(self, request: DelegationRequest, queue: asyncio.Queue) -> None:
        try:
            log_prompt(LOGGER, request.role_name, request.fixed_instruction, self.prompt_log_max_length)
            model = self.model_resolver(request.model_config)
            graph = build_role_graph(model, request.capabilities, checkpointer=self.checkpointer_factory())

            thread_id = f"{request.role_name.lower()}-{uuid.uuid4().hex}"
            run_config = {
                "configurable": {"thread_id": thread_id},
                # agent and tools steps alternate
                "recursion_limit": self.max_loops * 2 + 1,
            }
            initial_state = {
                "messages": [
                    SystemMessage(content=request.fixed_instruction),
                    HumanMessage(content=request.user_instruction),
                ],
                "role": request.role_name,
                "iterations": 0,
                "max_iterations": self.max_loops,
            }

            async for update in graph.astream(initial_state, config=run_config, stream_mode="updates"):
                for node_name, payload in update.items():
                    if node_name != "agent" or not payload:
                        continue
                    for message in payload.get("messages", []):
                        text = extract_text(getattr(message, "content", ""))
                        if text:
                            await queue.put(text)
        finally:
            await queue.put(_DONE)


def build_delegation_tool(
    engine: DelegationEngine,
    role: RoleDefinition,
    capabilities: Sequence[BaseTool],
    context_info: str = "",
) -> BaseTool:
    """Wrap a role as an ``ask_<role>`` capability for the coordinator.

    ``capabilities`` is captured here, once; nothing passed at call time can
    widen it.
    """
    fixed_capabilities = tuple(capabilities)

    async def delegate(instruction: str) -> str:
        LOGGER.info(f">> Delegating to {role.name}...")
        request = engine.build_request(role, fixed_capabilities, instruction, context_info)
        return await engine.execute(request)

    def delegate_sync(instruction: str) -> str:
        return asyncio.run(delegate(instruction))

    return StructuredTool.from_function(
        func=delegate_sync,
        coroutine=delegate,
        name=role.tool_name,
        description=role.description or f"Delegate a task to {role.name}.",
        args_schema=DelegationInput,
    )


__all__ = [
    "DelegationRequest",
    "DelegationInput",
    "DelegationEngine",
    "build_delegation_tool",
]
