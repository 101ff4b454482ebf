"""Agent node: one model turn with the role's capabilities bound."""

import logging
from typing import Any, Callable, Sequence

from langchain_core.messages import AIMessage
from langchain_core.tools import BaseTool

from makerAgent.graph.state import RoleState

LOGGER = logging.getLogger(__name__)


def build_agent_node(model: Any, tools: Sequence[BaseTool]) -> Callable:
    """Return an async node bound to ``model`` and a fixed tool list.

    Models without tool support are used as-is when the role has no tools.
    """
    model_with_tools = model.bind_tools(list(tools)) if tools else model

    async def agent_node(state: RoleState) -> dict:
        messages = state["messages"]
        LOGGER.debug(f"[{state.get('role', 'agent')}] model call with {len(messages)} messages")

        response: AIMessage = await model_with_tools.ainvoke(messages)

        return {
            "messages": [response],
            "iterations": state.get("iterations", 0) + 1,
        }

    return agent_node


__all__ = ["build_agent_node"]
