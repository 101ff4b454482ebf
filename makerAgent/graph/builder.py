"""LangGraph builder for role sessions.

START -> agent <-> tools, agent -> END once the model stops calling tools.
"""

from typing import Any, Literal, Optional, Sequence

from langchain_core.tools import BaseTool
from langgraph.graph import END, StateGraph
from langgraph.prebuilt import ToolNode

from makerAgent.graph.nodes import build_agent_node
from makerAgent.graph.state import RoleState

DEFAULT_MAX_ITERATIONS = 50


def build_role_graph(model: Any, tools: Sequence[BaseTool], checkpointer: Optional[Any] = None):
    """Compile the conversation graph of one role.

    Args:
        model: LangChain chat model (anything with ``bind_tools`` and ``ainvoke``)
        tools: The role's capabilities; fixed for the lifetime of the graph
        checkpointer: LangGraph checkpointer holding this session's history

    Returns:
        Compiled graph
    """
    workflow = StateGraph(RoleState)

    workflow.add_node("agent", build_agent_node(model, tools))
    workflow.set_entry_point("agent")

    if tools:
        workflow.add_node("tools", ToolNode(list(tools)))
        workflow.add_conditional_edges(
            "agent",
            should_continue,
            {
                "continue": "tools",
                "end": END,
            },
        )
        workflow.add_edge("tools", "agent")
    else:
        workflow.add_edge("agent", END)

    return workflow.compile(checkpointer=checkpointer)


def should_continue(state: RoleState) -> Literal["continue", "end"]:
    """Route to the tools node while the last message carries tool calls."""
    messages = state["messages"]
    last_message = messages[-1]

    iterations = state.get("iterations", 0)
    max_iterations = state.get("max_iterations", DEFAULT_MAX_ITERATIONS)
    if iterations >= max_iterations:
        return "end"

    if getattr(last_message, "tool_calls", None):
        return "continue"

    return "end"


__all__ = ["build_role_graph", "should_continue"]
