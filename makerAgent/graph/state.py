"""Conversation state of one role session."""

from typing import Annotated, Sequence, TypedDict

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages


class RoleState(TypedDict, total=False):
    """State shared by the agent and tools nodes.

    The capability set is not part of the state: it is bound when the graph
    is built and cannot change during a run.
    """

    messages: Annotated[Sequence[BaseMessage], add_messages]
    """Conversation history, system instruction first."""

    role: str
    """Role name, used for logging."""

    iterations: int
    """Completed model calls."""

    max_iterations: int
    """Upper bound on model calls before the run is cut short."""
