"""Checkpointer for LangGraph conversation state."""

from __future__ import annotations

from langgraph.checkpoint.memory import MemorySaver


def build_checkpointer():
    """Build a fresh in-memory LangGraph checkpointer.

    One checkpointer backs exactly one conversation session, so a delegated
    worker never sees the coordinator's history.

    Returns:
        MemorySaver instance for LangGraph checkpointing
    """
    return MemorySaver()
