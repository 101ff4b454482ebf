"""Graph nodes."""

from makerAgent.graph.nodes.agent import build_agent_node

__all__ = ["build_agent_node"]
