"""Role conversation graph."""

from makerAgent.graph.builder import build_role_graph, should_continue
from makerAgent.graph.state import RoleState

__all__ = ["RoleState", "build_role_graph", "should_continue"]
