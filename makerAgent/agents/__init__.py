"""Roles, delegation and coordinator assembly."""

from .delegation import DelegationEngine, DelegationInput, DelegationRequest, build_delegation_tool
from .manager import AgentManager
from .roles import (
    BASE_AGENT_POLICY,
    COORDINATOR,
    RoleDefinition,
    build_context_info,
    identity_note,
    load_roles,
)

__all__ = [
    "AgentManager",
    "DelegationEngine",
    "DelegationInput",
    "DelegationRequest",
    "build_delegation_tool",
    "BASE_AGENT_POLICY",
    "COORDINATOR",
    "RoleDefinition",
    "build_context_info",
    "identity_note",
    "load_roles",
]
