"""Role definitions loaded from roles.yaml.

Every worker role gets a fixed instruction built from the shared policy, its
own instruction and the session context, and a fixed capability list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from makerAgent.config.project_root import resolve_project_path
from makerAgent.models import AgentRoleConfig

LOGGER = logging.getLogger(__name__)

COORDINATOR = "Coordinator"
DEFAULT_ROLES_PATH = "makerAgent/config/roles.yaml"

BASE_AGENT_POLICY = (
    "Authority:\n"
    "- You are an autonomous specialist operating under the Coordinator agent.\n"
    "- You MUST act only within the scope of your assigned responsibilities.\n"
    "\n"
    "General Rules:\n"
    "- You MUST follow all explicit instructions provided by the Coordinator.\n"
    "- You MUST analyze the task and relevant context before taking any action.\n"
    "- You MUST produce deterministic, reproducible outputs.\n"
    "- You SHOULD minimize unnecessary actions and side effects.\n"
    "- You MUST clearly report what actions were taken and why.\n"
    "- You MUST NOT assume missing information; request clarification when required.\n"
    "\n"
    "Tool Usage Policy:\n"
    "- You MUST use only the tools explicitly available to you.\n"
    "- You MUST NOT simulate or claim tool execution that did not occur.\n"
    "- You SHOULD prefer read-only operations unless modification is explicitly required.\n"
    "\n"
    "Safety & Quality:\n"
    "- You MUST preserve data integrity and avoid destructive actions.\n"
    "- You SHOULD favor minimal, reversible changes.\n"
    "- You MUST report errors, risks, or inconsistencies immediately.\n"
)

NO_ACTION_LOG_NOTE = (
    "NOTE: You do not have direct access to action logs. If you need historical context "
    "or logs to complete a task, state this clearly in your final report so the "
    "Coordinator can provide it in the next turn."
)


@dataclass(frozen=True)
class RoleDefinition:
    """One role as declared in roles.yaml."""

    name: str
    description: str
    instruction: str
    capabilities: Tuple[str, ...] = field(default_factory=tuple)
    tool_name: Optional[str] = None

    def fixed_instruction(self, context_info: str = "") -> str:
        """Shared policy, role instruction and session context."""
        return f"{BASE_AGENT_POLICY}\n{self.instruction.rstrip()}\n{context_info}"


def build_context_info(cwd: Optional[Path] = None, today: Optional[date] = None) -> str:
    """Date and working directory appended to every instruction."""
    cwd = cwd or Path.cwd()
    today = today or date.today()
    return f"\nCurrent Date: {today.isoformat()}\nCurrent Working Directory: {cwd.resolve()}"


def identity_note(config: AgentRoleConfig) -> str:
    """Tell a worker which backend it runs on."""
    return (
        f"\n\n[System State: Running on Provider: {config.provider.value}, Model: {config.model_name}]"
        f"\n\n{NO_ACTION_LOG_NOTE}"
    )


def _parse_role(raw: Dict[str, Any]) -> RoleDefinition:
    return RoleDefinition(
        name=raw["name"],
        description=raw.get("description", ""),
        instruction=raw.get("instruction", ""),
        capabilities=tuple(raw.get("capabilities", []) or []),
        tool_name=raw.get("tool_name"),
    )


def load_roles(path: Optional[Path | str] = None) -> Tuple[RoleDefinition, List[RoleDefinition]]:
    """Read the coordinator and the worker roles from YAML.

    Returns:
        (coordinator, workers) in file order

    Raises:
        ValueError: If the file lacks a coordinator, a role lacks a tool name,
            or two roles share a name or tool name
    """
    config_path = resolve_project_path(path or DEFAULT_ROLES_PATH)
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if "coordinator" not in data:
        raise ValueError(f"{config_path}: missing 'coordinator' section")

    coordinator = _parse_role(data["coordinator"])
    workers = [_parse_role(item) for item in data.get("roles", [])]

    seen_names = {coordinator.name}
    seen_tools = set()
    for role in workers:
        if not role.tool_name:
            raise ValueError(f"{config_path}: role {role.name} has no tool_name")
        if role.name in seen_names or role.tool_name in seen_tools:
            raise ValueError(f"{config_path}: duplicate role {role.name} / {role.tool_name}")
        seen_names.add(role.name)
        seen_tools.add(role.tool_name)

    LOGGER.info(f"Loaded {len(workers)} roles from {config_path}")
    return coordinator, workers


__all__ = [
    "COORDINATOR",
    "BASE_AGENT_POLICY",
    "NO_ACTION_LOG_NOTE",
    "RoleDefinition",
    "build_context_info",
    "identity_note",
    "load_roles",
]
