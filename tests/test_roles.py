"""Tests for role definitions and their fixed capability sets."""

from datetime import date
from pathlib import Path

import pytest

from makerAgent.agents import BASE_AGENT_POLICY, COORDINATOR, RoleDefinition, build_context_info, identity_note, load_roles
from makerAgent.models import AgentRoleConfig

FILE_CAPABILITIES = {"read_file", "write_file", "list_directory", "read_image"}


@pytest.fixture(scope="module")
def roles():
    coordinator, workers = load_roles()
    return coordinator, {role.name: role for role in workers}


def test_coordinator_section(roles):
    coordinator, _ = roles

    assert coordinator.name == COORDINATOR
    assert coordinator.tool_name is None
    assert "get_goal_stimulus" in coordinator.capabilities


def test_every_worker_has_unique_tool_name(roles):
    _, workers = roles
    tool_names = [role.tool_name for role in workers.values()]

    assert len(tool_names) == len(set(tool_names))
    assert all(name.startswith("ask_") for name in tool_names)


def test_coder_never_gets_process_execution(roles):
    _, workers = roles

    assert set(workers["Coder"].capabilities) == FILE_CAPABILITIES
    assert "run_shell" not in workers["Coder"].capabilities


def test_standard_role_capabilities(roles):
    _, workers = roles

    assert workers["SysAdmin"].capabilities == ("run_shell",)
    assert set(workers["Tester"].capabilities) == FILE_CAPABILITIES | {"run_shell"}
    assert set(workers["DocWriter"].capabilities) == {"read_file", "write_file", "list_directory"}
    assert set(workers["GoalTracker"].capabilities) == {"add_goal", "list_goals", "update_goal"}


def test_fixed_instruction_layout():
    role = RoleDefinition(name="Coder", description="", instruction="You are the Coder.\n")

    text = role.fixed_instruction("\nCurrent Date: 2024-01-01")

    assert text.startswith(BASE_AGENT_POLICY)
    assert text.endswith("You are the Coder.\n\nCurrent Date: 2024-01-01")


def test_context_info(tmp_path):
    info = build_context_info(cwd=tmp_path, today=date(2024, 5, 1))

    assert info == f"\nCurrent Date: 2024-05-01\nCurrent Working Directory: {tmp_path.resolve()}"


def test_identity_note():
    note = identity_note(AgentRoleConfig(provider="OLLAMA", model_name="qwen2.5-coder"))

    assert "[System State: Running on Provider: OLLAMA, Model: qwen2.5-coder]" in note
    assert "do not have direct access to action logs" in note


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "roles.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_roles_requires_coordinator(tmp_path):
    with pytest.raises(ValueError, match="coordinator"):
        load_roles(_write(tmp_path, "roles: []\n"))


def test_load_roles_requires_tool_name(tmp_path):
    path = _write(tmp_path, "coordinator:\n  name: Coordinator\nroles:\n  - name: Coder\n")

    with pytest.raises(ValueError, match="tool_name"):
        load_roles(path)


def test_load_roles_rejects_duplicates(tmp_path):
    path = _write(
        tmp_path,
        "coordinator:\n  name: Coordinator\n"
        "roles:\n"
        "  - {name: Coder, tool_name: ask_coder}\n"
        "  - {name: Other, tool_name: ask_coder}\n",
    )

    with pytest.raises(ValueError, match="duplicate"):
        load_roles(path)
