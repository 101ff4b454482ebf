"""Tests for the coordinator assembly: AgentManager and MakerApp."""

import pytest
from langchain_core.messages import AIMessage, SystemMessage, ToolMessage

from makerAgent.agents import AgentManager, RoleDefinition
from makerAgent.config import Settings
from makerAgent.goals import NO_GOALS_MESSAGE, parse_goal_document
from makerAgent.models import AgentRoleConfig
from makerAgent.runtime import build_application, build_capability_registry

CONTEXT = "\nCurrent Date: 2024-05-01\nCurrent Working Directory: /work/demo"


@pytest.fixture
def settings(tmp_path):
    settings = Settings()
    settings.storage.data_dir = tmp_path / "data"
    return settings


@pytest.fixture
def make_app(stores, project, settings, tmp_path):
    def factory(resolver):
        return build_application(
            project=project,
            settings=settings,
            model_resolver=resolver,
            stores=stores,
            context_info=CONTEXT,
            cwd=tmp_path,
        )
    return factory


def _ask(tool_name, instruction):
    return AIMessage(content="", tool_calls=[{"name": tool_name, "args": {"instruction": instruction}, "id": "call_1"}])


# ========== AgentManager ==========

def test_coordinator_tools_are_delegations_plus_coordinator_capabilities(make_app, model_queue):
    app = make_app(model_queue())
    names = [tool.name for tool in app.manager.coordinator_tools]

    assert "ask_coder" in names
    assert "ask_goal_tracker" in names
    assert "get_goal_stimulus" in names
    assert "run_shell" not in names
    assert "write_file" not in names
    assert app.manager.capabilities.spawns_process("run_shell")


def test_worker_tools_follow_roles(make_app, model_queue):
    app = make_app(model_queue())

    coder = [tool.name for tool in app.manager.worker_tools["Coder"]]
    sysadmin = [tool.name for tool in app.manager.worker_tools["SysAdmin"]]

    assert coder == ["read_file", "write_file", "list_directory", "read_image"]
    assert sysadmin == ["run_shell"]


def test_unknown_capability_fails_at_construction(store, action_log, project, settings):
    registry = build_capability_registry(store, action_log, project, settings)
    coordinator = RoleDefinition(name="Coordinator", description="", instruction="coordinate")
    broken = RoleDefinition(name="Broken", description="", instruction="", capabilities=("fly",), tool_name="ask_broken")

    with pytest.raises(KeyError):
        AgentManager(
            store=store, action_log=action_log, project=project, engine=None,
            coordinator=coordinator, workers=[broken], capabilities=registry, context_info="",
        )


def test_coordinator_cannot_hold_process_capabilities(store, action_log, project, settings):
    registry = build_capability_registry(store, action_log, project, settings)
    coordinator = RoleDefinition(name="Coordinator", description="", instruction="coordinate", capabilities=("list_directory", "run_shell"))

    with pytest.raises(ValueError, match="run_shell"):
        AgentManager(
            store=store, action_log=action_log, project=project, engine=None,
            coordinator=coordinator, workers=[], capabilities=registry, context_info="",
        )


def test_find_role_is_case_insensitive(make_app, model_queue):
    manager = make_app(model_queue()).manager

    assert manager.find_role("coder").name == "Coder"
    assert manager.find_role("COORDINATOR").name == "Coordinator"
    assert manager.find_role("Pilot") is None


def test_session_context_includes_summary_and_recent_logs(make_app, model_queue, action_log, tmp_path):
    (tmp_path / "session_summary.txt").write_text("Uses pytest.", encoding="utf-8")
    for n in range(12):
        action_log.log("USER", f"message {n}")

    context = make_app(model_queue()).manager.session_context(tmp_path)

    assert "PREVIOUS SESSION CONTEXT:\nUses pytest." in context
    assert "RECENT CONVERSATION HISTORY (From Logs):" in context
    assert "message 11" in context
    assert "message 1\n" not in context


def test_session_context_empty(make_app, model_queue, tmp_path):
    assert make_app(model_queue()).manager.session_context(tmp_path) == ""


def test_coordinator_instruction_carries_stimulus(make_app, model_queue, store, project):
    manager = make_app(model_queue()).manager
    assert manager.coordinator_instruction().endswith(NO_GOALS_MESSAGE)

    store.set_goals(project, parse_goal_document("- Ship v1\n  - Billing\n"))
    instruction = manager.coordinator_instruction("\n\nPREVIOUS SESSION CONTEXT:\nnotes")

    assert instruction.startswith("You are the Coordinator.")
    assert CONTEXT in instruction
    assert instruction.index("PREVIOUS SESSION CONTEXT") < instruction.index("GOAL STIMULUS REPORT:")
    assert "- Ship v1 > Billing" in instruction


# ========== MakerApp ==========

@pytest.mark.asyncio
async def test_chat_delegates_and_returns_final_text(make_app, model_queue, scripted_model, store, action_log):
    coordinator = scripted_model([_ask("ask_coder", "write hello.py"), AIMessage(content="All done.")])
    coder = scripted_model([AIMessage(content="Wrote hello.py")])
    app = make_app(model_queue(coordinator, coder))

    reply = await app.chat("Create hello.py")

    assert reply == "All done."
    tool_message = [m for m in coordinator.calls[1] if isinstance(m, ToolMessage)][0]
    assert tool_message.content == "Wrote hello.py"
    assert coder.bound_tools == ["read_file", "write_file", "list_directory", "read_image"]
    assert [e.role for e in action_log.get_entries()] == ["USER", "SYSTEM", "AGENT"]
    assert store.get_agent_stats()[-1].role == "Coder"


@pytest.mark.asyncio
async def test_worker_failure_does_not_abort_coordinator(make_app, model_queue, scripted_model):
    coordinator = scripted_model([_ask("ask_sysadmin", "uptime"), AIMessage(content="The SysAdmin failed.")])
    sysadmin = scripted_model([RuntimeError("backend down")])
    app = make_app(model_queue(coordinator, sysadmin))

    reply = await app.chat("How long has the box been up?")

    assert reply == "The SysAdmin failed."
    tool_message = [m for m in coordinator.calls[1] if isinstance(m, ToolMessage)][0]
    assert tool_message.content == "Error executing sub-agent SysAdmin: backend down"


@pytest.mark.asyncio
async def test_system_prompt_is_sent_once_per_conversation(make_app, model_queue, scripted_model):
    coordinator = scripted_model([AIMessage(content="one"), AIMessage(content="two"), AIMessage(content="three")])
    app = make_app(model_queue(coordinator))

    await app.chat("first")
    await app.chat("second")

    second_call = coordinator.calls[1]
    assert sum(isinstance(m, SystemMessage) for m in second_call) == 1
    assert "GOAL STIMULUS REPORT" in second_call[0].content or NO_GOALS_MESSAGE in second_call[0].content
    assert len(second_call) == 4

    app.reset()
    await app.chat("third")

    assert len(coordinator.calls[2]) == 2
    assert isinstance(coordinator.calls[2][0], SystemMessage)


@pytest.mark.asyncio
async def test_reset_is_logged(make_app, model_queue, action_log):
    app = make_app(model_queue())
    old = app.thread_id

    assert app.reset() != old
    assert action_log.get_entries()[-1].content == "Session reset by user."


@pytest.mark.asyncio
async def test_chat_error_is_logged_and_raised(make_app, model_queue, scripted_model, action_log):
    app = make_app(model_queue(scripted_model([RuntimeError("rate_limit exceeded")])))

    with pytest.raises(RuntimeError):
        await app.chat("hello")

    assert action_log.get_entries()[-1].role == "ERROR"


@pytest.mark.asyncio
async def test_rebuild_uses_new_coordinator_model(make_app, model_queue, scripted_model, store, project):
    first = scripted_model([AIMessage(content="from first")])
    second = scripted_model([AIMessage(content="from second")])
    resolver = model_queue(first, second)
    app = make_app(resolver)

    await app.chat("hi")

    store.save_role_config(project, app.team, "Coordinator", AgentRoleConfig(provider="DEEPSEEK", model_name="deepseek-chat"))
    app.rebuild()

    assert await app.chat("again") == "from second"
    assert str(resolver.configs[-1]) == "DEEPSEEK/deepseek-chat"


@pytest.mark.asyncio
async def test_parallel_ask_calls_are_serialized(make_app, model_queue, scripted_model, slow_model):
    events = []
    coordinator = scripted_model([
        AIMessage(content="", tool_calls=[
            {"name": "ask_coder", "args": {"instruction": "code"}, "id": "call_1"},
            {"name": "ask_doc_writer", "args": {"instruction": "docs"}, "id": "call_2"},
        ]),
        AIMessage(content="both done"),
    ])
    app = make_app(model_queue(coordinator, slow_model("first", events), slow_model("second", events)))

    assert await app.chat("code and document it") == "both done"

    assert events == ["start first", "end first", "start second", "end second"]
    results = sorted(m.content for m in coordinator.calls[1] if isinstance(m, ToolMessage))
    assert results == ["first done", "second done"]
