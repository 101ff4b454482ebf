"""Tests for the central memory and action-log capabilities."""

import json

import pytest

from makerAgent.models import Goal
from makerAgent.tools.builtin import create_memory_tools
from makerAgent.tools.builtin.memory_tools import NO_MEMORY_MESSAGE, NO_PROJECTS_MESSAGE


@pytest.fixture
def tools(store, action_log, project):
    return {tool.name: tool for tool in create_memory_tools(store, action_log, project)}


def _call(tools, name, **args):
    return json.loads(tools[name].invoke(args))


def test_save_and_read_memory(tools, project):
    saved = _call(tools, "save_central_memory", content="Uses FastAPI")

    assert saved["status"] == f"Memory saved successfully for {project}"
    assert "Uses FastAPI" in _call(tools, "read_central_memory")["memory"]


def test_read_memory_of_other_project(tools, store):
    store.save_memory("/other", "other notes")

    assert "other notes" in _call(tools, "read_central_memory", project_path="/other")["memory"]
    assert _call(tools, "read_central_memory", project_path="/nowhere")["memory"] == NO_MEMORY_MESSAGE


def test_list_projects(tools, store):
    assert _call(tools, "list_central_memory_projects")["projects"] == NO_PROJECTS_MESSAGE

    store.save_memory("/b", "x")
    store.add_goal("/a", Goal(description="y"))

    assert _call(tools, "list_central_memory_projects")["projects"] == "/a\n/b"


def test_get_action_logs(tools, action_log):
    action_log.log("USER", "first")
    action_log.log("AGENT", "second")

    full = _call(tools, "get_action_logs")["logs"].splitlines()
    recent = _call(tools, "get_action_logs", limit=1)["logs"].splitlines()

    assert [line.split("] ", 1)[1] for line in full] == ["USER: first", "AGENT: second"]
    assert recent == full[1:]


def test_get_action_logs_rejects_zero_limit(tools):
    with pytest.raises(Exception):
        tools["get_action_logs"].invoke({"limit": 0})
