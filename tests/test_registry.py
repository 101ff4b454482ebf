"""Tests for the capability registry."""

import json

import pytest
from langchain_core.tools import tool

from makerAgent.tools import CapabilityMeta, CapabilityRegistry


@tool
def echo(text: str) -> str:
    """Echo the text back."""
    return json.dumps({"ok": True, "text": text})


@tool
def ping() -> str:
    """Answer pong."""
    return "pong"


def test_register_and_dispatch_by_name():
    registry = CapabilityRegistry(tools=[echo, ping])

    assert "echo" in registry
    assert registry.names() == ["echo", "ping"]
    assert json.loads(registry.invoke("echo", {"text": "hi"})) == {"ok": True, "text": "hi"}


@pytest.mark.asyncio
async def test_async_dispatch():
    registry = CapabilityRegistry(tools=[echo])

    result = await registry.ainvoke("echo", {"text": "async"})

    assert json.loads(result)["text"] == "async"


def test_unknown_capability_raises():
    registry = CapabilityRegistry()

    with pytest.raises(KeyError, match="Unknown capability: nope"):
        registry.get_tool("nope")
    with pytest.raises(KeyError):
        registry.invoke("nope", {})


def test_select_keeps_order_and_rejects_unknown():
    registry = CapabilityRegistry(tools=[echo, ping])

    assert [t.name for t in registry.select(["ping", "echo"])] == ["ping", "echo"]
    with pytest.raises(KeyError):
        registry.select(["echo", "run_shell"])


def test_spawns_process_flag():
    registry = CapabilityRegistry(
        tools=[echo],
        meta=[CapabilityMeta(name="run_shell", spawns_process=True), CapabilityMeta(name="echo")],
    )

    assert registry.spawns_process("run_shell") is True
    assert registry.spawns_process("echo") is False
    assert registry.spawns_process("ping") is False
