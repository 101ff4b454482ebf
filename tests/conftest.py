"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import asyncio
import sys
from pathlib import Path

import pytest
from langchain_core.messages import AIMessage

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from makerAgent.persistence import StoreRegistry  # noqa: E402

PROJECT = "/work/demo"


@pytest.fixture
def project():
    return PROJECT


@pytest.fixture
def stores(tmp_path):
    """Store registry on a temporary data directory."""
    registry = StoreRegistry(tmp_path / "data").open()
    yield registry
    registry.close()


@pytest.fixture
def store(stores):
    return stores.central()


@pytest.fixture
def action_log(stores, project):
    return stores.action_log(project)


class ScriptedModel:
    """Chat model stand-in that replays prepared responses.

    ``bind_tools`` records the bound tool names; ``ainvoke`` records the
    messages it was called with. An Exception in the script is raised.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.bound_tools = None
        self.calls = []

    def bind_tools(self, tools):
        self.bound_tools = [tool.name for tool in tools]
        return self

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class ModelQueue:
    """Model resolver handing out prepared models in order."""

    def __init__(self, *models):
        self.models = list(models)
        self.configs = []

    def __call__(self, config):
        self.configs.append(config)
        return self.models.pop(0)


class SlowModel:
    """Chat model stand-in that records when its turn starts and ends."""

    def __init__(self, label, events, delay=0.05):
        self.label = label
        self.events = events
        self.delay = delay

    def bind_tools(self, tools):
        return self

    async def ainvoke(self, messages):
        self.events.append(f"start {self.label}")
        await asyncio.sleep(self.delay)
        self.events.append(f"end {self.label}")
        return AIMessage(content=f"{self.label} done")


@pytest.fixture
def scripted_model():
    return ScriptedModel


@pytest.fixture
def model_queue():
    return ModelQueue


@pytest.fixture
def slow_model():
    return SlowModel
