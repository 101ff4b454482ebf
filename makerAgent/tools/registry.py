"""Name-keyed capability registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from langchain_core.tools import BaseTool


@dataclass(frozen=True, slots=True)
class CapabilityMeta:
    """Governance attributes for a capability."""

    name: str
    spawns_process: bool = False


class CapabilityRegistry:
    """Tracks capability instances and dispatches calls by name."""

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None, meta: Optional[Iterable[CapabilityMeta]] = None) -> None:
        self._tools: Dict[str, BaseTool] = {}
        self._meta: Dict[str, CapabilityMeta] = {}
        if tools:
            for tool in tools:
                self.register_tool(tool)
        if meta:
            for item in meta:
                self.register_meta(item)

    def register_tool(self, tool: BaseTool) -> None:
        self._tools[tool.name] = tool

    def register_meta(self, metadata: CapabilityMeta) -> None:
        self._meta[metadata.name] = metadata

    def get_tool(self, name: str) -> BaseTool:
        if name not in self._tools:
            raise KeyError(f"Unknown capability: {name}")
        return self._tools[name]

    def spawns_process(self, name: str) -> bool:
        """True when ``name`` was registered as starting OS processes."""
        meta = self._meta.get(name)
        return meta is not None and meta.spawns_process

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> List[str]:
        return list(self._tools)

    def select(self, names: Iterable[str]) -> List[BaseTool]:
        """Resolve a fixed capability list, in the given order.

        Raises:
            KeyError: If any name is not registered
        """
        return [self.get_tool(name) for name in names]

    def invoke(self, name: str, args: Dict[str, Any]) -> Any:
        """Dispatch a key/value argument map to the named capability."""
        return self.get_tool(name).invoke(args)

    async def ainvoke(self, name: str, args: Dict[str, Any]) -> Any:
        return await self.get_tool(name).ainvoke(args)


__all__ = ["CapabilityMeta", "CapabilityRegistry"]
