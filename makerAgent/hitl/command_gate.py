"""Denylist gate for capabilities that spawn OS processes.

This is a literal substring scan, not a sandbox. It blocks known-bad command
fragments and nothing else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import yaml

LOGGER = logging.getLogger(__name__)

DENYLIST: Tuple[str, ...] = (
    # Recursive root deletion
    "rm -rf /",
    "rm -fr /",
    # Fork bombs
    ":(){:|:&};:",
    ":(){ :|:& };:",
    # Raw block devices
    "mkfs",
    "> /dev/sd",
    "of=/dev/sd",
    # Power state
    "shutdown",
    "reboot",
    # Windows system directory
    "format c:",
    "rd /s /q c:\\windows",
    "del /f /s /q c:\\windows",
    # Reverse shells
    "nc -e",
    "bash -i >&",
)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a gate check."""

    allowed: bool
    reason: str = ""
    matched: Optional[str] = None


def _scan(command: Optional[str], patterns: Iterable[str]) -> GateDecision:
    if not command or not command.strip():
        return GateDecision(allowed=False, reason="Empty command")

    normalized = command.lower()
    for pattern in patterns:
        if pattern in normalized:
            return GateDecision(
                allowed=False,
                reason=f"Command matches denied pattern: {pattern}",
                matched=pattern,
            )
    return GateDecision(allowed=True)


def is_allowed(command: Optional[str]) -> bool:
    """Return False for empty commands or any command containing a denied fragment."""
    return _scan(command, DENYLIST).allowed


class CommandGate:
    """Built-in denylist plus optional extra entries from YAML.

    The YAML file holds a single key::

        denylist:
          - "curl | sh"
          - "chmod -r 777 /"
    """

    def __init__(self, config_path: Optional[Path] = None, extra: Optional[Iterable[str]] = None):
        self.config_path = config_path
        patterns: List[str] = list(DENYLIST)
        patterns.extend(self._load_config())
        if extra:
            patterns.extend(item.lower() for item in extra if item)
        self.patterns: Tuple[str, ...] = tuple(dict.fromkeys(patterns))

    def _load_config(self) -> List[str]:
        if not self.config_path or not Path(self.config_path).exists():
            return []

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            LOGGER.warning(f"Failed to load denylist config {self.config_path}: {e}")
            return []

        entries = data.get("denylist", []) if isinstance(data, dict) else []
        return [str(entry).lower() for entry in entries if entry]

    def check(self, command: Optional[str]) -> GateDecision:
        decision = _scan(command, self.patterns)
        if not decision.allowed:
            LOGGER.warning(f"Command denied: {decision.reason}")
        return decision

    def is_allowed(self, command: Optional[str]) -> bool:
        return self.check(command).allowed


__all__ = ["DENYLIST", "GateDecision", "CommandGate", "is_allowed"]
