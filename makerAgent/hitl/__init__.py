"""Safety checks for process-spawning capabilities."""

from .command_gate import DENYLIST, CommandGate, GateDecision, is_allowed

__all__ = ["DENYLIST", "CommandGate", "GateDecision", "is_allowed"]
