"""Execute shell commands behind the command gate."""

import logging
import subprocess
from typing import Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from makerAgent.hitl.command_gate import CommandGate
from makerAgent.utils.error_handler import safe_tool_call, tool_error, tool_result

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10
TIMEOUT_MARKER = "\n[Timeout]"


class RunShellInput(BaseModel):
    command: str = Field(..., description="The command to execute.")


def _as_text(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def execute_command(command: str, gate: CommandGate, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS) -> str:
    """Run ``command`` through the shell unless the gate refuses it.

    stdout and stderr are merged. A refused command never reaches
    ``subprocess``.
    """
    decision = gate.check(command)
    if not decision.allowed:
        return tool_error(
            f"Command blocked by security policy: {decision.reason}",
            denied=True,
        )

    LOGGER.info(f"Executing shell command: {command}")
    try:
        result = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired as e:
        LOGGER.warning(f"Shell command timed out after {timeout_seconds}s: {command}")
        return tool_error(
            f"Command timed out after {timeout_seconds}s",
            exit_code=-1,
            output=_as_text(e.output) + TIMEOUT_MARKER,
        )

    return tool_result(exit_code=result.returncode, output=result.stdout or "")


def create_run_shell_tool(gate: Optional[CommandGate] = None, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS) -> BaseTool:
    """Build the ``run_shell`` capability bound to a gate and timeout."""
    gate = gate or CommandGate()

    @safe_tool_call("run_shell")
    def run_shell(command: str) -> str:
        return execute_command(command, gate, timeout_seconds)

    return StructuredTool.from_function(
        func=run_shell,
        name="run_shell",
        description=(
            "Executes a shell command and returns its exit code and combined output. "
            f"Commands are killed after {timeout_seconds}s. "
            "Destructive commands are refused by the security policy."
        ),
        args_schema=RunShellInput,
    )


__all__ = ["RunShellInput", "execute_command", "create_run_shell_tool"]
