"""Command-line interface for makerAgent.

Two layers:
- one-shot commands (stimulus, goals/logs import and export, stats, config)
  that only touch the stores;
- ``MakerCLI``, the interactive coordinator loop with slash commands.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from makerAgent.goals import (
    export_goals,
    export_logs,
    get_goal_stimulus,
    import_goals,
    import_logs,
    render_goal_document,
)
from makerAgent.models import AgentRoleConfig, AgentStat
from makerAgent.persistence import ActionLog, CentralStore
from makerAgent.runtime.app import MakerApp
from makerAgent.utils.error_handler import handle_model_error

LOGGER = logging.getLogger(__name__)

STATS_DISPLAY_LIMIT = 20
MODEL_COLUMN_WIDTH = 25

SUMMARIZE_PROMPT = (
    "Retrieve the action logs using the 'get_action_logs' tool. Then, summarize the key "
    "technical context, user preferences, and important decisions. Write this summary to "
    "'session_summary.txt'."
)


# ========== One-shot commands ==========


def cmd_stimulus(store: CentralStore, project: str, pending_limit: int = 5) -> str:
    return get_goal_stimulus(store, project, pending_limit=pending_limit)


def cmd_goals_import(store: CentralStore, project: str, path: Path | str, replace: bool = False) -> int:
    """Import a goal document; roots are appended unless ``replace`` is set.

    Returns:
        Number of imported root goals
    """
    imported = import_goals(path)
    forest = [] if replace else store.get_goals(project)
    store.set_goals(project, forest + imported)
    return len(imported)


def cmd_goals_export(store: CentralStore, project: str, path: Path | str) -> int:
    return export_goals(store, project, path)


def cmd_logs_import(action_log: ActionLog, path: Path | str) -> int:
    return import_logs(path, action_log)


def cmd_logs_export(action_log: ActionLog, path: Path | str) -> int:
    return export_logs(action_log, path)


def format_stats(stats: List[AgentStat], limit: int = STATS_DISPLAY_LIMIT) -> str:
    """Tabulate the most recent ``limit`` delegation stats."""
    if not stats:
        return "No statistics available yet."

    header = f"{'Agent':<15} | {'Provider':<10} | {'Model':<25} | {'Duration':<10} | {'Success':<8} | In/Out"
    rule = "-" * 95
    lines = ["Agent Statistics:", header, rule]
    for stat in stats[-limit:]:
        model = stat.model
        if len(model) > MODEL_COLUMN_WIDTH:
            model = model[: MODEL_COLUMN_WIDTH - 3] + "..."
        duration = f"{stat.duration_ms}ms"
        lines.append(
            f"{stat.role:<15} | {stat.provider:<10} | {model:<25} | {duration:<10} | "
            f"{str(stat.success).lower():<8} | {stat.input_length}/{stat.output_length}"
        )
    lines.append(rule)
    lines.append(f"Total Invocations: {len(stats)}")
    return "\n".join(lines)


def cmd_stats(store: CentralStore) -> str:
    return format_stats(store.get_agent_stats())


def resolve_role_name(role_names: List[str], name: str) -> str:
    """Return the configured spelling of ``name``, matched case-insensitively.

    Raises:
        ValueError: If no role has that name
    """
    for candidate in role_names:
        if candidate.lower() == name.lower():
            return candidate
    raise ValueError(f"Unknown role: {name}. Roles: {', '.join(role_names)}")


def cmd_config_set(
    store: CentralStore,
    project: str,
    team: str,
    role: str,
    provider: str,
    model: str,
) -> AgentRoleConfig:
    """Persist a model override for ``role``.

    Raises:
        ValueError: For unknown providers or empty model names
    """
    config = AgentRoleConfig.model_validate({"provider": provider, "model_name": model})
    store.save_role_config(project, team, role, config)
    return config


# ========== Interactive loop ==========


class MakerCLI:
    """Interactive coordinator conversation.

    Plain input goes to the coordinator; lines starting with ``/`` are
    commands. ``exit`` also quits.
    """

    COMMANDS: Dict[str, str] = {
        "/help": "Show this help",
        "/quit": "Quit",
        "/exit": "Quit",
        "/reset": "Start a new coordinator conversation",
        "/status": "Show the model of every role",
        "/config <role> <provider> <model>": "Change the model of a role",
        "/stats": "Show delegation statistics",
        "/goals": "Show the goal tree",
        "/stimulus": "Show the goal stimulus report",
        "/summarize": "Ask the coordinator to write session_summary.txt",
    }

    def __init__(self, app: MakerApp, pending_limit: int = 5):
        self.app = app
        self.pending_limit = pending_limit
        self._handlers: Dict[str, Callable] = {
            "/help": self._handle_help,
            "/quit": self._handle_quit,
            "/exit": self._handle_quit,
            "/reset": self._handle_reset,
            "/status": self._handle_status,
            "/config": self._handle_config,
            "/stats": self._handle_stats,
            "/goals": self._handle_goals,
            "/stimulus": self._handle_stimulus,
            "/summarize": self._handle_summarize,
        }
        self._running = False

    def print_welcome(self) -> None:
        print("\n" + "=" * 60)
        print("  makerAgent - coordinator with specialist roles")
        print("=" * 60)
        print(f"Project : {self.app.project}")
        print(f"Team    : {self.app.team}")
        print(f"Model   : {self.app.coordinator_config()}")
        if self.app.store.are_goals_pending(self.app.project):
            print("Goals   : open goals remain, see /stimulus")
        print("Type /help for commands.")
        print("=" * 60 + "\n")

    async def get_input(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: input("You> ").strip())

    async def run(self) -> None:
        self._running = True
        self.print_welcome()

        while self._running:
            try:
                user_input = await self.get_input()
                if not user_input:
                    continue

                if user_input.lower() == "exit":
                    break

                if user_input.startswith("/"):
                    if not await self.handle_command(user_input):
                        break
                else:
                    await self.handle_user_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\nBye.")
                LOGGER.info("Session interrupted by user")
                break

        LOGGER.info("CLI shutting down")

    async def handle_command(self, line: str) -> bool:
        """Dispatch a slash command.

        Returns:
            False when the loop should stop
        """
        parts = line.split(maxsplit=1)
        name = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else None

        handler = self._handlers.get(name)
        if handler is None:
            print(f"Unknown command: {name}. Type /help for the list.")
            return True
        return await handler(arg)

    async def handle_user_message(self, text: str) -> None:
        try:
            reply = await self.app.chat(text)
        except Exception as e:
            LOGGER.error(f"Error processing message: {e}", exc_info=True)
            print(f"\nError: {handle_model_error(e)}\n")
            return
        print(f"\nAgent> {reply}\n")

    # ========== Command handlers ==========

    async def _handle_help(self, arg: Optional[str]) -> bool:
        print("\nAvailable commands:")
        for command, description in self.COMMANDS.items():
            print(f"  {command:<36} {description}")
        print("  exit" + " " * 33 + "Quit")
        print()
        return True

    async def _handle_quit(self, arg: Optional[str]) -> bool:
        print("Session ended.")
        return False

    async def _handle_reset(self, arg: Optional[str]) -> bool:
        thread_id = self.app.reset()
        print(f"Session reset. New session: {thread_id}\n")
        return True

    async def _handle_status(self, arg: Optional[str]) -> bool:
        print(f"\n{'Role':<16} | {'Provider':<10} | Model")
        print("-" * 60)
        for name in sorted(self.app.manager.role_names()):
            config = self.app.engine.resolve_role_config(name)
            print(f"{name:<16} | {config.provider.value:<10} | {config.model_name}")
        print()
        return True

    async def _handle_config(self, arg: Optional[str]) -> bool:
        parts = (arg or "").split()
        if len(parts) != 3:
            print("Usage: /config <role> <provider> <model>")
            return True

        role = self.app.manager.find_role(parts[0])
        if role is None:
            print(f"Unknown role: {parts[0]}. Roles: {', '.join(self.app.manager.role_names())}")
            return True

        try:
            config = cmd_config_set(self.app.store, self.app.project, self.app.team, role.name, parts[1], parts[2])
        except ValueError as e:
            print(f"Invalid config: {e}")
            return True

        if role.name == self.app.manager.coordinator.name:
            self.app.rebuild()
        print(f"{role.name} now uses {config}\n")
        return True

    async def _handle_stats(self, arg: Optional[str]) -> bool:
        print(cmd_stats(self.app.store) + "\n")
        return True

    async def _handle_goals(self, arg: Optional[str]) -> bool:
        forest = self.app.store.get_goals(self.app.project)
        print(render_goal_document(forest, include_ids=True) if forest else "No goals defined for this project.")
        return True

    async def _handle_stimulus(self, arg: Optional[str]) -> bool:
        print(cmd_stimulus(self.app.store, self.app.project, self.pending_limit))
        return True

    async def _handle_summarize(self, arg: Optional[str]) -> bool:
        print("Requesting session summary...")
        await self.handle_user_message(SUMMARIZE_PROMPT)
        return True


__all__ = [
    "MakerCLI",
    "SUMMARIZE_PROMPT",
    "cmd_stimulus",
    "cmd_goals_import",
    "cmd_goals_export",
    "cmd_logs_import",
    "cmd_logs_export",
    "cmd_stats",
    "cmd_config_set",
    "resolve_role_name",
    "format_stats",
]
