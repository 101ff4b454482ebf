"""makerAgent entrypoint.

Usage:
    # Interactive coordinator session (default)
    makeragent

    # One message, no interaction
    makeragent chat --message "Add a goal to set up CI"

    # Goal stimulus for the current project
    makeragent stimulus

    # Goal and action-log documents
    makeragent goals import goals.md
    makeragent goals export goals.md
    makeragent logs export session.md

    # Statistics and per-role models
    makeragent stats
    makeragent config set Coder OLLAMA qwen2.5-coder
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from makerAgent.agents import load_roles
from makerAgent.cli import (
    MakerCLI,
    cmd_config_set,
    cmd_goals_export,
    cmd_goals_import,
    cmd_logs_export,
    cmd_logs_import,
    cmd_stats,
    cmd_stimulus,
    resolve_role_name,
)
from makerAgent.config import get_settings
from makerAgent.persistence import StoreRegistry
from makerAgent.runtime import build_application
from makerAgent.utils.error_handler import MakerAgentError
from makerAgent.utils.logging_utils import setup_logging

LOGGER = logging.getLogger("makerAgent.main")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="makeragent",
        description="makerAgent - a coordinator that delegates to specialist roles and tracks goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--project",
        type=str,
        help="Project key (default: absolute path of the working directory)",
    )
    parser.add_argument(
        "--team",
        type=str,
        help="Team whose role models are used (default: MAKER_TEAM or 'default')",
    )

    subparsers = parser.add_subparsers(dest="command")

    chat = subparsers.add_parser("chat", help="Talk to the coordinator (default)")
    chat.add_argument("--message", type=str, help="Send one message and exit")

    subparsers.add_parser("stimulus", help="Print the goal stimulus report")

    goals = subparsers.add_parser("goals", help="Import or export the goal document")
    goals.add_argument("action", choices=["import", "export"])
    goals.add_argument("path", type=Path)
    goals.add_argument("--replace", action="store_true", help="Replace existing goals on import")

    logs = subparsers.add_parser("logs", help="Import or export the action log")
    logs.add_argument("action", choices=["import", "export"])
    logs.add_argument("path", type=Path)

    subparsers.add_parser("stats", help="Show delegation statistics")

    config = subparsers.add_parser("config", help="Change the model of a role")
    config_sub = config.add_subparsers(dest="config_action", required=True)
    config_set = config_sub.add_parser("set", help="Set provider and model for a role")
    config_set.add_argument("role")
    config_set.add_argument("provider")
    config_set.add_argument("model")

    return parser.parse_args(argv)


def run_store_command(args, settings, project: str) -> int:
    """Commands that only need the stores, not a model."""
    stores = StoreRegistry(settings.storage.data_dir).open()
    try:
        store = stores.central()
        action_log = stores.action_log(project)

        if args.command == "stimulus":
            print(cmd_stimulus(store, project, settings.governance.stimulus_pending_limit), end="")
        elif args.command == "goals" and args.action == "import":
            count = cmd_goals_import(store, project, args.path, replace=args.replace)
            print(f"Imported {count} root goal(s) from {args.path}")
        elif args.command == "goals":
            count = cmd_goals_export(store, project, args.path)
            print(f"Exported {count} goal(s) to {args.path}")
        elif args.command == "logs" and args.action == "import":
            count = cmd_logs_import(action_log, args.path)
            print(f"Imported {count} log entries from {args.path}")
        elif args.command == "logs":
            count = cmd_logs_export(action_log, args.path)
            print(f"Exported {count} log entries to {args.path}")
        elif args.command == "stats":
            print(cmd_stats(store))
        elif args.command == "config":
            coordinator, workers = load_roles(settings.storage.roles_config_path)
            role = resolve_role_name([coordinator.name] + [w.name for w in workers], args.role)
            config = cmd_config_set(store, project, settings.storage.team, role, args.provider, args.model)
            print(f"{role} now uses {config}")
        return 0
    finally:
        stores.close()


async def run_chat(args, settings, project: str) -> int:
    app = build_application(project=project, settings=settings)
    try:
        if args.command == "chat" and args.message:
            reply = await app.chat(args.message)
            print(reply)
            return 0

        cli = MakerCLI(app, pending_limit=settings.governance.stimulus_pending_limit)
        await cli.run()
        return 0
    finally:
        app.close()


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.team:
        # get_settings() is cached; keep the shared instance untouched
        storage = settings.storage.model_copy(update={"team": args.team})
        settings = settings.model_copy(update={"storage": storage})

    setup_logging(
        log_dir=settings.observability.log_dir,
        console_level=settings.observability.console_level.upper(),
    )

    project = args.project or str(Path.cwd().resolve())
    LOGGER.info(f"Project: {project} | Team: {settings.storage.team} | Command: {args.command or 'chat'}")

    try:
        if args.command in (None, "chat"):
            return asyncio.run(run_chat(args, settings, project))
        return run_store_command(args, settings, project)
    except (FileNotFoundError, ValueError, MakerAgentError) as e:
        LOGGER.error(f"Command failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
