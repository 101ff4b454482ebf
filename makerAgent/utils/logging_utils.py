"""Logging utilities for makerAgent."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "makerAgent"


def setup_logging(
    level: int = logging.DEBUG,
    log_dir: str | Path = "logs",
    console_level: int | str = logging.WARNING,
) -> logging.Logger:
    """Setup logging configuration for makerAgent.

    Args:
        level: File handler level (default: DEBUG)
        log_dir: Directory receiving one timestamped log file per session
        console_level: Console handler level (default: WARNING)

    Returns:
        Configured logger instance
    """
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"makeragent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    # Every module logger lives under makerAgent.*
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    logger.handlers = []

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("makerAgent session started")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def log_tool_call(logger: logging.Logger, tool_name: str, args: Dict[str, Any]) -> None:
    """Log tool invocation."""
    logger.info(f"Tool call: {tool_name}")
    logger.debug(f"  Arguments: {json.dumps(args, ensure_ascii=False, default=str)}")


def log_tool_result(logger: logging.Logger, tool_name: str, result: Any, success: bool = True) -> None:
    """Log tool execution result (preview truncated to 500 chars)."""
    status = "ok" if success else "failed"
    logger.info(f"Tool result: {tool_name} - {status}")

    result_str = str(result)
    if len(result_str) > 500:
        result_str = result_str[:500] + "... (truncated)"
    logger.debug(f"  Result: {result_str}")


def log_delegation_start(logger: logging.Logger, role: str, model: str, instruction: str) -> None:
    """Log the start of a delegated sub-conversation."""
    logger.info(f"Delegating to {role} ({model})")
    logger.debug(f"  Instruction: {instruction[:200]}{'...' if len(instruction) > 200 else ''}")


def log_delegation_end(
    logger: logging.Logger,
    role: str,
    duration_ms: int,
    success: bool,
    output_length: int,
) -> None:
    """Log the outcome of a delegated sub-conversation."""
    status = "OK" if success else "FAIL"
    logger.info(f"Delegation to {role} finished: {status} in {duration_ms}ms ({output_length} chars)")


def log_error(logger: logging.Logger, error: Exception, context: str = "") -> None:
    """Log error with context and traceback."""
    logger.error(f"Error occurred: {type(error).__name__}: {str(error)}")
    if context:
        logger.error(f"  Context: {context}")
    logger.exception("Full traceback:", exc_info=error)


def log_prompt(logger: logging.Logger, phase: str, prompt: str, max_length: Optional[int] = None) -> None:
    """Log the system prompt used for a role."""
    if max_length and len(prompt) > max_length:
        prompt = prompt[:max_length] + "... (truncated)"
    logger.debug(f"System prompt for {phase}:\n{prompt}")
