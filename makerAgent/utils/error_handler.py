"""Unified error handling for capabilities and the delegation boundary."""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Callable

from .logging_utils import log_tool_call, log_tool_result

LOGGER = logging.getLogger(__name__)


class MakerAgentError(Exception):
    """Base exception for makerAgent errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class StoreUnavailableError(MakerAgentError):
    """Persistence layer could not be read or written."""
    pass


def tool_result(**payload: Any) -> str:
    """Encode a successful capability result."""
    return json.dumps({"ok": True, **payload}, ensure_ascii=False)


def tool_error(message: str, **extra: Any) -> str:
    """Encode a failed capability result carrying an ``error`` key."""
    return json.dumps({"ok": False, "error": message, **extra}, ensure_ascii=False)


def safe_tool_call(tool_name: str):
    """Decorator for safe tool execution with error handling.

    Store outages are re-raised; everything else becomes an ``error`` result.

    Example:
        @safe_tool_call("read_file")
        def _read_file(file_path: str) -> str:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> str:
            log_tool_call(LOGGER, tool_name, kwargs)
            try:
                result = func(*args, **kwargs)
            except StoreUnavailableError:
                raise
            except Exception as e:
                LOGGER.exception(f"Tool {tool_name} failed", exc_info=e)
                return tool_error(f"{tool_name} failed: {e}")
            log_tool_result(LOGGER, tool_name, result, success='"ok": true' in result[:12])
            return result
        return wrapper
    return decorator


def handle_model_error(error: Exception) -> str:
    """Convert model invocation errors to a short readable reason."""
    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "rate limited by the model provider, retry later"

    if "timeout" in error_str or "timed out" in error_str:
        return f"model request timed out ({error})"

    if "context_length" in error_str:
        return "conversation exceeds the model context window"

    if "invalid_api_key" in error_str or "authentication" in error_str:
        return "model provider rejected the API key"

    return str(error) or type(error).__name__


__all__ = [
    "MakerAgentError",
    "StoreUnavailableError",
    "tool_result",
    "tool_error",
    "safe_tool_call",
    "handle_model_error",
]
