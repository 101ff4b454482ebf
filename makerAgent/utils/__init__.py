"""Utilities for makerAgent."""

from .error_handler import (
    MakerAgentError,
    StoreUnavailableError,
    handle_model_error,
    safe_tool_call,
    tool_error,
    tool_result,
)
from .logging_utils import (
    log_delegation_end,
    log_delegation_start,
    log_error,
    log_prompt,
    log_tool_call,
    log_tool_result,
    setup_logging,
)
from .message_utils import extract_text

__all__ = [
    "setup_logging",
    "log_tool_call",
    "log_tool_result",
    "log_delegation_start",
    "log_delegation_end",
    "log_error",
    "log_prompt",
    "extract_text",
    "MakerAgentError",
    "StoreUnavailableError",
    "tool_result",
    "tool_error",
    "safe_tool_call",
    "handle_model_error",
]
