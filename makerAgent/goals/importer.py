"""Import goal trees and action logs from plain-text documents.

Both parsers are lenient: malformed input degrades to best-effort structure
instead of raising.

Goal documents are indented bullet lists::

    - Ship v1
      - Backend
        - [COMPLETED] Auth
        - Billing

Log documents are ``### ROLE - TIMESTAMP`` headers followed by free text,
optionally closed by ``---`` separator lines.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import List, Optional, Tuple

from makerAgent.models import Goal, GoalStatus
from makerAgent.persistence.action_log import ActionLog, LogEntry

LOGGER = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"
LOG_HEADER_PREFIX = "### "
LOG_HEADER_SEPARATOR = " - "
LOG_ENTRY_SEPARATOR = "---"

# Checked in this order; the first token found wins.
STATUS_TOKENS: Tuple[Tuple[str, GoalStatus], ...] = (
    ("[COMPLETED]", GoalStatus.COMPLETED),
    ("[IN_PROGRESS]", GoalStatus.IN_PROGRESS),
    ("[FAILED]", GoalStatus.FAILED),
    ("[PENDING]", GoalStatus.PENDING),
)

# Annotation plus the blanks around it, so removal leaves a single space
_STATUS_ANNOTATION = re.compile(
    r"[ \t]*(?:\*\*\[(?:COMPLETED|IN_PROGRESS|FAILED|PENDING)\]\*\*|\[(?:COMPLETED|IN_PROGRESS|FAILED|PENDING)\])[ \t]*"
)
VARIATION_SELECTOR = "\ufe0f"


def _leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _detect_status(text: str) -> GoalStatus:
    for token, status in STATUS_TOKENS:
        if token in text:
            return status
    return GoalStatus.PENDING


def _strip_decoration(text: str) -> str:
    """Drop one leading pictograph such as an emoji status icon.

    Only "other symbol" characters count; currency and math signs are text.
    """
    if text and unicodedata.category(text[0]) == "So":
        text = text[1:].lstrip(VARIATION_SELECTOR).lstrip()
    return text


def parse_goal_line(text: str) -> Goal:
    """Build a Goal from one bullet's text (list marker already removed)."""
    status = _detect_status(text)
    description = _STATUS_ANNOTATION.sub(" ", text).strip()
    description = _strip_decoration(description)
    return Goal(description=description, status=status)


def parse_goal_document(text: str) -> List[Goal]:
    """Convert an indented bullet list into a goal forest.

    A line becomes the child of the nearest preceding line with strictly
    smaller indentation; lines with no such ancestor become roots.
    """
    roots: List[Goal] = []
    stack: List[Tuple[Goal, int]] = []

    for line in text.splitlines():
        if not line.strip():
            continue

        indent = _leading_spaces(line)
        body = line.strip()
        if body.startswith("- ") or body.startswith("* "):
            body = body[2:]

        goal = parse_goal_line(body)

        while stack and stack[-1][1] >= indent:
            stack.pop()

        if stack:
            stack[-1][0].sub_goals.append(goal)
        else:
            roots.append(goal)

        stack.append((goal, indent))

    return roots


def _parse_log_header(line: str) -> Tuple[str, str]:
    rest = line[len(LOG_HEADER_PREFIX):]
    if LOG_HEADER_SEPARATOR not in rest:
        return UNKNOWN, UNKNOWN
    role, timestamp = rest.split(LOG_HEADER_SEPARATOR, 1)
    role, timestamp = role.strip(), timestamp.strip()
    if not role or not timestamp:
        return UNKNOWN, UNKNOWN
    return role, timestamp


def parse_log_document(text: str) -> List[LogEntry]:
    """Convert a ``### ROLE - TIMESTAMP`` transcript into log entries.

    Body lines are kept verbatim and the joined body is trimmed when the
    entry is closed by the next header, a ``---`` line or the end of input.
    Text outside any open entry (before the first header or after a
    ``---`` line) is discarded.
    """
    entries: List[LogEntry] = []
    role: Optional[str] = None
    timestamp = ""
    body: List[str] = []

    def flush() -> None:
        entries.append(LogEntry(timestamp=timestamp, role=role, content="".join(body).strip()))

    for line in text.splitlines():
        trimmed = line.strip()
        if trimmed.startswith(LOG_HEADER_PREFIX):
            if role is not None:
                flush()
            role, timestamp = _parse_log_header(trimmed)
            body = []
        elif trimmed == LOG_ENTRY_SEPARATOR:
            if role is not None:
                flush()
            role, timestamp, body = None, "", []
        elif role is not None:
            body.append(line + "\n")

    if role is not None:
        flush()

    return entries


def import_goals(path: Path | str) -> List[Goal]:
    """Read and parse a goal document file."""
    text = Path(path).read_text(encoding="utf-8")
    goals = parse_goal_document(text)
    LOGGER.info(f"Parsed {len(goals)} root goals from {path}")
    return goals


def import_logs(path: Path | str, action_log: ActionLog) -> int:
    """Append every entry of a log document to ``action_log``.

    Returns:
        Number of imported entries
    """
    text = Path(path).read_text(encoding="utf-8")
    entries = parse_log_document(text)
    for entry in entries:
        action_log.import_entry(entry.role, entry.content, entry.timestamp)
    LOGGER.info(f"Imported {len(entries)} log entries from {path}")
    return len(entries)


__all__ = [
    "UNKNOWN",
    "parse_goal_line",
    "parse_goal_document",
    "parse_log_document",
    "import_goals",
    "import_logs",
]
