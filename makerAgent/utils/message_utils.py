"""Message content helpers."""

from __future__ import annotations

from typing import Any


def extract_text(content: Any) -> str:
    """Concatenate the text parts of a message content.

    Handles plain strings and multimodal content lists; non-text parts
    (images, tool-use blocks) are dropped.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        pieces: list[str] = []
        for item in content:
            if isinstance(item, str):
                pieces.append(item)
            elif isinstance(item, dict) and item.get("type", "text") == "text" and "text" in item:
                pieces.append(str(item["text"]))
        return "".join(pieces)
    return ""


__all__ = ["extract_text"]
