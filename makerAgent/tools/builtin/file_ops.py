"""File system capabilities: read, write, list and read image."""

import base64
import logging
from pathlib import Path
from typing import Annotated

from langchain_core.tools import tool

from makerAgent.config.settings import get_settings
from makerAgent.utils.error_handler import safe_tool_call, tool_error, tool_result

LOGGER = logging.getLogger(__name__)

__all__ = ["read_file", "write_file", "list_directory", "read_image", "TRUNCATION_SUFFIX"]

TRUNCATION_SUFFIX = "\n...[truncated]"

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".webp": "image/webp",
}
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


@tool
@safe_tool_call("read_file")
def read_file(
    file_path: Annotated[str, "The path to the file to read."]
) -> str:
    """Reads the content of a file.

    Long files are cut off and end with a truncation marker.
    """
    path = Path(file_path)
    if not path.exists():
        return tool_error(f"File not found: {file_path}")
    if not path.is_file():
        return tool_error(f"Not a file: {file_path}")

    content = path.read_text(encoding="utf-8", errors="replace")
    max_chars = get_settings().governance.read_file_max_chars
    if len(content) > max_chars:
        content = content[:max_chars] + TRUNCATION_SUFFIX

    LOGGER.info(f"Read file: {file_path} ({len(content)} chars)")
    return tool_result(content=content)


@tool
@safe_tool_call("write_file")
def write_file(
    file_path: Annotated[str, "The path to the file."],
    content: Annotated[str, "The content to write."],
) -> str:
    """Writes content to a file, overwriting it. Parent directories are created."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")

    LOGGER.info(f"Wrote file: {file_path} ({len(content)} chars)")
    return tool_result(status=f"File written successfully: {file_path}")


@tool
@safe_tool_call("list_directory")
def list_directory(
    dir_path: Annotated[str, "The path to the directory to list."]
) -> str:
    """Lists the files and directories in a given path.

    Directories are suffixed with ``/``.
    """
    path = Path(dir_path)
    if not path.is_dir():
        return tool_error(f"Directory not found: {dir_path}")

    lines = []
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        lines.append(entry.name + ("/" if entry.is_dir() else ""))

    return tool_result(listing="".join(f"{line}\n" for line in lines))


@tool
@safe_tool_call("read_image")
def read_image(
    file_path: Annotated[str, "The path to the image file."]
) -> str:
    """Reads an image file and returns it base64 encoded with its mime type."""
    path = Path(file_path)
    if not path.is_file():
        return tool_error(f"File not found: {file_path}")

    data = base64.b64encode(path.read_bytes()).decode("ascii")
    mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower(), DEFAULT_IMAGE_MIME_TYPE)

    LOGGER.info(f"Read image: {file_path} ({mime_type})")
    return tool_result(mime_type=mime_type, data=data)
