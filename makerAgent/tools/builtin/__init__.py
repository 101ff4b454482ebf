"""Built-in capabilities."""

from .file_ops import list_directory, read_file, read_image, write_file
from .goal_tools import create_goal_tools
from .memory_tools import create_memory_tools
from .run_shell import create_run_shell_tool, execute_command

__all__ = [
    "read_file",
    "write_file",
    "list_directory",
    "read_image",
    "create_run_shell_tool",
    "execute_command",
    "create_goal_tools",
    "create_memory_tools",
]
