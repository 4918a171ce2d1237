"""Utility functions for Delaycoach MCP."""

from delaycoach_mcp.utils.formatters import (
    _format_check_in,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_markdown,
)
from delaycoach_mcp.utils.parsers import _parse_check_in, _parse_check_ins, _parse_task, _parse_tasks
from delaycoach_mcp.utils.storage import LocalStore, TaskRepository, get_repository

__all__ = [
    "LocalStore",
    "TaskRepository",
    "get_repository",
    "_parse_task",
    "_parse_tasks",
    "_parse_check_in",
    "_parse_check_ins",
    "_format_check_in",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_markdown",
]
