"""MCP tool definitions for Delaycoach."""

# Import all tools to register them with the MCP server
from delaycoach_mcp.tools.core import (
    delaycoach_add,
    delaycoach_checkin,
    delaycoach_checkins,
    delaycoach_delete,
    delaycoach_get,
    delaycoach_list,
    delaycoach_modify,
    delaycoach_reset,
    delaycoach_settings,
)
from delaycoach_mcp.tools.intelligence import (
    delaycoach_analysis,
    delaycoach_bombs,
    delaycoach_dashboard,
    delaycoach_risk,
)

__all__ = [
    # Core tools
    "delaycoach_list",
    "delaycoach_add",
    "delaycoach_get",
    "delaycoach_modify",
    "delaycoach_delete",
    "delaycoach_checkin",
    "delaycoach_checkins",
    "delaycoach_settings",
    "delaycoach_reset",
    # Intelligence tools
    "delaycoach_bombs",
    "delaycoach_risk",
    "delaycoach_analysis",
    "delaycoach_dashboard",
]
