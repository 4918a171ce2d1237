"""
MCP Server for Delaycoach.

A deadline tracker and procrastination coach: tasks with due dates and
effort estimates, progress check-ins, a 0-100 "bomb score" per task, and a
procrastination archetype derived from the check-in history. Data lives in
a local JSON file.
"""

# Re-export enums
from delaycoach_mcp.enums import CoachTone, Mood, Priority, ResponseFormat, RiskLevel, TaskStatus

# Re-export scoring engine
from delaycoach_mcp.engine import (
    calculate_bomb_score,
    compute_behavior_stats,
    generate_coach_message,
    get_procrastination_type,
    get_risk_level,
    get_top_bombs,
)

# Re-export models
from delaycoach_mcp.models import (
    AddTaskInput,
    AnalysisInput,
    BehaviorStats,
    BombScore,
    BombsInput,
    CheckInInput,
    CheckInModel,
    CoachMessage,
    CoachSettings,
    DashboardInput,
    DeleteTaskInput,
    GetTaskInput,
    ListCheckInsInput,
    ListTasksInput,
    ModifyTaskInput,
    ProcrastinationProfile,
    ResetInput,
    RiskInput,
    ScoredTask,
    SettingsInput,
    TaskModel,
)

# Re-export MCP server instance
from delaycoach_mcp.server import mcp

# Re-export tools
from delaycoach_mcp.tools import (
    delaycoach_add,
    delaycoach_analysis,
    delaycoach_bombs,
    delaycoach_checkin,
    delaycoach_checkins,
    delaycoach_dashboard,
    delaycoach_delete,
    delaycoach_get,
    delaycoach_list,
    delaycoach_modify,
    delaycoach_reset,
    delaycoach_risk,
    delaycoach_settings,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "Priority",
    "Mood",
    "CoachTone",
    "RiskLevel",
    # Engine
    "calculate_bomb_score",
    "get_risk_level",
    "get_top_bombs",
    "compute_behavior_stats",
    "get_procrastination_type",
    "generate_coach_message",
    # Record models
    "TaskModel",
    "CheckInModel",
    "CoachSettings",
    # Input models
    "ListTasksInput",
    "AddTaskInput",
    "GetTaskInput",
    "ModifyTaskInput",
    "DeleteTaskInput",
    "CheckInInput",
    "ListCheckInsInput",
    "SettingsInput",
    "ResetInput",
    "BombsInput",
    "RiskInput",
    "AnalysisInput",
    "DashboardInput",
    # Output models
    "BombScore",
    "ScoredTask",
    "BehaviorStats",
    "ProcrastinationProfile",
    "CoachMessage",
    # Tools
    "delaycoach_list",
    "delaycoach_add",
    "delaycoach_get",
    "delaycoach_modify",
    "delaycoach_delete",
    "delaycoach_checkin",
    "delaycoach_checkins",
    "delaycoach_settings",
    "delaycoach_reset",
    "delaycoach_bombs",
    "delaycoach_risk",
    "delaycoach_analysis",
    "delaycoach_dashboard",
    # MCP server instance
    "mcp",
]
