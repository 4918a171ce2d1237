"""Pydantic models for Delaycoach MCP."""

from delaycoach_mcp.models.inputs import (
    AddTaskInput,
    AnalysisInput,
    BombsInput,
    CheckInInput,
    DashboardInput,
    DeleteTaskInput,
    GetTaskInput,
    ListCheckInsInput,
    ListTasksInput,
    ModifyTaskInput,
    ResetInput,
    RiskInput,
    SettingsInput,
)
from delaycoach_mcp.models.intelligence import (
    BehaviorStats,
    BombScore,
    CoachMessage,
    DailyActivity,
    ProcrastinationProfile,
    ScoredTask,
)
from delaycoach_mcp.models.task import CheckInModel, CoachSettings, TaskModel

__all__ = [
    # Record models
    "TaskModel",
    "CheckInModel",
    "CoachSettings",
    # Core input models
    "ListTasksInput",
    "AddTaskInput",
    "GetTaskInput",
    "ModifyTaskInput",
    "DeleteTaskInput",
    "CheckInInput",
    "ListCheckInsInput",
    "SettingsInput",
    "ResetInput",
    # Coaching input models
    "BombsInput",
    "RiskInput",
    "AnalysisInput",
    "DashboardInput",
    # Intelligence output models
    "BombScore",
    "ScoredTask",
    "BehaviorStats",
    "ProcrastinationProfile",
    "CoachMessage",
    "DailyActivity",
]
