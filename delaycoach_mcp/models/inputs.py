"""Input models for Delaycoach MCP tools."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from delaycoach_mcp.enums import CoachTone, Mood, Priority, ResponseFormat, TaskFilter, TaskSort, TaskStatus, TimeRange

# ============================================================================
# Core Tool Input Models
# ============================================================================


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    filter: TaskFilter = Field(
        default=TaskFilter.ALL,
        description="all, open (active+overdue), active, done, overdue, or deadline_soon (active, due within 3 days)",
    )
    sort: TaskSort = Field(
        default=TaskSort.DUE_DATE,
        description=(
            "Sort by due_date (soonest first), recent_checkin (latest first), "
            "bomb_score (highest first), or low_progress (least progress first)"
        ),
    )
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (required)", min_length=1, max_length=200)
    subject: str = Field(default="", description="Course or area the task belongs to", max_length=200)
    due_date: date = Field(..., description="Due date as YYYY-MM-DD")
    estimated_hours: float = Field(..., description="Total effort estimate in hours", gt=0, le=1000)
    priority: Priority = Field(default=Priority.MID, description="Task priority: low, mid, or high")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to retrieve", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class ModifyTaskInput(BaseModel):
    """Input model for modifying a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to modify", min_length=1)
    title: str | None = Field(default=None, description="New title", min_length=1, max_length=200)
    subject: str | None = Field(default=None, description="New subject (empty string clears it)")
    due_date: date | None = Field(default=None, description="New due date as YYYY-MM-DD")
    estimated_hours: float | None = Field(default=None, description="New effort estimate in hours", gt=0, le=1000)
    priority: Priority | None = Field(default=None, description="New priority: low, mid, or high")
    progress: int | None = Field(default=None, description="Set progress directly (0-100)", ge=0, le=100)
    status: TaskStatus | None = Field(default=None, description="New status: active, done, or overdue")

    def updates(self) -> dict[str, object]:
        """Fields the caller actually set."""
        return self.model_dump(exclude={"task_id"}, exclude_none=True)


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to delete (its check-ins are deleted too)", min_length=1)


class CheckInInput(BaseModel):
    """Input model for recording a progress check-in."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to check in against", min_length=1)
    progress_delta: int = Field(
        ..., description="Percentage points of progress made (negative for rework)", ge=-100, le=100
    )
    mood: Mood = Field(default=Mood.NEUTRAL, description="How it went: good, neutral, or bad")
    note: str | None = Field(default=None, description="Optional note", max_length=2000)


class ListCheckInsInput(BaseModel):
    """Input model for listing check-ins."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str | None = Field(default=None, description="Only check-ins for this task")
    limit: int = Field(default=20, description="Maximum number of check-ins to return (newest first)", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class SettingsInput(BaseModel):
    """Input model for reading or updating coach settings."""

    model_config = ConfigDict(str_strip_whitespace=True)

    coach_tone: CoachTone | None = Field(default=None, description="gentle, normal, or savage")
    alert_hours: int | None = Field(default=None, description="No check-in alert threshold in hours", ge=1, le=720)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ResetInput(BaseModel):
    """Input model for wiping all data."""

    confirm: bool = Field(default=False, description="Must be true to delete every task, check-in and setting")


# ============================================================================
# Coaching Intelligence Input Models
# ============================================================================


class BombsInput(BaseModel):
    """Input model for the top deadline bombs."""

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int | None = Field(default=None, description="Number of tasks to return (default from config)", ge=1, le=50)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class RiskInput(BaseModel):
    """Input model for scoring a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to score", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class AnalysisInput(BaseModel):
    """Input model for procrastination analysis."""

    model_config = ConfigDict(str_strip_whitespace=True)

    time_range: TimeRange = Field(
        default=TimeRange.WEEK, description="Window for activity charts: '7', '30', or 'all' (last 30 days shown)"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class DashboardInput(BaseModel):
    """Input model for the daily dashboard."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )
