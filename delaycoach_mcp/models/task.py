"""Core task and check-in models for Delaycoach MCP.

Stored records use camelCase keys; the models accept either spelling and
serialize back by alias so records round-trip through the data file.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from delaycoach_mcp.enums import CoachTone, Mood, Priority, TaskStatus

_RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskModel(BaseModel):
    """A tracked assignment with a due date and an effort estimate."""

    model_config = ConfigDict(**_RECORD_CONFIG, extra="allow")

    id: str
    title: str = ""
    subject: str = ""
    due_date: date
    estimated_hours: float = Field(..., gt=0)
    priority: Priority = Priority.MID
    created_at: datetime | None = None
    updated_at: datetime | None = None
    progress: int = Field(default=0, ge=0, le=100)
    last_check_in_at: datetime | None = None
    status: TaskStatus = TaskStatus.ACTIVE

    @field_validator("due_date", mode="before")
    @classmethod
    def strip_time_component(cls, v: Any) -> Any:
        # "2025-03-01T00:00:00.000Z" -> "2025-03-01"
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        if isinstance(v, datetime):
            return v.date()
        return v

    @property
    def is_open(self) -> bool:
        """Active or overdue; done tasks are closed."""
        return self.status in (TaskStatus.ACTIVE, TaskStatus.OVERDUE)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CheckInModel(BaseModel):
    """A timestamped progress report against one task."""

    model_config = _RECORD_CONFIG

    id: str
    task_id: str
    date_time: datetime
    progress_delta: int
    mood: Mood = Mood.NEUTRAL
    note: str | None = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CoachSettings(BaseModel):
    """User preferences persisted alongside the data."""

    model_config = _RECORD_CONFIG

    coach_tone: CoachTone = CoachTone.NORMAL
    alert_hours: int = Field(default=24, ge=1)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
