"""Output/intermediate models for risk scoring and behavior analysis."""

from pydantic import BaseModel, Field

from delaycoach_mcp.enums import RiskLevel
from delaycoach_mcp.models.task import TaskModel


class BombScore(BaseModel):
    """Urgency score for one task and its most salient reason."""

    task_id: str
    score: int = Field(ge=0, le=100)
    reason: str


class ScoredTask(BaseModel):
    """A task ranked by bomb score."""

    task: TaskModel
    bomb_score: int
    bomb_reason: str
    risk_level: RiskLevel


class BehaviorStats(BaseModel):
    """Aggregate check-in statistics used for archetype matching."""

    task_count: int
    check_in_count: int
    avg_progress_delta: float
    check_in_frequency: float
    zero_progress_count: int
    has_long_notes: bool
    last_minute_task_ids: list[str] = Field(default_factory=list)
    check_in_distribution: list[int] | None = None


class ProcrastinationProfile(BaseModel):
    """A procrastination archetype with guidance."""

    type: str
    description: str
    tips: list[str] = Field(min_length=3, max_length=3)


class CoachMessage(BaseModel):
    """A coach observation and the next action to take."""

    fact: str
    action: str


class DailyActivity(BaseModel):
    """Check-in activity for one calendar day."""

    day: str
    count: int
    avg_progress: float
