"""Enums for Delaycoach MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    ACTIVE = "active"
    DONE = "done"
    OVERDUE = "overdue"


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


class Mood(str, Enum):
    """Self-reported mood attached to a check-in."""

    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"


class CoachTone(str, Enum):
    """Voice used for coach messages."""

    GENTLE = "gentle"
    NORMAL = "normal"
    SAVAGE = "savage"


class RiskLevel(str, Enum):
    """Risk tier derived from a bomb score, ordered safe < caution < risk < bomb."""

    SAFE = "safe"
    CAUTION = "caution"
    RISK = "risk"
    BOMB = "bomb"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)


class TaskFilter(str, Enum):
    """Task list filter options."""

    ALL = "all"
    OPEN = "open"  # active + overdue
    ACTIVE = "active"
    DONE = "done"
    OVERDUE = "overdue"
    DEADLINE_SOON = "deadline_soon"


class TaskSort(str, Enum):
    """Task list sort options."""

    DUE_DATE = "due_date"
    RECENT_CHECKIN = "recent_checkin"
    BOMB_SCORE = "bomb_score"
    LOW_PROGRESS = "low_progress"


class TimeRange(str, Enum):
    """Window for check-in analytics."""

    WEEK = "7"
    MONTH = "30"
    ALL = "all"
