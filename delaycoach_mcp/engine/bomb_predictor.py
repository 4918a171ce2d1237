"""Bomb score: a 0-100 urgency score per task.

Independent pressure signals (deadline proximity, completion shortfall,
effort deficit, check-in staleness, overdue status) each contribute points.
The points are summed, rounded and clamped to [0, 100].

Each signal is also a reason clause. Clauses are folded into the reason
string in priority order, and each clause's mode decides how its text
combines with what is already there:

- SET: use the text only if no reason exists yet
- APPEND: use the text if empty, otherwise join with ", "
- OVERWRITE: discard the existing reason

Deadline proximity and the overdue override overwrite; everything else
appends. So "OVERDUE" always wins, and a deadline clause wipes nothing but
an empty reason because it is evaluated first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from delaycoach_mcp.engine.timemath import HOURS_PER_DAY, hours_since, hours_until_due, round_half_up
from delaycoach_mcp.enums import RiskLevel, TaskStatus
from delaycoach_mcp.models.intelligence import BombScore, ScoredTask
from delaycoach_mcp.models.task import TaskModel

MAX_SCORE = 100
MIN_SCORE = 0
ON_TRACK = "On track"

# (max days left, points, reason)
DEADLINE_TIERS: tuple[tuple[float, int, str | None], ...] = (
    (1, 50, "Deadline in 24h"),
    (2, 35, "Deadline in 48h"),
    (3, 20, "Deadline in 3 days"),
    (7, 10, None),
)

# (percent incomplete must exceed, points, reason)
SHORTFALL_TIERS: tuple[tuple[int, int, str | None], ...] = (
    (80, 30, "80%+ incomplete"),
    (60, 20, "60%+ incomplete"),
    (40, 10, None),
)

DEFICIT_MAX_POINTS = 25
DEFICIT_POINTS_PER_HOUR = 2
DEFICIT_REASON_HOURS = 10

STALE_CHECKIN_HOURS = 72
STALE_POINTS = 15
NEVER_CHECKED_DAYS = 7
NEVER_CHECKED_POINTS = 20

OVERDUE_POINTS = 100

# Lower bound of each tier, highest first
RISK_THRESHOLDS: tuple[tuple[int, RiskLevel], ...] = (
    (60, RiskLevel.BOMB),
    (40, RiskLevel.RISK),
    (20, RiskLevel.CAUTION),
)


class ReasonMode(str, Enum):
    SET = "set"
    APPEND = "append"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class ReasonClause:
    """One scoring signal: its points and its effect on the reason text."""

    signal: str
    priority: int
    triggered: bool
    points: float = 0.0
    text: str | None = None
    mode: ReasonMode = ReasonMode.APPEND


def fold_reason(clauses: Iterable[ReasonClause]) -> str:
    """Combine triggered clause texts in priority order."""
    reason = ""
    for clause in sorted(clauses, key=lambda c: c.priority):
        if not clause.triggered or not clause.text:
            continue
        if clause.mode == ReasonMode.OVERWRITE:
            reason = clause.text
        elif clause.mode == ReasonMode.SET:
            reason = reason or clause.text
        else:
            reason = f"{reason}, {clause.text}" if reason else clause.text
    return reason or ON_TRACK


def _deadline_clause(days_left: float) -> ReasonClause:
    for max_days, points, text in DEADLINE_TIERS:
        if days_left <= max_days:
            return ReasonClause("deadline", 10, True, points, text, ReasonMode.OVERWRITE)
    return ReasonClause("deadline", 10, False)


def _shortfall_clause(progress_lack: int) -> ReasonClause:
    for floor, points, text in SHORTFALL_TIERS:
        if progress_lack > floor:
            return ReasonClause("shortfall", 20, True, points, text)
    return ReasonClause("shortfall", 20, False)


def _deficit_clause(remaining_hours: float, hours_left: float) -> ReasonClause:
    if hours_left >= remaining_hours:
        return ReasonClause("deficit", 30, False)
    deficit = remaining_hours - hours_left
    points = min(DEFICIT_MAX_POINTS, deficit * DEFICIT_POINTS_PER_HOUR)
    text = f"{round_half_up(deficit)}h short" if deficit > DEFICIT_REASON_HOURS else None
    return ReasonClause("deficit", 30, True, points, text)


def _staleness_clause(task: TaskModel, days_left: float, now: datetime) -> ReasonClause:
    if task.last_check_in_at is not None:
        stale = hours_since(task.last_check_in_at, now) > STALE_CHECKIN_HOURS
        return ReasonClause("staleness", 40, stale, STALE_POINTS, "No check-in 3+ days")
    never = days_left < NEVER_CHECKED_DAYS
    return ReasonClause("staleness", 40, never, NEVER_CHECKED_POINTS, "Never checked in")


def score_clauses(task: TaskModel, now: datetime) -> list[ReasonClause]:
    """Evaluate every signal for a task, in reason priority order."""
    hours_left = hours_until_due(task.due_date, now)
    days_left = hours_left / HOURS_PER_DAY
    progress_lack = 100 - task.progress
    remaining_hours = progress_lack / 100 * task.estimated_hours

    return [
        _deadline_clause(days_left),
        _shortfall_clause(progress_lack),
        _deficit_clause(remaining_hours, hours_left),
        _staleness_clause(task, days_left, now),
        ReasonClause("overdue", 50, task.status == TaskStatus.OVERDUE, OVERDUE_POINTS, "OVERDUE", ReasonMode.OVERWRITE),
    ]


def calculate_bomb_score(task: TaskModel, now: datetime) -> BombScore:
    """Score one task against the given instant."""
    clauses = score_clauses(task, now)
    raw = sum(c.points for c in clauses if c.triggered)
    score = max(MIN_SCORE, min(MAX_SCORE, round_half_up(raw)))
    return BombScore(task_id=task.id, score=score, reason=fold_reason(clauses))


def get_risk_level(score: float) -> RiskLevel:
    for lower_bound, level in RISK_THRESHOLDS:
        if score >= lower_bound:
            return level
    return RiskLevel.SAFE


def get_top_bombs(tasks: list[TaskModel], now: datetime, limit: int = 3) -> list[ScoredTask]:
    """Rank open tasks by bomb score, highest first; ties keep input order."""
    scored: list[ScoredTask] = []
    for task in tasks:
        if not task.is_open:
            continue
        bomb = calculate_bomb_score(task, now)
        scored.append(
            ScoredTask(
                task=task,
                bomb_score=bomb.score,
                bomb_reason=bomb.reason,
                risk_level=get_risk_level(bomb.score),
            )
        )

    scored.sort(key=lambda s: s.bomb_score, reverse=True)
    return scored[: max(limit, 0)]
