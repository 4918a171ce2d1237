"""Coaching intelligence MCP tools for Delaycoach."""

import json
import logging
from datetime import datetime, timedelta

from mcp.types import ToolAnnotations

from delaycoach_mcp.config import get_settings
from delaycoach_mcp.engine.behavior import classify_stats, compute_behavior_stats
from delaycoach_mcp.engine.bomb_predictor import calculate_bomb_score, get_risk_level, get_top_bombs, score_clauses
from delaycoach_mcp.engine.coach import generate_coach_message
from delaycoach_mcp.engine.timemath import as_utc, days_until_due, hours_since, utcnow
from delaycoach_mcp.enums import ResponseFormat, RiskLevel, TaskStatus, TimeRange
from delaycoach_mcp.errors import DelaycoachError
from delaycoach_mcp.models.inputs import AnalysisInput, BombsInput, DashboardInput, RiskInput
from delaycoach_mcp.models.intelligence import DailyActivity, ScoredTask
from delaycoach_mcp.models.task import CheckInModel, TaskModel
from delaycoach_mcp.server import mcp
from delaycoach_mcp.tools.core import _error_message
from delaycoach_mcp.utils.formatters import RISK_ICONS, _format_task_concise
from delaycoach_mcp.utils.storage import get_repository

logger = logging.getLogger(__name__)

CHART_DAYS_ALL_TIME = 30

# ============================================================================
# Coaching Helper Functions
# ============================================================================


def _window_check_ins(check_ins: list[CheckInModel], time_range: TimeRange, now: datetime) -> list[CheckInModel]:
    """Check-ins inside the analysis window; the all-time range keeps everything."""
    if time_range == TimeRange.ALL:
        return list(check_ins)
    cutoff = as_utc(now) - timedelta(days=int(time_range.value))
    return [c for c in check_ins if as_utc(c.date_time) >= cutoff]


def _average_delta(check_ins: list[CheckInModel]) -> float:
    if not check_ins:
        return 0.0
    return round(sum(c.progress_delta for c in check_ins) / len(check_ins), 1)


def _daily_activity(check_ins: list[CheckInModel], time_range: TimeRange, now: datetime) -> list[DailyActivity]:
    """Per-day check-in counts and average progress delta, oldest day first.

    ``check_ins`` should already be limited to the window.
    """
    days = CHART_DAYS_ALL_TIME if time_range == TimeRange.ALL else int(time_range.value)

    by_day: dict[str, list[int]] = {}
    for c in check_ins:
        by_day.setdefault(as_utc(c.date_time).date().isoformat(), []).append(c.progress_delta)

    series: list[DailyActivity] = []
    for offset in range(days - 1, -1, -1):
        day = (as_utc(now) - timedelta(days=offset)).date().isoformat()
        deltas = by_day.get(day, [])
        avg = round(sum(deltas) / len(deltas), 1) if deltas else 0.0
        series.append(DailyActivity(day=day, count=len(deltas), avg_progress=avg))
    return series


def _latest_check_in(check_ins: list[CheckInModel], task_id: str) -> CheckInModel | None:
    own = [c for c in check_ins if c.task_id == task_id]
    return max(own, key=lambda c: as_utc(c.date_time)) if own else None


def _needs_check_in(task: TaskModel, alert_hours: int, now: datetime) -> bool:
    if task.last_check_in_at is None:
        return True
    return hours_since(task.last_check_in_at, now) > alert_hours


def _format_bomb_line(rank: int, s: ScoredTask, now: datetime) -> list[str]:
    task = s.task
    days = days_until_due(task.due_date, now)
    when = f"{days}d left" if days > 0 else "Overdue"
    icon = RISK_ICONS.get(s.risk_level.value, "")
    return [
        f"{rank}. **[{task.id}] {task.title or 'Untitled'}** {icon} {s.risk_level.value.upper()} ({s.bomb_score})",
        f"   {when} • {task.progress}% done",
        f"   → {s.bomb_reason}",
    ]


# ============================================================================
# Coaching Tool Definitions
# ============================================================================


@mcp.tool(
    name="delaycoach_bombs",
    annotations=ToolAnnotations(
        title="Deadline Bombs",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_bombs(params: BombsInput) -> str:
    """
    Rank open tasks by bomb score: the deadlines most likely to blow up.

    USE THIS WHEN:
    - User asks "what should I work on?" or "what's about to go wrong?"
    - Picking which task to tackle in the next session

    DO NOT USE WHEN:
    - You want every task → use delaycoach_list
    - You want one task's score breakdown → use delaycoach_risk

    SCORING (0-100, summed then capped):
    - Deadline within 1/2/3/7 days: +50/+35/+20/+10
    - More than 80/60/40% incomplete: +30/+20/+10
    - Not enough hours left for the remaining estimate: up to +25
    - No check-in for 3+ days: +15; never checked in and due within a week: +20
    - Overdue: always 100

    RISK TIERS: bomb >= 60, risk >= 40, caution >= 20, otherwise safe.

    Args:
        params: BombsInput with limit and response_format

    Returns:
        Ranked tasks with score, tier and the main reason
    """
    now = utcnow()
    try:
        tasks = get_repository().get_tasks()
    except DelaycoachError as e:
        return _error_message(e)

    limit = params.limit or get_settings().default_limit
    bombs = get_top_bombs(tasks, now, limit)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "bombs": [s.model_dump(mode="json") for s in bombs],
                "open_tasks": sum(1 for t in tasks if t.is_open),
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not bombs:
            return "0 bombs"
        lines = [f"{len(bombs)} bomb(s)"]
        lines.extend(f"{_format_task_concise(s.task, s)} [{s.bomb_reason}]" for s in bombs)
        return "\n".join(lines)

    if not bombs:
        return "# Bomb Prediction\n\nNo open tasks. Nothing can blow up."

    lines = ["# Bomb Prediction", ""]
    for i, s in enumerate(bombs, 1):
        lines.extend(_format_bomb_line(i, s, now))
        lines.append("")
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_risk",
    annotations=ToolAnnotations(
        title="Task Risk Breakdown",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_risk(params: RiskInput) -> str:
    """
    Explain one task's bomb score signal by signal.

    USE THIS WHEN:
    - User asks why a task is flagged, or how to get it out of the red
    - Checking what a check-in or a deadline change would fix

    Args:
        params: RiskInput with task_id and response_format

    Returns:
        Score, risk tier, reason, and the points each signal contributed
    """
    now = utcnow()
    try:
        task = get_repository().get_task(params.task_id)
    except DelaycoachError as e:
        return _error_message(e)

    bomb = calculate_bomb_score(task, now)
    level = get_risk_level(bomb.score)
    signals = [c for c in score_clauses(task, now) if c.triggered]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "taskId": bomb.task_id,
                "score": bomb.score,
                "reason": bomb.reason,
                "riskLevel": level.value,
                "signals": [{"signal": c.signal, "points": round(c.points, 1), "text": c.text} for c in signals],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return f"{task.id}: {level.value}:{bomb.score} [{bomb.reason}]"

    lines = [
        f"# Risk: {task.title or task.id}",
        "",
        f"**Score**: {bomb.score}/100 {RISK_ICONS.get(level.value, '')} {level.value}",
        f"**Reason**: {bomb.reason}",
    ]
    if task.status == TaskStatus.DONE:
        lines.append("*Task is done; it is left out of bomb rankings.*")
    if signals:
        lines.extend(["", "## Signals"])
        for c in signals:
            label = f" ({c.text})" if c.text else ""
            lines.append(f"- {c.signal}: +{c.points:g}{label}")
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_analysis",
    annotations=ToolAnnotations(
        title="Procrastination Analysis",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_analysis(params: AnalysisInput) -> str:
    """
    Classify the user's procrastination pattern and show check-in activity.

    USE THIS WHEN:
    - User asks "why do I keep procrastinating?" or wants habit feedback
    - Reviewing a week or month of check-ins

    ARCHETYPES (first match wins): Getting Started (no tasks), Crisis
    Sprinter, Perfectionist, Avoidant, Scattered, Balanced.

    The archetype is always computed from the full history; time_range limits
    the check-in summary and the per-day activity series.

    Args:
        params: AnalysisInput with time_range and response_format

    Returns:
        Archetype with description and tips, the statistics behind it, and daily activity
    """
    now = utcnow()
    try:
        repo = get_repository()
        tasks = repo.get_tasks()
        check_ins = repo.get_check_ins()
    except DelaycoachError as e:
        return _error_message(e)

    stats = compute_behavior_stats(tasks, check_ins, now)
    profile = classify_stats(stats)
    windowed = _window_check_ins(check_ins, params.time_range, now)
    window_avg = _average_delta(windowed)
    activity = _daily_activity(windowed, params.time_range, now)
    counts = {status.value: sum(1 for t in tasks if t.status == status) for status in TaskStatus}

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "profile": profile.model_dump(),
                "stats": stats.model_dump(),
                "window": {
                    "time_range": params.time_range.value,
                    "check_in_count": len(windowed),
                    "avg_progress_delta": window_avg,
                },
                "task_counts": counts,
                "activity": [a.model_dump() for a in activity],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return f"{profile.type} | {stats.task_count} task(s), {len(windowed)} check-in(s) in range"

    window = "all time" if params.time_range == TimeRange.ALL else f"last {params.time_range.value} days"
    lines = [
        "# Procrastination Analysis",
        "",
        f"## Your type: {profile.type}",
        profile.description,
        "",
    ]
    lines.extend(f"- {tip}" for tip in profile.tips)
    lines.extend(
        [
            "",
            f"## Stats, {window}",
            f"- Tasks: {counts['active']} active, {counts['done']} done, {counts['overdue']} overdue",
            f"- Check-ins: {len(windowed)}",
            f"- Average progress per check-in: {window_avg:+.1f}%",
            f"- Zero-progress check-ins: {sum(1 for c in windowed if c.progress_delta == 0)}",
        ]
    )

    active_days = [a for a in activity if a.count]
    chart = "all time (last 30 days)" if params.time_range == TimeRange.ALL else window
    lines.extend(["", f"## Activity, {chart}"])
    if not active_days:
        lines.append("No check-ins in this window.")
    for a in active_days:
        lines.append(f"- {a.day}: {a.count} check-in(s), avg {a.avg_progress:+.1f}%")
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_dashboard",
    annotations=ToolAnnotations(
        title="Daily Dashboard",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_dashboard(params: DashboardInput) -> str:
    """
    Today's risk summary, top 3 bombs, and a coach message in one call.

    USE THIS WHEN:
    - Starting a session: "how am I doing?" or "what's due?"
    - You need risk counts and the top priority without several calls

    The coach message targets the most at-risk task and reacts to that
    task's latest check-in (or to no progress if it has none).

    Args:
        params: DashboardInput with response_format

    Returns:
        Open and at-risk task counts, tasks needing a check-in, top bombs, coach message
    """
    now = utcnow()
    try:
        repo = get_repository()
        tasks = repo.get_tasks()
        check_ins = repo.get_check_ins()
        settings = repo.get_settings()
    except DelaycoachError as e:
        return _error_message(e)

    open_tasks = [t for t in tasks if t.is_open]
    ranked = get_top_bombs(open_tasks, now, limit=len(open_tasks))
    at_risk = [s for s in ranked if s.risk_level.rank >= RiskLevel.RISK.rank]
    needs_check_in = [t for t in open_tasks if _needs_check_in(t, settings.alert_hours, now)]
    top = ranked[:3]

    coach = None
    if top:
        latest = _latest_check_in(check_ins, top[0].task.id)
        delta = latest.progress_delta if latest else 0
        coach = generate_coach_message(top[0].task, delta, settings.coach_tone, now)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "total_tasks": len(tasks),
                "open_tasks": len(open_tasks),
                "at_risk": len(at_risk),
                "needs_check_in": [t.id for t in needs_check_in],
                "top_bombs": [s.model_dump(mode="json") for s in top],
                "coach": coach.model_dump() if coach else None,
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        head = f"{len(open_tasks)} open | {len(at_risk)} at risk | {len(needs_check_in)} need check-in"
        return "\n".join([head] + [f"{_format_task_concise(s.task, s)} [{s.bomb_reason}]" for s in top])

    if not tasks:
        return "# Today\n\nNo tasks yet. Add your first task with delaycoach_add to start tracking deadlines."

    noun = "task" if len(at_risk) == 1 else "tasks"
    lines = [
        "# Today",
        "",
        f"**{len(at_risk)}** {noun} at risk or critical ({len(open_tasks)} open)",
    ]
    if needs_check_in:
        lines.append(f"**{len(needs_check_in)}** without a check-in in the last {settings.alert_hours}h")

    if top:
        lines.extend(["", "## Bomb Prediction"])
        for i, s in enumerate(top, 1):
            lines.extend(_format_bomb_line(i, s, now))

    if coach:
        lines.extend(["", "## Coach", coach.fact, f"→ {coach.action}"])

    return "\n".join(lines)
