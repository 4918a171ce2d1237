"""Formatting utilities for task output."""

from datetime import datetime

from delaycoach_mcp.engine.timemath import days_until_due
from delaycoach_mcp.models.intelligence import ScoredTask
from delaycoach_mcp.models.task import CheckInModel, TaskModel

RISK_ICONS = {"safe": "✅", "caution": "⚠️", "risk": "🔶", "bomb": "💣"}
STATUS_ICONS = {"active": "⏳", "done": "✅", "overdue": "🚨"}
MOOD_ICONS = {"good": "🙂", "neutral": "😐", "bad": "🙁"}


def _days_left_label(task: TaskModel, now: datetime) -> str:
    days = days_until_due(task.due_date, now)
    if days > 0:
        return f"{days}d left"
    return "Overdue"


def _format_task_concise(task: TaskModel, scored: ScoredTask | None = None) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "task-1a2b: Essay draft (due:2025-03-01, 40%, bomb:72)"
    """
    title = task.title[:50] if task.title else "Untitled"
    meta = [f"due:{task.due_date.isoformat()}", f"{task.progress}%"]
    if task.status.value != "active":
        meta.append(task.status.value)
    if scored is not None:
        meta.append(f"{scored.risk_level.value}:{scored.bomb_score}")
    return f"{task.id}: {title} ({', '.join(meta)})"


def _format_task_markdown(task: TaskModel, now: datetime, scored: ScoredTask | None = None) -> str:
    """Format a single task as markdown."""
    icon = STATUS_ICONS.get(task.status.value, "")
    lines = [f"### {icon} [{task.id}] {task.title or 'Untitled'}"]

    details = [
        f"**Due**: {task.due_date.isoformat()} ({_days_left_label(task, now)})",
        f"**Progress**: {task.progress}%",
        f"**Estimate**: {task.estimated_hours:g}h",
        f"**Priority**: {task.priority.value}",
    ]
    if task.subject:
        details.insert(0, f"**Subject**: {task.subject}")
    lines.append(" | ".join(details))

    if task.last_check_in_at:
        lines.append(f"**Last check-in**: {task.last_check_in_at.isoformat()}")
    else:
        lines.append("**Last check-in**: never")

    if scored is not None:
        risk_icon = RISK_ICONS.get(scored.risk_level.value, "")
        lines.append(f"**Risk**: {risk_icon} {scored.risk_level.value} ({scored.bomb_score}) → {scored.bomb_reason}")

    return "\n".join(lines)


def _format_tasks_markdown(
    tasks: list[TaskModel],
    now: datetime,
    title: str = "Tasks",
    scores: dict[str, ScoredTask] | None = None,
) -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    scores = scores or {}
    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]
    for task in tasks:
        lines.append(_format_task_markdown(task, now, scores.get(task.id)))
        lines.append("")
    return "\n".join(lines)


def _format_check_in(check_in: CheckInModel) -> str:
    mood = MOOD_ICONS.get(check_in.mood.value, "")
    line = f"- [{check_in.date_time.isoformat()[:16]}] {check_in.progress_delta:+d}% {mood}"
    if check_in.note:
        line += f" {check_in.note}"
    return line
