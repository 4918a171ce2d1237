"""Core MCP tool definitions for Delaycoach."""

import json
import logging
import uuid
from datetime import datetime

from mcp.types import ToolAnnotations

from delaycoach_mcp.engine.bomb_predictor import get_top_bombs
from delaycoach_mcp.engine.coach import generate_coach_message
from delaycoach_mcp.engine.timemath import as_utc, days_until_due, utcnow
from delaycoach_mcp.enums import ResponseFormat, TaskFilter, TaskSort, TaskStatus
from delaycoach_mcp.errors import DelaycoachError, TaskNotFoundError
from delaycoach_mcp.models.inputs import (
    AddTaskInput,
    CheckInInput,
    DeleteTaskInput,
    GetTaskInput,
    ListCheckInsInput,
    ListTasksInput,
    ModifyTaskInput,
    ResetInput,
    SettingsInput,
)
from delaycoach_mcp.models.intelligence import ScoredTask
from delaycoach_mcp.models.task import CheckInModel, TaskModel
from delaycoach_mcp.server import mcp
from delaycoach_mcp.utils.formatters import (
    _format_check_in,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_markdown,
)
from delaycoach_mcp.utils.storage import get_repository

logger = logging.getLogger(__name__)

DEADLINE_SOON_DAYS = 3


def _error_message(e: DelaycoachError) -> str:
    """Turn a storage-layer failure into a tool response."""
    logger.warning("%s: %s", type(e).__name__, e)
    if isinstance(e, TaskNotFoundError):
        return f"Error: {e}.\nTip: Use delaycoach_list to find valid task IDs."
    return f"Error: {e}"


def _scored_record(task: TaskModel, scored: ScoredTask | None) -> dict[str, object]:
    record = task.to_record()
    if scored is not None:
        record.update(
            bombScore=scored.bomb_score,
            bombReason=scored.bomb_reason,
            riskLevel=scored.risk_level.value,
        )
    return record


def _filter_tasks(tasks: list[TaskModel], task_filter: TaskFilter, now: datetime) -> list[TaskModel]:
    if task_filter == TaskFilter.OPEN:
        return [t for t in tasks if t.is_open]
    if task_filter == TaskFilter.DEADLINE_SOON:
        return [
            t
            for t in tasks
            if t.status == TaskStatus.ACTIVE and days_until_due(t.due_date, now) <= DEADLINE_SOON_DAYS
        ]
    if task_filter == TaskFilter.ALL:
        return list(tasks)
    return [t for t in tasks if t.status.value == task_filter.value]


def _sort_tasks(tasks: list[TaskModel], sort: TaskSort, scores: dict[str, ScoredTask]) -> list[TaskModel]:
    if sort == TaskSort.RECENT_CHECKIN:
        return sorted(
            tasks,
            key=lambda t: as_utc(t.last_check_in_at).timestamp() if t.last_check_in_at else 0.0,
            reverse=True,
        )
    if sort == TaskSort.BOMB_SCORE:
        # Done tasks carry no score and sink to the bottom
        return sorted(tasks, key=lambda t: scores[t.id].bomb_score if t.id in scores else -1, reverse=True)
    if sort == TaskSort.LOW_PROGRESS:
        return sorted(tasks, key=lambda t: t.progress)
    return sorted(tasks, key=lambda t: t.due_date)


@mcp.tool(
    name="delaycoach_list",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_list(params: ListTasksInput) -> str:
    """
    List tracked tasks with their deadline risk.

    USE THIS WHEN:
    - Showing the user their tasks, optionally filtered by status
    - Finding task IDs for check-ins or edits
    - Looking for tasks due in the next few days (filter="deadline_soon")

    DO NOT USE WHEN:
    - You want the most dangerous deadlines → use delaycoach_bombs instead
    - You have a specific task ID → use delaycoach_get instead
    - You want the daily overview → use delaycoach_dashboard

    Args:
        params: ListTasksInput containing filter, sort, limit, and response_format

    Returns:
        Formatted list of tasks (markdown, concise, or JSON)

    Examples:
        - All tasks by due date: params with defaults
        - Open tasks, riskiest first: params with filter="open", sort="bomb_score"
        - Tasks due within 3 days: params with filter="deadline_soon"
        - Least progress first: params with filter="active", sort="low_progress"
    """
    now = utcnow()
    try:
        tasks = get_repository().get_tasks()
    except DelaycoachError as e:
        return _error_message(e)

    total_count = len(tasks)
    scores = {s.task.id: s for s in get_top_bombs(tasks, now, limit=total_count)}
    tasks = _sort_tasks(_filter_tasks(tasks, params.filter, now), params.sort, scores)

    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "total": total_count,
                "count": len(tasks),
                "tasks": [_scored_record(t, scores.get(t.id)) for t in tasks],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not tasks:
            return "0 tasks"
        lines = [f"{len(tasks)} task(s) | {params.filter.value}"]
        lines.extend(_format_task_concise(t, scores.get(t.id)) for t in tasks)
        return "\n".join(lines)

    title = "Tasks"
    if params.filter != TaskFilter.ALL:
        title = f"Tasks ({params.filter.value.replace('_', ' ')})"
    return _format_tasks_markdown(tasks, now, title, scores)


@mcp.tool(
    name="delaycoach_add",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def delaycoach_add(params: AddTaskInput) -> str:
    """
    Create a new task to track.

    USE THIS WHEN:
    - The user has a new assignment or deadline to track

    DO NOT USE WHEN:
    - Updating an existing task → use delaycoach_modify instead
    - Logging progress → use delaycoach_checkin instead

    Args:
        params: AddTaskInput containing title, due date, estimate and optional subject/priority

    Returns:
        Confirmation message with the created task ID

    Examples:
        - params with title="Essay draft", due_date="2025-03-01", estimated_hours=6
        - params with title="Lab report", subject="Chemistry", due_date="2025-03-04",
          estimated_hours=10, priority="high"
    """
    now = utcnow()
    task = TaskModel(
        id=f"task-{uuid.uuid4().hex[:8]}",
        title=params.title,
        subject=params.subject,
        due_date=params.due_date,
        estimated_hours=params.estimated_hours,
        priority=params.priority,
        created_at=now,
        updated_at=now,
        progress=0,
        status=TaskStatus.ACTIVE,
    )

    try:
        get_repository().add_task(task)
    except DelaycoachError as e:
        return _error_message(e)

    return (
        f"Task created successfully.\n"
        f"{_format_task_concise(task)}\n"
        f"Tip: Check in regularly with delaycoach_checkin to keep the bomb score down."
    )


@mcp.tool(
    name="delaycoach_get",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_get(params: GetTaskInput) -> str:
    """
    Retrieve full details for a single task, including its risk and check-ins.

    USE THIS WHEN:
    - You have a task ID and need its attributes before modifying it
    - The user asks how a specific task is going

    DO NOT USE WHEN:
    - You want the score breakdown → use delaycoach_risk
    - You want to search tasks → use delaycoach_list

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        Detailed task information (markdown, concise, or JSON)
    """
    now = utcnow()
    try:
        repo = get_repository()
        task = repo.get_task(params.task_id)
        check_ins = repo.get_check_ins_for_task(task.id)
    except DelaycoachError as e:
        return _error_message(e)

    scored = next(iter(get_top_bombs([task], now, limit=1)), None)

    if params.response_format == ResponseFormat.JSON:
        record = _scored_record(task, scored)
        record["checkIns"] = [c.to_record() for c in check_ins]
        return json.dumps(record, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task, scored)

    lines = [_format_task_markdown(task, now, scored)]
    if check_ins:
        lines.append("**Check-ins:**")
        lines.extend(_format_check_in(c) for c in sorted(check_ins, key=lambda c: c.date_time, reverse=True))
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_modify",
    annotations=ToolAnnotations(
        title="Modify Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_modify(params: ModifyTaskInput) -> str:
    """
    Update an existing task's attributes.

    USE THIS WHEN:
    - Changing title, subject, due date, estimate, priority, progress or status
    - Marking a task done or overdue by hand

    DO NOT USE WHEN:
    - Logging progress made in a work session → use delaycoach_checkin instead
      (check-ins feed the procrastination analysis, direct edits do not)

    Args:
        params: ModifyTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message with updated task info

    Examples:
        - Push the deadline: params with task_id="task-1a2b3c4d", due_date="2025-03-08"
        - Mark done: params with task_id="task-1a2b3c4d", status="done"
    """
    updates = params.updates()
    if not updates:
        return "Error: No changes given.\nTip: Set at least one field besides task_id."

    try:
        task = get_repository().update_task(params.task_id, updates, utcnow())
    except DelaycoachError as e:
        return _error_message(e)

    return f"Task {params.task_id} modified successfully.\n{_format_task_concise(task)}"


@mcp.tool(
    name="delaycoach_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_delete(params: DeleteTaskInput) -> str:
    """
    Delete a task and all of its check-ins. This cannot be undone.

    Args:
        params: DeleteTaskInput containing the task_id to delete

    Returns:
        Confirmation message
    """
    try:
        removed = get_repository().delete_task(params.task_id)
    except DelaycoachError as e:
        return _error_message(e)

    return f"Task {params.task_id} deleted ({removed} check-in(s) removed)."


@mcp.tool(
    name="delaycoach_checkin",
    annotations=ToolAnnotations(
        title="Progress Check-in",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def delaycoach_checkin(params: CheckInInput) -> str:
    """
    Record progress made on a task and get coach feedback.

    USE THIS WHEN:
    - The user reports working on a task (even zero progress counts)
    - Logging rework that set a task back (negative progress_delta)

    DO NOT USE WHEN:
    - Correcting a task's progress without a work session → use delaycoach_modify

    The task's progress is clamped to 0-100%, its last check-in time is
    updated, and it is marked done when it reaches 100%. Only active and
    overdue tasks accept check-ins.

    Args:
        params: CheckInInput with task_id, progress_delta, mood, and optional note

    Returns:
        New progress plus a coach message in the user's chosen tone

    Examples:
        - params with task_id="task-1a2b3c4d", progress_delta=15, mood="good"
        - params with task_id="task-1a2b3c4d", progress_delta=0, note="Got distracted"
    """
    now = utcnow()
    try:
        repo = get_repository()
        task = repo.get_task(params.task_id)
        if not task.is_open:
            return (
                f"Error: Task {task.id} is already {task.status.value}.\n"
                f"Tip: Only active or overdue tasks take check-ins."
            )

        new_progress = min(100, max(0, task.progress + params.progress_delta))
        check_in = CheckInModel(
            id=f"checkin-{uuid.uuid4().hex[:8]}",
            task_id=task.id,
            date_time=now,
            progress_delta=params.progress_delta,
            mood=params.mood,
            note=params.note or None,
        )
        # No check-in is stored unless the task update succeeds
        repo.update_task(
            task.id,
            {
                "progress": new_progress,
                "last_check_in_at": now,
                "status": TaskStatus.DONE if new_progress == 100 else task.status,
            },
            now,
        )
        repo.add_check_in(check_in)
        tone = repo.get_settings().coach_tone
    except DelaycoachError as e:
        return _error_message(e)

    message = generate_coach_message(task, params.progress_delta, tone, now)
    lines = [
        "# Check-in recorded",
        f"**{task.title or task.id}**: {task.progress}% → {new_progress}%",
    ]
    if new_progress == 100:
        lines.append("Task complete and marked done.")
    lines.extend(["", f"**Coach**: {message.fact}", f"**Next**: {message.action}"])
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_checkins",
    annotations=ToolAnnotations(
        title="List Check-ins",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_checkins(params: ListCheckInsInput) -> str:
    """
    List recorded check-ins, newest first.

    Args:
        params: ListCheckInsInput with optional task_id, limit, and response_format

    Returns:
        Check-in history (markdown or JSON)
    """
    try:
        repo = get_repository()
        if params.task_id:
            repo.get_task(params.task_id)
            check_ins = repo.get_check_ins_for_task(params.task_id)
        else:
            check_ins = repo.get_check_ins()
    except DelaycoachError as e:
        return _error_message(e)

    total = len(check_ins)
    check_ins = sorted(check_ins, key=lambda c: as_utc(c.date_time), reverse=True)[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total, "count": len(check_ins), "checkIns": [c.to_record() for c in check_ins]},
            indent=2,
        )

    title = f"Check-ins for {params.task_id}" if params.task_id else "Check-ins"
    if not check_ins:
        return f"# {title}\n\nNo check-ins yet."
    lines = [f"# {title}", f"*{len(check_ins)} of {total} check-in(s)*", ""]
    for c in check_ins:
        line = _format_check_in(c)
        lines.append(line if params.task_id else f"{line} ({c.task_id})")
    return "\n".join(lines)


@mcp.tool(
    name="delaycoach_settings",
    annotations=ToolAnnotations(
        title="Coach Settings",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_settings(params: SettingsInput) -> str:
    """
    Read or update coach settings.

    Call with no fields to read the current settings. coach_tone changes the
    voice of coach messages (gentle, normal, savage); alert_hours sets how
    long a task may go without a check-in before the dashboard flags it.

    Args:
        params: SettingsInput with optional coach_tone, alert_hours, and response_format

    Returns:
        The current (possibly updated) settings
    """
    try:
        repo = get_repository()
        settings = repo.get_settings()
        changes = params.model_dump(include={"coach_tone", "alert_hours"}, exclude_none=True)
        if changes:
            settings = settings.model_copy(update=changes)
            repo.save_settings(settings)
    except DelaycoachError as e:
        return _error_message(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(settings.to_record(), indent=2)

    header = "# Settings updated" if changes else "# Settings"
    return "\n".join(
        [
            header,
            f"**Coach tone**: {settings.coach_tone.value}",
            f"**No check-in alert**: {settings.alert_hours}h",
        ]
    )


@mcp.tool(
    name="delaycoach_reset",
    annotations=ToolAnnotations(
        title="Reset All Data",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def delaycoach_reset(params: ResetInput) -> str:
    """
    Delete every task, check-in and setting. This cannot be undone.

    Only call this when the user explicitly asks to wipe their data.

    Args:
        params: ResetInput with confirm=true

    Returns:
        Confirmation message
    """
    if not params.confirm:
        return "Error: Reset not confirmed.\nTip: Pass confirm=true to delete all data."

    try:
        get_repository().reset_all()
    except DelaycoachError as e:
        return _error_message(e)

    return "All tasks, check-ins and settings deleted."
