"""Coach message templates.

The situation is picked first (ordered, first match wins), then the tone
picks the wording. Tone comes from user settings and never reaches the
scoring engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from delaycoach_mcp.engine.timemath import HOURS_PER_DAY, days_until_due
from delaycoach_mcp.enums import CoachTone
from delaycoach_mcp.models.intelligence import CoachMessage
from delaycoach_mcp.models.task import TaskModel


@dataclass(frozen=True)
class CoachContext:
    progress_delta: int
    days_left: int
    progress_lack: int

    @property
    def hours_left(self) -> int:
        return self.days_left * HOURS_PER_DAY


# (fact, action) per tone; formatted with days, hours, lack, delta
TEMPLATES: dict[str, dict[CoachTone, tuple[str, str]]] = {
    "no_progress": {
        CoachTone.SAVAGE: (
            "Days with zero check-ins. Stop disappearing.",
            "Today: save 3 references and write 1 outline sentence.",
        ),
        CoachTone.GENTLE: (
            "No progress recorded yet. That's okay, let's start now.",
            "Spend 10 minutes writing down 3 key points to cover.",
        ),
        CoachTone.NORMAL: (
            "0% means you haven't started yet.",
            "Spend 10 minutes and write a 3-line outline.",
        ),
    },
    "bomb": {
        CoachTone.SAVAGE: (
            "{hours}h left with {lack}% remaining. This is a bomb countdown.",
            "Write 5 sentences for the intro right now. Not tomorrow.",
        ),
        CoachTone.GENTLE: (
            "You have {hours} hours and {lack}% to complete.",
            "Focus on writing one complete paragraph today.",
        ),
        CoachTone.NORMAL: (
            "Due in {hours}h with {lack}% left. Critical zone.",
            "Write 5 sentences for the intro right now.",
        ),
    },
    "low_progress": {
        CoachTone.SAVAGE: (
            "{days} days left, {lack}% incomplete. Math says you're behind.",
            "Draft one full section today. Stop planning, start writing.",
        ),
        CoachTone.GENTLE: (
            "{days} days to finish {lack}% of the work.",
            "Let's make steady progress: write one paragraph today.",
        ),
        CoachTone.NORMAL: (
            "{days} days for {lack}% work. You're behind schedule.",
            "Write one complete section today.",
        ),
    },
    "positive": {
        CoachTone.SAVAGE: (
            "+{delta}% is solid. Keep this energy.",
            "Don't lose momentum. Add another 10% tomorrow.",
        ),
        CoachTone.GENTLE: (
            "Great work! +{delta}% progress today.",
            "You're building momentum. Keep going tomorrow.",
        ),
        CoachTone.NORMAL: (
            "+{delta}% is good progress.",
            "Maintain this pace. Do the same tomorrow.",
        ),
    },
    "default": {
        CoachTone.SAVAGE: (
            "+{delta}% is okay, but you can do better.",
            "Push for +15% next check-in. Small gains compound.",
        ),
        CoachTone.GENTLE: (
            "You made progress: +{delta}%.",
            "Every step counts. Try for a bit more tomorrow.",
        ),
        CoachTone.NORMAL: (
            "+{delta}% progress with {days} days left.",
            "Aim for +10% in your next check-in.",
        ),
    },
}

SAVAGE_DEADLINE_NO_PROGRESS = "0% progress and deadline incoming. That's bold."


def pick_situation(ctx: CoachContext) -> str:
    if ctx.progress_delta == 0:
        return "no_progress"
    if ctx.days_left <= 2 and ctx.progress_lack > 60:
        return "bomb"
    if ctx.progress_lack > 70 and ctx.days_left < 7:
        return "low_progress"
    if ctx.progress_delta > 15:
        return "positive"
    return "default"


def generate_coach_message(
    task: TaskModel,
    progress_delta: int,
    tone: CoachTone,
    now: datetime,
) -> CoachMessage:
    """Build feedback for a check-in of ``progress_delta`` against ``task``."""
    ctx = CoachContext(
        progress_delta=progress_delta,
        days_left=days_until_due(task.due_date, now),
        progress_lack=100 - task.progress,
    )
    situation = pick_situation(ctx)
    fact, action = TEMPLATES[situation][tone]

    if situation == "no_progress" and tone == CoachTone.SAVAGE and ctx.days_left <= 2:
        fact = SAVAGE_DEADLINE_NO_PROGRESS

    fields = {"days": ctx.days_left, "hours": ctx.hours_left, "lack": ctx.progress_lack, "delta": progress_delta}
    return CoachMessage(fact=fact.format(**fields), action=action.format(**fields))
