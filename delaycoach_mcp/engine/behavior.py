"""Procrastination archetype classification.

Aggregate statistics over all tasks and check-ins are matched against
ARCHETYPE_RULES from top to bottom; the first rule whose predicate holds
wins. Rule order is significant: a history can satisfy several predicates
(a last-minute sprinter with long notes is also a perfectionist candidate),
and the earlier rule takes it. The final rule always matches.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from delaycoach_mcp.engine.timemath import days_until_due
from delaycoach_mcp.models.intelligence import BehaviorStats, ProcrastinationProfile
from delaycoach_mcp.models.task import CheckInModel, TaskModel

LONG_NOTE_CHARS = 50
LAST_MINUTE_DAYS = 2
SPRINT_DELTA = 20
SPRINTER_TASK_SHARE = 0.5
PERFECTIONIST_FREQUENCY = 2
PERFECTIONIST_MAX_DELTA = 8
AVOIDANT_FREQUENCY = 1
AVOIDANT_ZERO_SHARE = 0.6
SCATTERED_MIN_TASKS = 5
SCATTERED_SPREAD = 5


def compute_behavior_stats(
    tasks: list[TaskModel],
    check_ins: list[CheckInModel],
    now: datetime,
) -> BehaviorStats:
    """Summarize a check-in history."""
    per_task = Counter(c.task_id for c in check_ins)
    sprinted = {c.task_id for c in check_ins if c.progress_delta > SPRINT_DELTA}

    avg_delta = sum(c.progress_delta for c in check_ins) / len(check_ins) if check_ins else 0.0
    frequency = len(check_ins) / len(tasks) if tasks else 0.0

    last_minute = [
        t.id for t in tasks if days_until_due(t.due_date, now) <= LAST_MINUTE_DAYS and t.id in sprinted
    ]

    distribution = None
    if len(tasks) > SCATTERED_MIN_TASKS:
        distribution = [per_task[t.id] for t in tasks]

    return BehaviorStats(
        task_count=len(tasks),
        check_in_count=len(check_ins),
        avg_progress_delta=avg_delta,
        check_in_frequency=frequency,
        zero_progress_count=sum(1 for c in check_ins if c.progress_delta == 0),
        has_long_notes=any(c.note and len(c.note) > LONG_NOTE_CHARS for c in check_ins),
        last_minute_task_ids=last_minute,
        check_in_distribution=distribution,
    )


@dataclass(frozen=True)
class ArchetypeRule:
    predicate: Callable[[BehaviorStats], bool]
    profile: ProcrastinationProfile


def _is_crisis_sprinter(s: BehaviorStats) -> bool:
    return len(s.last_minute_task_ids) >= s.task_count * SPRINTER_TASK_SHARE


def _is_perfectionist(s: BehaviorStats) -> bool:
    return (
        s.check_in_frequency > PERFECTIONIST_FREQUENCY
        and s.avg_progress_delta < PERFECTIONIST_MAX_DELTA
        and s.has_long_notes
    )


def _is_avoidant(s: BehaviorStats) -> bool:
    return (
        s.check_in_frequency < AVOIDANT_FREQUENCY
        or s.zero_progress_count > s.check_in_count * AVOIDANT_ZERO_SHARE
    )


def _is_scattered(s: BehaviorStats) -> bool:
    if s.task_count <= SCATTERED_MIN_TASKS or not s.check_in_distribution:
        return False
    return max(s.check_in_distribution) - min(s.check_in_distribution) > SCATTERED_SPREAD


ARCHETYPE_RULES: tuple[ArchetypeRule, ...] = (
    ArchetypeRule(
        lambda s: s.task_count == 0,
        ProcrastinationProfile(
            type="Getting Started",
            description="Add some tasks to get personalized insights.",
            tips=["Add your first task", "Do regular check-ins", "Track your progress"],
        ),
    ),
    ArchetypeRule(
        _is_crisis_sprinter,
        ProcrastinationProfile(
            type="Crisis Sprinter",
            description="You always sprint at the last second. High stress, high risk.",
            tips=[
                "Start tasks within 24 hours of creation",
                "Do smaller daily check-ins instead of weekly",
                "Aim for +5% daily instead of +30% weekly",
            ],
        ),
    ),
    ArchetypeRule(
        _is_perfectionist,
        ProcrastinationProfile(
            type="Perfectionist",
            description="You're polishing nothing. Draft first, refine later.",
            tips=[
                "Set a timer: 25 min drafting, no editing",
                "Aim for completion, not perfection",
                "Revise only after finishing the first draft",
            ],
        ),
    ),
    ArchetypeRule(
        _is_avoidant,
        ProcrastinationProfile(
            type="Avoidant",
            description="Rare check-ins and zero progress. Avoidance is the enemy.",
            tips=[
                "Check in daily, even if progress is small",
                "Break tasks into 15-minute chunks",
                "Just show up and do 1 sentence",
            ],
        ),
    ),
    ArchetypeRule(
        _is_scattered,
        ProcrastinationProfile(
            type="Scattered",
            description="Many tasks, uneven attention. Focus wins.",
            tips=[
                "Work on max 3 tasks per week",
                "Complete one before starting another",
                "Use priority to decide what to focus on",
            ],
        ),
    ),
    ArchetypeRule(
        lambda s: True,
        ProcrastinationProfile(
            type="Balanced",
            description="Good balance of consistency and progress. Keep it up.",
            tips=[
                "Maintain your current check-in rhythm",
                "Increase progress per session by 2-5%",
                "Celebrate small wins to stay motivated",
            ],
        ),
    ),
)


def classify_stats(stats: BehaviorStats) -> ProcrastinationProfile:
    for rule in ARCHETYPE_RULES:
        if rule.predicate(stats):
            return rule.profile.model_copy(deep=True)
    raise AssertionError("ARCHETYPE_RULES must end with a catch-all rule")


def get_procrastination_type(
    tasks: list[TaskModel],
    check_ins: list[CheckInModel],
    now: datetime,
) -> ProcrastinationProfile:
    """Classify a full task and check-in history into an archetype."""
    return classify_stats(compute_behavior_stats(tasks, check_ins, now))
