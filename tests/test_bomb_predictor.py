"""Tests for bomb scoring, risk tiers and top-bomb ranking."""

from datetime import date, datetime, timedelta, timezone

import pytest

from delaycoach_mcp.engine.bomb_predictor import (
    ReasonClause,
    ReasonMode,
    calculate_bomb_score,
    fold_reason,
    get_risk_level,
    get_top_bombs,
    score_clauses,
)
from delaycoach_mcp.enums import RiskLevel

from .conftest import NOW

# ============================================================================
# Bomb Score Tests
# ============================================================================


class TestCalculateBombScore:
    """Tests for calculate_bomb_score."""

    def test_due_tomorrow_untouched_task_is_a_bomb(self, make_task):
        """Due in a day, 10% done, never checked in: every pressure signal fires."""
        task = make_task(due_date=date(2025, 3, 11), progress=10, estimated_hours=20, last_check_in_at=None)

        result = calculate_bomb_score(task, NOW)

        assert result.task_id == task.id
        assert result.score == 100
        assert result.reason == "Deadline in 24h, 80%+ incomplete, Never checked in"
        assert get_risk_level(result.score) == RiskLevel.BOMB

    @pytest.mark.parametrize("status_fields", [{}, {"progress": 100}, {"due_date": date(2026, 1, 1)}])
    def test_overdue_is_always_max(self, make_task, status_fields):
        task = make_task(status="overdue", **status_fields)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 100
        assert result.reason == "OVERDUE"

    def test_overdue_overwrites_other_reasons(self, make_task):
        task = make_task(status="overdue", due_date=date(2025, 3, 11), progress=0, last_check_in_at=None)
        assert calculate_bomb_score(task, NOW).reason == "OVERDUE"

    def test_on_track(self, make_task):
        task = make_task(progress=70)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 0
        assert result.reason == "On track"

    def test_deadline_in_48h(self, make_task):
        task = make_task(due_date=date(2025, 3, 12), progress=50, estimated_hours=4)
        result = calculate_bomb_score(task, NOW)
        # 35 (deadline) + 10 (50% incomplete, no text)
        assert result.score == 45
        assert result.reason == "Deadline in 48h"

    def test_deadline_in_3_days_with_shortfall(self, make_task):
        task = make_task(due_date=date(2025, 3, 13), progress=30, estimated_hours=10)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 40
        assert result.reason == "Deadline in 3 days, 60%+ incomplete"

    def test_within_a_week_adds_points_but_no_reason(self, make_task):
        task = make_task(due_date=date(2025, 3, 15), progress=50)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 20
        assert result.reason == "On track"

    def test_deadline_reason_comes_first(self, make_task):
        """The deadline clause is evaluated first, so shortfall text follows it."""
        task = make_task(due_date=date(2025, 3, 12), progress=0, estimated_hours=1)
        assert calculate_bomb_score(task, NOW).reason == "Deadline in 48h, 80%+ incomplete"

    def test_effort_deficit_points_without_reason(self, make_task):
        # 87h left, 90h of work remaining: 3h deficit -> +6, too small to mention
        task = make_task(due_date=date(2025, 3, 14), progress=0, estimated_hours=90)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 10 + 30 + 6
        assert result.reason == "80%+ incomplete"

    def test_large_effort_deficit_is_reported_in_hours(self, make_task):
        # 39h left, 60h of work: 21h short
        task = make_task(due_date=date(2025, 3, 12), progress=0, estimated_hours=60, last_check_in_at=None)
        result = calculate_bomb_score(task, NOW)
        assert result.score == 100
        assert result.reason == "Deadline in 48h, 80%+ incomplete, 21h short, Never checked in"

    def test_effort_deficit_points_are_capped(self, make_task):
        task = make_task(due_date=date(2025, 3, 14), progress=100, estimated_hours=500)
        deficit = next(c for c in score_clauses(task, NOW) if c.signal == "deficit")
        assert not deficit.triggered  # nothing left to do

        task = make_task(due_date=date(2025, 4, 30), progress=0, estimated_hours=5000)
        deficit = next(c for c in score_clauses(task, NOW) if c.signal == "deficit")
        assert deficit.triggered
        assert deficit.points == 25

    def test_stale_check_in(self, make_task):
        task = make_task(progress=80, last_check_in_at=NOW - timedelta(days=4))
        result = calculate_bomb_score(task, NOW)
        assert result.score == 15
        assert result.reason == "No check-in 3+ days"

    def test_check_in_exactly_72h_ago_is_not_stale(self, make_task):
        task = make_task(progress=80, last_check_in_at=NOW - timedelta(hours=72))
        assert calculate_bomb_score(task, NOW).score == 0

    def test_never_checked_in_only_counts_inside_a_week(self, make_task):
        far = make_task(due_date=date(2025, 3, 20), progress=100, last_check_in_at=None)
        near = make_task(due_date=date(2025, 3, 16), progress=100, last_check_in_at=None)

        assert calculate_bomb_score(far, NOW).score == 0
        near_result = calculate_bomb_score(near, NOW)
        assert near_result.score == 10 + 20
        assert near_result.reason == "Never checked in"

    def test_naive_now_is_treated_as_utc(self, make_task):
        task = make_task(due_date=date(2025, 3, 12), progress=50, estimated_hours=4)
        naive = NOW.replace(tzinfo=None)
        assert calculate_bomb_score(task, naive) == calculate_bomb_score(task, NOW)

    def test_score_always_within_bounds(self, make_task):
        tasks = [
            make_task(due_date=date(2025, 3, 1) + timedelta(days=d), progress=p, estimated_hours=h, status=s)
            for d in (0, 8, 11, 40)
            for p in (0, 35, 100)
            for h in (0.5, 40, 400)
            for s in ("active", "overdue", "done")
        ]
        for task in tasks:
            assert 0 <= calculate_bomb_score(task, NOW).score <= 100

    def test_same_inputs_same_output(self, make_task):
        task = make_task(due_date=date(2025, 3, 12), progress=15, estimated_hours=30, last_check_in_at=None)
        assert calculate_bomb_score(task, NOW) == calculate_bomb_score(task, NOW)

    def test_score_depends_on_injected_now(self, make_task):
        task = make_task(due_date=date(2025, 3, 20), progress=50)
        early = calculate_bomb_score(task, NOW)
        late = calculate_bomb_score(task, datetime(2025, 3, 19, 9, 0, tzinfo=timezone.utc))
        assert early.score < late.score


# ============================================================================
# Reason Folding Tests
# ============================================================================


class TestFoldReason:
    """Tests for the reason clause policy."""

    def test_empty_is_on_track(self):
        assert fold_reason([]) == "On track"

    def test_untriggered_clauses_are_ignored(self):
        clauses = [ReasonClause("a", 1, False, 10, "hidden"), ReasonClause("b", 2, True, 5, "shown")]
        assert fold_reason(clauses) == "shown"

    def test_append_joins_with_comma(self):
        clauses = [ReasonClause("a", 1, True, 0, "first"), ReasonClause("b", 2, True, 0, "second")]
        assert fold_reason(clauses) == "first, second"

    def test_overwrite_discards_earlier_text(self):
        clauses = [
            ReasonClause("a", 1, True, 0, "first"),
            ReasonClause("b", 2, True, 0, "reset", ReasonMode.OVERWRITE),
            ReasonClause("c", 3, True, 0, "after"),
        ]
        assert fold_reason(clauses) == "reset, after"

    def test_set_only_fills_an_empty_reason(self):
        assert fold_reason([ReasonClause("a", 1, True, 0, "only", ReasonMode.SET)]) == "only"
        clauses = [ReasonClause("a", 1, True, 0, "first"), ReasonClause("b", 2, True, 0, "ignored", ReasonMode.SET)]
        assert fold_reason(clauses) == "first"

    def test_clauses_fold_in_priority_order(self):
        clauses = [
            ReasonClause("late", 9, True, 0, "FINAL", ReasonMode.OVERWRITE),
            ReasonClause("early", 1, True, 0, "early"),
        ]
        assert fold_reason(clauses) == "FINAL"


# ============================================================================
# Risk Level Tests
# ============================================================================


class TestGetRiskLevel:
    """Tests for the score to tier mapping."""

    @pytest.mark.parametrize(
        "score,level",
        [
            (0, RiskLevel.SAFE),
            (19, RiskLevel.SAFE),
            (20, RiskLevel.CAUTION),
            (39, RiskLevel.CAUTION),
            (40, RiskLevel.RISK),
            (59, RiskLevel.RISK),
            (60, RiskLevel.BOMB),
            (100, RiskLevel.BOMB),
        ],
    )
    def test_boundaries(self, score, level):
        assert get_risk_level(score) == level

    def test_monotonic(self):
        ranks = [get_risk_level(s).rank for s in range(0, 101)]
        assert ranks == sorted(ranks)

    def test_tier_order(self):
        assert [level.rank for level in RiskLevel] == [0, 1, 2, 3]


# ============================================================================
# Top Bombs Tests
# ============================================================================


class TestGetTopBombs:
    """Tests for get_top_bombs."""

    @pytest.fixture
    def tasks(self, make_task):
        return [
            make_task("calm", progress=70),
            make_task("soon", due_date=date(2025, 3, 12), progress=50, estimated_hours=4),
            make_task("done", due_date=date(2025, 3, 11), progress=100, status="done"),
            make_task("late", status="overdue"),
            make_task("week", due_date=date(2025, 3, 15), progress=50),
        ]

    def test_default_limit_is_three(self, tasks):
        result = get_top_bombs(tasks, NOW)
        assert [s.task.id for s in result] == ["late", "soon", "week"]

    def test_sorted_descending_with_annotations(self, tasks):
        result = get_top_bombs(tasks, NOW, limit=10)
        scores = [s.bomb_score for s in result]
        assert scores == sorted(scores, reverse=True)
        assert result[0].bomb_reason == "OVERDUE"
        assert result[0].risk_level == RiskLevel.BOMB
        assert result[-1].task.id == "calm"

    def test_done_tasks_excluded(self, tasks):
        ids = [s.task.id for s in get_top_bombs(tasks, NOW, limit=10)]
        assert "done" not in ids
        assert len(ids) == 4

    def test_limit_respected(self, tasks):
        assert len(get_top_bombs(tasks, NOW, limit=1)) == 1
        assert get_top_bombs(tasks, NOW, limit=0) == []

    def test_ties_keep_input_order(self, make_task):
        tasks = [make_task(f"t{i}", progress=70) for i in range(5)]
        assert [s.task.id for s in get_top_bombs(tasks, NOW, limit=5)] == ["t0", "t1", "t2", "t3", "t4"]

    def test_empty(self):
        assert get_top_bombs([], NOW) == []

    def test_inputs_not_mutated(self, tasks):
        before = [t.model_dump() for t in tasks]
        get_top_bombs(tasks, NOW, limit=10)
        assert [t.model_dump() for t in tasks] == before
