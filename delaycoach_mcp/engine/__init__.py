"""Pure scoring and classification engine. No I/O; "now" is always passed in."""

from delaycoach_mcp.engine.behavior import (
    ARCHETYPE_RULES,
    classify_stats,
    compute_behavior_stats,
    get_procrastination_type,
)
from delaycoach_mcp.engine.bomb_predictor import (
    ReasonClause,
    ReasonMode,
    calculate_bomb_score,
    fold_reason,
    get_risk_level,
    get_top_bombs,
    score_clauses,
)
from delaycoach_mcp.engine.coach import generate_coach_message

__all__ = [
    # Risk scoring
    "ReasonClause",
    "ReasonMode",
    "calculate_bomb_score",
    "fold_reason",
    "get_risk_level",
    "get_top_bombs",
    "score_clauses",
    # Behavior classification
    "ARCHETYPE_RULES",
    "classify_stats",
    "compute_behavior_stats",
    "get_procrastination_type",
    # Coach messages
    "generate_coach_message",
]
