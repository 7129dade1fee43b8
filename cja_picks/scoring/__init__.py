"""Prediction scoring and leaderboard engine."""

from .aggregator import (
    PredictionBook,
    ScoredSlot,
    UserSeasonScore,
    aggregate_user,
    assign_competition_ranks,
    build_leaderboard,
)
from .result_index import ResultIndex
from .slot_scorer import SCORING_RULES, score_slot
from .slot_universe import build_slot_universe
from .snapshot_differ import diff_positions, latest_scored_week, leaderboard_with_movement

__all__ = [
    "PredictionBook",
    "ResultIndex",
    "SCORING_RULES",
    "ScoredSlot",
    "UserSeasonScore",
    "aggregate_user",
    "assign_competition_ranks",
    "build_leaderboard",
    "build_slot_universe",
    "diff_positions",
    "latest_scored_week",
    "leaderboard_with_movement",
    "score_slot",
]
