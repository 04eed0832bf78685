"""
Pure scoring engine: plain data in, plain data out.

No I/O happens here; fetching and write-back live in the services layer.
"""

from .errors import (
    ScoringError,
    MissingPrerequisiteError,
    IncompleteRuleTableError,
    MalformedPredictionError,
)
from .rules import ScoringRuleTable
from .track_order import required_track_weeks, score_track_order, summarize_track_order
from .winner_picks import score_winner_picks, summarize_winner_picks, weekly_scores
from .multi_class import derive_manufacturer_results, score_multi_class_event
from .leaderboard import aggregate_user_totals, build_leaderboard, direction_for

__all__ = [
    "ScoringError",
    "MissingPrerequisiteError",
    "IncompleteRuleTableError",
    "MalformedPredictionError",
    "ScoringRuleTable",
    "required_track_weeks",
    "score_track_order",
    "summarize_track_order",
    "score_winner_picks",
    "summarize_winner_picks",
    "weekly_scores",
    "derive_manufacturer_results",
    "score_multi_class_event",
    "aggregate_user_totals",
    "build_leaderboard",
    "direction_for",
]
