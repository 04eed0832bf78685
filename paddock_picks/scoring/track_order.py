"""
Nostradouglas - scores a user's predicted season track order.

Golf-style: a perfect match costs track + week points, a track that runs in
another week costs track points, an unscheduled track costs nothing and a
required week with no prediction costs the missing-prediction penalty.
"""

import logging
from collections import defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from paddock_picks.models.prediction import TrackOrderPrediction
from paddock_picks.models.result import ScheduleEntry
from paddock_picks.models.scoring_rule import TrackOrderRules
from paddock_picks.models.score import (
    MatchStatus,
    RejectedPrediction,
    TrackOrderRun,
    TrackOrderScore,
    UserTotal,
)
from paddock_picks.scoring.errors import MalformedPredictionError, MissingPrerequisiteError

logger = logging.getLogger(__name__)


def required_track_weeks(
    rules: TrackOrderRules,
    week_1_deadline_passed: bool,
    has_week_1_prediction: bool
) -> list[int]:
    """
    Weeks a user must predict.

    Users who first predict after the week-1 deadline (and never saved a
    week-1 prediction) only owe the remaining weeks, starting at week 2.
    """
    if week_1_deadline_passed and not has_week_1_prediction:
        return list(range(2, 2 + rules.max_tracks_after_week_1))
    return list(range(1, 1 + rules.max_tracks))


def score_track_prediction(
    prediction: TrackOrderPrediction,
    schedule_by_week: Mapping[int, str],
    week_by_track: Mapping[str, int],
    rules: TrackOrderRules
) -> TrackOrderScore:
    """Score one predicted (week -> track) entry against the actual schedule."""
    actual_week = week_by_track.get(prediction.track_id)
    track_match = actual_week is not None
    week_match = schedule_by_week.get(prediction.position) == prediction.track_id

    if track_match and week_match:
        status = MatchStatus.PERFECT_MATCH
    elif track_match:
        status = MatchStatus.TRACK_MATCH_ONLY
    else:
        status = MatchStatus.NO_MATCH

    track_points = rules.track_match_points if track_match else 0
    week_points = rules.week_match_points if track_match and week_match else 0

    return TrackOrderScore(
        user_id=prediction.user_id,
        season_id=prediction.season_id,
        predicted_week=prediction.position,
        predicted_track=prediction.track_id,
        actual_week=actual_week,
        track_match_points=track_points,
        week_match_points=week_points,
        points=track_points + week_points,
        status=status,
    )


def score_track_order(
    predictions: Iterable[TrackOrderPrediction],
    actual_schedule: Sequence[ScheduleEntry],
    rules: TrackOrderRules,
    required_weeks_by_user: Optional[Mapping[str, Sequence[int]]] = None
) -> TrackOrderRun:
    """
    Score every track-order prediction of a season.

    Args:
        predictions: predictions of one or more users for the same season
        actual_schedule: the season's real (week -> track) schedule
        rules: point constants
        required_weeks_by_user: weeks each user had to predict; a required
            week without prediction scores the missing-prediction penalty.
            Users not present here are not penalised.

    Raises:
        MissingPrerequisiteError: the schedule is empty
    """
    if not actual_schedule:
        raise MissingPrerequisiteError("No schedule found for this season. Enter the schedule first.")

    schedule_by_week = {s.week: s.track_id for s in actual_schedule}
    week_by_track: dict[str, int] = {}
    for entry in sorted(actual_schedule, key=lambda s: s.week):
        # A track scheduled twice keeps its first week
        week_by_track.setdefault(entry.track_id, entry.week)

    scores: list[TrackOrderScore] = []
    rejected: list[RejectedPrediction] = []
    predicted_weeks: dict[str, set[int]] = defaultdict(set)

    for prediction in predictions:
        seen = predicted_weeks[prediction.user_id]
        if prediction.position in seen:
            error = MalformedPredictionError(
                prediction.user_id, prediction.season_id,
                f"week:{prediction.position}", "Duplicate prediction for week"
            )
            logger.warning(f"⚠️ Rejected track-order prediction: {error}")
            rejected.append(error.to_rejected())
            continue

        seen.add(prediction.position)
        scores.append(score_track_prediction(prediction, schedule_by_week, week_by_track, rules))

    season_id = actual_schedule[0].season_id
    for user_id, weeks in (required_weeks_by_user or {}).items():
        for week in weeks:
            if week in predicted_weeks.get(user_id, ()):
                continue
            scores.append(TrackOrderScore(
                user_id=user_id,
                season_id=season_id,
                predicted_week=week,
                points=rules.missing_prediction_penalty,
                status=MatchStatus.MISSING,
            ))

    scores.sort(key=lambda s: (s.user_id, s.predicted_week))
    return TrackOrderRun(scores=scores, rejected=rejected)


def summarize_track_order(scores: Iterable[TrackOrderScore]) -> list[UserTotal]:
    """Aggregate per-prediction scores into one total per user."""
    totals: dict[str, dict[str, float]] = {}
    season_ids: dict[str, str] = {}

    for score in scores:
        stats = totals.setdefault(score.user_id, {
            "track_points": 0,
            "week_points": 0,
            "penalty_points": 0,
            "predictions_made": 0,
        })
        season_ids[score.user_id] = score.season_id
        if score.status == MatchStatus.MISSING:
            stats["penalty_points"] += score.points
        else:
            stats["track_points"] += score.track_match_points
            stats["week_points"] += score.week_match_points
            stats["predictions_made"] += 1

    return [
        UserTotal(
            user_id=user_id,
            context_id=season_ids[user_id],
            total_points=stats["track_points"] + stats["week_points"] + stats["penalty_points"],
            contexts_participated=1,
            breakdown=stats,
        )
        for user_id, stats in totals.items()
    ]
