"""
Community Predictions - one driver pick per (division, split) each week.

Golf-style: a pick scores the driver's finishing position within the split.
A DNF, a no-show or a skipped split scores ``participants + 1``, always worse
than any real finishing position. Splits without results are pending and
never count towards totals or averages.
"""

import logging
from collections import Counter
from typing import Iterable, Mapping, Optional

from paddock_picks.models.prediction import WinnerPick
from paddock_picks.models.result import RaceResult
from paddock_picks.models.scoring_rule import WinnerPickRules
from paddock_picks.models.score import (
    PickStatus,
    RejectedPrediction,
    UserTotal,
    WeeklyScore,
    WinnerPickRun,
    WinnerPickScore,
)
from paddock_picks.scoring.errors import MalformedPredictionError, MissingPrerequisiteError

logger = logging.getLogger(__name__)

# (schedule_id, division, split)
SplitKey = tuple[str, int, str]


def split_key(record: WinnerPick | RaceResult) -> SplitKey:
    return (record.schedule_id, record.division, record.split)


def count_participants(results: Iterable[RaceResult]) -> dict[SplitKey, int]:
    """Participants per split = number of result rows recorded for it."""
    return dict(Counter(split_key(r) for r in results))


def is_dnf(result: RaceResult, rules: WinnerPickRules) -> bool:
    """
    A recorded status is authoritative. Without one, a position beyond the
    configured cutoff is treated as a DNF.
    """
    if result.status is not None:
        return result.status.lower() != "finished" or result.split_position is None
    return result.split_position is None or result.split_position > rules.dnf_position_cutoff


def score_winner_picks(
    predictions: Iterable[WinnerPick],
    actual_finish_positions: Iterable[RaceResult],
    participant_count_by_split: Optional[Mapping[SplitKey, int]] = None,
    rules: Optional[WinnerPickRules] = None
) -> WinnerPickRun:
    """
    Score every winner pick of a season.

    Every user with at least one pick is also scored for the splits they
    skipped, as long as those splits have results.

    Raises:
        MissingPrerequisiteError: no results at all
    """
    rules = rules or WinnerPickRules()
    results = list(actual_finish_positions)
    if not results:
        raise MissingPrerequisiteError("No race results found. Enter results first.")

    if participant_count_by_split is None:
        participant_count_by_split = count_participants(results)

    result_by_driver = {split_key(r) + (r.driver_id,): r for r in results}
    week_by_schedule = {r.schedule_id: r.week for r in results}

    scores: list[WinnerPickScore] = []
    rejected: list[RejectedPrediction] = []
    picked: dict[str, set[SplitKey]] = {}
    season_by_user: dict[str, str] = {}

    for pick in predictions:
        key = split_key(pick)
        user_splits = picked.setdefault(pick.user_id, set())
        season_by_user.setdefault(pick.user_id, pick.season_id)

        if key in user_splits:
            error = MalformedPredictionError(
                pick.user_id, pick.season_id,
                f"{pick.schedule_id}:{pick.division}:{pick.split}",
                "Duplicate pick for division/split"
            )
            logger.warning(f"⚠️ Rejected winner pick: {error}")
            rejected.append(error.to_rejected())
            continue
        user_splits.add(key)

        participants = participant_count_by_split.get(key, 0)
        if participants <= 0:
            scores.append(WinnerPickScore(
                **pick.model_dump(include={"user_id", "season_id", "schedule_id", "week", "division", "split", "driver_id"}),
                status=PickStatus.PENDING,
            ))
            continue

        result = result_by_driver.get(key + (pick.driver_id,))
        if result is not None and not is_dnf(result, rules):
            finish, status = result.split_position, PickStatus.FINISHED
        else:
            # DNF or driver did not take part in the split
            finish, status = participants + 1, PickStatus.DNF

        scores.append(WinnerPickScore(
            **pick.model_dump(include={"user_id", "season_id", "schedule_id", "week", "division", "split", "driver_id"}),
            finish_position=finish,
            points=finish,
            status=status,
        ))

    scored_splits = [
        key for key, participants in participant_count_by_split.items()
        if participants > 0 and key[1] in rules.divisions and key[2] in rules.splits
    ]
    for user_id, user_splits in picked.items():
        for key in scored_splits:
            if key in user_splits:
                continue
            penalty = participant_count_by_split[key] + 1
            schedule_id, division, split = key
            scores.append(WinnerPickScore(
                user_id=user_id,
                season_id=season_by_user[user_id],
                schedule_id=schedule_id,
                week=week_by_schedule.get(schedule_id, 0),
                division=division,
                split=split,
                finish_position=penalty,
                points=penalty,
                status=PickStatus.MISSING,
            ))

    scores.sort(key=lambda s: (s.user_id, s.week, s.division, s.split))
    return WinnerPickRun(scores=scores, rejected=rejected)


def summarize_winner_picks(scores: Iterable[WinnerPickScore]) -> list[UserTotal]:
    """
    Per-user season totals. Only weeks with a recorded result count as
    participated; users with nothing scored yet are left out.
    """
    totals: dict[str, UserTotal] = {}
    weeks: dict[str, set[int]] = {}
    penalties: Counter = Counter()

    for score in scores:
        if score.points is None:
            continue
        total = totals.get(score.user_id)
        if total is None:
            total = totals[score.user_id] = UserTotal(
                user_id=score.user_id, context_id=score.season_id, total_points=0
            )
        total.total_points += score.points
        weeks.setdefault(score.user_id, set()).add(score.week)
        if score.status != PickStatus.FINISHED:
            penalties[score.user_id] += score.points

    for user_id, total in totals.items():
        total.contexts_participated = len(weeks[user_id])
        total.breakdown = {"penalty_points": penalties[user_id]}

    return list(totals.values())


def weekly_scores(scores: Iterable[WinnerPickScore]) -> list[WeeklyScore]:
    """Week-by-week totals of already scored picks (pending weeks excluded)."""
    by_week: dict[int, WeeklyScore] = {}
    for score in scores:
        if score.points is None:
            continue
        weekly = by_week.get(score.week)
        if weekly is None:
            by_week[score.week] = WeeklyScore(
                week=score.week, total_points=score.points, prediction_count=1
            )
        else:
            weekly.total_points += score.points
            weekly.prediction_count += 1
    return sorted(by_week.values(), key=lambda w: w.week)
