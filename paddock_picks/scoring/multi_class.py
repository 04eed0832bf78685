"""
IMSA multi-class events - podium picks and manufacturer rankings per class.

Higher is better. Points come from the configurable ScoringRuleTable.
"""

import logging
from typing import Iterable, Optional, Sequence

from paddock_picks.models.prediction import ManufacturerPrediction, PodiumPrediction
from paddock_picks.models.result import EntryResult, ImsaClass, ManufacturerResult
from paddock_picks.models.score import (
    ManufacturerScore,
    MultiClassEventScores,
    PodiumScore,
    RejectedPrediction,
    UserEventScore,
)
from paddock_picks.scoring.errors import MalformedPredictionError, MissingPrerequisiteError
from paddock_picks.scoring.rules import (
    EXACT,
    MANUFACTURER,
    OFF_1,
    OFF_2,
    ON_PODIUM,
    PODIUM,
    TOP_5,
    ScoringRuleTable,
)

logger = logging.getLogger(__name__)

PODIUM_POSITIONS = (1, 2, 3)
MANUFACTURER_RESULT_TYPES = {0: EXACT, 1: OFF_1, 2: OFF_2}


def required_rule_combinations(class_meta: Iterable[ImsaClass]) -> list[tuple[str, Optional[int], str]]:
    """Every rule an event with these classes can ask the table for."""
    combinations = [
        (PODIUM, position, result_type)
        for position in PODIUM_POSITIONS
        for result_type in (EXACT, ON_PODIUM, TOP_5)
    ]
    if any(cls.has_manufacturer_prediction for cls in class_meta):
        combinations += [(MANUFACTURER, None, result_type) for result_type in (EXACT, OFF_1, OFF_2)]
    return combinations


def is_finished(result: EntryResult) -> bool:
    return result.status.lower() == "finished" and result.finish_position is not None


def podium_result_type(predicted_position: int, actual_finish: Optional[int]) -> Optional[str]:
    """Proximity of a podium pick, None when it earns nothing."""
    if actual_finish is None:
        return None
    if actual_finish == predicted_position:
        return EXACT
    if 1 <= actual_finish <= 3:
        return ON_PODIUM
    if 4 <= actual_finish <= 5:
        return TOP_5
    return None


def manufacturer_result_type(predicted_rank: int, actual_rank: Optional[int]) -> Optional[str]:
    if actual_rank is None:
        return None
    return MANUFACTURER_RESULT_TYPES.get(abs(predicted_rank - actual_rank))


def derive_manufacturer_results(
    entry_results: Sequence[EntryResult],
    class_meta: Iterable[ImsaClass]
) -> list[ManufacturerResult]:
    """
    Rank manufacturers by the mean finish position of their finished entries.

    Only classes flagged with has_manufacturer_prediction are ranked. Equal
    means go to the manufacturer seen first in ``entry_results``.
    """
    manufacturer_results: list[ManufacturerResult] = []

    for cls in class_meta:
        if not cls.has_manufacturer_prediction:
            continue

        finishes: dict[str, list[int]] = {}
        for result in entry_results:
            if result.class_id != cls.id or not result.manufacturer_id:
                continue
            if not is_finished(result):
                continue
            # dict keeps first-seen order, used as the tie-break below
            finishes.setdefault(result.manufacturer_id, []).append(result.finish_position)

        averages = [
            (sum(positions) / len(positions), first_seen, manufacturer_id)
            for first_seen, (manufacturer_id, positions) in enumerate(finishes.items())
        ]
        averages.sort(key=lambda item: (item[0], item[1]))

        for rank, (avg, _, manufacturer_id) in enumerate(averages, start=1):
            manufacturer_results.append(ManufacturerResult(
                event_id=cls.event_id,
                class_id=cls.id,
                manufacturer_id=manufacturer_id,
                avg_finish_position=avg,
                final_rank=rank,
            ))

    return manufacturer_results


def score_multi_class_event(
    podium_predictions: Iterable[PodiumPrediction],
    manufacturer_predictions: Iterable[ManufacturerPrediction],
    entry_results: Sequence[EntryResult],
    class_meta: Iterable[ImsaClass],
    rules: ScoringRuleTable
) -> MultiClassEventScores:
    """
    Score all podium and manufacturer predictions of one event.

    Pure function of its inputs: re-running it with corrected results gives
    the new totals, never an accumulation of the old ones.

    Raises:
        MissingPrerequisiteError: the event has no results yet
    """
    if not entry_results:
        raise MissingPrerequisiteError("No results found for this event. Enter results first.")

    # DNF entries keep no finish position for podium purposes
    finish_by_entry = {
        r.entry_id: r.finish_position
        for r in entry_results
        if is_finished(r)
    }

    manufacturer_results = derive_manufacturer_results(entry_results, class_meta)
    rank_by_manufacturer = {
        (m.class_id, m.manufacturer_id): m.final_rank for m in manufacturer_results
    }

    user_scores: dict[str, UserEventScore] = {}
    rejected: list[RejectedPrediction] = []

    def user_score(user_id: str, event_id: str) -> UserEventScore:
        if user_id not in user_scores:
            user_scores[user_id] = UserEventScore(user_id=user_id, event_id=event_id)
        return user_scores[user_id]

    def reject(error: MalformedPredictionError):
        logger.warning(f"⚠️ Rejected IMSA prediction: {error}")
        rejected.append(error.to_rejected())

    # Podium
    podium_scores: list[PodiumScore] = []
    seen_slots: set[tuple[str, str, int]] = set()

    for pred in podium_predictions:
        slot = (pred.user_id, pred.class_id, pred.position)
        if pred.position not in PODIUM_POSITIONS:
            reject(MalformedPredictionError(
                pred.user_id, pred.event_id, f"{pred.class_id}:P{pred.position}",
                "Podium position out of range"
            ))
            continue
        if slot in seen_slots:
            reject(MalformedPredictionError(
                pred.user_id, pred.event_id, f"{pred.class_id}:P{pred.position}",
                "Duplicate podium slot"
            ))
            continue
        seen_slots.add(slot)

        actual_finish = finish_by_entry.get(pred.entry_id)
        result_type = podium_result_type(pred.position, actual_finish)
        points = rules.points_for(PODIUM, result_type, pred.position) if result_type else 0

        podium_scores.append(PodiumScore(
            user_id=pred.user_id,
            event_id=pred.event_id,
            class_id=pred.class_id,
            position=pred.position,
            entry_id=pred.entry_id,
            actual_finish=actual_finish,
            result_type=result_type,
            points=points,
        ))

        score = user_score(pred.user_id, pred.event_id)
        score.podium_points += points
        score.predictions_made += 1

    # Manufacturers
    manufacturer_scores: list[ManufacturerScore] = []
    seen_manufacturers: set[tuple[str, str, str]] = set()
    seen_ranks: set[tuple[str, str, int]] = set()

    for pred in manufacturer_predictions:
        key = (pred.user_id, pred.class_id, pred.manufacturer_id)
        if key in seen_manufacturers:
            reject(MalformedPredictionError(
                pred.user_id, pred.event_id, f"{pred.class_id}:{pred.manufacturer_id}",
                "Duplicate manufacturer prediction"
            ))
            continue
        rank_slot = (pred.user_id, pred.class_id, pred.predicted_rank)
        if rank_slot in seen_ranks:
            reject(MalformedPredictionError(
                pred.user_id, pred.event_id, f"{pred.class_id}:R{pred.predicted_rank}",
                "Duplicate manufacturer rank"
            ))
            continue
        seen_manufacturers.add(key)
        seen_ranks.add(rank_slot)

        actual_rank = rank_by_manufacturer.get((pred.class_id, pred.manufacturer_id))
        result_type = manufacturer_result_type(pred.predicted_rank, actual_rank)
        points = rules.points_for(MANUFACTURER, result_type) if result_type else 0

        manufacturer_scores.append(ManufacturerScore(
            user_id=pred.user_id,
            event_id=pred.event_id,
            class_id=pred.class_id,
            manufacturer_id=pred.manufacturer_id,
            predicted_rank=pred.predicted_rank,
            actual_rank=actual_rank,
            result_type=result_type,
            points=points,
        ))

        score = user_score(pred.user_id, pred.event_id)
        score.manufacturer_points += points
        score.predictions_made += 1

    for score in user_scores.values():
        score.total_points = score.podium_points + score.manufacturer_points

    return MultiClassEventScores(
        podium_scores=podium_scores,
        manufacturer_results=manufacturer_results,
        manufacturer_scores=manufacturer_scores,
        user_scores=list(user_scores.values()),
        rejected=rejected,
    )
