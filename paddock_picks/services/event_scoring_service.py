"""
EventScoringService - IMSA multi-class event scoring and leaderboards.

Scoring an event:
1. Loads rules, entry results, classes and predictions
2. Derives manufacturer rankings and scores every prediction (pure engine)
3. Overwrites manufacturer results and per-user event totals
4. Publishes the event leaderboard

Re-running after a results correction replaces previous totals.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.leaderboard import ContextKind, LeaderboardEntry
from paddock_picks.models.result import ManufacturerResult
from paddock_picks.models.score import UserEventScore, UserTotal
from paddock_picks.repositories.prediction_repository import PredictionRepository
from paddock_picks.repositories.result_repository import ResultRepository
from paddock_picks.repositories.score_repository import ScoreRepository
from paddock_picks.scoring.leaderboard import aggregate_user_totals
from paddock_picks.scoring.multi_class import required_rule_combinations, score_multi_class_event
from paddock_picks.scoring.rules import ScoringRuleTable
from paddock_picks.services.leaderboard_service import LeaderboardService

logger = logging.getLogger(__name__)


class EventNotFoundError(Exception):
    """Raised when event is not found."""
    pass


def event_total(score: UserEventScore) -> UserTotal:
    return UserTotal(
        user_id=score.user_id,
        context_id=score.event_id,
        total_points=score.total_points,
        contexts_participated=1,
        breakdown={
            "podium_points": score.podium_points,
            "manufacturer_points": score.manufacturer_points,
            "predictions_made": score.predictions_made,
        },
    )


class EventScoringService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.prediction_repo = PredictionRepository(db)
        self.result_repo = ResultRepository(db)
        self.score_repo = ScoreRepository(db)
        self.leaderboard_service = LeaderboardService(db)

    async def calculate_event_scores(self, event_id: str) -> dict:
        """
        Score an event and write the results back.

        Raises:
            EventNotFoundError: unknown event
            MissingPrerequisiteError: the event has no results yet
        """
        event = await self.result_repo.get_event(event_id)
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")

        rules = ScoringRuleTable(await self.result_repo.get_scoring_rules())
        entry_results = await self.result_repo.get_entry_results(event_id)
        classes = await self.result_repo.get_classes(event_id)
        missing_rules = rules.missing_rules(required_rule_combinations(classes))
        if missing_rules:
            logger.warning(f"⚠️ Event {event_id}: no scoring rule for {missing_rules}, those picks score 0")

        podium_predictions = await self.prediction_repo.get_podium_predictions(event_id)
        manufacturer_predictions = await self.prediction_repo.get_manufacturer_predictions(event_id)

        scores = score_multi_class_event(
            podium_predictions,
            manufacturer_predictions,
            entry_results,
            classes,
            rules
        )

        users_scored = await self.score_repo.replace_event_results(
            event_id, scores.manufacturer_results, scores.user_scores
        )
        await self.leaderboard_service.publish(
            ContextKind.MULTI_CLASS,
            event_id,
            [event_total(s) for s in scores.user_scores]
        )

        logger.info(
            f"✅ IMSA event {event_id}: {users_scored} users scored, "
            f"{len(scores.rejected)} predictions rejected"
        )
        return {
            "success": True,
            "users_scored": users_scored,
            "predictions_rejected": len(scores.rejected),
            "missing_rules": len(missing_rules),
        }

    async def get_manufacturer_results(self, event_id: str) -> list[ManufacturerResult]:
        """Manufacturer rankings of the last scoring run of an event."""
        return await self.score_repo.get_manufacturer_results(event_id)

    async def get_event_leaderboard(self, event_id: str, limit: int = 100) -> list[LeaderboardEntry]:
        return await self.leaderboard_service.get(ContextKind.MULTI_CLASS, event_id, limit)

    async def get_season_leaderboard(self, year: int, limit: int = 100) -> list[LeaderboardEntry]:
        """Sum of event totals over the events of one year."""
        events = await self.result_repo.get_events_by_year(year)
        scores = await self.score_repo.get_event_scores([e.id for e in events])
        totals = aggregate_user_totals((event_total(s) for s in scores), str(year))
        entries = await self.leaderboard_service.rank(ContextKind.MULTI_CLASS, totals)
        return entries[:limit]

    async def get_all_time_leaderboard(self, limit: int = 100) -> list[LeaderboardEntry]:
        scores = await self.score_repo.get_event_scores()
        totals = aggregate_user_totals((event_total(s) for s in scores), "all_time")
        entries = await self.leaderboard_service.rank(ContextKind.MULTI_CLASS, totals)
        return entries[:limit]
