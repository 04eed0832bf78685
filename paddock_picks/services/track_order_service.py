"""
TrackOrderService - Scores Nostradouglas predictions for a season and
writes the results back.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.core.config import Settings, get_settings
from paddock_picks.models.leaderboard import ContextKind
from paddock_picks.models.prediction import TrackOrderPrediction
from paddock_picks.models.result import Season
from paddock_picks.models.score import TrackOrderScore
from paddock_picks.models.scoring_rule import TrackOrderRules
from paddock_picks.repositories.prediction_repository import PredictionRepository
from paddock_picks.repositories.score_repository import ScoreRepository
from paddock_picks.repositories.season_repository import SeasonRepository
from paddock_picks.scoring.track_order import (
    required_track_weeks,
    score_track_order,
    summarize_track_order,
)
from paddock_picks.services.leaderboard_service import LeaderboardService

logger = logging.getLogger(__name__)


class SeasonNotFoundError(Exception):
    """Raised when season is not found."""
    pass


def _as_utc(value: datetime) -> datetime:
    # MongoDB devuelve datetimes naive en UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TrackOrderService:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Optional[Settings] = None):
        self.season_repo = SeasonRepository(db)
        self.prediction_repo = PredictionRepository(db)
        self.score_repo = ScoreRepository(db)
        self.leaderboard_service = LeaderboardService(db)
        self.rules = TrackOrderRules.from_settings(settings or get_settings())

    def required_weeks_by_user(
        self,
        season: Season,
        predictions: list[TrackOrderPrediction]
    ) -> dict[str, list[int]]:
        """
        Weeks each user owes. A user whose first prediction came after the
        week-1 deadline, with no week-1 prediction saved, owes one week less.
        """
        by_user: dict[str, list[TrackOrderPrediction]] = {}
        for prediction in predictions:
            by_user.setdefault(prediction.user_id, []).append(prediction)

        deadline = season.week_1_prediction_deadline
        required = {}
        for user_id, user_predictions in by_user.items():
            has_week_1 = any(p.position == 1 for p in user_predictions)
            created = [_as_utc(p.created_at) for p in user_predictions if p.created_at]
            deadline_passed = bool(
                deadline and created and min(created) > _as_utc(deadline)
            )
            required[user_id] = required_track_weeks(self.rules, deadline_passed, has_week_1)
        return required

    async def score_season(self, season_id: str) -> dict:
        """
        Score every track-order prediction of a season and publish the leaderboard.

        Raises:
            SeasonNotFoundError: unknown season
            MissingPrerequisiteError: the season has no schedule yet
        """
        season = await self.season_repo.get_by_id(season_id)
        if not season:
            raise SeasonNotFoundError(f"Season {season_id} not found")

        schedule = await self.season_repo.get_schedule(season_id)
        predictions = await self.prediction_repo.get_track_predictions(season_id)

        run = score_track_order(
            predictions,
            schedule,
            self.rules,
            self.required_weeks_by_user(season, predictions)
        )
        totals = summarize_track_order(run.scores)

        users_scored = await self.score_repo.replace_track_order_results(season_id, run.scores, totals)
        await self.leaderboard_service.publish(ContextKind.TRACK_ORDER, season_id, totals)

        logger.info(
            f"✅ Nostradouglas season {season_id}: {len(run.scores)} scores, "
            f"{users_scored} users, {len(run.rejected)} rejected"
        )
        return {
            "predictions_scored": len(run.scores),
            "users_scored": users_scored,
            "predictions_rejected": len(run.rejected),
        }

    async def get_user_results(self, season_id: str, user_id: str) -> list[TrackOrderScore]:
        """Per-prediction results of one user (from the last scoring run)."""
        return await self.score_repo.get_track_order_scores(season_id, user_id)
