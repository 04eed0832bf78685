"""
WinnerPickService - Community Predictions scoring, history and leaderboard.

The season leaderboard is compared with the standings as they were one week
earlier (latest scored week - 1), recomputed from the same stored data.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.core.config import Settings, get_settings
from paddock_picks.models.leaderboard import ContextKind, LeaderboardEntry
from paddock_picks.models.prediction import WinnerPick
from paddock_picks.models.result import RaceResult
from paddock_picks.models.scoring_rule import WinnerPickRules
from paddock_picks.models.score import UserTotal
from paddock_picks.repositories.prediction_repository import PredictionRepository
from paddock_picks.repositories.result_repository import ResultRepository
from paddock_picks.repositories.score_repository import ScoreRepository
from paddock_picks.scoring.errors import MissingPrerequisiteError
from paddock_picks.scoring.leaderboard import build_leaderboard, direction_for
from paddock_picks.scoring.winner_picks import (
    score_winner_picks,
    summarize_winner_picks,
    weekly_scores,
)
from paddock_picks.services.leaderboard_service import LeaderboardService

logger = logging.getLogger(__name__)


class WinnerPickService:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Optional[Settings] = None):
        self.prediction_repo = PredictionRepository(db)
        self.result_repo = ResultRepository(db)
        self.score_repo = ScoreRepository(db)
        self.leaderboard_service = LeaderboardService(db)
        self.rules = WinnerPickRules.from_settings(settings or get_settings())

    def _totals(self, picks: list[WinnerPick], results: list[RaceResult]) -> list[UserTotal]:
        run = score_winner_picks(picks, results, rules=self.rules)
        return summarize_winner_picks(run.scores)

    async def score_season(self, season_id: str) -> dict:
        """
        Score all picks of a season and store per-pick scores and user totals.

        Raises:
            MissingPrerequisiteError: no results recorded for the season
        """
        results = await self.result_repo.get_race_results(season_id)
        picks = await self.prediction_repo.get_winner_picks(season_id)

        run = score_winner_picks(picks, results, rules=self.rules)
        totals = summarize_winner_picks(run.scores)
        users_scored = await self.score_repo.replace_winner_pick_results(season_id, run.scores, totals)

        logger.info(
            f"✅ Community predictions season {season_id}: {len(run.scores)} scores, "
            f"{users_scored} users, {len(run.rejected)} rejected"
        )
        return {
            "predictions_scored": len(run.scores),
            "users_scored": users_scored,
            "predictions_rejected": len(run.rejected),
        }

    async def get_leaderboard(self, season_id: str, limit: int = 100) -> list[LeaderboardEntry]:
        """
        Season leaderboard with position changes against the previous week.

        Raises:
            MissingPrerequisiteError: no results recorded for the season
        """
        results = await self.result_repo.get_race_results(season_id)
        if not results:
            raise MissingPrerequisiteError(f"No race results for season {season_id}")
        picks = await self.prediction_repo.get_winner_picks(season_id)

        current = self._totals(picks, results)

        previous_week = max(r.week for r in results) - 1
        prior: list[LeaderboardEntry] = []
        previous_results = [r for r in results if r.week <= previous_week]
        if previous_week >= 1 and previous_results:
            previous_picks = [p for p in picks if p.week <= previous_week]
            prior = build_leaderboard(
                self._totals(previous_picks, previous_results),
                direction_for(ContextKind.WINNER_PICK)
            )

        entries = await self.leaderboard_service.rank(ContextKind.WINNER_PICK, current, prior)
        return entries[:limit]

    async def get_user_history(self, season_id: str, user_id: str) -> dict:
        """
        A user's picks with results, week-by-week totals and season total.

        Only weeks with results count; pending picks are listed with no points.
        """
        results = await self.result_repo.get_race_results(season_id)
        picks = await self.prediction_repo.get_winner_picks(season_id)
        user_picks = [p for p in picks if p.user_id == user_id]

        if not results:
            return {"scores": [], "weekly_scores": [], "total_points": 0}

        run = score_winner_picks(user_picks, results, rules=self.rules)
        weekly = weekly_scores(run.scores)

        return {
            "scores": run.scores,
            "weekly_scores": weekly,
            "total_points": sum(w.total_points for w in weekly),
        }
