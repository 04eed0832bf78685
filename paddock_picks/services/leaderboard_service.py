"""
LeaderboardService - Ranks user totals and keeps the last published snapshot.

The snapshot is only used as the explicit prior input of the next build, so
position changes are always relative to the previous published run.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from paddock_picks.models.leaderboard import ContextKind, LeaderboardEntry, LeaderboardSnapshot
from paddock_picks.models.score import UserTotal
from paddock_picks.repositories.leaderboard_repository import LeaderboardRepository
from paddock_picks.repositories.user_repository import UserRepository
from paddock_picks.scoring.leaderboard import build_leaderboard, direction_for

logger = logging.getLogger(__name__)


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class LeaderboardNotFoundError(LeaderboardServiceError):
    """Raised when leaderboard data is not found."""
    pass


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.leaderboard_repo = LeaderboardRepository(db)
        self.user_repo = UserRepository(db)

    async def _with_display_names(self, totals: Sequence[UserTotal]) -> list[UserTotal]:
        names = await self.user_repo.get_display_names(t.user_id for t in totals)
        return [
            t.model_copy(update={"display_name": names.get(t.user_id, t.display_name or "Anonymous")})
            for t in totals
        ]

    async def rank(
        self,
        kind: ContextKind,
        totals: Sequence[UserTotal],
        prior: Optional[Sequence[LeaderboardEntry]] = None
    ) -> list[LeaderboardEntry]:
        """Build a leaderboard without persisting it."""
        named = await self._with_display_names(totals)
        return build_leaderboard(named, direction_for(kind), prior)

    async def publish(
        self,
        kind: ContextKind,
        context_id: str,
        totals: Sequence[UserTotal]
    ) -> list[LeaderboardEntry]:
        """
        Build the leaderboard against the previously published one and
        replace the stored snapshot with it.
        """
        previous = await self.leaderboard_repo.get_snapshot(kind, context_id)
        prior = previous.entries if previous else None

        entries = await self.rank(kind, totals, prior)

        await self.leaderboard_repo.save_snapshot(LeaderboardSnapshot(
            kind=kind,
            context_id=context_id,
            entries=entries,
            computed_at=datetime.now(timezone.utc),
        ))
        logger.info(f"🏆 Published {kind.value} leaderboard for {context_id}: {len(entries)} entries")
        return entries

    async def get(self, kind: ContextKind, context_id: str, limit: int = 100) -> list[LeaderboardEntry]:
        """Get the last published leaderboard of a context."""
        snapshot = await self.leaderboard_repo.get_snapshot(kind, context_id)
        if snapshot is None:
            raise LeaderboardNotFoundError(f"No {kind.value} leaderboard for {context_id}")
        return snapshot.entries[:limit]
