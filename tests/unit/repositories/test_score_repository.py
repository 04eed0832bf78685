"""
Unit tests for ScoreRepository
"""

import pytest

from paddock_picks.models.result import ManufacturerResult
from paddock_picks.models.score import MatchStatus, TrackOrderScore, UserEventScore, UserTotal
from paddock_picks.repositories.score_repository import ScoreRepository


def event_score(user_id, total, event_id="daytona-24"):
    return UserEventScore(
        user_id=user_id, event_id=event_id,
        podium_points=total, total_points=total, predictions_made=1,
    )


class TestScoreRepository:
    """Test suite for idempotent score write-back."""

    @pytest.mark.asyncio
    async def test_rerun_overwrites_instead_of_accumulating(self, test_db):
        repo = ScoreRepository(test_db)

        await repo.replace_event_results("daytona-24", [], [event_score("user1", 10)])
        await repo.replace_event_results("daytona-24", [], [event_score("user1", 25)])

        scores = await repo.get_event_scores(["daytona-24"])
        assert len(scores) == 1
        assert scores[0].total_points == 25

    @pytest.mark.asyncio
    async def test_rerun_removes_stale_rows(self, test_db):
        repo = ScoreRepository(test_db)

        await repo.replace_event_results(
            "daytona-24", [], [event_score("user1", 10), event_score("user2", 5)]
        )
        written = await repo.replace_event_results("daytona-24", [], [event_score("user1", 10)])

        assert written == 1
        scores = await repo.get_event_scores(["daytona-24"])
        assert [s.user_id for s in scores] == ["user1"]

    @pytest.mark.asyncio
    async def test_rerun_keeps_other_contexts(self, test_db):
        repo = ScoreRepository(test_db)

        await repo.replace_event_results("sebring-12", [], [event_score("user1", 7, "sebring-12")])
        await repo.replace_event_results("daytona-24", [], [event_score("user1", 10)])
        await repo.replace_event_results("daytona-24", [], [])

        all_time = await repo.get_event_scores()
        assert [(s.event_id, s.total_points) for s in all_time] == [("sebring-12", 7)]

    @pytest.mark.asyncio
    async def test_manufacturer_results_are_replaced(self, test_db):
        repo = ScoreRepository(test_db)
        porsche = ManufacturerResult(
            event_id="daytona-24", class_id="gtp", manufacturer_id="porsche",
            avg_finish_position=2.5, final_rank=1,
        )

        await repo.replace_event_results("daytona-24", [porsche], [])
        await repo.replace_event_results(
            "daytona-24", [porsche.model_copy(update={"final_rank": 2})], []
        )

        results = await repo.get_manufacturer_results("daytona-24")
        assert len(results) == 1
        assert results[0].final_rank == 2

    @pytest.mark.asyncio
    async def test_track_order_scores_round_trip_status(self, test_db):
        repo = ScoreRepository(test_db)
        score = TrackOrderScore(
            user_id="user1", season_id="s12", predicted_week=1, predicted_track="daytona",
            actual_week=1, track_match_points=10, week_match_points=5, points=15,
            status=MatchStatus.PERFECT_MATCH,
        )
        total = UserTotal(
            user_id="user1", context_id="s12", total_points=15, contexts_participated=1,
            breakdown={"track_points": 10, "week_points": 5, "penalty_points": 0, "predictions_made": 1},
        )

        users = await repo.replace_track_order_results("s12", [score], [total])

        assert users == 1
        stored = await repo.get_track_order_scores("s12", "user1")
        assert stored == [score]

        user_doc = await test_db["track_order_user_scores"].find_one({"user_id": "user1"})
        assert user_doc["total_points"] == 15
        assert user_doc["penalty_points"] == 0
