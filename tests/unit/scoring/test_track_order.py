"""
Unit tests for the Nostradouglas track-order scorer
"""

import pytest

from paddock_picks.models.prediction import TrackOrderPrediction
from paddock_picks.models.result import ScheduleEntry
from paddock_picks.models.score import MatchStatus
from paddock_picks.models.scoring_rule import TrackOrderRules
from paddock_picks.scoring.errors import MissingPrerequisiteError
from paddock_picks.scoring.track_order import (
    required_track_weeks,
    score_track_order,
    summarize_track_order,
)


def schedule(*tracks):
    return [
        ScheduleEntry(id=f"w{week}", season_id="s1", week=week, track_id=track)
        for week, track in enumerate(tracks, start=1)
    ]


def prediction(week, track, user_id="user1"):
    return TrackOrderPrediction(user_id=user_id, season_id="s1", position=week, track_id=track)


class TestTrackOrderScorer:
    """Test suite for track-order scoring."""

    def test_perfect_match(self, track_rules):
        """Predicted track runs in the predicted week = 15."""
        run = score_track_order([prediction(1, "Daytona")], schedule("Daytona", "Sebring"), track_rules)

        score = run.scores[0]
        assert score.status == MatchStatus.PERFECT_MATCH
        assert score.points == 15
        assert score.track_match_points == 10
        assert score.week_match_points == 5
        assert score.actual_week == 1

    def test_track_match_only(self, track_rules):
        """Predicted track runs in another week = 10."""
        run = score_track_order([prediction(2, "Daytona")], schedule("Daytona", "Sebring"), track_rules)

        score = run.scores[0]
        assert score.status == MatchStatus.TRACK_MATCH_ONLY
        assert score.points == 10
        assert score.week_match_points == 0
        assert score.actual_week == 1

    def test_no_match(self, track_rules):
        run = score_track_order([prediction(1, "Monza")], schedule("Daytona", "Sebring"), track_rules)

        score = run.scores[0]
        assert score.status == MatchStatus.NO_MATCH
        assert score.points == 0
        assert score.actual_week is None

    def test_perfect_equals_track_only_plus_week_points(self, track_rules):
        actual = schedule("Daytona", "Sebring")
        perfect = score_track_order([prediction(1, "Daytona")], actual, track_rules).scores[0]
        track_only = score_track_order([prediction(2, "Daytona")], actual, track_rules).scores[0]
        no_match = score_track_order([prediction(1, "Spa")], actual, track_rules).scores[0]

        assert perfect.points == track_only.points + track_rules.week_match_points
        assert track_only.points >= no_match.points == 0
        assert perfect.points < track_rules.missing_prediction_penalty

    def test_missing_required_weeks_are_penalised(self, track_rules):
        actual = schedule("Daytona", "Sebring", "Spa")
        run = score_track_order(
            [prediction(1, "Daytona")],
            actual,
            track_rules,
            {"user1": [1, 2, 3]}
        )

        missing = [s for s in run.scores if s.status == MatchStatus.MISSING]
        assert [s.predicted_week for s in missing] == [2, 3]
        assert all(s.points == 20 for s in missing)
        assert all(s.predicted_track is None for s in missing)

    def test_user_without_predictions_gets_full_penalty(self, track_rules):
        run = score_track_order([], schedule("Daytona"), track_rules, {"ghost": [1, 2]})

        assert len(run.scores) == 2
        assert sum(s.points for s in run.scores) == 40

    def test_duplicate_week_is_rejected_and_run_continues(self, track_rules):
        run = score_track_order(
            [prediction(1, "Daytona"), prediction(1, "Sebring"), prediction(2, "Sebring")],
            schedule("Daytona", "Sebring"),
            track_rules
        )

        assert len(run.scores) == 2
        assert len(run.rejected) == 1
        assert run.rejected[0].key == "week:1"
        assert run.scores[0].predicted_track == "Daytona"

    def test_empty_schedule_raises(self, track_rules):
        with pytest.raises(MissingPrerequisiteError):
            score_track_order([prediction(1, "Daytona")], [], track_rules)

    def test_custom_point_values(self):
        rules = TrackOrderRules(track_match_points=3, week_match_points=2, missing_prediction_penalty=9)
        run = score_track_order([prediction(1, "Daytona")], schedule("Daytona"), rules)
        assert run.scores[0].points == 5


class TestRequiredTrackWeeks:

    def test_default_is_eight_weeks(self, track_rules):
        assert required_track_weeks(track_rules, False, False) == [1, 2, 3, 4, 5, 6, 7, 8]

    def test_after_week_1_deadline_is_seven_weeks_from_week_2(self, track_rules):
        assert required_track_weeks(track_rules, True, False) == [2, 3, 4, 5, 6, 7, 8]

    def test_saved_week_1_prediction_keeps_eight_weeks(self, track_rules):
        assert len(required_track_weeks(track_rules, True, True)) == 8


class TestSummarizeTrackOrder:

    def test_totals_per_user(self, track_rules):
        actual = schedule("Daytona", "Sebring", "Spa")
        run = score_track_order(
            [
                prediction(1, "Daytona", "user1"),
                prediction(2, "Spa", "user1"),
                prediction(1, "Monza", "user2"),
            ],
            actual,
            track_rules,
            {"user1": [1, 2, 3], "user2": [1, 2, 3]}
        )

        totals = {t.user_id: t for t in summarize_track_order(run.scores)}

        assert totals["user1"].total_points == 15 + 10 + 20
        assert totals["user1"].breakdown["track_points"] == 20
        assert totals["user1"].breakdown["week_points"] == 5
        assert totals["user1"].breakdown["penalty_points"] == 20
        assert totals["user1"].breakdown["predictions_made"] == 2

        assert totals["user2"].total_points == 0 + 20 + 20
        assert totals["user2"].breakdown["predictions_made"] == 1
