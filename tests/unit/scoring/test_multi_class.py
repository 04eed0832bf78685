"""
Unit tests for IMSA multi-class event scoring
"""

import pytest

from paddock_picks.models.prediction import ManufacturerPrediction, PodiumPrediction
from paddock_picks.models.result import EntryResult, ImsaClass
from paddock_picks.models.scoring_rule import ScoringRule
from paddock_picks.scoring.errors import MissingPrerequisiteError
from paddock_picks.scoring.multi_class import (
    derive_manufacturer_results,
    manufacturer_result_type,
    podium_result_type,
    required_rule_combinations,
    score_multi_class_event,
)
from paddock_picks.scoring.rules import ScoringRuleTable


@pytest.fixture
def rule_table(sample_scoring_rules_data):
    return ScoringRuleTable(ScoringRule(**r) for r in sample_scoring_rules_data)


@pytest.fixture
def entry_results(sample_entry_results_data):
    return [EntryResult(**r) for r in sample_entry_results_data]


@pytest.fixture
def classes(sample_classes_data):
    return [ImsaClass(**c) for c in sample_classes_data]


def podium(position, entry_id, user_id="user1", class_id="gtp"):
    return PodiumPrediction(
        user_id=user_id, event_id="daytona-24", class_id=class_id,
        position=position, entry_id=entry_id,
    )


def manufacturer(rank, manufacturer_id, user_id="user1", class_id="gtp"):
    return ManufacturerPrediction(
        user_id=user_id, event_id="daytona-24", class_id=class_id,
        manufacturer_id=manufacturer_id, predicted_rank=rank,
    )


class TestPodiumResultType:

    def test_exact(self):
        assert podium_result_type(2, 2) == "exact"

    def test_on_podium(self):
        assert podium_result_type(1, 3) == "on_podium"

    def test_top_5(self):
        assert podium_result_type(1, 5) == "top_5"

    def test_outside_top_5_earns_nothing(self):
        assert podium_result_type(1, 6) is None

    def test_no_finish_earns_nothing(self):
        assert podium_result_type(1, None) is None


class TestManufacturerResultType:

    @pytest.mark.parametrize("predicted, actual, expected", [
        (1, 1, "exact"),
        (1, 2, "off_1"),
        (3, 1, "off_2"),
        (1, 4, None),
        (2, None, None),
    ])
    def test_distance(self, predicted, actual, expected):
        assert manufacturer_result_type(predicted, actual) == expected


class TestRequiredRuleCombinations:

    def test_manufacturer_rules_only_for_flagged_classes(self, classes):
        with_manufacturers = required_rule_combinations(classes)
        podium_only = required_rule_combinations([c for c in classes if not c.has_manufacturer_prediction])

        assert len(podium_only) == 9
        assert len(with_manufacturers) == 12
        assert ("manufacturer", None, "off_2") in with_manufacturers

    def test_fixture_rule_table_is_complete(self, classes, rule_table):
        assert rule_table.missing_rules(required_rule_combinations(classes)) == []


class TestDeriveManufacturerResults:

    def test_ranks_by_average_finish_with_first_seen_tie_break(self, entry_results, classes):
        results = derive_manufacturer_results(entry_results, classes)

        ranking = [(m.manufacturer_id, m.avg_finish_position, m.final_rank) for m in results]
        # porsche and cadillac both average 2.5; porsche appears first
        assert ranking == [
            ("porsche", 2.5, 1),
            ("cadillac", 2.5, 2),
            ("bmw", 5.0, 3),
        ]

    def test_tie_break_follows_input_order(self, entry_results, classes):
        cadillac_first = sorted(entry_results, key=lambda r: r.entry_id != "gtp-31")
        results = derive_manufacturer_results(cadillac_first, classes)

        assert [m.manufacturer_id for m in results][:2] == ["cadillac", "porsche"]

    def test_unflagged_classes_are_not_ranked(self, entry_results, classes):
        results = derive_manufacturer_results(entry_results, classes)

        assert all(m.class_id == "gtp" for m in results)

    def test_manufacturer_without_finishers_is_unranked(self, classes):
        results = derive_manufacturer_results(
            [EntryResult(event_id="daytona-24", entry_id="gtp-24", class_id="gtp",
                         manufacturer_id="bmw", finish_position=None, status="DNF")],
            classes
        )

        assert results == []


class TestScoreMultiClassEvent:
    """Test suite for multi-class event scoring."""

    def test_on_podium_pick(self, entry_results, classes, rule_table):
        """P1 pick finished 2nd scores the P1 on_podium rule."""
        scores = score_multi_class_event(
            [podium(1, "gtp-31")], [], entry_results, classes, rule_table
        )

        podium_score = scores.podium_scores[0]
        assert podium_score.actual_finish == 2
        assert podium_score.result_type == "on_podium"
        assert podium_score.points == 10

    def test_position_specific_exact_points(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [podium(1, "gtp-7"), podium(2, "gtp-31"), podium(3, "gtp-01")],
            [], entry_results, classes, rule_table
        )

        assert [s.points for s in scores.podium_scores] == [25, 20, 15]
        assert scores.user_scores[0].podium_points == 60

    def test_dnf_entry_scores_zero(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [podium(1, "gtp-24")], [], entry_results, classes, rule_table
        )

        assert scores.podium_scores[0].points == 0
        assert scores.podium_scores[0].result_type is None

    def test_manufacturer_points(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [],
            [manufacturer(1, "porsche"), manufacturer(3, "cadillac"), manufacturer(1, "bmw", user_id="user2")],
            entry_results, classes, rule_table
        )

        by_user = {s.user_id: s for s in scores.user_scores}
        assert by_user["user1"].manufacturer_points == 10 + 5
        assert by_user["user2"].manufacturer_points == 2

    def test_totals_and_predictions_made(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [podium(1, "gtp-7"), podium(2, "lmp2-52", class_id="lmp2")],
            [manufacturer(1, "porsche")],
            entry_results, classes, rule_table
        )

        user = scores.user_scores[0]
        assert user.predictions_made == 3
        # lmp2-52 finished 1st in its class: on_podium for a P2 pick
        assert user.podium_points == 25 + 10
        assert user.total_points == user.podium_points + user.manufacturer_points == 45

    def test_malformed_predictions_are_rejected(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [podium(1, "gtp-7"), podium(1, "gtp-31"), podium(4, "gtp-6")],
            [manufacturer(1, "porsche"), manufacturer(2, "porsche")],
            entry_results, classes, rule_table
        )

        assert len(scores.rejected) == 3
        assert len(scores.podium_scores) == 1
        assert len(scores.manufacturer_scores) == 1
        assert scores.user_scores[0].predictions_made == 2

    def test_duplicate_manufacturer_rank_is_rejected(self, entry_results, classes, rule_table):
        scores = score_multi_class_event(
            [],
            [manufacturer(2, "porsche"), manufacturer(2, "cadillac"), manufacturer(2, "bmw")],
            entry_results, classes, rule_table
        )

        assert len(scores.rejected) == 2
        assert all(r.reason == "Duplicate manufacturer rank" for r in scores.rejected)
        assert [s.manufacturer_id for s in scores.manufacturer_scores] == ["porsche"]
        # porsche ranked 1st, predicted 2nd
        assert scores.user_scores[0].manufacturer_points == 5

    def test_missing_rule_scores_zero(self, entry_results, classes):
        scores = score_multi_class_event(
            [podium(1, "gtp-7")], [], entry_results, classes, ScoringRuleTable([])
        )

        assert scores.podium_scores[0].result_type == "exact"
        assert scores.podium_scores[0].points == 0

    def test_rescoring_with_corrected_results_replaces_totals(self, entry_results, classes, rule_table):
        predictions = [podium(1, "gtp-31")]
        first = score_multi_class_event(predictions, [], entry_results, classes, rule_table)

        corrected = [
            r.model_copy(update={"finish_position": 1}) if r.entry_id == "gtp-31"
            else r.model_copy(update={"finish_position": 2}) if r.entry_id == "gtp-7"
            else r
            for r in entry_results
        ]
        second = score_multi_class_event(predictions, [], corrected, classes, rule_table)

        assert first.user_scores[0].total_points == 10
        assert second.user_scores[0].total_points == 25

    def test_no_results_raises(self, classes, rule_table):
        with pytest.raises(MissingPrerequisiteError):
            score_multi_class_event([podium(1, "gtp-7")], [], [], classes, rule_table)
