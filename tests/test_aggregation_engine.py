"""
Tests for the aggregation engine.

Tests the deterministic averaging of totals, dimensions and label-keyed
indicators over observation subsets.
"""

import statistics

import pytest

from aggregation import aggregate, average_indicators


class TestAggregate:
    """Test suite for aggregate()."""

    @pytest.fixture
    def subset(self, make_observation):
        return [
            make_observation(1, total=80.0, ambiente=90.0, interaccion=70.0, organizacion=60.0,
                             items=[("X", 80.0, 1), ("Y", 40.0, 2)]),
            make_observation(2, total=60.0, ambiente=50.0, interaccion=75.0, organizacion=65.0,
                             items=[("X", 60.0, 1)]),
            make_observation(3, total=71.0, ambiente=40.0, interaccion=20.0, organizacion=100.0,
                             items=[("Z", 10.0, 3), ("Y", 90.0, 2)]),
        ]

    def test_empty_subset_returns_none(self):
        assert aggregate([]) is None

    def test_total_is_unweighted_mean(self, subset):
        result = aggregate(subset)
        assert result.total_percentage == pytest.approx(statistics.mean([80.0, 60.0, 71.0]))

    def test_dimension_scores_are_means(self, subset):
        scores = aggregate(subset).dimension_scores
        assert scores.ambiente == pytest.approx(60.0)
        assert scores.interaccion == pytest.approx(55.0)
        assert scores.organizacion == pytest.approx(75.0)

    def test_observation_count(self, subset):
        assert aggregate(subset).observation_count == 3

    def test_single_observation_aggregate_matches_it(self, make_observation):
        observation = make_observation(1, total=64.0, ambiente=10.0, items=[("X", 33.0, 1)])
        result = aggregate([observation])
        assert result.total_percentage == 64.0
        assert result.dimension_scores.ambiente == 10.0
        assert [(i.label, i.value) for i in result.indicator_averages] == [("X", 33.0)]

    def test_indicator_averaged_only_where_present(self, make_observation):
        o1 = make_observation(1, items=[("X", 80.0, 1)])
        o2 = make_observation(2, items=[("X", 60.0, 1)])
        o3 = make_observation(3, items=[])

        averages = {i.label: i.value for i in aggregate([o1, o2, o3]).indicator_averages}
        assert averages["X"] == pytest.approx(70.0)

    def test_indicator_order_is_first_appearance(self, subset):
        labels = [i.label for i in aggregate(subset).indicator_averages]
        assert labels == ["X", "Y", "Z"]

    def test_indicator_values(self, subset):
        averages = {i.label: i.value for i in aggregate(subset).indicator_averages}
        assert averages == pytest.approx({"X": 70.0, "Y": 65.0, "Z": 10.0})

    def test_dimension_taken_from_first_occurrence(self, make_observation):
        o1 = make_observation(1, items=[("X", 50.0, 2)])
        o2 = make_observation(2, items=[("X", 70.0, 3)])
        item = aggregate([o1, o2]).indicator_averages[0]
        assert item.dimension_id == 2

    def test_grouping_is_by_label_not_dimension(self, make_observation):
        o1 = make_observation(1, items=[("Indicador", 20.0, None), ("Indicador", 40.0, 1)])
        averages = aggregate([o1]).indicator_averages
        assert len(averages) == 1
        assert averages[0].value == pytest.approx(30.0)

    def test_input_not_mutated(self, subset):
        before = [o.model_dump() for o in subset]
        aggregate(subset)
        assert [o.model_dump() for o in subset] == before


class TestAverageIndicators:
    """Test suite for average_indicators()."""

    def test_no_observations(self):
        assert average_indicators([]) == []

    def test_missing_value_counts_as_zero(self, make_observation):
        o1 = make_observation(1, items=[("X", None, 1)])
        o2 = make_observation(2, items=[("X", 50.0, 1)])
        assert average_indicators([o1, o2])[0].value == pytest.approx(25.0)
