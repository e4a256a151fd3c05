"""
Tests for the top-performance ranking and the date-window filter.
"""

from datetime import date

import pytest

from aggregation import apply_date_range, filter_by_date, rank_observations
from models import DateRange


class TestRanking:
    """Test suite for rank_observations."""

    def test_descending_by_total(self, make_observation):
        observations = [make_observation(i, total=t) for i, t in enumerate([40.0, 90.0, 70.0])]
        assert [o.total_percentage for o in rank_observations(observations)] == [90.0, 70.0, 40.0]

    def test_capped_at_five(self, make_observation):
        observations = [make_observation(i, total=float(i)) for i in range(8)]
        ranked = rank_observations(observations)
        assert len(ranked) == 5
        assert [o.observation_id for o in ranked] == [7, 6, 5, 4, 3]

    def test_exactly_five(self, make_observation):
        observations = [make_observation(i, total=float(i)) for i in range(5)]
        assert len(rank_observations(observations)) == 5

    def test_fewer_than_five(self, make_observation):
        observations = [make_observation(i, total=50.0) for i in range(3)]
        assert len(rank_observations(observations)) == 3

    def test_empty(self):
        assert rank_observations([]) == []

    def test_ties_keep_original_order(self, make_observation):
        observations = [
            make_observation("a", total=80.0),
            make_observation("b", total=95.0),
            make_observation("c", total=80.0),
            make_observation("d", total=80.0),
        ]
        assert [o.observation_id for o in rank_observations(observations)] == ["b", "a", "c", "d"]

    def test_custom_limit(self, make_observation):
        observations = [make_observation(i, total=float(i)) for i in range(4)]
        assert [o.observation_id for o in rank_observations(observations, limit=2)] == [3, 2]

    def test_input_untouched(self, make_observation):
        observations = [make_observation(i, total=float(i)) for i in range(3)]
        rank_observations(observations)
        assert [o.observation_id for o in observations] == [0, 1, 2]


class TestDateFilter:
    """Test suite for filter_by_date and apply_date_range."""

    @pytest.fixture
    def observations(self, make_observation):
        return [
            make_observation(1, observed_on=date(2024, 1, 10)),
            make_observation(2, observed_on=date(2024, 2, 15)),
            make_observation(3, observed_on=date(2024, 3, 20)),
            make_observation(4, observed_on=None),
        ]

    def test_no_bounds_is_identity(self, observations):
        assert filter_by_date(observations) == observations

    def test_bounds_are_inclusive(self, observations):
        kept = filter_by_date(observations, date(2024, 1, 10), date(2024, 2, 15))
        assert [o.observation_id for o in kept] == [1, 2]

    def test_open_lower_bound(self, observations):
        kept = filter_by_date(observations, date_to=date(2024, 2, 1))
        assert [o.observation_id for o in kept] == [1]

    def test_open_upper_bound(self, observations):
        kept = filter_by_date(observations, date_from=date(2024, 2, 1))
        assert [o.observation_id for o in kept] == [2, 3]

    def test_idempotent(self, observations):
        once = filter_by_date(observations, date(2024, 1, 1), date(2024, 3, 1))
        twice = filter_by_date(once, date(2024, 1, 1), date(2024, 3, 1))
        assert twice == once

    def test_empty_window(self, observations):
        assert filter_by_date(observations, date(2025, 1, 1), date(2025, 12, 31)) == []

    def test_apply_date_range(self, observations):
        kept = apply_date_range(observations, DateRange(date_from=date(2024, 3, 1)))
        assert [o.observation_id for o in kept] == [3]
        assert apply_date_range(observations, None) == observations

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError, match="date_from must not be after date_to"):
            DateRange(date_from=date(2024, 5, 1), date_to=date(2024, 4, 1))
