"""Tests for the shared models and helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from models import (
    DIMENSION_ORDER,
    DataSnapshot,
    DateRange,
    Dimension,
    DimensionScores,
    Selection,
    ViewMode,
)
from models.utils import ensure_utc, round_percentage


class TestDimension:
    """Test suite for the Dimension enum."""

    def test_ids_and_names(self):
        assert [d.dimension_id for d in DIMENSION_ORDER] == [1, 2, 3]
        assert [d.display_name for d in DIMENSION_ORDER] == ["Ambiente", "Interacción", "Organización"]

    def test_from_id(self):
        assert Dimension.from_id(2) == Dimension.INTERACCION
        assert Dimension.from_id(9) is None
        assert Dimension.from_id(None) is None

    def test_scores_in_fixed_order(self):
        scores = DimensionScores(ambiente=1.0, interaccion=2.0, organizacion=3.0)
        assert scores.ordered() == [
            (Dimension.AMBIENTE, 1.0),
            (Dimension.INTERACCION, 2.0),
            (Dimension.ORGANIZACION, 3.0),
        ]
        assert scores.get(Dimension.ORGANIZACION) == 3.0


class TestDateRange:
    """Test suite for DateRange."""

    def test_open_range(self):
        assert DateRange().is_open
        assert not DateRange(date_from=date(2024, 1, 1)).is_open

    def test_single_day_range(self):
        day = date(2024, 1, 1)
        assert DateRange(date_from=day, date_to=day).date_to == day

    def test_reversed_bounds_rejected(self):
        with pytest.raises(ValueError):
            DateRange(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))


def test_selection_defaults():
    selection = Selection()
    assert selection.view_mode == ViewMode.SINGLE
    assert selection.observation_id is None
    assert selection.date_range.is_open


def test_empty_snapshot():
    snapshot = DataSnapshot()
    assert snapshot.is_empty
    assert snapshot.generation == 0


@pytest.mark.parametrize("value,expected", [
    (None, 0),
    (0.0, 0),
    (45.4, 45),
    (45.5, 46),
    (2.5, 3),
    (-2.5, -2),
    (-12.4, -12),
    (100.0, 100),
])
def test_round_percentage(value, expected):
    assert round_percentage(value) == expected


def test_ensure_utc():
    assert ensure_utc(None) is None

    naive = datetime(2024, 5, 1, 10, 0)
    assert ensure_utc(naive) == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    santiago = datetime(2024, 5, 1, 6, 0, tzinfo=timezone(timedelta(hours=-4)))
    converted = ensure_utc(santiago)
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 10
