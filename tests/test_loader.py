"""
Tests for the concurrent bulk loader.

The query layer is replaced with AsyncMock so each source can succeed or
fail independently.
"""

from unittest.mock import AsyncMock

import pytest

from database import ObservationQueries
from models import TEACHER_PLACEHOLDER
from sync import ObservationLoader, ObservationLoadError


@pytest.fixture
def mock_queries(raw_records):
    queries = AsyncMock(spec=ObservationQueries)
    queries.get_teachers.return_value = raw_records["teachers"]
    queries.get_observation_headers.return_value = raw_records["observations"]
    queries.get_dimension_scores.return_value = raw_records["dimension_scores"]
    queries.get_indicator_definitions.return_value = raw_records["indicators"]
    queries.get_responses.return_value = raw_records["responses"]
    queries.get_evolution.return_value = raw_records["evolution"]
    return queries


class TestObservationLoader:
    """Test suite for ObservationLoader."""

    @pytest.mark.asyncio
    async def test_successful_load_joins_all_sources(self, mock_queries):
        result = await ObservationLoader(mock_queries).load()

        assert [o.observation_id for o in result.observations] == [10, 11, 12]
        assert result.observations[0].teacher_name == "Ana Pérez"
        assert len(result.evolution) == 2
        mock_queries.get_teachers.assert_awaited_once()
        mock_queries.get_responses.assert_awaited_once()
        mock_queries.get_latest_response_timestamp.assert_not_called()

    @pytest.mark.asyncio
    async def test_any_failure_aborts_by_default(self, mock_queries):
        mock_queries.get_evolution.side_effect = TimeoutError("statement timeout")

        with pytest.raises(ObservationLoadError) as exc_info:
            await ObservationLoader(mock_queries).load()

        assert exc_info.value.failed_sources == ["evolution"]
        assert "statement timeout" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_multiple_failures_reported_together(self, mock_queries):
        mock_queries.get_teachers.side_effect = ConnectionError("reset")
        mock_queries.get_responses.side_effect = ConnectionError("reset")

        with pytest.raises(ObservationLoadError) as exc_info:
            await ObservationLoader(mock_queries).load()

        assert exc_info.value.failed_sources == ["responses", "teachers"]

    @pytest.mark.asyncio
    async def test_tolerant_load_degrades_failed_sources(self, mock_queries):
        mock_queries.get_teachers.side_effect = ConnectionError("reset")
        mock_queries.get_responses.side_effect = ConnectionError("reset")

        result = await ObservationLoader(mock_queries, tolerate_partial_failures=True).load()

        assert len(result.observations) == 3
        assert all(o.teacher_name == TEACHER_PLACEHOLDER for o in result.observations)
        assert all(o.indicator_items == () for o in result.observations)
        assert result.observations[0].dimension_scores.ambiente == 85.0

    @pytest.mark.asyncio
    async def test_headers_always_required(self, mock_queries):
        mock_queries.get_observation_headers.side_effect = ConnectionError("reset")

        with pytest.raises(ObservationLoadError) as exc_info:
            await ObservationLoader(mock_queries, tolerate_partial_failures=True).load()

        assert exc_info.value.failed_sources == ["observations"]

    @pytest.mark.asyncio
    async def test_empty_store(self, mock_queries):
        for method in (
            mock_queries.get_teachers,
            mock_queries.get_observation_headers,
            mock_queries.get_dimension_scores,
            mock_queries.get_indicator_definitions,
            mock_queries.get_responses,
            mock_queries.get_evolution,
        ):
            method.return_value = []

        result = await ObservationLoader(mock_queries).load()

        assert result.observations == []
        assert result.evolution == []
