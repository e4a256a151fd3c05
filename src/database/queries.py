"""
Read-only data access for the observation dashboard.

One query per logical source plus the cheap freshness probe. Column names
from the deployed Spanish schema are aliased to the model field names in SQL
so the rest of the system only sees the record models.
"""

from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel, ValidationError

from models import (
    Teacher,
    DimensionScoreRow,
    IndicatorDefinition,
    IndicatorResponse,
    ObservationHeader,
    EvolutionPoint,
)
from .connection import DatabasePool, get_database_pool


logger = logging.getLogger(__name__)

RecordModel = TypeVar("RecordModel", bound=BaseModel)


TEACHERS_QUERY = """
SELECT id, nombre AS name
FROM public.docentes
"""

DIMENSION_SCORES_QUERY = """
SELECT
    observacion_id AS observation_id,
    dimension_codigo AS dimension_code,
    porcentaje AS percentage
FROM public.v_resultados_dimension
"""

INDICATORS_QUERY = """
SELECT id, columna_excel AS label, dimension_id
FROM public.indicadores
"""

RESPONSES_QUERY = """
SELECT
    observacion_id AS observation_id,
    indicador_id AS indicator_id,
    valor AS value,
    created_at AS "timestamp"
FROM public.respuestas
"""

OBSERVATION_HEADERS_QUERY = """
SELECT
    observacion_id AS observation_id,
    docente_id AS teacher_id,
    asignatura AS subject,
    curso AS course,
    fecha AS "date",
    observador AS observer_name,
    porcentaje_total AS total_percentage
FROM public.v_resultados_dimensiones
"""

EVOLUTION_QUERY = """
SELECT
    docente_id AS teacher_id,
    fecha AS "date",
    porcentaje_promedio AS average_percentage
FROM public.v_evolucion_docente
"""

LATEST_RESPONSE_QUERY = """
SELECT created_at AS "timestamp"
FROM public.respuestas
WHERE created_at IS NOT NULL
ORDER BY created_at DESC
LIMIT 1
"""


def rows_to_models(rows: List[Any], model: Type[RecordModel], source: str) -> List[RecordModel]:
    """
    Convert database rows into record models, skipping rows that cannot be parsed.

    A malformed row is logged and dropped instead of failing the whole source.
    """
    records: List[RecordModel] = []
    skipped = 0

    for row in rows or []:
        try:
            records.append(model.model_validate(dict(row)))
        except (ValidationError, TypeError, ValueError) as e:
            skipped += 1
            logger.warning(f"Skipping malformed {source} row: {e}")

    if skipped:
        logger.warning(f"Skipped {skipped} of {len(rows)} {source} rows")

    return records


class ObservationQueries:
    """Data access layer for the six dashboard sources and the freshness probe."""

    def __init__(self, pool: Optional[DatabasePool] = None):
        self._pool = pool

    async def _get_pool(self) -> DatabasePool:
        if self._pool is None:
            self._pool = await get_database_pool()
        return self._pool

    async def _fetch(self, query: str, model: Type[RecordModel], source: str) -> List[RecordModel]:
        pool = await self._get_pool()
        rows = await pool.execute_query(query)
        logger.debug(f"Fetched {len(rows)} rows from {source}")
        return rows_to_models(rows, model, source)

    async def get_teachers(self) -> List[Teacher]:
        """Teacher reference rows."""
        return await self._fetch(TEACHERS_QUERY, Teacher, "teachers")

    async def get_dimension_scores(self) -> List[DimensionScoreRow]:
        """Per-observation dimension percentages."""
        return await self._fetch(DIMENSION_SCORES_QUERY, DimensionScoreRow, "dimension_scores")

    async def get_indicator_definitions(self) -> List[IndicatorDefinition]:
        """Indicator catalog."""
        return await self._fetch(INDICATORS_QUERY, IndicatorDefinition, "indicators")

    async def get_responses(self) -> List[IndicatorResponse]:
        """Raw indicator responses on the 0-1 scale."""
        return await self._fetch(RESPONSES_QUERY, IndicatorResponse, "responses")

    async def get_observation_headers(self) -> List[ObservationHeader]:
        """One header row per observation."""
        return await self._fetch(OBSERVATION_HEADERS_QUERY, ObservationHeader, "observations")

    async def get_evolution(self) -> List[EvolutionPoint]:
        """Per-teacher average percentage over time."""
        return await self._fetch(EVOLUTION_QUERY, EvolutionPoint, "evolution")

    async def get_latest_response_timestamp(self) -> Optional[datetime]:
        """
        Freshness probe: the most recent response timestamp, or None when
        there are no responses.
        """
        pool = await self._get_pool()
        row = await pool.execute_query_one(LATEST_RESPONSE_QUERY)
        if not row:
            return None
        return row['timestamp']
