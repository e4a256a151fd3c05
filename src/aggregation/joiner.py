"""
Record joiner: turns the independently fetched source rows into Observation
entities.

All default substitution for missing references and empty fields happens
here, so consumers never need to special-case a partial record.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from models import (
    DIMENSION_ORDER,
    INDICATOR_PLACEHOLDER,
    TEACHER_PLACEHOLDER,
    Dimension,
    DimensionScoreRow,
    DimensionScores,
    EvolutionPoint,
    IndicatorDefinition,
    IndicatorItem,
    IndicatorResponse,
    Observation,
    ObservationHeader,
    RecordId,
    Teacher,
)


logger = logging.getLogger(__name__)


class JoinResult(BaseModel):
    """Output of one join pass."""
    observations: List[Observation] = []
    evolution: List[EvolutionPoint] = []
    unresolved_teachers: int = 0
    unresolved_indicators: int = 0


def _teacher_lookup(teachers: Sequence[Teacher]) -> Dict[RecordId, str]:
    lookup: Dict[RecordId, str] = {}
    for teacher in teachers:
        if teacher.name:
            lookup.setdefault(teacher.id, teacher.name)
    return lookup


def _indicator_lookup(
    definitions: Sequence[IndicatorDefinition]
) -> Dict[RecordId, Tuple[Optional[str], Optional[int]]]:
    lookup: Dict[RecordId, Tuple[Optional[str], Optional[int]]] = {}
    for definition in definitions:
        dimension = Dimension.from_id(definition.dimension_id)
        if definition.dimension_id is not None and dimension is None:
            logger.warning(
                f"Indicator {definition.id} references unknown dimension {definition.dimension_id}"
            )
        # First definition wins when the catalog repeats an id
        lookup.setdefault(
            definition.id,
            (definition.label, dimension.dimension_id if dimension else None),
        )
    return lookup


def _group_by_observation(rows):
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.observation_id].append(row)
    return grouped


def _dimension_scores(rows: Sequence[DimensionScoreRow]) -> DimensionScores:
    """Pick the first score per dimension code; missing dimensions score 0."""
    scores: Dict[str, float] = {}
    for dimension in DIMENSION_ORDER:
        match = next((row for row in rows if row.dimension_code == dimension.value), None)
        scores[dimension.field_name] = (match.percentage or 0.0) if match else 0.0
    return DimensionScores(**scores)


def join_records(
    observations: Optional[Sequence[ObservationHeader]],
    teachers: Optional[Sequence[Teacher]] = None,
    dimension_scores: Optional[Sequence[DimensionScoreRow]] = None,
    indicators: Optional[Sequence[IndicatorDefinition]] = None,
    responses: Optional[Sequence[IndicatorResponse]] = None,
    evolution: Optional[Sequence[EvolutionPoint]] = None,
) -> JoinResult:
    """
    Join raw source rows into an ordered list of Observations.

    Args:
        observations: Observation header rows; output order follows this sequence
        teachers: Teacher reference rows
        dimension_scores: Per-observation dimension percentages
        indicators: Indicator catalog
        responses: Raw responses on the 0-1 scale
        evolution: Evolution points, passed through unchanged

    Any source given as None is treated as empty. Unknown teacher ids get a
    placeholder name, unknown indicator ids a placeholder label and no
    dimension, and absent dimension scores default to 0.
    """
    headers = list(observations or [])
    teacher_names = _teacher_lookup(teachers or [])
    indicator_info = _indicator_lookup(indicators or [])
    dims_by_observation = _group_by_observation(dimension_scores or [])
    responses_by_observation = _group_by_observation(responses or [])

    joined: List[Observation] = []
    unresolved_teachers = 0
    unresolved_indicators = 0

    for header in headers:
        teacher_name = teacher_names.get(header.teacher_id)
        if teacher_name is None:
            unresolved_teachers += 1
            teacher_name = TEACHER_PLACEHOLDER

        items: List[IndicatorItem] = []
        for response in responses_by_observation.get(header.observation_id, []):
            label, dimension_id = indicator_info.get(response.indicator_id, (None, None))
            if response.indicator_id not in indicator_info:
                unresolved_indicators += 1
            items.append(IndicatorItem(
                label=label or INDICATOR_PLACEHOLDER,
                value=(response.value or 0.0) * 100,
                dimension_id=dimension_id,
            ))

        joined.append(Observation(
            observation_id=header.observation_id,
            teacher_id=header.teacher_id,
            teacher_name=teacher_name,
            subject=header.subject or "",
            course=header.course or "",
            date=header.date,
            observer_name=header.observer_name or "",
            total_percentage=header.total_percentage or 0.0,
            dimension_scores=_dimension_scores(dims_by_observation.get(header.observation_id, [])),
            indicator_items=tuple(items),
        ))

    if unresolved_teachers:
        logger.warning(f"{unresolved_teachers} observations reference unknown teachers")
    if unresolved_indicators:
        logger.warning(f"{unresolved_indicators} responses reference unknown indicators")

    logger.debug(f"Joined {len(joined)} observations")

    return JoinResult(
        observations=joined,
        evolution=list(evolution or []),
        unresolved_teachers=unresolved_teachers,
        unresolved_indicators=unresolved_indicators,
    )
