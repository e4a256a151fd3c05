"""Shared fixtures for observation dashboard tests."""

from datetime import date

import pytest

from models import (
    DimensionScoreRow,
    DimensionScores,
    EvolutionPoint,
    IndicatorDefinition,
    IndicatorItem,
    IndicatorResponse,
    Observation,
    ObservationHeader,
    Teacher,
)


@pytest.fixture
def make_observation():
    """Factory for joined observations with sensible defaults."""
    def _make(
        observation_id,
        teacher_id=1,
        teacher_name="Ana Pérez",
        total=70.0,
        ambiente=70.0,
        interaccion=70.0,
        organizacion=70.0,
        items=(),
        subject="Matemáticas",
        observed_on=date(2024, 5, 1),
    ):
        return Observation(
            observation_id=observation_id,
            teacher_id=teacher_id,
            teacher_name=teacher_name,
            subject=subject,
            course="3°A",
            date=observed_on,
            observer_name="Coordinación",
            total_percentage=total,
            dimension_scores=DimensionScores(
                ambiente=ambiente,
                interaccion=interaccion,
                organizacion=organizacion,
            ),
            indicator_items=tuple(
                IndicatorItem(label=label, value=value, dimension_id=dimension_id)
                for label, value, dimension_id in items
            ),
        )
    return _make


@pytest.fixture
def raw_records():
    """A small, consistent set of source rows for two teachers and three observations."""
    return {
        "teachers": [
            Teacher(id=1, name="Ana Pérez"),
            Teacher(id=2, name="Luis Soto"),
        ],
        "observations": [
            ObservationHeader(observation_id=10, teacher_id=1, subject="Matemáticas", course="3°A",
                              date=date(2024, 3, 4), observer_name="Marta", total_percentage=80.0),
            ObservationHeader(observation_id=11, teacher_id=2, subject="Historia", course="2°B",
                              date=date(2024, 3, 5), observer_name="Marta", total_percentage=60.0),
            ObservationHeader(observation_id=12, teacher_id=1, subject="Matemáticas", course="3°B",
                              date=date(2024, 4, 8), observer_name="Raúl", total_percentage=90.0),
        ],
        "dimension_scores": [
            DimensionScoreRow(observation_id=10, dimension_code="AMBIENTE", percentage=85.0),
            DimensionScoreRow(observation_id=10, dimension_code="INTERACCION", percentage=75.0),
            DimensionScoreRow(observation_id=10, dimension_code="ORGANIZACION", percentage=80.0),
            DimensionScoreRow(observation_id=11, dimension_code="AMBIENTE", percentage=55.0),
            DimensionScoreRow(observation_id=11, dimension_code="ORGANIZACION", percentage=65.0),
            DimensionScoreRow(observation_id=12, dimension_code="AMBIENTE", percentage=95.0),
            DimensionScoreRow(observation_id=12, dimension_code="INTERACCION", percentage=90.0),
            DimensionScoreRow(observation_id=12, dimension_code="ORGANIZACION", percentage=85.0),
        ],
        "indicators": [
            IndicatorDefinition(id=100, label="Clima de respeto", dimension_id=1),
            IndicatorDefinition(id=101, label="Preguntas abiertas", dimension_id=2),
            IndicatorDefinition(id=102, label="Manejo del tiempo", dimension_id=3),
        ],
        "responses": [
            IndicatorResponse(observation_id=10, indicator_id=101, value=0.5),
            IndicatorResponse(observation_id=10, indicator_id=100, value=1.0),
            IndicatorResponse(observation_id=11, indicator_id=102, value=0.25),
            IndicatorResponse(observation_id=12, indicator_id=100, value=0.75),
            IndicatorResponse(observation_id=12, indicator_id=999, value=0.5),
        ],
        "evolution": [
            EvolutionPoint(teacher_id=1, date=date(2024, 4, 8), average_percentage=90.0),
            EvolutionPoint(teacher_id=1, date=date(2024, 3, 4), average_percentage=80.0),
        ],
    }
