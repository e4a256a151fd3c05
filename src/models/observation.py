"""
Observation entities built by the record joiner and the aggregate shape
computed over any subset of them.

An Observation is one completed classroom evaluation for one teacher on one
date. Scores use the 0-100 percentage scale throughout.
"""

from datetime import date as CalendarDate
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .records import RecordId


TEACHER_PLACEHOLDER = "Docente N/A"
INDICATOR_PLACEHOLDER = "Indicador"


class Dimension(str, Enum):
    """The three fixed evaluation dimensions, keyed by their source code."""
    AMBIENTE = "AMBIENTE"
    INTERACCION = "INTERACCION"
    ORGANIZACION = "ORGANIZACION"

    @property
    def dimension_id(self) -> int:
        return DIMENSION_IDS[self]

    @property
    def display_name(self) -> str:
        return DIMENSION_NAMES[self]

    @property
    def field_name(self) -> str:
        return self.value.lower()

    @classmethod
    def from_id(cls, dimension_id: Optional[int]) -> Optional["Dimension"]:
        """Resolve a catalog dimension id, or None when it is not one of the three."""
        for dimension, known_id in DIMENSION_IDS.items():
            if known_id == dimension_id:
                return dimension
        return None


# Listed order is also the tie-break order for the critical dimension.
DIMENSION_ORDER: Tuple[Dimension, ...] = (
    Dimension.AMBIENTE,
    Dimension.INTERACCION,
    Dimension.ORGANIZACION,
)

DIMENSION_IDS: Dict[Dimension, int] = {
    Dimension.AMBIENTE: 1,
    Dimension.INTERACCION: 2,
    Dimension.ORGANIZACION: 3,
}

DIMENSION_NAMES: Dict[Dimension, str] = {
    Dimension.AMBIENTE: "Ambiente",
    Dimension.INTERACCION: "Interacción",
    Dimension.ORGANIZACION: "Organización",
}


class DimensionScores(BaseModel):
    """Percentage per dimension."""
    ambiente: float = 0.0
    interaccion: float = 0.0
    organizacion: float = 0.0

    class Config:
        frozen = True

    def get(self, dimension: Dimension) -> float:
        return getattr(self, dimension.field_name)

    def ordered(self) -> List[Tuple[Dimension, float]]:
        """(dimension, score) pairs in the fixed dimension order."""
        return [(dimension, self.get(dimension)) for dimension in DIMENSION_ORDER]


class IndicatorItem(BaseModel):
    """One scored indicator, either from a single observation or averaged."""
    label: str = INDICATOR_PLACEHOLDER
    value: Optional[float] = None
    dimension_id: Optional[int] = None

    class Config:
        frozen = True


class Observation(BaseModel):
    """A joined observation. Immutable within one load cycle."""
    observation_id: RecordId
    teacher_id: Optional[RecordId] = None
    teacher_name: str = TEACHER_PLACEHOLDER
    subject: str = ""
    course: str = ""
    date: Optional[CalendarDate] = None
    observer_name: str = ""
    total_percentage: float = 0.0
    dimension_scores: DimensionScores = Field(default_factory=DimensionScores)
    indicator_items: Tuple[IndicatorItem, ...] = ()

    class Config:
        frozen = True

    @property
    def indicators(self) -> Tuple[IndicatorItem, ...]:
        return self.indicator_items


class AggregateResult(BaseModel):
    """Averaged view over a set of observations. Recomputed per query."""
    total_percentage: float
    dimension_scores: DimensionScores
    indicator_averages: Tuple[IndicatorItem, ...] = ()
    observation_count: int = 0

    class Config:
        frozen = True

    @property
    def indicators(self) -> Tuple[IndicatorItem, ...]:
        return self.indicator_averages


# What a view hands to the KPI deriver and the presentation layer.
DisplayData = Union[Observation, AggregateResult]
