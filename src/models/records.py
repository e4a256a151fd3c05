"""
Raw record shapes returned by the observation database.

These Pydantic models map to the read-only Supabase relations:
- public.docentes
- public.v_resultados_dimension
- public.indicadores
- public.respuestas
- public.v_resultados_dimensiones
- public.v_evolucion_docente

Every field that the source may leave empty is optional here. Default
substitution happens in the record joiner, not in these models.
"""

from datetime import date as CalendarDate, datetime
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel


RecordId = Union[int, UUID, str]


class Teacher(BaseModel):
    """Maps to public.docentes."""
    id: RecordId
    name: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class IndicatorDefinition(BaseModel):
    """Maps to public.indicadores."""
    id: RecordId
    label: Optional[str] = None
    dimension_id: Optional[int] = None

    class Config:
        from_attributes = True
        frozen = True


class DimensionScoreRow(BaseModel):
    """Maps to public.v_resultados_dimension (one row per observation and dimension)."""
    observation_id: RecordId
    dimension_code: Optional[str] = None
    percentage: Optional[float] = None

    class Config:
        from_attributes = True
        frozen = True


class IndicatorResponse(BaseModel):
    """Maps to public.respuestas. Values are on the 0-1 scale."""
    observation_id: RecordId
    indicator_id: Optional[RecordId] = None
    value: Optional[float] = None
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class ObservationHeader(BaseModel):
    """Maps to public.v_resultados_dimensiones (one row per observation)."""
    observation_id: RecordId
    teacher_id: Optional[RecordId] = None
    subject: Optional[str] = None
    course: Optional[str] = None
    date: Optional[CalendarDate] = None
    observer_name: Optional[str] = None
    total_percentage: Optional[float] = None

    class Config:
        from_attributes = True
        frozen = True


class EvolutionPoint(BaseModel):
    """Maps to public.v_evolucion_docente."""
    teacher_id: RecordId
    date: CalendarDate
    average_percentage: Optional[float] = None

    class Config:
        from_attributes = True
        frozen = True
