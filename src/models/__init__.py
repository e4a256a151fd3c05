"""
Core data models for the classroom observation dashboard.

This package contains:
- Raw record models mapping to the Supabase relations
- Joined observation entities and aggregate results
- View, selection and KPI schemas
"""

from .records import (
    RecordId,
    Teacher,
    IndicatorDefinition,
    DimensionScoreRow,
    IndicatorResponse,
    ObservationHeader,
    EvolutionPoint,
)
from .observation import (
    TEACHER_PLACEHOLDER,
    INDICATOR_PLACEHOLDER,
    DIMENSION_ORDER,
    Dimension,
    DimensionScores,
    IndicatorItem,
    Observation,
    AggregateResult,
    DisplayData,
)
from .dashboard import (
    ViewMode,
    TrendDirection,
    LoadStatus,
    Trend,
    CriticalDimension,
    KPIReport,
    DateRange,
    Selection,
    TeacherOption,
    DataSnapshot,
    DashboardView,
)
from . import utils

__all__ = [
    # Raw records
    "RecordId",
    "Teacher",
    "IndicatorDefinition",
    "DimensionScoreRow",
    "IndicatorResponse",
    "ObservationHeader",
    "EvolutionPoint",

    # Entities
    "TEACHER_PLACEHOLDER",
    "INDICATOR_PLACEHOLDER",
    "DIMENSION_ORDER",
    "Dimension",
    "DimensionScores",
    "IndicatorItem",
    "Observation",
    "AggregateResult",
    "DisplayData",

    # View schemas
    "ViewMode",
    "TrendDirection",
    "LoadStatus",
    "Trend",
    "CriticalDimension",
    "KPIReport",
    "DateRange",
    "Selection",
    "TeacherOption",
    "DataSnapshot",
    "DashboardView",

    # Utilities
    "utils",
]
