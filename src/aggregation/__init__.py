"""
Aggregation and view derivation for the observation dashboard.

This package provides:
- join_records for building Observations from raw source rows
- aggregate for averaged views over any subset
- view selection, KPI derivation, ranking and date filtering
- build_dashboard_view tying them together for one render
"""

from .joiner import JoinResult, join_records
from .engine import aggregate, average_indicators
from .filters import apply_date_range, filter_by_date
from .ranking import DEFAULT_RANKING_LIMIT, rank_observations
from .views import (
    MIN_TEACHER_OBSERVATIONS,
    apply_search,
    default_selection,
    eligible_teachers,
    find_observation,
    reconcile_selection,
    select_display,
    view_caption,
)
from .kpis import (
    LOW_INDICATOR_THRESHOLD,
    count_low_indicators,
    critical_dimension,
    derive_kpis,
    teacher_trend,
)
from .pipeline import build_dashboard_view

__all__ = [
    "JoinResult",
    "join_records",
    "aggregate",
    "average_indicators",
    "apply_date_range",
    "filter_by_date",
    "DEFAULT_RANKING_LIMIT",
    "rank_observations",
    "MIN_TEACHER_OBSERVATIONS",
    "apply_search",
    "default_selection",
    "eligible_teachers",
    "find_observation",
    "reconcile_selection",
    "select_display",
    "view_caption",
    "LOW_INDICATOR_THRESHOLD",
    "count_low_indicators",
    "critical_dimension",
    "derive_kpis",
    "teacher_trend",
    "build_dashboard_view",
]
