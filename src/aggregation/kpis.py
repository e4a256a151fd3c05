"""
KPI derivation from the active display data and the evolution series.

- Critical dimension: lowest of the three dimensions, ties broken by the
  fixed order Ambiente, Interacción, Organización
- Low-indicator count: indicators strictly below 60, missing values as 0
- Trend: last minus first point of the selected teacher's evolution, only
  in the by-teacher view

No display data yields placeholder KPIs; nothing here raises.
"""

from typing import Optional, Sequence

from models import (
    CriticalDimension,
    DisplayData,
    EvolutionPoint,
    KPIReport,
    RecordId,
    Trend,
    TrendDirection,
    ViewMode,
)
from models.utils import round_percentage


LOW_INDICATOR_THRESHOLD = 60.0
MIN_TREND_POINTS = 2


def critical_dimension(display: Optional[DisplayData]) -> Optional[CriticalDimension]:
    if display is None:
        return None
    # sorted() is stable, so equal scores keep the fixed dimension order
    dimension, score = sorted(display.dimension_scores.ordered(), key=lambda pair: pair[1])[0]
    return CriticalDimension(
        dimension=dimension,
        name=dimension.display_name,
        percentage=round_percentage(score),
    )


def count_low_indicators(display: Optional[DisplayData], threshold: float = LOW_INDICATOR_THRESHOLD) -> int:
    if display is None:
        return 0
    return sum(1 for item in display.indicators if (item.value or 0.0) < threshold)


def teacher_trend(evolution: Sequence[EvolutionPoint], teacher_id: Optional[RecordId]) -> Trend:
    """Trend of one teacher's evolution series; unavailable below two points."""
    if teacher_id is None:
        return Trend()

    series = sorted((p for p in evolution or [] if p.teacher_id == teacher_id), key=lambda p: p.date)
    if len(series) < MIN_TREND_POINTS:
        return Trend()

    first = series[0].average_percentage or 0.0
    last = series[-1].average_percentage or 0.0
    delta = last - first

    if delta > 0:
        direction = TrendDirection.UP
    elif delta < 0:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.STABLE

    return Trend(direction=direction, delta=delta, magnitude=abs(round_percentage(delta)))


def derive_kpis(
    display: Optional[DisplayData],
    view_mode: ViewMode,
    teacher_id: Optional[RecordId] = None,
    evolution: Optional[Sequence[EvolutionPoint]] = None,
) -> KPIReport:
    """Derive the KPI report for the active view."""
    if display is None:
        return KPIReport()

    trend = Trend()
    if view_mode == ViewMode.BY_TEACHER and teacher_id is not None:
        trend = teacher_trend(evolution or [], teacher_id)

    return KPIReport(
        critical_dimension=critical_dimension(display),
        low_indicator_count=count_low_indicators(display),
        trend=trend,
    )
