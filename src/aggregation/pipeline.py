"""
Explicit derivation pipeline for one dashboard render.

Every derived value is a pure function of a data snapshot and a selection:
date window -> display data -> KPIs, ranking and teacher options. Callers
recompute when either input changes; nothing here holds state.
"""

from datetime import datetime
from typing import Optional

from models import DashboardView, DataSnapshot, LoadStatus, Selection
from .filters import apply_date_range
from .kpis import derive_kpis
from .ranking import DEFAULT_RANKING_LIMIT, rank_observations
from .views import MIN_TEACHER_OBSERVATIONS, eligible_teachers, select_display, view_caption


def build_dashboard_view(
    snapshot: DataSnapshot,
    selection: Selection,
    status: LoadStatus = LoadStatus.READY,
    last_sync: Optional[datetime] = None,
    ranking_limit: int = DEFAULT_RANKING_LIMIT,
    min_teacher_observations: int = MIN_TEACHER_OBSERVATIONS,
) -> DashboardView:
    """
    Derive the full view payload.

    The selection's date range narrows the collection before any other
    derivation, so display data, ranking and teacher options all agree.
    """
    observations = apply_date_range(snapshot.observations, selection.date_range)

    display = select_display(
        observations,
        selection.view_mode,
        observation_id=selection.observation_id,
        teacher_id=selection.teacher_id,
    )
    kpis = derive_kpis(display, selection.view_mode, selection.teacher_id, snapshot.evolution)

    return DashboardView(
        selection=selection,
        display=display,
        kpis=kpis,
        ranking=tuple(rank_observations(observations, ranking_limit)),
        observations=tuple(observations),
        teacher_options=eligible_teachers(observations, min_teacher_observations),
        caption=view_caption(selection.view_mode),
        status=status,
        last_sync=last_sync if last_sync is not None else snapshot.loaded_at,
        generation=snapshot.generation,
    )
