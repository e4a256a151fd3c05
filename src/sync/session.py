"""
Selection state for one dashboard consumer.

The session listens to the refresher: when a new snapshot arrives the
selection is reconciled against it (defaults on the first load, stale ids
replaced afterwards) and the view is rebuilt on the next request.
"""

import logging
from datetime import date
from typing import Optional

from aggregation import apply_search, default_selection, reconcile_selection
from models import DashboardView, DataSnapshot, DateRange, RecordId, Selection, ViewMode
from .refresher import ObservationRefresher


logger = logging.getLogger(__name__)


class DashboardSession:
    """Selection state plus on-demand view derivation."""

    def __init__(self, refresher: ObservationRefresher, view_mode: ViewMode = ViewMode.SINGLE):
        self.refresher = refresher
        self.selection = Selection(view_mode=view_mode)
        self._initialized = False
        self._unsubscribe = refresher.add_listener(self._on_snapshot)
        if not refresher.snapshot.is_empty:
            self._on_snapshot(refresher.snapshot)

    def _on_snapshot(self, snapshot: DataSnapshot) -> None:
        min_obs = self.refresher.min_teacher_observations
        if not self._initialized:
            defaults = default_selection(snapshot.observations, self.selection.view_mode, min_obs)
            self.selection = defaults.model_copy(update={"date_range": self.selection.date_range})
            self._initialized = bool(snapshot.observations)
        else:
            self.selection = reconcile_selection(self.selection, snapshot.observations, min_obs)
        logger.debug(f"Selection after generation {snapshot.generation}: {self.selection}")

    def close(self) -> None:
        self._unsubscribe()

    def set_view_mode(self, view_mode: ViewMode) -> None:
        self.selection = self.selection.model_copy(update={"view_mode": view_mode})

    def select_observation(self, observation_id: Optional[RecordId]) -> None:
        self.selection = self.selection.model_copy(update={"observation_id": observation_id})

    def select_teacher(self, teacher_id: Optional[RecordId]) -> None:
        self.selection = self.selection.model_copy(update={"teacher_id": teacher_id})

    def set_date_range(self, date_from: Optional[date] = None, date_to: Optional[date] = None) -> None:
        """Narrow every derived value to an inclusive date window."""
        self.selection = self.selection.model_copy(
            update={"date_range": DateRange(date_from=date_from, date_to=date_to)}
        )

    def search(self, term: str) -> bool:
        """Jump to the first matching observation. Returns True on a match."""
        updated = apply_search(self.selection, self.refresher.snapshot.observations, term)
        matched = updated is not self.selection
        self.selection = updated
        return matched

    def view(self) -> DashboardView:
        return self.refresher.view(self.selection)
