"""
Loading and live refresh of observation data.

This package provides:
- ObservationLoader for the concurrent six-source load cycle
- ChangeDetector for the cheap freshness probe
- ObservationRefresher for single-flight reloads and the polling task
- DashboardSession for per-consumer selection state
"""

from .loader import ObservationLoadError, ObservationLoader
from .change_detector import ChangeDetector
from .refresher import DEFAULT_POLL_INTERVAL_SECONDS, ObservationRefresher
from .session import DashboardSession

__all__ = [
    "ObservationLoadError",
    "ObservationLoader",
    "ChangeDetector",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "ObservationRefresher",
    "DashboardSession",
]
