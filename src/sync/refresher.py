"""
Live refresh of the observation snapshot.

ObservationRefresher owns the current DataSnapshot and the single polling
task. Each tick runs the freshness probe and, when it reports new data,
triggers a full reload. New data means a response newer than the watermark,
the store-side timestamp probed right before the last successful fetch.
Reloads are single-flight: a tick or manual request that arrives while a
reload is running is skipped, not queued.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from aggregation import MIN_TEACHER_OBSERVATIONS, DEFAULT_RANKING_LIMIT, build_dashboard_view
from models import DashboardView, DataSnapshot, LoadStatus, Selection
from models.utils import utc_now
from .change_detector import ChangeDetector
from .loader import ObservationLoadError, ObservationLoader


logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0

SnapshotListener = Callable[[DataSnapshot], None]


class ObservationRefresher:
    """
    Holds the latest snapshot and keeps it fresh.

    Usage:
        async with ObservationRefresher(loader, detector) as refresher:
            view = refresher.view(selection)
    """

    def __init__(
        self,
        loader: ObservationLoader,
        detector: ChangeDetector,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
        ranking_limit: int = DEFAULT_RANKING_LIMIT,
        min_teacher_observations: int = MIN_TEACHER_OBSERVATIONS,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.loader = loader
        self.detector = detector
        self.poll_interval = poll_interval
        self.clock = clock
        self.ranking_limit = ranking_limit
        self.min_teacher_observations = min_teacher_observations

        self.snapshot = DataSnapshot()
        self.status = LoadStatus.IDLE
        self.last_error: Optional[str] = None
        self.last_sync: Optional[datetime] = None
        # Newest response timestamp seen by the store when the snapshot was fetched
        self.sync_watermark: Optional[datetime] = None

        self._reload_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[SnapshotListener] = []

    @property
    def is_reloading(self) -> bool:
        return self._reload_lock.locked()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a callback for every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self, snapshot: DataSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}", exc_info=True)

    async def reload(self) -> bool:
        """
        Run one full load cycle and swap in the new snapshot.

        Returns True when a new snapshot was installed. On failure the
        previous snapshot is kept and the error is recorded on the refresher.
        """
        if self._reload_lock.locked():
            logger.debug("Reload already in flight, skipping")
            return False

        async with self._reload_lock:
            self.status = LoadStatus.LOADING
            try:
                # Probe before fetching; a response written mid-load stays newer than the watermark
                watermark = await self.detector.latest_timestamp()
                result = await self.loader.load()
                loaded_at = self.clock()
                snapshot = DataSnapshot(
                    observations=tuple(result.observations),
                    evolution=tuple(result.evolution),
                    loaded_at=loaded_at,
                    generation=self.snapshot.generation + 1,
                )
            except ObservationLoadError as e:
                self.status = LoadStatus.ERROR
                self.last_error = str(e)
                logger.error(f"Load cycle aborted, keeping generation {self.snapshot.generation}: {e}")
                return False
            except Exception as e:
                self.status = LoadStatus.ERROR
                self.last_error = f"Unexpected load failure: {e}"
                logger.error(f"Load cycle failed, keeping generation {self.snapshot.generation}: {e}", exc_info=True)
                raise

            self.snapshot = snapshot
            self.sync_watermark = watermark
            self.last_sync = loaded_at
            self.last_error = None
            self.status = LoadStatus.READY

        logger.info(f"Installed snapshot generation {self.snapshot.generation}")
        self._notify(self.snapshot)
        return True

    async def check_for_updates(self) -> bool:
        """One polling tick: probe, then reload if the store has newer data."""
        if self._reload_lock.locked():
            logger.debug("Skipping freshness probe while a reload is running")
            return False

        if not await self.detector.has_new_data(self.sync_watermark):
            return False

        return await self.reload()

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.check_for_updates()
            except Exception as e:
                logger.error(f"Polling tick failed: {e}", exc_info=True)

    async def start(self, initial_load: bool = True) -> None:
        """Optionally load once, then start the polling task."""
        if initial_load:
            await self.reload()
        if self.is_running:
            return
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Polling for new observations every {self.poll_interval:g}s")

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Polling stopped")

    async def __aenter__(self) -> "ObservationRefresher":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def view(self, selection: Selection) -> DashboardView:
        """Derive the dashboard view for a selection from the current snapshot."""
        return build_dashboard_view(
            self.snapshot,
            selection,
            status=self.status,
            last_sync=self.last_sync,
            ranking_limit=self.ranking_limit,
            min_teacher_observations=self.min_teacher_observations,
        )
