"""
Change detection through a single cheap freshness probe.

Only the latest response timestamp is fetched; the full dataset is never
reloaded just to check for changes.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from models.utils import ensure_utc


logger = logging.getLogger(__name__)

FreshnessProbe = Callable[[], Awaitable[Optional[datetime]]]


class ChangeDetector:
    """Reports whether the store holds responses newer than the last sync."""

    def __init__(self, probe: FreshnessProbe):
        self.probe = probe
        self.last_probe_error: Optional[str] = None

    async def latest_timestamp(self) -> Optional[datetime]:
        """Run the probe; None on an empty result or on error."""
        try:
            latest = await self.probe()
        except Exception as e:
            self.last_probe_error = str(e)
            logger.warning(f"Freshness probe failed: {e}")
            return None

        self.last_probe_error = None
        return ensure_utc(latest)

    async def has_new_data(self, last_known_sync_time: Optional[datetime]) -> bool:
        """
        True iff the probe returns a timestamp strictly later than
        last_known_sync_time. A missing sync time means nothing has been
        loaded yet, so any timestamp counts as new.
        """
        latest = await self.latest_timestamp()
        if latest is None:
            return False

        last_sync = ensure_utc(last_known_sync_time)
        if last_sync is None:
            return True

        is_newer = latest > last_sync
        if is_newer:
            logger.info(f"New responses detected at {latest.isoformat()} (last sync {last_sync.isoformat()})")
        return is_newer
