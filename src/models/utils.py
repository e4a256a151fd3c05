"""
Small helpers shared by the aggregation and sync layers.
"""

import math
from datetime import datetime, timezone
from typing import Optional


def round_percentage(value: Optional[float]) -> int:
    """Round half up, the way the dashboard displays percentages (2.5 -> 3, -2.5 -> -2)."""
    if value is None:
        return 0
    return int(math.floor(value + 0.5))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps so they compare with aware ones."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
