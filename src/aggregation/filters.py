"""Date-window filtering of the observation collection."""

from datetime import date
from typing import List, Optional, Sequence

from models import DateRange, Observation


def filter_by_date(
    observations: Sequence[Observation],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Observation]:
    """
    Keep observations whose date falls within [date_from, date_to], both inclusive.

    Open bounds are unbounded. With no bounds at all every observation passes,
    including undated ones; with any bound set, undated observations are dropped.
    """
    if date_from is None and date_to is None:
        return list(observations)

    kept = []
    for observation in observations:
        if observation.date is None:
            continue
        if date_from is not None and observation.date < date_from:
            continue
        if date_to is not None and observation.date > date_to:
            continue
        kept.append(observation)
    return kept


def apply_date_range(observations: Sequence[Observation], date_range: Optional[DateRange]) -> List[Observation]:
    """filter_by_date driven by a DateRange value."""
    if date_range is None:
        return list(observations)
    return filter_by_date(observations, date_range.date_from, date_range.date_to)
