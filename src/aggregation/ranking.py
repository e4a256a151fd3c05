"""Top-performance ranking of observations."""

from typing import List, Sequence

from models import Observation


DEFAULT_RANKING_LIMIT = 5


def rank_observations(observations: Sequence[Observation], limit: int = DEFAULT_RANKING_LIMIT) -> List[Observation]:
    """
    Highest total percentage first, capped at `limit`.

    sorted() is stable, so ties keep their original relative order.
    """
    if limit < 1:
        return []
    return sorted(observations, key=lambda o: o.total_percentage, reverse=True)[:limit]
