"""
Bulk loader: concurrent fan-out of the six source fetches followed by one
join pass.

By default any failed fetch aborts the cycle with ObservationLoadError so the
caller keeps its previous data. With tolerate_partial_failures, auxiliary
sources that fail are joined as empty lists; the observation headers are
always required.
"""

import asyncio
import logging
import time
from typing import Dict, List

from aggregation import JoinResult, join_records
from database import ObservationQueries


logger = logging.getLogger(__name__)

REQUIRED_SOURCE = "observations"


class ObservationLoadError(Exception):
    """Raised when a load cycle is aborted because one or more sources failed."""

    def __init__(self, failures: Dict[str, BaseException]):
        self.failures = failures
        details = ", ".join(f"{source}: {error}" for source, error in failures.items())
        super().__init__(f"Failed to load {sorted(failures)} ({details})")

    @property
    def failed_sources(self) -> List[str]:
        return sorted(self.failures)


class ObservationLoader:
    """Fetches every source concurrently and joins them into Observations."""

    def __init__(self, queries: ObservationQueries, tolerate_partial_failures: bool = False):
        self.queries = queries
        self.tolerate_partial_failures = tolerate_partial_failures

    async def load(self) -> JoinResult:
        """
        Run one load cycle.

        Returns:
            JoinResult with the joined observations and the evolution series

        Raises:
            ObservationLoadError: if a fetch failed and the failure is not tolerated
        """
        start = time.time()
        sources = {
            "teachers": self.queries.get_teachers(),
            REQUIRED_SOURCE: self.queries.get_observation_headers(),
            "dimension_scores": self.queries.get_dimension_scores(),
            "indicators": self.queries.get_indicator_definitions(),
            "responses": self.queries.get_responses(),
            "evolution": self.queries.get_evolution(),
        }

        results = await asyncio.gather(*sources.values(), return_exceptions=True)
        fetched = dict(zip(sources.keys(), results))

        failures: Dict[str, BaseException] = {}
        for source, result in fetched.items():
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error(f"Fetch of {source} failed: {result}")
                failures[source] = result

        if failures:
            if not self.tolerate_partial_failures or REQUIRED_SOURCE in failures:
                raise ObservationLoadError(failures)
            logger.warning(f"Continuing load with empty {sorted(failures)}")
            for source in failures:
                fetched[source] = []

        result = join_records(
            observations=fetched[REQUIRED_SOURCE],
            teachers=fetched["teachers"],
            dimension_scores=fetched["dimension_scores"],
            indicators=fetched["indicators"],
            responses=fetched["responses"],
            evolution=fetched["evolution"],
        )

        logger.info(
            f"Loaded {len(result.observations)} observations in {(time.time() - start) * 1000:.0f}ms",
            extra={
                "evolution_points": len(result.evolution),
                "unresolved_teachers": result.unresolved_teachers,
                "unresolved_indicators": result.unresolved_indicators,
                "failed_sources": sorted(failures),
            }
        )
        return result
