"""
Aggregation engine: averages over any subset of observations.

Totals and dimension scores are unweighted arithmetic means over the subset.
Indicators are grouped by display label, and each label is averaged only
over the observations that contain it.
"""

from typing import Dict, List, Optional, Sequence

from models import AggregateResult, DimensionScores, IndicatorItem, Observation


class _LabelAccumulator:
    __slots__ = ("total", "count", "dimension_id")

    def __init__(self, dimension_id: Optional[int]):
        self.total = 0.0
        self.count = 0
        self.dimension_id = dimension_id


def average_indicators(observations: Sequence[Observation]) -> List[IndicatorItem]:
    """
    Average indicator values by label across observations.

    Output order is the first appearance of each label. The dimension of a
    label is taken from its first occurrence. Missing values count as 0.
    """
    by_label: Dict[str, _LabelAccumulator] = {}

    for observation in observations:
        for item in observation.indicator_items:
            accumulator = by_label.get(item.label)
            if accumulator is None:
                accumulator = _LabelAccumulator(item.dimension_id)
                by_label[item.label] = accumulator
            accumulator.total += item.value or 0.0
            accumulator.count += 1

    return [
        IndicatorItem(label=label, value=acc.total / acc.count, dimension_id=acc.dimension_id)
        for label, acc in by_label.items()
    ]


def aggregate(subset: Sequence[Observation]) -> Optional[AggregateResult]:
    """
    Compute the averaged view over a subset of observations.

    Returns None for an empty subset; callers treat that as "no display data".
    """
    if not subset:
        return None

    n = len(subset)
    total = sum(o.total_percentage for o in subset)
    ambiente = sum(o.dimension_scores.ambiente for o in subset)
    interaccion = sum(o.dimension_scores.interaccion for o in subset)
    organizacion = sum(o.dimension_scores.organizacion for o in subset)

    return AggregateResult(
        total_percentage=total / n,
        dimension_scores=DimensionScores(
            ambiente=ambiente / n,
            interaccion=interaccion / n,
            organizacion=organizacion / n,
        ),
        indicator_averages=tuple(average_indicators(subset)),
        observation_count=n,
    )
