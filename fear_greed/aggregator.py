"""
Fear & Greed Engine - Weighted Aggregator.

============================================================
RESPONSIBILITY
============================================================
Combines normalized sub-scores into:

    internal_composite = sum(value * w) over internal indicators
    external_composite = sum(value * w) over external indicators
    final_composite    = round(internal * W_internal + external * W_external)

Rounding is half away from zero (77.5 -> 78).

============================================================
RULES
============================================================
- Only [0, 100] scores are accepted; no scale conversion here
- A consumed name without a weight in its bucket -> MissingWeightError
- A configured name absent from the run -> UnusedWeightNotice (non-fatal)
- Absent names contribute 0; weights are never renormalized

============================================================
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional

from .config import WeightTree
from .exceptions import DuplicateSubScoreError, MissingWeightError
from .models import AggregationResult, IndicatorGroup, SubScore, UnusedWeightNotice
from .normalizer import require_percent_scale


logger = logging.getLogger(__name__)

# Absorbs binary float noise (e.g. 77.49999999999999) before integer rounding
_NOISE_QUANTUM = Decimal("0.000000001")


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    exact = Decimal(repr(value)).quantize(_NOISE_QUANTUM, rounding=ROUND_HALF_UP)
    return int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class WeightedAggregator:
    """Two-level weighted summation over a fixed WeightTree."""

    def __init__(self, weight_tree: Optional[WeightTree] = None):
        self._weights = weight_tree or WeightTree()

    @property
    def weight_tree(self) -> WeightTree:
        return self._weights

    def aggregate(self, sub_scores: Iterable[SubScore]) -> AggregationResult:
        """
        Aggregate one run's sub-scores.

        Raises:
            MissingWeightError: A consumed name has no configured weight
            InvalidScoreRangeError: A sub-score is not on the percent scale
            DuplicateSubScoreError: A name appears twice
        """
        bucket_sums: Dict[IndicatorGroup, float] = {
            IndicatorGroup.INTERNAL: 0.0,
            IndicatorGroup.EXTERNAL: 0.0,
        }
        contributions: Dict[str, float] = {}
        present = set()

        for sub_score in sub_scores:
            if sub_score.name in present:
                raise DuplicateSubScoreError(sub_score.name)
            present.add(sub_score.name)
            require_percent_scale(sub_score)

            weight = self._weights.weight_for(sub_score.name, sub_score.group)
            if weight is None:
                raise MissingWeightError(sub_score.name, sub_score.group.value)

            weighted = sub_score.value * weight
            bucket_sums[sub_score.group] += weighted
            contributions[sub_score.name] = weighted * self._weights.bucket_weight(sub_score.group)

        unused = self._find_unused(present)

        internal = bucket_sums[IndicatorGroup.INTERNAL]
        external = bucket_sums[IndicatorGroup.EXTERNAL]
        raw = (
            internal * self._weights.internal_weight
            + external * self._weights.external_weight
        )

        return AggregationResult(
            internal_composite=internal,
            external_composite=external,
            final_composite=round_half_away_from_zero(raw),
            raw_composite=raw,
            contributions=contributions,
            unused_weights=tuple(unused),
        )

    def _find_unused(self, present: set) -> List[UnusedWeightNotice]:
        unused: List[UnusedWeightNotice] = []
        for group in (IndicatorGroup.INTERNAL, IndicatorGroup.EXTERNAL):
            for name in self._weights.weights_for(group):
                if name not in present:
                    logger.info(f"Configured indicator '{name}' ({group.value}) absent from this run")
                    unused.append(UnusedWeightNotice(name=name, group=group))
        return unused


def aggregate(
    sub_scores: Iterable[SubScore],
    weight_tree: Optional[WeightTree] = None,
) -> AggregationResult:
    """Convenience wrapper around WeightedAggregator.aggregate."""
    return WeightedAggregator(weight_tree).aggregate(sub_scores)
