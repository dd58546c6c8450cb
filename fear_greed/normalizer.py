"""
Fear & Greed Engine - Score Normalizer.

Validates each incoming sub-score against its declared canonical
scale. Values within range pass through unchanged; values outside
by no more than epsilon are clamped onto the bound; anything further
out raises InvalidScoreRangeError. No scaling happens here.
"""

import logging
import math
from typing import Iterable, List

from .exceptions import DuplicateSubScoreError, InvalidScoreRangeError
from .models import ScoreScale, SubScore


logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-6


class ScoreNormalizer:
    """Range validator for sub-scores."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self._epsilon = epsilon

    @property
    def epsilon(self) -> float:
        return self._epsilon

    def normalize(self, sub_scores: Iterable[SubScore]) -> List[SubScore]:
        """
        Validate and clamp a set of sub-scores.

        Args:
            sub_scores: Sub-scores for one run

        Returns:
            List in input order. Untouched scores are the same objects.

        Raises:
            InvalidScoreRangeError: value non-finite or out of range
            DuplicateSubScoreError: name supplied twice
        """
        seen = set()
        result: List[SubScore] = []

        for sub_score in sub_scores:
            if sub_score.name in seen:
                raise DuplicateSubScoreError(sub_score.name)
            seen.add(sub_score.name)
            result.append(self.normalize_score(sub_score))

        return result

    def normalize_score(self, sub_score: SubScore) -> SubScore:
        """Validate one sub-score, clamping it onto its scale within epsilon."""
        lower, upper = sub_score.scale.bounds
        value = sub_score.value

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidScoreRangeError(
                sub_score.name, value, lower, upper, reason=f"non-numeric value {value!r}"
            )
        if not math.isfinite(value):
            raise InvalidScoreRangeError(
                sub_score.name, value, lower, upper, reason=f"non-finite value {value!r}"
            )

        if lower <= value <= upper:
            return sub_score

        if lower - self._epsilon <= value < lower:
            logger.debug(f"Clamping {sub_score.name}={value!r} to {lower}")
            return sub_score.with_value(lower)
        if upper < value <= upper + self._epsilon:
            logger.debug(f"Clamping {sub_score.name}={value!r} to {upper}")
            return sub_score.with_value(upper)

        raise InvalidScoreRangeError(sub_score.name, value, lower, upper)


def require_percent_scale(sub_score: SubScore) -> None:
    """
    Raise unless `sub_score` is on the [0, 100] scale.

    Rescaling is the collaborator's job, never the consumer's.
    """
    if sub_score.scale != ScoreScale.PERCENT:
        raise InvalidScoreRangeError(
            sub_score.name,
            sub_score.value,
            reason=(
                f"expected percent scale, got {sub_score.scale.value}; "
                "rescale at the indicator before aggregation"
            ),
        )


def normalize(
    sub_scores: Iterable[SubScore],
    epsilon: float = DEFAULT_EPSILON,
) -> List[SubScore]:
    """Convenience wrapper around ScoreNormalizer.normalize."""
    return ScoreNormalizer(epsilon).normalize(sub_scores)
