"""
Fear & Greed Engine - Confidence Estimator.

Confidence reflects how much the sub-scores agree:

    std_dev = population standard deviation of all values
    score   = clamp(100 - std_dev * 2, 0, 100)

Internal and external sub-scores are pooled together.
An empty run yields score 0 / Low.
"""

import logging
import math
from typing import Iterable, Optional

from .config import ConfidenceThresholds
from .models import ConfidenceLevel, ConfidenceResult, SubScore
from .normalizer import require_percent_scale


logger = logging.getLogger(__name__)

DISPERSION_MULTIPLIER = 2.0


class ConfidenceEstimator:
    """Dispersion-based agreement measure."""

    def __init__(self, thresholds: Optional[ConfidenceThresholds] = None):
        self._thresholds = thresholds or ConfidenceThresholds()

    def estimate(self, sub_scores: Iterable[SubScore]) -> ConfidenceResult:
        values = []
        for sub_score in sub_scores:
            require_percent_scale(sub_score)
            values.append(float(sub_score.value))

        if not values:
            return ConfidenceResult(score=0.0, level=ConfidenceLevel.LOW)

        mean = math.fsum(values) / len(values)
        variance = math.fsum((v - mean) ** 2 for v in values) / len(values)
        std_dev = math.sqrt(variance)

        score = min(100.0, max(0.0, 100.0 - std_dev * DISPERSION_MULTIPLIER))
        level = ConfidenceLevel.from_score(
            score,
            high_min=self._thresholds.high_min,
            medium_min=self._thresholds.medium_min,
        )
        logger.debug(f"Confidence: mean={mean:.2f} std_dev={std_dev:.2f} score={score:.2f}")

        return ConfidenceResult(score=score, level=level)


def estimate_confidence(
    sub_scores: Iterable[SubScore],
    thresholds: Optional[ConfidenceThresholds] = None,
) -> ConfidenceResult:
    """Convenience wrapper around ConfidenceEstimator.estimate."""
    return ConfidenceEstimator(thresholds).estimate(sub_scores)
