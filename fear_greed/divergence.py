"""
Fear & Greed Engine - Divergence Detector.

============================================================
RULE TABLE
============================================================
Rules are evaluated in declaration order; each is independent
and several may fire in one run. Output order = table order.

| type            | condition                      | severity |
|-----------------|--------------------------------|----------|
| price-volume    | |price - volume| > 30          | high     |
| technical-whale | |technical - whales| > 30      | medium   |
| social-price    | |social - price| > 40          | medium   |

Thresholds come from DivergenceThresholds. A rule whose
indicators are absent from the run is skipped.

============================================================
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .config import DivergenceThresholds
from .models import Divergence, Severity, SubScore
from .normalizer import require_percent_scale


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DivergenceRule:
    """Pairwise absolute-difference rule."""
    type: str
    severity: Severity
    left: str
    right: str
    threshold_field: str

    @property
    def requires(self) -> Tuple[str, str]:
        return (self.left, self.right)

    def evaluate(
        self,
        values: Dict[str, float],
        thresholds: DivergenceThresholds,
    ) -> Optional[Divergence]:
        if self.left not in values or self.right not in values:
            return None

        threshold = getattr(thresholds, self.threshold_field)
        left, right = values[self.left], values[self.right]
        gap = abs(left - right)
        if gap <= threshold:
            return None

        return Divergence(
            type=self.type,
            severity=self.severity,
            description=(
                f"{self.left} ({left:.1f}) and {self.right} ({right:.1f}) "
                f"differ by {gap:.1f} points (threshold {threshold:g})"
            ),
        )


DIVERGENCE_RULES: Tuple[DivergenceRule, ...] = (
    DivergenceRule("price-volume", Severity.HIGH, "price", "volume", "price_volume"),
    DivergenceRule("technical-whale", Severity.MEDIUM, "technical", "whales", "technical_whales"),
    DivergenceRule("social-price", Severity.MEDIUM, "social", "price", "social_price"),
)


class DivergenceDetector:
    """Applies the divergence rule table to one run's sub-scores."""

    def __init__(
        self,
        thresholds: Optional[DivergenceThresholds] = None,
        rules: Tuple[DivergenceRule, ...] = DIVERGENCE_RULES,
    ):
        self._thresholds = thresholds or DivergenceThresholds()
        self._rules = rules

    @property
    def rules(self) -> Tuple[DivergenceRule, ...]:
        return self._rules

    def detect(self, sub_scores: Iterable[SubScore]) -> List[Divergence]:
        values: Dict[str, float] = {}
        for sub_score in sub_scores:
            require_percent_scale(sub_score)
            values[sub_score.name] = sub_score.value

        divergences: List[Divergence] = []
        for rule in self._rules:
            found = rule.evaluate(values, self._thresholds)
            if found is not None:
                logger.debug(f"Divergence rule fired: {found.type} ({found.severity.value})")
                divergences.append(found)
        return divergences


def detect_divergences(
    sub_scores: Iterable[SubScore],
    thresholds: Optional[DivergenceThresholds] = None,
) -> List[Divergence]:
    """Convenience wrapper around DivergenceDetector.detect."""
    return DivergenceDetector(thresholds).detect(sub_scores)
