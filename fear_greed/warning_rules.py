"""
Fear & Greed Engine - Warning Generator.

============================================================
RULE TABLE
============================================================
| type             | condition                        | level  |
|------------------|----------------------------------|--------|
| extreme_price    | |price| > 90                     | high   |
| low_volume       | volume < 30 AND price > 70       | medium |
| whale_divergence | whales < 30 AND price > 70       | high   |

Each rule is a (predicate, metadata) pair. Rules are evaluated
independently in declaration order. A rule whose indicators are
absent from the run is skipped.

============================================================
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .config import WarningThresholds
from .models import RiskWarning, Severity, SubScore
from .normalizer import require_percent_scale


logger = logging.getLogger(__name__)

Values = Dict[str, float]


@dataclass(frozen=True)
class WarningRule:
    """Declarative warning rule."""
    type: str
    level: Severity
    requires: Tuple[str, ...]
    predicate: Callable[[Values, WarningThresholds], bool]
    message: Callable[[Values, WarningThresholds], str]

    def evaluate(self, values: Values, thresholds: WarningThresholds) -> Optional[RiskWarning]:
        if any(name not in values for name in self.requires):
            return None
        if not self.predicate(values, thresholds):
            return None
        return RiskWarning(
            type=self.type,
            level=self.level,
            message=self.message(values, thresholds),
        )


WARNING_RULES: Tuple[WarningRule, ...] = (
    WarningRule(
        type="extreme_price",
        level=Severity.HIGH,
        requires=("price",),
        predicate=lambda v, t: abs(v["price"]) > t.extreme_price,
        message=lambda v, t: (
            f"Price score {v['price']:.1f} is beyond {t.extreme_price:g}; "
            "reversal risk is elevated"
        ),
    ),
    WarningRule(
        type="low_volume",
        level=Severity.MEDIUM,
        requires=("volume", "price"),
        predicate=lambda v, t: (
            v["volume"] < t.low_volume_max and v["price"] > t.low_volume_price_min
        ),
        message=lambda v, t: (
            f"Price score {v['price']:.1f} is rising on thin volume ({v['volume']:.1f})"
        ),
    ),
    WarningRule(
        type="whale_divergence",
        level=Severity.HIGH,
        requires=("whales", "price"),
        predicate=lambda v, t: (
            v["whales"] < t.whale_max and v["price"] > t.whale_price_min
        ),
        message=lambda v, t: (
            f"Whales are distributing ({v['whales']:.1f}) while price is strong "
            f"({v['price']:.1f})"
        ),
    ),
)


class WarningGenerator:
    """Applies the warning rule table to one run's sub-scores."""

    def __init__(
        self,
        thresholds: Optional[WarningThresholds] = None,
        rules: Tuple[WarningRule, ...] = WARNING_RULES,
    ):
        self._thresholds = thresholds or WarningThresholds()
        self._rules = rules

    @property
    def rules(self) -> Tuple[WarningRule, ...]:
        return self._rules

    def generate(self, sub_scores: Iterable[SubScore]) -> List[RiskWarning]:
        values: Values = {}
        for sub_score in sub_scores:
            require_percent_scale(sub_score)
            values[sub_score.name] = sub_score.value

        warnings: List[RiskWarning] = []
        for rule in self._rules:
            found = rule.evaluate(values, self._thresholds)
            if found is not None:
                logger.debug(f"Warning rule fired: {found.type} ({found.level.value})")
                warnings.append(found)
        return warnings


def generate_warnings(
    sub_scores: Iterable[SubScore],
    thresholds: Optional[WarningThresholds] = None,
) -> List[RiskWarning]:
    """Convenience wrapper around WarningGenerator.generate."""
    return WarningGenerator(thresholds).generate(sub_scores)
