"""
Fear & Greed Engine - Decision Engine.

============================================================
POSITION SIZING
============================================================
1. Base size from extremity:
     score <= 20 or score >= 80:
         extremity = min(|score - 50| / 50, 1)
         base = max_position_size * extremity
     otherwise:
         base = max_position_size * 0.5
2. Confidence:  base *= confidence / 100
3. Volatility:  base *= max(0, 1 - volatility / 200)
4. Ceiling:     size = min(base, max_position_size)

============================================================
STRATEGY BANDS
============================================================
<=20 OVERSOLD_ACCUMULATION
<=40 CAUTIOUS_BUYING
<=60 NEUTRAL_RANGING
<=80 CAUTIOUS_PROFIT_TAKING
 >80 OVERBOUGHT_DISTRIBUTION

Pure function of its inputs; no I/O.

============================================================
"""

import logging
from typing import Optional, Union

from .config import DecisionConfig
from .exceptions import InvalidConfigurationError
from .models import ConfidenceResult, DecisionResult, StrategyType


logger = logging.getLogger(__name__)

MIDPOINT = 50.0


class DecisionEngine:
    """Maps (score, confidence, volatility) to a strategy and position size."""

    def __init__(self, config: Optional[DecisionConfig] = None):
        self._config = config or DecisionConfig()
        if not self._config.max_position_size > 0:
            raise InvalidConfigurationError(
                f"max_position_size must be > 0, got {self._config.max_position_size!r}"
            )

    @property
    def max_position_size(self) -> float:
        return self._config.max_position_size

    def decide(
        self,
        score: float,
        confidence: Union[ConfidenceResult, float],
        volatility: float,
    ) -> DecisionResult:
        """
        Args:
            score: Final composite score (0-100)
            confidence: ConfidenceResult or its score (0-100)
            volatility: Volatility sub-score on the [0, 100] scale

        Returns:
            DecisionResult with strategy type and position size percent
        """
        confidence_score = (
            confidence.score if isinstance(confidence, ConfidenceResult) else float(confidence)
        )

        size = self._base_size(score)
        size *= confidence_score / 100.0
        size *= max(0.0, 1.0 - volatility / self._config.volatility_damping_divisor)
        size = max(0.0, min(size, self._config.max_position_size))

        strategy = StrategyType.from_score(score)
        logger.debug(
            f"Decision: score={score} confidence={confidence_score:.2f} "
            f"volatility={volatility:.2f} -> {strategy.value} size={size:.2f}"
        )
        return DecisionResult(strategy_type=strategy, position_size_percent=size)

    def _base_size(self, score: float) -> float:
        ceiling = self._config.max_position_size
        if score <= self._config.extreme_fear_max or score >= self._config.extreme_greed_min:
            extremity = min(abs(score - MIDPOINT) / MIDPOINT, 1.0)
            return ceiling * extremity
        return ceiling * self._config.neutral_size_fraction


def decide(
    score: float,
    confidence: Union[ConfidenceResult, float],
    volatility: float,
    max_position_size: float = 100.0,
) -> DecisionResult:
    """Convenience wrapper; raises InvalidConfigurationError if max_position_size <= 0."""
    config = DecisionConfig(max_position_size=max_position_size)
    return DecisionEngine(config).decide(score, confidence, volatility)
