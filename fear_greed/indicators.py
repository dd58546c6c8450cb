"""
Fear & Greed Engine - Indicator Interface.

============================================================
PURPOSE
============================================================
Uniform capability interface for the upstream collaborators
(price trend, volatility, volume, momentum, technicals, social,
search trends, whale flow, order book).

Each indicator declares ONCE:
- name   (unique, must have a weight in its bucket)
- group  (internal / external)
- scale  (percent / signed_unit)

and implements compute(inputs) -> float. The registry turns
indicator outputs into percent-scale SubScores; the aggregator
depends only on SubScore, never on concrete indicator types.

Indicator math itself lives outside this package.

============================================================
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import WeightTree
from .exceptions import InvalidConfigurationError, MissingWeightError
from .models import IndicatorGroup, ScoreScale, SubScore
from .normalizer import DEFAULT_EPSILON, ScoreNormalizer


logger = logging.getLogger(__name__)


def rescale_signed_unit(value: float) -> float:
    """Map a [-1, 1] value onto [0, 100]."""
    return (value + 1.0) * 50.0


class BaseIndicator(ABC):
    """
    Abstract base class for indicator collaborators.

    Subclasses must implement:
    - name, group, scale properties
    - compute(inputs) -> float on the declared scale
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def group(self) -> IndicatorGroup:
        pass

    @property
    def scale(self) -> ScoreScale:
        return ScoreScale.PERCENT

    @abstractmethod
    def compute(self, inputs: Any) -> float:
        """Compute the indicator value on its declared scale."""
        pass

    def to_sub_score(self, inputs: Any, epsilon: float = DEFAULT_EPSILON) -> SubScore:
        """
        Compute and convert to a percent-scale SubScore.

        Outputs within epsilon of the declared scale are clamped,
        the same tolerance the engine's normalizer applies.

        Raises:
            InvalidScoreRangeError: If compute() leaves the declared scale
        """
        raw = SubScore(
            name=self.name,
            value=float(self.compute(inputs)),
            group=self.group,
            scale=self.scale,
        )
        checked = ScoreNormalizer(epsilon).normalize_score(raw)

        if checked.scale == ScoreScale.SIGNED_UNIT:
            return SubScore(
                name=checked.name,
                value=rescale_signed_unit(checked.value),
                group=checked.group,
            )
        return checked


class FunctionIndicator(BaseIndicator):
    """Adapter wrapping a pure function as an indicator."""

    def __init__(
        self,
        name: str,
        group: IndicatorGroup,
        func: Callable[[Any], float],
        scale: ScoreScale = ScoreScale.PERCENT,
    ) -> None:
        self._name = name
        self._group = group
        self._func = func
        self._scale = scale

    @property
    def name(self) -> str:
        return self._name

    @property
    def group(self) -> IndicatorGroup:
        return self._group

    @property
    def scale(self) -> ScoreScale:
        return self._scale

    def compute(self, inputs: Any) -> float:
        return self._func(inputs)

    def __repr__(self) -> str:
        return f"FunctionIndicator({self._name!r}, {self._group.value}, {self._scale.value})"


class IndicatorRegistry:
    """
    Central registry of indicator collaborators.

    Registration checks the weight tree once, at integration time.

    Usage:
        registry = IndicatorRegistry(config.weights)
        registry.register(FunctionIndicator("price", IndicatorGroup.INTERNAL, price_fn))
        sub_scores = registry.collect({"price": candles})
    """

    def __init__(
        self,
        weight_tree: Optional[WeightTree] = None,
        epsilon: float = DEFAULT_EPSILON,
    ) -> None:
        self._weights = weight_tree or WeightTree()
        self._epsilon = epsilon
        self._indicators: Dict[str, BaseIndicator] = {}

    def register(self, indicator: BaseIndicator) -> None:
        name = indicator.name
        if name in self._indicators:
            raise InvalidConfigurationError(f"Indicator already registered: {name}")
        if self._weights.weight_for(name, indicator.group) is None:
            raise MissingWeightError(name, indicator.group.value)

        self._indicators[name] = indicator
        logger.info(
            f"Registered indicator: {name} ({indicator.group.value}, {indicator.scale.value})"
        )

    def unregister(self, name: str) -> bool:
        if name in self._indicators:
            del self._indicators[name]
            logger.info(f"Unregistered indicator: {name}")
            return True
        return False

    def get(self, name: str) -> Optional[BaseIndicator]:
        return self._indicators.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._indicators)

    def __len__(self) -> int:
        return len(self._indicators)

    def collect(self, inputs: Mapping[str, Any]) -> List[SubScore]:
        """
        Compute sub-scores for every registered indicator with inputs.

        Args:
            inputs: indicator name -> that indicator's raw inputs

        Returns:
            Percent-scale SubScores in registration order
        """
        sub_scores: List[SubScore] = []
        for name, indicator in self._indicators.items():
            if name not in inputs:
                logger.debug(f"No inputs for indicator {name}; skipping")
                continue
            sub_scores.append(indicator.to_sub_score(inputs[name], self._epsilon))
        return sub_scores
