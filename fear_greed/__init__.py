"""
Fear & Greed Composite Aggregation & Decision Engine.

============================================================
PURPOSE
============================================================
Reconciles many independently computed indicator scores into
one auditable market-sentiment number, then turns that number
into a risk-bounded trade plan.

============================================================
PIPELINE
============================================================
    Normalizer -> Aggregator -> {Confidence, Divergence, Warnings}
               -> Decision Engine -> Trade Plan Builder

Inputs are SubScores supplied by upstream indicators (price,
volatility, volume, impulse, technical, social, trends, whales,
orderBook). Indicator math is NOT part of this package.

============================================================
OUTPUT
============================================================
- CompositeResult: score (0-100), sentiment label, confidence,
  divergences, warnings
- DecisionPlan: strategy type, position size, trade action,
  entry / stop / target ladders, rules

============================================================
USAGE
============================================================

```python
from fear_greed import FearGreedEngine, SubScore, IndicatorGroup

engine = FearGreedEngine()
evaluation = engine.evaluate([
    SubScore("price", 77.8, IndicatorGroup.INTERNAL),
    SubScore("volatility", 81.3, IndicatorGroup.INTERNAL),
    SubScore("volume", 97.9, IndicatorGroup.INTERNAL),
    SubScore("impulse", 77.8, IndicatorGroup.INTERNAL),
    SubScore("technical", 84.8, IndicatorGroup.INTERNAL),
    SubScore("social", 80.45, IndicatorGroup.EXTERNAL),
    SubScore("trends", 71.20, IndicatorGroup.EXTERNAL),
    SubScore("whales", 80.45, IndicatorGroup.EXTERNAL),
    SubScore("orderBook", 76.55, IndicatorGroup.EXTERNAL),
])

print(evaluation.composite.score)               # 81
print(evaluation.plan.strategy_type.value)      # OVERBOUGHT_DISTRIBUTION
```

============================================================
"""

from .models import (
    IndicatorGroup,
    ScoreScale,
    SentimentLabel,
    ConfidenceLevel,
    Severity,
    StrategyType,
    TradeActionType,
    SubScore,
    UnusedWeightNotice,
    AggregationResult,
    ConfidenceResult,
    Divergence,
    RiskWarning,
    CompositeResult,
    DecisionResult,
    TradeAction,
    EntryTranche,
    StopLevel,
    TargetTier,
    DecisionPlan,
    Evaluation,
)
from .config import (
    WeightTree,
    DivergenceThresholds,
    WarningThresholds,
    ConfidenceThresholds,
    DecisionConfig,
    FearGreedConfig,
    get_default_config,
    load_config,
)
from .exceptions import (
    FearGreedError,
    InvalidScoreRangeError,
    MissingWeightError,
    DuplicateSubScoreError,
    InvalidConfigurationError,
)
from .normalizer import ScoreNormalizer, normalize
from .aggregator import WeightedAggregator, aggregate, round_half_away_from_zero
from .confidence import ConfidenceEstimator, estimate_confidence
from .divergence import DivergenceRule, DivergenceDetector, DIVERGENCE_RULES, detect_divergences
from .warning_rules import WarningRule, WarningGenerator, WARNING_RULES, generate_warnings
from .decision import DecisionEngine, decide
from .trade_plan import PlanTemplate, PLAN_TEMPLATES, TradePlanBuilder, build_plan
from .indicators import BaseIndicator, FunctionIndicator, IndicatorRegistry, rescale_signed_unit
from .engine import FearGreedEngine, calculate_fear_greed, format_fear_greed_summary


__all__ = [
    # Models
    "IndicatorGroup",
    "ScoreScale",
    "SentimentLabel",
    "ConfidenceLevel",
    "Severity",
    "StrategyType",
    "TradeActionType",
    "SubScore",
    "UnusedWeightNotice",
    "AggregationResult",
    "ConfidenceResult",
    "Divergence",
    "RiskWarning",
    "CompositeResult",
    "DecisionResult",
    "TradeAction",
    "EntryTranche",
    "StopLevel",
    "TargetTier",
    "DecisionPlan",
    "Evaluation",
    # Config
    "WeightTree",
    "DivergenceThresholds",
    "WarningThresholds",
    "ConfidenceThresholds",
    "DecisionConfig",
    "FearGreedConfig",
    "get_default_config",
    "load_config",
    # Exceptions
    "FearGreedError",
    "InvalidScoreRangeError",
    "MissingWeightError",
    "DuplicateSubScoreError",
    "InvalidConfigurationError",
    # Components
    "ScoreNormalizer",
    "normalize",
    "WeightedAggregator",
    "aggregate",
    "round_half_away_from_zero",
    "ConfidenceEstimator",
    "estimate_confidence",
    "DivergenceRule",
    "DivergenceDetector",
    "DIVERGENCE_RULES",
    "detect_divergences",
    "WarningRule",
    "WarningGenerator",
    "WARNING_RULES",
    "generate_warnings",
    "DecisionEngine",
    "decide",
    "PlanTemplate",
    "PLAN_TEMPLATES",
    "TradePlanBuilder",
    "build_plan",
    "BaseIndicator",
    "FunctionIndicator",
    "IndicatorRegistry",
    "rescale_signed_unit",
    # Engine
    "FearGreedEngine",
    "calculate_fear_greed",
    "format_fear_greed_summary",
]

__version__ = "1.0.0"
