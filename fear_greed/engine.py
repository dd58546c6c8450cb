"""
Fear & Greed Engine - Main Orchestrator.

============================================================
PURPOSE
============================================================
FearGreedEngine is the main entry point. It orchestrates:

1. Score normalization
2. Weighted aggregation (internal / external / final)
3. Confidence, divergence and warning checks
4. Position decision
5. Trade plan construction

Data flows strictly upward; no component calls back down.

============================================================
DESIGN PRINCIPLES
============================================================
- Deterministic: same sub-scores + config = same outputs
- Stateless per call: nothing is cached between runs
- Fatal errors propagate unchanged; no partial results
- Non-fatal findings travel on the result (notices, warnings)

============================================================
USAGE
============================================================
    from fear_greed import FearGreedEngine, SubScore, IndicatorGroup

    engine = FearGreedEngine()
    evaluation = engine.evaluate([
        SubScore("price", 77.8, IndicatorGroup.INTERNAL),
        SubScore("volume", 97.9, IndicatorGroup.INTERNAL),
        SubScore("whales", 80.45, IndicatorGroup.EXTERNAL),
    ])

    print(evaluation.composite.score)
    print(evaluation.plan.strategy_type.value)

============================================================
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional

from .aggregator import WeightedAggregator
from .confidence import ConfidenceEstimator
from .config import FearGreedConfig, load_config
from .decision import DecisionEngine
from .divergence import DivergenceDetector
from .models import (
    CompositeResult,
    DecisionPlan,
    Evaluation,
    RiskWarning,
    SentimentLabel,
    Severity,
    SubScore,
)
from .normalizer import ScoreNormalizer
from .trade_plan import TradePlanBuilder
from .warning_rules import WarningGenerator


logger = logging.getLogger(__name__)


class FearGreedEngine:
    """
    Composite aggregation and decision orchestrator.

    Components are built once from the configuration and are
    read-only afterwards, so one engine can serve concurrent calls.
    """

    def __init__(
        self,
        config: Optional[FearGreedConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize engine.

        Args:
            config: Configuration object
            config_path: Path to YAML config file (used if config is None)

        Raises:
            InvalidConfigurationError: If the configuration is invalid
        """
        if config:
            self._config = config
        elif config_path:
            self._config = load_config(config_path)
        else:
            self._config = FearGreedConfig()

        self._normalizer = ScoreNormalizer(self._config.score_epsilon)
        self._aggregator = WeightedAggregator(self._config.weights)
        self._confidence = ConfidenceEstimator(self._config.confidence)
        self._divergence = DivergenceDetector(self._config.divergence)
        self._warnings = WarningGenerator(self._config.warnings)
        self._decision = DecisionEngine(self._config.decision)
        self._planner = TradePlanBuilder()

        logger.info(
            f"FearGreedEngine initialized "
            f"(max_position_size={self._config.decision.max_position_size})"
        )

    @property
    def config(self) -> FearGreedConfig:
        return self._config

    # =========================================================
    # MAIN API
    # =========================================================

    def calculate(self, sub_scores: Iterable[SubScore]) -> CompositeResult:
        """
        Compute the composite index for one run.

        Raises:
            InvalidScoreRangeError, MissingWeightError, DuplicateSubScoreError
        """
        normalized = self._normalizer.normalize(sub_scores)
        return self._calculate(normalized)

    def plan(self, composite: CompositeResult, volatility: float) -> DecisionPlan:
        """
        Turn a composite result into a trade plan.

        Args:
            composite: Output of calculate()
            volatility: Volatility sub-score on the [0, 100] scale
        """
        decision = self._decision.decide(composite.score, composite.confidence, volatility)
        return self._planner.build_plan(
            composite.score,
            decision.strategy_type,
            decision.position_size_percent,
        )

    def evaluate(self, sub_scores: Iterable[SubScore]) -> Evaluation:
        """
        Full run: composite, decision and plan.

        The volatility input is the sub-score named by
        DecisionConfig.volatility_indicator. If it is absent, no
        damping is applied and a low-level warning is added.
        """
        normalized = self._normalizer.normalize(sub_scores)
        composite = self._calculate(normalized)

        volatility_name = self._config.decision.volatility_indicator
        volatility = next((s.value for s in normalized if s.name == volatility_name), None)
        if volatility is None:
            logger.warning(f"No '{volatility_name}' sub-score; sizing without volatility damping")
            composite = replace(
                composite,
                warnings=composite.warnings + (
                    RiskWarning(
                        type="missing_volatility",
                        level=Severity.LOW,
                        message=(
                            f"No '{volatility_name}' sub-score supplied; "
                            "position size is not volatility-damped"
                        ),
                    ),
                ),
            )
            volatility = 0.0

        decision = self._decision.decide(composite.score, composite.confidence, volatility)
        plan = self._planner.build_plan(
            composite.score,
            decision.strategy_type,
            decision.position_size_percent,
        )
        return Evaluation(composite=composite, plan=plan, decision=decision)

    # =========================================================
    # INTERNALS
    # =========================================================

    def _calculate(self, normalized: List[SubScore]) -> CompositeResult:
        aggregation = self._aggregator.aggregate(normalized)
        confidence = self._confidence.estimate(normalized)
        divergences = self._divergence.detect(normalized)
        warnings = self._warnings.generate(normalized)

        result = CompositeResult(
            score=aggregation.final_composite,
            sentiment_label=SentimentLabel.from_score(aggregation.final_composite),
            confidence=confidence,
            divergences=tuple(divergences),
            warnings=tuple(warnings),
            internal_score=aggregation.internal_composite,
            external_score=aggregation.external_composite,
            contributions=aggregation.contributions,
            notices=aggregation.unused_weights,
        )

        if self._config.log_calculations:
            logger.info(
                f"Fear & Greed calculated: score={result.score} "
                f"({result.sentiment_label.value}), "
                f"confidence={confidence.score:.1f} ({confidence.level.value}), "
                f"divergences={len(result.divergences)}, warnings={len(result.warnings)}"
            )
        return result


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def calculate_fear_greed(
    sub_scores: Iterable[SubScore],
    config: Optional[FearGreedConfig] = None,
) -> Evaluation:
    """
    Convenience function to evaluate in one call.

    For repeated evaluation, prefer a long-lived FearGreedEngine.
    """
    return FearGreedEngine(config=config).evaluate(sub_scores)


def format_fear_greed_summary(
    composite: CompositeResult,
    plan: Optional[DecisionPlan] = None,
) -> str:
    """
    Format a human-readable summary.

    Useful for logging and alerts.
    """
    lines = [
        "=" * 50,
        "FEAR & GREED SUMMARY",
        "=" * 50,
        f"Score: {composite.score}/100 ({composite.sentiment_label.value})",
        f"Internal: {composite.internal_score:.2f}  External: {composite.external_score:.2f}",
        f"Confidence: {composite.confidence.score:.1f} ({composite.confidence.level.value})",
    ]

    if composite.divergences:
        lines.append("")
        lines.append("Divergences:")
        for d in composite.divergences:
            lines.append(f"  [{d.severity.value}] {d.type}: {d.description}")

    if composite.warnings:
        lines.append("")
        lines.append("Warnings:")
        for w in composite.warnings:
            lines.append(f"  [{w.level.value}] {w.type}: {w.message}")

    if plan is not None:
        lines.extend([
            "",
            f"Strategy: {plan.strategy_type.value}",
            f"Action: {plan.trade_action.primary.value}",
            f"Position size: {plan.position_size_percent:.2f}%",
        ])

    lines.append("=" * 50)
    return "\n".join(lines)
