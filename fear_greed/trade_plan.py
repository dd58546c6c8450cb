"""
Fear & Greed Engine - Trade Plan Builder.

============================================================
RESPONSIBILITY
============================================================
Expands a strategy type into a structured, auditable plan:

- trade action (primary label + methods)
- three-tranche scaled ladder (portions sum to 100)
- stop-loss ladder (distance below average entry, portion closed)
- profit-taking tiers (gain above average entry, portion taken)
- textual rules

All ladders are relative percentages. This module never sees or
produces absolute price levels.

============================================================
TABLE COMPLETENESS
============================================================
The template table must hold an explicit entry for every
StrategyType. There is no default fallback; a missing or
malformed entry raises InvalidConfigurationError when the
builder is constructed.

============================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .exceptions import InvalidConfigurationError
from .models import (
    DecisionPlan,
    EntryTranche,
    SentimentLabel,
    StopLevel,
    StrategyType,
    TargetTier,
    TradeAction,
    TradeActionType,
)


logger = logging.getLogger(__name__)

LADDER_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PlanTemplate:
    """Canned plan content for one strategy type."""
    action: TradeAction
    entries: Tuple[EntryTranche, ...]
    stops: Tuple[StopLevel, ...]
    targets: Tuple[TargetTier, ...]
    rules: Tuple[str, ...]


# =============================================================
# STATIC TEMPLATE TABLE
# =============================================================


PLAN_TEMPLATES: Dict[StrategyType, PlanTemplate] = {
    StrategyType.OVERSOLD_ACCUMULATION: PlanTemplate(
        action=TradeAction(
            primary=TradeActionType.ACCUMULATE,
            methods=(
                "Scale into spot positions during capitulation",
                "Place limit orders below recent lows",
                "Avoid leverage",
            ),
        ),
        entries=(
            EntryTranche(40.0, "Initial tranche at current levels"),
            EntryTranche(30.0, "Add on a successful retest of the recent low"),
            EntryTranche(30.0, "Add once price reclaims the prior breakdown level"),
        ),
        stops=(
            StopLevel(8.0, 50.0, "Close half 8% below average entry"),
            StopLevel(15.0, 50.0, "Close remainder 15% below average entry"),
        ),
        targets=(
            TargetTier(15.0, 25.0, "Take 25% at +15%"),
            TargetTier(30.0, 25.0, "Take 25% at +30%"),
            TargetTier(50.0, 25.0, "Take 25% at +50%, trail the rest"),
        ),
        rules=(
            "No leverage while sentiment is in extreme fear",
            "Deploy the next tranche only after its condition is met",
            "Pause accumulation if the composite keeps falling without a volume pickup",
        ),
    ),
    StrategyType.CAUTIOUS_BUYING: PlanTemplate(
        action=TradeAction(
            primary=TradeActionType.BUILD,
            methods=(
                "Build positions gradually",
                "Prefer entries on pullbacks to support",
            ),
        ),
        entries=(
            EntryTranche(30.0, "Initial tranche near support"),
            EntryTranche(30.0, "Add on a higher low"),
            EntryTranche(40.0, "Add on a confirmed trend reversal"),
        ),
        stops=(
            StopLevel(6.0, 50.0, "Close half 6% below average entry"),
            StopLevel(10.0, 50.0, "Close remainder 10% below average entry"),
        ),
        targets=(
            TargetTier(10.0, 30.0, "Take 30% at +10%"),
            TargetTier(20.0, 30.0, "Take 30% at +20%"),
            TargetTier(35.0, 20.0, "Take 20% at +35%, trail the rest"),
        ),
        rules=(
            "Keep leverage at or below 2x",
            "Skip the final tranche if divergences are flagged",
        ),
    ),
    StrategyType.NEUTRAL_RANGING: PlanTemplate(
        action=TradeAction(
            primary=TradeActionType.NEUTRAL,
            methods=(
                "Trade the edges of the current range",
                "Keep exposure moderate",
            ),
        ),
        entries=(
            EntryTranche(50.0, "Buy near range support"),
            EntryTranche(25.0, "Add when support holds on a retest"),
            EntryTranche(25.0, "Add on a confirmed breakout above the range"),
        ),
        stops=(
            StopLevel(4.0, 50.0, "Close half 4% below average entry"),
            StopLevel(7.0, 50.0, "Close remainder 7% below average entry"),
        ),
        targets=(
            TargetTier(6.0, 40.0, "Take 40% at +6%"),
            TargetTier(12.0, 40.0, "Take 40% at +12%"),
            TargetTier(18.0, 20.0, "Take the final 20% at +18%"),
        ),
        rules=(
            "No leverage inside the range",
            "Exit range trades at the opposite edge",
        ),
    ),
    StrategyType.CAUTIOUS_PROFIT_TAKING: PlanTemplate(
        action=TradeAction(
            primary=TradeActionType.LIGHTEN,
            methods=(
                "Trim winners into strength",
                "Tighten trailing stops",
            ),
        ),
        entries=(
            EntryTranche(30.0, "Trim on the next push higher"),
            EntryTranche(30.0, "Trim on a failed breakout"),
            EntryTranche(40.0, "Reduce on a close below short-term support"),
        ),
        stops=(
            StopLevel(4.0, 50.0, "Close half 4% below average entry"),
            StopLevel(8.0, 50.0, "Close remainder 8% below average entry"),
        ),
        targets=(
            TargetTier(5.0, 40.0, "Take 40% at +5%"),
            TargetTier(10.0, 40.0, "Take 40% at +10%"),
            TargetTier(15.0, 20.0, "Take the final 20% at +15%"),
        ),
        rules=(
            "No new leveraged longs",
            "Size refers to the share of exposure to reduce",
        ),
    ),
    StrategyType.OVERBOUGHT_DISTRIBUTION: PlanTemplate(
        action=TradeAction(
            primary=TradeActionType.DISTRIBUTE,
            methods=(
                "Distribute holdings into strength",
                "Move stops to break-even",
                "Avoid new long entries",
            ),
        ),
        entries=(
            EntryTranche(40.0, "Sell the first tranche into current strength"),
            EntryTranche(30.0, "Sell the second tranche on momentum divergence"),
            EntryTranche(30.0, "Sell the final tranche on a break of trend support"),
        ),
        stops=(
            StopLevel(3.0, 50.0, "Close half 3% below average entry"),
            StopLevel(6.0, 50.0, "Close remainder 6% below average entry"),
        ),
        targets=(
            TargetTier(4.0, 50.0, "Take 50% at +4%"),
            TargetTier(8.0, 30.0, "Take 30% at +8%"),
            TargetTier(12.0, 20.0, "Take the final 20% at +12%"),
        ),
        rules=(
            "No leverage while sentiment is in extreme greed",
            "Size refers to the share of exposure to distribute",
            "Do not re-enter until the composite drops below 60",
        ),
    ),
}


def validate_templates(templates: Mapping[StrategyType, PlanTemplate]) -> None:
    """
    Check the template table is total and well-formed.

    Raises:
        InvalidConfigurationError: On a missing strategy or a bad ladder
    """
    missing = [s.value for s in StrategyType if s not in templates]
    if missing:
        raise InvalidConfigurationError(
            f"Trade plan table has no entry for: {missing}",
            details={"missing": missing},
        )

    for strategy, template in templates.items():
        if len(template.entries) != 3:
            raise InvalidConfigurationError(
                f"{strategy.value}: entry ladder must have three tranches"
            )
        entry_total = math.fsum(e.portion_percent for e in template.entries)
        if abs(entry_total - 100.0) > LADDER_TOLERANCE:
            raise InvalidConfigurationError(
                f"{strategy.value}: entry portions sum to {entry_total}, expected 100"
            )
        stop_total = math.fsum(s.portion_percent for s in template.stops)
        if stop_total > 100.0 + LADDER_TOLERANCE:
            raise InvalidConfigurationError(
                f"{strategy.value}: stop portions exceed 100 ({stop_total})"
            )
        target_total = math.fsum(t.portion_percent for t in template.targets)
        if target_total > 100.0 + LADDER_TOLERANCE:
            raise InvalidConfigurationError(
                f"{strategy.value}: target portions exceed 100 ({target_total})"
            )
        if not template.action.methods:
            raise InvalidConfigurationError(f"{strategy.value}: trade action has no methods")


validate_templates(PLAN_TEMPLATES)


class TradePlanBuilder:
    """Deterministic lookup from strategy type to plan."""

    def __init__(self, templates: Optional[Mapping[StrategyType, PlanTemplate]] = None):
        self._templates = dict(templates if templates is not None else PLAN_TEMPLATES)
        validate_templates(self._templates)

    def build_plan(
        self,
        score: int,
        strategy_type: StrategyType,
        position_size_percent: float,
    ) -> DecisionPlan:
        """
        Build the plan for a decided strategy.

        The same inputs always yield an equal DecisionPlan.
        """
        template = self._templates[strategy_type]
        rules = template.rules + (
            f"Commit at most {position_size_percent:.2f}% of maximum exposure",
        )

        plan = DecisionPlan(
            score=score,
            sentiment_label=SentimentLabel.from_score(score),
            strategy_type=strategy_type,
            position_size_percent=position_size_percent,
            trade_action=template.action,
            entries=template.entries,
            stops=template.stops,
            targets=template.targets,
            rules=rules,
        )
        logger.debug(f"Built {strategy_type.value} plan for score {score}")
        return plan


def build_plan(
    score: int,
    strategy_type: StrategyType,
    position_size_percent: float,
) -> DecisionPlan:
    """Convenience wrapper around TradePlanBuilder.build_plan."""
    return TradePlanBuilder().build_plan(score, strategy_type, position_size_percent)
