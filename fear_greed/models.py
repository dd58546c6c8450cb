"""
Fear & Greed Engine - Data Models.

============================================================
CORE DATA STRUCTURES
============================================================

Inputs:
- SubScore: one normalized signal from an upstream indicator

Intermediate:
- AggregationResult: internal / external / final composites
- ConfidenceResult: agreement measure across sub-scores
- Divergence, RiskWarning: rule findings
- DecisionResult: strategy band + position size

Outputs:
- CompositeResult: {score, sentimentLabel, confidence, divergences, warnings}
- DecisionPlan: {strategyType, positionSizePercent, tradeAction,
                 entries, stops, targets}

All structures are created fresh per run and never mutated.
None of them embed timestamps or random identifiers, so two
runs over the same inputs compare equal.

============================================================
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


# =============================================================
# ENUMS
# =============================================================


class IndicatorGroup(str, Enum):
    """Top-level weight bucket an indicator belongs to."""
    INTERNAL = "internal"    # Price-action derived
    EXTERNAL = "external"    # Sentiment / on-chain derived


class ScoreScale(str, Enum):
    """
    Canonical scale of a sub-score.

    Fixed per indicator name, declared once by the collaborator.
    """
    PERCENT = "percent"            # [0, 100]
    SIGNED_UNIT = "signed_unit"    # [-1, 1]

    @property
    def bounds(self) -> Tuple[float, float]:
        """Inclusive (lower, upper) bounds of the scale."""
        if self is ScoreScale.SIGNED_UNIT:
            return (-1.0, 1.0)
        return (0.0, 100.0)


class SentimentLabel(str, Enum):
    """
    Label for the final composite score.

    Bands are closed on the lower edge and open on the upper,
    except Extreme Greed which is closed on both ends.
    """
    EXTREME_FEAR = "Extreme Fear"    # [0, 20)
    FEAR = "Fear"                    # [20, 40)
    NEUTRAL = "Neutral"              # [40, 60)
    GREED = "Greed"                  # [60, 80)
    EXTREME_GREED = "Extreme Greed"  # [80, 100]

    @classmethod
    def from_score(cls, score: float) -> "SentimentLabel":
        if score < 20:
            return cls.EXTREME_FEAR
        elif score < 40:
            return cls.FEAR
        elif score < 60:
            return cls.NEUTRAL
        elif score < 80:
            return cls.GREED
        return cls.EXTREME_GREED


class ConfidenceLevel(str, Enum):
    """Confidence level derived from the confidence score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def from_score(
        cls,
        score: float,
        high_min: float = 75.0,
        medium_min: float = 50.0,
    ) -> "ConfidenceLevel":
        if score >= high_min:
            return cls.HIGH
        elif score >= medium_min:
            return cls.MEDIUM
        return cls.LOW


class Severity(str, Enum):
    """Severity of a divergence or level of a warning."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StrategyType(str, Enum):
    """
    Trading posture, selected purely from the composite score band.

    Bands are non-overlapping and upper-inclusive:
    <=20, <=40, <=60, <=80, >80.
    """
    OVERSOLD_ACCUMULATION = "OVERSOLD_ACCUMULATION"
    CAUTIOUS_BUYING = "CAUTIOUS_BUYING"
    NEUTRAL_RANGING = "NEUTRAL_RANGING"
    CAUTIOUS_PROFIT_TAKING = "CAUTIOUS_PROFIT_TAKING"
    OVERBOUGHT_DISTRIBUTION = "OVERBOUGHT_DISTRIBUTION"

    @classmethod
    def from_score(cls, score: float) -> "StrategyType":
        if score <= 20:
            return cls.OVERSOLD_ACCUMULATION
        elif score <= 40:
            return cls.CAUTIOUS_BUYING
        elif score <= 60:
            return cls.NEUTRAL_RANGING
        elif score <= 80:
            return cls.CAUTIOUS_PROFIT_TAKING
        return cls.OVERBOUGHT_DISTRIBUTION


class TradeActionType(str, Enum):
    """Primary action label of a trade plan."""
    ACCUMULATE = "ACCUMULATE"
    BUILD = "BUILD"
    NEUTRAL = "NEUTRAL"
    LIGHTEN = "LIGHTEN"
    DISTRIBUTE = "DISTRIBUTE"


# =============================================================
# INPUT
# =============================================================


@dataclass(frozen=True)
class SubScore:
    """
    One normalized signal from an external collaborator.

    `name` is unique within a run. `scale` is fixed per name;
    the aggregator and rule checks only accept PERCENT scores.
    """
    name: str
    value: float
    group: IndicatorGroup
    scale: ScoreScale = ScoreScale.PERCENT

    def with_value(self, value: float) -> "SubScore":
        """Return a copy carrying a different value."""
        return replace(self, value=value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "group": self.group.value,
            "scale": self.scale.value,
        }


# =============================================================
# INTERMEDIATE RESULTS
# =============================================================


@dataclass(frozen=True)
class UnusedWeightNotice:
    """A configured indicator that was absent from this run."""
    name: str
    group: IndicatorGroup

    def to_dict(self) -> Dict[str, str]:
        return {"type": "unused_weight", "name": self.name, "group": self.group.value}


@dataclass(frozen=True)
class AggregationResult:
    """
    Output of the weighted aggregator.

    internal_composite / external_composite are unrounded bucket sums.
    final_composite is rounded half away from zero.
    """
    internal_composite: float
    external_composite: float
    final_composite: int
    raw_composite: float
    contributions: Mapping[str, float] = field(default_factory=dict)
    unused_weights: Tuple[UnusedWeightNotice, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "contributions", MappingProxyType(dict(self.contributions)))

    def as_tuple(self) -> Tuple[float, float, int]:
        return (self.internal_composite, self.external_composite, self.final_composite)


@dataclass(frozen=True)
class ConfidenceResult:
    """Agreement measure across all sub-scores."""
    score: float
    level: ConfidenceLevel

    def to_dict(self) -> Dict[str, Any]:
        return {"score": round(self.score, 2), "level": self.level.value}


@dataclass(frozen=True)
class Divergence:
    """A named disagreement between two sub-scores."""
    type: str
    severity: Severity
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "severity": self.severity.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class RiskWarning:
    """A risk condition flagged by the warning generator."""
    type: str
    level: Severity
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "level": self.level.value, "message": self.message}


# =============================================================
# COMPOSITE RESULT
# =============================================================


@dataclass(frozen=True)
class CompositeResult:
    """
    Output of one full composite run.

    `score` is deterministic given the same sub-scores and weight tree.
    """
    score: int
    sentiment_label: SentimentLabel
    confidence: ConfidenceResult
    divergences: Tuple[Divergence, ...] = ()
    warnings: Tuple[RiskWarning, ...] = ()

    # Decomposition
    internal_score: float = 0.0
    external_score: float = 0.0
    contributions: Mapping[str, float] = field(default_factory=dict)
    notices: Tuple[UnusedWeightNotice, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "contributions", MappingProxyType(dict(self.contributions)))

    @property
    def has_divergences(self) -> bool:
        return bool(self.divergences)

    @property
    def high_severity_warnings(self) -> List[RiskWarning]:
        return [w for w in self.warnings if w.level == Severity.HIGH]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "sentimentLabel": self.sentiment_label.value,
            "confidence": self.confidence.to_dict(),
            "divergences": [d.to_dict() for d in self.divergences],
            "warnings": [w.to_dict() for w in self.warnings],
            "internalScore": round(self.internal_score, 4),
            "externalScore": round(self.external_score, 4),
            "contributions": {k: round(v, 4) for k, v in self.contributions.items()},
            "notices": [n.to_dict() for n in self.notices],
        }


# =============================================================
# DECISION / TRADE PLAN
# =============================================================


@dataclass(frozen=True)
class DecisionResult:
    """Output of the decision engine."""
    strategy_type: StrategyType
    position_size_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategyType": self.strategy_type.value,
            "positionSizePercent": round(self.position_size_percent, 4),
        }


@dataclass(frozen=True)
class TradeAction:
    """Primary action label plus ordered execution methods."""
    primary: TradeActionType
    methods: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"primary": self.primary.value, "methods": list(self.methods)}


@dataclass(frozen=True)
class EntryTranche:
    """One tranche of a scaled entry (or scaled exit) ladder."""
    portion_percent: float
    condition: str

    def to_dict(self) -> Dict[str, Any]:
        return {"portionPercent": self.portion_percent, "condition": self.condition}


@dataclass(frozen=True)
class StopLevel:
    """
    Stop-loss rung, expressed relative to the average entry.

    distance_percent is how far below entry the stop sits;
    portion_percent is the share of the position it closes.
    """
    distance_percent: float
    portion_percent: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distancePercent": self.distance_percent,
            "portionPercent": self.portion_percent,
            "description": self.description,
        }


@dataclass(frozen=True)
class TargetTier:
    """Profit-taking tier, expressed relative to the average entry."""
    gain_percent: float
    portion_percent: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gainPercent": self.gain_percent,
            "portionPercent": self.portion_percent,
            "description": self.description,
        }


@dataclass(frozen=True)
class DecisionPlan:
    """
    Structured, human-auditable trade plan.

    Ladders are relative percentages only; absolute price levels
    belong to the caller.
    """
    score: int
    sentiment_label: SentimentLabel
    strategy_type: StrategyType
    position_size_percent: float
    trade_action: TradeAction
    entries: Tuple[EntryTranche, ...]
    stops: Tuple[StopLevel, ...]
    targets: Tuple[TargetTier, ...]
    rules: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "sentimentLabel": self.sentiment_label.value,
            "strategyType": self.strategy_type.value,
            "positionSizePercent": round(self.position_size_percent, 4),
            "tradeAction": self.trade_action.to_dict(),
            "entries": [e.to_dict() for e in self.entries],
            "stops": [s.to_dict() for s in self.stops],
            "targets": [t.to_dict() for t in self.targets],
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class Evaluation:
    """Composite result paired with the plan derived from it."""
    composite: CompositeResult
    plan: DecisionPlan
    decision: Optional[DecisionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "composite": self.composite.to_dict(),
            "plan": self.plan.to_dict(),
        }
