"""
Fear & Greed Engine - Configuration.

============================================================
PURPOSE
============================================================
Process-wide, immutable configuration for the engine:

- WeightTree: two-level weight hierarchy (bucket -> indicator)
- DivergenceThresholds: pairwise disagreement thresholds
- WarningThresholds: risk warning thresholds
- ConfidenceThresholds: High / Medium level boundaries
- DecisionConfig: position ceiling and sizing parameters

Loaded once at startup and passed into the engine explicitly.
Nothing here reads environment variables or global state.

============================================================
VALIDATION
============================================================
All invariants are checked at construction time:
- Bucket weights sum to 1.0 (within 1e-9)
- Each bucket's indicator weights sum to 1.0 (within 1e-9)
- No indicator name appears in both buckets
- max_position_size > 0

Violations raise InvalidConfigurationError before any score
is processed.

============================================================
"""

import math
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .exceptions import InvalidConfigurationError
from .models import IndicatorGroup


WEIGHT_SUM_TOLERANCE = 1e-9


def _default_internal_weights() -> Dict[str, float]:
    return {
        "price": 0.25,
        "volatility": 0.20,
        "volume": 0.20,
        "impulse": 0.20,
        "technical": 0.15,
    }


def _default_external_weights() -> Dict[str, float]:
    return {
        "social": 0.25,
        "trends": 0.20,
        "whales": 0.30,
        "orderBook": 0.25,
    }


def _check_sum(label: str, weights: List[float]) -> None:
    total = math.fsum(weights)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise InvalidConfigurationError(
            f"{label} weights must sum to 1.0, got {total!r}",
            details={"label": label, "sum": total},
        )


# =============================================================
# WEIGHT TREE
# =============================================================


@dataclass(frozen=True)
class WeightTree:
    """
    Two-level weight hierarchy.

    final = internal_composite * internal_weight
          + external_composite * external_weight
    """
    internal_weight: float = 0.6
    external_weight: float = 0.4
    internal: Mapping[str, float] = field(default_factory=_default_internal_weights)
    external: Mapping[str, float] = field(default_factory=_default_external_weights)

    def __post_init__(self) -> None:
        # Read-only copies; the caller keeps no handle on validated weights
        object.__setattr__(self, "internal", MappingProxyType(dict(self.internal)))
        object.__setattr__(self, "external", MappingProxyType(dict(self.external)))

        for label, value in (
            ("internal bucket", self.internal_weight),
            ("external bucket", self.external_weight),
        ):
            if value < 0 or not math.isfinite(value):
                raise InvalidConfigurationError(f"{label} weight must be >= 0, got {value!r}")
        _check_sum("Bucket", [self.internal_weight, self.external_weight])

        for group, weights in (("internal", self.internal), ("external", self.external)):
            if not weights:
                raise InvalidConfigurationError(f"The {group} bucket has no indicators")
            for name, weight in weights.items():
                if weight < 0 or not math.isfinite(weight):
                    raise InvalidConfigurationError(
                        f"Weight for '{name}' must be >= 0, got {weight!r}",
                        details={"name": name, "group": group},
                    )
            _check_sum(f"{group.capitalize()} bucket", list(weights.values()))

        overlap = set(self.internal) & set(self.external)
        if overlap:
            raise InvalidConfigurationError(
                f"Indicators configured in both buckets: {sorted(overlap)}",
                details={"names": sorted(overlap)},
            )

    def bucket_weight(self, group: IndicatorGroup) -> float:
        if group == IndicatorGroup.INTERNAL:
            return self.internal_weight
        return self.external_weight

    def weights_for(self, group: IndicatorGroup) -> Mapping[str, float]:
        if group == IndicatorGroup.INTERNAL:
            return self.internal
        return self.external

    def weight_for(self, name: str, group: IndicatorGroup) -> Optional[float]:
        """Within-bucket weight of `name`, or None if not configured."""
        return self.weights_for(group).get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buckets": {
                "internal": self.internal_weight,
                "external": self.external_weight,
            },
            "internal": dict(self.internal),
            "external": dict(self.external),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeightTree":
        buckets = data.get("buckets", {})
        defaults = cls()
        return cls(
            internal_weight=float(buckets.get("internal", defaults.internal_weight)),
            external_weight=float(buckets.get("external", defaults.external_weight)),
            internal={k: float(v) for k, v in data.get("internal", defaults.internal).items()},
            external={k: float(v) for k, v in data.get("external", defaults.external).items()},
        )


# =============================================================
# RULE THRESHOLDS
# =============================================================


@dataclass(frozen=True)
class DivergenceThresholds:
    """
    Absolute-difference thresholds for the pairwise divergence rules.

    A rule fires when the difference is strictly greater than its threshold.
    """
    price_volume: float = 30.0       # price vs volume        -> high
    technical_whales: float = 30.0   # technical vs whales    -> medium
    social_price: float = 40.0       # social vs price        -> medium

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if value < 0:
                raise InvalidConfigurationError(f"Divergence threshold '{name}' must be >= 0")


@dataclass(frozen=True)
class WarningThresholds:
    """Thresholds for the risk warning rules."""
    extreme_price: float = 90.0          # |price| > 90                  -> high
    low_volume_max: float = 30.0         # volume < 30 and price > 70    -> medium
    low_volume_price_min: float = 70.0
    whale_max: float = 30.0              # whales < 30 and price > 70    -> high
    whale_price_min: float = 70.0

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if value < 0:
                raise InvalidConfigurationError(f"Warning threshold '{name}' must be >= 0")


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Level boundaries for the confidence score."""
    high_min: float = 75.0
    medium_min: float = 50.0

    def __post_init__(self) -> None:
        if not 0 <= self.medium_min <= self.high_min <= 100:
            raise InvalidConfigurationError(
                "Confidence thresholds must satisfy 0 <= medium_min <= high_min <= 100",
                details={"medium_min": self.medium_min, "high_min": self.high_min},
            )


# =============================================================
# DECISION CONFIG
# =============================================================


@dataclass(frozen=True)
class DecisionConfig:
    """
    Position sizing parameters.

    Scores at or beyond the extreme bounds size by extremity;
    everything between uses neutral_size_fraction of the ceiling.
    """
    max_position_size: float = 100.0
    extreme_fear_max: float = 20.0
    extreme_greed_min: float = 80.0
    neutral_size_fraction: float = 0.5
    volatility_damping_divisor: float = 200.0

    # Sub-score used as the volatility input of the decision
    volatility_indicator: str = "volatility"

    def __post_init__(self) -> None:
        if not self.max_position_size > 0:
            raise InvalidConfigurationError(
                f"max_position_size must be > 0, got {self.max_position_size!r}",
                details={"max_position_size": self.max_position_size},
            )
        if not self.volatility_damping_divisor > 0:
            raise InvalidConfigurationError("volatility_damping_divisor must be > 0")
        if not 0 <= self.neutral_size_fraction <= 1:
            raise InvalidConfigurationError("neutral_size_fraction must be within [0, 1]")
        if self.extreme_fear_max >= self.extreme_greed_min:
            raise InvalidConfigurationError("extreme_fear_max must be below extreme_greed_min")


# =============================================================
# MASTER CONFIG
# =============================================================


@dataclass(frozen=True)
class FearGreedConfig:
    """Master configuration for the Fear & Greed engine."""
    weights: WeightTree = field(default_factory=WeightTree)
    divergence: DivergenceThresholds = field(default_factory=DivergenceThresholds)
    warnings: WarningThresholds = field(default_factory=WarningThresholds)
    confidence: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)
    decision: DecisionConfig = field(default_factory=DecisionConfig)

    # Out-of-range tolerance before a score is rejected
    score_epsilon: float = 1e-6

    # Logging
    log_calculations: bool = True

    def __post_init__(self) -> None:
        if self.score_epsilon < 0:
            raise InvalidConfigurationError("score_epsilon must be >= 0")
        if not isinstance(self.log_calculations, bool):
            raise InvalidConfigurationError(
                f"log_calculations must be true or false, got {self.log_calculations!r}",
                details={"log_calculations": self.log_calculations},
            )

    def with_max_position_size(self, max_position_size: float) -> "FearGreedConfig":
        """Return a copy with a different position ceiling."""
        return replace(
            self,
            decision=replace(self.decision, max_position_size=max_position_size),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FearGreedConfig":
        """Build a configuration from a plain mapping (e.g. parsed YAML)."""
        data = data or {}
        try:
            return cls(
                weights=WeightTree.from_dict(data.get("weights", {})),
                divergence=DivergenceThresholds(**_floats(data.get("divergence", {}))),
                warnings=WarningThresholds(**_floats(data.get("warnings", {}))),
                confidence=ConfidenceThresholds(**_floats(data.get("confidence", {}))),
                decision=DecisionConfig(**data.get("decision", {})),
                score_epsilon=float(data.get("score_epsilon", 1e-6)),
                log_calculations=data.get("log_calculations", True),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidConfigurationError(f"Malformed configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> "FearGreedConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        if data is not None and not isinstance(data, dict):
            raise InvalidConfigurationError(f"Top level of {path} must be a mapping")
        return cls.from_dict(data or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weights": self.weights.to_dict(),
            "divergence": asdict(self.divergence),
            "warnings": asdict(self.warnings),
            "confidence": asdict(self.confidence),
            "decision": asdict(self.decision),
            "score_epsilon": self.score_epsilon,
            "log_calculations": self.log_calculations,
        }


def _floats(section: Dict[str, Any]) -> Dict[str, float]:
    return {k: float(v) for k, v in section.items()}


# =============================================================
# DEFAULTS
# =============================================================


def get_default_config() -> FearGreedConfig:
    """Get default configuration."""
    return FearGreedConfig()


def load_config(path: Optional[Path] = None) -> FearGreedConfig:
    """
    Load configuration from file or return defaults.

    Args:
        path: Optional path to a YAML config file

    Returns:
        FearGreedConfig instance

    Raises:
        FileNotFoundError: If path is given but does not exist
        InvalidConfigurationError: If the file content is invalid
    """
    if path is None:
        return get_default_config()
    return FearGreedConfig.from_yaml(Path(path))
