"""
Pydantic Schemas for the Fear & Greed wire format.

Inbound: sub-score payloads from collaborators / callers.
Outbound: JSON shapes of CompositeResult and DecisionPlan.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import (
    CompositeResult,
    DecisionPlan,
    Evaluation,
    IndicatorGroup,
    ScoreScale,
    SubScore,
)


# =============================================================
# INBOUND SCHEMAS
# =============================================================

class SubScorePayload(BaseModel):
    """One sub-score as supplied by a caller."""
    name: str = Field(min_length=1)
    value: float
    group: IndicatorGroup
    scale: ScoreScale = ScoreScale.PERCENT

    def to_sub_score(self) -> SubScore:
        return SubScore(name=self.name, value=self.value, group=self.group, scale=self.scale)


class EvaluationRequest(BaseModel):
    """
    Request to evaluate one run.

    sub_scores may be a list of payloads or a mapping of
    name -> {value, group, scale}.
    """
    model_config = ConfigDict(populate_by_name=True)

    sub_scores: List[SubScorePayload] = Field(alias="subScores")
    max_position_size: Optional[float] = Field(default=None, alias="maxPositionSize")

    @field_validator("sub_scores", mode="before")
    @classmethod
    def _mapping_to_list(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [
                dict(body, name=name) if isinstance(body, dict) else {"name": name, "value": body}
                for name, body in value.items()
            ]
        return value

    def to_sub_scores(self) -> List[SubScore]:
        return [p.to_sub_score() for p in self.sub_scores]


# =============================================================
# OUTBOUND SCHEMAS
# =============================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ConfidenceSchema(_CamelModel):
    score: float = Field(ge=0, le=100)
    level: str


class DivergenceSchema(_CamelModel):
    type: str
    severity: str
    description: str


class WarningSchema(_CamelModel):
    type: str
    level: str
    message: str


class NoticeSchema(_CamelModel):
    type: str
    name: str
    group: str


class CompositeResultSchema(_CamelModel):
    """JSON shape of CompositeResult."""
    score: int = Field(ge=0, le=100)
    sentiment_label: str = Field(alias="sentimentLabel")
    confidence: ConfidenceSchema
    divergences: List[DivergenceSchema] = Field(default_factory=list)
    warnings: List[WarningSchema] = Field(default_factory=list)
    internal_score: Optional[float] = Field(default=None, alias="internalScore")
    external_score: Optional[float] = Field(default=None, alias="externalScore")
    contributions: Dict[str, float] = Field(default_factory=dict)
    notices: List[NoticeSchema] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: CompositeResult) -> "CompositeResultSchema":
        return cls.model_validate(result.to_dict())


class TradeActionSchema(_CamelModel):
    primary: str
    methods: List[str]


class EntrySchema(_CamelModel):
    portion_percent: float = Field(alias="portionPercent")
    condition: str


class StopSchema(_CamelModel):
    distance_percent: float = Field(alias="distancePercent")
    portion_percent: float = Field(alias="portionPercent")
    description: str


class TargetSchema(_CamelModel):
    gain_percent: float = Field(alias="gainPercent")
    portion_percent: float = Field(alias="portionPercent")
    description: str


class DecisionPlanSchema(_CamelModel):
    """JSON shape of DecisionPlan."""
    score: int
    sentiment_label: str = Field(alias="sentimentLabel")
    strategy_type: str = Field(alias="strategyType")
    position_size_percent: float = Field(ge=0, alias="positionSizePercent")
    trade_action: TradeActionSchema = Field(alias="tradeAction")
    entries: List[EntrySchema]
    stops: List[StopSchema]
    targets: List[TargetSchema]
    rules: List[str] = Field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: DecisionPlan) -> "DecisionPlanSchema":
        return cls.model_validate(plan.to_dict())


class EvaluationResponse(_CamelModel):
    composite: CompositeResultSchema
    plan: DecisionPlanSchema

    @classmethod
    def from_evaluation(cls, evaluation: Evaluation) -> "EvaluationResponse":
        return cls(
            composite=CompositeResultSchema.from_result(evaluation.composite),
            plan=DecisionPlanSchema.from_plan(evaluation.plan),
        )
