"""
Tests for Fear & Greed result models.

============================================================
TEST SCENARIOS
============================================================
1. Sentiment label band edges
2. Score decomposition is read-only and not shared

============================================================
"""

import pytest

from fear_greed import (
    AggregationResult,
    CompositeResult,
    ConfidenceLevel,
    ConfidenceResult,
    FearGreedEngine,
    SentimentLabel,
    aggregate,
)


# ============================================================
# SENTIMENT LABEL
# ============================================================

class TestSentimentLabel:
    """Bands include the lower edge; Extreme Greed includes both."""

    @pytest.mark.parametrize("score,label", [
        (0, SentimentLabel.EXTREME_FEAR),
        (19, SentimentLabel.EXTREME_FEAR),
        (20, SentimentLabel.FEAR),
        (39, SentimentLabel.FEAR),
        (40, SentimentLabel.NEUTRAL),
        (59, SentimentLabel.NEUTRAL),
        (60, SentimentLabel.GREED),
        (79, SentimentLabel.GREED),
        (80, SentimentLabel.EXTREME_GREED),
        (100, SentimentLabel.EXTREME_GREED),
    ])
    def test_band_edges(self, score, label):
        assert SentimentLabel.from_score(score) == label

    def test_label_text(self):
        assert [label.value for label in SentimentLabel] == [
            "Extreme Fear", "Fear", "Neutral", "Greed", "Extreme Greed",
        ]


# ============================================================
# DECOMPOSITION
# ============================================================

class TestContributions:
    """Contributions cannot be changed once a result exists."""

    def test_aggregation_copies_source(self):
        source = {"price": 11.67}
        result = AggregationResult(
            internal_composite=46.68,
            external_composite=0.0,
            final_composite=28,
            raw_composite=28.008,
            contributions=source,
        )
        source["price"] = 99.0

        assert result.contributions["price"] == 11.67
        with pytest.raises(TypeError):
            result.contributions["price"] = 0.0

    def test_composite_read_only(self, greedy_market):
        composite = FearGreedEngine().calculate(greedy_market)

        with pytest.raises(TypeError):
            composite.contributions["price"] = 0.0
        assert composite.to_dict()["contributions"]["price"] == pytest.approx(11.67)

    def test_composite_not_shared_with_aggregation(self, greedy_market):
        aggregation = aggregate(greedy_market)
        composite = CompositeResult(
            score=aggregation.final_composite,
            sentiment_label=SentimentLabel.from_score(aggregation.final_composite),
            confidence=ConfidenceResult(score=86.0, level=ConfidenceLevel.HIGH),
            contributions=aggregation.contributions,
        )

        assert composite.contributions == aggregation.contributions
        assert composite.contributions is not aggregation.contributions
