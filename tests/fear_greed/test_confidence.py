"""Tests for the confidence estimator."""

import pytest

from fear_greed import (
    ConfidenceEstimator,
    ConfidenceLevel,
    ConfidenceResult,
    ConfidenceThresholds,
    IndicatorGroup,
    InvalidScoreRangeError,
    ScoreScale,
    SubScore,
    estimate_confidence,
)


def _subs(*values):
    return [
        SubScore(name=f"s{i}", value=v, group=IndicatorGroup.INTERNAL)
        for i, v in enumerate(values)
    ]


class TestConfidenceScore:
    """Tests for the dispersion measure."""

    def test_perfect_agreement(self):
        result = estimate_confidence(_subs(50, 50, 50))
        assert result == ConfidenceResult(score=100.0, level=ConfidenceLevel.HIGH)

    def test_more_dispersion_lowers_confidence(self):
        tight = estimate_confidence(_subs(50, 50, 50))
        spread = estimate_confidence(_subs(40, 50, 60))
        wide = estimate_confidence(_subs(10, 50, 90))

        assert tight.score > spread.score > wide.score
        # population std dev of (40, 50, 60) is sqrt(200 / 3)
        assert spread.score == pytest.approx(100 - 2 * (200 / 3) ** 0.5)

    def test_clamped_at_zero(self):
        result = estimate_confidence(_subs(0, 100, 0, 100))
        assert result.score == 0.0
        assert result.level == ConfidenceLevel.LOW

    def test_greedy_market(self, greedy_market):
        result = estimate_confidence(greedy_market)
        assert result.score == pytest.approx(86.06, abs=0.01)
        assert result.level == ConfidenceLevel.HIGH

    def test_empty_input(self):
        result = estimate_confidence([])
        assert result.score == 0.0
        assert result.level == ConfidenceLevel.LOW

    def test_single_score(self):
        assert estimate_confidence(_subs(12.5)).score == 100.0

    def test_signed_unit_rejected(self):
        score = SubScore("social", 0.2, IndicatorGroup.EXTERNAL, ScoreScale.SIGNED_UNIT)
        with pytest.raises(InvalidScoreRangeError):
            estimate_confidence([score])


class TestConfidenceLevel:
    """Tests for level thresholds."""

    @pytest.mark.parametrize("score,level", [
        (100.0, ConfidenceLevel.HIGH),
        (75.0, ConfidenceLevel.HIGH),
        (74.99, ConfidenceLevel.MEDIUM),
        (50.0, ConfidenceLevel.MEDIUM),
        (49.99, ConfidenceLevel.LOW),
        (0.0, ConfidenceLevel.LOW),
    ])
    def test_default_thresholds(self, score, level):
        assert ConfidenceLevel.from_score(score) == level

    def test_custom_thresholds(self):
        estimator = ConfidenceEstimator(ConfidenceThresholds(high_min=90, medium_min=80))
        # std dev 10 -> score 80
        result = estimator.estimate(_subs(40, 60))
        assert result.score == pytest.approx(80.0)
        assert result.level == ConfidenceLevel.MEDIUM
