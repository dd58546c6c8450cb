"""
Tests for divergence detection and risk warnings.

============================================================
TEST SCENARIOS
============================================================
1. Each divergence rule fires strictly above its threshold
2. Warnings fire independently and keep table order
3. Rules whose indicators are absent are skipped

============================================================
"""

import pytest

from fear_greed import (
    DIVERGENCE_RULES,
    WARNING_RULES,
    DivergenceDetector,
    DivergenceThresholds,
    IndicatorGroup,
    Severity,
    SubScore,
    WarningGenerator,
    WarningThresholds,
    detect_divergences,
    generate_warnings,
)


def _subs(**values):
    external = {"social", "trends", "whales", "orderBook"}
    return [
        SubScore(
            name=name,
            value=value,
            group=IndicatorGroup.EXTERNAL if name in external else IndicatorGroup.INTERNAL,
        )
        for name, value in values.items()
    ]


# ============================================================
# DIVERGENCES
# ============================================================

class TestDivergences:
    """Tests for the divergence rule table."""

    def test_rule_table_order(self):
        assert [r.type for r in DIVERGENCE_RULES] == [
            "price-volume",
            "technical-whale",
            "social-price",
        ]

    def test_price_volume_split(self, price_volume_split):
        divergences = detect_divergences(price_volume_split)

        assert len(divergences) == 1
        assert divergences[0].type == "price-volume"
        assert divergences[0].severity == Severity.HIGH

    def test_greedy_market_has_none(self, greedy_market):
        assert detect_divergences(greedy_market) == []

    def test_threshold_is_exclusive(self):
        assert detect_divergences(_subs(price=70, volume=40)) == []
        assert len(detect_divergences(_subs(price=70.5, volume=40))) == 1

    def test_technical_whale(self):
        divergences = detect_divergences(_subs(technical=85, whales=40))
        assert [(d.type, d.severity) for d in divergences] == [
            ("technical-whale", Severity.MEDIUM),
        ]

    def test_social_price(self):
        divergences = detect_divergences(_subs(social=10, price=60))
        assert [(d.type, d.severity) for d in divergences] == [
            ("social-price", Severity.MEDIUM),
        ]

    def test_all_rules_fire_in_order(self):
        divergences = detect_divergences(
            _subs(price=90, volume=10, technical=90, whales=10, social=10)
        )
        assert [d.type for d in divergences] == [
            "price-volume",
            "technical-whale",
            "social-price",
        ]

    def test_absent_indicator_skips_rule(self):
        assert detect_divergences(_subs(price=95)) == []

    def test_custom_thresholds(self):
        detector = DivergenceDetector(DivergenceThresholds(price_volume=50))
        assert detector.detect(_subs(price=80, volume=40)) == []

    def test_description_mentions_both_sides(self, price_volume_split):
        description = detect_divergences(price_volume_split)[0].description
        assert "price" in description
        assert "volume" in description


# ============================================================
# WARNINGS
# ============================================================

class TestWarnings:
    """Tests for the warning rule table."""

    def test_rule_table_order(self):
        assert [r.type for r in WARNING_RULES] == [
            "extreme_price",
            "low_volume",
            "whale_divergence",
        ]

    def test_all_warnings_in_order(self):
        warnings = generate_warnings(_subs(price=95, volume=20, whales=10))
        assert [(w.type, w.level) for w in warnings] == [
            ("extreme_price", Severity.HIGH),
            ("low_volume", Severity.MEDIUM),
            ("whale_divergence", Severity.HIGH),
        ]

    def test_extreme_price_only(self):
        warnings = generate_warnings(_subs(price=91))
        assert [w.type for w in warnings] == ["extreme_price"]

    @pytest.mark.parametrize("price", [90.0, 70.0, 20.0])
    def test_no_extreme_price_at_or_below_threshold(self, price):
        assert generate_warnings(_subs(price=price)) == []

    def test_low_volume_needs_strong_price(self):
        assert generate_warnings(_subs(price=70, volume=10)) == []
        assert [w.type for w in generate_warnings(_subs(price=71, volume=10))] == ["low_volume"]

    def test_whale_divergence(self):
        warnings = generate_warnings(_subs(price=75, whales=29))
        assert [(w.type, w.level) for w in warnings] == [("whale_divergence", Severity.HIGH)]

    def test_missing_price_skips_every_rule(self):
        assert generate_warnings(_subs(volume=5, whales=5)) == []

    def test_greedy_market_has_none(self, greedy_market):
        assert generate_warnings(greedy_market) == []

    def test_custom_thresholds(self):
        generator = WarningGenerator(WarningThresholds(extreme_price=80))
        assert [w.type for w in generator.generate(_subs(price=85))] == ["extreme_price"]
