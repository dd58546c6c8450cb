"""
Tests for Fear & Greed configuration.

============================================================
TEST SCENARIOS
============================================================
1. Default weight tree sums and values
2. Invalid weight trees rejected at construction
3. Decision / confidence config validation
4. YAML loading and dict round trip

============================================================
"""

import pytest

from fear_greed import (
    ConfidenceThresholds,
    DecisionConfig,
    FearGreedConfig,
    IndicatorGroup,
    InvalidConfigurationError,
    SubScore,
    WeightTree,
    aggregate,
    get_default_config,
    load_config,
)


# ============================================================
# WEIGHT TREE
# ============================================================

class TestWeightTree:
    """Tests for WeightTree validation."""

    def test_default_tree_sums_to_one(self):
        tree = WeightTree()
        assert abs(sum(tree.internal.values()) - 1.0) <= 1e-9
        assert abs(sum(tree.external.values()) - 1.0) <= 1e-9
        assert abs(tree.internal_weight + tree.external_weight - 1.0) <= 1e-9

    def test_default_weights(self):
        tree = WeightTree()
        assert tree.internal_weight == 0.6
        assert tree.external_weight == 0.4
        assert tree.weight_for("price", IndicatorGroup.INTERNAL) == 0.25
        assert tree.weight_for("whales", IndicatorGroup.EXTERNAL) == 0.30

    def test_weight_lookup_respects_bucket(self):
        tree = WeightTree()
        assert tree.weight_for("price", IndicatorGroup.EXTERNAL) is None
        assert tree.weight_for("unknown", IndicatorGroup.INTERNAL) is None

    def test_bucket_weights_must_sum_to_one(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(internal_weight=0.7, external_weight=0.4)

    def test_internal_weights_must_sum_to_one(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(internal={"price": 0.5, "volume": 0.4})

    def test_external_weights_must_sum_to_one(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(external={"social": 0.5, "whales": 0.6})

    def test_tiny_float_error_is_tolerated(self):
        tree = WeightTree(internal={"a": 0.1, "b": 0.2, "c": 0.7})
        assert set(tree.internal) == {"a", "b", "c"}

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(internal={"a": 1.5, "b": -0.5})

    def test_empty_bucket_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(external={})

    def test_name_in_both_buckets_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            WeightTree(
                internal={"price": 1.0},
                external={"price": 1.0},
            )

    def test_source_dict_changes_do_not_leak(self):
        internal = {"a": 1.0}
        tree = WeightTree(
            internal_weight=0.5,
            external_weight=0.5,
            internal=internal,
            external={"b": 1.0},
        )
        internal["a"] = 5.0

        result = aggregate(
            [
                SubScore("a", 100.0, IndicatorGroup.INTERNAL),
                SubScore("b", 100.0, IndicatorGroup.EXTERNAL),
            ],
            tree,
        )
        assert tree.internal["a"] == 1.0
        assert result.final_composite == 100

    def test_weights_are_read_only(self):
        tree = WeightTree()
        with pytest.raises(TypeError):
            tree.external["whales"] = 3.0
        with pytest.raises(TypeError):
            tree.weights_for(IndicatorGroup.INTERNAL)["price"] = 0.9

    def test_to_dict_returns_plain_dicts(self):
        data = WeightTree().to_dict()
        assert type(data["internal"]) is dict
        assert type(data["external"]) is dict


# ============================================================
# OTHER CONFIG SECTIONS
# ============================================================

class TestDecisionAndConfidenceConfig:
    """Tests for decision and confidence configuration."""

    @pytest.mark.parametrize("ceiling", [0, -10])
    def test_non_positive_ceiling_rejected(self, ceiling):
        with pytest.raises(InvalidConfigurationError):
            DecisionConfig(max_position_size=ceiling)

    def test_confidence_thresholds_must_be_ordered(self):
        with pytest.raises(InvalidConfigurationError):
            ConfidenceThresholds(high_min=40, medium_min=60)

    def test_with_max_position_size(self):
        config = get_default_config().with_max_position_size(25)
        assert config.decision.max_position_size == 25
        assert config.weights == WeightTree()

    def test_with_invalid_max_position_size(self):
        with pytest.raises(InvalidConfigurationError):
            get_default_config().with_max_position_size(0)


# ============================================================
# LOADING
# ============================================================

class TestConfigLoading:
    """Tests for YAML loading and serialization."""

    def test_load_config_without_path_returns_defaults(self):
        assert load_config() == FearGreedConfig()

    def test_from_yaml_overrides(self, tmp_path):
        path = tmp_path / "fear_greed.yaml"
        path.write_text(
            "weights:\n"
            "  buckets: {internal: 0.5, external: 0.5}\n"
            "  internal: {price: 1.0}\n"
            "  external: {whales: 1.0}\n"
            "divergence:\n"
            "  price_volume: 25\n"
            "decision:\n"
            "  max_position_size: 40\n"
        )
        config = load_config(path)

        assert config.weights.internal == {"price": 1.0}
        assert config.weights.external_weight == 0.5
        assert config.divergence.price_volume == 25.0
        assert config.divergence.social_price == 40.0
        assert config.decision.max_position_size == 40

    def test_from_yaml_invalid_weights(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("weights:\n  internal: {price: 0.3}\n")
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_from_yaml_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("warnings:\n  not_a_threshold: 5\n")
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_from_yaml_non_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_dict_round_trip(self):
        config = FearGreedConfig()
        assert FearGreedConfig.from_dict(config.to_dict()) == config

    def test_quoted_boolean_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text('log_calculations: "false"\n')
        with pytest.raises(InvalidConfigurationError):
            load_config(path)

    def test_boolean_flag_from_yaml(self, tmp_path):
        path = tmp_path / "quiet.yaml"
        path.write_text("log_calculations: false\n")
        assert load_config(path).log_calculations is False

    @pytest.mark.parametrize("value", ["no", 0, 1, None])
    def test_non_boolean_flag_rejected(self, value):
        with pytest.raises(InvalidConfigurationError):
            FearGreedConfig(log_calculations=value)
