"""Shared fixtures for Fear & Greed engine tests."""

import pytest

from fear_greed import FearGreedConfig, IndicatorGroup, SubScore


def internal(name, value):
    return SubScore(name=name, value=value, group=IndicatorGroup.INTERNAL)


def external(name, value):
    return SubScore(name=name, value=value, group=IndicatorGroup.EXTERNAL)


@pytest.fixture
def default_config():
    """Default engine configuration."""
    return FearGreedConfig()


@pytest.fixture
def greedy_market():
    """Full nine-indicator run in a greedy market."""
    return [
        internal("price", 77.8),
        internal("volatility", 81.3),
        internal("volume", 97.9),
        internal("impulse", 77.8),
        internal("technical", 84.8),
        external("social", 80.45),
        external("trends", 71.20),
        external("whales", 80.45),
        external("orderBook", 76.55),
    ]


@pytest.fixture
def price_volume_split():
    """Price far ahead of volume, everything else neutral."""
    return [
        internal("price", 80.0),
        internal("volume", 40.0),
        internal("technical", 50.0),
        external("whales", 50.0),
        external("social", 50.0),
    ]
