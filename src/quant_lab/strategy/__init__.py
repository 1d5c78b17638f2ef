"""Strategy text parsing, story composition and indicators."""

from quant_lab.strategy.composer import StoryIntent, compose_market_story
from quant_lab.strategy.indicators import calculate_indicators
from quant_lab.strategy.models import IndicatorConfig, IndicatorType
from quant_lab.strategy.parser import parse_strategy_to_config

__all__ = [
    "IndicatorConfig",
    "IndicatorType",
    "StoryIntent",
    "calculate_indicators",
    "compose_market_story",
    "parse_strategy_to_config",
]
