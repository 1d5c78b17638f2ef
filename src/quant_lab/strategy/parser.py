"""Heuristic strategy text to simulation config."""

from __future__ import annotations

from quant_lab.rule_engine.models import RuleAction, StrategyRule, TriggerType
from quant_lab.simulator.models import SimulationConfig
from quant_lab.strategy.composer import compose_market_story
from quant_lab.strategy.models import IndicatorConfig, IndicatorType

SMA_INDICATOR = IndicatorConfig(id="sma", type=IndicatorType.SMA, period=20, color="#3b82f6")
RSI_INDICATOR = IndicatorConfig(id="rsi", type=IndicatorType.RSI, period=14, color="#a8a29e")
BOLLINGER_INDICATOR = IndicatorConfig(
    id="bb_upper", type=IndicatorType.BOLLINGER, period=20, color="#a8a29e"
)


def _pick_indicators(text: str) -> list[IndicatorConfig]:
    indicators: list[IndicatorConfig] = []
    if "sma" in text or "moving average" in text or ("rsi" not in text and "bollinger" not in text):
        indicators.append(SMA_INDICATOR)
    if "rsi" in text:
        indicators.append(RSI_INDICATOR)
    if "bollinger" in text or "band" in text:
        indicators.append(BOLLINGER_INDICATOR)
    return indicators


def _pick_rules(text: str) -> list[StrategyRule]:
    if "rsi" in text:
        if "buy" in text:
            return [StrategyRule(TriggerType.BELOW, "rsi", 30.0, RuleAction.BUY)]
        if "spike" in text:
            return [
                StrategyRule(TriggerType.SPIKE, "rsi", 0.0, RuleAction.BUY, params={"percent": 10.0})
            ]
        return [StrategyRule(TriggerType.ABOVE, "rsi", 70.0, RuleAction.SELL)]

    if "bollinger" in text:
        return [StrategyRule(TriggerType.CROSS_ABOVE, "price", "bb_upper", RuleAction.SELL)]

    if "spike" in text:
        return [
            StrategyRule(TriggerType.SPIKE, "price", 0.0, RuleAction.ALERT, params={"percent": 3.0})
        ]

    is_short = "short" in text or "sell" in text
    is_cross = "cross" in text or "break" in text
    if is_short:
        trigger = TriggerType.CROSS_BELOW if is_cross else TriggerType.BOUNCE
        return [StrategyRule(trigger, "price", "sma", RuleAction.SELL)]
    trigger = TriggerType.CROSS_ABOVE if is_cross else TriggerType.BOUNCE
    return [StrategyRule(trigger, "price", "sma", RuleAction.BUY)]


def parse_strategy_to_config(text: str) -> SimulationConfig:
    lowered = text.lower()
    return SimulationConfig(
        story=compose_market_story(lowered),
        indicators=_pick_indicators(lowered),
        rules=_pick_rules(lowered),
    )
