"""Run a full simulation: physics, then indicators, then rules."""

from __future__ import annotations

import random
from typing import Any, Optional

from loguru import logger

from quant_lab.rule_engine.engine import RuleEngine
from quant_lab.simulator.models import SimulationConfig, SimulationResult
from quant_lab.simulator.physics import generate_market_data
from quant_lab.strategy.indicators import calculate_indicators
from quant_lab.strategy.parser import parse_strategy_to_config


def run_simulation(config: SimulationConfig, rng: Optional[random.Random] = None) -> SimulationResult:
    data = generate_market_data(config.story, rng=rng)
    calculate_indicators(data, config.indicators)
    events = RuleEngine(config.rules).evaluate(data)
    logger.debug("Simulation produced {} bars and {} events", len(data), len(events))
    return SimulationResult(data=data, events=events)


def simulate_text(text: str, rng: Optional[random.Random] = None) -> SimulationResult:
    return run_simulation(parse_strategy_to_config(text), rng=rng)


def serialize_result(result: SimulationResult) -> dict[str, Any]:
    return {
        "data": [
            {
                "time": point.time,
                "price": point.close,
                "open": point.open,
                "high": point.high,
                "low": point.low,
                "close": point.close,
                "volume": point.volume,
                **point.indicators,
            }
            for point in result.data
        ],
        "events": [
            {
                "index": event.index,
                "time": event.time,
                "type": event.type.value,
                "label": event.label,
                "price": event.price,
                "reason": event.reason,
            }
            for event in result.events
        ],
    }
