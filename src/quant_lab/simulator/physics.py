"""Market physics: turn a story of scenes into a synthetic OHLCV series."""

from __future__ import annotations

import random
from typing import Iterable, Optional

from loguru import logger

from quant_lab.simulator.models import DataPoint, InvalidSimulationConfig, Scene

SEED_PRICE = 100.0
TREND_FORCE_SCALE = 0.2
MOMENTUM_SCALE = 0.1
BASE_VOLUME = 1000.0


def validate_story(story: Iterable[Scene]) -> None:
    for position, scene in enumerate(story):
        if scene.duration < 1:
            raise InvalidSimulationConfig(
                f"Scene {position} has non-positive duration: {scene.duration}"
            )


def generate_market_data(story: list[Scene], rng: Optional[random.Random] = None) -> list[DataPoint]:
    """Walk the story tick by tick and emit one bar per tick.

    Price and velocity carry across scene boundaries so the scenes compose one
    continuous path. With momentum the velocity integrates the trend force and
    has no decay, so long high-momentum scenes accelerate without bound.
    """
    validate_story(story)
    rng = rng or random.Random()

    data: list[DataPoint] = []
    price, velocity = SEED_PRICE, 0.0

    for scene in story:
        state = scene.state
        trend_force = state.trend * TREND_FORCE_SCALE
        for _ in range(scene.duration):
            if state.momentum > 0:
                velocity += trend_force * state.momentum * MOMENTUM_SCALE
            else:
                velocity = trend_force

            noise = (rng.random() - 0.5) * state.volatility
            change = velocity + noise

            open_ = price
            close = price + change

            candle_range = abs(change) + state.volatility * 0.5
            high = max(open_, close) + rng.random() * candle_range * 0.5
            low = min(open_, close) - rng.random() * candle_range * 0.5
            volume = BASE_VOLUME * state.volume * (1.0 + rng.random())

            data.append(
                DataPoint(
                    time=len(data),
                    open=open_,
                    high=high,
                    low=low,
                    close=close,
                    volume=volume,
                )
            )
            price = close

    logger.debug("Generated {} bars from {} scenes", len(data), len(story))
    return data
