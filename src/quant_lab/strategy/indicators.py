"""Indicator math attached to generated series."""

from __future__ import annotations

from typing import Callable, Iterable

from loguru import logger

from quant_lab.simulator.models import DataPoint, InvalidSimulationConfig
from quant_lab.strategy.models import IndicatorConfig, IndicatorType

RSI_NEUTRAL = 50.0
BOLLINGER_STDDEVS = 2.0


def sma_series(values: list[float], period: int) -> list[float]:
    """Trailing mean; bars before the first full window repeat the raw value."""
    result: list[float] = []
    for index, value in enumerate(values):
        if index < period - 1:
            result.append(value)
            continue
        slice_ = values[index - period + 1 : index + 1]
        result.append(sum(slice_) / period)
    return result


def rsi_series(values: list[float], period: int) -> list[float]:
    """Wilder-smoothed RSI with a flat neutral warm-up through bar ``period``."""
    if not values:
        return []

    gains = 0.0
    losses = 0.0
    for index in range(1, min(period + 1, len(values))):
        delta = values[index] - values[index - 1]
        if delta >= 0:
            gains += delta
        else:
            losses -= delta
    gains /= period
    losses /= period

    result = [RSI_NEUTRAL]
    for index in range(1, len(values)):
        if index <= period:
            result.append(RSI_NEUTRAL)
            continue
        delta = values[index] - values[index - 1]
        gain = delta if delta > 0 else 0.0
        loss = -delta if delta < 0 else 0.0
        gains = (gains * (period - 1) + gain) / period
        losses = (losses * (period - 1) + loss) / period
        rs = gains / (losses or 1.0)
        result.append(100.0 - (100.0 / (1.0 + rs)))
    return result


def bollinger_upper_series(values: list[float], period: int) -> list[float]:
    result: list[float] = []
    for index in range(len(values)):
        slice_ = values[max(0, index - period + 1) : index + 1]
        mean = sum(slice_) / len(slice_)
        variance = sum((value - mean) ** 2 for value in slice_) / len(slice_)
        result.append(mean + BOLLINGER_STDDEVS * variance**0.5)
    return result


_CALCULATORS: dict[IndicatorType, Callable[[list[float], int], list[float]]] = {
    IndicatorType.SMA: sma_series,
    IndicatorType.RSI: rsi_series,
    IndicatorType.BOLLINGER: bollinger_upper_series,
}


def calculate_indicators(data: list[DataPoint], indicators: Iterable[IndicatorConfig]) -> None:
    """Attach one named value per indicator to every bar, in place.

    Unsupported types attach nothing. A repeated id overwrites the earlier one.
    """
    for config in indicators:
        if config.period < 1:
            raise InvalidSimulationConfig(
                f"Indicator {config.id!r} has non-positive period: {config.period}"
            )
        calculator = _CALCULATORS.get(config.type)
        if calculator is None:
            logger.debug("Skipping unsupported indicator {} ({})", config.id, config.type)
            continue

        field = config.source_field()
        source = [point.value(field) for point in data]
        if any(value is None for value in source):
            logger.debug("Skipping indicator {}: unknown source {!r}", config.id, field)
            continue

        for point, value in zip(data, calculator(source, config.period)):
            point.indicators[config.id] = value
