"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from quant_lab.rule_engine.models import StrategyRule
    from quant_lab.strategy.models import IndicatorConfig


OHLCV_FIELDS = ("open", "high", "low", "close", "volume")
FAILSAFE_REASON = "Simulated Entry (Failsafe)"


class InvalidSimulationConfig(ValueError):
    """Raised when a story, indicator or config cannot drive a simulation."""


class EventType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    ALERT = "alert"
    INFO = "info"


@dataclass(frozen=True)
class MarketState:
    trend: float  # -1.0 (hard down) to 1.0 (hard up)
    volatility: float
    momentum: float  # 0.0 means constant speed
    volume: float


@dataclass(frozen=True)
class Scene:
    duration: int
    state: MarketState


@dataclass
class DataPoint:
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    indicators: dict[str, float] = field(default_factory=dict)

    @property
    def price(self) -> float:
        return self.close

    def value(self, key: str) -> Optional[float]:
        if key == "price":
            return self.close
        if key in OHLCV_FIELDS:
            return getattr(self, key)
        return self.indicators.get(key)


@dataclass(frozen=True)
class SimulatedEvent:
    index: int
    time: float  # 0-100 position within the series
    type: EventType
    label: str
    price: float
    reason: str


@dataclass(frozen=True)
class SimulationConfig:
    story: list[Scene]
    indicators: list["IndicatorConfig"] = field(default_factory=list)
    rules: list["StrategyRule"] = field(default_factory=list)


@dataclass(frozen=True)
class SimulationResult:
    data: list[DataPoint]
    events: list[SimulatedEvent]

    @property
    def fallback_used(self) -> bool:
        return any(event.reason == FAILSAFE_REASON for event in self.events)

