"""Indicator models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IndicatorType(str, Enum):
    SMA = "sma"
    EMA = "ema"  # accepted for input compatibility, never computed
    RSI = "rsi"
    BOLLINGER = "bollinger"


@dataclass(frozen=True)
class IndicatorConfig:
    id: str
    type: IndicatorType
    period: int
    source: Optional[str] = None
    color: Optional[str] = None

    def source_field(self) -> str:
        return self.source or "close"
