"""Data models for strategy rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class TriggerType(str, Enum):
    CROSS_ABOVE = "crossAbove"
    CROSS_BELOW = "crossBelow"
    # ABOVE/BELOW fire only on the transition bar, which makes them
    # equivalent to the cross triggers. Both spellings stay accepted.
    ABOVE = "above"
    BELOW = "below"
    BOUNCE = "bounce"
    SPIKE = "spike"
    DROP = "drop"  # accepted, never fires
    EVERY = "every"  # accepted, never fires


class RuleAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    ALERT = "alert"

    @property
    def label(self) -> str:
        return self.value.upper()


Operand = Union[str, float]


@dataclass(frozen=True)
class StrategyRule:
    trigger: TriggerType
    source: Operand  # "price", "volume", an indicator id, or a literal
    target: Operand
    action: RuleAction
    params: dict[str, Any] = field(default_factory=dict)

    def spike_threshold(self, default: float = 10.0) -> float:
        return float(self.params.get("percent") or default)
