"""Core rule evaluation logic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from quant_lab.rule_engine.models import Operand, RuleAction, StrategyRule, TriggerType
from quant_lab.simulator.models import FAILSAFE_REASON, DataPoint, EventType, SimulatedEvent

WARMUP_BARS = 20
LABEL_DEBOUNCE_BARS = 5
BOUNCE_DEBOUNCE_BARS = 10
BOUNCE_TOLERANCE = 0.015
FAILSAFE_INDEX = 50


@dataclass(frozen=True)
class RuleCheck:
    triggered: bool
    reason: str = ""


class RuleEngine:
    def __init__(self, rules: Iterable[StrategyRule]) -> None:
        self.rules = list(rules)

    @staticmethod
    def resolve(operand: Operand, point: DataPoint) -> Optional[float]:
        if isinstance(operand, bool):
            return None
        if isinstance(operand, (int, float)):
            return float(operand)
        return point.value(operand)

    @staticmethod
    def describe(operand: Operand) -> str:
        if isinstance(operand, (int, float)) and not isinstance(operand, bool):
            return f"{operand:g}"
        return str(operand)

    @staticmethod
    def event_time(index: int, length: int) -> float:
        return (index / length) * 100.0

    def check_rule(
        self,
        rule: StrategyRule,
        index: int,
        data: list[DataPoint],
        events: list[SimulatedEvent],
    ) -> RuleCheck:
        curr = data[index]
        prev = data[index - 1]
        src = self.resolve(rule.source, curr)
        prev_src = self.resolve(rule.source, prev)
        tgt = self.resolve(rule.target, curr)
        prev_tgt = self.resolve(rule.target, prev)
        if src is None or prev_src is None or tgt is None or prev_tgt is None:
            return RuleCheck(False)

        trigger = rule.trigger
        source, target = self.describe(rule.source), self.describe(rule.target)
        if trigger in (TriggerType.CROSS_ABOVE, TriggerType.ABOVE):
            if prev_src <= prev_tgt and src > tgt:
                return RuleCheck(True, f"{source} crossed above {target}")
        elif trigger in (TriggerType.CROSS_BELOW, TriggerType.BELOW):
            if prev_src >= prev_tgt and src < tgt:
                return RuleCheck(True, f"{source} crossed below {target}")
        elif trigger == TriggerType.SPIKE:
            if prev_src == 0:
                return RuleCheck(False)
            pct_change = (src - prev_src) / prev_src * 100.0
            if pct_change >= rule.spike_threshold():
                return RuleCheck(True, f"{source} spiked {pct_change:.1f}%")
        elif trigger == TriggerType.BOUNCE:
            near = abs(src - tgt) < src * BOUNCE_TOLERANCE
            if near and src > prev_src:
                last_event = events[-1] if events else None
                if last_event is None or index - last_event.index > BOUNCE_DEBOUNCE_BARS:
                    return RuleCheck(True, f"Bounced off {target}")

        return RuleCheck(False)

    @staticmethod
    def debounced(action: RuleAction, index: int, events: list[SimulatedEvent]) -> bool:
        last_similar = next((event for event in reversed(events) if event.label == action.label), None)
        return last_similar is not None and index - last_similar.index <= LABEL_DEBOUNCE_BARS

    def evaluate(self, data: list[DataPoint]) -> list[SimulatedEvent]:
        events: list[SimulatedEvent] = []
        length = len(data)

        for index in range(WARMUP_BARS, length):
            for rule in self.rules:
                check = self.check_rule(rule, index, data, events)
                if not check.triggered:
                    continue
                action = RuleAction(rule.action)
                if self.debounced(action, index, events):
                    continue
                events.append(
                    SimulatedEvent(
                        index=index,
                        time=self.event_time(index, length),
                        type=EventType(action.value),
                        label=action.label,
                        price=data[index].close,
                        reason=check.reason,
                    )
                )

        if not events and self.rules and data:
            events.append(self._failsafe_event(data))
        return events

    def _failsafe_event(self, data: list[DataPoint]) -> SimulatedEvent:
        action = RuleAction(self.rules[0].action)
        index = min(FAILSAFE_INDEX, len(data) - 1)
        logger.debug("No rule fired over {} bars, placing failsafe {} at {}", len(data), action.label, index)
        return SimulatedEvent(
            index=index,
            time=self.event_time(index, len(data)),
            type=EventType(action.value),
            label=action.label,
            price=data[index].close,
            reason=FAILSAFE_REASON,
        )


def evaluate_rules(data: list[DataPoint], rules: Iterable[StrategyRule]) -> list[SimulatedEvent]:
    return RuleEngine(rules).evaluate(data)
