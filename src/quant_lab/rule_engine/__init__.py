"""Rule engine emitting simulated trade events."""

from quant_lab.rule_engine.engine import RuleEngine, evaluate_rules
from quant_lab.rule_engine.models import RuleAction, StrategyRule, TriggerType

__all__ = [
    "RuleAction",
    "RuleEngine",
    "StrategyRule",
    "TriggerType",
    "evaluate_rules",
]
