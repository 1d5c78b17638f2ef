import random

from quant_lab.rule_engine import RuleAction, StrategyRule, TriggerType
from quant_lab.simulator import SimulationConfig
from quant_lab.simulator.engine import run_simulation, simulate_text
from quant_lab.strategy import IndicatorConfig, IndicatorType, compose_market_story


for text in ["Buy the dip on the 20 SMA", "Short bollinger band breakout", "Alert me on a volume spike"]:
    result = simulate_text(text, rng=random.Random(1))
    print(text)
    for event in result.events:
        print(f"  bar {event.index:>3} {event.label:<5} @ {event.price:8.2f}  {event.reason}")

config = SimulationConfig(
    story=compose_market_story("Buy when RSI spikes"),
    indicators=[IndicatorConfig(id="rsi", type=IndicatorType.RSI, period=14)],
    rules=[
        StrategyRule(
            trigger=TriggerType.SPIKE,
            source="rsi",
            target=0.0,
            action=RuleAction.BUY,
            params={"percent": 10},
        )
    ],
)
result = run_simulation(config, rng=random.Random(2))
print("RSI spikes:", [(event.index, event.label) for event in result.events])
print("Final close:", round(result.data[-1].close, 2))
