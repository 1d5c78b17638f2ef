import random

import pytest

from quant_lab.rule_engine import RuleAction, RuleEngine, StrategyRule, TriggerType, evaluate_rules
from quant_lab.simulator import DataPoint, EventType, generate_market_data
from quant_lab.simulator.engine import run_simulation
from quant_lab.simulator.models import FAILSAFE_REASON, MarketState, Scene
from quant_lab.strategy import IndicatorConfig, IndicatorType, calculate_indicators, compose_market_story
from quant_lab.strategy.parser import parse_strategy_to_config


def _series(closes, volumes=None, **indicators):
    data = []
    for idx, close in enumerate(closes):
        volume = volumes[idx] if volumes is not None else 1000.0
        point = DataPoint(time=idx, open=close, high=close, low=close, close=close, volume=volume)
        for key, values in indicators.items():
            if values[idx] is not None:
                point.indicators[key] = values[idx]
        data.append(point)
    return data


def _assert_debounced(events):
    last_by_label = {}
    for event in events:
        if event.label in last_by_label:
            assert event.index - last_by_label[event.label] >= 5
        last_by_label[event.label] = event.index


def test_cross_above_fires_on_transition_bar():
    closes = [100.0] * 25 + [102.0] * 35
    data = _series(closes, sma=[101.0] * 60)
    rule = StrategyRule(TriggerType.CROSS_ABOVE, "price", "sma", RuleAction.BUY)

    events = evaluate_rules(data, [rule])

    assert [event.index for event in events] == [25]
    event = events[0]
    assert event.type == EventType.BUY
    assert event.label == "BUY"
    assert event.price == 102.0
    assert event.time == pytest.approx(25 / 60 * 100)
    assert event.reason == "price crossed above sma"


def test_above_and_below_match_cross_triggers():
    closes = [100.0] * 25 + [102.0] * 10 + [99.0] * 25
    data = _series(closes, sma=[101.0] * 60)

    for transition, cross, action in (
        (TriggerType.ABOVE, TriggerType.CROSS_ABOVE, RuleAction.BUY),
        (TriggerType.BELOW, TriggerType.CROSS_BELOW, RuleAction.SELL),
    ):
        by_transition = evaluate_rules(data, [StrategyRule(transition, "price", "sma", action)])
        by_cross = evaluate_rules(data, [StrategyRule(cross, "price", "sma", action)])
        assert by_transition == by_cross

    below = evaluate_rules(data, [StrategyRule(TriggerType.BELOW, "price", "sma", RuleAction.SELL)])
    assert [event.index for event in below] == [35]


def test_label_debounce_is_per_action():
    closes = [100.0 if idx % 2 == 0 else 102.0 for idx in range(60)]
    data = _series(closes, sma=[101.0] * 60)
    rules = [
        StrategyRule(TriggerType.CROSS_ABOVE, "price", "sma", RuleAction.BUY),
        StrategyRule(TriggerType.CROSS_BELOW, "price", "sma", RuleAction.SELL),
    ]

    events = evaluate_rules(data, rules)

    assert [(event.index, event.label) for event in events[:4]] == [
        (20, "SELL"),
        (21, "BUY"),
        (26, "SELL"),
        (27, "BUY"),
    ]
    _assert_debounced(events)


def test_warmup_bars_are_skipped():
    closes = [100.0] * 10 + [102.0] * 50
    data = _series(closes, sma=[101.0] * 60)

    events = evaluate_rules(data, [StrategyRule(TriggerType.CROSS_ABOVE, "price", "sma", RuleAction.BUY)])

    assert len(events) == 1
    assert events[0].reason == FAILSAFE_REASON


def test_spike_uses_default_and_custom_threshold():
    rsi = [50.0] * 60
    rsi[30] = 56.0
    data = _series([100.0] * 60, rsi=rsi)

    default = evaluate_rules(data, [StrategyRule(TriggerType.SPIKE, "rsi", 0.0, RuleAction.BUY)])
    assert [event.index for event in default] == [30]
    assert default[0].reason == "rsi spiked 12.0%"

    strict = evaluate_rules(
        data,
        [StrategyRule(TriggerType.SPIKE, "rsi", 0.0, RuleAction.BUY, params={"percent": 15})],
    )
    assert [event.reason for event in strict] == [FAILSAFE_REASON]


def test_spike_from_zero_is_skipped():
    values = [0.0] * 60
    values[30] = 5.0
    data = _series([100.0] * 60, level=values)

    events = evaluate_rules(data, [StrategyRule(TriggerType.SPIKE, "level", 0.0, RuleAction.ALERT)])

    assert [(event.index, event.reason) for event in events] == [(50, FAILSAFE_REASON)]


def _bounce_closes(*bounce_bars):
    closes = [110.0] * 60
    for bar in bounce_bars:
        closes[bar - 1] = 100.2
        closes[bar] = 100.5
    return closes


def test_bounce_has_ten_bar_global_gate():
    data = _series(_bounce_closes(30, 38, 45), sma=[100.0] * 60)

    events = evaluate_rules(data, [StrategyRule(TriggerType.BOUNCE, "price", "sma", RuleAction.BUY)])

    assert [event.index for event in events] == [30, 45]
    assert events[0].reason == "Bounced off sma"


def test_bounce_gate_counts_events_from_other_rules():
    volumes = [1000.0] * 60
    volumes[35] = 2000.0
    data = _series(_bounce_closes(30, 38, 47), volumes=volumes, sma=[100.0] * 60)
    rules = [
        StrategyRule(TriggerType.SPIKE, "volume", 0.0, RuleAction.ALERT, params={"percent": 50}),
        StrategyRule(TriggerType.BOUNCE, "price", "sma", RuleAction.BUY),
    ]

    events = evaluate_rules(data, rules)

    assert [(event.index, event.label) for event in events] == [(30, "BUY"), (35, "ALERT"), (47, "BUY")]


def test_missing_operands_skip_rule():
    closes = [100.0] * 25 + [102.0] * 35
    partial = [None] * 30 + [101.0] * 30
    data = _series(closes, late=partial)
    rules = [
        StrategyRule(TriggerType.CROSS_ABOVE, "price", "late", RuleAction.SELL),
        StrategyRule(TriggerType.CROSS_ABOVE, "price", "missing", RuleAction.BUY),
    ]

    events = evaluate_rules(data, rules)

    assert len(events) == 1
    assert events[0].index == 50
    assert events[0].type == EventType.SELL


def test_fallback_for_flat_market():
    story = [Scene(90, MarketState(trend=0.0, volatility=0.0, momentum=0.0, volume=1.0))]
    data = generate_market_data(story, rng=random.Random(0))
    rule = StrategyRule(TriggerType.SPIKE, "price", 0.0, RuleAction.BUY, params={"percent": 5})

    events = evaluate_rules(data, [rule])

    assert len(events) == 1
    assert events[0].index == 50
    assert events[0].label == "BUY"
    assert events[0].price == data[50].close
    assert events[0].reason == FAILSAFE_REASON


def test_fallback_clamps_to_short_series_and_needs_rules():
    data = _series([100.0] * 30)
    rule = StrategyRule(TriggerType.SPIKE, "price", 0.0, RuleAction.ALERT)

    events = RuleEngine([rule]).evaluate(data)

    assert [event.index for event in events] == [29]
    assert events[0].time == pytest.approx(29 / 30 * 100)
    assert evaluate_rules(data, []) == []
    assert evaluate_rules([], [rule]) == []


def test_unused_triggers_never_fire():
    closes = [100.0 if idx % 2 == 0 else 150.0 for idx in range(60)]
    data = _series(closes)
    rules = [
        StrategyRule(TriggerType.DROP, "price", 0.0, RuleAction.SELL),
        StrategyRule(TriggerType.EVERY, "price", 0.0, RuleAction.BUY),
    ]

    events = evaluate_rules(data, rules)

    assert [event.reason for event in events] == [FAILSAFE_REASON]
    assert events[0].type == EventType.SELL


@pytest.mark.parametrize(
    "text",
    [
        "Buy the dip on the 20 SMA",
        "Short bollinger band breakout",
        "Sell when price crosses below the moving average",
        "Alert on a volume spike in a choppy market",
        "Buy when RSI is oversold",
    ],
)
def test_events_are_ordered_and_debounced(text):
    config = parse_strategy_to_config(text)
    for seed in range(20):
        result = run_simulation(config, rng=random.Random(seed))
        indices = [event.index for event in result.events]
        assert indices == sorted(indices)
        assert result.events
        for event in result.events:
            if event.reason != FAILSAFE_REASON:
                assert 20 <= event.index < len(result.data)
            assert event.time == pytest.approx(event.index / len(result.data) * 100)
        _assert_debounced(result.events)


def test_short_bollinger_breakout_scenario():
    story = compose_market_story("Short bollinger band breakout")
    indicators = [IndicatorConfig(id="bb_upper", type=IndicatorType.BOLLINGER, period=20)]
    rules = [StrategyRule(TriggerType.CROSS_ABOVE, "price", "bb_upper", RuleAction.SELL)]

    for seed in range(10):
        data = generate_market_data(story, rng=random.Random(seed))
        calculate_indicators(data, indicators)
        events = evaluate_rules(data, rules)
        assert events
        assert all(event.type == EventType.SELL for event in events)


def test_rsi_spike_scenario_only_buys():
    story = compose_market_story("Buy when RSI spikes")
    indicators = [IndicatorConfig(id="rsi", type=IndicatorType.RSI, period=14)]
    rules = [
        StrategyRule(TriggerType.SPIKE, "rsi", 0.0, RuleAction.BUY, params={"percent": 10}),
    ]

    for seed in range(10):
        data = generate_market_data(story, rng=random.Random(seed))
        calculate_indicators(data, indicators)
        events = evaluate_rules(data, rules)
        assert events
        assert {event.type for event in events} == {EventType.BUY}


def test_numeric_literals_read_cleanly_in_reasons():
    rsi = [40.0] * 30 + [25.0] * 30
    data = _series([100.0] * 60, rsi=rsi)

    events = evaluate_rules(data, [StrategyRule(TriggerType.BELOW, "rsi", 30.0, RuleAction.BUY)])

    assert [(event.index, event.reason) for event in events] == [(30, "rsi crossed below 30")]
    assert RuleEngine.describe(0.25) == "0.25"
