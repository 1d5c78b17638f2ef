"""Load lab configuration files."""

from __future__ import annotations

import hashlib
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from quant_lab.config.models import LabConfig
from quant_lab.rule_engine.models import RuleAction, StrategyRule, TriggerType
from quant_lab.simulator.models import InvalidSimulationConfig, MarketState, Scene, SimulationConfig
from quant_lab.strategy.models import IndicatorConfig, IndicatorType
from quant_lab.strategy.parser import parse_strategy_to_config


def load_config(path: str | Path) -> LabConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = _require(data, "name")
    version = str(_require(data, "version"))
    description = data.get("description")
    seed = data.get("seed")

    if "simulation" in data:
        simulation = _parse_simulation(data["simulation"])
    elif description:
        simulation = parse_strategy_to_config(str(description))
    else:
        raise InvalidSimulationConfig("Config needs either a simulation block or a description")

    return LabConfig(
        name=str(name),
        version=version,
        simulation=simulation,
        description=str(description) if description is not None else None,
        seed=_number(int, seed, "seed") if seed is not None else None,
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise InvalidSimulationConfig("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise InvalidSimulationConfig(f"Missing required config key: {key}")
    return data[key]


def _parse_enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidSimulationConfig(f"Invalid {key}: {value}") from exc


def _mapping(value: Any, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidSimulationConfig(f"{key} must be a mapping: {value!r}")
    return value


def _items(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidSimulationConfig(f"{key} must be a list: {value!r}")
    return value


def _number(cast, value: Any, key: str):
    if isinstance(value, bool):
        raise InvalidSimulationConfig(f"Invalid {key}: {value}")
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise InvalidSimulationConfig(f"Invalid {key}: {value}") from exc


def _parse_operand(value: Any) -> str | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return str(value)


def _parse_simulation(data: dict[str, Any]) -> SimulationConfig:
    data = _mapping(data, "simulation")
    story = [_parse_scene(_mapping(item, "scene")) for item in _items(_require(data, "story"), "story")]
    indicators = [
        _parse_indicator(_mapping(item, "indicator")) for item in _items(data.get("indicators"), "indicators")
    ]
    rules = [_parse_rule(_mapping(item, "rule")) for item in _items(data.get("rules"), "rules")]
    return SimulationConfig(story=story, indicators=indicators, rules=rules)


def _parse_scene(data: dict[str, Any]) -> Scene:
    state = _mapping(data.get("state", data), "scene state")
    duration = _number(int, _require(data, "duration"), "scene duration")
    if duration < 1:
        raise InvalidSimulationConfig(f"Scene duration must be positive: {duration}")
    return Scene(
        duration=duration,
        state=MarketState(
            trend=_number(float, state.get("trend", 0.0), "trend"),
            volatility=_number(float, state.get("volatility", 0.0), "volatility"),
            momentum=_number(float, state.get("momentum", 0.0), "momentum"),
            volume=_number(float, state.get("volume", 1.0), "volume"),
        ),
    )


def _parse_indicator(data: dict[str, Any]) -> IndicatorConfig:
    period = _number(int, _require(data, "period"), "indicator period")
    if period < 1:
        raise InvalidSimulationConfig(f"Indicator period must be positive: {period}")
    return IndicatorConfig(
        id=str(_require(data, "id")),
        type=_parse_enum(IndicatorType, _require(data, "type"), "indicator type"),
        period=period,
        source=data.get("source"),
        color=data.get("color"),
    )


def _parse_rule(data: dict[str, Any]) -> StrategyRule:
    return StrategyRule(
        trigger=_parse_enum(TriggerType, _require(data, "trigger"), "trigger"),
        source=_parse_operand(_require(data, "source")),
        target=_parse_operand(data.get("target", 0.0)),
        action=_parse_enum(RuleAction, _require(data, "action"), "action"),
        params=dict(_mapping(data.get("params") or {}, "rule params")),
    )


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def serialize_config(config: LabConfig, config_hash: Optional[str] = None) -> dict[str, Any]:
    payload = _plain(asdict(config))
    if config_hash is not None:
        payload["config_hash"] = config_hash
    return payload
