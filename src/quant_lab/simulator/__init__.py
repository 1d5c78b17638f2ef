"""Simulation helpers."""

from quant_lab.simulator.models import (
    DataPoint,
    EventType,
    InvalidSimulationConfig,
    MarketState,
    Scene,
    SimulatedEvent,
    SimulationConfig,
    SimulationResult,
)
from quant_lab.simulator.physics import generate_market_data

__all__ = [
    "DataPoint",
    "EventType",
    "InvalidSimulationConfig",
    "MarketState",
    "Scene",
    "SimulatedEvent",
    "SimulationConfig",
    "SimulationResult",
    "generate_market_data",
]
