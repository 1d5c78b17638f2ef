"""Configuration models for reproducible lab runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from quant_lab.simulator.models import SimulationConfig


@dataclass(frozen=True)
class LabConfig:
    name: str
    version: str
    simulation: SimulationConfig
    description: Optional[str] = None
    seed: Optional[int] = None
