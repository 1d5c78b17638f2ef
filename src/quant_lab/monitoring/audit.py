"""Append-only JSON-lines record of simulation runs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from quant_lab.simulator.models import SimulationResult


@dataclass
class AuditLog:
    path: Path
    run_id: str | None = None
    config_hash: str | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _record(self, event: str, payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "ts": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "config_hash": self.config_hash,
            "event": event,
            "payload": payload,
        }

    def log(self, event: str, payload: dict[str, Any]) -> None:
        line = json.dumps(self._record(event, payload), default=str)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def log_result(self, result: SimulationResult) -> None:
        self.log(
            "simulation_completed",
            {
                "bars": len(result.data),
                "events": len(result.events),
                "fallback_used": result.fallback_used,
                "labels": [event.label for event in result.events],
            },
        )

    def read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]
