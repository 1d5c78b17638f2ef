from __future__ import annotations

import argparse
import json
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from quant_lab.config import compute_config_hash, load_config, serialize_config
from quant_lab.logging_config import setup_logging
from quant_lab.monitoring import AuditLog
from quant_lab.simulator.engine import run_simulation, serialize_result
from quant_lab.strategy import parse_strategy_to_config


def main() -> None:
    parser = argparse.ArgumentParser()
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Strategy description to simulate")
    source.add_argument("--config", help="YAML lab config")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", required=True)
    parser.add_argument("--audit-log", default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(args.log_level)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_hash = None
    config_payload = None
    seed = args.seed
    if args.config:
        config_path = Path(args.config)
        config = load_config(config_path)
        config_hash = compute_config_hash(config_path)
        config_payload = serialize_config(config, config_hash)
        simulation = config.simulation
        if seed is None:
            seed = config.seed
        logger.info("Loaded config {} v{} ({})", config.name, config.version, config_hash[:12])
    else:
        simulation = parse_strategy_to_config(args.text)
        logger.info("Parsed strategy text: {!r}", args.text)

    result = run_simulation(simulation, rng=random.Random(seed))
    logger.info(
        "Simulated {} bars, {} events{}",
        len(result.data),
        len(result.events),
        " (failsafe)" if result.fallback_used else "",
    )

    if args.audit_log:
        audit = AuditLog(args.audit_log, run_id=uuid.uuid4().hex, config_hash=config_hash)
        audit.log_result(result)

    report = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "text": args.text,
        "config": config_payload,
        "seed": seed,
        **serialize_result(result),
    }
    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    logger.info("Wrote {}", output_path)


if __name__ == "__main__":
    main()
