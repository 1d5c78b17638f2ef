"""Config loading."""

from quant_lab.config.loader import compute_config_hash, load_config, serialize_config
from quant_lab.config.models import LabConfig

__all__ = [
    "LabConfig",
    "compute_config_hash",
    "load_config",
    "serialize_config",
]
