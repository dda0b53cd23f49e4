# src/pool_sim/io/config.py
from pathlib import Path

import yaml

from pool_sim.config.models import ScenarioModel


def load_scenario(path: str | Path) -> ScenarioModel:
    """Read a YAML scenario file and validate it."""
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: scenario must be a mapping, got {type(raw).__name__}")
    return ScenarioModel.model_validate(raw)
