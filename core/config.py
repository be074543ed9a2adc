"""
Allocation configuration.
Always passed into the engine explicitly; nothing here is read as global state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigError


@dataclass(frozen=True)
class AllocationConfig:
    # minimum pledge count for a project to be eligible
    quorum: int = 17
    # payout floor; survivors scaled below it are cut
    min_amount: float = 1500.0
    # fixed pool distributed across surviving projects
    total_amount: float = 30_000_000.0
    max_iterations: int = 10

    # absolute tolerance for the final sum-to-pool check
    tolerance: float = 1e-6

    input_path: str = "./output/outputVerifySig.csv"
    output_path: str = "./output/outputResultsFinal.csv"

    def __post_init__(self) -> None:
        if self.quorum < 0:
            raise ConfigError(f"quorum must be >= 0, got {self.quorum}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.total_amount <= 0:
            raise ConfigError(f"total_amount must be > 0, got {self.total_amount}")
        if self.min_amount < 0:
            raise ConfigError(f"min_amount must be >= 0, got {self.min_amount}")
        if self.tolerance < 0:
            raise ConfigError(f"tolerance must be >= 0, got {self.tolerance}")


_CONFIG_ADAPTER = TypeAdapter(AllocationConfig)


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> AllocationConfig:
    """
    Build an AllocationConfig from an optional JSON file plus keyword overrides.

    Overrides that are None are ignored, so CLI flags can be passed straight through.
    Values are coerced by pydantic ("17" -> 17); unknown keys are rejected.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as fh:
            try:
                loaded = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object.")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})

    known = set(AllocationConfig.__dataclass_fields__)
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    try:
        return _CONFIG_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
