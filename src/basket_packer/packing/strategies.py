"""Named parameter presets for the multi-strategy search."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError


class StrategyParams(BaseModel):
    """Arguments of one Packer.pack() call."""

    bigger_first: bool = True
    distribute_items: bool = False
    fix_point: bool = True
    check_stable: bool = True
    support_surface_ratio: float = Field(default=0.75, ge=0, le=1)
    decimals: int = Field(default=0, ge=0)


class PackingStrategy(BaseModel):
    name: str = Field(min_length=1)
    params: StrategyParams = Field(default_factory=StrategyParams)


# Tried in order, strictest support requirement first.
DEFAULT_STRATEGIES: tuple[PackingStrategy, ...] = (
    PackingStrategy(name="Primary Strategy", params=StrategyParams(support_surface_ratio=0.75)),
    PackingStrategy(name="Relaxed Stability", params=StrategyParams(support_surface_ratio=0.5)),
    PackingStrategy(name="Minimal Stability", params=StrategyParams(support_surface_ratio=0.3)),
)


def load_strategies(path: Path | str) -> list[PackingStrategy]:
    """
    Read a strategy table from a JSON file.

    The file holds a list of {"name": ..., "params": {...}} objects; omitted
    params take the defaults of StrategyParams.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read strategy file '{path}': {e}") from e

    if not isinstance(raw, list) or not raw:
        raise ValueError(f"Strategy file '{path}' must contain a non-empty list")

    try:
        strategies = [PackingStrategy.model_validate(entry) for entry in raw]
    except ValidationError as e:
        raise ValueError(f"Invalid strategy in '{path}': {e}") from e

    names = [s.name for s in strategies]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate strategy names in '{path}': {names}")
    return strategies
