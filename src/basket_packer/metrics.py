from __future__ import annotations

from basket_packer.geometry import round_to
from basket_packer.io.schemas import BasketInput
from basket_packer.models import Item


def placement_volume(item: Item) -> float:
    w, h, d = item.realized_dimensions()
    return float(w) * float(h) * float(d)


def compute_metrics(basket: BasketInput, placed: list[Item]) -> tuple[float, float, float]:
    """
    Packed weight, packed volume and utilization percent, rounded to 2 places.

    Weights are the caller's unit weights, not the engine's rounded ones.
    """
    total_weight = sum(item.unit_weight() for item in placed)
    used_volume = sum(placement_volume(item) for item in placed)
    container_volume = basket.volume
    utilization = 0.0 if container_volume == 0 else used_volume / container_volume * 100.0
    return round_to(total_weight, 2), round_to(used_volume, 2), round_to(utilization, 2)
