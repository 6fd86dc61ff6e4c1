"""Adapter between package/basket business records and the packing engine."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from basket_packer.geometry import round_to
from basket_packer.io.schemas import (
    BasketInput,
    FittedPackage,
    PackageInput,
    PackingCalculation,
    PackingRequest,
    PackingStats,
)
from basket_packer.metrics import compute_metrics
from basket_packer.models import Item, PackingResult
from basket_packer.packing.packer import pack_with_strategies
from basket_packer.packing.strategies import PackingStrategy

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 1
LOADBEAR_PER_WEIGHT = 10


def packages_to_items(packages: Sequence[PackageInput]) -> list[Item]:
    """One Item per physical unit; ids are '<package id>_<index>'."""
    items: list[Item] = []
    for pkg in packages:
        for i in range(pkg.quantity):
            items.append(
                Item(
                    part_no=f"{pkg.id}_{i}",
                    name=pkg.package_type,
                    kind=pkg.kind,
                    width=pkg.width,
                    height=pkg.height,
                    depth=pkg.depth,
                    weight=pkg.weight,
                    level=DEFAULT_LEVEL,
                    loadbear=pkg.weight * LOADBEAR_PER_WEIGHT,
                    # only honoured for cubes
                    updown=True,
                )
            )
    return items


def calculate_packing(
    request: PackingRequest,
    strategies: Optional[Sequence[PackingStrategy]] = None,
    max_workers: int = 1,
) -> PackingCalculation:
    """Pack every unit of the request's packages into its basket."""
    items = packages_to_items(request.packages)
    basket = request.basket

    logger.info(
        f"basket {basket.id}: {basket.width}x{basket.height}x{basket.depth} "
        f"(max weight: {basket.max_weight}), {len(items)} units"
    )
    for item in items[:5]:
        logger.debug(f"  {item.describe()} updown={item.updown}")

    result = pack_with_strategies(
        items,
        basket.dimensions,
        basket.max_weight,
        strategies=strategies,
        max_workers=max_workers,
    )
    return convert_result(result, basket)


def convert_result(result: PackingResult, basket: BasketInput) -> PackingCalculation:
    placements = [
        FittedPackage(
            id=placed.part_no,
            position=placed.position,
            rotation_id=int(placed.rotation),
            realized_dimensions=placed.realized_dimensions(),
        )
        for placed in result.items
    ]
    total_weight, total_volume, utilization = compute_metrics(basket, result.items)

    return PackingCalculation(
        success=result.success,
        strategy_used=result.strategy_used,
        fitted_items=result.fitted_items,
        total_items=result.total_items,
        placements=placements,
        unfitted_ids=[item.part_no for item in result.unfitted_items],
        total_weight=total_weight,
        total_volume=total_volume,
        utilization=utilization,
    )


def packing_stats(packages: Sequence[PackageInput]) -> PackingStats:
    total_weight = sum(pkg.weight * pkg.quantity for pkg in packages)
    total_volume = sum(pkg.unit_volume * pkg.quantity for pkg in packages)
    heaviest = max((pkg.weight for pkg in packages), default=0.0)
    largest = max((pkg.unit_volume for pkg in packages), default=0.0)
    density = total_weight / total_volume if total_volume > 0 else 0.0

    return PackingStats(
        total_packages=sum(pkg.quantity for pkg in packages),
        total_weight=round_to(total_weight, 2),
        total_volume=round_to(total_volume, 2),
        heaviest_package=heaviest,
        largest_package=largest,
        average_density=round_to(density, 3),
    )
