# src/basket_packer/packing/packer.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, Optional, Sequence

from basket_packer.constants import PutType
from basket_packer.models import Item, PackingResult
from basket_packer.packing.bin import Bin
from basket_packer.packing.strategies import DEFAULT_STRATEGIES, PackingStrategy

logger = logging.getLogger(__name__)

TEST_BIN_NAME = "Basket_Test"


def item_sort_key(item: Item, bigger_first: bool) -> tuple[float, float, float]:
    """Level ascending, then load bearing descending, then volume."""
    volume = item.volume()
    return (item.level, -item.loadbear, -volume if bigger_first else volume)


class Packer:
    """
    Places a pool of items into one or more bins.

    A Packer holds the state of a single packing attempt; build a new one for
    every attempt.
    """

    def __init__(self):
        self.bins: list[Bin] = []
        self.items: list[Item] = []
        self.unfit_items: list[Item] = []

    def add_bin(self, basket: Bin) -> None:
        self.bins.append(basket)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def pack(
        self,
        bigger_first: bool = False,
        distribute_items: bool = True,
        fix_point: bool = True,
        check_stable: bool = True,
        support_surface_ratio: float = 0.75,
        decimals: int = 0,
    ) -> None:
        """
        Single packing pass over every bin.

        An item placed in one bin leaves the pool before the next bin is
        filled, so no item is consumed twice. Items never placed in any bin
        end up in unfit_items. distribute_items is accepted from strategy
        tables but does not change which items a bin sees.
        """
        for basket in self.bins:
            basket.format_numbers(decimals)
            basket.configure(fix_point, check_stable, support_surface_ratio)

        self.items = [item.rounded(decimals) for item in self.items]

        self.bins.sort(key=lambda b: b.volume(), reverse=bigger_first)
        # sorted() is stable: equal keys keep insertion order
        self.items = sorted(self.items, key=lambda item: item_sort_key(item, bigger_first))

        for basket in self.bins:
            for item in self.items:
                basket.attempt_item(item)

            in_basket = {placed.part_no for placed in basket.items}
            self.items = [item for item in self.items if item.part_no not in in_basket]

        self.put_order()

        self.unfit_items.extend(self.items)
        self.items = []

    def put_order(self) -> None:
        for basket in self.bins:
            if basket.put_type == PutType.OPEN_TOP:
                basket.items.sort(key=lambda i: (i.position[0], i.position[1], i.position[2]))
            elif basket.put_type == PutType.GENERAL:
                basket.items.sort(key=lambda i: (i.position[0], i.position[2], i.position[1]))


def _invalid_input(items: Sequence[Item], dimensions: Sequence[float]) -> Optional[str]:
    if any(d <= 0 for d in dimensions):
        return f"Invalid basket dimensions: {tuple(dimensions)}"
    for item in items:
        if item.width <= 0 or item.height <= 0 or item.depth <= 0 or item.weight <= 0:
            return (
                f"Invalid package dimensions for {item.part_no}: "
                f"{item.width}x{item.height}x{item.depth}, weight: {item.weight}"
            )
    return None


def run_strategy(
    strategy: PackingStrategy,
    items: Sequence[Item],
    dimensions: tuple[float, float, float],
    max_weight: float,
) -> Bin:
    """One isolated attempt: fresh Packer, fresh Bin, all items."""
    packer = Packer()
    basket = Bin(TEST_BIN_NAME, dimensions, max_weight, corner=0, put_type=PutType.GENERAL)
    packer.add_bin(basket)
    for item in items:
        packer.add_item(item)

    params = strategy.params
    packer.pack(
        bigger_first=params.bigger_first,
        distribute_items=params.distribute_items,
        fix_point=params.fix_point,
        check_stable=params.check_stable,
        support_surface_ratio=params.support_surface_ratio,
        decimals=params.decimals,
    )
    return packer.bins[0]


def _result_from_bin(strategy: PackingStrategy, basket: Bin, total: int) -> PackingResult:
    fitted = len(basket.items)
    return PackingResult(
        success=fitted == total,
        strategy_used=strategy.name,
        fitted_items=fitted,
        total_items=total,
        items=list(basket.items),
        unfitted_items=list(basket.unfitted_items),
    )


def _safe_run(
    strategy: PackingStrategy,
    items: Sequence[Item],
    dimensions: tuple[float, float, float],
    max_weight: float,
) -> Optional[Bin]:
    try:
        return run_strategy(strategy, items, dimensions, max_weight)
    except Exception as e:
        logger.error(f"{strategy.name} failed: {e}", exc_info=True)
        return None


def _attempts(
    strategies: Sequence[PackingStrategy],
    items: Sequence[Item],
    dimensions: tuple[float, float, float],
    max_weight: float,
    max_workers: int,
) -> Iterator[tuple[PackingStrategy, Optional[Bin]]]:
    """Yield (strategy, basket) in strategy order; sequential runs are lazy."""
    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            bins = list(pool.map(lambda s: _safe_run(s, items, dimensions, max_weight), strategies))
        yield from zip(strategies, bins)
        return

    for strategy in strategies:
        logger.info(f"Trying {strategy.name}...")
        yield strategy, _safe_run(strategy, items, dimensions, max_weight)


def pack_with_strategies(
    items: Iterable[Item],
    dimensions: tuple[float, float, float],
    max_weight: float,
    strategies: Optional[Sequence[PackingStrategy]] = None,
    max_workers: int = 1,
) -> PackingResult:
    """
    Best packing of *items* into one container across a list of strategies.

    - Invalid input fails immediately with every item unfitted
    - The first strategy that fits every item wins
    - Otherwise the strategy with the most fitted items wins (earliest on ties)

    With max_workers > 1 all strategies run on a thread pool and the same
    precedence is applied once every attempt has finished.
    """
    items = list(items)
    strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)
    dimensions = (float(dimensions[0]), float(dimensions[1]), float(dimensions[2]))
    total = len(items)

    if not items:
        return PackingResult(success=False, fitted_items=0, total_items=0)

    problem = _invalid_input(items, dimensions)
    if problem is not None:
        logger.error(problem)
        return PackingResult(success=False, fitted_items=0, total_items=total, unfitted_items=items)

    best: Optional[PackingResult] = None

    for strategy, basket in _attempts(strategies, items, dimensions, max_weight, max_workers):
        if basket is None:
            continue

        result = _result_from_bin(strategy, basket, total)
        logger.info(f"{strategy.name}: {result.fitted_items}/{total} items fitted")

        if result.fitted_items == total:
            logger.info(f"{strategy.name} packed all items successfully")
            return result

        if result.fitted_items > (best.fitted_items if best else 0):
            best = result

    if best is not None:
        logger.info(f"Best result: {best.strategy_used} packed {best.fitted_items}/{total} items")
        return best

    logger.info("All packing strategies failed")
    return PackingResult(success=False, fitted_items=0, total_items=total, unfitted_items=items)
