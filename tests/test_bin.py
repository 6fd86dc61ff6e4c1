from __future__ import annotations

from basket_packer.constants import RotationType
from basket_packer.models import Item
from basket_packer.packing.bin import Bin, Footprint


def make_bin(
    dims=(10.0, 10.0, 10.0),
    max_weight: float = 100.0,
    fix_point: bool = True,
    check_stable: bool = True,
    ratio: float = 0.75,
) -> Bin:
    basket = Bin("B", dims, max_weight)
    basket.format_numbers(0)
    basket.configure(fix_point, check_stable, ratio)
    return basket


def box(part_no: str, w: float, h: float, d: float, weight: float = 1.0) -> Item:
    return Item(part_no=part_no, width=w, height=h, depth=d, weight=weight)


def test_first_item_goes_to_origin() -> None:
    basket = make_bin()

    assert basket.attempt_item(box("A", 4, 4, 4)) is True
    assert basket.items[0].position == (0.0, 0.0, 0.0)
    assert basket.fit_items[-1] == Footprint(0.0, 4.0, 0.0, 4.0, 0.0, 4.0)


def test_second_item_is_placed_against_the_first() -> None:
    """The far width face of a placed item is the first pivot tried."""
    basket = make_bin()
    basket.attempt_item(box("A", 4, 4, 4))

    assert basket.attempt_item(box("B", 4, 4, 4)) is True
    assert basket.items[1].position == (4.0, 0.0, 0.0)


def test_collision_rejects_every_rotation() -> None:
    basket = make_bin(check_stable=False)
    basket.try_place(box("A", 4, 4, 4), (0.0, 0.0, 0.0))

    assert basket.try_place(box("B", 2, 2, 2), (1.0, 1.0, 0.0)) is False
    assert len(basket.items) == 1


def test_out_of_bounds_is_rejected() -> None:
    basket = make_bin()

    assert basket.try_place(box("A", 11, 1, 1), (0.0, 0.0, 0.0)) is False


def test_weight_limit_blocks_second_item() -> None:
    """Geometry has room for both; the weight limit stops the second."""
    basket = make_bin(max_weight=10.0)

    assert basket.attempt_item(box("A", 2, 2, 2, weight=6)) is True
    assert basket.attempt_item(box("B", 2, 2, 2, weight=6)) is False
    assert [i.part_no for i in basket.items] == ["A"]
    assert [i.part_no for i in basket.unfitted_items] == ["B"]


def test_rotation_is_tried_when_first_does_not_fit() -> None:
    """An 8x2 item in a 5x10 basket only fits turned on the floor (HWD)."""
    basket = make_bin(dims=(5.0, 10.0, 5.0))

    assert basket.try_place(box("A", 8, 2, 2), (0.0, 0.0, 0.0)) is True
    assert basket.items[0].realized_dimensions() == (2.0, 8.0, 2.0)


def test_fix_point_settles_to_the_floor() -> None:
    """A pivot above the floor drops to z=0 when settling is on."""
    basket = make_bin(fix_point=True, check_stable=True)

    assert basket.try_place(box("A", 2, 2, 2), (0.0, 0.0, 5.0)) is True
    assert basket.items[0].position[2] == 0.0


def test_without_fix_point_item_stays_at_pivot() -> None:
    basket = make_bin(fix_point=False, check_stable=False)

    assert basket.try_place(box("A", 2, 2, 2), (0.0, 0.0, 5.0)) is True
    assert basket.items[0].position == (0.0, 0.0, 5.0)
    assert basket.fit_items[-1].z1 == 5.0


def test_settling_stops_on_top_of_a_placed_item() -> None:
    basket = make_bin(check_stable=False)
    basket.try_place(box("A", 4, 4, 3), (0.0, 0.0, 0.0))

    assert basket.try_place(box("B", 4, 4, 2), (0.0, 0.0, 7.0)) is True
    assert basket.items[1].position == (0.0, 0.0, 3.0)


def test_overhanging_item_is_unstable() -> None:
    """A 8x8 top on a 4x4 base has only a quarter of its base supported."""
    basket = make_bin(fix_point=False, check_stable=True, ratio=0.75)
    basket.try_place(box("A", 4, 4, 2), (0.0, 0.0, 0.0))

    assert basket.try_place(box("B", 8, 8, 2), (0.0, 0.0, 2.0)) is False

    relaxed = make_bin(fix_point=False, check_stable=True, ratio=0.2)
    relaxed.try_place(box("A", 4, 4, 2), (0.0, 0.0, 0.0))
    assert relaxed.try_place(box("B", 8, 8, 2), (0.0, 0.0, 2.0)) is True


def test_four_supported_corners_are_stable() -> None:
    """A bridge over two pillars fails the area ratio but rests on all corners."""
    basket = make_bin(fix_point=False, check_stable=True, ratio=0.9)
    basket.try_place(box("L", 4, 10, 2), (0.0, 0.0, 0.0))
    basket.try_place(box("R", 4, 10, 2), (6.0, 0.0, 0.0))

    assert basket.try_place(box("T", 10, 10, 2), (0.0, 0.0, 2.0)) is True
    assert basket.items[-1].position == (0.0, 0.0, 2.0)


def test_failed_proposal_leaves_bin_untouched() -> None:
    basket = make_bin(max_weight=1.0)
    item = box("A", 2, 2, 2, weight=5)

    assert basket.propose(item, (0.0, 0.0, 0.0)) is None
    assert basket.items == []
    assert len(basket.fit_items) == 1


def test_clear_resets_to_the_floor() -> None:
    basket = make_bin()
    basket.attempt_item(box("A", 2, 2, 2))

    basket.clear()

    assert basket.items == []
    assert basket.fit_items == [Footprint(0.0, 10.0, 0.0, 10.0, 0.0, 0.0)]


def test_unstable_rotation_falls_through_to_the_next() -> None:
    """Lying across a narrow base fails both stability rules; turned along it, the item rests."""
    basket = make_bin(fix_point=False, check_stable=True, ratio=0.75)
    basket.try_place(box("A", 2, 8, 2), (0.0, 0.0, 0.0))

    assert basket.try_place(box("T", 8, 2, 2), (0.0, 0.0, 2.0)) is True
    placed = basket.items[-1]
    assert placed.rotation == RotationType.RT_HWD
    assert placed.position == (0.0, 0.0, 2.0)
    assert placed.realized_dimensions() == (2.0, 8.0, 2.0)


def test_weight_limit_counts_unrounded_weight() -> None:
    """0.4 rounds to 0 but still counts as 0.4 against the limit."""
    basket = make_bin(max_weight=1.0)
    items = [box(f"L{i}", 2, 2, 2, weight=0.4).rounded(0) for i in range(3)]

    assert items[0].weight == 0.0
    assert [basket.attempt_item(item) for item in items] == [True, True, False]
    assert basket.total_weight() <= 1.0


def test_edges_are_compared_after_rounding() -> None:
    """0.2 + 0.1 must reach exactly 0.3 at one decimal."""
    basket = Bin("B", (0.3, 0.1, 0.1), 10)
    basket.format_numbers(1)
    basket.configure(True, True, 0.75)
    items = [box(f"T{i}", 0.1, 0.1, 0.1).rounded(1) for i in range(3)]

    assert [basket.attempt_item(item) for item in items] == [True, True, True]
    assert [i.position[0] for i in basket.items] == [0.0, 0.1, 0.2]
