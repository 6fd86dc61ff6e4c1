"""Geometry utilities for the packing engine."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Item

Bounds = tuple[float, float, float, float, float, float]


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1) and (az1 < bz2 and az2 > bz1)


def item_bounds(item: "Item") -> Bounds:
    """Realized bounds of an item at its current position and rotation."""
    x, y, z = item.position
    w, h, d = item.realized_dimensions()
    return (x, y, z, x + w, y + h, z + d)


def intersect(item1: "Item", item2: "Item") -> bool:
    """True when two positioned items share positive volume."""
    return boxes_overlap(item_bounds(item1), item_bounds(item2))


def interval_overlap(start1: float, end1: float, start2: float, end2: float) -> bool:
    """Strict 1-D overlap; shared endpoints do not count."""
    return max(start1, start2) < min(end1, end2)


def overlap_length(start1: float, end1: float, start2: float, end2: float) -> float:
    return max(0.0, min(end1, end2) - max(start1, start2))


def round_to(value: float, decimals: int = 0) -> float:
    """Round half-up to a fixed number of decimal digits (0.5 -> 1, 2.5 -> 3)."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor
