# src/basket_packer/packing/bin.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from basket_packer.constants import Axis, PutType
from basket_packer.geometry import (
    boxes_overlap,
    interval_overlap,
    overlap_length,
    round_to,
)
from basket_packer.models import Item

logger = logging.getLogger(__name__)

Point = tuple[float, float, float]

# Passes of the gravity settling loop (each pass: height, width, depth)
SETTLE_PASSES = 3


@dataclass(frozen=True)
class Footprint:
    """Resting box of a placed item in the ledger (x1,x2,y1,y2,z1,z2)."""

    x1: float
    x2: float
    y1: float
    y2: float
    z1: float
    z2: float

    def bounds(self) -> tuple[float, float, float, float, float, float]:
        return (self.x1, self.y1, self.z1, self.x2, self.y2, self.z2)

    def span(self, axis: int) -> tuple[float, float]:
        if axis == Axis.WIDTH:
            return self.x1, self.x2
        if axis == Axis.HEIGHT:
            return self.y1, self.y2
        return self.z1, self.z2


@dataclass(frozen=True)
class Proposal:
    """A checked placement, not yet committed to the bin."""

    item: Item
    footprint: Footprint


class Bin:
    """
    Cuboid container that owns placed items.

    Axis mapping: width -> x, height -> y, depth -> z. The z axis is vertical:
    the ledger floor lies at z=0 and support is measured on the x/y footprint.
    """

    def __init__(
        self,
        part_no: str,
        dimensions: tuple[float, float, float],
        max_weight: float,
        corner: int = 0,
        put_type: int = PutType.GENERAL,
    ):
        self.part_no = part_no
        self.width, self.height, self.depth = (float(d) for d in dimensions)
        self.max_weight = float(max_weight)
        self.corner = corner
        self.put_type = put_type

        self.items: list[Item] = []
        self.unfitted_items: list[Item] = []
        self.fit_items: list[Footprint] = [self._floor()]

        self.decimals = 0
        self.fix_point = False
        self.check_stable = False
        self.support_surface_ratio = 0.0

    def _floor(self) -> Footprint:
        return Footprint(0.0, self.width, 0.0, self.height, 0.0, 0.0)

    def format_numbers(self, decimals: int) -> None:
        self.width = round_to(self.width, decimals)
        self.height = round_to(self.height, decimals)
        self.depth = round_to(self.depth, decimals)
        self.decimals = decimals
        self.fit_items[0] = self._floor()

    def configure(self, fix_point: bool, check_stable: bool, support_surface_ratio: float) -> None:
        self.fix_point = fix_point
        self.check_stable = check_stable
        self.support_surface_ratio = support_surface_ratio

    def volume(self) -> float:
        return round_to(self.width * self.height * self.depth, self.decimals)

    def total_weight(self) -> float:
        return sum(item.unit_weight() for item in self.items)

    def _r(self, value: float) -> float:
        return round_to(value, self.decimals)

    def dimensions(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def propose(self, item: Item, pivot: Point) -> Optional[Proposal]:
        """
        Check every allowed rotation of *item* at *pivot*.

        Returns the first rotation that passes bounds, collision, weight and
        (when enabled) stability checks, or None. The weight limit is a hard
        stop for the whole call, not only for the current rotation.
        """
        px, py, pz = (self._r(c) for c in pivot)

        for rotation in item.available_rotations():
            candidate = item.placed_at(rotation, (px, py, pz))
            w, h, d = candidate.realized_dimensions()

            if self.width < self._r(px + w) or self.height < self._r(py + h) or self.depth < self._r(pz + d):
                continue

            bounds = (px, py, pz, self._r(px + w), self._r(py + h), self._r(pz + d))
            # the floor entry has no thickness and never collides
            if any(boxes_overlap(entry.bounds(), bounds) for entry in self.fit_items):
                continue

            loaded = self.total_weight() + item.unit_weight()
            if loaded > self.max_weight:
                logger.debug(f"{item.part_no}: exceeds weight limit {loaded} > {self.max_weight}")
                return None

            x, y, z = px, py, pz
            if self.fix_point:
                x, y, z = self._settle((x, y, z), (w, h, d))

            if self.check_stable and not self._is_stable(x, y, z, w, h):
                continue

            x, y, z = (self._r(c) for c in (x, y, z))
            footprint = Footprint(x, self._r(x + w), y, self._r(y + h), z, self._r(z + d))
            return Proposal(item=candidate.placed_at(rotation, (x, y, z)), footprint=footprint)

        return None

    def commit(self, proposal: Proposal) -> None:
        self.fit_items.append(proposal.footprint)
        self.items.append(proposal.item)

    def try_place(self, item: Item, pivot: Point, axis: Optional[Axis] = None) -> bool:
        """Place a copy of *item* at *pivot* if some rotation fits."""
        proposal = self.propose(item, pivot)
        if proposal is None:
            return False

        self.commit(proposal)
        logger.debug(
            f"placed {item.part_no} at {proposal.item.position} "
            f"rotation={int(proposal.item.rotation)} axis={axis.name if axis is not None else 'origin'}"
        )
        return True

    def attempt_item(self, item: Item) -> bool:
        """
        Try the origin for an empty bin, otherwise the far face of every
        placed item along width, then height, then depth. First fit wins.
        """
        if not self.items:
            placed = self.try_place(item, (0.0, 0.0, 0.0))
        else:
            placed = False
            for axis in Axis:
                for neighbour in self.items:
                    if self.try_place(item, self._pivot(neighbour, axis), axis):
                        placed = True
                        break
                if placed:
                    break

        if not placed:
            self.unfitted_items.append(item)
        return placed

    @staticmethod
    def _pivot(neighbour: Item, axis: Axis) -> Point:
        x, y, z = neighbour.position
        w, h, d = neighbour.realized_dimensions()
        if axis == Axis.WIDTH:
            return (x + w, y, z)
        if axis == Axis.HEIGHT:
            return (x, y + h, z)
        return (x, y, z + d)

    def clear(self) -> None:
        self.items = []
        self.unfitted_items = []
        self.fit_items = [self._floor()]

    # ------------------------------------------------------------------
    # Gravity settling
    # ------------------------------------------------------------------

    def _settle(self, position: Point, dims: Point) -> Point:
        coords = list(position)
        for _ in range(SETTLE_PASSES):
            for axis in (Axis.HEIGHT, Axis.WIDTH, Axis.DEPTH):
                coords[axis] = self._settle_axis(coords, dims, axis)
        return coords[0], coords[1], coords[2]

    def _settle_axis(self, coords: list[float], dims: Point, axis: Axis) -> float:
        """
        Slide along *axis* toward the origin until something stops the item.

        Obstructions are the ledger entries whose projection overlaps the item
        on the two other axes, plus the origin wall. The result is the highest
        far edge at or below the current coordinate that leaves a free gap of
        the item's extent; the current coordinate is kept when none does.
        """
        others = [a for a in Axis if a != axis]
        limit = self.dimensions()[axis]
        extent = dims[axis]
        current = coords[axis]

        blocking = [
            entry.span(axis)
            for entry in self.fit_items
            if all(
                interval_overlap(coords[a], self._r(coords[a] + dims[a]), *entry.span(a))
                for a in others
            )
        ]

        stops = {0.0} | {end for _, end in blocking}
        for stop in sorted((s for s in stops if s <= current), reverse=True):
            end = self._r(stop + extent)
            if end > limit:
                continue
            if any(interval_overlap(stop, end, lo, hi) for lo, hi in blocking):
                continue
            return stop
        return current

    # ------------------------------------------------------------------
    # Stability
    # ------------------------------------------------------------------

    def _is_stable(self, x: float, y: float, z: float, w: float, h: float) -> bool:
        """
        Enough of the base must rest on ledger tops at height z; failing that,
        all four base corners must be supported.
        """
        resting_on = [entry for entry in self.fit_items if entry.z2 == z]

        x2, y2 = self._r(x + w), self._r(y + h)
        base_area = w * h
        support_area = sum(
            overlap_length(x, x2, e.x1, e.x2) * overlap_length(y, y2, e.y1, e.y2)
            for e in resting_on
        )
        if base_area > 0 and support_area / base_area >= self.support_surface_ratio:
            return True

        corners = ((x, y), (x2, y), (x, y2), (x2, y2))
        return all(
            any(e.x1 <= vx <= e.x2 and e.y1 <= vy <= e.y2 for e in resting_on)
            for vx, vy in corners
        )

    def describe(self) -> str:
        return (
            f"{self.part_no}({self.width}x{self.height}x{self.depth}, "
            f"max_weight:{self.max_weight}) vol({self.volume()})"
        )
