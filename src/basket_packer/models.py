from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from basket_packer.constants import (
    ALL_ROTATIONS,
    CUBE_KIND,
    DEFAULT_COLOR,
    NO_UPDOWN_ROTATIONS,
    RotationType,
)
from basket_packer.geometry import round_to


class Item(BaseModel):
    """
    A placeable cuboid.

    Items are frozen: the rounding pass and every placement produce copies,
    so a pool item can be handed to any number of strategy attempts.
    """

    model_config = ConfigDict(frozen=True)

    part_no: str = Field(description="Identifier, unique within a packing run")
    name: str = Field(default="Package", description="Human readable label")
    kind: str = Field(default=CUBE_KIND, description="'cube' allows free rotation")
    width: float = Field(description="Base extent along x")
    height: float = Field(description="Base extent along y")
    depth: float = Field(description="Base extent along z (vertical)")
    weight: float = Field(default=0.0, description="Weight of one unit")
    raw_weight: Optional[float] = Field(default=None, description="Unit weight before rounding")
    level: int = Field(default=1, description="Packing priority, lower first")
    loadbear: float = Field(default=0.0, description="Load-bearing capacity (sort key only)")
    updown: bool = Field(default=False, description="May be turned on its side")
    color: str = Field(default=DEFAULT_COLOR)

    rotation: RotationType = RotationType.RT_WHD
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    decimals: int = 0

    @field_validator("updown")
    @classmethod
    def _cube_only(cls, value: bool, info: ValidationInfo) -> bool:
        # Only cubes may rotate freely
        return bool(value) and info.data.get("kind") == CUBE_KIND

    def unit_weight(self) -> float:
        """Weight as supplied, before any rounding."""
        return self.weight if self.raw_weight is None else self.raw_weight

    def realized_dimensions(self) -> tuple[float, float, float]:
        w, h, d = self.width, self.height, self.depth
        rt = self.rotation
        if rt == RotationType.RT_HWD:
            return (h, w, d)
        if rt == RotationType.RT_HDW:
            return (h, d, w)
        if rt == RotationType.RT_DHW:
            return (d, h, w)
        if rt == RotationType.RT_DWH:
            return (d, w, h)
        if rt == RotationType.RT_WDH:
            return (w, d, h)
        return (w, h, d)

    def available_rotations(self) -> tuple[RotationType, ...]:
        return ALL_ROTATIONS if self.updown else NO_UPDOWN_ROTATIONS

    def volume(self) -> float:
        return round_to(self.width * self.height * self.depth, self.decimals)

    def max_footprint_area(self) -> float:
        """Largest base area this item can stand on."""
        if self.updown:
            a, b, _ = sorted((self.width, self.height, self.depth), reverse=True)
        else:
            a, b = self.width, self.height
        return round_to(a * b, self.decimals)

    def rounded(self, decimals: int) -> "Item":
        """Copy with dimensions and weight rounded to *decimals* digits."""
        return self.model_copy(
            update={
                "raw_weight": self.unit_weight(),
                "width": round_to(self.width, decimals),
                "height": round_to(self.height, decimals),
                "depth": round_to(self.depth, decimals),
                "weight": round_to(self.weight, decimals),
                "decimals": decimals,
            }
        )

    def placed_at(self, rotation: RotationType, position: tuple[float, float, float]) -> "Item":
        return self.model_copy(update={"rotation": rotation, "position": tuple(position)})

    def describe(self) -> str:
        return (
            f"{self.part_no}({self.width}x{self.height}x{self.depth}, weight: {self.weight}) "
            f"pos{self.position} rt({int(self.rotation)}) vol({self.volume()})"
        )


class PackingResult(BaseModel):
    """Outcome of a multi-strategy packing run."""

    success: bool = False
    strategy_used: Optional[str] = None
    fitted_items: int = 0
    total_items: int = 0
    items: list[Item] = Field(default_factory=list, description="Placed copies, in put order")
    unfitted_items: list[Item] = Field(default_factory=list)
