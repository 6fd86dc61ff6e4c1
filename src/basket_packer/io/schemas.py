"""Data schemas for input/output operations."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from basket_packer.constants import CUBE_KIND


class PackageInput(BaseModel):
    """Schema for a package line; quantity expands into that many units."""
    id: str = Field(min_length=1, description="Package identifier")
    kind: str = Field(default=CUBE_KIND, description="'cube' allows all 6 rotations")
    package_type: str = Field(default="Package", description="Human readable label")
    width: float = Field(gt=0, description="Width of one unit")
    height: float = Field(gt=0, description="Height of one unit")
    depth: float = Field(gt=0, description="Depth of one unit")
    weight: float = Field(gt=0, description="Weight of one unit")
    quantity: int = Field(default=1, ge=1, description="Number of units")

    @property
    def unit_volume(self) -> float:
        return self.width * self.height * self.depth


class BasketInput(BaseModel):
    """Schema for the container packages are packed into."""
    id: str = Field(default="basket", description="Basket identifier")
    width: float = Field(gt=0, description="Width of the basket")
    height: float = Field(gt=0, description="Height of the basket")
    depth: float = Field(gt=0, description="Depth of the basket")
    max_weight: float = Field(gt=0, description="Maximum weight capacity")

    @property
    def dimensions(self) -> Tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth


class PackingRequest(BaseModel):
    """Schema for a packing request."""
    basket: BasketInput
    packages: List[PackageInput] = Field(min_length=1, description="Packages to pack")


class FittedPackage(BaseModel):
    """One placed unit."""
    id: str
    position: Tuple[float, float, float]
    rotation_id: int = Field(ge=0, le=5)
    realized_dimensions: Tuple[float, float, float]


class PackingCalculation(BaseModel):
    """Schema for a packing result."""
    success: bool
    strategy_used: Optional[str] = None
    fitted_items: int = Field(ge=0)
    total_items: int = Field(ge=0)
    placements: List[FittedPackage] = Field(default_factory=list)
    unfitted_ids: List[str] = Field(default_factory=list)
    total_weight: float = 0.0
    total_volume: float = 0.0
    utilization: float = Field(default=0.0, description="Packed volume / basket volume, in percent")


class PackingStats(BaseModel):
    """Aggregate figures for a package list, before packing."""
    total_packages: int
    total_weight: float
    total_volume: float
    heaviest_package: float
    largest_package: float
    average_density: float
