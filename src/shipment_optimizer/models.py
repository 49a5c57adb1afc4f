from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """Item to ship. Dimensions in inches, weight in pounds."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Identifier of the item")
    length: float = Field(gt=0, description="Length of the item in inches")
    width: float = Field(gt=0, description="Width of the item in inches")
    height: float = Field(gt=0, description="Height of the item in inches")
    weight: float = Field(gt=0, description="Weight of one unit in pounds")
    quantity: int = Field(default=1, ge=1, description="Number of identical units")
    fragile: bool = Field(default=False, description="Item must not ship in an envelope")
    material: Optional[str] = Field(default=None, description="Material tag, e.g. glass")
    name: Optional[str] = Field(default=None, description="Human readable name")

    # Only set on synthetic envelope items: original item id -> units held
    contents: dict[str, int] = Field(default_factory=dict)

    @property
    def dimensions(self) -> tuple[float, float, float]:
        return self.length, self.width, self.height

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


class BoxType(BaseModel):
    """Shipping box type from the catalog, with inner dimensions in inches."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Identifier of the box type")
    cost: float = Field(ge=0, description="Cost of one box in dollars")
    length: float = Field(gt=0, description="Inner length in inches")
    width: float = Field(gt=0, description="Inner width in inches")
    height: float = Field(gt=0, description="Inner height in inches")
    max_weight: float = Field(gt=0, description="Maximum payload in pounds")
    name: Optional[str] = Field(default=None, description="Display name")

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


class Placement(BaseModel):
    """One item unit placed inside a box.

    x runs along the box width, y along the box length, z is the layer offset.
    length/width/height are the oriented dimensions of the unit.
    """

    item_id: str = Field(description="Identifier of the placed item")
    instance: int = Field(ge=0, description="Arena index of the unit within its box trial")
    x: float = Field(ge=0)
    y: float = Field(ge=0)
    z: float = Field(ge=0)
    length: float = Field(gt=0, description="Oriented extent along the box length")
    width: float = Field(gt=0, description="Oriented extent along the box width")
    height: float = Field(gt=0, description="Oriented vertical extent")
    contents: dict[str, int] = Field(default_factory=dict)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


class PackResult(BaseModel):
    """Result of trial-packing one box type."""

    ok: bool = True
    reason: Optional[str] = None
    box_id: str
    placements: list[Placement] = Field(default_factory=list)
    used_volume: float = 0.0
    total_weight: float = 0.0
    box_volume: float = 0.0
    void_ratio: float = 1.0

    @classmethod
    def failure(cls, box: BoxType, reason: str) -> "PackResult":
        return cls(ok=False, reason=reason, box_id=box.id, box_volume=box.volume)


class BoxPacking(BaseModel):
    """A committed box in the shipment plan."""

    box: BoxType
    pack: PackResult
    dim_weight: float = Field(ge=0, description="Chargeable weight in pounds")

    @property
    def fill_percent(self) -> float:
        if self.pack.box_volume <= 0:
            return 0.0
        return self.pack.used_volume / self.pack.box_volume * 100.0


class PlanSummary(BaseModel):
    total_boxes: int = 0
    total_cost: float = 0.0
    total_actual_weight: float = 0.0
    total_chargeable_weight: float = 0.0


class ShipmentPlan(BaseModel):
    packings: list[BoxPacking] = Field(default_factory=list)
    summary: PlanSummary = Field(default_factory=PlanSummary)


class ScoreWeights(BaseModel):
    """Non-negative weights of the box scoring function. Lower score wins."""

    cost: float = Field(default=0.6, ge=0)
    void: float = Field(default=0.25, ge=0)
    dim: float = Field(default=0.1, ge=0)
    count: float = Field(default=0.05, ge=0)


class OptimizeOptions(BaseModel):
    dim_divisor: float = Field(default=139.0, gt=0, description="in^3 per lb")
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    ship_together: Literal["auto", "if_possible", "always"] = "auto"
    envelopes: bool = Field(default=True, description="Group small flat items into envelopes")
    custom_box_base_cost: float = Field(default=2.0, ge=0)
    custom_box_margin: float = Field(default=2.0, ge=0, description="Added to every axis, inches")
    custom_box_min_weight: float = Field(default=5.0, gt=0)
    max_rounds: int = Field(default=10_000, ge=1)
    max_layers: int = Field(default=500, ge=1)
