"""Wire schemas for optimizer input and their conversion to domain models."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shipment_optimizer.errors import ItemValidationError
from shipment_optimizer.models import BoxType, Item, OptimizeOptions, ScoreWeights


class DimsSchema(BaseModel):
    """Dimensions in inches."""
    length: float = Field(gt=0, description="Length in inches")
    width: float = Field(gt=0, description="Width in inches")
    height: float = Field(gt=0, description="Height in inches")


class BoxSchema(BaseModel):
    """Schema for a catalog box."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    cost: float = Field(ge=0, description="Box cost in dollars")
    inner_dims: DimsSchema = Field(alias="innerDims")
    max_weight: float = Field(gt=0, alias="maxWeight", description="Maximum payload in pounds")
    name: Optional[str] = None

    def to_box_type(self) -> BoxType:
        return BoxType(
            id=self.id,
            cost=self.cost,
            length=self.inner_dims.length,
            width=self.inner_dims.width,
            height=self.inner_dims.height,
            max_weight=self.max_weight,
            name=self.name,
        )


class ProductSchema(BaseModel):
    """Schema for a product line."""
    id: str
    dimensions: DimsSchema
    weight: float = Field(gt=0, description="Unit weight in pounds")
    quantity: int = Field(default=1, ge=1)
    fragile: bool = False
    material: Optional[str] = None
    name: Optional[str] = None

    def to_item(self) -> Item:
        return Item(
            id=self.id,
            length=self.dimensions.length,
            width=self.dimensions.width,
            height=self.dimensions.height,
            weight=self.weight,
            quantity=self.quantity,
            fragile=self.fragile,
            material=self.material,
            name=self.name,
        )


class WeightsSchema(BaseModel):
    cost: float = Field(default=0.6, ge=0)
    void: float = Field(default=0.25, ge=0)
    dim: float = Field(default=0.1, ge=0)
    count: float = Field(default=0.05, ge=0)


class OptionsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dim_divisor: float = Field(default=139.0, gt=0, alias="dimDivisor")
    weights: WeightsSchema = Field(default_factory=WeightsSchema)
    ship_together: Literal["auto", "if_possible", "always"] = Field(default="auto", alias="shipTogether")
    envelopes: bool = True
    custom_box_base_cost: float = Field(default=2.0, ge=0, alias="customBoxBaseCost")
    custom_box_margin: float = Field(default=2.0, ge=0, alias="customBoxMargin")
    custom_box_min_weight: float = Field(default=5.0, gt=0, alias="customBoxMinWeight")

    def to_options(self) -> OptimizeOptions:
        return OptimizeOptions(
            dim_divisor=self.dim_divisor,
            weights=ScoreWeights(**self.weights.model_dump()),
            ship_together=self.ship_together,
            envelopes=self.envelopes,
            custom_box_base_cost=self.custom_box_base_cost,
            custom_box_margin=self.custom_box_margin,
            custom_box_min_weight=self.custom_box_min_weight,
        )


class OptimizeRequestSchema(BaseModel):
    """Schema for an optimization request. Missing boxes means the standard catalog."""
    boxes: Optional[List[BoxSchema]] = None
    products: List[ProductSchema] = Field(min_length=1, description="Products to ship")
    options: OptionsSchema = Field(default_factory=OptionsSchema)


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def parse_request(payload: Any) -> OptimizeRequestSchema:
    """
    Validate a raw request dict.

    Raises ItemValidationError naming the first offending field, with the
    full list of problems on .errors.
    """
    if not isinstance(payload, dict):
        raise ItemValidationError("Request body must be a JSON object")
    try:
        request = OptimizeRequestSchema.model_validate(payload)
    except ValidationError as e:
        errors = [
            {"field": _field_path(err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        first = errors[0]
        raise ItemValidationError(f"Invalid field '{first['field']}': {first['message']}", errors) from e

    seen: set[str] = set()
    errors = []
    for i, product in enumerate(request.products):
        if product.id in seen:
            errors.append({"field": f"products.{i}.id", "message": f"duplicate product id '{product.id}'"})
        seen.add(product.id)
    if errors:
        first = errors[0]
        raise ItemValidationError(f"Invalid field '{first['field']}': {first['message']}", errors)
    return request
