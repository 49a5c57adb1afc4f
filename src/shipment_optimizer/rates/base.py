"""Rate provider abstraction and the shapes it exchanges."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field

from shipment_optimizer.models import BoxPacking

EU_COUNTRIES = {
    "AT", "BE", "BG", "CY", "CZ", "DE", "DK", "EE", "ES", "FI", "FR", "GR", "HR", "HU",
    "IE", "IT", "LT", "LU", "LV", "MT", "NL", "PL", "PT", "RO", "SE", "SI", "SK",
}


class QuoteBox(BaseModel):
    """One parcel to quote. Dimensions in inches, weight in pounds."""

    box_id: str
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    weight: float = Field(ge=0)

    @classmethod
    def from_packing(cls, bp: BoxPacking) -> "QuoteBox":
        return cls(
            box_id=bp.box.id,
            length=bp.box.length,
            width=bp.box.width,
            height=bp.box.height,
            weight=bp.pack.total_weight,
        )

    @classmethod
    def from_shipment(cls, shipment: dict[str, Any]) -> "QuoteBox":
        """Build from one entry of a formatted plan's "shipments" list."""
        dims = shipment["innerDims"]
        return cls(
            box_id=str(shipment["boxId"]),
            length=float(dims["length"]),
            width=float(dims["width"]),
            height=float(dims["height"]),
            weight=float(shipment.get("packedWeight", 0.0)),
        )


class Destination(BaseModel):
    country: str = "US"
    postal_code: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    address1: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class BoxCharge(BaseModel):
    box_id: str
    weight: float
    cost: float


class RateQuote(BaseModel):
    service_code: str
    service_name: str
    currency: str
    total: float
    breakdown: list[BoxCharge] = Field(default_factory=list)
    eta_days: Optional[int] = None


class RateProvider(ABC):
    """Quotes carrier services for a list of parcels."""

    name: str = "base"

    @abstractmethod
    async def quote(self, boxes: list[QuoteBox], destination: Destination) -> list[RateQuote]:
        raise NotImplementedError


def currency_for_country(country: str | None) -> str:
    c = (country or "US").upper()
    if c == "US":
        return "USD"
    if c == "CA":
        return "CAD"
    if c in ("GB", "UK"):
        return "GBP"
    if c in EU_COUNTRIES:
        return "EUR"
    return "USD"
