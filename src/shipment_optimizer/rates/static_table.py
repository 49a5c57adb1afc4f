"""Static carrier rate tables: quick estimates without any network access."""

from __future__ import annotations

from pydantic import BaseModel

from shipment_optimizer.rates.base import (
    BoxCharge,
    Destination,
    QuoteBox,
    RateProvider,
    RateQuote,
    currency_for_country,
)


class CarrierRate(BaseModel):
    code: str
    name: str
    base: float
    per_lb: float
    oversize_surcharge: float


# Placeholder tariffs, not any carrier's published rates.
DEFAULT_TABLES: dict[str, list[CarrierRate]] = {
    "US": [
        CarrierRate(code="UPS_GROUND", name="UPS Ground", base=6.5, per_lb=0.7, oversize_surcharge=4.0),
        CarrierRate(code="USPS_PRIORITY", name="USPS Priority", base=5.2, per_lb=0.9, oversize_surcharge=3.0),
        CarrierRate(code="FEDEX_HOME", name="FedEx Home Delivery", base=7.0, per_lb=0.8, oversize_surcharge=4.5),
    ],
    "CA": [
        CarrierRate(code="CANADA_POST_EXPEDITED", name="Canada Post Expedited", base=9.0, per_lb=1.2, oversize_surcharge=5.0),
        CarrierRate(code="PUROLATOR_GROUND", name="Purolator Ground", base=10.0, per_lb=1.1, oversize_surcharge=6.0),
    ],
    "GB": [
        CarrierRate(code="ROYAL_MAIL_TRACKED_48", name="Royal Mail Tracked 48", base=4.2, per_lb=1.0, oversize_surcharge=3.5),
        CarrierRate(code="DPD_LOCAL", name="DPD Local", base=5.0, per_lb=1.1, oversize_surcharge=4.0),
    ],
}


class StaticTableProvider(RateProvider):
    """
    base + per_lb * billed weight + oversize surcharge, per box, per carrier.

    Billed weight is max(actual, volume / dim_divisor), with 1 lb standing
    in for a missing (zero) actual weight. A box is oversize when its largest
    side exceeds oversize_threshold inches. Unknown countries use the US table.
    """

    name = "static"

    def __init__(
        self,
        tables: dict[str, list[CarrierRate]] | None = None,
        dim_divisor: float = 139.0,
        oversize_threshold: float = 22.0,
    ):
        self.tables = tables or DEFAULT_TABLES
        self.dim_divisor = dim_divisor
        self.oversize_threshold = oversize_threshold

    def billed_weight(self, box: QuoteBox) -> float:
        volumetric = box.length * box.width * box.height / self.dim_divisor
        return max(box.weight or 1.0, volumetric)

    def is_oversize(self, box: QuoteBox) -> bool:
        return max(box.length, box.width, box.height) > self.oversize_threshold

    async def quote(self, boxes: list[QuoteBox], destination: Destination) -> list[RateQuote]:
        country = (destination.country or "US").upper()
        if country == "UK":
            country = "GB"
        carriers = self.tables.get(country) or self.tables["US"]
        currency = currency_for_country(country) if country in self.tables else "USD"

        quotes: list[RateQuote] = []
        for carrier in carriers:
            total = 0.0
            breakdown: list[BoxCharge] = []
            for box in boxes:
                weight = self.billed_weight(box)
                cost = carrier.base + carrier.per_lb * weight
                if self.is_oversize(box):
                    cost += carrier.oversize_surcharge
                total += cost
                breakdown.append(BoxCharge(box_id=box.box_id, weight=round(weight, 2), cost=round(cost, 2)))
            quotes.append(
                RateQuote(
                    service_code=carrier.code,
                    service_name=carrier.name,
                    currency=currency,
                    total=round(total, 2),
                    breakdown=breakdown,
                )
            )

        quotes.sort(key=lambda q: q.total)
        return quotes
