from __future__ import annotations

import logging
from typing import Any

from shipment_optimizer.config import Settings, load_settings
from shipment_optimizer.models import ShipmentPlan
from shipment_optimizer.rates.base import Destination, QuoteBox, RateProvider, RateQuote
from shipment_optimizer.rates.shippo import ShippoProvider
from shipment_optimizer.rates.static_table import StaticTableProvider

logger = logging.getLogger(__name__)


def get_rate_provider(settings: Settings | None = None) -> RateProvider:
    """
    Pick the provider from configuration.

    Shippo needs an API token; without one the static table is used so
    quoting never requires network access.
    """
    settings = settings or load_settings()
    has_token = bool(settings.shippo_api_token)

    if settings.rate_provider == "static" or not has_token:
        if settings.rate_provider == "shippo":
            logger.warning("RATE_PROVIDER=shippo but SHIPPO_API_TOKEN is not set; using static tables")
        return StaticTableProvider()

    return ShippoProvider(
        token=settings.shippo_api_token,
        origin=settings.origin,
        base_url=settings.shippo_api_url,
        timeout=settings.rate_timeout_seconds,
    )


async def quote_boxes(
    boxes: list[QuoteBox],
    destination: Destination | dict[str, Any] | None = None,
    provider: RateProvider | None = None,
) -> list[RateQuote]:
    if not isinstance(destination, Destination):
        destination = Destination(**(destination or {}))
    provider = provider or get_rate_provider()
    return await provider.quote(boxes, destination)


async def quote_plan(
    plan: ShipmentPlan | dict[str, Any],
    destination: Destination | dict[str, Any] | None = None,
    provider: RateProvider | None = None,
) -> list[RateQuote]:
    """Quote a plan (model or formatted dict). Never changes the plan."""
    if isinstance(plan, ShipmentPlan):
        boxes = [QuoteBox.from_packing(bp) for bp in plan.packings]
    else:
        boxes = [QuoteBox.from_shipment(s) for s in plan.get("shipments", [])]
    return await quote_boxes(boxes, destination, provider)
