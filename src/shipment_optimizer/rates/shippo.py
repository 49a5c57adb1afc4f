"""Shippo REST provider: quotes rates for multiple parcels in one shipment."""

from __future__ import annotations

import logging
from typing import Any, Optional

import certifi
import httpx

from shipment_optimizer.config import DEFAULT_SHIPPO_API_URL, OriginAddress
from shipment_optimizer.errors import RateProviderError
from shipment_optimizer.rates.base import (
    Destination,
    QuoteBox,
    RateProvider,
    RateQuote,
    currency_for_country,
)

logger = logging.getLogger(__name__)


def _required(name: str, value: Optional[str]) -> str:
    if not value:
        raise RateProviderError(f"Missing required config: {name}")
    return value


class ShippoProvider(RateProvider):
    name = "shippo"

    def __init__(
        self,
        token: str,
        origin: OriginAddress,
        base_url: str = DEFAULT_SHIPPO_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.origin = origin
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def address_from(self) -> dict[str, Any]:
        o = self.origin
        return {
            "name": o.name,
            "street1": _required("ORIGIN_ADDRESS1", o.address1),
            "city": _required("ORIGIN_CITY", o.city),
            "state": o.state,
            "zip": _required("ORIGIN_POSTAL_CODE", o.postal_code),
            "country": o.country,
            "phone": o.phone,
        }

    @staticmethod
    def address_to(dest: Destination) -> dict[str, Any]:
        return {
            "name": dest.name or "Customer",
            "street1": dest.address1 or "Address Provided At Checkout",
            "city": dest.city or "",
            "state": dest.province or "",
            "zip": dest.postal_code or "",
            "country": (dest.country or "US").upper(),
            "phone": dest.phone or "0000000000",
        }

    @staticmethod
    def parcels(boxes: list[QuoteBox]) -> list[dict[str, Any]]:
        return [
            {
                "length": box.length,
                "width": box.width,
                "height": box.height,
                "distance_unit": "in",
                "weight": max(box.weight, 0.1),
                "mass_unit": "lb",
            }
            for box in boxes
        ]

    async def quote(self, boxes: list[QuoteBox], destination: Destination) -> list[RateQuote]:
        address_to = self.address_to(destination)
        body = {
            "address_from": self.address_from(),
            "address_to": address_to,
            "parcels": self.parcels(boxes),
            "async": False,
        }
        headers = {"Authorization": f"ShippoToken {self.token}"}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=certifi.where(),
                transport=self.transport,
            ) as client:
                response = await client.post("/shipments", json=body, headers=headers)
        except httpx.HTTPError as e:
            raise RateProviderError(f"Shippo request failed: {e}") from e

        if response.status_code >= 400:
            raise RateProviderError(f"Shippo {response.status_code}: {response.text[:500]}")

        rates = response.json().get("rates") or []
        fallback_currency = currency_for_country(address_to["country"])
        quotes: list[RateQuote] = []
        for r in rates:
            try:
                amount = float(r["amount"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping Shippo rate without a numeric amount: {r.get('object_id', r)}")
                continue
            level = r.get("servicelevel") or {}
            level_name = level.get("name") or level.get("token") or ""
            quotes.append(
                RateQuote(
                    service_code=f"{r.get('provider', '')}_{level.get('token') or level.get('name') or ''}".upper(),
                    service_name=f"{r.get('provider', '')} {level_name}".strip(),
                    currency=r.get("currency") or fallback_currency,
                    total=amount,
                    eta_days=r.get("estimated_days"),
                )
            )

        logger.info(f"Shippo returned {len(quotes)} rates for {len(boxes)} parcels")
        quotes.sort(key=lambda q: q.total)
        return quotes
