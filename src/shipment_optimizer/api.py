"""FastAPI endpoints for the shipment optimizer."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import ValidationError

from shipment_optimizer.catalog import get_box_type, standard_catalog
from shipment_optimizer.errors import ItemValidationError, PackingError, RateProviderError
from shipment_optimizer.models import BoxType
from shipment_optimizer.optimizer import optimize_shipment
from shipment_optimizer.rates.base import Destination, RateProvider
from shipment_optimizer.rates.service import get_rate_provider, quote_plan

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Shipment Optimizer API",
    description="Box selection and 3D item placement for parcel shipments",
)


def rate_provider() -> RateProvider:
    return get_rate_provider()


def _error_response(payload: dict[str, Any], status_code: int = 422) -> Response:
    return Response(
        content=json.dumps(payload),
        status_code=status_code,
        media_type="application/json",
    )


def _parse_destination(raw: Any) -> Destination:
    """Accept a bare country code or a destination object."""
    if isinstance(raw, str):
        return Destination(country=raw)
    if isinstance(raw, dict):
        return Destination(**raw)
    raise ItemValidationError(
        "destination must be a country code or an object",
        [{"field": "destination", "message": "must be a country code or an object"}],
    )


def _trim(e: Exception) -> str:
    detail = f"{type(e).__name__}: {e}"
    if len(detail) > 300:
        detail = detail[:297] + "..."
    return detail


@app.post("/optimize")
async def optimize(
    request: dict[str, Any],
    provider: RateProvider = Depends(rate_provider),
) -> Any:
    """
    Optimize a shipment.

    Input (request body):
        {
            "boxes": [...],          # optional, defaults to the standard catalog
            "products": [{"id": "A", "dimensions": {...}, "weight": 1.2, "quantity": 2}],
            "options": {...},
            "destination": "US"      # optional, attaches carrier quotes
        }
    """
    try:
        payload = dict(request)
        raw_destination = payload.pop("destination", None)
        destination = _parse_destination(raw_destination) if raw_destination is not None else None

        plan = optimize_shipment(payload)

        if destination is not None:
            quotes = await quote_plan(plan, destination, provider)
            plan["quotes"] = [q.model_dump() for q in quotes]

        logger.info(
            f"boxes={plan['summary']['totalBoxes']}, "
            f"cost={plan['summary']['totalCost']}, "
            f"quotes={len(plan.get('quotes', []))}"
        )
        return plan

    except ItemValidationError as e:
        return _error_response({"error": "VALIDATION_ERROR", "details": e.errors or [{"message": str(e)}]})
    except ValidationError as e:
        return _error_response({"error": "VALIDATION_ERROR", "details": json.loads(e.json())})
    except PackingError as e:
        return _error_response({"error": "PACKING_FAILED", "detail": str(e)})
    except RateProviderError as e:
        logger.warning(f"Rate provider failed: {e}")
        raise HTTPException(status_code=502, detail=f"Rate provider failed: {e}")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"ERROR in /optimize endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=_trim(e))


@app.post("/quote")
async def quote(
    request: dict[str, Any],
    provider: RateProvider = Depends(rate_provider),
) -> Any:
    """
    Quote an already optimized plan.

    Input (request body):
        {"plan": {"shipments": [...]}, "destination": {"country": "CA", "postal_code": "M5V 2T6"}}
    """
    try:
        plan = request.get("plan")
        if not isinstance(plan, dict) or not isinstance(plan.get("shipments"), list):
            raise ItemValidationError(
                "plan with a shipments list is required",
                [{"field": "plan.shipments", "message": "required list"}],
            )
        destination = _parse_destination(request.get("destination") or {})

        quotes = await quote_plan(plan, destination, provider)
        return {
            "provider": provider.name,
            "quotes": [q.model_dump() for q in quotes],
        }

    except ItemValidationError as e:
        return _error_response({"error": "VALIDATION_ERROR", "details": e.errors or [{"message": str(e)}]})
    except (ValidationError, KeyError, TypeError) as e:
        return _error_response({"error": "VALIDATION_ERROR", "details": [{"message": str(e)}]})
    except RateProviderError as e:
        logger.warning(f"Rate provider failed: {e}")
        raise HTTPException(status_code=502, detail=f"Rate provider failed: {e}")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Quote endpoint error: {repr(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=_trim(e))


def _box_dict(b: BoxType) -> dict[str, Any]:
    return {
        "id": b.id,
        "name": b.name,
        "cost": b.cost,
        "innerDims": {"length": b.length, "width": b.width, "height": b.height},
        "maxWeight": b.max_weight,
    }


@app.get("/catalog")
async def catalog() -> dict[str, Any]:
    """Standard box catalog in the request's box format."""
    return {"boxes": [_box_dict(b) for b in standard_catalog()]}


@app.get("/catalog/{preset}")
async def catalog_box(preset: str) -> dict[str, Any]:
    try:
        return _box_dict(get_box_type(preset))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/health")
async def health(provider: RateProvider = Depends(rate_provider)) -> dict[str, Any]:
    return {"ok": True, "rate_provider": provider.name}
