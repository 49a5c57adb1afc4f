"""Top-level entry point: request dict in, shipment plan dict out."""

from __future__ import annotations

import logging
import time
from typing import Any

from shipment_optimizer.catalog import standard_catalog
from shipment_optimizer.io.schemas import parse_request
from shipment_optimizer.metrics import naive_baseline_cost, round2
from shipment_optimizer.models import BoxType, Item, OptimizeOptions, ShipmentPlan
from shipment_optimizer.packing.envelopes import group_for_envelopes
from shipment_optimizer.packing.multi_box import check_unique_ids, select_boxes

logger = logging.getLogger(__name__)

NAIVE_COST_PER_ITEM = 9.00


def optimize(
    items: list[Item],
    catalog: list[BoxType] | None = None,
    options: OptimizeOptions | None = None,
) -> ShipmentPlan:
    """Run the envelope pre-pass (when enabled) and the multi-box selector."""
    options = options or OptimizeOptions()
    catalog = standard_catalog() if catalog is None else catalog

    check_unique_ids(items)
    work = group_for_envelopes(items).items if options.envelopes else list(items)

    started = time.perf_counter()
    plan = select_boxes(work, catalog, options)
    elapsed_ms = (time.perf_counter() - started) * 1000

    logger.info(
        f"items={sum(it.quantity for it in items)}, boxes={plan.summary.total_boxes}, "
        f"cost={plan.summary.total_cost:.2f}, elapsed_ms={elapsed_ms:.1f}"
    )
    return plan


def format_plan(plan: ShipmentPlan) -> dict[str, Any]:
    """Render a plan as the JSON-shaped output document."""
    shipments = []
    for bp in plan.packings:
        box, pack = bp.box, bp.pack
        items = []
        for p in pack.placements:
            entry: dict[str, Any] = {
                "id": p.item_id,
                "pos": {"x": round2(p.x), "y": round2(p.y), "z": round2(p.z)},
                "dims": {"length": p.length, "width": p.width, "height": p.height},
            }
            if p.contents:
                entry["contents"] = dict(p.contents)
            items.append(entry)

        shipments.append({
            "boxId": box.id,
            "cost": round2(box.cost),
            "innerDims": {"length": box.length, "width": box.width, "height": box.height},
            "boxVolume": round2(pack.box_volume),
            "usedVolume": round2(pack.used_volume),
            "fillPercent": round2(bp.fill_percent),
            "voidRatio": round(pack.void_ratio, 4),
            "packedWeight": round2(pack.total_weight),
            "dimChargeableWeight": round2(bp.dim_weight),
            "items": items,
        })

    s = plan.summary
    return {
        "summary": {
            "totalBoxes": s.total_boxes,
            "totalCost": round2(s.total_cost),
            "totalActualWeight": round2(s.total_actual_weight),
            "totalChargeableWeight": round2(s.total_chargeable_weight),
        },
        "shipments": shipments,
    }


def compare_to_baseline(items: list[Item], plan: ShipmentPlan) -> dict[str, float]:
    """Savings of the plan against shipping every unit on its own."""
    baseline = naive_baseline_cost(items, NAIVE_COST_PER_ITEM)
    savings = max(0.0, baseline - plan.summary.total_cost)
    pct = savings / baseline * 100.0 if baseline > 0 else 0.0
    return {
        "baselineCost": round2(baseline),
        "savings": round2(savings),
        "savingsPercent": round(pct, 1),
    }


def optimize_shipment(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Optimize a JSON-shaped request.

    Input:
        {
            "boxes": [{"id", "cost", "innerDims": {...}, "maxWeight"}],   # optional
            "products": [{"id", "dimensions": {...}, "weight", "quantity"}],
            "options": {"dimDivisor", "weights": {...}, "shipTogether"}
        }

    Raises ItemValidationError on bad input and PackingError when an item
    cannot be packaged at all.
    """
    request = parse_request(payload)
    items = [p.to_item() for p in request.products]
    catalog = None if request.boxes is None else [b.to_box_type() for b in request.boxes]

    plan = optimize(items, catalog, request.options.to_options())

    output = format_plan(plan)
    output["comparison"] = compare_to_baseline(items, plan)
    return output
