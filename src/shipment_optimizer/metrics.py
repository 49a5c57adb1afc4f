from __future__ import annotations

from collections import Counter
from typing import Iterable

from shipment_optimizer.models import BoxPacking, BoxType, Item, PlanSummary, Placement, ShipmentPlan


def round2(x: float) -> float:
    return round(float(x) * 100) / 100


def compute_metrics(box: BoxType, placements: list[Placement]) -> tuple[float, float, float]:
    """Return (used_volume, box_volume, void_ratio) for one box."""
    used_volume = sum(p.volume for p in placements)
    box_volume = box.volume
    void_ratio = 1.0 if box_volume == 0 else max(0.0, 1.0 - used_volume / box_volume)
    return used_volume, box_volume, void_ratio


def dimensional_weight(box: BoxType, packed_weight: float, dim_divisor: float) -> float:
    """Chargeable weight: the larger of volumetric and actual weight."""
    return max(box.volume / dim_divisor, packed_weight)


def summarize(packings: list[BoxPacking]) -> PlanSummary:
    return PlanSummary(
        total_boxes=len(packings),
        total_cost=sum(bp.box.cost for bp in packings),
        total_actual_weight=sum(bp.pack.total_weight for bp in packings),
        total_chargeable_weight=sum(bp.dim_weight for bp in packings),
    )


def placed_item_counts(plan: ShipmentPlan) -> Counter[str]:
    """
    Units per original item id across the plan.

    Envelope placements count through their contents.
    """
    counts: Counter[str] = Counter()
    for bp in plan.packings:
        for p in bp.pack.placements:
            if p.contents:
                counts.update(p.contents)
            else:
                counts[p.item_id] += 1
    return counts


def naive_baseline_cost(items: Iterable[Item], per_item: float = 9.00) -> float:
    """Cost of shipping every unit in its own standard box."""
    return sum(item.quantity * per_item for item in items)
