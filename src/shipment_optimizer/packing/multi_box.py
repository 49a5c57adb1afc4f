# src/shipment_optimizer/packing/multi_box.py

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass

from shipment_optimizer.errors import ItemValidationError, PackingError
from shipment_optimizer.metrics import dimensional_weight, summarize
from shipment_optimizer.models import (
    BoxPacking,
    BoxType,
    Item,
    OptimizeOptions,
    PackResult,
    Placement,
    ShipmentPlan,
)
from shipment_optimizer.packing.layered import pack_box
from shipment_optimizer.scoring import TrialFeatures, score_trials

logger = logging.getLogger(__name__)

CUSTOM_BOX_ID = "CUSTOM_NEXT_UP"


@dataclass
class Trial:
    box: BoxType
    pack: PackResult
    features: TrialFeatures
    score: float = 0.0


def check_unique_ids(items: list[Item]) -> None:
    """Units are matched back by id, so one id must name one item."""
    counts = Counter(item.id for item in items)
    duplicates = sorted(i for i, n in counts.items() if n > 1)
    if duplicates:
        raise ItemValidationError(
            f"Duplicate item ids: {', '.join(duplicates)}",
            [{"field": "id", "message": f"duplicate item id '{i}'"} for i in duplicates],
        )


def expand_units(items: list[Item]) -> list[Item]:
    """
    One single-quantity item per unit, largest total volume (volume x qty) first.

    Units of the same id are interchangeable from here on.
    """
    ordered = sorted(items, key=lambda it: it.volume * it.quantity, reverse=True)
    return [it.model_copy(update={"quantity": 1}) for it in ordered for _ in range(it.quantity)]


def consume_units(remaining: list[Item], placements: list[Placement]) -> list[Item]:
    """Drop one remaining unit per placement, matching by item id and count."""
    to_consume = Counter(p.item_id for p in placements)
    kept: list[Item] = []
    for unit in remaining:
        if to_consume[unit.id] > 0:
            to_consume[unit.id] -= 1
        else:
            kept.append(unit)
    return kept


def custom_box_for(unit: Item, options: OptimizeOptions) -> BoxType:
    margin = options.custom_box_margin
    return BoxType(
        id=CUSTOM_BOX_ID,
        name="Custom Box",
        cost=options.custom_box_base_cost,
        length=unit.length + margin,
        width=unit.width + margin,
        height=unit.height + margin,
        max_weight=max(unit.weight * 2, options.custom_box_min_weight),
    )


def run_trials(remaining: list[Item], catalog: list[BoxType], options: OptimizeOptions) -> list[Trial]:
    trials: list[Trial] = []
    for box in catalog:
        pack = pack_box(box, remaining, max_layers=options.max_layers)
        if not pack.ok or not pack.placements:
            logger.debug(f"box={box.id} excluded: {pack.reason or 'nothing placed'}")
            continue
        features = TrialFeatures(
            cost=box.cost,
            void_ratio=pack.void_ratio,
            dim_weight=dimensional_weight(box, pack.total_weight, options.dim_divisor),
            box_count=1,
        )
        trials.append(Trial(box=box, pack=pack, features=features))
    return trials


def choose_trial(trials: list[Trial], options: OptimizeOptions) -> Trial:
    """Lowest score wins; ties keep catalog order."""
    scores = score_trials([t.features for t in trials], options.weights)
    for t, s in zip(trials, scores):
        t.score = s
    return min(trials, key=lambda t: t.score)


def greedy_pack(
    items: list[Item],
    catalog: list[BoxType],
    options: OptimizeOptions,
    consolidate: bool = False,
) -> ShipmentPlan:
    """
    Greedy multi-box loop.

    Every round trial-packs all remaining units into every box type, scores
    the trials and commits the best one. With consolidate=True only the
    trials placing the most units are scored. When no catalog box can hold
    anything, the first remaining unit gets a custom box.
    """
    remaining = expand_units(items)
    packings: list[BoxPacking] = []
    rounds = 0

    while remaining:
        rounds += 1
        if rounds > options.max_rounds:
            raise PackingError(
                f"Round budget of {options.max_rounds} exhausted with {len(remaining)} units left",
                item_id=remaining[0].id,
            )

        trials = run_trials(remaining, catalog, options)

        if consolidate and trials:
            most = max(len(t.pack.placements) for t in trials)
            trials = [t for t in trials if len(t.pack.placements) == most]

        if trials:
            best = choose_trial(trials, options)
            box, pack = best.box, best.pack
        else:
            unit = remaining[0]
            box = custom_box_for(unit, options)
            logger.warning(f"No catalog box fits item {unit.id}; using custom box {box.length}x{box.width}x{box.height}")
            pack = pack_box(box, [unit], max_layers=options.max_layers)
            if not pack.ok or not pack.placements:
                raise PackingError(f"Unable to package item {unit.id}", item_id=unit.id)

        packings.append(
            BoxPacking(
                box=box,
                pack=pack,
                dim_weight=dimensional_weight(box, pack.total_weight, options.dim_divisor),
            )
        )
        remaining = consume_units(remaining, pack.placements)

    return ShipmentPlan(packings=packings, summary=summarize(packings))


def _plan_rank(plan: ShipmentPlan) -> tuple[float, int, float]:
    s = plan.summary
    return (round(s.total_cost, 6), s.total_boxes, round(s.total_chargeable_weight, 6))


def select_boxes(
    items: list[Item],
    catalog: list[BoxType],
    options: OptimizeOptions | None = None,
) -> ShipmentPlan:
    """
    Build a shipment plan for items over the box catalog.

    ship_together:
      - "auto": run the scored pass and the consolidating pass, keep the
        cheaper plan (then fewer boxes, then lower chargeable weight)
      - "if_possible": consolidating pass only
      - "always": consolidating pass; more than one box is an error
    """
    options = options or OptimizeOptions()
    if not items:
        return ShipmentPlan()
    check_unique_ids(items)

    if options.ship_together == "auto":
        scored = greedy_pack(items, catalog, options, consolidate=False)
        consolidated = greedy_pack(items, catalog, options, consolidate=True)
        plan = min((scored, consolidated), key=_plan_rank)
        logger.debug(
            f"auto: scored={scored.summary.total_cost:.2f}/{scored.summary.total_boxes} "
            f"consolidated={consolidated.summary.total_cost:.2f}/{consolidated.summary.total_boxes}"
        )
        return plan

    plan = greedy_pack(items, catalog, options, consolidate=True)
    if options.ship_together == "always" and plan.summary.total_boxes > 1:
        raise PackingError(f"Items cannot ship together: {plan.summary.total_boxes} boxes needed")
    return plan
