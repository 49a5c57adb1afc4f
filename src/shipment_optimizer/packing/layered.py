# src/shipment_optimizer/packing/layered.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from shipment_optimizer.geometry import Dims, orientations
from shipment_optimizer.metrics import compute_metrics
from shipment_optimizer.models import BoxType, Item, PackResult, Placement
from shipment_optimizer.packing.guillotine import Rect, pack_2d

logger = logging.getLogger(__name__)

EPS = 1e-9
DEFAULT_MAX_LAYERS = 500


@dataclass(frozen=True)
class Instance:
    """One unit of an item. index is its slot in the trial's arena."""

    index: int
    item: Item


def expand_instances(items: Iterable[Item]) -> list[Instance]:
    """
    Expand items into one instance per unit, biggest volume first.

    The sort is stable so equal-volume units keep input order.
    """
    units = [item for item in items for _ in range(item.quantity)]
    units.sort(key=lambda it: it.volume, reverse=True)
    return [Instance(index=i, item=it) for i, it in enumerate(units)]


def preferred_orientation(item: Item, box: BoxType, space_left: float) -> Optional[Dims]:
    """
    Pick the orientation (l, w, h) used for this item in the next layer.

    Only orientations fitting the remaining height and the box floor count.
    Ranking: lowest h, then largest footprint, then most copies tiling the
    floor, then permutation order.
    """
    best: Optional[Dims] = None
    best_key: Optional[tuple[float, float, int]] = None

    for l, w, h in orientations(*item.dimensions):
        if h > space_left + EPS or l > box.length + EPS or w > box.width + EPS:
            continue
        tiles = math.floor((box.width + EPS) / w) * math.floor((box.length + EPS) / l)
        key = (h, -(l * w), -tiles)
        if best_key is None or key < best_key:
            best = (l, w, h)
            best_key = key

    return best


def pack_box(
    box: BoxType,
    items: Iterable[Item],
    max_layers: int = DEFAULT_MAX_LAYERS,
) -> PackResult:
    """
    Layered packer: fill one box with as many units as fit.

    Each round forms one horizontal layer:
      1. every remaining unit picks its preferred orientation
      2. layer height = smallest preferred height
      3. units sharing that height are packed on the floor with the
         guillotine packer, largest footprint first
      4. placed units are recorded at the current z and removed
      5. z advances by the layer height, even when nothing was placed

    Stops when units run out, nothing fits the remaining height, or
    max_layers rounds were spent. Exceeding max_weight fails the trial.
    """
    remaining = expand_instances(items)
    placements: list[Placement] = []
    total_weight = 0.0
    z = 0.0
    layers = 0

    while remaining and z < box.height - EPS and layers < max_layers:
        layers += 1
        space_left = box.height - z

        candidates: list[tuple[Instance, Dims]] = []
        for inst in remaining:
            orient = preferred_orientation(inst.item, box, space_left)
            if orient is not None:
                candidates.append((inst, orient))

        if not candidates:
            break

        layer_h = min(orient[2] for _, orient in candidates)
        layer = [c for c in candidates if abs(c[1][2] - layer_h) <= EPS]
        layer.sort(key=lambda c: c[1][0] * c[1][1], reverse=True)

        by_key = {inst.index: (inst, orient) for inst, orient in layer}
        rects = [Rect(key=inst.index, w=orient[1], l=orient[0]) for inst, orient in layer]
        sheet = pack_2d(box.width, box.length, rects)

        placed: set[int] = set()
        for pr in sheet.placed:
            inst, (l, w, h) = by_key[pr.key]
            placements.append(
                Placement(
                    item_id=inst.item.id,
                    instance=inst.index,
                    x=pr.x,
                    y=pr.y,
                    z=z,
                    length=l,
                    width=w,
                    height=h,
                    contents=dict(inst.item.contents),
                )
            )
            placed.add(pr.key)
            total_weight += inst.item.weight
            if total_weight > box.max_weight + EPS:
                logger.debug(f"box={box.id} weight_exceeded at {total_weight:.2f} > {box.max_weight}")
                return PackResult.failure(box, "weight_exceeded")

        if placed:
            remaining = [inst for inst in remaining if inst.index not in placed]
        else:
            # Fragmented floor rejected every rect; skip the band so the loop progresses
            logger.debug(f"box={box.id} stalled layer at z={z:.2f}, advancing {layer_h}")
        z += layer_h

    used_volume, box_volume, void_ratio = compute_metrics(box, placements)

    return PackResult(
        box_id=box.id,
        placements=placements,
        used_volume=used_volume,
        total_weight=total_weight,
        box_volume=box_volume,
        void_ratio=void_ratio,
    )
