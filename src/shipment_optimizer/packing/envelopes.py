"""Envelope pre-pass: group small, flat, light items so they ship as envelopes."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from shipment_optimizer.models import Item

logger = logging.getLogger(__name__)


class EnvelopeRules(BaseModel):
    """Limits for envelope eligibility and cluster sizing (inches, pounds)."""

    max_thickness: float = Field(default=1.0, gt=0, description="Smallest dimension must not exceed this")
    max_weight: float = Field(default=2.0, gt=0, description="Per unit and per envelope")
    max_length: float = Field(default=15.0, gt=0)
    max_width: float = Field(default=12.0, gt=0)
    min_length: float = Field(default=9.0, gt=0)
    min_width: float = Field(default=6.0, gt=0)
    min_thickness: float = Field(default=0.5, gt=0, description="Padding allowance")
    thickness_tolerance: float = Field(default=0.25, ge=0)
    fragile_materials: tuple[str, ...] = ("glass", "ceramic", "crystal", "porcelain")


def envelope_id(number: int) -> str:
    return f"envelope-{number}"


@dataclass
class EnvelopeCluster:
    number: int
    length: float
    width: float
    thickness: float
    height: float
    weight: float = 0.0
    contents: Counter = field(default_factory=Counter)
    names: list[str] = field(default_factory=list)

    def to_item(self) -> Item:
        distinct = list(dict.fromkeys(self.names))
        label = distinct[0] if len(distinct) == 1 else "Multiple Small Items"
        return Item(
            id=envelope_id(self.number),
            length=self.length,
            width=self.width,
            height=self.height,
            weight=self.weight,
            quantity=1,
            name=f"{label} (Envelope)",
            contents=dict(self.contents),
        )


@dataclass
class EnvelopeGrouping:
    items: list[Item]
    clusters: list[EnvelopeCluster]


def _sorted_dims(item: Item) -> tuple[float, float, float]:
    largest, second, smallest = sorted(item.dimensions, reverse=True)
    return largest, second, smallest


def is_envelope_eligible(item: Item, rules: EnvelopeRules) -> bool:
    largest, second, smallest = _sorted_dims(item)
    if item.fragile:
        return False
    if item.material and any(m in item.material.lower() for m in rules.fragile_materials):
        return False
    return (
        smallest <= rules.max_thickness
        and item.weight <= rules.max_weight
        and largest <= rules.max_length
        and second <= rules.max_width
    )


def group_for_envelopes(items: list[Item], rules: EnvelopeRules | None = None) -> EnvelopeGrouping:
    """
    Replace envelope-eligible units with one synthetic item per envelope.

    Units are scanned in input order. A unit joins the first cluster that
    stays within the weight limit and whose thickness is within tolerance;
    otherwise it opens a new cluster. Other items pass through unchanged.
    Output lists envelopes first, then pass-through items.
    """
    rules = rules or EnvelopeRules()
    clusters: list[EnvelopeCluster] = []
    passthrough: list[Item] = []
    # Envelope ids must not shadow an input id
    taken = {item.id for item in items}
    next_number = 1

    for item in items:
        if not is_envelope_eligible(item, rules):
            passthrough.append(item)
            continue

        largest, second, smallest = _sorted_dims(item)
        length = min(rules.max_length, max(largest, rules.min_length))
        width = min(rules.max_width, max(second, rules.min_width))

        for _ in range(item.quantity):
            cluster = next(
                (
                    c
                    for c in clusters
                    if c.weight + item.weight <= rules.max_weight
                    and abs(c.thickness - smallest) <= rules.thickness_tolerance
                ),
                None,
            )
            if cluster is None:
                while envelope_id(next_number) in taken:
                    next_number += 1
                thickness = max(smallest, rules.min_thickness)
                cluster = EnvelopeCluster(
                    number=next_number,
                    length=length,
                    width=width,
                    thickness=thickness,
                    height=thickness,
                )
                clusters.append(cluster)
                next_number += 1

            cluster.length = max(cluster.length, length)
            cluster.width = max(cluster.width, width)
            cluster.height = max(cluster.height, smallest)
            cluster.weight += item.weight
            cluster.contents[item.id] += 1
            cluster.names.append(item.name or item.id)

    if clusters:
        logger.info(f"Envelope grouping: {len(items)} -> {len(clusters) + len(passthrough)} items ({len(clusters)} envelopes)")

    return EnvelopeGrouping(
        items=[c.to_item() for c in clusters] + passthrough,
        clusters=clusters,
    )
