# src/shipment_optimizer/packing/guillotine.py

from __future__ import annotations

from dataclasses import dataclass, field

EPS = 1e-9


@dataclass(frozen=True)
class Rect:
    """Footprint to place. key identifies the unit that owns it."""

    key: int
    w: float
    l: float


@dataclass(frozen=True)
class FreeRect:
    x: float
    y: float
    w: float
    l: float


@dataclass(frozen=True)
class PlacedRect:
    key: int
    x: float
    y: float
    w: float
    l: float


@dataclass
class SheetPackResult:
    placed: list[PlacedRect] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    used_area: float = 0.0


def pack_2d(sheet_width: float, sheet_length: float, rects: list[Rect]) -> SheetPackResult:
    """
    Guillotine packer for one layer.

    - Free list starts as the whole sheet (x along width, y along length)
    - Each rect, in the given order, goes to the free rect with the least
      leftover area (first one wins a tie)
    - The used free rect is replaced by a right part (free.w - w) x l and a
      lower part free.w x (free.l - l); empty parts are dropped
    - Free rects are never merged, so fragmented space can reject a rect
      even when total free area would be enough
    """
    free: list[FreeRect] = [FreeRect(0.0, 0.0, float(sheet_width), float(sheet_length))]
    result = SheetPackResult()

    for r in rects:
        best_idx = -1
        best_waste = float("inf")
        for i, fr in enumerate(free):
            if r.w <= fr.w + EPS and r.l <= fr.l + EPS:
                waste = fr.w * fr.l - r.w * r.l
                if waste < best_waste:
                    best_waste = waste
                    best_idx = i

        if best_idx == -1:
            result.failed.append(r.key)
            continue

        fr = free.pop(best_idx)
        result.placed.append(PlacedRect(key=r.key, x=fr.x, y=fr.y, w=r.w, l=r.l))
        result.used_area += r.w * r.l

        right = FreeRect(fr.x + r.w, fr.y, fr.w - r.w, r.l)
        below = FreeRect(fr.x, fr.y + r.l, fr.w, fr.l - r.l)
        for part in (right, below):
            if part.w > EPS and part.l > EPS:
                free.append(part)

    return result
