"""Geometry utilities for shipment packing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Placement

Dims = tuple[float, float, float]


def orientations(length: float, width: float, height: float) -> list[Dims]:
    """
    Return the 6 axis-aligned orientations (l, w, h) of a rectangular item.

    Order is fixed so that orientation search is deterministic:
      (a,b,c) (a,c,b) (b,a,c) (b,c,a) (c,a,b) (c,b,a)
    Duplicates are kept (a cube yields six equal tuples).
    """
    a, b, c = float(length), float(width), float(height)
    return [
        (a, b, c),
        (a, c, b),
        (b, a, c),
        (b, c, a),
        (c, a, b),
        (c, b, a),
    ]


def volume(length: float, width: float, height: float) -> float:
    return float(length) * float(width) * float(height)


def rects_overlap(
    a: tuple[float, float, float, float],
    b: tuple[float, float, float, float],
) -> bool:
    """
    2D overlap test on bounds (x1, y1, x2, y2).

    Touching edges are NOT considered overlap.
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1)


def boxes_overlap(
    a: tuple[float, float, float, float, float, float],
    b: tuple[float, float, float, float, float, float],
) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1) and (az1 < bz2 and az2 > bz1)


def footprint_bounds(p: "Placement") -> tuple[float, float, float, float]:
    # x runs along the box width, y along the box length
    return (p.x, p.y, p.x + p.width, p.y + p.length)


def placement_bounds(p: "Placement") -> tuple[float, float, float, float, float, float]:
    return (p.x, p.y, p.z, p.x + p.width, p.y + p.length, p.z + p.height)
