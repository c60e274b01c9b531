"""Collision predicates for the actor circle against the playfield and obstacles.

All comparisons are exact; there is no tolerance on any edge.
"""

from __future__ import annotations

from typing import Tuple

RectTuple = Tuple[float, float, float, float]


def hits_bounds(top: float, bottom: float, height: float) -> bool:
    """Ceiling or ground contact."""
    return top <= 0 or bottom >= height


def overlaps_horizontally(cx: float, radius: float, ox: float, width: float) -> bool:
    return cx + radius > ox and cx - radius < ox + width


def overlaps_obstacle(
    cx: float,
    cy: float,
    radius: float,
    ox: float,
    width: float,
    gap_top: float,
    gap_height: float,
) -> bool:
    """True when the circle touches the solid part of an obstacle column."""
    if not overlaps_horizontally(cx, radius, ox, width):
        return False
    return cy - radius < gap_top or cy + radius > gap_top + gap_height


def gap_rects(ox: float, width: float, gap_top: float, gap_height: float, floor_y: float) -> Tuple[RectTuple, RectTuple]:
    """(x, y, w, h) of the upper and lower solid blocks; the lower one stops at floor_y."""
    gap_bottom = gap_top + gap_height
    top = (ox, 0.0, width, gap_top)
    bottom = (ox, gap_bottom, width, max(0.0, floor_y - gap_bottom))
    return top, bottom
