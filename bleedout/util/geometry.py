"""Pure geometry helpers for placing splat glyphs.

Nothing here holds state. Positions are scene pixels unless noted otherwise.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from bleedout.types import Direction, FlatPolygon, PixelCoord, PixelPos


class Placed(Protocol):
    """Anything with a mutable top-left position and a size."""

    x: PixelCoord
    y: PixelCoord
    width: PixelCoord
    height: PixelCoord


@dataclass(frozen=True)
class Alignment:
    """Result of ``align_and_measure``.

    Attributes:
        offset: Top-left corner of the bounding box before alignment.
        width: Width of the bounding box.
        height: Height of the bounding box.
    """

    offset: PixelPos
    width: PixelCoord
    height: PixelCoord


def align_and_measure(placements: Sequence[Placed]) -> Alignment:
    """Align placements to the top-left of their combined bounding box.

    Finds the tightest axis-aligned box over every placement's
    ``(x, y)``-``(x + width, y + height)`` extent, moves every placement so
    the box's minimum corner becomes ``(0, 0)``, and returns that corner along
    with the box size. An empty batch yields a zero box at the origin and
    mutates nothing.

    Running this twice is a no-op the second time: the offset is ``(0, 0)``
    and the size is unchanged.
    """
    if not placements:
        return Alignment(offset=(0, 0), width=0, height=0)

    extents = np.array(
        [(p.x, p.y, p.x + p.width, p.y + p.height) for p in placements],
        dtype=np.float64,
    )
    lowest_x, lowest_y = extents[:, 0].min(), extents[:, 1].min()
    highest_x, highest_y = extents[:, 2].max(), extents[:, 3].max()

    for p in placements:
        p.x -= float(lowest_x)
        p.y -= float(lowest_y)

    return Alignment(
        offset=(float(lowest_x), float(lowest_y)),
        width=float(highest_x - lowest_x),
        height=float(highest_y - lowest_y),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Splat counts and pixel positions use this rather than ``round()``, whose
    banker's rounding would turn a 2.5 splat hit into 2 but a 3.5 one into 4.
    """
    return math.floor(value + 0.5)


def normalize_direction(last: PixelPos, current: PixelPos) -> Direction:
    """Direction from ``last`` to ``current`` as a per-axis sign.

    (1, 0) is east, (-1, 1) is south-west. Diagonals are NOT scaled to unit
    length.
    """
    dx = (current[0] > last[0]) - (current[0] < last[0])
    dy = (current[1] > last[1]) - (current[1] < last[1])
    return (dx, dy)


def distance_between(a: PixelPos, b: PixelPos) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def bezier_point(
    p1: PixelPos, pc: PixelPos, p2: PixelPos, t: float
) -> tuple[int, int]:
    """Point along a quadratic Bezier curve, rounded to whole pixels.

    Args:
        p1: Start point.
        pc: Control point.
        p2: End point.
        t: Position along the curve, 0 to 1.
    """
    u = 1 - t
    x = u * u * p1[0] + 2 * u * t * pc[0] + t * t * p2[0]
    y = u * u * p1[1] + 2 * u * t * pc[1] + t * t * p2[1]
    return (round_half_up(x), round_half_up(y))


def bezier_derivative(
    p1: PixelPos, pc: PixelPos, p2: PixelPos, t: float
) -> tuple[float, float]:
    """Tangent of a quadratic Bezier curve at ``t`` (not rounded)."""
    d1x, d1y = 2 * (pc[0] - p1[0]), 2 * (pc[1] - p1[1])
    d2x, d2y = 2 * (p2[0] - pc[0]), 2 * (p2[1] - pc[1])
    return ((1 - t) * d1x + t * d2x, (1 - t) * d1y + t * d2y)


def recenter_polygon(points: FlatPolygon, origin: PixelPos) -> FlatPolygon:
    """Shift a flat ``[x1, y1, x2, y2, ...]`` polygon so ``origin`` is (0, 0).

    Line-of-sight polygons arrive in scene coordinates; splat masks are
    stored relative to the record that owns them.
    """
    if not points:
        return []
    vertices = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    vertices -= np.asarray(origin, dtype=np.float64)
    return vertices.ravel().tolist()
