"""
Splat Generators

Turns a severity plus size, density and spread settings into placed glyphs.
Every generator returns a single ``SplatRecord`` (or None when there is
nothing to place); adding the record to its holder and the scene pool is the
caller's job.

Generators:
    - Token: splats on the token itself, scaled by the hit
    - Floor: a pool beneath the token, one per hit
    - Trail: drops left behind a bleeding token, paced by distance travelled
    - Heal: removes the oldest token splats in proportion to the heal

Placement:
    Glyph positions are sampled with ``sample_box_muller`` so they cluster
    around the center and thin out towards the edge of the spread. Each glyph
    is measured and centered on its sample, then the whole batch is aligned
    to its bounding box with ``align_and_measure``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from bleedout import config
from bleedout.fonts import SplatFont
from bleedout.splats.measure import TextMeasurer
from bleedout.splats.pool import ScenePool
from bleedout.splats.records import (
    GlyphPlacement,
    SplatRecord,
    SplatStyle,
    new_splat_id,
)
from bleedout.types import FlatPolygon, PixelPos, RGBAString, TokenId
from bleedout.util import rng
from bleedout.util.geometry import (
    align_and_measure,
    bezier_derivative,
    bezier_point,
    distance_between,
    recenter_polygon,
    round_half_up,
)
from bleedout.util.sampling import random_glyph, sample_box_muller

if TYPE_CHECKING:
    from bleedout.splats.token import SplatToken

logger = logging.getLogger(__name__)

_token_rng = rng.get("splats.token")
_floor_rng = rng.get("splats.floor")
_trail_rng = rng.get("splats.trail")


@dataclass(frozen=True)
class SceneGrid:
    """Read-only grid scale used for splat sizes and trail pacing."""

    grid_size: int = config.DEFAULT_GRID_SIZE


class SightPolygonProvider(Protocol):
    """Computes a line-of-sight polygon in scene coordinates.

    Returns a flat ``[x1, y1, x2, y2, ...]`` list, or an empty list when
    there is nothing to mask against.
    """

    def __call__(self, origin: PixelPos, radius: float) -> FlatPolygon: ...


class FloorSplatGenerator(Protocol):
    """Creates floor splats beneath a token.

    The result is scene-global: it must have no owning token.
    """

    def __call__(
        self, token: SplatToken, font: SplatFont, size: int, density: int
    ) -> SplatRecord | None: ...


def _place_glyphs(
    glyphs: Sequence[str],
    centers: Sequence[tuple[float, float]],
    style: SplatStyle,
    measurer: TextMeasurer,
    angles: Sequence[float] | None = None,
) -> list[GlyphPlacement]:
    """Measure each glyph and center it on its sampled position."""
    placements = []
    for i, (glyph, (cx, cy)) in enumerate(zip(glyphs, centers, strict=True)):
        width, height = measurer.measure(glyph, style)
        placements.append(
            GlyphPlacement(
                glyph=glyph,
                x=round_half_up(cx - width / 2),
                y=round_half_up(cy - height / 2),
                width=width,
                height=height,
                angle=angles[i] if angles is not None else 0.0,
            )
        )
    return placements


def _sample_spread(
    count: int, spread_x: float, spread_y: float, stream: rng.RNG
) -> list[tuple[float, float]]:
    """Sample ``count`` offsets centered on (0, 0) within the spread."""
    return [
        (
            sample_box_muller(stream) * spread_x - spread_x / 2,
            sample_box_muller(stream) * spread_y - spread_y / 2,
        )
        for _ in range(count)
    ]


# =============================================================================
# TOKEN SPLATS
# =============================================================================


def token_font_size(
    size: float,
    sprite_width: float,
    sprite_height: float,
    grid_size: float,
    severity: float,
) -> int:
    """Font size for token splats: bigger tokens and harder hits splat bigger.

    A grid size of 0 means there is nothing to scale by, so the size is 0.
    """
    if grid_size <= 0:
        return 0
    return round_half_up(
        size * ((sprite_width + sprite_height) / grid_size / 2) * severity
    )


def generate_token_splats(
    *,
    token_id: TokenId,
    sprite_width: float,
    sprite_height: float,
    hit_severity: float,
    blood_color: RGBAString,
    font: SplatFont,
    size: int,
    density: float,
    spread: float,
    grid: SceneGrid,
    measurer: TextMeasurer,
    stream: rng.RNG | None = None,
) -> SplatRecord | None:
    """Create splats on a token for a hit.

    The number of glyphs is ``density * hit_severity`` (rounded) and their
    font size scales with the token's size and the hit. Glyphs are scattered
    around the token's center over ``spread`` times its sprite size.

    Returns:
        The new record, relative to the token's top-left corner, or None if
        the hit is too small to produce any glyph.
    """
    if not density or not size or hit_severity <= 0 or grid.grid_size <= 0:
        return None
    amount = round_half_up(density * hit_severity)
    if amount <= 0:
        logger.debug(f"Token {token_id}: no splats for severity {hit_severity}")
        return None

    stream = stream if stream is not None else _token_rng
    style = SplatStyle(
        font_family=font.name,
        font_size=token_font_size(
            size, sprite_width, sprite_height, grid.grid_size, hit_severity
        ),
        fill=blood_color,
    )
    pixel_spread_x = sprite_width * spread
    pixel_spread_y = sprite_height * spread
    logger.debug(
        f"Token {token_id}: {amount} splats, font size {style.font_size}, "
        f"spread ({pixel_spread_x}, {pixel_spread_y})"
    )

    glyphs = [random_glyph(font, stream) for _ in range(amount)]
    centers = _sample_spread(amount, pixel_spread_x, pixel_spread_y, stream)
    placements = _place_glyphs(glyphs, centers, style, measurer)

    alignment = align_and_measure(placements)
    offset_x, offset_y = alignment.offset
    # Back onto the token body: sampled offsets are around (0, 0), the
    # token's origin is its top-left corner.
    for p in placements:
        p.x += offset_x + sprite_width / 2
        p.y += offset_y + sprite_height / 2

    return SplatRecord(
        id=new_splat_id(),
        token_id=token_id,
        style=style,
        splats=tuple(placements),
        offset=alignment.offset,
        width=alignment.width,
        height=alignment.height,
    )


# =============================================================================
# FLOOR SPLATS
# =============================================================================


class DefaultFloorSplatter:
    """Pools blood on the floor under a hit token.

    Glyphs are spread over the token's footprint and the record is placed in
    scene coordinates. When a ``SightPolygonProvider`` is given, the splat is
    masked to what is visible from the token so blood never shows through
    walls.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        sight: SightPolygonProvider | None = None,
        stream: rng.RNG | None = None,
    ) -> None:
        self.measurer = measurer
        self.sight = sight
        self.stream = stream if stream is not None else _floor_rng

    def __call__(
        self, token: SplatToken, font: SplatFont, size: int, density: int
    ) -> SplatRecord | None:
        return generate_floor_splats(
            center=token.center,
            sprite_width=token.sprite_width,
            sprite_height=token.sprite_height,
            blood_color=token.blood_color,
            font=font,
            size=size,
            density=density,
            spread=token.settings.splat_spread,
            measurer=self.measurer,
            sight=self.sight,
            stream=self.stream,
        )


def generate_floor_splats(
    *,
    center: PixelPos,
    sprite_width: float,
    sprite_height: float,
    blood_color: RGBAString,
    font: SplatFont,
    size: int,
    density: int,
    spread: float,
    measurer: TextMeasurer,
    sight: SightPolygonProvider | None = None,
    stream: rng.RNG | None = None,
) -> SplatRecord | None:
    """Create ``density`` floor glyphs of font size ``size`` around ``center``.

    Returns:
        A scene-global record (no owning token), or None if density or size
        is 0.
    """
    if density <= 0 or size <= 0:
        return None
    stream = stream if stream is not None else _floor_rng

    style = SplatStyle(font_family=font.name, font_size=size, fill=blood_color)
    spread_x = sprite_width * (1 + spread)
    spread_y = sprite_height * (1 + spread)

    glyphs = [random_glyph(font, stream) for _ in range(density)]
    centers = _sample_spread(density, spread_x, spread_y, stream)
    placements = _place_glyphs(glyphs, centers, style, measurer)
    alignment = align_and_measure(placements)

    origin_x = center[0] + alignment.offset[0]
    origin_y = center[1] + alignment.offset[1]

    mask_polygon = None
    if sight is not None:
        radius = max(alignment.width, alignment.height)
        points = sight(center, radius)
        if points:
            mask_polygon = recenter_polygon(points, (origin_x, origin_y))

    logger.debug(f"Floor splat: {density} glyphs at ({origin_x}, {origin_y})")
    return SplatRecord(
        id=new_splat_id(),
        token_id=None,
        style=style,
        splats=tuple(placements),
        offset=alignment.offset,
        x=origin_x,
        y=origin_y,
        width=alignment.width,
        height=alignment.height,
        mask_polygon=mask_polygon,
    )


# =============================================================================
# TRAIL SPLATS
# =============================================================================


def trail_distances(
    move_pos: PixelPos,
    bleeding_severity: float,
    density: float,
    grid_size: float,
    carry: float,
) -> tuple[list[float], float]:
    """Work out where along a move a bleeding token drops trail splats.

    A token drops one splat every ``grid_size / (density * bleeding)``
    pixels. Distance that does not add up to a whole splat is carried over
    to the next move, so many small moves still leave a continuous trail.

    Args:
        move_pos: The move as a vector from the last position.
        bleeding_severity: Current bleeding severity.
        density: Trail splats per grid square per unit of bleeding.
        grid_size: Pixels per grid square.
        carry: Leftover distance from previous moves.

    Returns:
        ``(fractions, new_carry)``: fractions of the move vector, in (0, 1],
        at which to place splats, and the distance to carry forward.
    """
    amount = density * bleeding_severity
    if amount <= 0 or grid_size <= 0:
        return [], carry

    splat_spacing = grid_size / amount
    dist_travelled = distance_between((0, 0), move_pos) + carry
    num_splats = dist_travelled / splat_spacing
    new_carry = dist_travelled % splat_spacing

    if num_splats < 1:
        return [], new_carry

    fractions = [i / num_splats for i in range(1, math.floor(num_splats) + 1)]
    return fractions, new_carry


def generate_trail_splats(
    *,
    token_id: TokenId,
    last_center: PixelPos,
    move_pos: PixelPos,
    fractions: Sequence[float],
    sprite_width: float,
    sprite_height: float,
    blood_color: RGBAString,
    font: SplatFont,
    size: int,
    grid: SceneGrid,
    measurer: TextMeasurer,
    stream: rng.RNG | None = None,
) -> SplatRecord | None:
    """Drop trail glyphs along a move.

    The path is a quadratic Bezier from the token's previous center to its new
    one, bent sideways by a random amount so trails do not look ruled. Each
    glyph is rotated to follow the path.

    Returns:
        A scene-absolute record owned by ``token_id``, or None if there are
        no fractions or the font size works out to 0.
    """
    if not fractions or grid.grid_size <= 0:
        return None
    font_size = round_half_up(
        size * ((sprite_width + sprite_height) / grid.grid_size / 2)
    )
    if font_size <= 0:
        return None
    stream = stream if stream is not None else _trail_rng

    style = SplatStyle(font_family=font.name, font_size=font_size, fill=blood_color)
    start: PixelPos = (0, 0)
    end = move_pos
    length = distance_between(start, end)
    bend = stream.uniform(-1.0, 1.0) * config.TRAIL_CURVE_BEND * length
    if length:
        normal = (-end[1] / length, end[0] / length)
    else:
        normal = (0.0, 0.0)
    control = (end[0] / 2 + normal[0] * bend, end[1] / 2 + normal[1] * bend)

    centers = []
    angles = []
    for t in fractions:
        centers.append(bezier_point(start, control, end, t))
        dx, dy = bezier_derivative(start, control, end, t)
        angles.append(math.degrees(math.atan2(dy, dx)))

    glyphs = [random_glyph(font, stream) for _ in fractions]
    placements = _place_glyphs(glyphs, centers, style, measurer, angles)
    alignment = align_and_measure(placements)

    logger.debug(f"Token {token_id}: {len(placements)} trail splats")
    return SplatRecord(
        id=new_splat_id(),
        token_id=token_id,
        style=style,
        splats=tuple(placements),
        offset=alignment.offset,
        x=last_center[0] + alignment.offset[0],
        y=last_center[1] + alignment.offset[1],
        width=alignment.width,
        height=alignment.height,
    )


# =============================================================================
# HEALING
# =============================================================================


def heal_amount(splat_count: int, hit_severity: float) -> int:
    """Number of records a heal removes. Never more than ``splat_count``."""
    return math.ceil(splat_count * min(1.0, abs(hit_severity)))


def heal_splats(
    splats: Sequence[SplatRecord],
    hit_severity: float,
    pool: ScenePool,
) -> list[SplatRecord]:
    """Remove the oldest records in proportion to a heal.

    A full heal (-1 or beyond) removes everything. Each removed record is
    also purged from the scene pool.

    Returns:
        The remaining records, in their original order.
    """
    remove_amount = heal_amount(len(splats), hit_severity)
    logger.debug(f"Healing {remove_amount} of {len(splats)} splat records")
    for record in splats[:remove_amount]:
        pool.remove(record.id)
    return list(splats[remove_amount:])
