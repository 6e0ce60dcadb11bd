"""Splat data as created by the generators and saved by the host.

A ``SplatRecord`` is one batch of glyphs created together, for example every
splat from a single hit on a token. Records never change after creation;
healing and wiping remove whole records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bleedout.types import FlatPolygon, PixelCoord, PixelPos, SplatId, TokenId
from bleedout.util import rng

_rng = rng.get("splats.ids")


def new_splat_id() -> SplatId:
    """Return a fresh 16 character hex id."""
    return f"{_rng.getrandbits(64):016x}"


@dataclass(slots=True)
class GlyphPlacement:
    """A single placed glyph.

    Attributes:
        glyph: One character from a splat font.
        x: Left edge, relative to the owning record's origin.
        y: Top edge, relative to the owning record's origin.
        width: Measured width of the rendered glyph.
        height: Measured height of the rendered glyph.
        angle: Rotation in degrees (trail splats follow their path).
    """

    glyph: str
    x: PixelCoord
    y: PixelCoord
    width: PixelCoord
    height: PixelCoord
    angle: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "glyph": self.glyph,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "angle": self.angle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GlyphPlacement:
        return cls(
            glyph=data["glyph"],
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            angle=data.get("angle", 0.0),
        )


@dataclass(frozen=True)
class SplatStyle:
    """Text style shared by every glyph of a record."""

    font_family: str
    font_size: int
    fill: str
    align: str = "center"

    def to_dict(self) -> dict[str, Any]:
        return {
            "font_family": self.font_family,
            "font_size": self.font_size,
            "fill": self.fill,
            "align": self.align,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SplatStyle:
        return cls(
            font_family=data["font_family"],
            font_size=data["font_size"],
            fill=data["fill"],
            align=data.get("align", "center"),
        )


@dataclass(frozen=True)
class SplatRecord:
    """A batch of splats sharing one style.

    Token splats are positioned relative to their token (``x``/``y`` are 0);
    floor and trail splats carry a scene-absolute origin in ``x``/``y``.

    Attributes:
        id: Unique id used for removal across every holder.
        token_id: Owning token, or None for floor splats.
        style: Text style of every glyph.
        splats: Glyphs, in creation order.
        offset: Top-left of the glyphs' bounding box before alignment.
        x: Record origin x.
        y: Record origin y.
        width: Width of the aligned bounding box.
        height: Height of the aligned bounding box.
        mask_polygon: Optional line-of-sight mask, relative to the origin.
    """

    id: SplatId
    token_id: TokenId | None
    style: SplatStyle
    splats: tuple[GlyphPlacement, ...]
    offset: PixelPos = (0, 0)
    x: PixelCoord = 0
    y: PixelCoord = 0
    width: PixelCoord = 0
    height: PixelCoord = 0
    mask_polygon: FlatPolygon | None = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.splats)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data for a key/value flag store."""
        data: dict[str, Any] = {
            "id": self.id,
            "token_id": self.token_id,
            "style": self.style.to_dict(),
            "splats": [s.to_dict() for s in self.splats],
            "offset": list(self.offset),
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        if self.mask_polygon is not None:
            data["mask_polygon"] = list(self.mask_polygon)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SplatRecord:
        offset = data.get("offset") or (0, 0)
        return cls(
            id=data["id"],
            token_id=data.get("token_id"),
            style=SplatStyle.from_dict(data["style"]),
            splats=tuple(GlyphPlacement.from_dict(s) for s in data["splats"]),
            offset=(offset[0], offset[1]),
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
            mask_polygon=data.get("mask_polygon"),
        )
