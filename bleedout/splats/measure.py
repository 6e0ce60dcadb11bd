"""Glyph measurement for splat placement.

Generators need the rendered size of each glyph to center it on its sampled
position. Measurement must be deterministic: the same glyph and style always
give the same size.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, TypeAlias

from PIL import ImageFont

from bleedout import config
from bleedout.splats.records import SplatStyle

logger = logging.getLogger(__name__)

PillowFont: TypeAlias = ImageFont.FreeTypeFont | ImageFont.ImageFont


class TextMeasurer(Protocol):
    """Returns the ``(width, height)`` in pixels of a glyph in a style."""

    def measure(self, glyph: str, style: SplatStyle) -> tuple[float, float]: ...


class PillowTextMeasurer:
    """Measures glyphs with PIL, loading fonts from a directory.

    A family named "splatter" is looked up as ``splatter.ttf`` then
    ``splatter.otf`` in ``fonts_dir``. Missing fonts fall back to Pillow's
    built-in font at the requested size, so measurement always succeeds.
    """

    FONT_SUFFIXES = (".ttf", ".otf", ".woff")

    def __init__(self, fonts_dir: Path | str = config.SPLAT_FONTS_DIR) -> None:
        self.fonts_dir = Path(fonts_dir)
        self._fonts: dict[tuple[str, int], PillowFont] = {}
        self._sizes: dict[tuple[str, str, int], tuple[float, float]] = {}

    def measure(self, glyph: str, style: SplatStyle) -> tuple[float, float]:
        key = (glyph, style.font_family, style.font_size)
        size = self._sizes.get(key)
        if size is None:
            font = self._get_font(style.font_family, style.font_size)
            width = float(font.getlength(glyph))
            if isinstance(font, ImageFont.FreeTypeFont):
                ascent, descent = font.getmetrics()
                height = float(ascent + descent)
            else:
                left, top, right, bottom = font.getbbox(glyph)
                height = float(bottom - top)
            size = (width, height)
            self._sizes[key] = size
        return size

    def _get_font(self, family: str, font_size: int) -> PillowFont:
        font_size = max(1, font_size)
        key = (family, font_size)
        font = self._fonts.get(key)
        if font is None:
            font = self._load_font(family, font_size)
            self._fonts[key] = font
        return font

    def _load_font(self, family: str, font_size: int) -> PillowFont:
        for suffix in self.FONT_SUFFIXES:
            path = self.fonts_dir / f"{family}{suffix}"
            if path.exists():
                try:
                    return ImageFont.truetype(str(path), font_size)
                except OSError as e:
                    logger.warning(f"Failed to load splat font {path}: {e}")
        logger.debug(f"Splat font '{family}' not found, using Pillow default")
        return ImageFont.load_default(font_size)
