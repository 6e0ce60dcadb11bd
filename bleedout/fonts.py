"""Splat fonts and the glyphs in each that look like blood.

The font files themselves ship with the host; only the glyph tables live here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplatFont:
    """A font family and the characters in it that render as splats."""

    name: str
    available_glyphs: str

    def __post_init__(self) -> None:
        if not self.available_glyphs:
            raise ValueError(f"Splat font '{self.name}' has no glyphs")


FONTS: dict[str, SplatFont] = {
    font.name: font
    for font in (
        SplatFont(
            "WC Rhesus A Bta",
            "!\"#$%&'()*+,-./01234568:;<=>?@ABDEFGHIKMNOPQRSTUVWX[\\]^_`acdfhoquvx|}~"
            "¢£¥§©ª«¬®°±¶·º¿ÀÁÂÄÅÆÈÉÊËÌÏÑÒÓÔÖØÙÚÜßàáâåæçéêëìíîïñòõ÷øùûüÿiœŸƒπ",
        ),
        SplatFont("Sigali", "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"),
        SplatFont("splatter", "ABCDEFGHIJKLMNOPQRSTUV"),
        SplatFont("Starz2", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
        SplatFont("wmshapes1", "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"),
        SplatFont(
            "Wach Op-Art",
            "!\"#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`"
            "abcdefghijklmnopqrstuvwxyz{|}",
        ),
    )
}

DEFAULT_FONT_NAME = "splatter"


def get_font(name: str) -> SplatFont:
    """Look up a splat font by family name.

    Unknown names fall back to the default font so a stale setting never
    stops a token from bleeding.
    """
    font = FONTS.get(name)
    if font is None:
        logger.warning(f"Unknown splat font '{name}', using '{DEFAULT_FONT_NAME}'")
        return FONTS[DEFAULT_FONT_NAME]
    return font
