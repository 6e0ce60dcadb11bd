"""Blood color lookup.

Colors are handed to the rendering layer as CSS ``rgba()`` strings. A token's
blood color comes from its creature type (NPC type or PC race); the per-type
table can name a color, give an ``rgba()`` string directly, ask for the color
to be read from the actor's name ("Green Slime"), or mark the creature as
bloodless with ``"none"``.
"""

from __future__ import annotations

import logging
import re

from bleedout import colors, config
from bleedout.settings import SplatSettings
from bleedout.types import RGBAString

logger = logging.getLogger(__name__)

RGBA_PATTERN = re.compile(
    r"rgba\((\d{1,3}%?),\s*(\d{1,3}%?),\s*(\d{1,3}%?),\s*(\d*(?:\.\d+)?)\)",
    re.IGNORECASE,
)


class ColorNotFound(ValueError):
    """No word in an actor's name matches a known color."""


class UnrecognizedColor(ValueError):
    """A color key is neither a known color name nor an rgba() string."""


def to_rgba(
    color: colors.Color, alpha: float = config.DEFAULT_BLOOD_ALPHA
) -> RGBAString:
    r, g, b = color
    return f"rgba({r}, {g}, {b}, {alpha})"


def get_rgba(
    color_name: str, alpha: float = config.DEFAULT_BLOOD_ALPHA
) -> RGBAString | None:
    """Return the rgba() string for a named color, or None if unknown."""
    rgb = colors.NAMED_COLORS.get(color_name)
    if rgb is None:
        return None
    return to_rgba(rgb, alpha)


def color_from_name(actor_name: str) -> RGBAString:
    """Find a color from the words of an actor's name, e.g. 'Purple Ooze'.

    Raises:
        ColorNotFound: If no word in the name is a known color.
    """
    for word in actor_name.lower().split():
        rgb = colors.NAMED_COLORS.get(word)
        if rgb is not None:
            logger.debug(f"Color '{word}' found in name '{actor_name}'")
            return to_rgba(rgb, config.DEFAULT_BLOOD_ALPHA)
    raise ColorNotFound(f"No color found in actor name '{actor_name}'")


def resolve_color(key: str, actor_name: str | None = None) -> RGBAString:
    """Resolve a color key to an rgba() string.

    Resolution order:
        1. ``"name"``: derive the color from ``actor_name``.
        2. A known color name.
        3. An rgba() string, passed through unchanged.

    Raises:
        ColorNotFound: If ``key`` is ``"name"`` and the name has no color word.
        UnrecognizedColor: If ``key`` matches none of the above.
    """
    if key == config.NAME_LOOKUP:
        return color_from_name(actor_name or "")
    rgba = get_rgba(key)
    if rgba is not None:
        return rgba
    if RGBA_PATTERN.fullmatch(key.strip()):
        return key
    raise UnrecognizedColor(f"Color not recognized: '{key}'")


def lookup_blood_color(
    creature_type: str | None,
    actor_name: str,
    settings: SplatSettings,
) -> RGBAString:
    """Return a token's blood color, or ``"none"`` if it does not bleed.

    When ``settings.use_blood_color`` is off every token bleeds plain blood
    red, bloodless creature types included. Resolution failures are logged
    and replaced by the default blood color; this function never raises.
    """
    if settings.use_blood_color:
        key = colors.BLOOD_COLOR_BY_TYPE.get((creature_type or "").lower(), "blood")
    else:
        key = "blood"
    if key == config.NO_BLOOD:
        return config.NO_BLOOD

    try:
        rgba = resolve_color(key, actor_name)
    except (ColorNotFound, UnrecognizedColor) as e:
        logger.error(f"Blood color lookup failed for '{actor_name}': {e}")
        rgba = to_rgba(colors.BLOOD)

    logger.debug(f"Blood color for '{actor_name}' ({creature_type}): {rgba}")
    return rgba
