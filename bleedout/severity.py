"""Damage severity and movement tracking for bleeding tokens.

Severity is a signed scale describing a single HP change:

* -1: full health or fully healed
* -1 to 0: partial heal
* 0: no splats this time
* 0 to 1: minor to moderate hit
* above 1: severe hit; a killing blow can exceed 2 with a death multiplier

The token keeps two severities. ``hit_severity`` drives the splats created by
this update and is discarded afterwards. ``bleeding_severity`` persists and
drives the trail the token leaves as it moves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bleedout.types import Direction, PixelCoord, PixelPos, Severity
from bleedout.util.geometry import normalize_direction

logger = logging.getLogger(__name__)


def compute_hit_severity(
    prior_hp: float | None,
    current_hp: float | None,
    max_hp: float | None,
    health_threshold: float,
    damage_threshold: float,
    death_multiplier: float,
) -> Severity | None:
    """Convert an HP change into a severity.

    Args:
        prior_hp: HP before this change.
        current_hp: HP after this change.
        max_hp: Maximum HP.
        health_threshold: Tokens above this fraction of max HP do not bleed.
            Also rescales partial heals so that healing back up to the
            threshold counts as a full heal.
        damage_threshold: Hits smaller than this fraction of max HP do not
            bleed.
        death_multiplier: Extra scale applied when the hit drops HP to 0.

    Returns:
        The severity, or None when any HP value is missing (no change).
    """
    if prior_hp is None or current_hp is None or max_hp is None:
        return None
    if max_hp <= 0:
        logger.debug(f"Ignoring HP change with max HP {max_hp}")
        return Severity(0.0)

    if current_hp == max_hp:
        return Severity(-1.0)

    fraction_of_max = current_hp / max_hp
    change_fraction_of_max = (prior_hp - current_hp) / max_hp

    if current_hp < prior_hp:
        if fraction_of_max > health_threshold:
            logger.debug(f"Too healthy to bleed: {fraction_of_max:.2f} of max HP")
            return Severity(0.0)
        if change_fraction_of_max < damage_threshold:
            logger.debug(f"Hit too small to bleed: {change_fraction_of_max:.2f}")
            return Severity(0.0)

    if change_fraction_of_max < 0:
        if health_threshold <= 0:
            logger.debug("No health threshold, partial heal ignored")
            return Severity(0.0)
        return Severity(change_fraction_of_max / health_threshold)

    multiplier = death_multiplier if current_hp == 0 else 1
    severity = 1 + (change_fraction_of_max / 2) * multiplier
    logger.debug(f"Hit severity {severity:.3f}")
    return Severity(severity)


def derive_severities(
    raw_severity: Severity | None,
    prior_bleeding_severity: Severity | None,
) -> tuple[Severity | None, Severity | None]:
    """Split a raw severity into ``(hit_severity, bleeding_severity)``.

    * A hit more than one step above the current bleeding resets the bleeding
      baseline to the new hit.
    * Any heal stops the bleeding.
    * Otherwise bleeding carries on unchanged.

    ``(None, None)`` means "no change" and must not be treated as zero.
    """
    if raw_severity is None:
        return (None, None)
    if raw_severity > (prior_bleeding_severity or 0) + 1:
        return (raw_severity, raw_severity)
    if raw_severity < 0:
        return (raw_severity, Severity(0.0))
    return (raw_severity, prior_bleeding_severity)


def bloodied_severity(hp: float, max_hp: float) -> Severity | None:
    """Severity for a token first seen below half health.

    Scales from 1 at exactly half HP to 2 at 0 HP. Returns None when the
    token is at or above half HP.
    """
    if max_hp <= 0 or hp >= max_hp / 2:
        return None
    return Severity(2 - hp / (max_hp / 2))


@dataclass(frozen=True)
class Movement:
    """One position change of a token."""

    last_pos: PixelPos
    curr_pos: PixelPos
    move_pos: PixelPos
    direction: Direction


def update_movement(
    prior_pos: PixelPos,
    new_x: PixelCoord | None = None,
    new_y: PixelCoord | None = None,
) -> Movement | None:
    """Track a position change.

    A missing component means that axis did not change. Returns None when
    the token did not move.
    """
    if new_x is None and new_y is None:
        return None
    last_pos = prior_pos
    curr_pos = (
        prior_pos[0] if new_x is None else new_x,
        prior_pos[1] if new_y is None else new_y,
    )
    if curr_pos == last_pos:
        return None

    move_pos = (curr_pos[0] - last_pos[0], curr_pos[1] - last_pos[1])
    logger.debug(f"Movement {last_pos} -> {curr_pos}")
    return Movement(
        last_pos=last_pos,
        curr_pos=curr_pos,
        move_pos=move_pos,
        direction=normalize_direction(last_pos, curr_pos),
    )
