from __future__ import annotations

import logging
import math

from bleedout import config
from bleedout.fonts import SplatFont
from bleedout.util import rng

logger = logging.getLogger(__name__)

_rng = rng.get("sampling.box_muller")


def sample_box_muller(
    stream: rng.RNG | None = None,
    max_attempts: int = config.BOX_MULLER_MAX_ATTEMPTS,
) -> float:
    """Return a normally distributed random number in [0, 1].

    Uses the Box-Muller transform, scaled so the distribution is centered on
    0.5 with a sharp falloff (a standard normal divided by 10). Draws that land
    outside [0, 1] are rejected and resampled. After ``max_attempts``
    rejections the last draw is clamped into range, so the loop always
    terminates.

    Args:
        stream: Random source; defaults to the "sampling.box_muller" stream.
        max_attempts: Upper bound on the number of draws.
    """
    source = stream if stream is not None else _rng
    num = 0.5
    for _ in range(max(1, max_attempts)):
        # Map [0, 1) to (0, 1] so log() never sees zero
        u = 1.0 - source.random()
        v = 1.0 - source.random()
        num = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        num = num / 10.0 + 0.5
        if 0.0 <= num <= 1.0:
            return num
    logger.warning(f"Box-Muller gave up after {max_attempts} draws, clamping {num}")
    return min(1.0, max(0.0, num))


def random_glyph(font: SplatFont, stream: rng.RNG | None = None) -> str:
    """Pick a uniformly random glyph from ``font``'s available glyphs."""
    source = stream if stream is not None else _rng
    return source.choice(font.available_glyphs)
