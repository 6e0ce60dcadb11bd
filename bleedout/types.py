from __future__ import annotations

from typing import NewType

# =============================================================================
# PIXEL-BASED COORDINATE SYSTEMS
# =============================================================================

# Scene pixel coordinates. Token positions are the top-left corner of the
# token sprite; glyph placements are relative to their record origin.
PixelCoord = int | float  # Example: px_x=123.5
PixelPos = tuple[PixelCoord, PixelCoord]  # Example: (123.5, 456.7)

# Per-axis movement direction. Each component is -1, 0 or 1, so diagonal
# moves are (1, 1) etc. This is NOT a unit vector.
Direction = tuple[int, int]  # Example: (1, -1) = north-east

# Flat polygon as alternating x, y values: [x1, y1, x2, y2, ...]
FlatPolygon = list[float]

# =============================================================================
# DAMAGE-RELATED TYPES
# =============================================================================

# Signed scale of a damage or healing event:
# * -1 = fully healed, (-1, 0) = partial heal
# * 0 = nothing to generate
# * (0, 1] = minor to moderate hit, > 1 = severe or lethal hit
Severity = NewType("Severity", float)

# =============================================================================
# RENDERING-RELATED TYPES
# =============================================================================

# CSS-style color string, e.g. "rgba(138, 7, 7, 0.7)". The literal "none"
# marks a bloodless token.
RGBAString = str

# Unique identifier of a SplatRecord.
SplatId = str

# Identifier of a token (game-piece) in the host scene.
TokenId = str

# Random seed for deterministic generation.
# Can be an int for numeric seeds or a descriptive string like "splatter1".
RandomSeed = int | str | None
