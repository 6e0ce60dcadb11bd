"""
Configuration constants.

Centralizes all magic numbers and default configuration values used throughout
the codebase. Organized by functional area for easy maintenance. Values that a
host may change per update live on ``bleedout.settings.SplatSettings``; the
constants here are only its defaults.
"""

from pathlib import Path

# =============================================================================
# GENERAL
# =============================================================================

PROJECT_ROOT_PATH = Path(__file__).resolve().parent.parent

# RANDOM_SEED = "splatter1"
RANDOM_SEED = None

# =============================================================================
# SCENE & GRID
# =============================================================================

DEFAULT_GRID_SIZE = 100  # Pixels per grid square

# =============================================================================
# SPLAT GENERATION DEFAULTS
# =============================================================================

# Density: splats per unit of severity (token, trail) or per hit (floor)
DEFAULT_FLOOR_SPLAT_DENSITY = 1
DEFAULT_TRAIL_SPLAT_DENSITY = 3
DEFAULT_TOKEN_SPLAT_DENSITY = 4

# Size: font size in pixels before scaling by token size and severity
DEFAULT_FLOOR_SPLAT_SIZE = 30
DEFAULT_TRAIL_SPLAT_SIZE = 16
DEFAULT_TOKEN_SPLAT_SIZE = 24

# Fraction of the sprite size used as the random placement radius
DEFAULT_SPLAT_SPREAD = 0.8

# Maximum records held in the scene pool before the oldest is evicted
DEFAULT_SPLAT_POOL_SIZE = 100

DEFAULT_FLOOR_SPLAT_FONT = "splatter"
DEFAULT_TRAIL_SPLAT_FONT = "WC Rhesus A Bta"
DEFAULT_TOKEN_SPLAT_FONT = "splatter"

# =============================================================================
# DAMAGE THRESHOLDS
# =============================================================================

# Tokens above this fraction of max HP do not bleed
DEFAULT_HEALTH_THRESHOLD = 0.75
# Hits below this fraction of max HP do not bleed
DEFAULT_DAMAGE_THRESHOLD = 0.1
# Severity multiplier applied when a hit brings a token to 0 HP
DEFAULT_DEATH_MULTIPLIER = 2.0

DEFAULT_HALF_HEALTH_BLOODIED = True
DEFAULT_USE_BLOOD_COLOR = True

# =============================================================================
# SAMPLING
# =============================================================================

# Box-Muller rejection sampling gives up (and clamps) after this many draws
BOX_MULLER_MAX_ATTEMPTS = 64

# Fraction of the movement length used as the maximum sideways bend of a
# blood trail's Bezier control point
TRAIL_CURVE_BEND = 0.25

# =============================================================================
# COLORS
# =============================================================================

DEFAULT_BLOOD_ALPHA = 0.7
NO_BLOOD = "none"  # Sentinel blood color: token never bleeds
NAME_LOOKUP = "name"  # Sentinel blood color: derive from the actor's name

# =============================================================================
# ASSET PATHS
# =============================================================================

ASSETS_BASE_DIR = PROJECT_ROOT_PATH / "assets"

SPLAT_FONTS_DIR = ASSETS_BASE_DIR / "fonts"
