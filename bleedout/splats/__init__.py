"""Splat generation and bookkeeping for bleeding tokens."""

from .changes import TokenChanges
from .generators import DefaultFloorSplatter, SceneGrid
from .measure import PillowTextMeasurer, TextMeasurer
from .pool import ScenePool, SplatTarget
from .records import GlyphPlacement, SplatRecord, SplatStyle
from .scene import SceneSplats
from .store import InMemorySplatStore, SplatStore
from .token import SplatToken, TokenState

__all__ = [
    "DefaultFloorSplatter",
    "GlyphPlacement",
    "InMemorySplatStore",
    "PillowTextMeasurer",
    "SceneGrid",
    "ScenePool",
    "SceneSplats",
    "SplatRecord",
    "SplatStore",
    "SplatStyle",
    "SplatTarget",
    "SplatToken",
    "TextMeasurer",
    "TokenChanges",
    "TokenState",
]
