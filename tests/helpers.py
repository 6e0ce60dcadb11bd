from __future__ import annotations

from typing import Any

from bleedout.events import (
    SceneSplatsChangedEvent,
    TokenSplatsChangedEvent,
    subscribe_to_event,
)
from bleedout.settings import SplatSettings
from bleedout.splats.generators import SceneGrid
from bleedout.splats.pool import ScenePool
from bleedout.splats.records import GlyphPlacement, SplatRecord, SplatStyle
from bleedout.splats.scene import SceneSplats
from bleedout.splats.store import InMemorySplatStore
from bleedout.splats.token import SplatToken, TokenState


class FixedMeasurer:
    """A TextMeasurer that gives every glyph the same size."""

    def __init__(self, width: float = 10.0, height: float = 20.0) -> None:
        self.width = width
        self.height = height
        self.calls: list[tuple[str, SplatStyle]] = []

    def measure(self, glyph: str, style: SplatStyle) -> tuple[float, float]:
        self.calls.append((glyph, style))
        return (self.width, self.height)


class RecordingTarget:
    """A SplatTarget that remembers which ids it was asked to drop."""

    def __init__(self) -> None:
        self.removed: list[str] = []

    def remove_splat(self, splat_id: str) -> None:
        self.removed.append(splat_id)


class EventRecorder:
    """Collects render events published on the global bus."""

    def __init__(self) -> None:
        self.token_events: list[TokenSplatsChangedEvent] = []
        self.scene_events: list[SceneSplatsChangedEvent] = []
        subscribe_to_event(TokenSplatsChangedEvent, self.token_events.append)
        subscribe_to_event(SceneSplatsChangedEvent, self.scene_events.append)


def make_record(
    record_id: str, token_id: str | None = "token-1", glyphs: str = "AB"
) -> SplatRecord:
    """A small record with one placement per glyph."""
    return SplatRecord(
        id=record_id,
        token_id=token_id,
        style=SplatStyle(
            font_family="splatter", font_size=24, fill="rgba(1, 2, 3, 0.7)"
        ),
        splats=tuple(
            GlyphPlacement(glyph=g, x=i * 10, y=0, width=10, height=20)
            for i, g in enumerate(glyphs)
        ),
    )


def make_scene(
    store: InMemorySplatStore | None = None, max_size: int | None = None
) -> SceneSplats:
    return SceneSplats(ScenePool(max_size), store or InMemorySplatStore())


def make_splat_token(
    *,
    hp: float = 100,
    max_hp: float = 100,
    x: float = 0,
    y: float = 0,
    scene: SceneSplats | None = None,
    settings: SplatSettings | None = None,
    measurer: FixedMeasurer | None = None,
    grid: SceneGrid | None = None,
    **token_kwargs: Any,
) -> SplatToken:
    """A SplatToken in a fresh scene with predictable defaults.

    Defaults: 100 HP, a 1x1 token on a 100px grid, a fixed-size measurer and
    thresholds of 0.5 (health) and 0.1 (damage).
    """
    if settings is None:
        settings = SplatSettings(health_threshold=0.5, damage_threshold=0.1)
    token = TokenState(
        id=token_kwargs.pop("id", "token-1"),
        x=x,
        y=y,
        hp=hp,
        max_hp=max_hp,
        **token_kwargs,
    )
    return SplatToken(
        token,
        scene=scene or make_scene(),
        measurer=measurer or FixedMeasurer(),
        settings=settings,
        grid=grid or SceneGrid(grid_size=100),
    )
