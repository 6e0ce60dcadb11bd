"""The bleeding state of a single token.

A ``SplatToken`` wraps one token (game-piece) in the host scene. The host
feeds it every change to the token's position, rotation and HP; the
SplatToken works out how badly the token was hurt or healed, creates or
removes splats, leaves a blood trail as it moves, saves its flags and tells
the renderer to redraw.

Update cycle (``update_changes``):
    1. Damage: HP change -> hit severity and bleeding severity
    2. Bleed: a hit splats the floor and the token; a heal removes the
       oldest token splats
    3. Trail: a bleeding token that moved drops trail splats
    4. Rotate: the splat layer follows the token's rotation
    5. Persist: save flags, then reset the per-cycle state

Only one update runs at a time per token. Different tokens share the scene
pool, which is safe to use from several threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from bleedout import config
from bleedout.color_resolver import lookup_blood_color
from bleedout.events import TokenSplatsChangedEvent, publish_event
from bleedout.fonts import get_font
from bleedout.settings import SplatSettings
from bleedout.severity import (
    bloodied_severity,
    compute_hit_severity,
    derive_severities,
    update_movement,
)
from bleedout.splats.changes import TokenChanges
from bleedout.splats.generators import (
    DefaultFloorSplatter,
    FloorSplatGenerator,
    SceneGrid,
    generate_token_splats,
    generate_trail_splats,
    heal_splats,
    trail_distances,
)
from bleedout.splats.measure import TextMeasurer
from bleedout.splats.records import SplatRecord
from bleedout.splats.scene import SceneSplats
from bleedout.splats.store import BLEEDING_SEVERITY_FLAG, SPLATS_FLAG
from bleedout.types import Direction, PixelPos, RGBAString, Severity, SplatId, TokenId
from bleedout.util.geometry import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class TokenState:
    """What the splat engine needs to know about a host token.

    Attributes:
        id: Token id in the host scene.
        x: Left edge in scene pixels.
        y: Top edge in scene pixels.
        hp: Current hit points.
        max_hp: Maximum hit points.
        width: Width in grid squares.
        height: Height in grid squares.
        scale: Sprite scale relative to the token's footprint.
        rotation: Rotation in degrees.
        name: Actor name, used for name-based blood colors.
        creature_type: NPC type or PC race, used for blood colors.
    """

    id: TokenId
    x: float
    y: float
    hp: float
    max_hp: float
    width: float = 1
    height: float = 1
    scale: float = 1
    rotation: float = 0.0
    name: str = ""
    creature_type: str | None = None


class SplatToken:
    """Bleeding state and splats of one token.

    Attributes:
        id: Token id.
        blood_color: rgba() fill, or ``"none"`` for a token that never bleeds.
        sprite_width: Scaled sprite width in pixels.
        sprite_height: Scaled sprite height in pixels.
        hit_severity: Severity of the change being processed; None between
            updates.
        bleeding_severity: Persistent bleeding that drives the trail.
        bleeding_distance: Distance moved since the last trail splat.
        splats: This token's records, oldest first.
    """

    def __init__(
        self,
        token: TokenState,
        *,
        scene: SceneSplats,
        measurer: TextMeasurer,
        settings: SplatSettings | None = None,
        grid: SceneGrid | None = None,
        floor_splatter: FloorSplatGenerator | None = None,
    ) -> None:
        self.settings = settings if settings is not None else SplatSettings()
        self.grid = grid if grid is not None else SceneGrid()
        self.scene = scene
        self.pool = scene.pool
        self.store = scene.store
        self.measurer = measurer
        self.floor_splatter = (
            floor_splatter
            if floor_splatter is not None
            else DefaultFloorSplatter(measurer)
        )

        self.id = token.id
        self.blood_color: RGBAString = lookup_blood_color(
            token.creature_type, token.name, self.settings
        )
        self.footprint_width = token.width * self.grid.grid_size
        self.footprint_height = token.height * self.grid.grid_size
        self.sprite_width = self.footprint_width * token.scale
        self.sprite_height = self.footprint_height * token.scale
        self.rotation = token.rotation

        self.x = token.x
        self.y = token.y
        self.hp = token.hp
        self.max_hp = token.max_hp

        self.hit_severity: Severity | None = None
        self.bleeding_severity: Severity | None = None
        self.bleeding_distance = 0.0
        self.direction: Direction | None = None
        self.last_pos: PixelPos | None = None
        self.curr_pos: PixelPos | None = None
        self.move_pos: PixelPos | None = None
        self.splats: list[SplatRecord] = []

        if not self.bleeds:
            logger.info(f"Token {self.id} does not bleed")
            return

        self.bleeding_severity = self.store.load_flag(self.id, BLEEDING_SEVERITY_FLAG)
        for record in self.store.load_splats(self.id):
            self.splats.append(record)
            self.pool.add(record, self)

    @property
    def bleeds(self) -> bool:
        return self.blood_color != config.NO_BLOOD

    @property
    def center(self) -> PixelPos:
        """Center of the token's footprint in scene pixels."""
        return (
            self.x + self.footprint_width / 2,
            self.y + self.footprint_height / 2,
        )

    # ------------------------------------------------------------------
    # Host entry points
    # ------------------------------------------------------------------

    def bleed_if_bloodied(self) -> None:
        """Splat a token that is already below half health when first drawn.

        Only applies with ``settings.half_health_bloodied`` and when the token
        is not already bleeding.
        """
        if (
            not self.bleeds
            or self.bleeding_severity
            or not self.settings.half_health_bloodied
        ):
            return
        severity = bloodied_severity(self.hp, self.max_hp)
        if severity is None:
            return
        logger.debug(f"Token {self.id} starts bloodied, severity {severity:.2f}")
        self.hit_severity = severity
        self.bleeding_severity = severity
        updates: dict[str, Any] = {BLEEDING_SEVERITY_FLAG: severity}
        if self._bleed_token():
            updates[SPLATS_FLAG] = self._serialized_splats()
        self.store.save_splats(self.id, updates)
        self.hit_severity = None
        self.draw()

    def update_changes(self, changes: TokenChanges | Mapping[str, Any]) -> None:
        """Process one change event for this token.

        Accepts a ``TokenChanges`` or a raw host payload. Changes with no
        position, rotation or HP are ignored.
        """
        if isinstance(changes, Mapping):
            changes = TokenChanges.from_mapping(changes)
        if not self.bleeds or changes.is_empty:
            return

        updates: dict[str, Any] = {}
        self.hit_severity, bleeding_severity = self._get_updated_damage(changes)
        if bleeding_severity is not None:
            self.bleeding_severity = bleeding_severity
            updates[BLEEDING_SEVERITY_FLAG] = bleeding_severity
        self.direction = self._get_updated_movement(changes)

        splats_changed = False
        if self.hit_severity is not None and self.hit_severity > 0:
            self._bleed_floor()
            splats_changed = self._bleed_token()
        elif self.hit_severity is not None and self.hit_severity < 0 and self.splats:
            self.splats = heal_splats(self.splats, self.hit_severity, self.pool)
            splats_changed = True

        if self.direction and self.bleeding_severity:
            self._bleed_trail()

        rotated = self._update_rotation(changes)

        self._save_state(changes, updates, splats_changed)
        if splats_changed or rotated:
            self.draw()

    def update_splats(self, updated: Sequence[SplatRecord | dict] | None) -> None:
        """Replace this token's splats with data synced from the host.

        Does nothing if the data matches what is already held.
        """
        if not self.bleeds:
            return
        records = [
            r if isinstance(r, SplatRecord) else SplatRecord.from_dict(r)
            for r in updated or []
        ]
        if records == self.splats:
            return
        self.pool.remove_target(self)
        self.splats = list(records)
        for record in records:
            self.pool.add(record, self)
        self.draw()

    def remove_splat(self, splat_id: SplatId) -> None:
        """Drop one record, e.g. when the scene pool evicts it."""
        remaining = [s for s in self.splats if s.id != splat_id]
        if len(remaining) == len(self.splats):
            return
        self.splats = remaining
        self.store.save_splats(self.id, {SPLATS_FLAG: self._serialized_splats()})
        self.draw()

    def wipe(self) -> None:
        """Clear the drawn splats, keeping the data."""
        publish_event(TokenSplatsChangedEvent(self.id, [], self.rotation))

    def wipe_all(self) -> None:
        """Clear the drawn splats and delete all of this token's splat data."""
        self.wipe()
        self.pool.remove_target(self)
        self.splats = []
        self.store.save_splats(self.id, {SPLATS_FLAG: None})

    def draw(self) -> None:
        """Ask the renderer to redraw every splat on this token."""
        logger.debug(f"Token {self.id}: draw {len(self.splats)} splat records")
        publish_event(
            TokenSplatsChangedEvent(self.id, list(self.splats), self.rotation)
        )

    # ------------------------------------------------------------------
    # Update cycle
    # ------------------------------------------------------------------

    def _get_updated_damage(
        self, changes: TokenChanges
    ) -> tuple[Severity | None, Severity | None]:
        if changes.hp is None:
            return (None, None)
        max_hp = changes.max_hp if changes.max_hp is not None else self.max_hp
        raw_severity = compute_hit_severity(
            self.hp,
            changes.hp,
            max_hp,
            self.settings.health_threshold,
            self.settings.damage_threshold,
            self.settings.death_multiplier,
        )
        return derive_severities(raw_severity, self.bleeding_severity)

    def _get_updated_movement(self, changes: TokenChanges) -> Direction | None:
        movement = update_movement((self.x, self.y), changes.x, changes.y)
        if movement is None:
            return None
        self.last_pos = movement.last_pos
        self.curr_pos = movement.curr_pos
        self.move_pos = movement.move_pos
        return movement.direction

    def _update_rotation(self, changes: TokenChanges) -> bool:
        if changes.rotation is None or changes.rotation == self.rotation:
            return False
        logger.debug(f"Token {self.id}: rotation {changes.rotation}")
        self.rotation = changes.rotation
        return True

    def _bleed_floor(self) -> None:
        density = self.settings.floor_splat_density
        if not density:
            return
        record = self.floor_splatter(
            self,
            get_font(self.settings.floor_splat_font),
            self.settings.floor_splat_size,
            round_half_up(density),
        )
        if record is None:
            return
        if record.token_id is not None:
            record = replace(record, token_id=None)
        self.scene.add(record)

    def _bleed_token(self) -> bool:
        """Add a record of splats for the current hit. Returns True if added."""
        record = generate_token_splats(
            token_id=self.id,
            sprite_width=self.sprite_width,
            sprite_height=self.sprite_height,
            hit_severity=self.hit_severity or 0,
            blood_color=self.blood_color,
            font=get_font(self.settings.token_splat_font),
            size=self.settings.token_splat_size,
            density=self.settings.token_splat_density,
            spread=self.settings.splat_spread,
            grid=self.grid,
            measurer=self.measurer,
        )
        if record is None:
            return False
        # Append before registering: the pool may evict this very record
        self.splats = [*self.splats, record]
        self.pool.add(record, self)
        return True

    def _bleed_trail(self) -> None:
        density = self.settings.trail_splat_density
        if not density or self.move_pos is None or self.last_pos is None:
            return
        fractions, self.bleeding_distance = trail_distances(
            self.move_pos,
            self.bleeding_severity or 0,
            density,
            self.grid.grid_size,
            self.bleeding_distance,
        )
        if not fractions:
            return
        last_center = (
            self.last_pos[0] + self.footprint_width / 2,
            self.last_pos[1] + self.footprint_height / 2,
        )
        record = generate_trail_splats(
            token_id=self.id,
            last_center=last_center,
            move_pos=self.move_pos,
            fractions=fractions,
            sprite_width=self.sprite_width,
            sprite_height=self.sprite_height,
            blood_color=self.blood_color,
            font=get_font(self.settings.trail_splat_font),
            size=self.settings.trail_splat_size,
            grid=self.grid,
            measurer=self.measurer,
        )
        if record is not None:
            self.scene.add(record)

    def _save_state(
        self, changes: TokenChanges, updates: dict[str, Any], splats_changed: bool
    ) -> None:
        if changes.x is not None:
            self.x = changes.x
        if changes.y is not None:
            self.y = changes.y
        if changes.hp is not None:
            self.hp = changes.hp
        if changes.max_hp is not None:
            self.max_hp = changes.max_hp

        # Serialized after the trail step, which can evict this token's records
        if splats_changed:
            updates[SPLATS_FLAG] = self._serialized_splats()
        if updates:
            self.store.save_splats(self.id, updates)

        # Per-cycle state never carries over to the next update
        self.hit_severity = None
        self.direction = None
        self.move_pos = None

    def _serialized_splats(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.splats]
