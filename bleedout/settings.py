"""Per-update splat settings and the violence-level presets.

``SplatSettings`` bundles every value the splat engine reads while processing
a change event. Hosts usually keep one instance per scene and tweak it from
their settings UI; the engine only ever reads it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace

from bleedout import config
from bleedout.util.live_vars import live_variable_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViolenceLevel:
    """A named preset of splat densities, sizes, spread and pool size."""

    trail_splat_density: float
    floor_splat_density: float
    token_splat_density: float
    trail_splat_size: int
    floor_splat_size: int
    token_splat_size: int
    splat_spread: float
    splat_pool_size: int


VIOLENCE_LEVELS: dict[str, ViolenceLevel] = {
    "Disabled": ViolenceLevel(
        trail_splat_density=0,
        floor_splat_density=0,
        token_splat_density=0,
        trail_splat_size=0,
        floor_splat_size=0,
        token_splat_size=0,
        splat_spread=0,
        splat_pool_size=0,
    ),
    "Kid": ViolenceLevel(
        trail_splat_density=0.5,
        floor_splat_density=1,
        token_splat_density=1,
        trail_splat_size=12,
        floor_splat_size=25,
        token_splat_size=20,
        splat_spread=0.4,
        splat_pool_size=25,
    ),
    "Shrieker": ViolenceLevel(
        trail_splat_density=config.DEFAULT_TRAIL_SPLAT_DENSITY,
        floor_splat_density=config.DEFAULT_FLOOR_SPLAT_DENSITY,
        token_splat_density=config.DEFAULT_TOKEN_SPLAT_DENSITY,
        trail_splat_size=config.DEFAULT_TRAIL_SPLAT_SIZE,
        floor_splat_size=config.DEFAULT_FLOOR_SPLAT_SIZE,
        token_splat_size=config.DEFAULT_TOKEN_SPLAT_SIZE,
        splat_spread=config.DEFAULT_SPLAT_SPREAD,
        splat_pool_size=config.DEFAULT_SPLAT_POOL_SIZE,
    ),
    "Bloodbath": ViolenceLevel(
        trail_splat_density=6,
        floor_splat_density=3,
        token_splat_density=8,
        trail_splat_size=20,
        floor_splat_size=40,
        token_splat_size=30,
        splat_spread=1.2,
        splat_pool_size=400,
    ),
}


@dataclass
class SplatSettings:
    """Configuration values read by the splat engine on every update.

    A density or size of 0 disables that kind of splat entirely.
    """

    floor_splat_density: float = config.DEFAULT_FLOOR_SPLAT_DENSITY
    floor_splat_size: int = config.DEFAULT_FLOOR_SPLAT_SIZE
    floor_splat_font: str = config.DEFAULT_FLOOR_SPLAT_FONT
    trail_splat_density: float = config.DEFAULT_TRAIL_SPLAT_DENSITY
    trail_splat_size: int = config.DEFAULT_TRAIL_SPLAT_SIZE
    trail_splat_font: str = config.DEFAULT_TRAIL_SPLAT_FONT
    token_splat_density: float = config.DEFAULT_TOKEN_SPLAT_DENSITY
    token_splat_size: int = config.DEFAULT_TOKEN_SPLAT_SIZE
    token_splat_font: str = config.DEFAULT_TOKEN_SPLAT_FONT
    splat_spread: float = config.DEFAULT_SPLAT_SPREAD
    splat_pool_size: int = config.DEFAULT_SPLAT_POOL_SIZE
    health_threshold: float = config.DEFAULT_HEALTH_THRESHOLD
    damage_threshold: float = config.DEFAULT_DAMAGE_THRESHOLD
    death_multiplier: float = config.DEFAULT_DEATH_MULTIPLIER
    half_health_bloodied: bool = config.DEFAULT_HALF_HEALTH_BLOODIED
    use_blood_color: bool = config.DEFAULT_USE_BLOOD_COLOR

    @classmethod
    def from_violence_level(cls, name: str, **overrides) -> SplatSettings:
        """Create settings from a named violence preset.

        Raises:
            KeyError: If ``name`` is not a known violence level.
        """
        level = VIOLENCE_LEVELS[name]
        values = {f.name: getattr(level, f.name) for f in fields(level)}
        values.update(overrides)
        return cls(**values)

    def with_violence_level(self, name: str) -> SplatSettings:
        """Return a copy with the preset's values applied, keeping fonts and
        thresholds."""
        level = VIOLENCE_LEVELS[name]
        return replace(self, **{f.name: getattr(level, f.name) for f in fields(level)})

    def validate(self) -> None:
        """Validate threshold and spread ranges.

        Raises:
            ValueError: If any value is out of its valid range.
        """
        if not 0 < self.health_threshold <= 1:
            raise ValueError(
                f"health_threshold must be in (0, 1], got {self.health_threshold}"
            )
        if not 0 <= self.damage_threshold <= 1:
            raise ValueError(
                f"damage_threshold must be in [0, 1], got {self.damage_threshold}"
            )
        if self.death_multiplier < 0:
            raise ValueError(
                f"death_multiplier must be >= 0, got {self.death_multiplier}"
            )
        if self.splat_spread < 0:
            raise ValueError(f"splat_spread must be >= 0, got {self.splat_spread}")


def register_live_settings(settings: SplatSettings, prefix: str = "splats") -> None:
    """Expose every field of ``settings`` as a writable live variable.

    Re-registering under the same prefix replaces the previous bindings, so a
    host can call this again after swapping in a new settings object.
    """
    live_variable_registry.unregister_prefix(f"{prefix}.")
    for f in fields(settings):
        name = f.name

        def getter(name: str = name) -> object:
            return getattr(settings, name)

        def setter(value: object, name: str = name) -> None:
            setattr(settings, name, value)
            logger.debug(f"Live setting {prefix}.{name} = {value!r}")

        live_variable_registry.register(
            f"{prefix}.{name}",
            getter,
            setter,
            description=f"Splat setting '{name}'",
        )
