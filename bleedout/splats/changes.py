from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bleedout.types import PixelCoord


@dataclass(frozen=True)
class TokenChanges:
    """One change event for a token. A field left as None is unchanged."""

    x: PixelCoord | None = None
    y: PixelCoord | None = None
    rotation: float | None = None
    hp: float | None = None
    max_hp: float | None = None

    @property
    def is_empty(self) -> bool:
        """True when nothing the splat engine cares about changed."""
        return (
            self.x is None
            and self.y is None
            and self.rotation is None
            and self.hp is None
        )

    @classmethod
    def from_mapping(cls, changes: Mapping[str, Any]) -> TokenChanges:
        """Build from a host change payload.

        Accepts flat keys (``x``, ``y``, ``rotation``, ``hp``, ``max_hp``) as
        well as the nested actor shape
        ``{"actorData": {"data": {"attributes": {"hp": {"value", "max"}}}}}``.
        Anything else in the payload is ignored.
        """
        hp = changes.get("hp")
        max_hp = changes.get("max_hp")

        nested_hp = _dig(changes, "actorData", "data", "attributes", "hp")
        if isinstance(nested_hp, Mapping):
            hp = nested_hp.get("value", hp)
            max_hp = nested_hp.get("max", max_hp)
        elif isinstance(hp, Mapping):
            max_hp = hp.get("max", max_hp)
            hp = hp.get("value")

        return cls(
            x=_number(changes.get("x")),
            y=_number(changes.get("y")),
            rotation=_number(changes.get("rotation")),
            hp=_number(hp),
            max_hp=_number(max_hp),
        )


def _dig(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def _number(value: Any) -> float | int | None:
    # bool is an int subclass but never a coordinate or HP value
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value
