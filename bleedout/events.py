"""Global event bus for notifying the rendering layer about splat changes.

The splat engine never draws anything itself. Whenever the set of splats on a
token or on the scene floor changes, it publishes an event here and whatever
renders splats (a PIXI layer, a pygame surface, a test) subscribes to it.

USE FOR:
- Telling renderers to redraw a token's or the scene's splats
- Cross-system notifications (records evicted from the scene pool)

DO NOT USE FOR:
- Severity calculation, splat generation or pool bookkeeping
- Persistence (use the SplatStore directly)
- Anything that needs a return value

The bus is fire-and-forget: handlers run immediately and synchronously, and a
failing handler is logged without affecting the publisher or other handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bleedout.types import SplatId, TokenId

if TYPE_CHECKING:
    from bleedout.splats.records import SplatRecord

logger = logging.getLogger(__name__)


@dataclass
class SplatEvent:
    """Base class for all splat events."""

    pass


@dataclass
class TokenSplatsChangedEvent(SplatEvent):
    """A token's splats need redrawing.

    An empty ``splats`` list means the token's splat layer should be cleared.
    """

    token_id: TokenId
    splats: list[SplatRecord]
    rotation: float = 0.0


@dataclass
class SceneSplatsChangedEvent(SplatEvent):
    """The scene's floor and trail splats need redrawing."""

    splats: list[SplatRecord]


@dataclass
class SplatEvictedEvent(SplatEvent):
    """A record was dropped from the scene pool to stay under its size limit."""

    splat_id: SplatId
    token_id: TokenId | None


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: SplatEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        for handler in list(self._handlers.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error handling event {event_type.__name__}")


# Global event bus instance
_global_event_bus = EventBus()


def subscribe_to_event(event_type: type, handler: Callable) -> None:
    """Subscribe to an event type globally."""
    _global_event_bus.subscribe(event_type, handler)


def unsubscribe_from_event(event_type: type, handler: Callable) -> None:
    """Unsubscribe from an event type globally."""
    _global_event_bus.unsubscribe(event_type, handler)


def publish_event(event: SplatEvent) -> None:
    """Publish an event globally."""
    _global_event_bus.publish(event)


def reset_event_bus_for_testing() -> None:
    """Reset the global event bus. Use only in tests."""
    global _global_event_bus
    _global_event_bus = EventBus()
