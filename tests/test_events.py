"""Tests for the event bus system."""

import logging

import pytest

from bleedout.events import (
    EventBus,
    SceneSplatsChangedEvent,
    SplatEvent,
    SplatEvictedEvent,
    TokenSplatsChangedEvent,
    publish_event,
    reset_event_bus_for_testing,
    subscribe_to_event,
    unsubscribe_from_event,
)


class TestEventBus:
    """Tests for the EventBus class."""

    def test_handler_exception_does_not_crash_event_bus(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing handler is logged and the remaining handlers still run."""
        bus = EventBus()
        handler_calls: list[str] = []

        def failing_handler(event: SplatEvent) -> None:
            handler_calls.append("failing")
            raise ValueError("Handler failed!")

        def succeeding_handler(event: SplatEvent) -> None:
            handler_calls.append("succeeding")

        bus.subscribe(SceneSplatsChangedEvent, failing_handler)
        bus.subscribe(SceneSplatsChangedEvent, succeeding_handler)

        with caplog.at_level(logging.ERROR):
            bus.publish(SceneSplatsChangedEvent(splats=[]))

        assert handler_calls == ["failing", "succeeding"]
        assert "Error handling event SceneSplatsChangedEvent" in caplog.text
        assert "Traceback" in caplog.text

    def test_handlers_only_see_their_event_type(self) -> None:
        bus = EventBus()
        token_events: list[TokenSplatsChangedEvent] = []
        bus.subscribe(TokenSplatsChangedEvent, token_events.append)

        bus.publish(SceneSplatsChangedEvent(splats=[]))
        bus.publish(TokenSplatsChangedEvent(token_id="t1", splats=[]))

        assert [e.token_id for e in token_events] == ["t1"]

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        received: list[SplatEvent] = []
        bus.subscribe(SplatEvictedEvent, received.append)
        bus.unsubscribe(SplatEvictedEvent, received.append)

        bus.publish(SplatEvictedEvent(splat_id="a", token_id=None))

        assert received == []

    def test_unsubscribe_unknown_handler_is_ignored(self) -> None:
        bus = EventBus()
        bus.unsubscribe(SplatEvictedEvent, print)

    def test_handler_can_unsubscribe_while_publishing(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def once(event: SplatEvent) -> None:
            calls.append("once")
            bus.unsubscribe(SceneSplatsChangedEvent, once)

        def always(event: SplatEvent) -> None:
            calls.append("always")

        bus.subscribe(SceneSplatsChangedEvent, once)
        bus.subscribe(SceneSplatsChangedEvent, always)
        bus.publish(SceneSplatsChangedEvent(splats=[]))
        bus.publish(SceneSplatsChangedEvent(splats=[]))

        assert calls == ["once", "always", "always"]


class TestGlobalBus:
    def test_publish_reaches_global_subscribers(self) -> None:
        received: list[TokenSplatsChangedEvent] = []
        subscribe_to_event(TokenSplatsChangedEvent, received.append)

        publish_event(TokenSplatsChangedEvent(token_id="t1", splats=[], rotation=90))

        assert received[0].rotation == 90
        unsubscribe_from_event(TokenSplatsChangedEvent, received.append)

    def test_reset_drops_subscriptions(self) -> None:
        received: list[SplatEvent] = []
        subscribe_to_event(SceneSplatsChangedEvent, received.append)

        reset_event_bus_for_testing()
        publish_event(SceneSplatsChangedEvent(splats=[]))

        assert received == []
