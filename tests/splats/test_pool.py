"""Tests for the scene pool."""

from __future__ import annotations

import threading

from bleedout.events import SplatEvictedEvent, subscribe_to_event
from bleedout.splats.pool import ScenePool
from tests.helpers import RecordingTarget, make_record


class TestScenePoolEviction:
    """Tests for size-limited eviction."""

    def test_oldest_is_evicted_first(self) -> None:
        pool = ScenePool(max_size=2)
        target = RecordingTarget()

        for record_id in ("a", "b", "c"):
            pool.add(make_record(record_id), target)

        assert [e.record.id for e in pool] == ["b", "c"]
        assert target.removed == ["a"]

    def test_eviction_notifies_the_holding_target(self) -> None:
        pool = ScenePool(max_size=1)
        first, second = RecordingTarget(), RecordingTarget()

        pool.add(make_record("a"), first)
        pool.add(make_record("b"), second)

        assert first.removed == ["a"]
        assert second.removed == []

    def test_eviction_publishes_event(self) -> None:
        events: list[SplatEvictedEvent] = []
        subscribe_to_event(SplatEvictedEvent, events.append)
        pool = ScenePool(max_size=1)

        pool.add(make_record("a", token_id=None), RecordingTarget())
        pool.add(make_record("b"), RecordingTarget())

        assert events == [SplatEvictedEvent(splat_id="a", token_id=None)]

    def test_unlimited_pool_never_evicts(self) -> None:
        for max_size in (None, 0):
            pool = ScenePool(max_size=max_size)
            target = RecordingTarget()
            for i in range(500):
                pool.add(make_record(str(i)), target)
            assert len(pool) == 500
            assert target.removed == []

    def test_shrinking_evicts_immediately(self) -> None:
        pool = ScenePool()
        target = RecordingTarget()
        for record_id in ("a", "b", "c", "d"):
            pool.add(make_record(record_id), target)

        pool.resize(1)

        assert target.removed == ["a", "b", "c"]
        assert "d" in pool

    def test_target_can_call_back_into_pool(self) -> None:
        """Eviction callbacks run outside the lock."""
        pool = ScenePool(max_size=1)

        class Reentrant:
            def __init__(self) -> None:
                self.seen: list[int] = []

            def remove_splat(self, splat_id: str) -> None:
                pool.remove(splat_id)
                self.seen.append(len(pool))

        target = Reentrant()
        pool.add(make_record("a"), target)
        pool.add(make_record("b"), target)

        assert target.seen == [1]


class TestScenePoolRemoval:
    def test_remove_by_id(self) -> None:
        pool = ScenePool()
        target = RecordingTarget()
        pool.add(make_record("a"), target)
        pool.add(make_record("b"), target)

        assert pool.remove("a")
        assert not pool.remove("a")
        assert "a" not in pool
        assert "b" in pool
        assert target.removed == []

    def test_remove_target_only_drops_that_target(self) -> None:
        pool = ScenePool()
        first, second = RecordingTarget(), RecordingTarget()
        pool.add(make_record("a"), first)
        pool.add(make_record("b"), second)
        pool.add(make_record("c"), first)

        assert pool.remove_target(first) == 2
        assert [e.record.id for e in pool] == ["b"]

    def test_records_for_token(self) -> None:
        pool = ScenePool()
        target = RecordingTarget()
        pool.add(make_record("a", token_id="t1"), target)
        pool.add(make_record("b", token_id=None), target)
        pool.add(make_record("c", token_id="t1"), target)

        assert [r.id for r in pool.records_for_token("t1")] == ["a", "c"]

    def test_clear(self) -> None:
        pool = ScenePool()
        pool.add(make_record("a"), RecordingTarget())
        pool.clear()
        assert len(pool) == 0


def test_concurrent_adds_respect_the_limit() -> None:
    pool = ScenePool(max_size=50)
    target = RecordingTarget()

    def add_many(prefix: str) -> None:
        for i in range(200):
            pool.add(make_record(f"{prefix}-{i}"), target)

    threads = [threading.Thread(target=add_many, args=(str(n),)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(pool) == 50
    assert len(target.removed) == 750
