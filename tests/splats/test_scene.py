"""Tests for the scene's floor and trail splats."""

from __future__ import annotations

from bleedout.settings import SplatSettings
from bleedout.splats.pool import ScenePool
from bleedout.splats.scene import SceneSplats
from bleedout.splats.store import SCENE_KEY, SPLATS_FLAG, InMemorySplatStore
from tests.helpers import EventRecorder, RecordingTarget, make_record, make_scene


class TestSceneSplats:
    """Tests for SceneSplats."""

    def test_loads_saved_splats_into_pool(self) -> None:
        store = InMemorySplatStore()
        records = [make_record("a", token_id=None), make_record("b")]
        store.save_splats(SCENE_KEY, {SPLATS_FLAG: [r.to_dict() for r in records]})
        pool = ScenePool()

        scene = SceneSplats(pool, store)

        assert scene.splats == records
        assert "a" in pool
        assert "b" in pool

    def test_add_saves_and_draws(self) -> None:
        events = EventRecorder()
        scene = make_scene()

        scene.add(make_record("a", token_id=None))

        assert scene.store.load_splats(SCENE_KEY) == scene.splats
        assert "a" in scene.pool
        assert [r.id for r in events.scene_events[-1].splats] == ["a"]

    def test_remove_splat(self) -> None:
        events = EventRecorder()
        scene = make_scene()
        scene.add(make_record("a", token_id=None))
        scene.add(make_record("b", token_id=None))

        scene.remove_splat("a")

        assert [r.id for r in scene.splats] == ["b"]
        assert [r.id for r in scene.store.load_splats(SCENE_KEY)] == ["b"]
        assert [r.id for r in events.scene_events[-1].splats] == ["b"]

    def test_remove_unknown_splat_is_a_no_op(self) -> None:
        scene = make_scene()
        scene.add(make_record("a", token_id=None))
        saves = scene.store.save_count

        scene.remove_splat("zzz")

        assert scene.store.save_count == saves

    def test_pool_eviction_removes_from_scene(self) -> None:
        scene = make_scene(max_size=2)
        for record_id in ("a", "b", "c"):
            scene.add(make_record(record_id, token_id=None))

        assert [r.id for r in scene.splats] == ["b", "c"]
        assert [r.id for r in scene.store.load_splats(SCENE_KEY)] == ["b", "c"]

    def test_evicting_own_newest_record(self) -> None:
        """A pool full of another holder's records still keeps the newest."""
        scene = make_scene(max_size=1)
        other = RecordingTarget()
        scene.pool.add(make_record("old"), other)

        scene.add(make_record("new", token_id=None))

        assert other.removed == ["old"]
        assert [r.id for r in scene.splats] == ["new"]

    def test_splats_for_token(self) -> None:
        scene = make_scene()
        scene.add(make_record("a", token_id="t1"))
        scene.add(make_record("b", token_id=None))
        scene.add(make_record("c", token_id="t2"))

        assert [r.id for r in scene.splats_for_token("t1")] == ["a"]

    def test_wipe_all(self) -> None:
        events = EventRecorder()
        scene = make_scene()
        other = RecordingTarget()
        scene.pool.add(make_record("token-splat"), other)
        scene.add(make_record("a", token_id=None))

        scene.wipe_all()

        assert scene.splats == []
        assert scene.store.load_flag(SCENE_KEY, SPLATS_FLAG) is None
        assert [e.record.id for e in scene.pool] == ["token-splat"]
        assert events.scene_events[-1].splats == []

    def test_apply_settings_resizes_pool(self) -> None:
        scene = make_scene()
        for record_id in ("a", "b", "c"):
            scene.add(make_record(record_id, token_id=None))

        scene.apply_settings(SplatSettings(splat_pool_size=1))

        assert scene.pool.max_size == 1
        assert [r.id for r in scene.splats] == ["c"]
