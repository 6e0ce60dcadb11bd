"""The scene's floor and trail splats."""

from __future__ import annotations

import logging

from bleedout.events import SceneSplatsChangedEvent, publish_event
from bleedout.settings import SplatSettings
from bleedout.splats.pool import ScenePool
from bleedout.splats.records import SplatRecord
from bleedout.splats.store import SCENE_KEY, SPLATS_FLAG, SplatStore
from bleedout.types import SplatId, TokenId

logger = logging.getLogger(__name__)


class SceneSplats:
    """Owns every splat that is drawn on the scene rather than on a token.

    Floor splats have no owning token; trail splats remember the token that
    left them but still belong to the scene, so they stay behind when the
    token heals or is removed.

    Attributes:
        pool: The scene pool shared with every token in the scene.
        store: Where the scene's splats are persisted.
        splats: Records in creation order.
    """

    def __init__(
        self, pool: ScenePool, store: SplatStore, key: str = SCENE_KEY
    ) -> None:
        self.pool = pool
        self.store = store
        self.key = key
        self.splats: list[SplatRecord] = []
        for record in store.load_splats(key):
            self.splats.append(record)
            pool.add(record, self)
        logger.info(f"Scene '{key}' loaded with {len(self.splats)} splat records")

    def add(self, record: SplatRecord) -> None:
        """Add a record, register it in the pool, save and redraw."""
        # Append before registering: the pool may evict this very record
        self.splats.append(record)
        self.pool.add(record, self)
        self._save()
        self.draw()

    def remove_splat(self, splat_id: SplatId) -> None:
        remaining = [s for s in self.splats if s.id != splat_id]
        if len(remaining) == len(self.splats):
            return
        self.splats = remaining
        self._save()
        self.draw()

    def apply_settings(self, settings: SplatSettings) -> None:
        """Resize the scene pool to the configured splat pool size."""
        logger.info(f"Scene pool size set to {settings.splat_pool_size}")
        self.pool.resize(settings.splat_pool_size)

    def splats_for_token(self, token_id: TokenId) -> list[SplatRecord]:
        """Trail splats left by ``token_id``."""
        return [s for s in self.splats if s.token_id == token_id]

    def wipe_all(self) -> None:
        """Remove every floor and trail splat, from the pool and the store."""
        self.pool.remove_target(self)
        self.splats = []
        self.store.save_splats(self.key, {SPLATS_FLAG: None})
        self.draw()

    def draw(self) -> None:
        publish_event(SceneSplatsChangedEvent(list(self.splats)))

    def _save(self) -> None:
        self.store.save_splats(
            self.key, {SPLATS_FLAG: [s.to_dict() for s in self.splats]}
        )
