"""Scene-wide registry of live splat records.

Every token and the scene floor register the records they own here, together
with the ``SplatTarget`` that holds them. The pool never owns records: it is
the index used to find every holder of a record when it is healed away,
wiped, or evicted because the scene has too many splats.

Design Decisions:
    - Injected: one pool per scene, passed to every holder explicitly
    - Insertion order: the oldest entry is always at the front
    - Size limit: adding beyond ``max_size`` evicts the oldest entries and
      tells their targets to drop them
    - Locked: every mutation takes the pool's lock, so holders on different
      threads cannot corrupt it
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from bleedout.events import SplatEvictedEvent, publish_event
from bleedout.splats.records import SplatRecord
from bleedout.types import SplatId, TokenId

logger = logging.getLogger(__name__)


class SplatTarget(Protocol):
    """Something that holds splat records and can drop one by id."""

    def remove_splat(self, splat_id: SplatId) -> None: ...


@dataclass(frozen=True)
class ScenePoolEntry:
    """A record and the target that holds it."""

    record: SplatRecord
    target: SplatTarget


class ScenePool:
    """Shared, size-limited registry of splat records.

    Attributes:
        max_size: Maximum entries before the oldest is evicted. ``None`` or 0
            means unlimited.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self.max_size = max_size
        self._entries: list[ScenePoolEntry] = []
        self._lock = threading.Lock()

    def add(self, record: SplatRecord, target: SplatTarget) -> None:
        """Register ``record`` as held by ``target``.

        If this takes the pool over its size limit the oldest entries are
        evicted, and each evicted entry's target is asked to remove it.
        """
        with self._lock:
            self._entries.append(ScenePoolEntry(record, target))
            evicted = self._trim_locked()

        # Notify outside the lock: targets may call back into the pool
        self._notify_evicted(evicted)

    def remove(self, splat_id: SplatId) -> bool:
        """Drop every entry for ``splat_id``. Returns True if any were found."""
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if e.record.id != splat_id]
            return len(self._entries) != before

    def remove_target(self, target: SplatTarget) -> int:
        """Drop every entry held by ``target``. Returns how many were dropped."""
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if e.target is not target]
            return before - len(self._entries)

    def resize(self, max_size: int | None) -> None:
        """Change the size limit, evicting immediately if now over it."""
        with self._lock:
            self.max_size = max_size
            evicted = self._trim_locked()
        self._notify_evicted(evicted)

    def records_for_token(self, token_id: TokenId) -> list[SplatRecord]:
        with self._lock:
            return [e.record for e in self._entries if e.record.token_id == token_id]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, splat_id: object) -> bool:
        with self._lock:
            return any(e.record.id == splat_id for e in self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ScenePoolEntry]:
        with self._lock:
            return iter(list(self._entries))

    def _trim_locked(self) -> list[ScenePoolEntry]:
        if not self.max_size or len(self._entries) <= self.max_size:
            return []
        overflow = len(self._entries) - self.max_size
        evicted = self._entries[:overflow]
        del self._entries[:overflow]
        return evicted

    def _notify_evicted(self, evicted: list[ScenePoolEntry]) -> None:
        for entry in evicted:
            logger.debug(f"Evicting splat {entry.record.id} from scene pool")
            entry.target.remove_splat(entry.record.id)
            publish_event(SplatEvictedEvent(entry.record.id, entry.record.token_id))
