"""Persistence boundary for splats.

Hosts persist splats in their own key/value flag storage. The engine only
needs to load a holder's records and overwrite its flags; a save always
replaces the stored value of every key it names, it never merges.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Protocol

from bleedout.splats.records import SplatRecord

logger = logging.getLogger(__name__)

# Store key for the scene's floor and trail splats
SCENE_KEY = "scene"

# Flag names
SPLATS_FLAG = "splats"
BLEEDING_SEVERITY_FLAG = "bleeding_severity"


class SplatStore(Protocol):
    """Key/value flag storage for splat holders (tokens and the scene)."""

    def load_splats(self, key: str) -> list[SplatRecord]: ...

    def load_flag(self, key: str, name: str) -> Any: ...

    def save_splats(self, key: str, updates: dict[str, Any]) -> None: ...


class InMemorySplatStore:
    """A ``SplatStore`` over plain dicts.

    Values are deep-copied on the way in and out, so callers can never
    mutate what is stored. Splats are saved as ``SplatRecord.to_dict()``
    data, the way a host flag store would serialize them.
    """

    def __init__(self) -> None:
        self.flags: dict[str, dict[str, Any]] = {}
        self.save_count = 0

    def load_splats(self, key: str) -> list[SplatRecord]:
        stored = self.flags.get(key, {}).get(SPLATS_FLAG) or []
        return [SplatRecord.from_dict(data) for data in stored]

    def load_flag(self, key: str, name: str) -> Any:
        return copy.deepcopy(self.flags.get(key, {}).get(name))

    def save_splats(self, key: str, updates: dict[str, Any]) -> None:
        flags = self.flags.setdefault(key, {})
        for name, value in updates.items():
            flags[name] = copy.deepcopy(value)
        self.save_count += 1
        logger.debug(f"Saved flags {sorted(updates)} for '{key}'")
