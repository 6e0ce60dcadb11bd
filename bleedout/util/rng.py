"""Deterministic random number generation with isolated streams.

Every splat generator draws from its own named stream derived from a master
seed, so that:

1. Splat placement is fully reproducible from the same master seed
2. A change in how many numbers the token generator consumes does not shift
   the floor or trail generators' sequences
3. Record ids stay stable for a given seed, which keeps saved scenes diffable

Usage:
    # At startup
    from bleedout.util import rng
    rng.init(config.RANDOM_SEED)

    # In any module - cache the stream reference
    _rng = rng.get("splats.token")

    def pick(glyphs: str) -> str:
        return _rng.choice(glyphs)

    # After rng.init(new_seed), cached references automatically use the new stream

Domain naming convention (hierarchical):
    - "splats.token", "splats.floor", "splats.trail"
    - "splats.ids"
    - "sampling.box_muller"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

from bleedout import config

if TYPE_CHECKING:
    from bleedout.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    Callers can cache a reference that survives rng.reset(). Every call is
    forwarded to the underlying Random instance, looked up fresh each time.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def _rng(self) -> Random:
        return self._provider._get_raw(self._domain)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._rng().choice(seq)

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._rng().uniform(a, b)

    def getrandbits(self, k: int) -> int:
        """Return an integer with k random bits."""
        return self._rng().getrandbits(k)


# Type alias for functions that accept either Random or RNGStream.
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for the splat subsystems.

    Each domain gets its own Random instance derived deterministically
    from the master seed.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Get a cacheable RNG stream proxy for the named domain."""
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        if domain not in self._streams:
            if self._master_seed is None:
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): hash() is salted per interpreter
                # session via PYTHONHASHSEED
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and will use the new streams.
        """
        self._master_seed = master_seed
        self._streams.clear()


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize the global RNG provider with a master seed.

    If a provider already exists it is reset instead, so cached RNGStream
    proxies keep working.
    """
    global _provider
    if _provider is not None:
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Get an RNG stream for the named domain.

    Auto-initializes from config.RANDOM_SEED if init() was never called.
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(config.RANDOM_SEED)
    return _provider.get(domain)
