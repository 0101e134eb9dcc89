"""Domain-separated deterministic RNG using xxhash.

Formula: RNG_Value = Hash(Seed, Domain, Stream, Step)

Domains keep the engines apart: combat rolls, map generation and Snake food
never share a sequence. Within a domain the stream picks an independent
sequence (a combat id, a grid cell, a food axis) and the step indexes into
it, so the same seed and the same sequence of commands always produce the
same rolls.
"""

from __future__ import annotations

import struct

import xxhash

from minigames.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, stream, step).
    Callers that draw repeatedly from one sequence use ``stream()``.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, stream: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, stream, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, stream: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, stream, step) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, stream: int, step: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        f = self.next_float(domain, stream, step)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, stream: int, step: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, stream, step) < probability

    def stream(self, domain: Domain, stream: int = 0) -> RollStream:
        return RollStream(self, domain, stream)


class RollStream:
    """Cursor over one (domain, stream) sequence; each draw advances the step.

    The first draw uses step 1. Works over any object with the
    ``next_int`` / ``next_bool`` signature of DeterministicRNG.
    """

    __slots__ = ("_rng", "_domain", "_stream", "_step")

    def __init__(self, rng: DeterministicRNG, domain: Domain, stream: int = 0) -> None:
        self._rng = rng
        self._domain = domain
        self._stream = stream
        self._step = 0

    @property
    def step(self) -> int:
        """Number of draws taken so far."""
        return self._step

    def next_int(self, low: int, high: int) -> int:
        self._step += 1
        return self._rng.next_int(self._domain, self._stream, self._step, low, high)

    def next_bool(self, probability: float = 0.5) -> bool:
        self._step += 1
        return self._rng.next_bool(self._domain, self._stream, self._step, probability)
