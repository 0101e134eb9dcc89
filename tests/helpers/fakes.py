"""Test doubles and builders shared by the engine tests."""

from __future__ import annotations

from collections import deque

from minigames.config import GameConfig
from minigames.core.models import Character
from minigames.engine.rpg import RPGSession
from minigames.engine.scheduler import TickScheduler
from minigames.engine.snake import SnakeSession
from minigames.services.bridge import HostBridge
from minigames.services.storage import CharacterRecord, CharacterRepository, InMemoryStore, KeyValueStore
from minigames.systems.rng import DeterministicRNG, RollStream


class ScriptedRNG:
    """Returns queued integers first, then falls back to a seeded RNG.

    Scripted values must fall inside the requested range, so a test can
    never force a roll the real formula could not produce.
    """

    def __init__(self, rolls=(), seed: int = 7) -> None:
        self._rolls = deque(rolls)
        self._fallback = DeterministicRNG(seed)
        self.calls: list[tuple[int, int]] = []

    def push(self, *rolls: int) -> None:
        self._rolls.extend(rolls)

    def next_int(self, domain, stream, step, low, high):
        self.calls.append((low, high))
        if self._rolls:
            value = self._rolls.popleft()
            assert low <= value <= high, f"scripted roll {value} outside [{low}, {high}]"
            return value
        return self._fallback.next_int(domain, stream, step, low, high)

    def next_float(self, domain, stream, step):
        return self._fallback.next_float(domain, stream, step)

    def next_bool(self, domain, stream, step, probability=0.5):
        return self._fallback.next_bool(domain, stream, step, probability)

    def stream(self, domain, stream=0):
        return RollStream(self, domain, stream)


class RecordingTransport:
    """Host transport that keeps every message it receives."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


def stored(character: Character, key: str = "rpg-player-progress") -> InMemoryStore:
    """An in-memory store that already holds ``character``."""
    record = CharacterRecord.from_character(character)
    return InMemoryStore({key: record.model_dump_json(by_alias=True)})


def make_rpg(rolls=(), store: KeyValueStore | None = None, transport=None, **overrides):
    """Build an RPG session on a fresh clock. Returns (session, scheduler, rng, bridge, store)."""
    config = GameConfig(**overrides)
    scheduler = TickScheduler()
    rng = ScriptedRNG(rolls)
    bridge = HostBridge(transport, clock=lambda: scheduler.now_ms)
    store = store if store is not None else InMemoryStore()
    repository = CharacterRepository(store, config.save_key)
    session = RPGSession(config, scheduler, rng, bridge, repository)
    return session, scheduler, rng, bridge, store


def make_snake(rolls=(), transport=None, **overrides):
    """Build a Snake session on a fresh clock. Returns (session, scheduler, bridge)."""
    config = GameConfig(**overrides)
    scheduler = TickScheduler()
    bridge = HostBridge(transport, clock=lambda: scheduler.now_ms)
    session = SnakeSession(config, scheduler, ScriptedRNG(rolls), bridge)
    return session, scheduler, bridge
