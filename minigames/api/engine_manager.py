"""SessionManager — owns both game sessions and drives their scheduler.

A background thread advances the TickScheduler by wall-clock deltas. Every
command from the API takes the same lock, so scheduler callbacks and player
commands never interleave (single writer).
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from minigames.engine.rpg import RPGSession
from minigames.engine.scheduler import TickScheduler
from minigames.engine.snake import SnakeSession
from minigames.services.bridge import HostBridge, Transport
from minigames.services.storage import CharacterRepository, InMemoryStore, JsonFileStore, KeyValueStore
from minigames.systems.rng import DeterministicRNG
from minigames.utils.event_log import EventLog, GameEvent

if TYPE_CHECKING:
    from minigames.config import GameConfig
    from minigames.core.snapshot import RPGSnapshot, SnakeSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionManager:
    """Manages the session lifecycle on a background thread.

    Provides thread-safe access to:
      - the RPG and Snake sessions (commands run under the lock)
      - latest snapshots
      - the event feed
      - clock controls (start / pause / resume / step / stop)
    """

    def __init__(
        self,
        config: GameConfig,
        store: KeyValueStore | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self.config = config
        self._tick_rate: float = 0.02  # seconds between clock advances

        if store is None:
            store = JsonFileStore(config.storage_file) if config.storage_file else InMemoryStore()
        self._store = store
        self._transport = transport
        self._event_log = EventLog()

        # Built in _build
        self._scheduler: TickScheduler | None = None
        self._rpg: RPGSession | None = None
        self._snake: SnakeSession | None = None
        self._bridge: HostBridge | None = None

        self._lock = threading.RLock()
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.005, min(value, 1.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def bridge(self) -> HostBridge:
        assert self._bridge is not None
        return self._bridge

    @property
    def now_ms(self) -> int:
        with self._lock:
            assert self._scheduler is not None
            return self._scheduler.now_ms

    @property
    def next_due_ms(self) -> int | None:
        """Game time of the next pending timer, None when nothing is scheduled."""
        with self._lock:
            assert self._scheduler is not None
            return self._scheduler.next_due_ms

    # -- session access --

    def with_rpg(self, fn: Callable[[RPGSession], T]) -> T:
        """Run ``fn`` against the RPG session while holding the lock."""
        with self._lock:
            assert self._rpg is not None
            return fn(self._rpg)

    def with_snake(self, fn: Callable[[SnakeSession], T]) -> T:
        with self._lock:
            assert self._snake is not None
            return fn(self._snake)

    def rpg_snapshot(self) -> RPGSnapshot:
        return self.with_rpg(lambda s: s.snapshot())

    def snake_snapshot(self) -> SnakeSnapshot:
        return self.with_snake(lambda s: s.snapshot())

    def emit(self, event: str, data: dict[str, Any] | None = None) -> GameEvent:
        with self._lock:
            return self.bridge.emit(event, data)

    # -- clock --

    def advance(self, ms: int) -> int:
        """Advance the game clock by ``ms`` under the lock."""
        with self._lock:
            assert self._scheduler is not None
            return self._scheduler.advance(ms)

    def step(self) -> int:
        """Advance exactly one Snake frame (pauses the real-time clock first)."""
        if not self._paused.is_set():
            self.pause()
        return self.advance(self._config.snake_tick_ms)

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="game-clock", daemon=True)
        self._thread.start()
        logger.info("SessionManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("Game clock paused at %d ms", self.now_ms)

    def resume(self) -> None:
        self._paused.clear()
        logger.info("Game clock resumed at %d ms", self.now_ms)

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("SessionManager stopped.")

    def reset(self) -> None:
        """Stop the clock and rebuild both sessions from config (stored progress is kept)."""
        was_running = self.running
        self.stop()
        self._event_log.clear()
        self._build()
        if was_running:
            self.start()
        logger.info("SessionManager reset.")

    # -- internals --

    def _build(self) -> None:
        cfg = self._config
        with self._lock:
            if self._snake is not None:
                self._snake.shutdown()
            scheduler = TickScheduler()
            rng = DeterministicRNG(cfg.seed)
            bridge = HostBridge(self._transport, self._event_log, clock=lambda: scheduler.now_ms)
            repository = CharacterRepository(self._store, cfg.save_key)
            self._scheduler = scheduler
            self._bridge = bridge
            self._rpg = RPGSession(cfg, scheduler, rng, bridge, repository)
            self._snake = SnakeSession(cfg, scheduler, rng, bridge)
        logger.info("Sessions built (seed %d, %s map)", rng.seed, cfg.map_layout)

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Clock thread started.")
        last = time.monotonic()
        carry = 0.0

        while not self._stop_requested.is_set():
            time.sleep(self._tick_rate)
            now = time.monotonic()
            elapsed = now - last
            last = now
            if self._paused.is_set():
                carry = 0.0
                continue

            carry += elapsed * 1000.0
            whole_ms = int(carry)
            carry -= whole_ms
            if whole_ms:
                self.advance(whole_ms)

        self._running.clear()
        logger.info("Clock thread exited.")
