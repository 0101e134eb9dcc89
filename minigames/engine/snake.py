"""SnakeSession — real-time snake on a toroidal board.

Movement wraps around every edge; the only way to lose is running into
your own body. One frame is advanced per ``snake_tick_ms``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from minigames.core.enums import Domain, SnakeAction
from minigames.core.models import Vector2, key_to_offset
from minigames.core.snapshot import SnakeSnapshot
from minigames.services.bridge import HostBridge

if TYPE_CHECKING:
    from minigames.config import GameConfig
    from minigames.core.commands import SnakeCommand
    from minigames.engine.scheduler import ScheduledTask, TickScheduler
    from minigames.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


def is_blocked_turn(current: Vector2, new: Vector2) -> bool:
    """True if ``new`` may not replace ``current`` as the heading.

    Only perpendicular turns are allowed: two headings on the same axis
    (same direction or a direct reversal) are rejected.
    """
    return (
        (current.x == 0 and new.x == 0)
        or (current.y == 0 and new.y == 0)
        or (current.x + new.x == 0 and current.y + new.y == 0)
    )


class SnakeSession:
    """One explicit, independently constructible Snake game."""

    def __init__(
        self,
        config: GameConfig,
        scheduler: TickScheduler,
        rng: DeterministicRNG,
        bridge: HostBridge | None = None,
    ) -> None:
        self._config = config
        self._scheduler = scheduler
        self._bridge = bridge or HostBridge(clock=lambda: scheduler.now_ms)
        self._size = config.snake_board_size
        self._food_x = rng.stream(Domain.FOOD, 0)
        self._food_y = rng.stream(Domain.FOOD, 1)
        self._tick_task: ScheduledTask | None = None

        self._body: list[Vector2] = [Vector2(*config.snake_start)]
        self._food = Vector2(*config.snake_food)
        self._direction = Vector2(*config.snake_direction)
        self._heading = self._direction
        self._score = 0
        self._alive = True
        self._running = False

    # -- public properties --

    @property
    def body(self) -> tuple[Vector2, ...]:
        return tuple(self._body)

    @property
    def head(self) -> Vector2:
        return self._body[0]

    @property
    def food(self) -> Vector2:
        return self._food

    @property
    def direction(self) -> Vector2:
        return self._direction

    @property
    def score(self) -> int:
        return self._score

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def running(self) -> bool:
        return self._running

    @property
    def board_size(self) -> int:
        return self._size

    # -- projection & dispatch --

    def snapshot(self) -> SnakeSnapshot:
        return SnakeSnapshot(
            time_ms=self._scheduler.now_ms,
            body=tuple(self._body),
            food=self._food,
            direction=self._direction,
            score=self._score,
            alive=self._alive,
            running=self._running,
            board_size=self._size,
        )

    def dispatch(self, command: SnakeCommand) -> SnakeSnapshot:
        match command.verb:
            case SnakeAction.START:
                self.start()
            case SnakeAction.STOP:
                self.stop()
            case SnakeAction.TURN:
                self.set_direction(command.target)
            case SnakeAction.KEY:
                self.handle_key(command.target)
        return self.snapshot()

    # -- lifecycle --

    def start(self) -> None:
        """Reset to the opening position and begin advancing frames."""
        cfg = self._config
        self._body = [Vector2(*cfg.snake_start)]
        self._food = Vector2(*cfg.snake_food)
        self._direction = Vector2(*cfg.snake_direction)
        self._heading = self._direction
        self._score = 0
        self._alive = True
        self._running = True
        if self._tick_task is None or self._tick_task.cancelled:
            self._tick_task = self._scheduler.call_every(cfg.snake_tick_ms, self.tick, label="snake-tick")
        logger.info("Snake game started")

    def stop(self) -> None:
        """Pause. State is kept; frames keep firing but do nothing."""
        self._running = False
        logger.info("Snake game stopped at score %d", self._score)

    def shutdown(self) -> None:
        """Cancel the frame loop entirely (session teardown)."""
        self._running = False
        self._scheduler.cancel(self._tick_task)
        self._tick_task = None

    # -- input --

    def set_direction(self, new: Vector2) -> bool:
        """Change heading. Returns False when the turn is rejected.

        Besides the perpendicular rule, a turn may not point back along the
        heading of the last frame that ran; two quick turns inside one frame
        would otherwise fold the head onto the neck.
        """
        if is_blocked_turn(self._direction, new) or new + self._heading == Vector2(0, 0):
            return False
        self._direction = new
        return True

    def handle_key(self, key: str) -> bool:
        if not (self._running and self._alive):
            return False
        offset = key_to_offset(key)
        if offset is None:
            return False
        return self.set_direction(offset)

    # -- frame --

    def tick(self) -> None:
        if not (self._running and self._alive):
            return

        new_head = (self._body[0] + self._direction).wrap(self._size)
        self._heading = self._direction
        # The tail is still in place at check time
        if new_head in self._body:
            self._game_over()
            return

        self._body.insert(0, new_head)
        if new_head == self._food:
            self._score += self._config.snake_food_score
            food = self._place_food()
            if food is None:
                logger.info("Board full at score %d", self._score)
                self._game_over()
                return
            self._food = food
        else:
            self._body.pop()

    def _place_food(self) -> Vector2 | None:
        """Uniformly random free cell; None when the body covers the board."""
        if len(self._body) >= self._size * self._size:
            return None
        occupied = set(self._body)
        while True:
            candidate = Vector2(
                self._food_x.next_int(0, self._size - 1),
                self._food_y.next_int(0, self._size - 1),
            )
            if candidate not in occupied:
                return candidate

    def _game_over(self) -> None:
        self._alive = False
        self._running = False
        logger.info("Snake game over, score %d", self._score)
        self._bridge.emit("snake_game_over", {"score": self._score})
