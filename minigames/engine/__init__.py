"""Engine layer: scheduler, RPG state machine, Snake simulation."""

from minigames.engine.rpg import RPGSession
from minigames.engine.scheduler import ScheduledTask, TickScheduler
from minigames.engine.snake import SnakeSession

__all__ = ["RPGSession", "ScheduledTask", "SnakeSession", "TickScheduler"]
