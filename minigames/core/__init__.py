"""Core data models and world representation."""

from minigames.core.enums import Direction, Domain, GameMode, RPGAction, SnakeAction, Tile
from minigames.core.models import Character, Vector2
from minigames.core.grid import OutOfBoundsError, TileGrid
from minigames.core.commands import RPGCommand, SnakeCommand
from minigames.core.snapshot import RPGSnapshot, SnakeSnapshot

__all__ = [
    "Character",
    "Direction",
    "Domain",
    "GameMode",
    "OutOfBoundsError",
    "RPGAction",
    "RPGCommand",
    "RPGSnapshot",
    "SnakeAction",
    "SnakeCommand",
    "SnakeSnapshot",
    "Tile",
    "TileGrid",
    "Vector2",
]
