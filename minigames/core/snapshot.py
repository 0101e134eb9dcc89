"""Immutable snapshots of engine state for rendering.

Snapshots share no mutable structure with the sessions they were taken
from, so the view layer cannot change engine state through them.
"""

from __future__ import annotations

from dataclasses import dataclass

from minigames.core.enums import GameMode, Tile
from minigames.core.models import Character, Vector2


@dataclass(frozen=True, slots=True)
class RPGSnapshot:
    """Read-only view of an RPG session."""

    time_ms: int
    mode: GameMode
    player: Character
    player_pos: Vector2
    enemy: Character | None
    enemy_pos: Vector2 | None
    destination: Vector2 | None
    message: str
    tiles: tuple[tuple[Tile, ...], ...]
    xp_to_next: int
    map_generation: int

    @property
    def grid_size(self) -> int:
        return len(self.tiles)

    def tile_at(self, pos: Vector2) -> Tile:
        return self.tiles[pos.y][pos.x]


@dataclass(frozen=True, slots=True)
class SnakeSnapshot:
    """Read-only view of a Snake session."""

    time_ms: int
    body: tuple[Vector2, ...]
    food: Vector2
    direction: Vector2
    score: int
    alive: bool
    running: bool
    board_size: int

    @property
    def head(self) -> Vector2:
        return self.body[0]

    @property
    def game_over(self) -> bool:
        return not self.alive
