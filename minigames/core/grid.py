"""RPG tile grid: generation and classification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from minigames.core.enums import Domain, Tile
from minigames.core.models import Vector2

if TYPE_CHECKING:
    from minigames.systems.rng import DeterministicRNG


class OutOfBoundsError(IndexError):
    """A tile query addressed a cell outside the grid."""


class TileGrid:
    """Square N×N tile grid backed by a flat list.

    The shape never changes after construction; contents change when an
    enemy is cleared or respawns.
    """

    __slots__ = ("size", "_tiles")

    def __init__(self, size: int, default: Tile = Tile.GRASS) -> None:
        if size < 1:
            raise ValueError(f"grid size must be positive, got {size}")
        self.size = size
        self._tiles: list[Tile] = [default] * (size * size)

    # -- generation --

    @classmethod
    def generate(
        cls,
        size: int,
        shop_at: Vector2 | None = None,
        inn_at: Vector2 | None = None,
        enemy_positions: Iterable[Vector2] = (),
    ) -> TileGrid:
        """Build a deterministic layout: grass everywhere, then shop, inn and enemies."""
        grid = cls(size)
        if shop_at is not None:
            grid.set_tile(shop_at, Tile.SHOP)
        if inn_at is not None:
            grid.set_tile(inn_at, Tile.INN)
        for pos in enemy_positions:
            grid.set_tile(pos, Tile.ENEMY)
        return grid

    @classmethod
    def generate_random(
        cls,
        size: int,
        probability: float,
        rng: DeterministicRNG,
        generation: int = 0,
        shop_at: Vector2 | None = None,
        inn_at: Vector2 | None = None,
        reserved: Iterable[Vector2] = (),
    ) -> TileGrid:
        """Mark each cell as an enemy independently with ``probability``.

        Shop and inn are placed after the enemy roll; ``reserved`` cells
        (the player start) always stay grass.
        """
        grid = cls(size)
        keep_clear = set(reserved)
        for y in range(size):
            for x in range(size):
                pos = Vector2(x, y)
                if pos in keep_clear:
                    continue
                if rng.next_bool(Domain.MAP_GEN, y * size + x, generation, probability):
                    grid.set_tile(pos, Tile.ENEMY)
        if shop_at is not None:
            grid.set_tile(shop_at, Tile.SHOP)
        if inn_at is not None:
            grid.set_tile(inn_at, Tile.INN)
        return grid

    # -- access --

    def _idx(self, pos: Vector2) -> int:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(f"{pos} outside grid of size {self.size}")
        return pos.y * self.size + pos.x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def clamp(self, pos: Vector2) -> Vector2:
        """Pull each axis of ``pos`` back onto the grid independently."""
        hi = self.size - 1
        return Vector2(max(0, min(hi, pos.x)), max(0, min(hi, pos.y)))

    def tile_at(self, pos: Vector2) -> Tile:
        return self._tiles[self._idx(pos)]

    def set_tile(self, pos: Vector2, tile: Tile) -> None:
        self._tiles[self._idx(pos)] = tile

    def clear_tile(self, pos: Vector2) -> None:
        self.set_tile(pos, Tile.GRASS)

    def positions_of(self, tile: Tile) -> list[Vector2]:
        return [
            Vector2(i % self.size, i // self.size)
            for i, t in enumerate(self._tiles)
            if t == tile
        ]

    def rows(self) -> tuple[tuple[Tile, ...], ...]:
        """Row-major immutable view, ``rows()[y][x]``."""
        n = self.size
        return tuple(tuple(self._tiles[y * n:(y + 1) * n]) for y in range(n))
