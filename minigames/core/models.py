"""Core data models: Vector2, Character, input mapping."""

from __future__ import annotations

from dataclasses import dataclass, replace

from minigames.core.enums import Direction


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def wrap(self, size: int) -> Vector2:
        """Return this position folded onto a ``size``×``size`` torus."""
        return Vector2(self.x % size, self.y % size)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Direction offsets mapped to Direction enum values (screen coordinates, y grows down)
DIRECTION_OFFSETS: dict[int, Vector2] = {
    Direction.NORTH: Vector2(0, -1),
    Direction.EAST: Vector2(1, 0),
    Direction.SOUTH: Vector2(0, 1),
    Direction.WEST: Vector2(-1, 0),
}

KEY_DIRECTIONS: dict[str, Direction] = {
    "ArrowUp": Direction.NORTH,
    "ArrowRight": Direction.EAST,
    "ArrowDown": Direction.SOUTH,
    "ArrowLeft": Direction.WEST,
}


def key_to_offset(key: str) -> Vector2 | None:
    """Map a keyboard key name to a unit vector, or None for unbound keys."""
    direction = KEY_DIRECTIONS.get(key)
    if direction is None:
        return None
    return DIRECTION_OFFSETS[direction]


@dataclass(frozen=True, slots=True)
class Character:
    """Immutable combat statistics for the player or an enemy.

    Every transition builds a new instance, so the invariants checked in
    ``__post_init__`` hold for every reachable character.
    """

    name: str
    hp: int
    max_hp: int
    attack: int
    gold: int = 0
    level: int = 1
    xp: int = 0

    def __post_init__(self) -> None:
        if self.max_hp < 1:
            raise ValueError(f"max_hp must be positive, got {self.max_hp}")
        if not 0 <= self.hp <= self.max_hp:
            raise ValueError(f"hp {self.hp} outside [0, {self.max_hp}]")
        if self.gold < 0:
            raise ValueError(f"gold must be >= 0, got {self.gold}")
        if self.xp < 0:
            raise ValueError(f"xp must be >= 0, got {self.xp}")
        if self.level < 1:
            raise ValueError(f"level must be >= 1, got {self.level}")
        if self.attack < 0:
            raise ValueError(f"attack must be >= 0, got {self.attack}")

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp

    def damaged(self, amount: int) -> Character:
        """Return a copy with ``amount`` hp removed, floored at 0."""
        return replace(self, hp=max(0, self.hp - amount))

    def healed(self, amount: int) -> Character:
        """Return a copy with ``amount`` hp restored, clamped to max_hp."""
        return replace(self, hp=min(self.max_hp, self.hp + amount))

    def fully_healed(self) -> Character:
        return replace(self, hp=self.max_hp)

    def spend(self, amount: int) -> Character | None:
        """Return a copy with ``amount`` gold spent, or None if it cannot pay."""
        if self.gold < amount:
            return None
        return replace(self, gold=self.gold - amount)

    def earn(self, gold: int) -> Character:
        return replace(self, gold=self.gold + gold)

    def with_attack(self, bonus: int) -> Character:
        return replace(self, attack=self.attack + bonus)
