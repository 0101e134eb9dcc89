"""Turn-sequenced damage exchange between the player and one enemy.

The resolver owns the damage formulas and the roll counter; the RPG
session owns the state and decides what happens after each exchange.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from minigames.core.enums import Domain
from minigames.core.models import Character

if TYPE_CHECKING:
    from minigames.config import GameConfig
    from minigames.core.models import Vector2
    from minigames.systems.rng import DeterministicRNG


@dataclass(slots=True)
class CombatInstance:
    """One encounter, identified by ``combat_id``.

    Delayed enemy turns hold the id, never the instance, and are resolved
    against the session's live encounter.
    """

    combat_id: int
    enemy: Character
    enemy_pos: Vector2


@dataclass(frozen=True, slots=True)
class Exchange:
    """Outcome of a single hit."""

    damage: int
    target: Character = field(repr=False)

    @property
    def lethal(self) -> bool:
        return self.target.hp == 0


class CombatResolver:
    """Rolls damage and applies it with hp floored at zero."""

    __slots__ = ("_config", "_rng", "_rolls")

    def __init__(self, config: GameConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng
        self._rolls = 0

    def _roll_below(self, stream: int, bound: int) -> int:
        """Uniform integer in [0, bound), 0 when ``bound`` <= 0."""
        self._rolls += 1
        if bound <= 0:
            return 0
        return self._rng.next_int(Domain.COMBAT, stream, self._rolls, 0, bound - 1)

    def player_damage(self, player: Character, combat_id: int = 0) -> int:
        return self._roll_below(combat_id, player.attack) + self._config.player_damage_bonus

    def enemy_damage(self, enemy: Character, combat_id: int = 0, defending: bool = False) -> int:
        raw = self._roll_below(combat_id, enemy.attack) + self._config.enemy_damage_bonus
        if defending:
            return math.floor(raw * self._config.defend_multiplier)
        return raw

    def player_attack(self, combat: CombatInstance, player: Character) -> Exchange:
        damage = self.player_damage(player, combat.combat_id)
        combat.enemy = combat.enemy.damaged(damage)
        return Exchange(damage=damage, target=combat.enemy)

    def enemy_attack(self, combat: CombatInstance, player: Character, defending: bool = False) -> Exchange:
        damage = self.enemy_damage(combat.enemy, combat.combat_id, defending)
        return Exchange(damage=damage, target=player.damaged(damage))

    def spawn_enemy(self, gold: int) -> Character:
        cfg = self._config
        return Character(
            name=cfg.enemy_name, hp=cfg.enemy_hp, max_hp=cfg.enemy_hp,
            attack=cfg.enemy_attack, gold=gold, level=1, xp=0,
        )

