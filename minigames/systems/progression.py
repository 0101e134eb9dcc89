"""Experience curve and stat growth for the player character."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minigames.config import GameConfig
    from minigames.core.models import Character

logger = logging.getLogger(__name__)


class ProgressionSystem:
    """Level curve: ``level × xp_per_level`` XP to reach the next level."""

    __slots__ = ("_xp_per_level", "_hp_growth", "_atk_growth", "_heal")

    def __init__(
        self,
        xp_per_level: int = 100,
        hp_growth: int = 10,
        atk_growth: int = 2,
        heal: int = 10,
    ) -> None:
        self._xp_per_level = xp_per_level
        self._hp_growth = hp_growth
        self._atk_growth = atk_growth
        self._heal = heal

    @classmethod
    def from_config(cls, config: GameConfig) -> ProgressionSystem:
        return cls(
            xp_per_level=config.xp_per_level,
            hp_growth=config.level_hp_growth,
            atk_growth=config.level_atk_growth,
            heal=config.level_heal,
        )

    def xp_to_next_level(self, level: int) -> int:
        return level * self._xp_per_level

    def apply_xp(self, character: Character, gained: int) -> tuple[Character, bool]:
        """Add ``gained`` XP and level up as many times as it allows.

        The threshold is re-checked after every level, so 250 XP at level 1
        yields level 2 with 150 XP left over (the level-2 threshold is 200).
        Returns the new character and whether at least one level was gained.
        """
        if gained < 0:
            raise ValueError(f"xp gain must be >= 0, got {gained}")

        result = replace(character, xp=character.xp + gained)
        leveled = False
        while result.xp >= self.xp_to_next_level(result.level):
            threshold = self.xp_to_next_level(result.level)
            new_max_hp = result.max_hp + self._hp_growth
            result = replace(
                result,
                level=result.level + 1,
                xp=result.xp - threshold,
                max_hp=new_max_hp,
                attack=result.attack + self._atk_growth,
                hp=min(result.hp + self._heal, new_max_hp),
            )
            leveled = True
            logger.debug("%s reached level %d", result.name, result.level)
        return result, leveled
