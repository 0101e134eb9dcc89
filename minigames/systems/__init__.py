"""Engine systems: RNG, progression, combat resolution."""

from minigames.systems.rng import DeterministicRNG
from minigames.systems.progression import ProgressionSystem
from minigames.systems.combat import CombatInstance, CombatResolver

__all__ = ["CombatInstance", "CombatResolver", "DeterministicRNG", "ProgressionSystem"]
