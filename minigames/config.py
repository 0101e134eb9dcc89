"""Game configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration shared by both engines."""

    # Randomness
    seed: int = 42

    # RPG world
    rpg_grid_size: int = 10
    player_start: tuple[int, int] = (5, 5)
    map_layout: str = "fixed"              # "fixed" or "random"
    shop_pos: tuple[int, int] | None = (0, 0)
    inn_pos: tuple[int, int] | None = (9, 9)
    enemy_positions: tuple[tuple[int, int], ...] = ((2, 2), (7, 3), (4, 7), (8, 8))
    enemy_probability: float = 0.1         # Only used by the random layout

    # RPG timing (milliseconds)
    path_step_ms: int = 200
    enemy_turn_delay_ms: int = 1000
    respawn_delay_ms: int = 5000

    # Player defaults
    player_name: str = "Hero"
    player_hp: int = 100
    player_attack: int = 20

    # Enemy baseline
    enemy_name: str = "Goblin"
    enemy_hp: int = 50
    enemy_attack: int = 15
    enemy_gold_on_step: int = 20           # Enemy entered by a manual move
    enemy_gold_on_path: int = 10           # Enemy entered while path-following

    # Combat
    player_damage_bonus: int = 10
    enemy_damage_bonus: int = 5
    defend_multiplier: float = 0.5
    xp_per_kill: int = 20

    # Leveling
    xp_per_level: int = 100
    level_hp_growth: int = 10
    level_atk_growth: int = 2
    level_heal: int = 10

    # Shop & inn
    potion_price: int = 10
    potion_heal: int = 50
    sword_price: int = 50
    sword_attack: int = 5
    rest_price: int = 20

    # Snake
    snake_board_size: int = 20
    snake_tick_ms: int = 200
    snake_start: tuple[int, int] = (10, 10)
    snake_food: tuple[int, int] = (15, 15)
    snake_direction: tuple[int, int] = (0, -1)
    snake_food_score: int = 10

    # Persistence
    storage_file: str | None = None        # None keeps progress in memory
    save_key: str = "rpg-player-progress"

    # Logging
    log_level: str = "INFO"
