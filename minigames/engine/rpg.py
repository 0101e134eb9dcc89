"""RPGSession — the exploration/combat state machine.

States: WORLD (initial), COMBAT, SHOP, INN. There is no terminal state;
defeat resets the player and returns to WORLD.

Timed behaviour is delegated to the TickScheduler:
  - path-following steps every ``path_step_ms`` while a destination is set
  - the enemy's turn ``enemy_turn_delay_ms`` after attack/defend
  - enemy respawn ``respawn_delay_ms`` after a victory
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from minigames.core.enums import GameMode, RPGAction, Tile
from minigames.core.grid import OutOfBoundsError, TileGrid
from minigames.core.models import Character, Vector2, key_to_offset
from minigames.core.snapshot import RPGSnapshot
from minigames.services.bridge import HostBridge
from minigames.systems.combat import CombatInstance, CombatResolver
from minigames.systems.progression import ProgressionSystem

if TYPE_CHECKING:
    from minigames.config import GameConfig
    from minigames.core.commands import RPGCommand
    from minigames.engine.scheduler import ScheduledTask, TickScheduler
    from minigames.services.storage import CharacterRepository
    from minigames.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

WELCOME = "Welcome to the RPG world!"
NOT_ENOUGH_GOLD = "Not enough gold!"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class RPGSession:
    """One explicit, independently constructible RPG game.

    All mutation goes through the command methods (or ``dispatch``) and
    the scheduler callbacks; the view layer reads ``snapshot()``.
    """

    def __init__(
        self,
        config: GameConfig,
        scheduler: TickScheduler,
        rng: DeterministicRNG,
        bridge: HostBridge | None = None,
        repository: CharacterRepository | None = None,
    ) -> None:
        self._config = config
        self._scheduler = scheduler
        self._rng = rng
        self._bridge = bridge or HostBridge(clock=lambda: scheduler.now_ms)
        self._repository = repository
        self._progression = ProgressionSystem.from_config(config)
        self._resolver = CombatResolver(config, rng)

        self._start = Vector2(*config.player_start)
        self._map_generation = 0
        self._grid = self._build_grid()

        self._player = self.default_player()
        self._player_pos = self._start
        self._mode = GameMode.WORLD
        self._combat: CombatInstance | None = None
        self._combat_seq = 0
        self._destination: Vector2 | None = None
        self._path_task: ScheduledTask | None = None
        self._message = WELCOME

        restored = repository.load() if repository is not None else None
        if restored is not None:
            self._player = restored
            self._message = "Progress loaded! Welcome back to the RPG world!"
            logger.info("Restored %s (level %d, %d gold)", restored.name, restored.level, restored.gold)

    # -- public properties --

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def player(self) -> Character:
        return self._player

    @property
    def player_pos(self) -> Vector2:
        return self._player_pos

    @property
    def enemy(self) -> Character | None:
        return self._combat.enemy if self._combat else None

    @property
    def enemy_pos(self) -> Vector2 | None:
        return self._combat.enemy_pos if self._combat else None

    @property
    def combat_id(self) -> int | None:
        return self._combat.combat_id if self._combat else None

    @property
    def destination(self) -> Vector2 | None:
        return self._destination

    @property
    def message(self) -> str:
        return self._message

    @property
    def grid(self) -> TileGrid:
        return self._grid

    @property
    def progression(self) -> ProgressionSystem:
        return self._progression

    def default_player(self) -> Character:
        cfg = self._config
        return Character(
            name=cfg.player_name, hp=cfg.player_hp, max_hp=cfg.player_hp,
            attack=cfg.player_attack, gold=0, level=1, xp=0,
        )

    # -- projection & dispatch --

    def snapshot(self) -> RPGSnapshot:
        return RPGSnapshot(
            time_ms=self._scheduler.now_ms,
            mode=self._mode,
            player=self._player,
            player_pos=self._player_pos,
            enemy=self.enemy,
            enemy_pos=self.enemy_pos,
            destination=self._destination,
            message=self._message,
            tiles=self._grid.rows(),
            xp_to_next=self._progression.xp_to_next_level(self._player.level),
            map_generation=self._map_generation,
        )

    def dispatch(self, command: RPGCommand) -> RPGSnapshot:
        """Apply ``command`` and return the resulting snapshot."""
        verb = command.verb
        match verb:
            case RPGAction.MOVE:
                self.move(command.target.x, command.target.y)
            case RPGAction.SET_DESTINATION:
                self.set_destination(command.target)
            case RPGAction.KEY:
                self.handle_key(command.target)
            case RPGAction.ATTACK:
                self.attack()
            case RPGAction.DEFEND:
                self.defend()
            case RPGAction.FLEE:
                self.flee()
            case RPGAction.BUY_POTION:
                self.buy_potion()
            case RPGAction.BUY_SWORD:
                self.buy_sword()
            case RPGAction.LEAVE_SHOP:
                self.leave_shop()
            case RPGAction.REST:
                self.rest()
            case RPGAction.LEAVE_INN:
                self.leave_inn()
        return self.snapshot()

    # -- movement --

    def move(self, dx: int, dy: int) -> bool:
        """Step one cell. Returns True if the player actually moved."""
        if abs(dx) + abs(dy) != 1:
            raise ValueError(f"move must be a unit step, got ({dx}, {dy})")
        if self._mode != GameMode.WORLD:
            return False

        self._cancel_path()
        new_pos = self._grid.clamp(self._player_pos + Vector2(dx, dy))
        if new_pos == self._player_pos:
            return False
        self._player_pos = new_pos
        self._enter_tile(new_pos, self._config.enemy_gold_on_step)
        return True

    def handle_key(self, key: str) -> bool:
        offset = key_to_offset(key)
        if offset is None or self._mode != GameMode.WORLD:
            return False
        return self.move(offset.x, offset.y)

    def set_destination(self, pos: Vector2) -> bool:
        """Start walking toward ``pos``, one cell per path step."""
        if not self._grid.in_bounds(pos):
            raise OutOfBoundsError(f"destination {pos} outside grid of size {self._grid.size}")
        if self._mode != GameMode.WORLD:
            return False

        self._cancel_path()
        if pos == self._player_pos:
            return False
        self._destination = pos
        self._path_task = self._scheduler.call_every(
            self._config.path_step_ms, self._path_step, label="rpg-path",
        )
        logger.debug("Path-following from %s to %s", self._player_pos, pos)
        return True

    def _path_step(self) -> None:
        dest = self._destination
        if self._mode != GameMode.WORLD or dest is None:
            self._cancel_path()
            return

        offset = dest - self._player_pos
        if offset.x == 0 and offset.y == 0:
            self._cancel_path()
            return
        # Larger axis first; ties go to x
        if abs(offset.x) >= abs(offset.y):
            step = Vector2(_sign(offset.x), 0)
        else:
            step = Vector2(0, _sign(offset.y))

        new_pos = self._grid.clamp(self._player_pos + step)
        self._player_pos = new_pos
        tile = self._enter_tile(new_pos, self._config.enemy_gold_on_path)
        if tile != Tile.GRASS or new_pos == dest:
            self._cancel_path()

    def _cancel_path(self) -> None:
        self._scheduler.cancel(self._path_task)
        self._path_task = None
        self._destination = None

    def _enter_tile(self, pos: Vector2, enemy_gold: int) -> Tile:
        tile = self._grid.tile_at(pos)
        if tile == Tile.ENEMY:
            self._begin_combat(pos, enemy_gold)
        elif tile == Tile.SHOP:
            self._set_mode(GameMode.SHOP)
            self._message = "Welcome to the shop!"
        elif tile == Tile.INN:
            self._set_mode(GameMode.INN)
            self._message = "Welcome to the inn!"
        else:
            self._message = "You move through the world."
        return tile

    def _set_mode(self, mode: GameMode) -> None:
        if mode != GameMode.WORLD:
            self._cancel_path()
        if mode != GameMode.COMBAT:
            self._combat = None
        self._mode = mode

    # -- combat --

    def _begin_combat(self, pos: Vector2, gold: int) -> None:
        self._combat_seq += 1
        enemy = self._resolver.spawn_enemy(gold)
        self._set_mode(GameMode.COMBAT)
        self._combat = CombatInstance(combat_id=self._combat_seq, enemy=enemy, enemy_pos=pos)
        self._message = f"You encountered a {enemy.name}! Combat begins!"
        logger.info("Combat #%d started at %s", self._combat_seq, pos)

    def attack(self) -> bool:
        combat = self._combat
        if self._mode != GameMode.COMBAT or combat is None:
            return False

        hit = self._resolver.player_attack(combat, self._player)
        if hit.lethal:
            self._win(combat)
        else:
            self._message = f"You attack for {hit.damage} damage!"
            self._schedule_enemy_turn(combat, defending=False)
        return True

    def defend(self) -> bool:
        combat = self._combat
        if self._mode != GameMode.COMBAT or combat is None:
            return False
        self._message = "You defend! Damage reduced."
        self._schedule_enemy_turn(combat, defending=True)
        return True

    def flee(self) -> bool:
        if self._mode != GameMode.COMBAT:
            return False
        logger.info("Fled from combat #%d", self._combat_seq)
        self._set_mode(GameMode.WORLD)
        self._message = "You fled from combat!"
        return True

    def _schedule_enemy_turn(self, combat: CombatInstance, defending: bool) -> None:
        self._scheduler.call_later(
            self._config.enemy_turn_delay_ms, self._enemy_turn,
            combat.combat_id, defending, label="rpg-enemy-turn",
        )

    def _enemy_turn(self, combat_id: int, defending: bool) -> None:
        combat = self._combat
        if self._mode != GameMode.COMBAT or combat is None or combat.combat_id != combat_id:
            logger.debug("Enemy turn for combat #%d lapsed", combat_id)
            return

        hit = self._resolver.enemy_attack(combat, self._player, defending)
        if hit.lethal:
            self._defeat()
            return
        self._set_player(hit.target)
        self._message = f"{combat.enemy.name} attacks for {hit.damage} damage!"

    def _win(self, combat: CombatInstance) -> None:
        enemy = combat.enemy
        xp = self._config.xp_per_kill
        player, leveled = self._progression.apply_xp(self._player.earn(enemy.gold), xp)
        self._set_player(player)

        if leveled:
            self._message = (
                f"You defeated the {enemy.name}! Gained {enemy.gold} gold and {xp} XP. "
                f"Leveled up to {player.level}!"
            )
            self._bridge.emit("rpg_level_up", {"level": player.level})
        else:
            self._message = f"You defeated the {enemy.name}! Gained {enemy.gold} gold and {xp} XP."

        self._set_mode(GameMode.WORLD)
        self._grid.clear_tile(combat.enemy_pos)
        self._scheduler.call_later(
            self._config.respawn_delay_ms, self._respawn,
            combat.enemy_pos, self._map_generation, label="rpg-respawn",
        )
        logger.info("Combat #%d won, enemy at %s respawns in %d ms",
                    combat.combat_id, combat.enemy_pos, self._config.respawn_delay_ms)

    def _defeat(self) -> None:
        logger.info("Player defeated in combat #%d, resetting", self._combat_seq)
        self._set_mode(GameMode.WORLD)
        self._set_player(self.default_player())
        self._player_pos = self._start
        self._message = "You were defeated! Game Over."

    def _respawn(self, pos: Vector2, generation: int) -> None:
        if generation != self._map_generation or not self._grid.in_bounds(pos):
            logger.debug("Respawn at %s lapsed (map generation %d)", pos, generation)
            return
        if self._grid.tile_at(pos) == Tile.GRASS:
            self._grid.set_tile(pos, Tile.ENEMY)
            logger.debug("Enemy respawned at %s", pos)

    # -- shop & inn --

    def buy_potion(self) -> bool:
        if self._mode != GameMode.SHOP:
            return False
        paid = self._player.spend(self._config.potion_price)
        if paid is None:
            self._message = NOT_ENOUGH_GOLD
            return False
        self._set_player(paid.healed(self._config.potion_heal))
        self._message = f"Bought potion! Healed {self._config.potion_heal} HP."
        return True

    def buy_sword(self) -> bool:
        if self._mode != GameMode.SHOP:
            return False
        paid = self._player.spend(self._config.sword_price)
        if paid is None:
            self._message = NOT_ENOUGH_GOLD
            return False
        self._set_player(paid.with_attack(self._config.sword_attack))
        self._message = f"Bought sword! Attack +{self._config.sword_attack}."
        return True

    def leave_shop(self) -> bool:
        if self._mode != GameMode.SHOP:
            return False
        self._set_mode(GameMode.WORLD)
        return True

    def rest(self) -> bool:
        if self._mode != GameMode.INN:
            return False
        paid = self._player.spend(self._config.rest_price)
        if paid is None:
            self._message = NOT_ENOUGH_GOLD
            return False
        self._set_player(paid.fully_healed())
        self._message = "Rested! Fully healed."
        return True

    def leave_inn(self) -> bool:
        if self._mode != GameMode.INN:
            return False
        self._set_mode(GameMode.WORLD)
        return True

    # -- session lifecycle --

    def reset(self, new_map: bool = False) -> None:
        """Return to the starting state; ``new_map`` also rebuilds the grid.

        Respawns scheduled against the old map lapse once it is replaced.
        """
        self._set_mode(GameMode.WORLD)
        self._cancel_path()
        if new_map:
            self._map_generation += 1
            self._grid = self._build_grid()
        self._set_player(self.default_player())
        self._player_pos = self._start
        self._message = WELCOME
        logger.info("RPG session reset (map generation %d)", self._map_generation)

    # -- internals --

    def _set_player(self, character: Character) -> None:
        self._player = character
        if self._repository is not None:
            self._repository.save(character)

    def _build_grid(self) -> TileGrid:
        cfg = self._config
        shop = Vector2(*cfg.shop_pos) if cfg.shop_pos is not None else None
        inn = Vector2(*cfg.inn_pos) if cfg.inn_pos is not None else None
        if cfg.map_layout == "random":
            return TileGrid.generate_random(
                cfg.rpg_grid_size, cfg.enemy_probability, self._rng,
                generation=self._map_generation, shop_at=shop, inn_at=inn,
                reserved=(self._start,),
            )
        if cfg.map_layout != "fixed":
            raise ValueError(f"unknown map layout {cfg.map_layout!r}")
        return TileGrid.generate(
            cfg.rpg_grid_size, shop_at=shop, inn_at=inn,
            enemy_positions=[Vector2(x, y) for x, y in cfg.enemy_positions],
        )
