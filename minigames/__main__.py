"""Entry point: ``python -m minigames``.

Supports two modes:
  - ``python -m minigames``          → Launch the FastAPI server
  - ``python -m minigames cli``      → Headless autoplay of one game
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Webview minigame engines")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--layout", type=str, default="fixed", choices=["fixed", "random"])
    srv.add_argument("--storage", type=str, default=None, help="JSON file for saved progress")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless autoplay ---
    cli = sub.add_parser("cli", help="Run a headless autoplay session")
    cli.add_argument("game", choices=["rpg", "snake"])
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--layout", type=str, default="fixed", choices=["fixed", "random"])
    cli.add_argument("--turns", type=int, default=200, help="Decisions the autopilot makes")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from minigames.api.app import create_app
    from minigames.config import GameConfig

    config = GameConfig(
        seed=args.seed,
        map_layout=args.layout,
        storage_file=args.storage,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _autoplay_rpg(session, scheduler, config, turns: int) -> None:
    from minigames.core.enums import GameMode, Tile

    for _ in range(turns):
        mode = session.mode
        player = session.player
        if mode == GameMode.WORLD:
            # Heal first when low and able to pay, otherwise hunt the nearest enemy
            wants_inn = player.hp_ratio < 0.5 and player.gold >= config.rest_price
            targets = [
                t for t in session.grid.positions_of(Tile.INN if wants_inn else Tile.ENEMY)
                if t != session.player_pos
            ]
            if not targets:
                scheduler.advance(config.respawn_delay_ms)
                continue
            target = min(targets, key=session.player_pos.manhattan)
            session.set_destination(target)
            while session.destination is not None:
                scheduler.advance(config.path_step_ms)
        elif mode == GameMode.COMBAT:
            if player.hp_ratio < 0.25:
                session.flee()
            else:
                session.attack()
            scheduler.advance(config.enemy_turn_delay_ms)
        elif mode == GameMode.INN:
            session.rest()
            session.leave_inn()
        elif mode == GameMode.SHOP:
            if player.gold >= config.sword_price:
                session.buy_sword()
            session.leave_shop()
        logger.debug("%s @ %s: %s", mode.name, session.player_pos, session.message)

    p = session.player
    logger.info(
        "RPG autoplay finished at %d ms: level %d, xp %d, hp %d/%d, attack %d, gold %d",
        scheduler.now_ms, p.level, p.xp, p.hp, p.max_hp, p.attack, p.gold,
    )


def _autoplay_snake(session, scheduler, config, turns: int) -> None:
    from minigames.core.models import DIRECTION_OFFSETS

    size = config.snake_board_size

    def _delta(a: int, b: int) -> int:
        # Shortest signed distance on the torus
        d = (b - a) % size
        return d - size if d > size // 2 else d

    session.start()
    for _ in range(turns):
        if not session.alive:
            break
        head, food = session.head, session.food
        body = set(session.body[:-1])
        dx, dy = _delta(head.x, food.x), _delta(head.y, food.y)
        ranked = sorted(
            DIRECTION_OFFSETS.values(),
            key=lambda v: -(v.x * dx + v.y * dy),
        )
        for offset in ranked:
            if (head + offset).wrap(size) in body:
                continue
            if offset == session.direction or session.set_direction(offset):
                break
        scheduler.advance(config.snake_tick_ms)

    logger.info(
        "Snake autoplay finished at %d ms: score %d, length %d, alive=%s",
        scheduler.now_ms, session.score, len(session.body), session.alive,
    )


def _run_cli(args: argparse.Namespace) -> None:
    from minigames.config import GameConfig
    from minigames.engine.rpg import RPGSession
    from minigames.engine.scheduler import TickScheduler
    from minigames.engine.snake import SnakeSession
    from minigames.services.bridge import HostBridge
    from minigames.services.storage import CharacterRepository, InMemoryStore
    from minigames.systems.rng import DeterministicRNG
    from minigames.utils.logging import setup_logging

    config = GameConfig(seed=args.seed, map_layout=args.layout, log_level=args.log_level)
    setup_logging(config.log_level)

    scheduler = TickScheduler()
    rng = DeterministicRNG(config.seed)
    bridge = HostBridge(clock=lambda: scheduler.now_ms)

    if args.game == "rpg":
        repository = CharacterRepository(InMemoryStore(), config.save_key)
        session = RPGSession(config, scheduler, rng, bridge, repository)
        _autoplay_rpg(session, scheduler, config, args.turns)
    else:
        session = SnakeSession(config, scheduler, rng, bridge)
        _autoplay_snake(session, scheduler, config, args.turns)

    logger.info("Done. %d host event(s) emitted.", len(bridge.event_log))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
