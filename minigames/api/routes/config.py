"""GET /api/v1/config — expose game configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from minigames.api.dependencies import get_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.schemas import GameConfigResponse

router = APIRouter()


@router.get("/config", response_model=GameConfigResponse)
def get_config(
    manager: SessionManager = Depends(get_session_manager),
) -> GameConfigResponse:
    cfg = manager.config
    return GameConfigResponse(
        seed=cfg.seed,
        rpg_grid_size=cfg.rpg_grid_size,
        map_layout=cfg.map_layout,
        path_step_ms=cfg.path_step_ms,
        enemy_turn_delay_ms=cfg.enemy_turn_delay_ms,
        respawn_delay_ms=cfg.respawn_delay_ms,
        snake_board_size=cfg.snake_board_size,
        snake_tick_ms=cfg.snake_tick_ms,
        tick_rate=manager.tick_rate,
    )
