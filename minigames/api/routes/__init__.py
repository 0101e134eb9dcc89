"""Versioned API route modules."""

from fastapi import APIRouter

from minigames.api.routes.config import router as config_router
from minigames.api.routes.control import router as control_router
from minigames.api.routes.events import router as events_router
from minigames.api.routes.rpg import router as rpg_router
from minigames.api.routes.snake import router as snake_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(rpg_router, tags=["RPG"])
api_router.include_router(snake_router, tags=["Snake"])
api_router.include_router(events_router, tags=["Events"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
