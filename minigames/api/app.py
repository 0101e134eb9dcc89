"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minigames.api.dependencies import set_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.routes import api_router
from minigames.config import GameConfig
from minigames.services.bridge import Transport
from minigames.services.storage import KeyValueStore
from minigames.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    config: GameConfig | None = None,
    store: KeyValueStore | None = None,
    transport: Transport | None = None,
    run_clock: bool = True,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With ``run_clock=False`` the game clock only moves through
    ``POST /control/step`` (used by tests).
    """
    if config is None:
        config = GameConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = SessionManager(_config, store=store, transport=transport)
        set_session_manager(manager)
        app.state.manager = manager
        if run_clock:
            manager.start()
        logger.info("API server started, game clock %s.", "running" if run_clock else "manual")
        yield
        manager.stop()
        set_session_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Webview Minigames",
        description=(
            "Turn-based RPG and toroidal Snake engines behind a host shell.\n\n"
            "## API Groups\n\n"
            "- **RPG** — World/combat/shop/inn state machine: projection and commands\n"
            "- **Snake** — Real-time snake: projection and commands\n"
            "- **Events** — Host-bridge notification feed\n"
            "- **Control** — Game clock: pause, resume, single-step, speed\n"
            "- **Config** — Read-only game configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "RPG", "description": "Read-only RPG snapshot plus move/destination/key/action/reset commands."},
            {"name": "Snake", "description": "Read-only Snake snapshot plus start/stop/direction/key commands."},
            {"name": "Events", "description": "Messages sent to the embedding host (level-ups, game over, custom events)."},
            {"name": "Control", "description": "Game clock controls shared by both engines."},
            {"name": "Config", "description": "Read-only game configuration parameters."},
        ],
    )

    # CORS: the host webview serves the page from its own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
