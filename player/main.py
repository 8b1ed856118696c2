"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from player.aggregator import AggregatorClient
from player.assets import build_asset_router
from player.assets import router as embed_router
from player.config import Settings, get_settings
from player.controller import PlayerController
from player.music_api import MusicAPI
from player.routes_player import router as player_router

logger = logging.getLogger(__name__)


def build_controller(settings: Settings) -> PlayerController:
    """Wire client → API → controller from settings."""
    config = settings.music_config()
    client = AggregatorClient(config.meting_api, timeout=settings.request_timeout)
    api = MusicAPI(
        client,
        config,
        retries=settings.fetch_retries,
        metadata_timeout=settings.metadata_timeout,
    )
    return PlayerController(api, config)


def create_app(
    controller: PlayerController | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app; pass *controller* to bypass the network-backed default."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle hook."""
        logging.basicConfig(level=settings.log_level.upper())
        if app.state.controller is None:
            app.state.controller = build_controller(settings)
            await app.state.controller.refresh()
        state = app.state.controller.state
        logger.info(
            "Player ready: %d songs, %d pages (dist: %s)",
            len(state.full_playlist),
            state.total_pages,
            settings.dist_abs_path,
        )
        yield
        app.state.controller.cancel_pending()
        logger.info("Player shut down")

    app = FastAPI(
        title="meting-player",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller
    app.state.settings = settings

    # Routers
    app.include_router(build_asset_router(settings.dist_abs_path))
    app.include_router(embed_router)
    app.include_router(player_router)

    @app.get("/health")
    async def health():
        """Simple health-check endpoint."""
        return JSONResponse({"status": "ok", "version": app.version})

    return app


app = create_app()
