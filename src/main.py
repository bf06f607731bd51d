"""
Tic-Tac-Toe API.

Everything stateful (the game registry, the player service and its database session) is built once per app
in create_app and handed to the routes through app.state.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_error_handlers
from src.api.routes import games_router, leaderboard_router, players_router
from src.config import Settings, get_settings
from src.db.database import build_engine, build_session_factory
from src.db.sql_repository import SQLPlayerRepository
from src.services.game_registry import GameRegistry
from src.services.player_service import PlayerService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url)
    session = build_session_factory(engine)
    player_service = PlayerService(SQLPlayerRepository(session))

    registry = GameRegistry(
        player_directory=player_service,
        max_name_length=settings.max_game_name_length,
    )
    registry.subscribe(player_service.record_game_finished)

    app = FastAPI(title="Tic-Tac-Toe API", debug=settings.debug)
    app.state.registry = registry
    app.state.player_service = player_service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(games_router)
    app.include_router(players_router)
    app.include_router(leaderboard_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Tic-Tac-Toe API ready (database: %s)", engine.url.render_as_string())
    return app


def run() -> None:
    uvicorn.run("src.main:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
