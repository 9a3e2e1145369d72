"""Application factory: builds the services explicitly and hands them to the transport layer."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from archess.api import routes, websocket
from archess.api.errors import register_error_handlers
from archess.core.config import Settings, get_settings
from archess.core.logging_config import configure_logging, get_logger
from archess.db.database import build_engine, build_session
from archess.db.sql_repository import SQLMatchRepository
from archess.services.game_engine import GameEngine
from archess.services.lobby_service import LobbyService
from archess.services.match_registry import MatchRegistry
from archess.services.session_coordinator import SessionCoordinator

logger = get_logger(__name__)


@dataclass
class Services:
    registry: MatchRegistry
    engine: GameEngine
    coordinator: SessionCoordinator
    lobby: LobbyService


def build_services(settings: Settings, db_session: Session) -> Services:
    """Wire up the components. No globals: every app (and every test) gets its own instances."""
    registry = MatchRegistry(SQLMatchRepository(db_session))
    engine = GameEngine(
        board_width=settings.board_width,
        board_height=settings.board_height,
        combat_mode=settings.combat_mode,
    )
    coordinator = SessionCoordinator(engine, registry)
    lobby = LobbyService(registry, engine, coordinator)
    return Services(registry, engine, coordinator, lobby)


def create_app(settings: Optional[Settings] = None, run_sweeper: bool = True) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    db_engine = build_engine(settings.database_url)
    db_session = build_session(db_engine)
    services = build_services(settings, db_session)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper: Optional[asyncio.Task[None]] = None
        if run_sweeper:
            sweeper = asyncio.create_task(
                services.lobby.run_sweeper(
                    interval=settings.sweep_interval_seconds,
                    max_age=timedelta(seconds=settings.match_max_age_seconds),
                )
            )
        logger.info("Server started", host=settings.host, port=settings.port)
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
            db_session.close()
            db_engine.dispose()
            logger.info("Server stopped")

    app = FastAPI(title="Archess", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = services.registry
    app.state.engine = services.engine
    app.state.coordinator = services.coordinator
    app.state.lobby_service = services.lobby

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(routes.lobby, prefix="/api")
    app.include_router(routes.games, prefix="/api")
    app.include_router(websocket.router)
    return app
