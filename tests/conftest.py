"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from archess.db.schema import Base
from archess.db.sql_repository import SQLMatchRepository
from archess.services.game_engine import GameEngine
from archess.services.lobby_service import LobbyService
from archess.services.match_registry import MatchRegistry
from archess.services.session_coordinator import SessionCoordinator

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


class FakeClock:
    """Controllable replacement for datetime.now, so match ages can be tested without sleeping."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(db_session_repo: Session, clock: FakeClock) -> MatchRegistry:
    return MatchRegistry(SQLMatchRepository(db_session_repo), clock=clock)


@pytest.fixture
def game_engine() -> GameEngine:
    return GameEngine()


@pytest.fixture
def coordinator(game_engine: GameEngine, registry: MatchRegistry) -> SessionCoordinator:
    return SessionCoordinator(game_engine, registry)


@pytest.fixture
def lobby_service(
    registry: MatchRegistry, game_engine: GameEngine, coordinator: SessionCoordinator
) -> LobbyService:
    return LobbyService(registry, game_engine, coordinator)


@pytest.fixture
def match_id():
    return uuid4()
