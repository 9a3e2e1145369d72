"""Generate database engine / session"""

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from archess.db.schema import Base


def build_engine(database_url: str) -> Engine:
    """
    Create the engine and make sure all tables exist.

    NOTE: an in-memory SQLite database only lives as long as its connection, so every session must share a single one (StaticPool).
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    return engine


def build_session(engine: Engine) -> Session:
    session_factory = sessionmaker(autoflush=False, bind=engine)
    return session_factory()
