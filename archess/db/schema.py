"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_timestamp() -> float:
    return datetime.now(timezone.utc).timestamp()


class Base(DeclarativeBase):
    pass


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    slot_a: Mapped[Optional[str]]
    slot_b: Mapped[Optional[str]]
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    # Stored as a POSIX timestamp: SQLite drops tzinfo from DateTime columns.
    created_at: Mapped[float] = mapped_column(default=utc_timestamp, index=True)
