"""Implementation of (Match)Repository using SQLAlchemy"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from archess.core.models import MatchModel
from archess.core.shared_types import MatchStatus, Slot
from archess.db.schema import DBMatch


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Get match by ID, if record exists."""
        match_db = self._fetch_match(match_id)
        if match_db:
            return self._to_model(match_db)
        return None

    def list_matches(
        self,
        include: Optional[set[MatchStatus]] = None,
        exclude: Optional[set[MatchStatus]] = None,
    ) -> list[MatchModel]:
        """Matches filtered by status, newest first."""
        query = select(DBMatch).order_by(DBMatch.created_at.desc())
        if include:
            query = query.where(DBMatch.status.in_([str(s) for s in include]))
        if exclude:
            query = query.where(DBMatch.status.not_in([str(s) for s in exclude]))
        return [self._to_model(match_db) for match_db in self.db.scalars(query)]

    def create_match(self, match: MatchModel) -> MatchModel:
        """Store a new match record."""
        match_db = DBMatch(
            id=match.id,
            slot_a=match.slot_a,
            slot_b=match.slot_b,
            status=str(match.status),
            winner=str(match.winner) if match.winner else None,
            created_at=match.created_at.timestamp(),
        )
        self.db.add(match_db)
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def update_match(self, match: MatchModel) -> MatchModel | None:
        """Overwrite slots/status/winner of an existing record."""
        match_db = self._fetch_match(match.id)
        if not match_db:
            return None
        match_db.slot_a = match.slot_a
        match_db.slot_b = match.slot_b
        match_db.status = str(match.status)
        match_db.winner = str(match.winner) if match.winner else None
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove a match's record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_model = self._to_model(match_db)
        self.db.delete(match_db)
        self.db.commit()
        return match_model

    def delete_created_before(self, cutoff: datetime) -> list[UUID]:
        """Remove every match created before the cutoff and return their IDs."""
        condition = DBMatch.created_at < cutoff.timestamp()
        expired_ids = list(self.db.scalars(select(DBMatch.id).where(condition)))
        if expired_ids:
            self.db.execute(delete(DBMatch).where(condition))
            self.db.commit()
        return expired_ids

    def _fetch_match(self, match_id: UUID) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return self.db.scalar(query)

    def _to_model(self, match_db: DBMatch) -> MatchModel:
        """Convert SQLAlchemy model to data transfer model."""
        return MatchModel(
            id=match_db.id,
            status=MatchStatus(match_db.status),
            created_at=datetime.fromtimestamp(match_db.created_at, tz=timezone.utc),
            slot_a=match_db.slot_a,
            slot_b=match_db.slot_b,
            winner=Slot(match_db.winner) if match_db.winner else None,
        )
