"""Protocol repository for match records (the Match Registry only depends on this)."""

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from archess.core.models import MatchModel
from archess.core.shared_types import MatchStatus


class MatchRepository(Protocol):
    """Persistence layer orchestration"""

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Get match by ID, if record exists."""
        ...

    def list_matches(
        self,
        include: Optional[set[MatchStatus]] = None,
        exclude: Optional[set[MatchStatus]] = None,
    ) -> list[MatchModel]:
        """Matches filtered by status, newest first."""
        ...

    def create_match(self, match: MatchModel) -> MatchModel:
        """Store a new match record."""
        ...

    def update_match(self, match: MatchModel) -> MatchModel | None:
        """Overwrite slots/status/winner of an existing record."""
        ...

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove a match's record."""
        ...

    def delete_created_before(self, cutoff: datetime) -> list[UUID]:
        """Remove every match created before the cutoff and return their IDs."""
        ...
