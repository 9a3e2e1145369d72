"""Match Registry: lifecycle of the lobby-level match records."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4

from archess.core.exceptions import (
    InvalidInputError,
    NotAvailableError,
    NotFoundError,
    SlotTakenError,
)
from archess.core.logging_config import get_logger
from archess.core.models import MatchModel
from archess.core.shared_types import MatchStatus, Slot
from archess.db.repository import MatchRepository

logger = get_logger(__name__)

WON_SUFFIX = " (won)"
LOST_SUFFIX = " (lost)"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExitResult:
    """Outcome of a player leaving: either the match is gone, or it was completed (and `match` holds the result)."""

    match_id: UUID
    removed: bool
    match: Optional[MatchModel] = None


class MatchRegistry:
    def __init__(self, repository: MatchRepository, clock: Clock = utc_now) -> None:
        self.repo = repository
        self.clock = clock

    def create_match(self, creator_name: str) -> MatchModel:
        """The creator automatically takes slot A."""
        name = self._clean_name(creator_name)
        match = MatchModel(
            id=uuid4(),
            status=MatchStatus.WAITING,
            created_at=self.clock(),
            slot_a=name,
        )
        stored = self.repo.create_match(match)
        logger.info("Match created", match_id=str(stored.id), creator=name)
        return stored

    def get_match(self, match_id: UUID) -> MatchModel:
        match = self.repo.get_match(match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found.")
        return match

    def list_active(self) -> list[MatchModel]:
        """Everything that is not completed, newest first."""
        return self.repo.list_matches(exclude={MatchStatus.COMPLETED})

    def list_completed(self) -> list[MatchModel]:
        return self.repo.list_matches(include={MatchStatus.COMPLETED})

    def join_match(self, match_id: UUID, slot: Slot, player_name: str) -> MatchModel:
        """Fill the requested slot. Once both slots are filled the match is in progress."""
        name = self._clean_name(player_name)
        match = self.get_match(match_id)

        if match.status != MatchStatus.WAITING:
            raise NotAvailableError(
                f"Match {match_id} is not available for joining. status: {match.status}"
            )
        if match.player_in(slot) is not None:
            raise SlotTakenError(f"Slot {slot} of match {match_id} is already taken.")

        joined = (
            replace(match, slot_a=name) if slot == Slot.A else replace(match, slot_b=name)
        )
        if joined.slot_a is not None and joined.slot_b is not None:
            joined = replace(joined, status=MatchStatus.IN_PROGRESS)

        updated = self._update(joined)
        logger.info(
            "Player joined match",
            match_id=str(match_id),
            slot=str(slot),
            player=name,
            status=str(updated.status),
        )
        return updated

    def handle_exit(self, match_id: UUID, slot_leaving: Slot) -> ExitResult:
        """
        A player leaves the match
        ----

        * Nobody else ever joined? The match is deleted outright (no opponent to notify).
        * Only a seated player can leave: an exit from an empty slot is rejected.
        * Otherwise the match is completed: the leaving player forfeits, the remaining player wins.
        """
        match = self.get_match(match_id)
        if match.status == MatchStatus.COMPLETED:
            raise NotAvailableError(f"Match {match_id} is already completed.")
        if match.player_in(slot_leaving) is None:
            raise InvalidInputError(f"Slot {slot_leaving} of match {match_id} is empty.")

        if len(match.filled_slots()) < 2:
            self.repo.delete_match(match_id)
            logger.info("Match removed on exit", match_id=str(match_id), slot=str(slot_leaving))
            return ExitResult(match_id=match_id, removed=True)

        winner = slot_leaving.other
        annotated = {
            winner: f"{match.player_in(winner)}{WON_SUFFIX}",
            slot_leaving: f"{match.player_in(slot_leaving)}{LOST_SUFFIX}",
        }
        completed = replace(
            match,
            slot_a=annotated[Slot.A],
            slot_b=annotated[Slot.B],
            status=MatchStatus.COMPLETED,
            winner=winner,
        )
        updated = self._update(completed)
        logger.info(
            "Match completed by forfeit",
            match_id=str(match_id),
            forfeited=str(slot_leaving),
            winner=str(winner),
        )
        return ExitResult(match_id=match_id, removed=False, match=updated)

    def sweep_expired(self, max_age: timedelta) -> list[UUID]:
        """Delete every match older than max_age, whatever its status."""
        cutoff = self.clock() - max_age
        removed = self.repo.delete_created_before(cutoff)
        if removed:
            logger.info("Expired matches swept", count=len(removed))
        return removed

    # -- Internal helpers --
    def _update(self, match: MatchModel) -> MatchModel:
        updated = self.repo.update_match(match)
        if updated is None:
            raise NotFoundError(f"Match {match.id} not found.")
        return updated

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidInputError("Player name is required.")
        return cleaned
