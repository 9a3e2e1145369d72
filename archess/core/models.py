"""
Boundary layer data model(s).

Objects defined here are used to communicate between the Match Registry and its repository.
Decouples the data model of the DB layer from the lobby domain, the same way the API layer has its own models.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from archess.core.shared_types import MatchStatus, Slot

PlayerName = str


@dataclass
class MatchModel:
    """Lobby-level record of a match: who sits in which slot, and how far along the match is."""

    id: UUID
    status: MatchStatus
    created_at: datetime
    slot_a: Optional[PlayerName] = None
    slot_b: Optional[PlayerName] = None
    winner: Optional[Slot] = None

    def player_in(self, slot: Slot) -> Optional[PlayerName]:
        return self.slot_a if slot == Slot.A else self.slot_b

    def filled_slots(self) -> list[Slot]:
        return [slot for slot in Slot if self.player_in(slot) is not None]
