"""Client-submitted requests to change a GameState. Transient: never stored."""

from dataclasses import dataclass
from typing import Optional, Self

from archess.core.shared_types import ActionType
from archess.engine.position import Position


@dataclass(frozen=True)
class Action:
    type: ActionType
    player_id: str
    unit_id: Optional[str] = None
    target_position: Optional[Position] = None
    # Advisory only: the server-applied order is the only order that matters
    timestamp: Optional[float] = None

    @classmethod
    def move(
        cls,
        player_id: str,
        unit_id: str,
        target: Position,
        timestamp: Optional[float] = None,
    ) -> Self:
        return cls(ActionType.MOVE, player_id, unit_id, target, timestamp)

    @classmethod
    def end_turn(cls, player_id: str, timestamp: Optional[float] = None) -> Self:
        return cls(ActionType.END_TURN, player_id, timestamp=timestamp)
