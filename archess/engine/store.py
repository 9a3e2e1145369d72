"""In-memory store of the authoritative GameState per match. Only the GameEngine service talks to it."""

from typing import Optional
from uuid import UUID

from archess.engine.game_state import GameState


class MatchStateStore:
    def __init__(self) -> None:
        self._states: dict[UUID, GameState] = {}

    def get(self, match_id: UUID) -> Optional[GameState]:
        return self._states.get(match_id)

    def put(self, state: GameState) -> GameState:
        """Snapshots are frozen, so storing the object itself is safe."""
        self._states[state.match_id] = state
        return state

    def delete(self, match_id: UUID) -> Optional[GameState]:
        return self._states.pop(match_id, None)

    def __contains__(self, match_id: object) -> bool:
        return match_id in self._states

    def __len__(self) -> int:
        return len(self._states)
