"""
Snapshot of a single match: the board, whose turn it is, and which phase the match is in.

All classes are frozen. The rules in game.py never mutate a GameState, they build a new one,
so a snapshot that was handed out (or broadcast) never changes afterwards.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self
from uuid import UUID

from archess.core.shared_types import GamePhase
from archess.engine.board import Board
from archess.engine.position import Position


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class Encounter:
    """Two opposing units contesting the same tile. Pending until the survivor is reported."""

    attacker_id: str
    defender_id: str
    position: Position


@dataclass(frozen=True)
class GameState:
    match_id: UUID
    board: Board
    players: tuple[Player, ...]
    current_turn_player_id: str
    phase: GamePhase = GamePhase.TURN_BASED
    encounter: Optional[Encounter] = None
    turn_number: int = 1

    def player(self, player_id: str) -> Optional[Player]:
        return next((player for player in self.players if player.id == player_id), None)

    def next_player_id(self) -> str:
        """Players act in the fixed order of the players list, cyclically."""
        player_ids = [player.id for player in self.players]
        current_idx = player_ids.index(self.current_turn_player_id)
        return player_ids[(current_idx + 1) % len(player_ids)]

    @property
    def winner(self) -> Optional[str]:
        """
        The last player with units left on the board.
        NOTE informational only: the engine keeps accepting actions, ending a match is the lobby's job (exit).
        """
        still_standing = [
            player.id for player in self.players if self.board.units_of(player.id)
        ]
        if len(still_standing) == 1 and len(self.players) > 1:
            return still_standing[0]
        return None

    # --- copy-on-write updates ---
    def with_board(self, board: Board) -> Self:
        return replace(self, board=board)

    def with_player_name(self, player_id: str, name: str) -> Self:
        return replace(
            self,
            players=tuple(
                replace(player, name=name) if player.id == player_id else player
                for player in self.players
            ),
        )
