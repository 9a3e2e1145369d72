"""Game Engine: the only entrypoint that reads or replaces the stored GameState of a match."""

from typing import Optional
from uuid import UUID

from archess.core.exceptions import InvalidActionError, NotFoundError
from archess.core.logging_config import get_logger
from archess.core.shared_types import CombatMode, Slot
from archess.engine import game
from archess.engine.actions import Action
from archess.engine.game_state import GameState
from archess.engine.layout import starting_state
from archess.engine.moves import candidate_targets
from archess.engine.position import BOARD_DIMENSIONS, Position
from archess.engine.store import MatchStateStore

logger = get_logger(__name__)


class GameEngine:
    """Turn-based rules engine, keyed by match id."""

    def __init__(
        self,
        store: Optional[MatchStateStore] = None,
        board_width: int = BOARD_DIMENSIONS[0],
        board_height: int = BOARD_DIMENSIONS[1],
        combat_mode: CombatMode = CombatMode.IMMEDIATE,
    ) -> None:
        self.store = store if store is not None else MatchStateStore()
        self.board_width = board_width
        self.board_height = board_height
        self.combat_mode = combat_mode

    def initialize(
        self, match_id: UUID, player_names: Optional[dict[Slot, str]] = None
    ) -> GameState:
        """Build the starting state for the match. Overwrites any earlier state: calling this again is a reset."""
        state = starting_state(
            match_id,
            player_names=player_names,
            width=self.board_width,
            height=self.board_height,
        )
        self.store.put(state)
        logger.info(
            "Game state initialized",
            match_id=str(match_id),
            units=len(state.board.units),
        )
        return state

    def apply(self, action: Action, match_id: UUID) -> GameState:
        """
        Sole mutation entrypoint for player actions
        ----

        1. look up the current state
        2. validate + compute the new state (pure, previous snapshot untouched)
        3. store and return the new state

        NOTE: the caller is responsible for serializing calls for the same match (see SessionCoordinator).
        """
        state = self.get_state(match_id)
        try:
            new_state = game.apply_action(state, action, self.combat_mode)
        except InvalidActionError as exc:
            logger.info(
                "Action rejected",
                match_id=str(match_id),
                player_id=action.player_id,
                action_type=str(action.type),
                reason=exc.message,
            )
            raise

        self.store.put(new_state)
        logger.debug(
            "Action applied",
            match_id=str(match_id),
            player_id=action.player_id,
            action_type=str(action.type),
            phase=str(new_state.phase),
            turn=new_state.current_turn_player_id,
        )
        return new_state

    def validate(self, action: Action, state: GameState) -> bool:
        return game.validate(action, state)

    def get_state(self, match_id: UUID) -> GameState:
        state = self.store.get(match_id)
        if state is None:
            raise NotFoundError(f"Game state for match {match_id} not found.")
        return state

    def legal_moves(self, match_id: UUID, player_id: str) -> dict[str, list[Position]]:
        """
        Reachable target tiles per unit of the player (useful for highlighting on the client).
        Empty when it is not the player's turn or the match is resolving an encounter.
        """
        state = self.get_state(match_id)
        probe = Action.end_turn(player_id)
        if not game.validate(probe, state):
            return {}
        return {
            unit.id: candidate_targets(unit, state.board)
            for unit in state.board.units_of(player_id)
        }

    def register_player(self, match_id: UUID, player_id: str, name: str) -> GameState:
        """Attach a display name to one of the two players of the match."""
        state = self.get_state(match_id)
        if state.player(player_id) is None:
            raise NotFoundError(f"Player {player_id!r} not part of match {match_id}.")
        return self.store.put(state.with_player_name(player_id, name))

    def resolve_encounter(
        self,
        match_id: UUID,
        surviving_unit_id: str,
        remaining_health: Optional[int] = None,
    ) -> GameState:
        """Callback for an external combat collaborator: report which unit survived the encounter."""
        state = self.get_state(match_id)
        new_state = game.resolve_encounter(state, surviving_unit_id, remaining_health)
        self.store.put(new_state)
        logger.info(
            "Encounter resolved",
            match_id=str(match_id),
            surviving_unit_id=surviving_unit_id,
        )
        return new_state

    def __contains__(self, match_id: object) -> bool:
        return match_id in self.store

    def remove(self, match_id: UUID) -> None:
        if self.store.delete(match_id) is not None:
            logger.debug("Game state removed", match_id=str(match_id))
