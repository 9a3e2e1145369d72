"""
The rules of the game: validating an Action against a GameState and computing the resulting GameState.

Everything here is a pure function. The GameEngine service owns the stored snapshots and calls into this module,
the same way a service layer calls into the domain layer.
"""

from dataclasses import replace
from typing import Optional

from archess.core.exceptions import InvalidActionError
from archess.core.shared_types import ActionType, CombatMode, GamePhase
from archess.engine.actions import Action
from archess.engine.game_state import Encounter, GameState
from archess.engine.moves import move_violation


# --- VALIDATION ---
def validation_error(action: Action, state: GameState) -> Optional[str]:
    """
    Reason the action is rejected, or None if it is valid.
    ----

    1. it must be your turn
    2. no actions while an encounter is being resolved
    3. ending your turn needs nothing else
    4. the unit must exist and be yours
    5. a move needs a target, and the target must be reachable (see moves.py)
    """
    if action.player_id != state.current_turn_player_id:
        return f"It is not your turn. Waiting for {state.current_turn_player_id} to act first."

    if state.phase != GamePhase.TURN_BASED:
        return f"Actions are not accepted during phase {state.phase}."

    if action.type == ActionType.END_TURN:
        return None

    if action.unit_id is None:
        return f"{action.type} requires a unit."

    unit = state.board.unit(action.unit_id)
    if unit is None:
        return f"Unknown unit: {action.unit_id!r}."

    if unit.owner != action.player_id:
        return "You can only command your own units."

    if action.type == ActionType.MOVE:
        if action.target_position is None:
            return "A move requires a target position."
        return move_violation(unit, action.target_position, state.board)

    return f"Action type {action.type} not implemented."


def validate(action: Action, state: GameState) -> bool:
    return validation_error(action, state) is None


# --- STATE TRANSITIONS ---
def apply_action(
    state: GameState, action: Action, combat_mode: CombatMode = CombatMode.IMMEDIATE
) -> GameState:
    """Validate, then dispatch to the transition for the action type. The given state is never modified."""
    reason = validation_error(action, state)
    if reason is not None:
        raise InvalidActionError(f"Invalid action: {reason}")

    if action.type == ActionType.END_TURN:
        return end_turn(state)
    return move_unit(state, action, combat_mode)


def move_unit(
    state: GameState, action: Action, combat_mode: CombatMode = CombatMode.IMMEDIATE
) -> GameState:
    """
    Relocate the unit. Moving onto an enemy is an attack:

    * immediate: the mover wins, the defender is removed and the mover takes its tile.
    * encounter: nothing moves yet. The match enters ENCOUNTER_RESOLUTION until the survivor gets reported.
    """
    # for the type checker: only called after validation
    assert action.unit_id is not None and action.target_position is not None

    board = state.board
    mover = board.unit(action.unit_id)
    assert mover is not None
    target = action.target_position
    defender = board.unit_at(target)

    if defender is None:
        return state.with_board(board.replace_unit(mover.moved_to(target)))

    if combat_mode == CombatMode.ENCOUNTER:
        return replace(
            state,
            phase=GamePhase.ENCOUNTER_RESOLUTION,
            encounter=Encounter(
                attacker_id=mover.id, defender_id=defender.id, position=target
            ),
        )

    board = board.remove_unit(defender.id).replace_unit(mover.moved_to(target))
    return state.with_board(board)


def end_turn(state: GameState) -> GameState:
    """Pass the turn to the next player. Nothing else changes."""
    return replace(
        state,
        current_turn_player_id=state.next_player_id(),
        turn_number=state.turn_number + 1,
    )


def resolve_encounter(
    state: GameState, surviving_unit_id: str, remaining_health: Optional[int] = None
) -> GameState:
    """
    Outcome of an encounter reported by an external combat collaborator.
    ----

    1. The losing unit is removed.
    2. If the attacker survived, it takes the contested tile. A surviving defender stays put.
    3. The survivor's health is set to the reported value (clamped). A survivor left at 0 is removed as well.
    4. Back to TURN_BASED.
    """
    encounter = state.encounter
    if state.phase != GamePhase.ENCOUNTER_RESOLUTION or encounter is None:
        raise InvalidActionError("No encounter is waiting to be resolved.")

    contestants = (encounter.attacker_id, encounter.defender_id)
    if surviving_unit_id not in contestants:
        raise InvalidActionError(
            f"Unit {surviving_unit_id!r} is not part of the pending encounter."
        )

    loser_id = next(unit_id for unit_id in contestants if unit_id != surviving_unit_id)
    board = state.board.remove_unit(loser_id)

    survivor = board.unit(surviving_unit_id)
    assert survivor is not None
    if surviving_unit_id == encounter.attacker_id:
        survivor = survivor.moved_to(encounter.position)
    if remaining_health is not None:
        survivor = survivor.with_health(remaining_health)
    board = board.replace_unit(survivor)

    return replace(
        state, board=board, phase=GamePhase.TURN_BASED, encounter=None
    )
