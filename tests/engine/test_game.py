"""Unit tests for /archess/engine/game.py (the rules) and /archess/engine/layout.py"""

from dataclasses import replace
from uuid import uuid4

import pytest

from archess.core.exceptions import InvalidActionError
from archess.core.shared_types import ActionType, CombatMode, GamePhase, Slot, TileType, UnitType
from archess.engine import game
from archess.engine.actions import Action
from archess.engine.board import Board
from archess.engine.game_state import Encounter, GameState, Player
from archess.engine.layout import starting_state
from archess.engine.position import Position
from archess.engine.units import Unit

ALICE = "player1"
BOB = "player2"


def _state_with(*units: Unit, turn: str = ALICE) -> GameState:
    board = Board.empty(5, 5)
    for unit in units:
        board = board.place_unit(unit)
    return GameState(
        match_id=uuid4(),
        board=board,
        players=(Player(ALICE, "Alice", "#3498db"), Player(BOB, "Bob", "#e74c3c")),
        current_turn_player_id=turn,
    )


@pytest.fixture
def duel() -> tuple[GameState, Unit, Unit]:
    """Alice's champion at (0,0) next to Bob's scout at (1,0)."""
    champion = Unit.recruit(UnitType.CHAMPION, ALICE, Position(0, 0))
    scout = Unit.recruit(UnitType.SCOUT, BOB, Position(1, 0))
    return _state_with(champion, scout), champion, scout


# -- STARTING LAYOUT --
def test_starting_state() -> None:
    state = starting_state(uuid4(), player_names={})
    assert state.phase == GamePhase.TURN_BASED
    assert state.current_turn_player_id == ALICE
    assert [p.id for p in state.players] == [ALICE, BOB]
    assert state.board.width == 5 and state.board.height == 5
    assert len(state.board.units_of(ALICE)) == 4
    assert len(state.board.units_of(BOB)) == 4
    assert state.encounter is None
    assert state.winner is None


def test_starting_layout_is_mirrored() -> None:
    state = starting_state(uuid4())
    for unit in state.board.units_of(ALICE):
        mirror = unit.position.mirrored(5, 5)
        counterpart = state.board.unit_at(mirror)
        assert counterpart is not None
        assert counterpart.owner == BOB
        assert counterpart.type == unit.type


def test_starting_layout_positions() -> None:
    state = starting_state(uuid4())
    layout = {(u.owner, u.type): u.position for u in state.board.units}
    assert layout[(ALICE, UnitType.CHAMPION)] == Position(0, 0)
    assert layout[(ALICE, UnitType.MAGE)] == Position(3, 0)
    assert layout[(BOB, UnitType.CHAMPION)] == Position(4, 4)
    assert layout[(BOB, UnitType.MAGE)] == Position(1, 4)


def test_starting_state_names() -> None:
    state = starting_state(uuid4(), player_names={Slot.A: "Alice"})
    assert state.player(ALICE).name == "Alice"
    assert state.player(BOB).name == "Player 2"


def test_starting_state_rejects_tiny_board() -> None:
    with pytest.raises(ValueError):
        starting_state(uuid4(), width=3, height=5)


# -- VALIDATION --
def test_turn_exclusivity(duel: tuple[GameState, Unit, Unit]) -> None:
    """Any action from the player who is not on turn is rejected, and the state stays the same."""
    state, _, scout = duel
    before = replace(state)
    for action in [
        Action.end_turn(BOB),
        Action.move(BOB, scout.id, Position(1, 1)),
    ]:
        assert not game.validate(action, state)
        with pytest.raises(InvalidActionError):
            game.apply_action(state, action)
    assert state == before


def test_no_actions_during_encounter(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, scout = duel
    state = replace(
        state,
        phase=GamePhase.ENCOUNTER_RESOLUTION,
        encounter=Encounter(champion.id, scout.id, scout.position),
    )
    assert not game.validate(Action.end_turn(ALICE), state)
    assert not game.validate(Action.move(ALICE, champion.id, Position(0, 1)), state)


def test_end_turn_is_always_valid_on_your_turn(duel: tuple[GameState, Unit, Unit]) -> None:
    state, _, _ = duel
    assert game.validate(Action.end_turn(ALICE), state)


def test_cannot_command_enemy_unit(duel: tuple[GameState, Unit, Unit]) -> None:
    state, _, scout = duel
    reason = game.validation_error(Action.move(ALICE, scout.id, Position(1, 1)), state)
    assert reason is not None
    assert "your own units" in reason


def test_unknown_unit(duel: tuple[GameState, Unit, Unit]) -> None:
    state, _, _ = duel
    assert not game.validate(Action.move(ALICE, "nope", Position(1, 1)), state)


def test_move_requires_target_and_unit(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    assert not game.validate(Action(ActionType.MOVE, ALICE, champion.id), state)
    assert not game.validate(Action(ActionType.MOVE, ALICE), state)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (5, 0), (0, 5), (7, 7)])
def test_move_bounds(duel: tuple[GameState, Unit, Unit], x: int, y: int) -> None:
    state, champion, _ = duel
    assert not game.validate(Action.move(ALICE, champion.id, Position(x, y)), state)


def test_move_beyond_allowance_is_invalid(duel: tuple[GameState, Unit, Unit]) -> None:
    """Champion at (0,0), allowance 1, requests (0,2)."""
    state, champion, _ = duel
    with pytest.raises(InvalidActionError):
        game.apply_action(state, Action.move(ALICE, champion.id, Position(0, 2)))


# -- TRANSITIONS --
def test_move_to_empty_tile(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    after = game.apply_action(state, Action.move(ALICE, champion.id, Position(0, 1)))
    assert after.board.unit(champion.id).position == Position(0, 1)
    # previous snapshot is untouched
    assert state.board.unit(champion.id).position == Position(0, 0)
    # moving does not end the turn
    assert after.current_turn_player_id == ALICE


def test_capture_removes_enemy(duel: tuple[GameState, Unit, Unit]) -> None:
    """Alice's unit at (0,0) moves onto Bob's unit at (1,0): mover wins, turn passes only on END_TURN."""
    state, champion, scout = duel
    after = game.apply_action(state, Action.move(ALICE, champion.id, Position(1, 0)))
    assert after.board.unit(scout.id) is None
    assert after.board.unit(champion.id).position == Position(1, 0)
    assert after.current_turn_player_id == ALICE
    assert after.winner == ALICE

    after_end = game.apply_action(after, Action.end_turn(ALICE))
    assert after_end.current_turn_player_id == BOB


def test_turn_alternation(duel: tuple[GameState, Unit, Unit]) -> None:
    state, _, _ = duel
    bobs_turn = game.apply_action(state, Action.end_turn(ALICE))
    assert bobs_turn.current_turn_player_id == BOB
    assert bobs_turn.turn_number == state.turn_number + 1
    alices_turn = game.apply_action(bobs_turn, Action.end_turn(BOB))
    assert alices_turn.current_turn_player_id == ALICE
    # nothing else changed
    assert alices_turn.board == state.board


def test_no_friendly_overlap_after_any_legal_move() -> None:
    """Try every tile for every unit of the starting layout: applied moves never stack two units of one owner."""
    state = starting_state(uuid4())
    tiles = [Position(x, y) for x in range(5) for y in range(5)]
    for unit in state.board.units_of(ALICE):
        for tile in tiles:
            action = Action.move(ALICE, unit.id, tile)
            if not game.validate(action, state):
                continue
            after = game.apply_action(state, action)
            for owner in (ALICE, BOB):
                positions = [u.position for u in after.board.units_of(owner)]
                assert len(positions) == len(set(positions))


def test_moving_over_a_wall_tile_is_allowed_but_not_onto_it() -> None:
    scout = Unit.recruit(UnitType.SCOUT, ALICE, Position(0, 0))
    state = _state_with(scout)
    state = state.with_board(state.board.with_tile(Position(1, 0), TileType.WALL))
    assert not game.validate(Action.move(ALICE, scout.id, Position(1, 0)), state)
    assert game.validate(Action.move(ALICE, scout.id, Position(2, 0)), state)


# -- ENCOUNTER RESOLUTION --
def test_attack_in_encounter_mode_starts_encounter(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, scout = duel
    after = game.apply_action(
        state, Action.move(ALICE, champion.id, Position(1, 0)), CombatMode.ENCOUNTER
    )
    assert after.phase == GamePhase.ENCOUNTER_RESOLUTION
    assert after.encounter == Encounter(champion.id, scout.id, Position(1, 0))
    # nobody moved or died yet
    assert after.board == state.board


def test_non_attack_in_encounter_mode_is_a_plain_move(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    after = game.apply_action(
        state, Action.move(ALICE, champion.id, Position(0, 1)), CombatMode.ENCOUNTER
    )
    assert after.phase == GamePhase.TURN_BASED
    assert after.board.unit(champion.id).position == Position(0, 1)


def _in_encounter(state: GameState, champion: Unit) -> GameState:
    return game.apply_action(
        state, Action.move(ALICE, champion.id, Position(1, 0)), CombatMode.ENCOUNTER
    )


def test_attacker_survives_encounter(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, scout = duel
    resolved = game.resolve_encounter(_in_encounter(state, champion), champion.id, 40)
    assert resolved.phase == GamePhase.TURN_BASED
    assert resolved.encounter is None
    assert resolved.board.unit(scout.id) is None
    survivor = resolved.board.unit(champion.id)
    assert survivor.position == Position(1, 0)
    assert survivor.health == 40


def test_defender_survives_encounter(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, scout = duel
    resolved = game.resolve_encounter(_in_encounter(state, champion), scout.id)
    assert resolved.board.unit(champion.id) is None
    survivor = resolved.board.unit(scout.id)
    assert survivor.position == Position(1, 0)
    assert survivor.health == scout.max_health


def test_reported_health_is_clamped(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    resolved = game.resolve_encounter(_in_encounter(state, champion), champion.id, 1000)
    assert resolved.board.unit(champion.id).health == champion.max_health


def test_survivor_at_zero_health_is_removed(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    resolved = game.resolve_encounter(_in_encounter(state, champion), champion.id, 0)
    assert resolved.board.units == ()


def test_cannot_resolve_without_encounter(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    with pytest.raises(InvalidActionError):
        game.resolve_encounter(state, champion.id)


def test_survivor_must_be_a_contestant(duel: tuple[GameState, Unit, Unit]) -> None:
    state, champion, _ = duel
    with pytest.raises(InvalidActionError):
        game.resolve_encounter(_in_encounter(state, champion), "bystander")
