"""Fixed starting layout of a fresh match."""

from uuid import UUID

from archess.core.shared_types import GamePhase, Slot
from archess.engine.board import Board
from archess.engine.game_state import GameState, Player
from archess.engine.position import BOARD_DIMENSIONS, Position
from archess.engine.units import ROSTER, Unit

PLAYER_COLORS: dict[Slot, str] = {
    Slot.A: "#3498db",  # blue
    Slot.B: "#e74c3c",  # red
}

DEFAULT_PLAYER_NAMES: dict[Slot, str] = {
    Slot.A: "Player 1",
    Slot.B: "Player 2",
}


def starting_units(width: int, height: int) -> list[Unit]:
    """
    Player 1 lines up its roster on the top row from the left,
    player 2 gets the same roster point-mirrored on the bottom row (starting from the right).
    """
    units: list[Unit] = []
    for column, unit_type in enumerate(ROSTER):
        home = Position(column, 0)
        units.append(Unit.recruit(unit_type, Slot.A.value, home))
        units.append(Unit.recruit(unit_type, Slot.B.value, home.mirrored(width, height)))
    return units


def starting_state(
    match_id: UUID,
    player_names: dict[Slot, str] | None = None,
    width: int = BOARD_DIMENSIONS[0],
    height: int = BOARD_DIMENSIONS[1],
) -> GameState:
    """A full board in TURN_BASED phase, player 1 to act first."""
    if width < len(ROSTER) or height < 2:
        raise ValueError(
            f"Board of {width}x{height} cannot fit a roster of {len(ROSTER)} units per player."
        )

    names = {**DEFAULT_PLAYER_NAMES, **(player_names or {})}
    players = tuple(
        Player(id=slot.value, name=names[slot], color=PLAYER_COLORS[slot])
        for slot in Slot
    )

    board = Board.empty(width, height)
    for unit in starting_units(width, height):
        board = board.place_unit(unit)

    return GameState(
        match_id=match_id,
        board=board,
        players=players,
        current_turn_player_id=Slot.A.value,
        phase=GamePhase.TURN_BASED,
    )
