"""
Geometry / movement rules for units.

Key idea: a unit moves in a straight horizontal or vertical line, up to its movement allowance,
without jumping over anyone. The first (and only) unit it may meet is an enemy on the target tile: that's an attack.

Turn order / phase checks are done by the rules in game.py.
"""

from typing import Optional, Protocol

from archess.engine.position import Position
from archess.engine.units import Unit


class Board(Protocol):
    """Just the parts the movement rules need"""

    width: int
    height: int

    def is_within_bounds(self, position: Position) -> bool: ...
    def is_wall(self, position: Position) -> bool: ...
    def unit_at(self, position: Position) -> Optional[Unit]: ...
    def is_any_occupied(self, positions: list[Position]) -> bool: ...


Vector = tuple[int, int]

STRAIGHT_DIRECTIONS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


def move_violation(unit: Unit, target: Position, board: Board) -> Optional[str]:
    """
    Why moving the unit to the target is illegal, or None if it is legal.
    ----

    1. target must differ from the current position
    2. target must be on the board
    3. target cannot be a wall
    4. no diagonal displacement
    5. distance (no diagonal steps) within the unit's movement allowance
    6. no unit in between start and target
    7. target is empty or holds an enemy (never a friendly unit)
    """
    start = unit.position
    if target == start:
        return "Unit is already on the target tile."

    if not board.is_within_bounds(target):
        return f"Target ({target.x}, {target.y}) is outside the board."

    if board.is_wall(target):
        return f"Target ({target.x}, {target.y}) is a wall."

    if start.is_diagonal_to(target):
        return "Diagonal moves are not allowed."

    distance = start.distance_to(target)
    if distance > unit.movement:
        return f"{unit.type} can move at most {unit.movement} tile(s), requested {distance}."

    if distance > 1 and board.is_any_occupied(start.path_to(target)):
        return "Path is blocked by another unit."

    occupant = board.unit_at(target)
    if occupant is not None and occupant.owner == unit.owner:
        return "Target tile is occupied by a friendly unit."

    return None


def is_legal_move(unit: Unit, target: Position, board: Board) -> bool:
    return move_violation(unit, target, board) is None


def candidate_targets(unit: Unit, board: Board) -> list[Position]:
    """
    Raycasting along the four straight directions
    -----

    Walk away from the unit until we hit the edge of the board, the movement allowance, or another unit.
    An enemy unit is included as a target (attack), a friendly one is not. Either way the ray stops there.
    NOTE: walls only block standing on them, not passing over them (same as move_violation).
    """
    targets: list[Position] = []
    for dx, dy in STRAIGHT_DIRECTIONS:
        for step in range(1, unit.movement + 1):
            target = Position(unit.position.x + dx * step, unit.position.y + dy * step)
            if not board.is_within_bounds(target):
                break

            if board.is_wall(target):
                continue

            occupant = board.unit_at(target)
            if occupant is not None:
                if occupant.owner != unit.owner:
                    targets.append(target)
                break

            targets.append(target)
    return targets
