"""
Type definitions used across layers
"""

from enum import StrEnum


class MatchStatus(StrEnum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Slot(StrEnum):
    """The two player positions of a match. The value doubles as the player id inside the game state."""

    A = "player1"
    B = "player2"

    @property
    def other(self) -> "Slot":
        return Slot.B if self == Slot.A else Slot.A


class UnitType(StrEnum):
    CHAMPION = "CHAMPION"
    SCOUT = "SCOUT"
    DEFENDER = "DEFENDER"
    MAGE = "MAGE"


class TileType(StrEnum):
    EMPTY = "EMPTY"
    WALL = "WALL"
    WATER = "WATER"


class GamePhase(StrEnum):
    TURN_BASED = "TURN_BASED"
    ENCOUNTER_RESOLUTION = "ENCOUNTER_RESOLUTION"


class ActionType(StrEnum):
    MOVE = "MOVE"
    END_TURN = "END_TURN"


class CombatMode(StrEnum):
    # "immediate": the moving unit always wins. "encounter": an external collaborator reports the survivor.
    IMMEDIATE = "immediate"
    ENCOUNTER = "encounter"
