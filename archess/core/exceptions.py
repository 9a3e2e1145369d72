"""
Custom exceptions shared by all layers.

Every exception carries a stable machine-readable `code`, so the transport layer can hand it to clients as-is.
"""


class GameError(Exception):
    """Top-level exception for anything the server rejects."""

    code = "GAME_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(GameError):
    """Unknown match, game state or unit."""

    code = "NOT_FOUND"


class InvalidInputError(GameError):
    """Malformed request (ex. an empty player name)."""

    code = "INVALID_INPUT"


class NotAvailableError(GameError):
    """Match cannot be joined (or left) in its current status."""

    code = "NOT_AVAILABLE"


class SlotTakenError(GameError):
    code = "SLOT_TAKEN"


class InvalidActionError(GameError):
    """Action failed validation by the game engine: wrong turn, wrong phase, illegal move, unowned unit."""

    code = "INVALID_ACTION"


class WaitingForOpponentError(InvalidActionError):
    """Action submitted while the match still waits for its second player. UIs special-case this one."""

    code = "WAITING_FOR_OPPONENT"


class NoMatchBoundError(GameError):
    """Action from a connection that has not identified itself for a match."""

    code = "NO_MATCH_BOUND"
