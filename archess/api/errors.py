"""Map the GameError hierarchy to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from archess.api.models import ErrorResponse
from archess.core.exceptions import (
    GameError,
    InvalidActionError,
    InvalidInputError,
    NoMatchBoundError,
    NotAvailableError,
    NotFoundError,
    SlotTakenError,
    WaitingForOpponentError,
)
from archess.core.logging_config import get_logger

logger = get_logger(__name__)

# Most specific first: WaitingForOpponentError is an InvalidActionError
STATUS_CODES: list[tuple[type[GameError], int]] = [
    (NotFoundError, 404),
    (InvalidInputError, 422),
    (NotAvailableError, 409),
    (SlotTakenError, 409),
    (WaitingForOpponentError, 409),
    (InvalidActionError, 400),
    (NoMatchBoundError, 400),
]


def status_code_for(exc: GameError) -> int:
    return next(
        (code for exc_type, code in STATUS_CODES if isinstance(exc, exc_type)),
        400,
    )


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        status_code=status_code,
        reason=exc.message,
    )
    body = ErrorResponse(message=exc.message, code=exc.code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GameError, game_error_handler)  # type: ignore[arg-type]
