"""
WebSocket endpoint: the bidirectional, per-connection channel.

Every connection gets two tasks: this handler reads and dispatches incoming messages,
a writer task drains the connection's outbox (see ConnectionHandle) and sends it.
"""

import asyncio
from contextlib import suppress
from uuid import uuid4

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from archess.api.models import (
    CLIENT_MESSAGE_ADAPTER,
    GameActionMessage,
    IdentifyMessage,
    PingMessage,
)
from archess.core.exceptions import GameError, InvalidInputError
from archess.core.logging_config import get_logger
from archess.services.session_coordinator import (
    ConnectionHandle,
    SessionCoordinator,
    state_message,
)

logger = get_logger(__name__)

router = APIRouter()


async def dispatch_message(
    coordinator: SessionCoordinator, connection_id: str, raw: str
) -> None:
    """
    Handle one incoming message. Any rejection is sent back to this connection only.

    * identify     -> "identified" ack (+ the current board, if there is one)
    * game_action  -> "action_accepted" ack, the new state goes to every subscriber of the match
    * ping         -> "pong"
    """
    try:
        message = CLIENT_MESSAGE_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        logger.debug("Malformed message", connection_id=connection_id, errors=exc.error_count())
        coordinator.send_error(connection_id, InvalidInputError("Malformed message."))
        return

    try:
        if isinstance(message, IdentifyMessage):
            binding = coordinator.identify(connection_id, message.player_id, message.match_id)
            coordinator.send(
                connection_id,
                {
                    "type": "identified",
                    "player_id": binding.player_id,
                    "match_id": str(binding.match_id),
                },
            )
            if binding.match_id in coordinator.engine:
                state = coordinator.engine.get_state(binding.match_id)
                coordinator.send(connection_id, state_message(state))

        elif isinstance(message, GameActionMessage):
            binding = coordinator.binding(connection_id)
            action = message.action.to_action(default_player_id=binding.player_id)
            await coordinator.route_action(connection_id, action)
            coordinator.send(connection_id, {"type": "action_accepted"})

        elif isinstance(message, PingMessage):
            coordinator.send(connection_id, {"type": "pong"})

    except GameError as exc:
        coordinator.send_error(connection_id, exc)


async def _pump_outbox(websocket: WebSocket, handle: ConnectionHandle) -> None:
    while True:
        message = await handle.next_message()
        await websocket.send_json(message)


async def stop_writer(writer: asyncio.Task[None], connection_id: str) -> None:
    """Cancel the outbox writer and wait for it. A writer that already died (client gone mid-send) gets its error logged."""
    if writer.done():
        if not writer.cancelled() and writer.exception() is not None:
            logger.debug(
                "Outbox writer stopped with error",
                connection_id=connection_id,
                error=repr(writer.exception()),
            )
        return
    writer.cancel()
    with suppress(asyncio.CancelledError):
        await writer


@router.websocket("/ws")
async def game_socket(websocket: WebSocket) -> None:
    coordinator: SessionCoordinator = websocket.app.state.coordinator
    await websocket.accept()

    connection_id = uuid4().hex
    handle = coordinator.connect(connection_id)
    writer = asyncio.create_task(_pump_outbox(websocket, handle))
    handle.send({"type": "connected", "connection_id": connection_id})

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                await dispatch_message(coordinator, connection_id, raw)
            except Exception:
                # a bug in one message handler should not tear down the connection
                logger.exception("Unexpected error handling message", connection_id=connection_id)
                handle.send(
                    {"type": "error", "message": "Internal server error.", "code": "INTERNAL_ERROR"}
                )
    except WebSocketDisconnect:
        pass
    finally:
        coordinator.drop_connection(connection_id)
        await stop_writer(writer, connection_id)
