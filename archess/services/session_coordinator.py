"""
Session Coordinator: who is connected, which match they play in, and who needs to hear about what.

Concurrency model
----
Everything runs on a single asyncio event loop. Actions for the same match are serialized with a per-match
asyncio.Lock, held from the playability check until the resulting snapshot is enqueued for every subscriber.
So every observer of a match receives snapshots in the order they were applied. Different matches never wait for each other.

Outbound messages go into a per-connection queue that the transport drains with its own writer task:
a slow client only delays itself.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from archess.api.models import GameStateResponse
from archess.core.exceptions import (
    GameError,
    InvalidActionError,
    NoMatchBoundError,
    WaitingForOpponentError,
)
from archess.core.logging_config import get_logger
from archess.core.shared_types import MatchStatus
from archess.engine.actions import Action
from archess.engine.game_state import GameState
from archess.services.game_engine import GameEngine
from archess.services.match_registry import MatchRegistry

logger = get_logger(__name__)

Message = dict[str, Any]


class ConnectionHandle:
    """Outbound side of one live connection."""

    def __init__(self, connection_id: str) -> None:
        self.connection_id = connection_id
        self.outbox: asyncio.Queue[Message] = asyncio.Queue()

    def send(self, message: Message) -> None:
        """Never blocks: the queue is unbounded."""
        self.outbox.put_nowait(message)

    async def next_message(self) -> Message:
        return await self.outbox.get()

    def pending(self) -> list[Message]:
        """Take everything currently queued (without waiting)."""
        messages: list[Message] = []
        while not self.outbox.empty():
            messages.append(self.outbox.get_nowait())
        return messages


@dataclass(frozen=True)
class SessionBinding:
    """Claimed identity of a connection. Routing metadata only, not proof of anything."""

    player_id: str
    match_id: UUID


def error_message(exc: GameError) -> Message:
    return {"type": "error", "message": exc.message, "code": exc.code}


def state_message(state: GameState) -> Message:
    return {
        "type": "game_state_update",
        "state": GameStateResponse.from_state(state).model_dump(mode="json"),
    }


class SessionCoordinator:
    def __init__(self, engine: GameEngine, registry: MatchRegistry) -> None:
        self.engine = engine
        self.registry = registry
        self._connections: dict[str, ConnectionHandle] = {}
        self._bindings: dict[str, SessionBinding] = {}
        self._match_locks: dict[UUID, asyncio.Lock] = {}

    # --- connection lifecycle ---
    def connect(self, connection_id: str) -> ConnectionHandle:
        handle = ConnectionHandle(connection_id)
        self._connections[connection_id] = handle
        logger.debug("Connection registered", connection_id=connection_id)
        return handle

    def identify(self, connection_id: str, player_id: str, match_id: UUID) -> SessionBinding:
        """Bind (or re-bind) a connection to a player of a match. The connection then receives that match's updates."""
        if connection_id not in self._connections:
            self.connect(connection_id)
        self.registry.get_match(match_id)

        binding = SessionBinding(player_id=player_id, match_id=match_id)
        previous = self._bindings.get(connection_id)
        self._bindings[connection_id] = binding
        logger.info(
            "Connection identified",
            connection_id=connection_id,
            player_id=player_id,
            match_id=str(match_id),
            rebound=previous is not None and previous != binding,
        )
        return binding

    def drop_connection(self, connection_id: str) -> None:
        """Forget the connection. Disconnecting never forfeits: leaving a match is an explicit exit."""
        binding = self._bindings.pop(connection_id, None)
        handle = self._connections.pop(connection_id, None)
        undelivered = handle.pending() if handle is not None else []
        logger.info(
            "Connection dropped",
            connection_id=connection_id,
            player_id=binding.player_id if binding else None,
            undelivered=len(undelivered),
        )

    def binding(self, connection_id: str) -> SessionBinding:
        binding = self._bindings.get(connection_id)
        if binding is None:
            raise NoMatchBoundError(
                "Connection has not identified itself for a match yet."
            )
        return binding

    def subscribers(self, match_id: UUID) -> list[str]:
        return [
            connection_id
            for connection_id, binding in self._bindings.items()
            if binding.match_id == match_id and connection_id in self._connections
        ]

    # --- actions ---
    def match_lock(self, match_id: UUID) -> asyncio.Lock:
        """Lock serializing every mutation of the match. Only handed out for matches the registry knows (else NotFoundError)."""
        lock = self._match_locks.get(match_id)
        if lock is None:
            self.registry.get_match(match_id)
            lock = self._match_locks[match_id] = asyncio.Lock()
        return lock

    def forget_match(self, match_id: UUID) -> None:
        """Drop bookkeeping of a removed match. Bindings stay: those clients will just get NOT_FOUND."""
        self._match_locks.pop(match_id, None)

    async def route_action(self, connection_id: str, action: Action) -> GameState:
        """
        Forward an action to the engine for the connection's match
        ----

        1. the connection must be bound to a match
        2. (under the match lock) the match must exist and have both players
        3. the action has to be submitted by the player the connection identified as
        4. engine applies it, new snapshot goes out to every subscriber of the match

        Errors are raised to the caller, who only reports them to the submitter.
        """
        binding = self.binding(connection_id)
        match_id = binding.match_id

        async with self.match_lock(match_id):
            self._assert_playable(match_id)

            if action.player_id != binding.player_id:
                raise InvalidActionError(
                    f"Connection is identified as {binding.player_id!r}, cannot act for {action.player_id!r}."
                )

            new_state = self.engine.apply(action, match_id)
            self.publish_state(new_state)
        return new_state

    def publish_state(self, state: GameState) -> None:
        """Full snapshot (not a diff) to every connection subscribed to the match."""
        self.broadcast_to_match(state.match_id, state_message(state))

    def send_error(self, connection_id: str, exc: GameError) -> None:
        """Errors go to the submitter only, never broadcast."""
        handle = self._connections.get(connection_id)
        if handle is not None:
            handle.send(error_message(exc))

    def send(self, connection_id: str, message: Message) -> None:
        handle = self._connections.get(connection_id)
        if handle is not None:
            handle.send(message)

    # --- fan-out ---
    def broadcast_to_match(self, match_id: UUID, message: Message) -> None:
        recipients = self.subscribers(match_id)
        for connection_id in recipients:
            self._connections[connection_id].send(message)
        logger.debug(
            "Broadcast to match",
            match_id=str(match_id),
            message_type=message.get("type"),
            recipients=len(recipients),
        )

    def broadcast_all(self, message: Message) -> None:
        """Lobby events: every connection, whatever match it cares about."""
        for handle in self._connections.values():
            handle.send(message)
        logger.debug(
            "Broadcast to all",
            message_type=message.get("type"),
            recipients=len(self._connections),
        )

    # -- Internal helpers --
    def _assert_playable(self, match_id: UUID) -> None:
        match = self.registry.get_match(match_id)
        if match.status == MatchStatus.WAITING:
            raise WaitingForOpponentError("Waiting for the opponent to join the match.")
        if match.status == MatchStatus.COMPLETED:
            raise InvalidActionError(f"Match {match_id} is already completed.")

    def connection_count(self) -> int:
        return len(self._connections)

    def handle(self, connection_id: str) -> Optional[ConnectionHandle]:
        return self._connections.get(connection_id)

