"""Orchestration of communication from the transport layer to the registry, engine and coordinator (and the reverse direction)."""

import asyncio
from datetime import timedelta
from uuid import UUID

from archess.api.models import (
    CreateMatchRequest,
    ExitMatchRequest,
    ExitResponse,
    GameStateResponse,
    JoinMatchRequest,
    LegalMovesResponse,
    MatchListResponse,
    MatchResponse,
    PositionModel,
    ResolveEncounterRequest,
)
from archess.core.logging_config import get_logger
from archess.core.models import MatchModel
from archess.core.shared_types import Slot
from archess.services.game_engine import GameEngine
from archess.services.match_registry import MatchRegistry
from archess.services.session_coordinator import SessionCoordinator

logger = get_logger(__name__)


class LobbyService:
    """Orchestration of the components for every lobby / game request."""

    def __init__(
        self,
        registry: MatchRegistry,
        engine: GameEngine,
        coordinator: SessionCoordinator,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.coordinator = coordinator

    # -- Lobby routes logic ---
    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        """Register the match, set up its board, and let every connected client know."""
        match = self.registry.create_match(request.creator_name)
        self.engine.initialize(match.id, player_names=self._player_names(match))

        response = MatchResponse.from_model(match)
        self.coordinator.broadcast_all(self._match_event("match_created", response))
        return response

    async def join_match(self, match_id: UUID, request: JoinMatchRequest) -> MatchResponse:
        """Second player takes the open slot. Their name also goes into the game state."""
        async with self.coordinator.match_lock(match_id):
            match = self.registry.join_match(match_id, request.slot, request.player_name)
            state = self.engine.register_player(
                match_id, request.slot.value, request.player_name
            )
            self.coordinator.publish_state(state)

        response = MatchResponse.from_model(match)
        self.coordinator.broadcast_all(self._match_event("match_updated", response))
        return response

    def list_matches(self) -> MatchListResponse:
        return MatchListResponse(
            active=[MatchResponse.from_model(m) for m in self.registry.list_active()],
            completed=[
                MatchResponse.from_model(m) for m in self.registry.list_completed()
            ],
        )

    async def exit_match(self, match_id: UUID, request: ExitMatchRequest) -> ExitResponse:
        """
        Player leaves the match
        ----

        * match removed (nobody to play against): drop the game state too, clients remove it from their lobby.
        * match completed (forfeit): keep the final board around for the players, clients update their lobby.
        """
        async with self.coordinator.match_lock(match_id):
            result = self.registry.handle_exit(match_id, request.slot)

        if result.removed:
            self._discard_match(match_id)
            return ExitResponse(match_id=match_id, removed=True)

        assert result.match is not None
        match = MatchResponse.from_model(result.match)
        self.coordinator.broadcast_all(self._match_event("match_updated", match))
        return ExitResponse(match_id=match_id, removed=False, match=match)

    # -- Game routes logic ---
    def get_game_state(self, match_id: UUID) -> GameStateResponse:
        return GameStateResponse.from_state(self.engine.get_state(match_id))

    async def reset_game(self, match_id: UUID) -> GameStateResponse:
        """Start the board over (re-initialize), keeping the players' names as shown on the board."""
        async with self.coordinator.match_lock(match_id):
            current = self.engine.get_state(match_id)
            names = {Slot(player.id): player.name for player in current.players}
            state = self.engine.initialize(match_id, player_names=names)
            self.coordinator.publish_state(state)
        logger.info("Game reset", match_id=str(match_id))
        return GameStateResponse.from_state(state)

    def legal_moves(self, match_id: UUID, player_id: str) -> LegalMovesResponse:
        moves = self.engine.legal_moves(match_id, player_id)
        return LegalMovesResponse(
            match_id=match_id,
            player_id=player_id,
            legal_moves={
                unit_id: [PositionModel.from_position(p) for p in targets]
                for unit_id, targets in moves.items()
            },
        )

    async def resolve_encounter(
        self, match_id: UUID, request: ResolveEncounterRequest
    ) -> GameStateResponse:
        """Hook for the external combat collaborator to report the survivor of an encounter."""
        async with self.coordinator.match_lock(match_id):
            state = self.engine.resolve_encounter(
                match_id, request.surviving_unit_id, request.remaining_health
            )
            self.coordinator.publish_state(state)
        return GameStateResponse.from_state(state)

    # -- Maintenance --
    def sweep_expired(self, max_age: timedelta) -> list[UUID]:
        """Remove matches (and their game states) older than max_age."""
        removed = self.registry.sweep_expired(max_age)
        for match_id in removed:
            self._discard_match(match_id)
        return removed

    async def run_sweeper(self, interval: float, max_age: timedelta) -> None:
        """Periodic sweep. Runs until cancelled."""
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep_expired(max_age)
            except Exception:
                # one failed sweep should not stop the next one
                logger.exception("Sweep of expired matches failed")

    # -- Internal helpers --
    def _discard_match(self, match_id: UUID) -> None:
        self.engine.remove(match_id)
        self.coordinator.forget_match(match_id)
        self.coordinator.broadcast_all({"type": "match_removed", "match_id": str(match_id)})

    @staticmethod
    def _match_event(event_type: str, match: MatchResponse) -> dict:
        return {"type": event_type, "match": match.model_dump(mode="json")}

    @staticmethod
    def _player_names(match: MatchModel) -> dict[Slot, str]:
        return {
            slot: name
            for slot in Slot
            if (name := match.player_in(slot)) is not None
        }
