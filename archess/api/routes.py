"""
HTTP routes for the lobby and the game state.

NOTE: every handler is `async def` so it runs on the event loop, never in a worker thread:
registry and engine calls then cannot interleave with the websocket handlers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from archess.api.models import (
    CreateMatchRequest,
    ExitMatchRequest,
    ExitResponse,
    GameStateResponse,
    JoinMatchRequest,
    LegalMovesResponse,
    MatchListResponse,
    MatchResponse,
    ResolveEncounterRequest,
)
from archess.services.lobby_service import LobbyService

lobby = APIRouter(prefix="/lobby", tags=["lobby"])
games = APIRouter(prefix="/games", tags=["games"])


def get_lobby_service(request: Request) -> LobbyService:
    return request.app.state.lobby_service


# --- LOBBY ---
@lobby.get("/matches", response_model=MatchListResponse)
async def list_matches(
    service: LobbyService = Depends(get_lobby_service),
) -> MatchListResponse:
    return service.list_matches()


@lobby.post(
    "/matches", response_model=MatchResponse, status_code=status.HTTP_201_CREATED
)
async def create_match(
    request: CreateMatchRequest,
    service: LobbyService = Depends(get_lobby_service),
) -> MatchResponse:
    return service.create_match(request)


@lobby.post("/matches/{match_id}/join", response_model=MatchResponse)
async def join_match(
    match_id: UUID,
    request: JoinMatchRequest,
    service: LobbyService = Depends(get_lobby_service),
) -> MatchResponse:
    return await service.join_match(match_id, request)


# --- GAMES ---
@games.get("/{match_id}", response_model=GameStateResponse)
async def get_game_state(
    match_id: UUID,
    service: LobbyService = Depends(get_lobby_service),
) -> GameStateResponse:
    return service.get_game_state(match_id)


@games.get("/{match_id}/legal-moves", response_model=LegalMovesResponse)
async def legal_moves(
    match_id: UUID,
    player_id: str,
    service: LobbyService = Depends(get_lobby_service),
) -> LegalMovesResponse:
    return service.legal_moves(match_id, player_id)


@games.post("/{match_id}/reset", response_model=GameStateResponse)
async def reset_game(
    match_id: UUID,
    service: LobbyService = Depends(get_lobby_service),
) -> GameStateResponse:
    return await service.reset_game(match_id)


@games.post("/{match_id}/exit", response_model=ExitResponse)
async def exit_match(
    match_id: UUID,
    request: ExitMatchRequest,
    service: LobbyService = Depends(get_lobby_service),
) -> ExitResponse:
    return await service.exit_match(match_id, request)


@games.post("/{match_id}/encounter", response_model=GameStateResponse)
async def resolve_encounter(
    match_id: UUID,
    request: ResolveEncounterRequest,
    service: LobbyService = Depends(get_lobby_service),
) -> GameStateResponse:
    return await service.resolve_encounter(match_id, request)
