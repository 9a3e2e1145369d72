"""Requests and Response models"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Self, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from archess.core.exceptions import InvalidInputError
from archess.core.models import MatchModel
from archess.core.shared_types import (
    ActionType,
    GamePhase,
    MatchStatus,
    Slot,
    TileType,
    UnitType,
)
from archess.engine.actions import Action
from archess.engine.game_state import GameState
from archess.engine.position import Position
from archess.engine.units import Unit

PlayerName = str


def _require_name(value: str) -> str:
    if not value or not value.strip():
        raise InvalidInputError("Player name is required.")
    return value.strip()


class PositionModel(BaseModel):
    x: int
    y: int

    @classmethod
    def from_position(cls, position: Position) -> Self:
        return cls(x=position.x, y=position.y)

    def to_position(self) -> Position:
        return Position(self.x, self.y)


# --- REQUEST MODELS ---
class CreateMatchRequest(BaseModel):
    creator_name: PlayerName

    @field_validator("creator_name")
    @classmethod
    def validate_creator_name(cls, value: str) -> str:
        return _require_name(value)


class JoinMatchRequest(BaseModel):
    slot: Slot
    player_name: PlayerName

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _require_name(value)


class ExitMatchRequest(BaseModel):
    slot: Slot


class ActionRequest(BaseModel):
    type: ActionType
    # Optional: a connection that identified itself acts as its bound player by default
    player_id: Optional[str] = None
    unit_id: Optional[str] = None
    target_position: Optional[PositionModel] = None
    timestamp: Optional[float] = None

    def to_action(self, default_player_id: str) -> Action:
        return Action(
            type=self.type,
            player_id=self.player_id or default_player_id,
            unit_id=self.unit_id,
            target_position=(
                self.target_position.to_position() if self.target_position else None
            ),
            timestamp=self.timestamp,
        )


class ResolveEncounterRequest(BaseModel):
    surviving_unit_id: str
    remaining_health: Optional[int] = None


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    id: UUID
    slot_a: Optional[PlayerName]
    slot_b: Optional[PlayerName]
    status: MatchStatus
    winner: Optional[Slot]
    created_at: datetime

    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        return cls(
            id=model.id,
            slot_a=model.slot_a,
            slot_b=model.slot_b,
            status=model.status,
            winner=model.winner,
            created_at=model.created_at,
        )


class MatchListResponse(BaseModel):
    active: list[MatchResponse]
    completed: list[MatchResponse]


class ExitResponse(BaseModel):
    match_id: UUID
    removed: bool
    match: Optional[MatchResponse] = None


class UnitResponse(BaseModel):
    id: str
    type: UnitType
    owner: str
    position: PositionModel
    health: int
    max_health: int
    attack: int
    defense: int
    movement: int

    @classmethod
    def from_unit(cls, unit: Unit) -> Self:
        return cls(
            id=unit.id,
            type=unit.type,
            owner=unit.owner,
            position=PositionModel.from_position(unit.position),
            health=unit.health,
            max_health=unit.max_health,
            attack=unit.attack,
            defense=unit.defense,
            movement=unit.movement,
        )


class PlayerResponse(BaseModel):
    id: str
    name: str
    color: str


class BoardResponse(BaseModel):
    width: int
    height: int
    tiles: list[list[TileType]]
    units: list[UnitResponse]


class EncounterResponse(BaseModel):
    attacker_id: str
    defender_id: str
    position: PositionModel


class GameStateResponse(BaseModel):
    match_id: UUID
    players: list[PlayerResponse]
    current_turn_player_id: str
    phase: GamePhase
    turn_number: int
    board: BoardResponse
    encounter: Optional[EncounterResponse]
    winner: Optional[str]

    @classmethod
    def from_state(cls, state: GameState) -> Self:
        encounter = state.encounter
        return cls(
            match_id=state.match_id,
            players=[
                PlayerResponse(id=player.id, name=player.name, color=player.color)
                for player in state.players
            ],
            current_turn_player_id=state.current_turn_player_id,
            phase=state.phase,
            turn_number=state.turn_number,
            board=BoardResponse(
                width=state.board.width,
                height=state.board.height,
                tiles=[list(row) for row in state.board.tiles],
                units=[UnitResponse.from_unit(unit) for unit in state.board.units],
            ),
            encounter=(
                EncounterResponse(
                    attacker_id=encounter.attacker_id,
                    defender_id=encounter.defender_id,
                    position=PositionModel.from_position(encounter.position),
                )
                if encounter
                else None
            ),
            winner=state.winner,
        )


class LegalMovesResponse(BaseModel):
    match_id: UUID
    player_id: str
    legal_moves: dict[str, list[PositionModel]]


class ErrorResponse(BaseModel):
    message: str
    code: str


# --- WEBSOCKET MESSAGES (client -> server) ---
class IdentifyMessage(BaseModel):
    type: Literal["identify"]
    player_id: str
    match_id: UUID


class GameActionMessage(BaseModel):
    type: Literal["game_action"]
    action: ActionRequest


class PingMessage(BaseModel):
    type: Literal["ping"]


ClientMessage = Annotated[
    Union[IdentifyMessage, GameActionMessage, PingMessage],
    Field(discriminator="type"),
]
CLIENT_MESSAGE_ADAPTER: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)
