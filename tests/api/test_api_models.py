"""Unit tests for /archess/api/models.py"""

import pytest
from pydantic import ValidationError

from archess.api.models import (
    CLIENT_MESSAGE_ADAPTER,
    ActionRequest,
    CreateMatchRequest,
    GameActionMessage,
    GameStateResponse,
    IdentifyMessage,
    JoinMatchRequest,
    PingMessage,
    PositionModel,
)
from archess.core.exceptions import InvalidInputError
from archess.core.shared_types import ActionType, Slot
from archess.engine.layout import starting_state
from archess.engine.position import Position


# -- REQUESTS --
@pytest.mark.parametrize("name", ["", "   "])
def test_create_match_request_requires_name(name: str) -> None:
    with pytest.raises(InvalidInputError):
        CreateMatchRequest(creator_name=name)


def test_join_match_request() -> None:
    request = JoinMatchRequest(slot="player2", player_name=" Bob ")
    assert request.slot == Slot.B
    assert request.player_name == "Bob"
    with pytest.raises(InvalidInputError):
        JoinMatchRequest(slot="player2", player_name="")


def test_join_match_request_unknown_slot() -> None:
    with pytest.raises(ValidationError):
        JoinMatchRequest(slot="player3", player_name="Bob")


def test_action_request_to_action() -> None:
    request = ActionRequest(
        type=ActionType.MOVE,
        unit_id="abc",
        target_position=PositionModel(x=1, y=2),
        timestamp=1700000000.0,
    )
    action = request.to_action(default_player_id="player1")
    assert action.player_id == "player1"
    assert action.unit_id == "abc"
    assert action.target_position == Position(1, 2)
    assert action.timestamp == 1700000000.0


def test_action_request_keeps_explicit_player() -> None:
    action = ActionRequest(type=ActionType.END_TURN, player_id="player2").to_action("player1")
    assert action.player_id == "player2"
    assert action.target_position is None


# -- RESPONSES --
def test_game_state_response(match_id) -> None:
    state = starting_state(match_id)
    response = GameStateResponse.from_state(state)
    dumped = response.model_dump(mode="json")
    assert dumped["match_id"] == str(match_id)
    assert dumped["phase"] == "TURN_BASED"
    assert dumped["current_turn_player_id"] == "player1"
    assert len(dumped["board"]["units"]) == 8
    assert len(dumped["board"]["tiles"]) == 5
    assert dumped["encounter"] is None
    assert dumped["winner"] is None


# -- WEBSOCKET MESSAGES --
def test_parse_identify(match_id) -> None:
    message = CLIENT_MESSAGE_ADAPTER.validate_json(
        f'{{"type": "identify", "player_id": "player1", "match_id": "{match_id}"}}'
    )
    assert isinstance(message, IdentifyMessage)
    assert message.match_id == match_id


def test_parse_game_action() -> None:
    message = CLIENT_MESSAGE_ADAPTER.validate_json(
        '{"type": "game_action", "action": {"type": "MOVE", "unit_id": "u1", "target_position": {"x": 0, "y": 1}}}'
    )
    assert isinstance(message, GameActionMessage)
    assert message.action.type == ActionType.MOVE
    assert message.action.target_position == PositionModel(x=0, y=1)


def test_parse_ping() -> None:
    assert isinstance(CLIENT_MESSAGE_ADAPTER.validate_json('{"type": "ping"}'), PingMessage)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"type": "teleport"}',
        '{"type": "identify", "player_id": "player1"}',
        '{"type": "game_action", "action": {"type": "USE_SKILL"}}',
    ],
)
def test_malformed_messages(raw: str) -> None:
    with pytest.raises(ValidationError):
        CLIENT_MESSAGE_ADAPTER.validate_json(raw)
