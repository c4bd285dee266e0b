"""
WebSocket event models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import RANKS, SUITS
from ..models import Card, OutboundEventType, OutboundMessage


class EventType(str, Enum):
    """Inbound event types."""
    SET_NAME = "setName"
    LIST_LOBBIES = "listLobbies"
    CREATE_LOBBY = "createLobby"
    JOIN_LOBBY = "joinLobby"
    START_GAME = "startGame"
    RETURN_TO_LOBBY = "returnToLobby"
    PLAY = "play"
    PASS = "pass"
    READY_UP = "readyUp"
    LEAVE_LOBBY = "leaveLobby"
    JOIN = "join"


class CardModel(BaseModel):
    """A card as sent by clients."""
    rank: str
    suit: str

    @field_validator('rank', mode='before')
    @classmethod
    def validate_rank(cls, v):
        v = str(v).upper()
        if v not in RANKS:
            raise ValueError(f'Unknown rank: {v}')
        return v

    @field_validator('suit')
    @classmethod
    def validate_suit(cls, v):
        v = v.lower()
        if v not in SUITS:
            raise ValueError(f'Unknown suit: {v}')
        return v

    def to_card(self) -> Card:
        return Card(rank=self.rank, suit=self.suit)


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType


class SetNameEvent(BaseEvent):
    type: EventType = EventType.SET_NAME
    name: str = Field(..., min_length=1, max_length=30)


class ListLobbiesEvent(BaseEvent):
    type: EventType = EventType.LIST_LOBBIES


class CreateLobbyEvent(BaseEvent):
    type: EventType = EventType.CREATE_LOBBY


class JoinLobbyEvent(BaseEvent):
    type: EventType = EventType.JOIN_LOBBY
    lobby_id: str = Field(..., alias="lobbyId", min_length=1, max_length=50)


class StartGameEvent(BaseEvent):
    type: EventType = EventType.START_GAME


class ReturnToLobbyEvent(BaseEvent):
    type: EventType = EventType.RETURN_TO_LOBBY


class PlayEvent(BaseEvent):
    """Play cards event."""
    type: EventType = EventType.PLAY
    cards: List[CardModel] = Field(..., min_length=1, max_length=13)

    def to_cards(self) -> List[Card]:
        return [card.to_card() for card in self.cards]


class PassEvent(BaseEvent):
    type: EventType = EventType.PASS


class ReadyUpEvent(BaseEvent):
    type: EventType = EventType.READY_UP


class LeaveLobbyEvent(BaseEvent):
    type: EventType = EventType.LEAVE_LOBBY


class JoinEvent(BaseEvent):
    """Sit at the free-standing table."""
    type: EventType = EventType.JOIN
    name: Optional[str] = Field(default=None, max_length=30)


# Union type for all inbound events
InboundEvent = Union[
    SetNameEvent,
    ListLobbiesEvent,
    CreateLobbyEvent,
    JoinLobbyEvent,
    StartGameEvent,
    ReturnToLobbyEvent,
    PlayEvent,
    PassEvent,
    ReadyUpEvent,
    LeaveLobbyEvent,
    JoinEvent,
]

EVENT_MODELS = {
    EventType.SET_NAME: SetNameEvent,
    EventType.LIST_LOBBIES: ListLobbiesEvent,
    EventType.CREATE_LOBBY: CreateLobbyEvent,
    EventType.JOIN_LOBBY: JoinLobbyEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.RETURN_TO_LOBBY: ReturnToLobbyEvent,
    EventType.PLAY: PlayEvent,
    EventType.PASS: PassEvent,
    EventType.READY_UP: ReadyUpEvent,
    EventType.LEAVE_LOBBY: LeaveLobbyEvent,
    EventType.JOIN: JoinEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    try:
        return EVENT_MODELS[event_type].model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def decode_inbound(raw: str) -> InboundEvent:
    """Decode a raw WebSocket text frame into an event model."""
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON: {e}")
    return parse_inbound_event(data)


def encode_outbound(message: OutboundMessage) -> str:
    """Serialize an outbound message as ``{"type": ..., **payload}``."""
    return orjson.dumps({"type": message.type.value, **message.payload}).decode()


__all__ = [
    "EventType", "OutboundEventType", "CardModel", "InboundEvent",
    "SetNameEvent", "ListLobbiesEvent", "CreateLobbyEvent", "JoinLobbyEvent",
    "StartGameEvent", "ReturnToLobbyEvent", "PlayEvent", "PassEvent",
    "ReadyUpEvent", "LeaveLobbyEvent", "JoinEvent",
    "parse_inbound_event", "decode_inbound", "encode_outbound",
]
