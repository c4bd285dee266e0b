"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from .constants import SUIT_SYMBOLS


@dataclass(frozen=True)
class Card:
    rank: str  # '3'..'10','J','Q','K','A','2'
    suit: str  # 's','c','d','h'

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def pretty(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS.get(self.suit, self.suit)}"


@dataclass(frozen=True)
class Play:
    type: str
    cards: Tuple[Card, ...]  # sorted by rank then suit
    highest: Card

    def __len__(self) -> int:
        return len(self.cards)


@dataclass(eq=False)
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    finished: bool = False
    spectator: bool = False

    @property
    def hand_count(self) -> int:
        return len(self.hand)


class OutboundEventType(str, Enum):
    """Server to client event types."""
    NAME_SET = "nameSet"
    LOBBY_LIST = "lobbyList"
    LOBBY_INFO = "lobbyInfo"
    START = "start"
    HAND = "hand"
    STATE = "state"
    FINISHED = "finished"
    GAME_OVER = "gameOver"
    READY_STATE = "readyState"
    RETURN_TO_LOBBY = "returnToLobby"
    INVALID = "invalid"
    JOINED = "joined"


@dataclass
class OutboundMessage:
    recipient: str  # connection identity
    type: OutboundEventType
    payload: Dict[str, Any] = field(default_factory=dict)
