"""Lobby orchestration: independent games, hosts, spectators and listings"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .constants import PHASE_ACTIVE
from .engine import Game
from .errors import (
    ACTION_NOT_ALLOWED, LOBBY_NOT_FOUND, NOT_HOST, ROOM_FULL, GameError,
    raise_error,
)
from .models import Card, OutboundEventType, OutboundMessage
from .rules import RuleConfig, create_rules
from .serialization import lobby_info, lobby_summary

logger = logging.getLogger(__name__)

FREE_TABLE = "__table__"


@dataclass
class Lobby:
    id: str
    host_id: str
    host_name: str
    game: Game


class LobbyManager:
    """
    Owns every lobby, connection name and membership in the process.

    Handlers are synchronous and enqueue outbound messages; the transport
    calls ``drain_events()`` after each one and delivers the result.
    """

    def __init__(self, rules: Optional[RuleConfig] = None, table_rules: Optional[RuleConfig] = None,
                 seed: Optional[int] = None):
        self.rules = rules or create_rules(auto_start=False)
        self.seed = seed
        self.outbox: List[OutboundMessage] = []
        self.lobbies: Dict[str, Lobby] = {}
        self.names: Dict[str, str] = {}  # connected identities, in connection order
        self.memberships: Dict[str, str] = {}  # identity -> lobby id or FREE_TABLE
        self.table = Game(
            rules=table_rules or create_rules(auto_start=True),
            emit=self._emit,
            seed=seed,
        )

    # ------------------------------------------------------------------
    # Outbound events
    # ------------------------------------------------------------------

    def _emit(self, message: OutboundMessage):
        self.outbox.append(message)

    def _send(self, identity: str, event_type: OutboundEventType, payload: Optional[dict] = None):
        self._emit(OutboundMessage(recipient=identity, type=event_type, payload=payload or {}))

    def drain_events(self) -> List[OutboundMessage]:
        events = list(self.outbox)
        self.outbox.clear()
        return events

    def lobby_listing(self) -> List[dict]:
        return [lobby_summary(lobby) for lobby in self.lobbies.values()]

    def broadcast_lobby_list(self):
        listing = self.lobby_listing()
        for identity in self.names:
            self._send(identity, OutboundEventType.LOBBY_LIST, {"lobbies": list(listing)})

    def _publish(self, lobby: Lobby):
        """Tell a lobby's occupants about it and refresh everyone's listing."""
        info = lobby_info(lobby)
        for player in lobby.game.all_players:
            self._send(player.id, OutboundEventType.LOBBY_INFO, dict(info))
        self.broadcast_lobby_list()

    # ------------------------------------------------------------------
    # Connections and names
    # ------------------------------------------------------------------

    def connect(self, identity: str):
        self.names.setdefault(identity, f"Player-{identity[:4]}")
        logger.info("Connection %s registered", identity)
        self._send(identity, OutboundEventType.LOBBY_LIST, {"lobbies": self.lobby_listing()})

    def disconnect(self, identity: str):
        """Treat a dropped connection as an implicit leave."""
        if identity in self.memberships:
            self.leave_lobby(identity)
        self.names.pop(identity, None)
        logger.info("Connection %s dropped", identity)

    def name_of(self, identity: str) -> str:
        return self.names.get(identity, f"Player-{identity[:4]}")

    def set_name(self, identity: str, name: str) -> str:
        name = name.strip() or self.name_of(identity)
        self.names[identity] = name
        self._send(identity, OutboundEventType.NAME_SET, {"name": name})
        return name

    def list_lobbies(self, identity: str):
        self._send(identity, OutboundEventType.LOBBY_LIST, {"lobbies": self.lobby_listing()})

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_lobby(self, lobby_id: str) -> Lobby:
        lobby = self.lobbies.get(lobby_id)
        if lobby is None:
            raise GameError(LOBBY_NOT_FOUND, f"No lobby {lobby_id}")
        return lobby

    def lobby_of(self, identity: str) -> Lobby:
        lobby_id = self.memberships.get(identity)
        if lobby_id is None or lobby_id == FREE_TABLE:
            raise GameError(ACTION_NOT_ALLOWED, "Not in a lobby")
        return self.get_lobby(lobby_id)

    def game_of(self, identity: str) -> Game:
        if self.memberships.get(identity) == FREE_TABLE:
            return self.table
        return self.lobby_of(identity).game

    def _require_host(self, lobby: Lobby, identity: str):
        if lobby.host_id != identity:
            raise_error(NOT_HOST, "Only the host can do that")

    def _new_lobby_id(self) -> str:
        while True:
            lobby_id = uuid.uuid4().hex[:6].upper()
            if lobby_id not in self.lobbies:
                return lobby_id

    # ------------------------------------------------------------------
    # Lobby lifecycle
    # ------------------------------------------------------------------

    def create_lobby(self, identity: str) -> Lobby:
        """Open a new lobby with the caller as host and sole player."""
        if identity in self.memberships:
            self.leave_lobby(identity)

        name = self.name_of(identity)
        lobby = Lobby(
            id=self._new_lobby_id(),
            host_id=identity,
            host_name=name,
            game=Game(rules=self.rules, emit=self._emit, seed=self.seed),
        )
        self.lobbies[lobby.id] = lobby
        lobby.game.add_player(identity, name)
        self.memberships[identity] = lobby.id
        logger.info("Lobby %s created by %s", lobby.id, name)
        self._publish(lobby)
        return lobby

    def _admit(self, game: Game, identity: str, name: str, target: str):
        """Seat or admit as spectator, leaving any previous lobby first."""
        spectator = game.phase == PHASE_ACTIVE
        if not spectator and len(game.seated_players) >= game.rules.max_players:
            raise GameError(ROOM_FULL, "Lobby is full")
        if identity in self.memberships:
            self.leave_lobby(identity)
        game.add_player(identity, name, as_spectator=spectator)
        self.memberships[identity] = target

    def join_lobby(self, lobby_id: str, identity: str, name: Optional[str] = None) -> Lobby:
        """
        Join a lobby as a player, or as a spectator if its game is under way.

        Raises:
            GameError: LOBBY_NOT_FOUND, ROOM_FULL, or ACTION_NOT_ALLOWED when
                already in that lobby
        """
        lobby = self.get_lobby(lobby_id)
        if self.memberships.get(identity) == lobby_id:
            raise GameError(ACTION_NOT_ALLOWED, "Already in this lobby")
        if name:
            self.names[identity] = name

        self._admit(lobby.game, identity, self.name_of(identity), lobby.id)
        logger.info("%s joined lobby %s", self.name_of(identity), lobby.id)
        self._publish(lobby)
        return lobby

    def join_table(self, identity: str, name: Optional[str] = None) -> Game:
        """Sit at the shared free-standing table, which deals on its own."""
        if self.memberships.get(identity) == FREE_TABLE:
            raise GameError(ACTION_NOT_ALLOWED, "Already at the table")
        if name:
            self.names[identity] = name

        self._admit(self.table, identity, self.name_of(identity), FREE_TABLE)
        return self.table

    def start_game(self, identity: str):
        """Deal a game in the caller's lobby. Host only."""
        lobby = self.lobby_of(identity)
        self._require_host(lobby, identity)
        lobby.game.start()
        self._publish(lobby)

    def return_to_lobby(self, identity: str):
        """Move a finished lobby back to waiting without dealing. Host only."""
        lobby = self.lobby_of(identity)
        self._require_host(lobby, identity)
        lobby.game.return_to_waiting()
        self._publish(lobby)

    def leave_lobby(self, identity: str):
        """
        Leave the current lobby or table.

        The host role passes to the first remaining occupant; a lobby with
        nobody left is destroyed.
        """
        target = self.memberships.pop(identity, None)
        if target is None:
            raise GameError(ACTION_NOT_ALLOWED, "Not in a lobby")

        if target == FREE_TABLE:
            self.table.remove_player(identity)
            return

        lobby = self.lobbies.get(target)
        if lobby is None:
            return
        lobby.game.remove_player(identity)

        if not lobby.game.all_players:
            del self.lobbies[lobby.id]
            logger.info("Lobby %s closed", lobby.id)
            self.broadcast_lobby_list()
            return

        if lobby.host_id == identity:
            new_host = lobby.game.all_players[0]
            lobby.host_id = new_host.id
            lobby.host_name = new_host.name
            logger.info("Lobby %s host is now %s", lobby.id, new_host.name)
        self._publish(lobby)

    # ------------------------------------------------------------------
    # Routed game intents
    # ------------------------------------------------------------------

    def _after_intent(self, identity: str, phase_before: str):
        lobby_id = self.memberships.get(identity)
        if lobby_id in self.lobbies and self.lobbies[lobby_id].game.phase != phase_before:
            self._publish(self.lobbies[lobby_id])

    def play(self, identity: str, cards: Iterable[Card]) -> bool:
        game = self.game_of(identity)
        phase_before = game.phase
        accepted = game.play_cards(identity, cards)
        self._after_intent(identity, phase_before)
        return accepted

    def pass_turn(self, identity: str) -> bool:
        game = self.game_of(identity)
        phase_before = game.phase
        accepted = game.pass_turn(identity)
        self._after_intent(identity, phase_before)
        return accepted

    def ready_up(self, identity: str) -> bool:
        game = self.game_of(identity)
        phase_before = game.phase
        accepted = game.ready_up(identity)
        self._after_intent(identity, phase_before)
        return accepted
