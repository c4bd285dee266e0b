"""Game state machine: seating, dealing, turns, passes, rounds and rankings"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Set

from .comparator import card_sort_key, lowest_card
from .constants import PHASE_ACTIVE, PHASE_AWAITING_READY, PHASE_WAITING
from .errors import (
    ACTION_NOT_ALLOWED, GAME_IN_PROGRESS, NOT_ENOUGH_PLAYERS, ROOM_FULL,
    GameError,
)
from .models import Card, OutboundEventType, OutboundMessage, Play, Player
from .rules import RuleConfig, default_rules
from .serialization import cards_to_dicts, game_state_view, rankings_view
from .shuffle import create_deck, deal_cards, shuffle_deck
from .validate import validate_play

logger = logging.getLogger(__name__)

Emitter = Callable[[OutboundMessage], None]


class Game:
    """
    A single Thirteen table.

    All operations run to completion synchronously. Outbound events go to
    ``emit`` when one is given, otherwise they collect in ``outbox`` until
    ``drain_events()`` is called.
    """

    def __init__(self, rules: Optional[RuleConfig] = None, emit: Optional[Emitter] = None,
                 seed: Optional[int] = None):
        self.rules = rules or default_rules
        self.outbox: List[OutboundMessage] = []
        self._emit = emit or self.outbox.append
        self.seed = seed
        self.games_played = 0

        self.all_players: List[Player] = []
        self.active_players: List[Player] = []
        self.names: Dict[str, str] = {}
        self.turn_index = 0
        self.current_play: Optional[Play] = None
        self.passed: Set[str] = set()
        self.last_leader_id: Optional[str] = None
        self.rankings: List[str] = []
        self.ready: Set[str] = set()
        self.played: List[Card] = []
        self.phase = PHASE_WAITING

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> Optional[Player]:
        if self.phase != PHASE_ACTIVE or not self.active_players:
            return None
        return self.active_players[self.turn_index]

    @property
    def last_leader_index(self) -> Optional[int]:
        """Index of the last successful player in active_players, None once they are gone."""
        for index, player in enumerate(self.active_players):
            if player.id == self.last_leader_id:
                return index
        return None

    @property
    def pass_count(self) -> int:
        return len(self.passed)

    @property
    def seated_players(self) -> List[Player]:
        return [p for p in self.all_players if not p.spectator]

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.all_players if p.id == player_id), None)

    def has_player(self, player_id: str) -> bool:
        return self.get_player(player_id) is not None

    def drain_events(self) -> List[OutboundMessage]:
        events = list(self.outbox)
        self.outbox.clear()
        return events

    # ------------------------------------------------------------------
    # Outbound events
    # ------------------------------------------------------------------

    def _send(self, player_id: str, event_type: OutboundEventType, payload: Optional[dict] = None):
        self._emit(OutboundMessage(recipient=player_id, type=event_type, payload=payload or {}))

    def _broadcast(self, event_type: OutboundEventType, payload: Optional[dict] = None):
        for player in self.all_players:
            self._send(player.id, event_type, dict(payload or {}))

    def broadcast_state(self):
        self._broadcast(OutboundEventType.STATE, game_state_view(self))

    # ------------------------------------------------------------------
    # Seating
    # ------------------------------------------------------------------

    def add_player(self, player_id: str, name: str, as_spectator: bool = False) -> Player:
        """
        Seat a player, or admit a spectator.

        Anyone arriving while a game is being played watches until the next deal.

        Raises:
            GameError: ROOM_FULL when every seat is taken, ACTION_NOT_ALLOWED
                when the identity is already at the table
        """
        if self.has_player(player_id):
            raise GameError(ACTION_NOT_ALLOWED, f"{name} is already at this table")

        as_spectator = as_spectator or self.phase == PHASE_ACTIVE
        if not as_spectator and len(self.seated_players) >= self.rules.max_players:
            raise GameError(ROOM_FULL, "Table is full")

        player = Player(id=player_id, name=name, spectator=as_spectator)
        self.all_players.append(player)
        self.names[player_id] = name
        logger.info("%s joined as %s", name, "spectator" if as_spectator else "player")
        self._send(player_id, OutboundEventType.JOINED, {"name": name, "spectator": as_spectator})

        if (self.rules.auto_start and self.phase == PHASE_WAITING
                and len(self.seated_players) >= self.rules.min_players):
            self.start()
        else:
            self.broadcast_state()
        return player

    def _spectators_to_seat(self) -> List[Player]:
        open_seats = self.rules.max_players - len(self.seated_players)
        return [p for p in self.all_players if p.spectator][:max(open_seats, 0)]

    def remove_player(self, player_id: str) -> Optional[Player]:
        """
        Remove a player from the table.

        A departing turn holder hands the turn on; a departing leader voids the
        round; a game left with one active player ends with that player last.
        """
        player = self.get_player(player_id)
        if player is None:
            return None

        if self.phase == PHASE_ACTIVE:
            if self.last_leader_id == player.id:
                self._clear_round()
            if player in self.active_players:
                self._drop_from_active(player)

        self.all_players.remove(player)
        self.passed.discard(player.id)
        self.ready.discard(player.id)
        logger.info("%s left the table", player.name)

        if self.phase == PHASE_ACTIVE:
            if self._check_game_end():
                return player
            self._close_round_if_all_passed()
        elif self.phase == PHASE_AWAITING_READY and self.rules.auto_start:
            if self._start_if_all_ready():
                return player

        self.broadcast_state()
        return player

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    def _next_seed(self) -> Optional[int]:
        if self.seed is None:
            return None
        return self.seed + self.games_played

    def start(self):
        """
        Shuffle a fresh deck and deal to every seated player.

        The holder of the lowest card leads the first round with a free choice
        of combination.

        Raises:
            GameError: GAME_IN_PROGRESS while a game is being played,
                NOT_ENOUGH_PLAYERS below the configured minimum
        """
        if self.phase == PHASE_ACTIVE:
            raise GameError(GAME_IN_PROGRESS, "Game already in progress")

        promoted = self._spectators_to_seat()
        if not self.rules.can_start_with(len(self.seated_players) + len(promoted)):
            raise GameError(
                NOT_ENOUGH_PLAYERS,
                f"Need at least {self.rules.min_players} players"
            )

        for player in promoted:
            player.spectator = False
            logger.info("%s takes an open seat", player.name)
        seated = self.seated_players
        self.names = {p.id: p.name for p in self.all_players}

        for player in self.all_players:
            player.hand = []
            player.finished = False

        deck = shuffle_deck(create_deck(), self._next_seed())
        deal_cards(deck, seated, self.rules.hand_size)

        self.active_players = list(seated)
        self.current_play = None
        self.passed = set()
        self.last_leader_id = None
        self.rankings = []
        self.ready = set()
        self.played = []
        self.phase = PHASE_ACTIVE
        self.games_played += 1

        leader = min(self.active_players, key=lambda p: card_sort_key(lowest_card(p.hand)))
        self.turn_index = self.active_players.index(leader)
        logger.info(
            "Game %d started with %d players, %s leads",
            self.games_played, len(self.active_players), leader.name
        )

        for player in self.active_players:
            self._send(player.id, OutboundEventType.START, {"hand": cards_to_dicts(player.hand)})
        self.broadcast_state()

    def end_game(self):
        """Publish the final rankings and wait for the next deal."""
        self.phase = PHASE_AWAITING_READY
        self._clear_round()
        for player in self.all_players:
            player.hand = []
        self.active_players = []
        self.turn_index = 0
        self.ready = set()

        logger.info("Game over: %s", ", ".join(self.names.get(pid, pid) for pid in self.rankings))
        self._broadcast(OutboundEventType.GAME_OVER, {"rankings": rankings_view(self)})
        self.broadcast_state()

    def ready_up(self, player_id: str) -> bool:
        """Mark a player ready; deal again once every occupant is ready."""
        if not self.rules.auto_start or self.phase != PHASE_AWAITING_READY:
            return False
        if not self.has_player(player_id):
            return False

        self.ready.add(player_id)
        ready_names = [p.name for p in self.all_players if p.id in self.ready]
        self._broadcast(OutboundEventType.READY_STATE, {"ready": ready_names})
        self._start_if_all_ready()
        return True

    def _start_if_all_ready(self) -> bool:
        if len(self.all_players) < self.rules.min_players:
            return False
        if not all(p.id in self.ready for p in self.all_players):
            return False
        self.start()
        return True

    def return_to_waiting(self):
        """Go back to the waiting phase after a game without dealing."""
        if self.phase != PHASE_AWAITING_READY:
            raise GameError(ACTION_NOT_ALLOWED, "No finished game to leave")
        self.phase = PHASE_WAITING
        self.ready = set()
        self._broadcast(OutboundEventType.RETURN_TO_LOBBY)
        self.broadcast_state()

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def play_cards(self, player_id: str, cards: Iterable[Card]) -> bool:
        """
        Play cards for a player.

        Returns:
            True if the play was accepted. A rejected play sends ``invalid``
            to the caller only and changes nothing.
        """
        result = validate_play(self, player_id, cards)
        if not result.valid:
            logger.debug("Rejected play from %s: %s", player_id, result.error_message)
            self._send(player_id, OutboundEventType.INVALID, {
                "code": result.error_code,
                "message": result.error_message,
            })
            return False

        player = self.current_player
        play = result.play
        for card in play.cards:
            player.hand.remove(card)
        self.played.extend(play.cards)
        self.current_play = play
        self.passed = set()
        self.last_leader_id = player.id
        self._send(player.id, OutboundEventType.HAND, {"hand": cards_to_dicts(player.hand)})

        if player.hand:
            self.turn_index = (self.turn_index + 1) % len(self.active_players)
        else:
            self._finish_player(player)
            if self._check_game_end():
                return True

        self.broadcast_state()
        return True

    def pass_turn(self, player_id: str) -> bool:
        """Pass for a player. Returns False (and does nothing) out of turn."""
        current = self.current_player
        if current is None or current.id != player_id:
            logger.debug("Ignored pass from %s out of turn", player_id)
            return False

        if self.current_play is not None:
            self.passed.add(player_id)
        if not self._close_round_if_all_passed():
            self.turn_index = (self.turn_index + 1) % len(self.active_players)

        self.broadcast_state()
        return True

    def _passes_needed(self) -> int:
        # A finished leader cannot answer, so everyone left must pass.
        if self.last_leader_index is None:
            return len(self.active_players)
        return len(self.active_players) - 1

    def _close_round_if_all_passed(self) -> bool:
        """Clear the table and hand the lead back once everyone else has passed."""
        if self.current_play is None or self.pass_count < self._passes_needed():
            return False

        lead_index = self.last_leader_index
        if lead_index is None:
            heir = self._next_active_after(self.last_leader_id)
            lead_index = self.active_players.index(heir) if heir else self.turn_index

        self._clear_round()
        self.turn_index = lead_index
        logger.debug("Round cleared, %s leads", self.active_players[lead_index].name)
        return True

    def _clear_round(self):
        self.current_play = None
        self.passed = set()
        self.last_leader_id = None

    def _next_active_after(self, player_id: Optional[str]) -> Optional[Player]:
        """Next active player by table order after a seat, skipping that seat."""
        seats = self.all_players
        start = next((i for i, p in enumerate(seats) if p.id == player_id), None)
        if start is None:
            return self.active_players[0] if self.active_players else None
        for offset in range(1, len(seats) + 1):
            candidate = seats[(start + offset) % len(seats)]
            if candidate.id != player_id and candidate in self.active_players:
                return candidate
        return None

    def _drop_from_active(self, player: Player):
        """Remove a player from active_players and re-point turn_index."""
        holder = self.active_players[self.turn_index] if self.active_players else None
        if holder is player:
            holder = self._next_active_after(player.id)
        self.active_players.remove(player)
        if holder is not None and holder in self.active_players:
            self.turn_index = self.active_players.index(holder)
        else:
            self.turn_index = 0

    def _finish_player(self, player: Player):
        player.finished = True
        self.rankings.append(player.id)
        self._drop_from_active(player)
        logger.info("%s finished in position %d", player.name, len(self.rankings))
        self._broadcast(OutboundEventType.FINISHED, {
            "player": player.name,
            "position": len(self.rankings),
        })

    def _check_game_end(self) -> bool:
        """End the game once at most one active player still holds cards."""
        if self.phase != PHASE_ACTIVE or len(self.active_players) > 1:
            return False
        for player in self.active_players:
            self.rankings.append(player.id)
        self.end_game()
        return True
