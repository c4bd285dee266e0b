"""
View serialization for clients.

Nothing here ever puts a hand into a payload that goes to more than one
player; hands only travel in the per-player ``start`` and ``hand`` events.
"""

from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from .constants import (
    PHASE_ACTIVE, PLAY_DOUBLE_SEQUENCE, PLAY_PAIR, PLAY_QUARTET,
    PLAY_SEQUENCE, PLAY_SINGLE, PLAY_TRIPLET,
)
from .models import Card, Play

if TYPE_CHECKING:
    from .engine import Game
    from .lobby import Lobby


WIRE_PLAY_TYPES = {
    PLAY_SINGLE: "single",
    PLAY_PAIR: "pair",
    PLAY_TRIPLET: "triplet",
    PLAY_QUARTET: "quartet",
    PLAY_SEQUENCE: "sequence",
    PLAY_DOUBLE_SEQUENCE: "doubleSequence",
}


def card_to_dict(card: Card) -> Dict[str, str]:
    return {"rank": card.rank, "suit": card.suit}


def cards_to_dicts(cards: Iterable[Card]) -> List[Dict[str, str]]:
    return [card_to_dict(card) for card in cards]


def play_to_dict(play: Play, player_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "type": WIRE_PLAY_TYPES[play.type],
        "cards": cards_to_dicts(play.cards),
        "highest": card_to_dict(play.highest),
        "player": player_name,
    }


def rankings_view(game: "Game") -> List[Dict[str, Any]]:
    """Finish order with display names, first finisher first."""
    return [
        {"id": player_id, "name": game.names.get(player_id, player_id), "position": position}
        for position, player_id in enumerate(game.rankings, start=1)
    ]


def game_state_view(game: "Game") -> Dict[str, Any]:
    """
    Build the ``state`` payload broadcast to every occupant of a game.

    Args:
        game: Game to describe

    Returns:
        Dictionary safe to send to any occupant
    """
    current = game.current_player
    last_play = None
    if game.current_play is not None:
        last_play = play_to_dict(game.current_play, game.names.get(game.last_leader_id))

    return {
        "phase": game.phase,
        "players": [
            {
                "id": player.id,
                "name": player.name,
                "handCount": player.hand_count,
                "finished": player.finished,
                "spectator": player.spectator,
            }
            for player in game.all_players
        ],
        "currentTurn": current.name if current else None,
        "lastPlay": last_play,
        "passCount": game.pass_count,
        "rankings": rankings_view(game),
    }


def lobby_summary(lobby: "Lobby") -> Dict[str, Any]:
    """Public lobby entry for listings."""
    return {
        "id": lobby.id,
        "hostName": lobby.host_name,
        "players": [player.name for player in lobby.game.all_players],
        "started": lobby.game.phase == PHASE_ACTIVE,
    }


def lobby_info(lobby: "Lobby") -> Dict[str, Any]:
    """Lobby details sent to the lobby's own occupants."""
    return {
        "id": lobby.id,
        "hostId": lobby.host_id,
        "hostName": lobby.host_name,
        "players": [
            {"id": player.id, "name": player.name, "spectator": player.spectator}
            for player in lobby.game.all_players
        ],
        "started": lobby.game.phase == PHASE_ACTIVE,
    }
