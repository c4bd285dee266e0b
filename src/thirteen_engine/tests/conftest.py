"""
Shared fixtures for the Thirteen engine tests.
"""

import pytest

from thirteen_engine.comparator import sort_cards
from thirteen_engine.constants import PHASE_ACTIVE
from thirteen_engine.engine import Game
from thirteen_engine.models import Card
from thirteen_engine.rules import create_rules


def parse_card(text: str) -> Card:
    """'10h' -> Card('10', 'h')"""
    return Card(rank=text[:-1].upper(), suit=text[-1].lower())


@pytest.fixture
def cards():
    def _cards(*texts):
        return [parse_card(text) for text in texts]
    return _cards


@pytest.fixture
def rigged_game():
    """
    Build a started game, then replace the dealt hands with known ones.

    Players are seated in the order of ``hands``; ``turn`` names the player
    whose turn it is.
    """
    def _build(hands, turn=None, **rule_overrides):
        game = Game(rules=create_rules(**rule_overrides), seed=7)
        for player_id in hands:
            game.add_player(player_id, player_id.title())
        if game.phase != PHASE_ACTIVE:
            game.start()
        for player in game.active_players:
            player.hand = sort_cards(parse_card(text) for text in hands[player.id])
        if turn is not None:
            game.turn_index = [p.id for p in game.active_players].index(turn)
        game.drain_events()
        return game
    return _build
