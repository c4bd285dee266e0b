"""
Card shuffling and dealing utilities.
"""

import random
from typing import List, Optional, Sequence

from .comparator import sort_cards
from .constants import HAND_SIZE, RANKS, SUITS
from .models import Card, Player


def create_deck() -> List[Card]:
    """Create a standard 52 card deck, weakest card first."""
    return [Card(rank, suit) for rank in RANKS for suit in SUITS]


def shuffle_deck(deck: List[Card], seed: Optional[int] = None) -> List[Card]:
    """
    Shuffle a deck deterministically if seed is provided.

    Args:
        deck: Cards to shuffle
        seed: Optional seed for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()

    if seed is not None:
        rng = random.Random(seed)
        rng.shuffle(deck_copy)
    else:
        random.shuffle(deck_copy)

    return deck_copy


def deal_cards(deck: List[Card], players: Sequence[Player], hand_size: int = HAND_SIZE) -> None:
    """
    Deal consecutive slices of ``hand_size`` cards to each player.

    Cards beyond ``hand_size * len(players)`` stay undealt.
    """
    if hand_size * len(players) > len(deck):
        raise ValueError(f"Cannot deal {hand_size} cards to {len(players)} players")

    for i, player in enumerate(players):
        player.hand = sort_cards(deck[i * hand_size:(i + 1) * hand_size])
