"""
Combination classification.

Turns an unordered collection of cards into a typed ``Play``. Runs never
contain a 2; the 2 is reserved as the top single rank and as the trigger for
bombs.
"""

from typing import Iterable, List, Optional

from .comparator import is_next_rank, sort_cards
from .constants import (
    MIN_DOUBLE_SEQUENCE_LEN, MIN_SEQUENCE_LEN, PLAY_DOUBLE_SEQUENCE,
    PLAY_SEQUENCE, SAME_RANK_TYPES, TOP_RANK,
)
from .models import Card, Play


def is_consecutive(ranks: List[str]) -> bool:
    """Check that each rank is exactly one step above the previous one."""
    return all(is_next_rank(a, b) for a, b in zip(ranks, ranks[1:]))


def is_sequence(cards: List[Card]) -> bool:
    """Sorted cards form a run of distinct consecutive ranks without a 2."""
    if len(cards) < MIN_SEQUENCE_LEN:
        return False
    ranks = [card.rank for card in cards]
    if TOP_RANK in ranks:
        return False
    return is_consecutive(ranks)


def is_double_sequence(cards: List[Card]) -> bool:
    """Sorted cards form consecutive equal-rank pairs without a 2."""
    if len(cards) < MIN_DOUBLE_SEQUENCE_LEN or len(cards) % 2:
        return False
    if any(card.rank == TOP_RANK for card in cards):
        return False
    pairs = [cards[i:i + 2] for i in range(0, len(cards), 2)]
    if any(low.rank != high.rank for low, high in pairs):
        return False
    return is_consecutive([pair[0].rank for pair in pairs])


def classify(cards: Iterable[Card]) -> Optional[Play]:
    """
    Classify a set of cards.

    Args:
        cards: Cards the caller claims to play, in any order

    Returns:
        The classified Play, or None if the cards are not a recognized
        combination (empty, duplicated or unrelated cards)
    """
    ordered = sort_cards(cards)
    if not ordered or len(set(ordered)) != len(ordered):
        return None

    play_type = None
    if len(ordered) in SAME_RANK_TYPES and len({card.rank for card in ordered}) == 1:
        play_type = SAME_RANK_TYPES[len(ordered)]
    elif is_sequence(ordered):
        play_type = PLAY_SEQUENCE
    elif is_double_sequence(ordered):
        play_type = PLAY_DOUBLE_SEQUENCE

    if play_type is None:
        return None
    return Play(type=play_type, cards=tuple(ordered), highest=ordered[-1])
