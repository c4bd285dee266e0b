"""
Rank, suit and card comparison.

Every ordering decision in the engine goes through ``compare_cards``: rank
first, suit only as a tiebreak between equal ranks.
"""

from typing import Iterable, List, Tuple

from .constants import RANKS, SUITS
from .models import Card


def get_rank_index(rank: str) -> int:
    """Get the index of a rank in the fixed rank order."""
    try:
        return RANKS.index(rank)
    except ValueError:
        raise ValueError(f"Invalid rank: {rank}")


def get_suit_index(suit: str) -> int:
    """Get the index of a suit in the fixed suit order."""
    try:
        return SUITS.index(suit)
    except ValueError:
        raise ValueError(f"Invalid suit: {suit}")


def compare_ranks(rank_a: str, rank_b: str) -> int:
    """
    Compare two ranks.

    Returns:
        < 0 if rank_a is lower than rank_b
        0 if ranks are equal
        > 0 if rank_a is higher than rank_b
    """
    return get_rank_index(rank_a) - get_rank_index(rank_b)


def compare_suits(suit_a: str, suit_b: str) -> int:
    """Compare two suits, same sign convention as compare_ranks."""
    return get_suit_index(suit_a) - get_suit_index(suit_b)


def compare_cards(card_a: Card, card_b: Card) -> int:
    """Compare two cards by rank, then by suit."""
    diff = compare_ranks(card_a.rank, card_b.rank)
    if diff != 0:
        return diff
    return compare_suits(card_a.suit, card_b.suit)


def card_sort_key(card: Card) -> Tuple[int, int]:
    return get_rank_index(card.rank), get_suit_index(card.suit)


def sort_cards(cards: Iterable[Card], reverse: bool = False) -> List[Card]:
    """Sort cards weakest first (or strongest first with reverse)."""
    return sorted(cards, key=card_sort_key, reverse=reverse)


def lowest_card(cards: Iterable[Card]) -> Card:
    """Get the weakest card from a collection."""
    cards = list(cards)
    if not cards:
        raise ValueError("Cannot get lowest card from empty collection")
    return min(cards, key=card_sort_key)


def is_next_rank(rank_a: str, rank_b: str) -> bool:
    """Check that rank_b sits exactly one step above rank_a."""
    return compare_ranks(rank_b, rank_a) == 1
