"""
Play legality, including the bomb exception for tables led by a 2.
"""

from typing import Iterable, List, Optional, TYPE_CHECKING

from .combinations import classify
from .comparator import compare_cards
from .constants import BOMB_TABLE, PHASE_ACTIVE, TOP_RANK
from .errors import (
    BOMB_NOT_ALLOWED, NOT_YOUR_TURN, OWNERSHIP_MISMATCH, PATTERN_MISMATCH,
    RANK_TOO_LOW,
)
from .models import Card, Play

if TYPE_CHECKING:
    from .engine import Game


class ValidationResult:
    """Result of play validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        play: Optional[Play] = None,
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.play = play

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, play: Optional[Play] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, play=play)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def is_bomb(candidate: Play, current: Play) -> bool:
    """Check the bomb table for a candidate of a different shape than the table."""
    if current.highest.rank != TOP_RANK:
        return False
    return any(
        candidate.type == bomb_type and len(candidate) >= min_size
        for bomb_type, min_size in BOMB_TABLE.get(current.type, [])
    )


def _could_ever_bomb(candidate: Play) -> bool:
    return any(
        candidate.type == bomb_type and len(candidate) >= min_size
        for bombs in BOMB_TABLE.values()
        for bomb_type, min_size in bombs
    )


def check_beats(candidate: Play, current: Optional[Play]) -> ValidationResult:
    """
    Check whether a classified play may go on top of the table's current play.

    Args:
        candidate: The play being attempted
        current: The play currently on the table, or None for a fresh lead

    Returns:
        ValidationResult carrying the candidate on success
    """
    if current is None:
        return ValidationResult.success(candidate)

    if candidate.type == current.type and len(candidate) == len(current):
        if compare_cards(candidate.highest, current.highest) > 0:
            return ValidationResult.success(candidate)
        return ValidationResult.error(
            RANK_TOO_LOW,
            f"Must beat {current.highest.pretty()}"
        )

    if is_bomb(candidate, current):
        return ValidationResult.success(candidate)

    if current.highest.rank != TOP_RANK and _could_ever_bomb(candidate):
        return ValidationResult.error(
            BOMB_NOT_ALLOWED,
            "Bombs only break a table led by a 2"
        )
    return ValidationResult.error(
        PATTERN_MISMATCH,
        f"Must play a {current.type} of {len(current)} cards"
    )


def validate_ownership(hand: List[Card], cards: List[Card]) -> bool:
    """Check the hand holds every card, each claimed once."""
    return len(set(cards)) == len(cards) and all(card in hand for card in cards)


def validate_play(game: "Game", player_id: str, cards: Iterable[Card]) -> ValidationResult:
    """
    Validate a card play attempt.

    Args:
        game: Game the play is attempted in
        player_id: ID of player attempting the play
        cards: Cards being played

    Returns:
        ValidationResult with the classified Play on success
    """
    cards = list(cards)

    if game.phase != PHASE_ACTIVE:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"Game is not in play (current phase: {game.phase})"
        )

    current = game.current_player
    if current is None or current.id != player_id:
        return ValidationResult.error(NOT_YOUR_TURN, "It's not your turn")

    if not validate_ownership(current.hand, cards):
        return ValidationResult.error(
            OWNERSHIP_MISMATCH,
            "You don't hold all of those cards"
        )

    play = classify(cards)
    if play is None:
        return ValidationResult.error(
            PATTERN_MISMATCH,
            "Not a recognized combination"
        )

    return check_beats(play, game.current_play)
