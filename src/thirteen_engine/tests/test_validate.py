"""
Play legality and bomb rule tests.
"""

import pytest

from thirteen_engine.combinations import classify
from thirteen_engine.errors import (
    BOMB_NOT_ALLOWED, NOT_YOUR_TURN, OWNERSHIP_MISMATCH, PATTERN_MISMATCH,
    RANK_TOO_LOW,
)
from thirteen_engine.validate import check_beats, validate_play


@pytest.fixture
def play(cards):
    def _play(*texts):
        result = classify(cards(*texts))
        assert result is not None, texts
        return result
    return _play


def test_anything_leads_an_empty_table(play):
    assert check_beats(play("3s"), None).valid
    assert check_beats(play("4s", "4h", "5c", "5d", "6s", "6h"), None).valid


def test_higher_single_beats(play):
    assert check_beats(play("4s"), play("3h")).valid
    assert check_beats(play("9h"), play("9d")).valid


def test_lower_single_fails(play):
    result = check_beats(play("9d"), play("9h"))
    assert not result.valid
    assert result.error_code == RANK_TOO_LOW


def test_pair_compared_by_highest_card(play):
    assert check_beats(play("8s", "8h"), play("8c", "8d")).valid
    assert not check_beats(play("8s", "8d"), play("8c", "8h")).valid


def test_sequence_must_match_length(play):
    result = check_beats(play("4s", "5s", "6s", "7s"), play("3s", "4c", "5d"))
    assert not result.valid
    assert result.error_code == PATTERN_MISMATCH


def test_sequence_beats_sequence(play):
    assert check_beats(play("4s", "5s", "6s"), play("3s", "4c", "5d")).valid
    assert not check_beats(play("3h", "4h", "5h"), play("4s", "5s", "6s")).valid


def test_type_mismatch_fails(play):
    result = check_beats(play("5s", "5h"), play("4d"))
    assert not result.valid
    assert result.error_code == PATTERN_MISMATCH


def test_quartet_beats_single_two(play):
    assert check_beats(play("3s", "3c", "3d", "3h"), play("2s")).valid


def test_quartet_beats_pair_of_twos(play):
    assert check_beats(play("3s", "3c", "3d", "3h"), play("2s", "2h")).valid


def test_three_pair_run_beats_single_two(play):
    assert check_beats(play("4s", "4h", "5c", "5d", "6s", "6h"), play("2h")).valid


def test_three_pair_run_does_not_beat_pair_of_twos(play):
    result = check_beats(play("4s", "4h", "5c", "5d", "6s", "6h"), play("2s", "2c"))
    assert not result.valid


def test_four_pair_run_beats_pair_of_twos(play):
    bomb = play("4s", "4h", "5c", "5d", "6s", "6h", "7c", "7d")
    assert check_beats(bomb, play("2s", "2c")).valid


def test_quartet_does_not_beat_triplet_of_twos(play):
    assert not check_beats(play("3s", "3c", "3d", "3h"), play("2s", "2c", "2d")).valid


def test_five_pair_run_beats_triplet_of_twos(play):
    bomb = play("4s", "4h", "5c", "5d", "6s", "6h", "7c", "7d", "8s", "8h")
    assert check_beats(bomb, play("2s", "2c", "2d")).valid


def test_nothing_bombs_a_quartet_of_twos(play):
    bomb = play("4s", "4h", "5c", "5d", "6s", "6h", "7c", "7d", "8s", "8h")
    assert not check_beats(bomb, play("2s", "2c", "2d", "2h")).valid


def test_quartet_never_beats_a_non_two_single(play):
    quartet = play("3s", "3c", "3d", "3h")
    for rank in ["3", "7", "K", "A"]:
        result = check_beats(quartet, play(f"{rank}h"))
        assert not result.valid
        assert result.error_code == BOMB_NOT_ALLOWED


def test_quartet_never_beats_a_non_two_pair(play):
    result = check_beats(play("5s", "5c", "5d", "5h"), play("As", "Ah"))
    assert not result.valid
    assert result.error_code == BOMB_NOT_ALLOWED


def test_higher_quartet_beats_bomb(play):
    assert check_beats(play("4s", "4c", "4d", "4h"), play("3s", "3c", "3d", "3h")).valid


def test_not_your_turn(rigged_game, cards):
    game = rigged_game({"a": ["3s", "9c"], "b": ["4s", "Kh"]}, turn="a")
    result = validate_play(game, "b", cards("4s"))
    assert result.error_code == NOT_YOUR_TURN


def test_card_not_in_hand(rigged_game, cards):
    game = rigged_game({"a": ["3s", "9c"], "b": ["4s", "Kh"]}, turn="a")
    result = validate_play(game, "a", cards("Kh"))
    assert result.error_code == OWNERSHIP_MISMATCH


def test_same_card_twice(rigged_game, cards):
    game = rigged_game({"a": ["3s", "9c"], "b": ["4s", "Kh"]}, turn="a")
    result = validate_play(game, "a", cards("3s", "3s"))
    assert result.error_code == OWNERSHIP_MISMATCH


def test_unrecognized_combination(rigged_game, cards):
    game = rigged_game({"a": ["3s", "9c"], "b": ["4s", "Kh"]}, turn="a")
    result = validate_play(game, "a", cards("3s", "9c"))
    assert result.error_code == PATTERN_MISMATCH


def test_valid_lead(rigged_game, cards):
    game = rigged_game({"a": ["3s", "9c"], "b": ["4s", "Kh"]}, turn="a")
    result = validate_play(game, "a", cards("9c"))
    assert result.valid
    assert result.play == classify(cards("9c"))
