import pytest
from pydantic import ValidationError

from thirteen_engine.rules import RuleConfig, create_rules, default_rules


def test_defaults():
    assert default_rules.min_players == 2
    assert default_rules.max_players == 4
    assert default_rules.hand_size == 13
    assert not default_rules.auto_start


def test_overrides_leave_defaults_alone():
    rules = create_rules(auto_start=True, max_players=3)
    assert rules.auto_start
    assert rules.max_players == 3
    assert default_rules.max_players == 4


def test_max_below_min_rejected():
    with pytest.raises(ValidationError):
        RuleConfig(min_players=3, max_players=2)


def test_out_of_range_rejected():
    with pytest.raises(ValidationError):
        create_rules(max_players=5)
    with pytest.raises(ValidationError):
        create_rules(hand_size=14)


def test_can_start_with():
    rules = create_rules(min_players=3)
    assert not rules.can_start_with(2)
    assert rules.can_start_with(3)
    assert not rules.can_start_with(5)
