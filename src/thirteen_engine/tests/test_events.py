"""
Inbound event parsing and outbound encoding tests.
"""

import orjson
import pytest

from thirteen_engine.models import Card, OutboundEventType, OutboundMessage
from thirteen_engine.ws.events import (
    EventType, JoinEvent, JoinLobbyEvent, PassEvent, PlayEvent,
    decode_inbound, encode_outbound, parse_inbound_event,
)


def test_parse_play():
    event = parse_inbound_event({
        "type": "play",
        "cards": [{"rank": "10", "suit": "h"}, {"rank": "j", "suit": "H"}],
    })
    assert isinstance(event, PlayEvent)
    assert event.to_cards() == [Card("10", "h"), Card("J", "h")]


def test_numeric_rank_accepted():
    event = parse_inbound_event({"type": "play", "cards": [{"rank": 7, "suit": "s"}]})
    assert event.to_cards() == [Card("7", "s")]


def test_join_lobby_alias():
    event = parse_inbound_event({"type": "joinLobby", "lobbyId": "AB12CD"})
    assert isinstance(event, JoinLobbyEvent)
    assert event.lobby_id == "AB12CD"


def test_join_name_optional():
    event = parse_inbound_event({"type": "join"})
    assert isinstance(event, JoinEvent)
    assert event.name is None


def test_decode_pass():
    event = decode_inbound('{"type": "pass"}')
    assert isinstance(event, PassEvent)
    assert event.type == EventType.PASS


@pytest.mark.parametrize("data", [
    ["play"],
    {},
    {"type": "shuffle"},
    {"type": "play", "cards": []},
    {"type": "play", "cards": [{"rank": "1", "suit": "s"}]},
    {"type": "play", "cards": [{"rank": "3", "suit": "x"}]},
    {"type": "joinLobby"},
    {"type": "setName", "name": ""},
])
def test_rejects_bad_events(data):
    with pytest.raises(ValueError):
        parse_inbound_event(data)


def test_rejects_bad_json():
    with pytest.raises(ValueError):
        decode_inbound("{not json")


def test_encode_outbound():
    message = OutboundMessage(
        recipient="abc",
        type=OutboundEventType.FINISHED,
        payload={"player": "Ann", "position": 1},
    )
    assert orjson.loads(encode_outbound(message)) == {
        "type": "finished",
        "player": "Ann",
        "position": 1,
    }
