"""
FastAPI WebSocket server for the Thirteen game.
"""

import logging
import uuid
from typing import Callable, Dict, List

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..errors import INVALID_EVENT, GameError
from ..lobby import LobbyManager
from ..models import OutboundEventType, OutboundMessage
from .events import (
    CreateLobbyEvent, EventType, InboundEvent, JoinEvent, JoinLobbyEvent,
    LeaveLobbyEvent, ListLobbiesEvent, PassEvent, PlayEvent, ReadyUpEvent,
    ReturnToLobbyEvent, SetNameEvent, StartGameEvent, decode_inbound,
    encode_outbound,
)

logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Thirteen Game Server", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

lobby_manager = LobbyManager()


class ConnectionManager:
    """Manages WebSocket connections and message delivery."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        identity = uuid.uuid4().hex[:8]
        self.active_connections[identity] = websocket
        logger.info(f"Connection {identity} accepted")
        return identity

    def disconnect(self, identity: str):
        self.active_connections.pop(identity, None)

    async def deliver(self, messages: List[OutboundMessage]):
        """Send queued messages in order; a dead socket is dropped."""
        for message in messages:
            websocket = self.active_connections.get(message.recipient)
            if websocket is None:
                continue
            try:
                await websocket.send_text(encode_outbound(message))
            except Exception as e:
                logger.error(f"Error sending to {message.recipient}: {e}")
                self.disconnect(message.recipient)


manager = ConnectionManager()


# Handlers never await: each event is read, validated, applied and queued
# before any other connection gets a turn.
def handle_set_name(identity: str, event: SetNameEvent):
    lobby_manager.set_name(identity, event.name)


def handle_list_lobbies(identity: str, event: ListLobbiesEvent):
    lobby_manager.list_lobbies(identity)


def handle_create_lobby(identity: str, event: CreateLobbyEvent):
    lobby_manager.create_lobby(identity)


def handle_join_lobby(identity: str, event: JoinLobbyEvent):
    lobby_manager.join_lobby(event.lobby_id, identity)


def handle_start_game(identity: str, event: StartGameEvent):
    lobby_manager.start_game(identity)


def handle_return_to_lobby(identity: str, event: ReturnToLobbyEvent):
    lobby_manager.return_to_lobby(identity)


def handle_play(identity: str, event: PlayEvent):
    lobby_manager.play(identity, event.to_cards())


def handle_pass(identity: str, event: PassEvent):
    lobby_manager.pass_turn(identity)


def handle_ready_up(identity: str, event: ReadyUpEvent):
    lobby_manager.ready_up(identity)


def handle_leave_lobby(identity: str, event: LeaveLobbyEvent):
    lobby_manager.leave_lobby(identity)


def handle_join(identity: str, event: JoinEvent):
    lobby_manager.join_table(identity, event.name)


EVENT_HANDLERS: Dict[EventType, Callable[[str, InboundEvent], None]] = {
    EventType.SET_NAME: handle_set_name,
    EventType.LIST_LOBBIES: handle_list_lobbies,
    EventType.CREATE_LOBBY: handle_create_lobby,
    EventType.JOIN_LOBBY: handle_join_lobby,
    EventType.START_GAME: handle_start_game,
    EventType.RETURN_TO_LOBBY: handle_return_to_lobby,
    EventType.PLAY: handle_play,
    EventType.PASS: handle_pass,
    EventType.READY_UP: handle_ready_up,
    EventType.LEAVE_LOBBY: handle_leave_lobby,
    EventType.JOIN: handle_join,
}


def create_error_event(identity: str, code: str, message: str) -> OutboundMessage:
    return OutboundMessage(
        recipient=identity,
        type=OutboundEventType.INVALID,
        payload={"code": code, "message": message},
    )


def handle_event(identity: str, event: InboundEvent) -> List[OutboundMessage]:
    """Apply one inbound event and return the messages it produced."""
    try:
        EVENT_HANDLERS[event.type](identity, event)
    except GameError as e:
        logger.info(f"Rejected {event.type.value} from {identity}: {e}")
        return lobby_manager.drain_events() + [create_error_event(identity, e.code, e.message)]
    return lobby_manager.drain_events()


def handle_raw(identity: str, raw: str) -> List[OutboundMessage]:
    try:
        event = decode_inbound(raw)
    except ValueError as e:
        logger.warning(f"Rejected malformed event from {identity}: {e}")
        return [create_error_event(identity, INVALID_EVENT, str(e))]
    return handle_event(identity, event)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "lobbies": len(lobby_manager.lobbies),
        "connections": len(manager.active_connections),
    }


@app.get("/lobbies")
async def list_lobbies():
    return {"lobbies": lobby_manager.lobby_listing()}


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    identity = await manager.connect(websocket)
    lobby_manager.connect(identity)
    await manager.deliver(lobby_manager.drain_events())

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                messages = handle_raw(identity, raw_data)
            except Exception:
                logger.exception(f"Error handling event from {identity}")
                messages = lobby_manager.drain_events()
            await manager.deliver(messages)
    except WebSocketDisconnect:
        logger.info(f"WebSocket {identity} disconnected")
    except Exception as e:
        logger.error(f"WebSocket error for {identity}: {e}")
    finally:
        manager.disconnect(identity)
        lobby_manager.disconnect(identity)
        await manager.deliver(lobby_manager.drain_events())
