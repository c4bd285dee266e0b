# src/thirteen_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
ROOM_FULL = "ROOM_FULL"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
PATTERN_MISMATCH = "PATTERN_MISMATCH"
RANK_TOO_LOW = "RANK_TOO_LOW"
BOMB_NOT_ALLOWED = "BOMB_NOT_ALLOWED"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
GAME_IN_PROGRESS = "GAME_IN_PROGRESS"
NOT_HOST = "NOT_HOST"
LOBBY_NOT_FOUND = "LOBBY_NOT_FOUND"
ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
INVALID_EVENT = "INVALID_EVENT"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
