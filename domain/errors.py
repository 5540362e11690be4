# domain/errors.py
from __future__ import annotations


class GameError(Exception):
    """
    Base for every failure the game core reports to its caller.

    `code` is the stable machine-readable identifier relayed to clients,
    the message is for humans.
    """

    code = "game_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class RoomNotFound(GameError):
    code = "room_not_found"


class RoomFull(GameError):
    code = "room_full"


class RoleTaken(GameError):
    code = "role_taken"


class InvalidAction(GameError):
    code = "invalid_action"


class InvalidPhase(GameError):
    code = "invalid_phase"


class PlayerNotFound(GameError):
    code = "player_not_found"
