"""Requests and Response models"""

from typing import Any, Optional, Self

from pydantic import BaseModel, field_validator

from roguechess.chess.square import is_valid_square_name
from roguechess.core.config import (
    BASE_MINUTES_PRESETS,
    DEFAULT_BASE_SECONDS,
    DEFAULT_INCREMENT_SECONDS,
    INCREMENT_PRESETS,
    ROOM_CODE_LENGTH,
)
from roguechess.core.exceptions import InvalidRequestError
from roguechess.core.shared_types import Color


def _validate_room_code(value: str) -> str:
    code = value.strip().upper()
    if len(code) != ROOM_CODE_LENGTH or not code.isalnum() or not code.isascii():
        raise InvalidRequestError(
            f"Room code must be {ROOM_CODE_LENGTH} letters/digits, got {value!r}."
        )
    return code


def _validate_square(value: str) -> str:
    if not is_valid_square_name(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class CreateRoomRequest(BaseModel):
    base_seconds: float = DEFAULT_BASE_SECONDS
    increment_seconds: float = DEFAULT_INCREMENT_SECONDS

    @field_validator(*["base_seconds", "increment_seconds"])
    @classmethod
    def validate_time(cls, value: float) -> float:
        if value < 0:
            raise InvalidRequestError(f"Time control cannot be negative: {value}")
        return value

    @field_validator("base_seconds")
    @classmethod
    def validate_base(cls, value: float) -> float:
        if value == 0:
            raise InvalidRequestError("Base time must be larger than zero.")
        return value

    @classmethod
    def from_preset(cls, minutes: int, increment: int) -> Self:
        """One of the lobby's time control buttons"""
        if minutes not in BASE_MINUTES_PRESETS or increment not in INCREMENT_PRESETS:
            raise InvalidRequestError(
                f"No such time control preset: {minutes} min + {increment} s"
            )
        return cls(base_seconds=minutes * 60, increment_seconds=increment)


class RoomRequest(BaseModel):
    room_code: str

    @field_validator("room_code")
    @classmethod
    def validate_room_code(cls, value: str) -> str:
        return _validate_room_code(value)


class GetRoomRequest(RoomRequest):
    pass


class DeleteRoomRequest(RoomRequest):
    pass


class ClaimColorRequest(RoomRequest):
    color: Color


class ReleaseColorRequest(RoomRequest):
    color: Color


class MoveRequest(RoomRequest):
    color: Color
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class AbilityRequest(RoomRequest):
    """Fire the ability on `square`"""

    color: Color
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class TargetRequest(AbilityRequest):
    """Pick the target square for the pending ability"""


class CancelRequest(RoomRequest):
    color: Color


class TimeoutRequest(RoomRequest):
    color: Color


# --- RESPONSE MODELS ---
class RoomResponse(BaseModel):
    room_code: str
    fen: str
    turn: Color
    upgrades: list[dict[str, Any]]
    modifiers: dict[str, dict[str, Any]]
    walls: dict[str, int]
    history: list[dict[str, Any]]
    winner: Optional[Color]
    time_config: dict[str, float]
    time_left: dict[str, float]
    mode: Optional[dict[str, Any]]
    players: dict[str, bool]
    version: int
    last_action: Optional[str] = None
    is_capture: bool = False
