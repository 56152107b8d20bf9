import pytest

from roguechess.api.models import (
    AbilityRequest,
    CreateRoomRequest,
    GetRoomRequest,
    MoveRequest,
)
from roguechess.core.exceptions import InvalidRequestError
from roguechess.core.shared_types import Color


# -- Validation - CreateRoomRequest --
def test_default_time_control() -> None:
    """5 minutes + 3 seconds unless asked otherwise"""
    request = CreateRoomRequest()
    assert request.base_seconds == 300
    assert request.increment_seconds == 3


@pytest.mark.parametrize("base, increment", [(60, 0), (600, 1), (0.5, 3)])
def test_valid_time_control(base: float, increment: float) -> None:
    request = CreateRoomRequest(base_seconds=base, increment_seconds=increment)
    assert request.base_seconds == base
    assert request.increment_seconds == increment


@pytest.mark.parametrize("base, increment", [(-1, 0), (300, -3), (0, 3)])
def test_invalid_time_control(base: float, increment: float) -> None:
    """Negative values and a zero base make no sense for a clock."""
    with pytest.raises(InvalidRequestError):
        _ = CreateRoomRequest(base_seconds=base, increment_seconds=increment)


# -- Validation - room codes --
def test_room_code_is_normalised() -> None:
    assert GetRoomRequest(room_code=" ab12c ").room_code == "AB12C"


@pytest.mark.parametrize("room_code", ["", "ABCD", "ABCDEF", "AB-12", "ÄBC12"])
def test_invalid_room_code(room_code: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = GetRoomRequest(room_code=room_code)


# -- Validation - MoveRequest / AbilityRequest --
def test_valid_square_names() -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(room_code="AB12C", color=Color.WHITE, from_square="e2", to_square="e4")
    assert request.from_square == "e2"
    assert request.to_square == "e4"


@pytest.mark.parametrize(
    "from_square, to_square", [("e9", "e4"), ("e2", "z4"), ("E2", "e4"), ("e2", "e44")]
)
def test_invalid_square_names(from_square: str, to_square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(
            room_code="AB12C", color=Color.WHITE, from_square=from_square, to_square=to_square
        )


def test_ability_square_is_validated() -> None:
    assert AbilityRequest(room_code="AB12C", color=Color.BLACK, square="d4").square == "d4"
    with pytest.raises(InvalidRequestError):
        _ = AbilityRequest(room_code="AB12C", color=Color.BLACK, square="d0")


@pytest.mark.parametrize("minutes, increment", [(1, 0), (5, 3), (10, 1)])
def test_time_control_presets(minutes: int, increment: int) -> None:
    request = CreateRoomRequest.from_preset(minutes, increment)
    assert request.base_seconds == minutes * 60
    assert request.increment_seconds == increment


@pytest.mark.parametrize("minutes, increment", [(3, 0), (5, 2)])
def test_unknown_preset(minutes: int, increment: int) -> None:
    with pytest.raises(InvalidRequestError):
        CreateRoomRequest.from_preset(minutes, increment)
