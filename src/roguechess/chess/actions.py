"""
Player actions and the interaction mode an ability can leave the game in.

Both are closed sets of frozen dataclasses; the engine matches on them exhaustively.
"""

from dataclasses import dataclass
from typing import Any, Optional

from roguechess.chess.square import Square
from roguechess.core.exceptions import GameStateError
from roguechess.core.shared_types import Color


# --- ACTIONS ---
@dataclass(frozen=True)
class Move:
    color: Color
    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class FireAbility:
    """Activate the manual ability (swap, sniper, builder) bound to the piece on `square`."""

    color: Color
    square: Square


@dataclass(frozen=True)
class SelectTarget:
    """The square click a pending ability is waiting for."""

    color: Color
    square: Square


@dataclass(frozen=True)
class CancelAbility:
    """Re-clicking the selected square: drop the pending ability."""

    color: Color


@dataclass(frozen=True)
class ClaimTimeout:
    """Either player may ask the engine to end the game if the thinking side's flag has fallen."""

    color: Color


Action = Move | FireAbility | SelectTarget | CancelAbility | ClaimTimeout


# --- INTERACTION MODES ---
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingSwap:
    source: Square
    actor: Color


@dataclass(frozen=True)
class AwaitingSniperTarget:
    source: Square
    actor: Color


@dataclass(frozen=True)
class PlacingWalls:
    source: Square
    actor: Color
    placed: tuple[Square, ...] = ()


InteractionMode = Idle | AwaitingSwap | AwaitingSniperTarget | PlacingWalls

IDLE = Idle()

MODE_NAMES: dict[type, str] = {
    AwaitingSwap: "swap",
    AwaitingSniperTarget: "sniper",
    PlacingWalls: "builder",
}


def mode_to_dict(mode: InteractionMode) -> Optional[dict[str, Any]]:
    match mode:
        case Idle():
            return None
        case PlacingWalls(source=source, actor=actor, placed=placed):
            return {
                "kind": MODE_NAMES[PlacingWalls],
                "source": source.to_algebraic(),
                "actor": actor.value,
                "placed": [square.to_algebraic() for square in placed],
            }
        case AwaitingSwap(source=source, actor=actor) | AwaitingSniperTarget(
            source=source, actor=actor
        ):
            return {
                "kind": MODE_NAMES[type(mode)],
                "source": source.to_algebraic(),
                "actor": actor.value,
            }


def mode_from_dict(data: Optional[dict[str, Any]]) -> InteractionMode:
    if not data:
        return IDLE
    source = Square.from_algebraic(data["source"])
    actor = Color(data["actor"])
    match data["kind"]:
        case "swap":
            return AwaitingSwap(source, actor)
        case "sniper":
            return AwaitingSniperTarget(source, actor)
        case "builder":
            placed = tuple(Square.from_algebraic(sq) for sq in data.get("placed", []))
            return PlacingWalls(source, actor, placed)
        case kind:
            raise GameStateError(f"Unknown interaction mode: {kind!r}")


def mode_actor(mode: InteractionMode) -> Optional[Color]:
    """The only player allowed to act while the mode is pending"""
    if isinstance(mode, Idle):
        return None
    return mode.actor
