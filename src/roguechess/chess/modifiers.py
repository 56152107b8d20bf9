"""
Modifiers: abilities bound to whatever piece stands on a square.

A modifier does not follow its piece by itself. Every executor that moves a piece has to say what
happens with the modifier on the source square, using the rules defined here.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Self

from roguechess.core.shared_types import Color, UpgradeKind


class OnMove(Enum):
    """What happens to a modifier when its piece makes an ordinary move."""

    CARRY = auto()  # travels along to the destination square
    DROP = auto()  # spent by the move itself
    FIRE = auto()  # fires on landing, then gone


TRANSFER_RULES: dict[UpgradeKind, OnMove] = {
    UpgradeKind.DOUBLE_MOVE: OnMove.DROP,
    UpgradeKind.GHOST: OnMove.DROP,
    UpgradeKind.NECROMANCER: OnMove.DROP,
    UpgradeKind.BUILDER: OnMove.CARRY,
    UpgradeKind.MARTYRDOM: OnMove.CARRY,
    UpgradeKind.HIDDEN_MOVE: OnMove.CARRY,
    UpgradeKind.SNIPER: OnMove.CARRY,
    UpgradeKind.SWAP: OnMove.CARRY,
    UpgradeKind.TIME_ADD: OnMove.FIRE,
    UpgradeKind.TIME_SUB: OnMove.FIRE,
}

# abilities the player fires explicitly, and which then wait for a target square
MANUAL_ABILITIES = frozenset({UpgradeKind.SWAP, UpgradeKind.SNIPER, UpgradeKind.BUILDER})

CLOCK_ABILITIES = frozenset({UpgradeKind.TIME_ADD, UpgradeKind.TIME_SUB})


@dataclass(frozen=True)
class Modifier:
    type: UpgradeKind
    # color of the piece holding the ability
    active_turn: Color

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "activeTurn": self.active_turn.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(type=UpgradeKind(data["type"]), active_turn=Color(data["activeTurn"]))


def on_move(modifier: Modifier) -> OnMove:
    return TRANSFER_RULES[modifier.type]


def is_manual(modifier: Modifier) -> bool:
    return modifier.type in MANUAL_ABILITIES
