"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    """Values are the side-to-move tokens used in FEN and in the room document."""

    WHITE = "w"
    BLACK = "b"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class UpgradeKind(StrEnum):
    DOUBLE_MOVE = "double_move"
    MARTYRDOM = "martyrdom"
    HIDDEN_MOVE = "hidden_move"
    SWAP = "swap"
    GHOST = "ghost"
    NECROMANCER = "necromancer"
    SNIPER = "sniper"
    BUILDER = "builder"
    TIME_ADD = "time_add"
    TIME_SUB = "time_sub"
