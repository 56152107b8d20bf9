"""Append-only log of resolved turns, used for replaying / scrubbing through a game."""

from dataclasses import dataclass
from typing import Any, Self

JSONDict = dict[str, Any]


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of the board after a resolved turn. Upgrades, modifiers and walls are kept in document form."""

    fen: str
    upgrades: tuple[JSONDict, ...]
    modifiers: dict[str, JSONDict]
    walls: dict[str, int]
    text: str

    def to_dict(self) -> JSONDict:
        return {
            "fen": self.fen,
            "upgrades": [dict(upgrade) for upgrade in self.upgrades],
            "modifiers": {square: dict(mod) for square, mod in self.modifiers.items()},
            "walls": dict(self.walls),
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: JSONDict) -> Self:
        return cls(
            fen=data["fen"],
            upgrades=tuple(dict(upgrade) for upgrade in data.get("upgrades", [])),
            modifiers={square: dict(mod) for square, mod in data.get("modifiers", {}).items()},
            walls=dict(data.get("walls", {})),
            text=data.get("text", ""),
        )


def append_entry(history: tuple[HistoryEntry, ...], entry: HistoryEntry) -> tuple[HistoryEntry, ...]:
    return history + (entry,)


def snapshot(history: tuple[HistoryEntry, ...], index: int) -> HistoryEntry:
    """Read-only view of the board after turn `index` (negative indices count from the end)."""
    return history[index]
