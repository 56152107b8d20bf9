"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Self

# Type aliases to make GameModel easier to read
ColorToken = str
SquareName = str
JSONDict = dict[str, Any]

# snake_case attribute -> key in the stored JSON document
DOCUMENT_KEYS: dict[str, str] = {
    "fen": "fen",
    "turn": "turn",
    "upgrades": "upgrades",
    "modifiers": "modifiers",
    "walls": "walls",
    "history": "history",
    "winner": "winner",
    "time_config": "timeConfig",
    "time_left": "timeLeft",
    "last_move_time": "lastMoveTime",
    "mode": "mode",
    "players": "players",
}


@dataclass
class GameModel:
    """Transport-safe representation of one room's game used between API, Service, DB, and Game layers.

    The version is not part of the JSON document: the store keeps it next to the document to detect stale writes.
    """

    fen: str
    turn: ColorToken
    upgrades: list[JSONDict]
    modifiers: dict[SquareName, JSONDict]
    walls: dict[SquareName, int]
    history: list[JSONDict]
    winner: Optional[ColorToken]
    time_config: dict[str, float]
    time_left: dict[ColorToken, float]
    last_move_time: Optional[float]
    mode: Optional[JSONDict] = None
    players: dict[ColorToken, bool] = field(
        default_factory=lambda: {"w": False, "b": False}
    )
    version: int = 0

    def to_document(self) -> JSONDict:
        return {key: getattr(self, attr) for attr, key in DOCUMENT_KEYS.items()}

    @classmethod
    def from_document(cls, document: JSONDict, version: int = 0) -> Self:
        """Missing keys get the values of a freshly created room (older documents lack the clock fields)."""
        time_config = document.get("timeConfig") or {"base": 0.0, "increment": 0.0}
        return cls(
            fen=document["fen"],
            turn=document.get("turn", "w"),
            upgrades=list(document.get("upgrades") or []),
            modifiers=dict(document.get("modifiers") or {}),
            walls=dict(document.get("walls") or {}),
            history=list(document.get("history") or []),
            winner=document.get("winner"),
            time_config=dict(time_config),
            time_left=dict(
                document.get("timeLeft")
                or {"w": time_config["base"], "b": time_config["base"]}
            ),
            last_move_time=document.get("lastMoveTime"),
            mode=document.get("mode"),
            players=dict(document.get("players") or {"w": False, "b": False}),
            version=version,
        )
