"""
GameState is the entrypoint into the domain layer for the service layer.

It is an immutable snapshot of everything one room needs: the position, the pickups and modifiers,
the walls, the clock, the history and the pending ability (if any). The service converts it from/to the
GameModel it exchanges with the store; the engine turns one GameState plus an action into the next one.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from roguechess.chess.actions import IDLE, InteractionMode, mode_actor, mode_from_dict, mode_to_dict
from roguechess.chess.board import Board
from roguechess.chess.clock import ClockState, TimeControl
from roguechess.chess.fen import STARTING_FEN, active_color
from roguechess.chess.history import HistoryEntry
from roguechess.chess.modifiers import Modifier
from roguechess.chess.square import Square, is_valid_square_name
from roguechess.chess.upgrades import Upgrade
from roguechess.core.models import GameModel
from roguechess.core.shared_types import Color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    fen: str
    upgrades: tuple[Upgrade, ...]
    modifiers: dict[str, Modifier]
    walls: dict[str, int]
    clock: ClockState
    history: tuple[HistoryEntry, ...] = ()
    winner: Optional[Color] = None
    mode: InteractionMode = IDLE
    players: dict[str, bool] = field(
        default_factory=lambda: {Color.WHITE.value: False, Color.BLACK.value: False}
    )
    version: int = 0

    @classmethod
    def new_game(cls, time_control: TimeControl) -> Self:
        """State of a freshly created room."""
        return cls(
            fen=STARTING_FEN,
            upgrades=(),
            modifiers={},
            walls={},
            clock=ClockState.start(time_control),
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""
        history = tuple(HistoryEntry.from_dict(entry) for entry in model.history)

        # A corrupt FEN falls back to the most recent readable position in the history
        board = Board.load(model.fen, [entry.fen for entry in reversed(history)])

        time_control = TimeControl(
            base=float(model.time_config["base"]),
            increment=float(model.time_config["increment"]),
        )
        clock = ClockState(
            time_control=time_control,
            white_remaining=max(0.0, float(model.time_left[Color.WHITE.value])),
            black_remaining=max(0.0, float(model.time_left[Color.BLACK.value])),
            last_move_time=model.last_move_time,
        )

        return cls(
            fen=board.to_fen(),
            upgrades=tuple(Upgrade.from_dict(upgrade) for upgrade in model.upgrades),
            modifiers=_occupied_modifiers(board, model.modifiers),
            walls={
                square: int(lifetime)
                for square, lifetime in model.walls.items()
                if is_valid_square_name(square) and int(lifetime) > 0
            },
            clock=clock,
            history=history,
            winner=Color(model.winner) if model.winner else None,
            mode=mode_from_dict(model.mode),
            players=dict(model.players),
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            fen=self.fen,
            turn=self.turn.value,
            upgrades=[upgrade.to_dict() for upgrade in self.upgrades],
            modifiers={square: mod.to_dict() for square, mod in self.modifiers.items()},
            walls=dict(self.walls),
            history=[entry.to_dict() for entry in self.history],
            winner=self.winner.value if self.winner else None,
            time_config=self.clock.time_control.to_dict(),
            time_left=self.clock.time_left_dict(),
            last_move_time=self.clock.last_move_time,
            mode=mode_to_dict(self.mode),
            players=dict(self.players),
            version=self.version,
        )

    @property
    def turn(self) -> Color:
        return Color(active_color(self.fen))

    @property
    def acting_color(self) -> Color:
        """Whoever may act next: the owner of a pending ability, otherwise the side to move."""
        return mode_actor(self.mode) or self.turn

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def board(self) -> Board:
        """A fresh Board for this position (changing it does not change the state)."""
        return Board.from_fen(self.fen)

    def time_left(self, color: Color, now: float) -> float:
        return self.clock.remaining_at(color, now, self.acting_color)

    def flag_fallen(self, now: float) -> Optional[Color]:
        """The side whose time has run out, if any."""
        thinking = self.acting_color
        if self.winner is None and self.clock.is_flag_fallen(thinking, now, thinking):
            return thinking
        return None


def _occupied_modifiers(board: Board, stored: dict[str, dict]) -> dict[str, Modifier]:
    """A modifier can only live on an occupied square. Anything else in a stored document is dropped."""
    modifiers: dict[str, Modifier] = {}
    for square, data in stored.items():
        if not is_valid_square_name(square) or not board.is_occupied(
            Square.from_algebraic(square)
        ):
            logger.warning("Dropping modifier on empty or unknown square %r", square)
            continue
        modifiers[square] = Modifier.from_dict(data)
    return modifiers
