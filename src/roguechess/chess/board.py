"""
The Game board: a thin adapter around python-chess.

All orthodox rules (piece movement, check, checkmate, notation) come from the chess library.
This class translates between the library and the Square / Piece types used by the rest of the engine,
and adds the two things the library does not know about: forced queen promotion and the ghost move.
"""

import logging
from dataclasses import dataclass
from itertools import chain
from typing import Iterable, Optional, Self

import chess

from roguechess.chess.fen import STARTING_FEN, is_valid_fen
from roguechess.chess.pieces import Piece, PieceType
from roguechess.chess.square import BOARD_DIMENSIONS, Square
from roguechess.core.exceptions import InvalidFENError, InvalidMoveError
from roguechess.core.shared_types import Color

logger = logging.getLogger(__name__)

TO_CHESS_TYPE: dict[PieceType, chess.PieceType] = {
    PieceType.PAWN: chess.PAWN,
    PieceType.KNIGHT: chess.KNIGHT,
    PieceType.BISHOP: chess.BISHOP,
    PieceType.ROOK: chess.ROOK,
    PieceType.QUEEN: chess.QUEEN,
    PieceType.KING: chess.KING,
}
FROM_CHESS_TYPE: dict[chess.PieceType, PieceType] = {
    value: key for key, value in TO_CHESS_TYPE.items()
}


def to_chess_square(square: Square) -> chess.Square:
    return chess.square(square.file - 1, square.rank - 1)


def from_chess_square(square: chess.Square) -> Square:
    return Square(chess.square_file(square) + 1, chess.square_rank(square) + 1)


def to_chess_piece(piece: Piece) -> chess.Piece:
    return chess.Piece(TO_CHESS_TYPE[piece.type], piece.color == Color.WHITE)


def from_chess_piece(piece: chess.Piece) -> Piece:
    color = Color.WHITE if piece.color == chess.WHITE else Color.BLACK
    return Piece(FROM_CHESS_TYPE[piece.piece_type], color)


@dataclass(frozen=True)
class MoveResult:
    """What happened on the board when a move was played."""

    from_square: Square
    to_square: Square
    moved: Piece
    captured: Optional[Piece]
    # differs from to_square for an en passant capture
    captured_square: Optional[Square]
    notation: str
    promoted: bool = False
    # (rook_from, rook_to) when the move was a castling move
    rook_move: Optional[tuple[Square, Square]] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def captured_king(self) -> bool:
        return self.captured is not None and self.captured.is_king


class Board:
    def __init__(self, inner: chess.Board) -> None:
        self._board = inner

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        try:
            return cls(chess.Board(fen))
        except ValueError as error:
            raise InvalidFENError(
                f"Cannot interpret supplied string as FEN: {fen}"
            ) from error

    @classmethod
    def load(cls, fen: str, fallbacks: Iterable[str] = ()) -> Self:
        """
        Tolerant version of from_fen, for FENs read back from a stored document.

        A broken FEN falls back to the first readable one in `fallbacks`, and to the starting position if none is.
        """
        for candidate in chain([fen], fallbacks):
            board = cls._parse(candidate)
            if board is not None:
                if candidate != fen:
                    logger.warning("Unreadable FEN %r, falling back to %r", fen, candidate)
                return board
        logger.warning("Unreadable FEN %r, falling back to the starting position", fen)
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def _parse(cls, fen: str) -> Optional[Self]:
        if not is_valid_fen(fen):
            return None
        try:
            return cls.from_fen(fen)
        except InvalidFENError:
            return None

    def to_fen(self) -> str:
        return self._board.fen()

    # --- Reading the position ---
    @property
    def turn(self) -> Color:
        return Color.WHITE if self._board.turn == chess.WHITE else Color.BLACK

    def set_turn(self, color: Color) -> None:
        """Hand the move to `color` outside of a regular move. Any en passant chance is gone."""
        self._board.turn = color == Color.WHITE
        self._board.ep_square = None

    def piece_at(self, square: Square) -> Optional[Piece]:
        piece = self._board.piece_at(to_chess_square(square))
        return from_chess_piece(piece) if piece else None

    def is_occupied(self, square: Square) -> bool:
        return self._board.piece_at(to_chess_square(square)) is not None

    def pieces(self) -> dict[Square, Piece]:
        return {
            from_chess_square(square): from_chess_piece(piece)
            for square, piece in self._board.piece_map().items()
        }

    def material_score(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        score = {Color.WHITE: 0, Color.BLACK: 0}
        for piece in self.pieces().values():
            score[piece.color] += piece.points
        return score

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    # --- Changing the position ---
    def put(self, piece: Piece, square: Square) -> None:
        self._board.set_piece_at(to_chess_square(square), to_chess_piece(piece))

    def remove(self, square: Square) -> Optional[Piece]:
        piece = self._board.remove_piece_at(to_chess_square(square))
        return from_chess_piece(piece) if piece else None

    def try_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """Play a move under the orthodox rules. Promotion always resolves to a queen."""
        moved = self.piece_at(from_square)
        if moved is None:
            raise InvalidMoveError(f"No piece on {from_square.to_algebraic()}")

        move = self._build_move(moved, from_square, to_square)
        if not self._board.is_legal(move):
            raise InvalidMoveError(
                f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        captured_square: Optional[Square] = None
        if self._board.is_en_passant(move):
            captured_square = Square(to_square.file, from_square.rank)
        elif self.is_occupied(to_square):
            captured_square = to_square
        captured = self.piece_at(captured_square) if captured_square else None

        rook_move = self._castling_rook_move(move)
        notation = self._board.san(move)
        self._board.push(move)
        return MoveResult(
            from_square=from_square,
            to_square=to_square,
            moved=moved,
            captured=captured,
            captured_square=captured_square,
            notation=notation,
            promoted=move.promotion is not None,
            rook_move=rook_move,
        )

    def ghost_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """
        Move as if every piece other than the kings, the mover and whatever stands on the destination were absent.
        ----

        Legality is decided on a scratch board holding only those pieces. An enemy king on the destination is
        replaced there by a stand-in piece, so the capture only has to be geometrically possible.
        The real board then loses whatever stood on the destination.
        """
        moved = self.piece_at(from_square)
        if moved is None:
            raise InvalidMoveError(f"No piece on {from_square.to_algebraic()}")
        target = self.piece_at(to_square)
        move = self._build_move(moved, from_square, to_square)

        scratch = chess.Board(None)
        scratch.turn = self._board.turn
        for square, piece in self._board.piece_map().items():
            if piece.piece_type == chess.KING:
                scratch.set_piece_at(square, piece)
        scratch.set_piece_at(move.from_square, to_chess_piece(moved))

        king_target = target is not None and target.is_king and target.color != moved.color
        if king_target:
            stand_in = chess.Piece(chess.KNIGHT, target.color == Color.WHITE)
            scratch.set_piece_at(move.to_square, stand_in)
            allowed = scratch.is_pseudo_legal(move)
        else:
            if target is not None:
                scratch.set_piece_at(move.to_square, to_chess_piece(target))
            allowed = scratch.is_legal(move)

        if not allowed:
            raise InvalidMoveError(
                f"Ghost move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        notation = f"{from_square.to_algebraic()}{'x' if target else '-'}{to_square.to_algebraic()}"
        self.remove(to_square)
        self.remove(from_square)
        landed = Piece(PieceType.QUEEN, moved.color) if move.promotion else moved
        self.put(landed, to_square)
        self._advance_counters(is_reset=target is not None or moved.type == PieceType.PAWN)
        return MoveResult(
            from_square=from_square,
            to_square=to_square,
            moved=moved,
            captured=target,
            captured_square=to_square if target else None,
            notation=notation,
            promoted=move.promotion is not None,
        )

    # --- Internal helpers ---
    def _build_move(
        self, piece: Piece, from_square: Square, to_square: Square
    ) -> chess.Move:
        last_rank = BOARD_DIMENSIONS[1] if piece.color == Color.WHITE else 1
        promotion = (
            chess.QUEEN
            if piece.type == PieceType.PAWN and to_square.rank == last_rank
            else None
        )
        return chess.Move(
            to_chess_square(from_square), to_chess_square(to_square), promotion
        )

    def _castling_rook_move(self, move: chess.Move) -> Optional[tuple[Square, Square]]:
        if not self._board.is_castling(move):
            return None
        rank = chess.square_rank(move.from_square)
        if self._board.is_kingside_castling(move):
            rook_from, rook_to = chess.square(7, rank), chess.square(5, rank)
        else:
            rook_from, rook_to = chess.square(0, rank), chess.square(3, rank)
        return from_chess_square(rook_from), from_chess_square(rook_to)

    def _advance_counters(self, is_reset: bool) -> None:
        """Bookkeeping python-chess does in push(), for moves made by hand."""
        if self._board.turn == chess.BLACK:
            self._board.fullmove_number += 1
        self._board.halfmove_clock = 0 if is_reset else self._board.halfmove_clock + 1
        self._board.ep_square = None
        self._board.turn = not self._board.turn
