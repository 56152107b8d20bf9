"""Unit tests for roguechess/chess/pieces.py"""

import pytest

from roguechess.chess.pieces import PIECE_TO_FEN, Piece, PieceType
from roguechess.core.shared_types import Color


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_fen_roundtrip(piece_type: PieceType) -> None:
    white = PIECE_TO_FEN[piece_type].upper()
    black = PIECE_TO_FEN[piece_type]
    assert Piece.from_fen(white) == Piece(piece_type, Color.WHITE)
    assert Piece.from_fen(black) == Piece(piece_type, Color.BLACK)
    assert Piece.from_fen(white).to_fen() == white


@pytest.mark.parametrize(
    "fen_char, points", [("q", 9), ("r", 5), ("b", 3), ("n", 3), ("p", 1), ("k", 0)]
)
def test_piece_points(fen_char: str, points: int) -> None:
    """Material values used by the upgrade spawner. The king does not count."""
    assert Piece.from_fen(fen_char).points == points


def test_king_flag() -> None:
    assert Piece.from_fen("K").is_king
    assert not Piece.from_fen("Q").is_king
