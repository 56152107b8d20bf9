"""Unit tests for roguechess/chess/square.py"""

from string import ascii_lowercase

import pytest

from roguechess.chess.square import Square, all_squares
from roguechess.core.exceptions import InvalidSquareError


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 1, rank 1, etc."""
    square = Square.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank
    assert square.to_algebraic() == notation


@pytest.mark.parametrize("notation", ["i1", "a9", "a0", "e", "e44", "", "E4", "4e"])
def test_invalid_algebraic(notation: str) -> None:
    """Anything that is not on an 8x8 board is refused before it can be used for a lookup."""
    with pytest.raises(InvalidSquareError):
        Square.from_algebraic(notation)


@pytest.mark.parametrize(
    "notation, grid",
    [("a8", (0, 0)), ("h8", (7, 0)), ("a1", (0, 7)), ("h1", (7, 7)), ("e4", (4, 4)), ("d5", (3, 3))],
)
def test_grid_conversion(notation: str, grid: tuple[int, int]) -> None:
    """Board-array indexing: y=0 is the 8th rank, so rank = 8 - y."""
    square = Square.from_algebraic(notation)
    assert square.to_grid() == grid
    assert Square.from_grid(*grid) == square


def test_chebyshev_distance() -> None:
    d4 = Square.from_algebraic("d4")
    assert d4.chebyshev_distance(Square.from_algebraic("g7")) == 3
    assert d4.chebyshev_distance(Square.from_algebraic("h4")) == 4
    assert d4.chebyshev_distance(d4) == 0


def test_all_squares_in_board_array_order() -> None:
    squares = all_squares()
    assert len(squares) == 64
    assert squares[0].to_algebraic() == "a8"
    assert squares[-1].to_algebraic() == "h1"
