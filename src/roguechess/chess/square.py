"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from roguechess.core.exceptions import InvalidSquareError

BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_valid_square_name(sq):
            raise InvalidSquareError(f"Not a square on the board: {sq!r}")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    @classmethod
    def from_grid(cls, x: int, y: int) -> Square:
        """Board-array indexing used by upgrades: y=0 is the 8th rank, x=0 the a-file."""
        return cls(file=x + 1, rank=BOARD_DIMENSIONS[1] - y)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def to_grid(self) -> tuple[int, int]:
        return self.file - 1, BOARD_DIMENSIONS[1] - self.rank

    def chebyshev_distance(self, other: Square) -> int:
        """Number of king steps between two squares"""
        return max(abs(self.file - other.file), abs(self.rank - other.rank))

    def is_back_rank(self) -> bool:
        return self.rank in (1, BOARD_DIMENSIONS[1])


def is_valid_square_name(sq: str) -> bool:
    """A letter for the file + a single digit for the rank, both within the board."""
    if len(sq) != 2:
        return False
    file_char, rank_char = sq[0], sq[1]
    if file_char not in ascii_lowercase[: BOARD_DIMENSIONS[0]]:
        return False
    return rank_char.isdigit() and 1 <= int(rank_char) <= BOARD_DIMENSIONS[1]


def all_squares() -> list[Square]:
    """Squares in board-array order (a8, b8, ..., h1)"""
    return [
        Square.from_grid(x, y)
        for y in range(BOARD_DIMENSIONS[1])
        for x in range(BOARD_DIMENSIONS[0])
    ]
