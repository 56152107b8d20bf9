"""
Structural checks on FEN strings.

FEN, or Forsyth-Edwards Notation, describes a board position:
<board position string><active color><castling rights><en passant square><# half move clock><number turns played>

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

The chess library does the real parsing. These checks are cheap enough to run on request data
before anything reaches the engine.
"""

from roguechess.chess.pieces import FEN_TO_PIECE
from roguechess.chess.square import BOARD_DIMENSIONS, is_valid_square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
CASTLING_CHARACTERS = "KQkq"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = (
        parts
    )
    if not is_valid_position(position):
        return False

    if not is_valid_color_code(color):
        return False

    if not is_valid_castling_rights(castling):
        return False

    if not is_valid_en_passant(en_passant):
        return False

    if not (
        is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    ):
        return False
    return True


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a subset of KQkq written in that order."""
    if castling == "-":
        return True
    remaining = CASTLING_CHARACTERS
    for character in castling:
        index = remaining.find(character)
        if index == -1:
            return False
        remaining = remaining[index + 1 :]
    return len(castling) > 0


def is_valid_en_passant(en_passant: str) -> bool:
    return (en_passant == "-") or is_valid_square_name(en_passant)


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


def active_color(fen: str) -> str:
    """The side-to-move token of a (valid) FEN"""
    return fen.split(" ")[1]
