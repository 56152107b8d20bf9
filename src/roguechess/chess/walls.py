"""Builder walls: temporary obstacles with a lifetime counted in completed turns."""

from roguechess.chess.square import Square
from roguechess.core.config import RULES

# algebraic square name -> remaining lifetime
Walls = dict[str, int]


def is_walled(walls: Walls, square: Square) -> bool:
    return walls.get(square.to_algebraic(), 0) > 0


def decay_walls(walls: Walls) -> Walls:
    """One completed turn has passed. Walls reaching zero disappear."""
    return {square: lifetime - 1 for square, lifetime in walls.items() if lifetime > 1}


def raise_walls(walls: Walls, squares: tuple[Square, ...], lifetime: int = RULES.wall_lifetime) -> Walls:
    """Older walls decay first, so the new ones start at their full lifetime."""
    raised = decay_walls(walls)
    for square in squares:
        raised[square.to_algebraic()] = lifetime
    return raised
