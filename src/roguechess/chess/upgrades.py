"""
Upgrade entities (the mystery pickups) and the spawner that keeps them on the board.

After every completed turn two things happen:
1. every upgrade steps away from the most valuable pieces on the board (the "cowardly" lure)
2. new upgrades are dropped until there are two, favouring the half of the board of whoever is losing badly on material
"""

import logging
import random
from dataclasses import dataclass, replace
from string import ascii_lowercase, digits
from typing import Any, Optional, Self

from roguechess.chess.board import Board
from roguechess.chess.square import BOARD_DIMENSIONS, Square, all_squares
from roguechess.core.config import RULES, RuleConfig
from roguechess.core.exceptions import NoSpawnSpaceError
from roguechess.core.shared_types import Color, UpgradeKind

logger = logging.getLogger(__name__)

ID_CHARACTERS = ascii_lowercase + digits
ID_LENGTH = 9

# stay, +x, -x, +y, -y. Ties go to the earliest entry.
RELOCATION_STEPS: tuple[tuple[int, int], ...] = ((0, 0), (1, 0), (-1, 0), (0, 1), (0, -1))

# y >= 4 is white's half of the board (ranks 1-4), y <= 3 is black's half (ranks 5-8)
WHITE_HALF_ROWS = range(4, 8)
BLACK_HALF_ROWS = range(0, 4)


@dataclass(frozen=True)
class Upgrade:
    """(x, y) use board-array indexing: x=0 is the a-file, y=0 is the 8th rank."""

    id: str
    x: int
    y: int
    type: UpgradeKind

    @property
    def square(self) -> Square:
        return Square.from_grid(self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            x=int(data["x"]),
            y=int(data["y"]),
            type=UpgradeKind(data["type"]),
        )


def upgrade_at(upgrades: tuple[Upgrade, ...], square: Square) -> Optional[Upgrade]:
    x, y = square.to_grid()
    return next((u for u in upgrades if u.x == x and u.y == y), None)


def process_end_turn(
    board: Board,
    upgrades: tuple[Upgrade, ...],
    rng: random.Random,
    rules: RuleConfig = RULES,
) -> tuple[Upgrade, ...]:
    """Relocate the existing upgrades, then top up to the configured number."""
    relocated = relocate_upgrades(board, upgrades)

    score = board.material_score()
    material_diff = score[Color.WHITE] - score[Color.BLACK]  # > 0 means white is winning

    spawned = list(relocated)
    while len(spawned) < rules.upgrade_count:
        try:
            spawned.append(spawn_upgrade(board, tuple(spawned), material_diff, rng, rules))
        except NoSpawnSpaceError:
            logger.debug("No empty square left, keeping %d upgrade(s)", len(spawned))
            break
    return tuple(spawned)


# --- RELOCATION ---
def relocate_upgrades(board: Board, upgrades: tuple[Upgrade, ...]) -> tuple[Upgrade, ...]:
    """Upgrades move one at a time, so later ones see the new positions of earlier ones."""
    current = list(upgrades)
    targets = most_valuable_squares(board)
    for index, upgrade in enumerate(current):
        current[index] = relocate_upgrade(upgrade, board, tuple(current), targets)
    return tuple(current)


def most_valuable_squares(board: Board) -> list[Square]:
    """All occupied squares holding a piece of the highest value on the board (either color)."""
    pieces = board.pieces()
    if not pieces:
        return []
    top_value = max(piece.points for piece in pieces.values())
    return [square for square, piece in pieces.items() if piece.points == top_value]


def relocate_upgrade(
    upgrade: Upgrade,
    board: Board,
    upgrades: tuple[Upgrade, ...],
    targets: list[Square],
) -> Upgrade:
    """Step to whichever of the five candidate squares is furthest (summed Manhattan distance) from the targets."""
    if not targets:
        return upgrade

    target_cells = [square.to_grid() for square in targets]
    best: Optional[tuple[int, int]] = None
    best_score = -1
    for dx, dy in RELOCATION_STEPS:
        nx, ny = upgrade.x + dx, upgrade.y + dy
        if not (0 <= nx < BOARD_DIMENSIONS[0] and 0 <= ny < BOARD_DIMENSIONS[1]):
            continue
        if board.is_occupied(Square.from_grid(nx, ny)):
            continue
        if any(u.id != upgrade.id and u.x == nx and u.y == ny for u in upgrades):
            continue

        score = sum(abs(nx - tx) + abs(ny - ty) for tx, ty in target_cells)
        if score > best_score:
            best, best_score = (nx, ny), score

    if best is None:
        return upgrade
    return replace(upgrade, x=best[0], y=best[1])


# --- SPAWNING ---
def spawn_upgrade(
    board: Board,
    upgrades: tuple[Upgrade, ...],
    material_diff: int,
    rng: random.Random,
    rules: RuleConfig = RULES,
) -> Upgrade:
    """Drop one upgrade of a random kind on a free square. Raises NoSpawnSpaceError if there is none."""
    candidates = free_squares(board, upgrades)
    if not candidates:
        raise NoSpawnSpaceError("No empty square to place an upgrade on.")

    weights = spawn_weights(candidates, material_diff, rules)
    x, y = rng.choices(candidates, weights=weights, k=1)[0]
    kind = rng.choice(list(UpgradeKind))
    upgrade = Upgrade(id=new_upgrade_id(rng), x=x, y=y, type=kind)
    logger.debug("Spawned %s on %s", kind, upgrade.square.to_algebraic())
    return upgrade


def free_squares(board: Board, upgrades: tuple[Upgrade, ...]) -> list[tuple[int, int]]:
    """Grid cells with neither a piece nor an upgrade, in board-array order."""
    taken = {(u.x, u.y) for u in upgrades}
    return [
        square.to_grid()
        for square in all_squares()
        if not board.is_occupied(square) and square.to_grid() not in taken
    ]


def spawn_weights(
    candidates: list[tuple[int, int]], material_diff: int, rules: RuleConfig = RULES
) -> list[int]:
    """The side that is far behind on material gets its half of the board weighted up (a comeback mechanic)."""
    is_white_losing_badly = material_diff <= -rules.material_swing
    is_black_losing_badly = material_diff >= rules.material_swing

    weights: list[int] = []
    for _, y in candidates:
        weight = 1
        if is_white_losing_badly and y in WHITE_HALF_ROWS:
            weight = rules.losing_side_weight
        if is_black_losing_badly and y in BLACK_HALF_ROWS:
            weight = rules.losing_side_weight
        weights.append(weight)
    return weights


def new_upgrade_id(rng: random.Random) -> str:
    return "".join(rng.choices(ID_CHARACTERS, k=ID_LENGTH))
