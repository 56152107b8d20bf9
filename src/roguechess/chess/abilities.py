"""
Executors for ordinary moves and for every special ability.

Each executor works on a TurnContext: private working copies of the board, pickups, modifiers, walls and clock
made for a single action. If an executor raises, the context is thrown away and the GameState it was copied from is untouched.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from roguechess.chess.actions import (
    IDLE,
    MODE_NAMES,
    AwaitingSniperTarget,
    AwaitingSwap,
    Idle,
    InteractionMode,
    PlacingWalls,
)
from roguechess.chess.board import Board, MoveResult
from roguechess.chess.clock import ClockState
from roguechess.chess.modifiers import (
    CLOCK_ABILITIES,
    Modifier,
    OnMove,
    is_manual,
    on_move,
)
from roguechess.chess.pieces import Piece, PieceType
from roguechess.chess.square import Square
from roguechess.chess.upgrades import Upgrade, upgrade_at
from roguechess.chess.walls import Walls, is_walled, raise_walls
from roguechess.core.config import RULES, RuleConfig
from roguechess.core.exceptions import (
    GameStateError,
    InvalidAbilityTargetError,
    InvalidMoveError,
)
from roguechess.core.shared_types import Color, UpgradeKind

logger = logging.getLogger(__name__)


@dataclass
class TurnContext:
    board: Board
    upgrades: tuple[Upgrade, ...]
    modifiers: dict[str, Modifier]
    walls: Walls
    clock: ClockState
    actor: Color
    mode: InteractionMode = IDLE
    winner: Optional[Color] = None
    # a turn is resolved once no ability is left waiting: end-of-turn processing + history entry
    turn_resolved: bool = False
    # the builder already aged the old walls while raising new ones
    walls_decayed: bool = False
    is_capture: bool = False
    log: list[str] = field(default_factory=list)

    def note(self, text: str) -> None:
        self.log.append(text)

    @property
    def text(self) -> str:
        return f"{self.actor.value}: " + "; ".join(self.log)


# --- ORDINARY MOVE ---
def execute_move(
    ctx: TurnContext, from_square: Square, to_square: Square, rules: RuleConfig = RULES
) -> None:
    """
    Move a piece, then apply what the modifiers on the board say should happen.
    ----

    1. ghost pieces move on a board without obstacles, everybody else is stopped by walls and the orthodox rules
    2. a captured piece takes its modifier with it (and a martyr takes the capturer along)
    3. the mover's own modifier is dropped, carried, or fired according to its kind
    4. an upgrade on the destination becomes the new modifier there
    """
    _require_idle(ctx)
    piece = ctx.board.piece_at(from_square)
    if piece is None or piece.color != ctx.actor:
        raise InvalidMoveError(f"No piece of yours on {from_square.to_algebraic()}")

    source_mod = ctx.modifiers.pop(from_square.to_algebraic(), None)
    if source_mod is not None and source_mod.type == UpgradeKind.GHOST:
        result = ctx.board.ghost_move(from_square, to_square)
        ctx.note(f"{result.notation} (ghost)")
    else:
        if is_walled(ctx.walls, to_square):
            raise InvalidMoveError(f"Blocked by builder wall on {to_square.to_algebraic()}")
        result = ctx.board.try_move(from_square, to_square)
        ctx.note(result.notation)

    if result.rook_move:
        rook_from, rook_to = result.rook_move
        rook_mod = ctx.modifiers.pop(rook_from.to_algebraic(), None)
        if rook_mod:
            ctx.modifiers[rook_to.to_algebraic()] = rook_mod
        # the castling rook lands too, and picks up whatever lies on its square
        _pick_up(ctx, rook_to, rules)

    mover_survived = _resolve_capture(ctx, result, capturer=result.to_square)

    if source_mod is not None:
        _transfer_modifier(ctx, source_mod, result, mover_survived, rules)

    if mover_survived:
        _pick_up(ctx, to_square, rules)

    ctx.turn_resolved = isinstance(ctx.mode, Idle)


def _resolve_capture(ctx: TurnContext, result: MoveResult, capturer: Square) -> bool:
    """Remove the captured piece's modifier and fire martyrdom. Returns False if the capturing piece was destroyed."""
    if result.captured is None or result.captured_square is None:
        return True
    ctx.is_capture = True

    captured_mod = ctx.modifiers.pop(result.captured_square.to_algebraic(), None)
    if result.captured_king:
        ctx.winner = ctx.actor
        ctx.note("king captured")

    return not _martyrdom(ctx, captured_mod, capturer)


def _martyrdom(ctx: TurnContext, captured_mod: Optional[Modifier], capturer: Square) -> bool:
    """A martyr takes the piece that captured it down too. Kings are exempt. True if the capturer was destroyed."""
    if captured_mod is None or captured_mod.type != UpgradeKind.MARTYRDOM:
        return False
    capturing_piece = ctx.board.piece_at(capturer)
    if capturing_piece is None or capturing_piece.is_king:
        return False
    ctx.board.remove(capturer)
    ctx.modifiers.pop(capturer.to_algebraic(), None)
    ctx.note(f"martyrdom destroys the piece on {capturer.to_algebraic()}")
    return True


def _transfer_modifier(
    ctx: TurnContext,
    modifier: Modifier,
    result: MoveResult,
    mover_survived: bool,
    rules: RuleConfig = RULES,
) -> None:
    match modifier.type:
        case UpgradeKind.DOUBLE_MOVE:
            ctx.board.set_turn(ctx.actor)
            ctx.note("double move")
        case UpgradeKind.NECROMANCER:
            # a pawn cannot be raised on its first or last rank
            if result.is_capture and not result.from_square.is_back_rank():
                ctx.board.put(Piece(PieceType.PAWN, ctx.actor), result.from_square)
                ctx.note(f"necromancer raises a pawn on {result.from_square.to_algebraic()}")
        case _ if on_move(modifier) == OnMove.FIRE:
            _fire_clock_modifier(ctx, modifier.type, rules)
        case _ if on_move(modifier) == OnMove.CARRY and mover_survived:
            ctx.modifiers[result.to_square.to_algebraic()] = replace(
                modifier, active_turn=ctx.actor
            )


def _pick_up(ctx: TurnContext, square: Square, rules: RuleConfig = RULES) -> None:
    """Landing on an upgrade consumes it. It replaces any modifier the piece brought along."""
    upgrade = upgrade_at(ctx.upgrades, square)
    if upgrade is None:
        return
    ctx.upgrades = tuple(u for u in ctx.upgrades if u.id != upgrade.id)
    ctx.note(f"picked up {upgrade.type.value}")
    logger.debug("%s picked up %s on %s", ctx.actor, upgrade.type, square.to_algebraic())

    algebraic = square.to_algebraic()
    if upgrade.type in CLOCK_ABILITIES:
        ctx.modifiers.pop(algebraic, None)
        _fire_clock_modifier(ctx, upgrade.type, rules)
        return

    ctx.modifiers[algebraic] = Modifier(upgrade.type, ctx.actor)
    if upgrade.type == UpgradeKind.SWAP:
        # the swap goes off right away, before the turn is wrapped up
        ctx.mode = AwaitingSwap(source=square, actor=ctx.actor)


def _fire_clock_modifier(ctx: TurnContext, kind: UpgradeKind, rules: RuleConfig = RULES) -> None:
    if kind == UpgradeKind.TIME_ADD:
        ctx.clock = ctx.clock.adjusted(ctx.actor, rules.time_add_seconds)
        ctx.note(f"+{rules.time_add_seconds:g}s")
    elif kind == UpgradeKind.TIME_SUB:
        ctx.clock = ctx.clock.adjusted(ctx.actor.opposite, -rules.time_sub_seconds)
        ctx.note(f"-{rules.time_sub_seconds:g}s to opponent")


# --- MANUAL ABILITIES ---
def fire_ability(ctx: TurnContext, square: Square) -> None:
    """Activate a manual ability. The game then waits for SelectTarget (or CancelAbility) from the same player."""
    _require_idle(ctx)
    modifier = ctx.modifiers.get(square.to_algebraic())
    piece = ctx.board.piece_at(square)
    if modifier is None or piece is None or piece.color != ctx.actor or not is_manual(modifier):
        raise InvalidAbilityTargetError(
            f"No ability to fire on {square.to_algebraic()}"
        )

    match modifier.type:
        case UpgradeKind.SWAP:
            # swapping costs the turn the moment it is fired
            ctx.board.set_turn(ctx.actor.opposite)
            ctx.mode = AwaitingSwap(source=square, actor=ctx.actor)
        case UpgradeKind.SNIPER:
            ctx.mode = AwaitingSniperTarget(source=square, actor=ctx.actor)
        case UpgradeKind.BUILDER:
            ctx.mode = PlacingWalls(source=square, actor=ctx.actor)
    ctx.note(f"fires {modifier.type.value} from {square.to_algebraic()}")
    ctx.turn_resolved = False


def select_target(ctx: TurnContext, square: Square, rules: RuleConfig = RULES) -> None:
    match ctx.mode:
        case Idle():
            raise GameStateError("No ability is waiting for a target.")
        case AwaitingSwap(source=source):
            resolve_swap(ctx, source, square)
        case AwaitingSniperTarget(source=source):
            resolve_sniper(ctx, source, square, rules)
        case PlacingWalls() as mode:
            place_wall(ctx, mode, square, rules)


def cancel_ability(ctx: TurnContext) -> None:
    """
    Drop the pending ability without undoing anything that was already committed.
    A fired swap already spent the turn, so cancelling it still wraps that turn up.
    """
    match ctx.mode:
        case Idle():
            raise GameStateError("No ability to cancel.")
        case AwaitingSwap():
            ctx.note("swap cancelled")
            ctx.turn_resolved = True
        case AwaitingSniperTarget() | PlacingWalls():
            ctx.note(f"{MODE_NAMES[type(ctx.mode)]} cancelled")
            ctx.turn_resolved = False
    ctx.mode = IDLE


def resolve_swap(ctx: TurnContext, source: Square, target: Square) -> None:
    """Exchange two friendly pieces, modifiers included. The swap modifier itself is used up."""
    target_piece = ctx.board.piece_at(target)
    if target == source or target_piece is None or target_piece.color != ctx.actor:
        raise InvalidAbilityTargetError(
            f"Swap needs another one of your pieces, not {target.to_algebraic()}"
        )
    source_piece = ctx.board.piece_at(source)
    if source_piece is None:
        raise GameStateError(f"Swapping piece on {source.to_algebraic()} is gone.")
    if _pawn_on_back_rank(source_piece, target) or _pawn_on_back_rank(target_piece, source):
        raise InvalidAbilityTargetError("A pawn cannot be swapped onto the first or last rank.")

    source_key, target_key = source.to_algebraic(), target.to_algebraic()
    source_mod = ctx.modifiers.pop(source_key, None)
    if source_mod is not None and source_mod.type == UpgradeKind.SWAP:
        source_mod = None
    target_mod = ctx.modifiers.pop(target_key, None)
    if source_mod is not None:
        ctx.modifiers[target_key] = source_mod
    if target_mod is not None:
        ctx.modifiers[source_key] = target_mod

    ctx.board.remove(source)
    ctx.board.remove(target)
    ctx.board.put(target_piece, source)
    ctx.board.put(source_piece, target)

    ctx.note(f"swap {source_key}<->{target_key}")
    ctx.mode = IDLE
    ctx.turn_resolved = True


def resolve_sniper(
    ctx: TurnContext, source: Square, target: Square, rules: RuleConfig = RULES
) -> None:
    """Shoot an enemy piece within range without moving. Hitting the king wins the game."""
    target_piece = ctx.board.piece_at(target)
    if target_piece is None or target_piece.color == ctx.actor:
        raise InvalidAbilityTargetError(f"No enemy piece on {target.to_algebraic()}")
    if source.chebyshev_distance(target) > rules.sniper_range:
        raise InvalidAbilityTargetError(
            f"{target.to_algebraic()} is out of sniper range ({rules.sniper_range})"
        )

    ctx.modifiers.pop(source.to_algebraic(), None)
    ctx.board.remove(target)
    ctx.is_capture = True
    captured_mod = ctx.modifiers.pop(target.to_algebraic(), None)
    ctx.note(f"snipes {target_piece.to_fen()} on {target.to_algebraic()}")
    if target_piece.is_king:
        ctx.winner = ctx.actor
        ctx.note("king captured")
    _martyrdom(ctx, captured_mod, capturer=source)

    ctx.board.set_turn(ctx.actor.opposite)
    ctx.mode = IDLE
    ctx.turn_resolved = True


def place_wall(
    ctx: TurnContext, mode: PlacingWalls, square: Square, rules: RuleConfig = RULES
) -> None:
    """Collect wall squares. The last one raises all of them and ends the turn."""
    if ctx.board.is_occupied(square) or is_walled(ctx.walls, square) or square in mode.placed:
        raise InvalidAbilityTargetError(
            f"Cannot build on {square.to_algebraic()}: occupied or already walled"
        )

    placed = mode.placed + (square,)
    if len(placed) < rules.walls_per_build:
        ctx.mode = replace(mode, placed=placed)
        ctx.note(f"marks {square.to_algebraic()}")
        ctx.turn_resolved = False
        return

    ctx.walls = raise_walls(ctx.walls, placed, rules.wall_lifetime)
    ctx.walls_decayed = True
    ctx.modifiers.pop(mode.source.to_algebraic(), None)
    ctx.board.set_turn(ctx.actor.opposite)
    ctx.note("builds walls on " + ", ".join(sq.to_algebraic() for sq in placed))
    ctx.mode = IDLE
    ctx.turn_resolved = True


# --- HELPERS ---
def _require_idle(ctx: TurnContext) -> None:
    if not isinstance(ctx.mode, Idle):
        raise GameStateError("Finish or cancel the pending ability first.")


def _pawn_on_back_rank(piece: Piece, square: Square) -> bool:
    return piece.type == PieceType.PAWN and square.is_back_rank()
