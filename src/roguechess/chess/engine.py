"""
The Action Resolver: (GameState, Action) -> new GameState.

Every action goes through the same steps:
1. refuse if the game is over, or if it is not the acting player's turn
2. charge the time spent thinking to the acting player's clock (refuse if it ran out)
3. route the action to its executor, which works on private copies
4. add the increment if the turn passed to the opponent, stamp the clock
5. once no ability is pending: age the walls, check for mate, run the upgrade spawner, append to the history

Nothing is written anywhere: the caller decides whether to commit the returned state.
"""

import logging
import random
from dataclasses import dataclass, replace

from roguechess.chess.abilities import (
    TurnContext,
    cancel_ability,
    execute_move,
    fire_ability,
    select_target,
)
from roguechess.chess.actions import (
    Action,
    CancelAbility,
    ClaimTimeout,
    FireAbility,
    Move,
    SelectTarget,
)
from roguechess.chess.game import GameState
from roguechess.chess.history import HistoryEntry, append_entry
from roguechess.chess.upgrades import process_end_turn
from roguechess.chess.walls import decay_walls
from roguechess.core.config import RULES, RuleConfig
from roguechess.core.exceptions import GameStateError, NotYourTurnError, OutOfTimeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    state: GameState
    text: str
    is_capture: bool = False


def resolve(
    state: GameState,
    action: Action,
    now: float,
    rng: random.Random,
    rules: RuleConfig = RULES,
) -> Resolution:
    """Apply one action. Raises a GameError (and changes nothing) if the action is rejected."""
    if state.is_over:
        raise GameStateError(f"Game is over. Winner: {state.winner}")

    if isinstance(action, ClaimTimeout):
        return claim_timeout(state, now)

    actor = action.color
    if actor != state.acting_color:
        raise NotYourTurnError(
            f"It is not your turn. Waiting for {state.acting_color.value} to act first."
        )

    clock = state.clock.charge(actor, now)
    if clock.remaining(actor) <= 0.0:
        raise OutOfTimeError(f"{actor.value} has run out of time.")

    ctx = TurnContext(
        board=state.board(),
        upgrades=state.upgrades,
        modifiers=dict(state.modifiers),
        walls=dict(state.walls),
        clock=clock,
        actor=actor,
        mode=state.mode,
    )
    turn_before = ctx.board.turn

    match action:
        case Move(from_square=from_square, to_square=to_square):
            execute_move(ctx, from_square, to_square, rules)
        case FireAbility(square=square):
            fire_ability(ctx, square)
        case SelectTarget(square=square):
            select_target(ctx, square, rules)
        case CancelAbility():
            cancel_ability(ctx)

    if ctx.board.turn != turn_before:
        ctx.clock = ctx.clock.with_increment(actor)
    ctx.clock = ctx.clock.stamped(now)

    history = state.history
    if ctx.turn_resolved:
        history = append_entry(history, _end_turn(ctx, rng, rules))

    new_state = replace(
        state,
        fen=ctx.board.to_fen(),
        upgrades=ctx.upgrades,
        modifiers=ctx.modifiers,
        walls=ctx.walls,
        clock=ctx.clock,
        history=history,
        winner=ctx.winner,
        mode=ctx.mode,
        version=state.version + 1,
    )
    logger.info("Resolved %s -> %s", type(action).__name__, ctx.text)
    return Resolution(state=new_state, text=ctx.text, is_capture=ctx.is_capture)


def _end_turn(ctx: TurnContext, rng: random.Random, rules: RuleConfig) -> HistoryEntry:
    """Wrap up a fully resolved turn and produce its history entry."""
    if not ctx.walls_decayed:
        ctx.walls = decay_walls(ctx.walls)

    if ctx.winner is None and ctx.board.turn != ctx.actor and ctx.board.is_checkmate():
        ctx.winner = ctx.actor
        ctx.note("checkmate")

    ctx.upgrades = process_end_turn(ctx.board, ctx.upgrades, rng, rules)

    return HistoryEntry(
        fen=ctx.board.to_fen(),
        upgrades=tuple(upgrade.to_dict() for upgrade in ctx.upgrades),
        modifiers={square: mod.to_dict() for square, mod in ctx.modifiers.items()},
        walls=dict(ctx.walls),
        text=ctx.text,
    )


def claim_timeout(state: GameState, now: float) -> Resolution:
    """End the game if the side that should be acting has no time left. Anyone may ask."""
    loser = state.flag_fallen(now)
    if loser is None:
        raise GameStateError("Neither clock has run out.")

    clock = state.clock.charge(loser, now).stamped(now)
    text = f"{loser.value}: out of time"
    entry = HistoryEntry(
        fen=state.fen,
        upgrades=tuple(upgrade.to_dict() for upgrade in state.upgrades),
        modifiers={square: mod.to_dict() for square, mod in state.modifiers.items()},
        walls=dict(state.walls),
        text=text,
    )
    new_state = replace(
        state,
        clock=clock,
        history=append_entry(state.history, entry),
        winner=loser.opposite,
        version=state.version + 1,
    )
    logger.info("Timeout: %s loses on time", loser.value)
    return Resolution(state=new_state, text=text)
