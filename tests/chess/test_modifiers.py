"""Unit tests for roguechess/chess/modifiers.py and the interaction modes in roguechess/chess/actions.py"""

import pytest

from roguechess.chess.actions import (
    IDLE,
    AwaitingSniperTarget,
    AwaitingSwap,
    PlacingWalls,
    mode_actor,
    mode_from_dict,
    mode_to_dict,
)
from roguechess.chess.modifiers import TRANSFER_RULES, Modifier, OnMove, is_manual, on_move
from roguechess.chess.square import Square
from roguechess.core.exceptions import GameStateError
from roguechess.core.shared_types import Color, UpgradeKind


def test_every_kind_has_a_transfer_rule() -> None:
    assert set(TRANSFER_RULES) == set(UpgradeKind)


@pytest.mark.parametrize(
    "kind, rule",
    [
        (UpgradeKind.DOUBLE_MOVE, OnMove.DROP),
        (UpgradeKind.GHOST, OnMove.DROP),
        (UpgradeKind.NECROMANCER, OnMove.DROP),
        (UpgradeKind.SNIPER, OnMove.CARRY),
        (UpgradeKind.MARTYRDOM, OnMove.CARRY),
        (UpgradeKind.TIME_ADD, OnMove.FIRE),
    ],
)
def test_on_move(kind: UpgradeKind, rule: OnMove) -> None:
    assert on_move(Modifier(kind, Color.WHITE)) == rule


def test_manual_abilities() -> None:
    manual = {kind for kind in UpgradeKind if is_manual(Modifier(kind, Color.BLACK))}
    assert manual == {UpgradeKind.SWAP, UpgradeKind.SNIPER, UpgradeKind.BUILDER}


def test_modifier_document_form() -> None:
    modifier = Modifier(UpgradeKind.SNIPER, Color.BLACK)
    assert modifier.to_dict() == {"type": "sniper", "activeTurn": "b"}
    assert Modifier.from_dict(modifier.to_dict()) == modifier


class TestModes:
    @pytest.mark.parametrize(
        "mode",
        [
            AwaitingSwap(Square.from_algebraic("a1"), Color.WHITE),
            AwaitingSniperTarget(Square.from_algebraic("d4"), Color.BLACK),
            PlacingWalls(Square.from_algebraic("h1"), Color.WHITE, (Square.from_algebraic("c3"),)),
        ],
    )
    def test_mode_document_roundtrip(self, mode) -> None:
        assert mode_from_dict(mode_to_dict(mode)) == mode
        assert mode_actor(mode) == mode.actor

    def test_idle(self) -> None:
        assert mode_to_dict(IDLE) is None
        assert mode_from_dict(None) == IDLE
        assert mode_actor(IDLE) is None

    def test_unknown_mode(self) -> None:
        with pytest.raises(GameStateError):
            mode_from_dict({"kind": "teleport", "source": "a1", "actor": "w"})
