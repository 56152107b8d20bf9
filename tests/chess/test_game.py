"""Unit tests for roguechess/chess/game.py"""

from roguechess.chess.actions import AwaitingSniperTarget
from roguechess.chess.clock import TimeControl
from roguechess.chess.fen import STARTING_FEN
from roguechess.chess.game import GameState
from roguechess.chess.history import HistoryEntry
from roguechess.chess.square import Square
from roguechess.chess.upgrades import Upgrade
from roguechess.core.models import GameModel
from roguechess.core.shared_types import Color, UpgradeKind

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def test_new_game() -> None:
    state = GameState.new_game(TimeControl(180.0, 2.0))

    assert state.fen == STARTING_FEN
    assert state.turn == Color.WHITE
    assert state.upgrades == ()
    assert state.walls == {}
    assert state.history == ()
    assert state.clock.white_remaining == state.clock.black_remaining == 180.0
    assert state.clock.last_move_time is None
    assert state.players == {"w": False, "b": False}
    assert not state.is_over


def test_document_roundtrip(make_state) -> None:
    """State -> GameModel -> JSON document -> GameModel -> State keeps every field."""
    state = make_state(
        fen=AFTER_E4,
        upgrades=(Upgrade(id="abc123xyz", x=0, y=2, type=UpgradeKind.SWAP),),
        modifiers={"e4": (UpgradeKind.SNIPER, Color.WHITE)},
        walls={"d5": 2},
        black_remaining=250.5,
        last_move_time=1000.0,
        mode=AwaitingSniperTarget(Square.from_algebraic("e4"), Color.WHITE),
    )

    document = state.to_model().to_document()
    assert document["timeLeft"] == {"w": 300.0, "b": 250.5}
    assert document["modifiers"] == {"e4": {"type": "sniper", "activeTurn": "w"}}
    assert document["upgrades"] == [{"id": "abc123xyz", "x": 0, "y": 2, "type": "swap"}]
    assert "version" not in document

    restored = GameState.from_model(GameModel.from_document(document, version=7))
    assert restored.fen == state.fen
    assert restored.upgrades == state.upgrades
    assert restored.modifiers == state.modifiers
    assert restored.walls == state.walls
    assert restored.clock == state.clock
    assert restored.mode == state.mode
    assert restored.version == 7


def test_turn_and_acting_color(make_state) -> None:
    state = make_state(fen=AFTER_E4)
    assert state.turn == Color.BLACK
    assert state.acting_color == Color.BLACK

    # a pending ability belongs to its owner, whatever the FEN says
    pending = make_state(
        fen=AFTER_E4, mode=AwaitingSniperTarget(Square.from_algebraic("e4"), Color.WHITE)
    )
    assert pending.acting_color == Color.WHITE


class TestTolerantLoading:
    def _model(self, **overrides) -> GameModel:
        model = GameState.new_game(TimeControl(300.0, 3.0)).to_model()
        for key, value in overrides.items():
            setattr(model, key, value)
        return model

    def test_corrupt_fen_falls_back_to_last_history_entry(self) -> None:
        entry = HistoryEntry(fen=AFTER_E4, upgrades=(), modifiers={}, walls={}, text="w: e4")
        model = self._model(fen="garbage", history=[entry.to_dict()])
        assert GameState.from_model(model).fen == AFTER_E4

    def test_corrupt_history_entries_are_skipped(self) -> None:
        good = HistoryEntry(fen=AFTER_E4, upgrades=(), modifiers={}, walls={}, text="w: e4")
        bad = HistoryEntry(fen="also garbage", upgrades=(), modifiers={}, walls={}, text="b: ??")

        model = self._model(fen="garbage", history=[good.to_dict(), bad.to_dict()])
        assert GameState.from_model(model).fen == AFTER_E4

        model = self._model(fen="garbage", history=[bad.to_dict()])
        assert GameState.from_model(model).fen == STARTING_FEN

    def test_corrupt_fen_without_history_is_a_new_board(self) -> None:
        model = self._model(fen="garbage")
        assert GameState.from_model(model).fen == STARTING_FEN

    def test_modifier_on_empty_square_is_dropped(self) -> None:
        model = self._model(
            modifiers={
                "e4": {"type": "ghost", "activeTurn": "w"},
                "e2": {"type": "ghost", "activeTurn": "w"},
                "z9": {"type": "ghost", "activeTurn": "w"},
            }
        )
        assert set(GameState.from_model(model).modifiers) == {"e2"}

    def test_bad_walls_are_dropped(self) -> None:
        model = self._model(walls={"e5": 2, "e4": 0, "q1": 1})
        assert GameState.from_model(model).walls == {"e5": 2}

    def test_document_without_clock_fields(self) -> None:
        model = GameModel.from_document({"fen": STARTING_FEN})
        state = GameState.from_model(model)
        assert state.clock.white_remaining == 0.0
        assert state.players == {"w": False, "b": False}
        assert state.history == ()


def test_flag_fallen(make_state) -> None:
    state = make_state(white_remaining=5.0, last_move_time=1000.0)
    assert state.flag_fallen(1004.0) is None
    assert state.flag_fallen(1005.0) == Color.WHITE
    assert state.time_left(Color.WHITE, 1002.0) == 3.0
    assert state.time_left(Color.BLACK, 1002.0) == 300.0
