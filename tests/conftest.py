"""
Pytest will auto-discover / import this file called 'conftest.py'. ]
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from roguechess.chess.actions import IDLE, InteractionMode
from roguechess.chess.clock import ClockState, TimeControl
from roguechess.chess.fen import STARTING_FEN
from roguechess.chess.game import GameState
from roguechess.chess.modifiers import Modifier
from roguechess.chess.upgrades import Upgrade
from roguechess.core.shared_types import Color, UpgradeKind
from roguechess.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

TIME_CONTROL = TimeControl(base=300.0, increment=3.0)

StateFactory = Callable[..., GameState]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_state() -> StateFactory:
    """Call the inner function with whatever the test needs on the board. Modifiers are given as square -> (kind, color)."""

    def _create_state(
        fen: str = STARTING_FEN,
        upgrades: tuple[Upgrade, ...] = (),
        modifiers: Optional[dict[str, tuple[UpgradeKind, Color]]] = None,
        walls: Optional[dict[str, int]] = None,
        white_remaining: float = TIME_CONTROL.base,
        black_remaining: float = TIME_CONTROL.base,
        last_move_time: Optional[float] = None,
        mode: InteractionMode = IDLE,
    ) -> GameState:
        return GameState(
            fen=fen,
            upgrades=upgrades,
            modifiers={
                square: Modifier(kind, color)
                for square, (kind, color) in (modifiers or {}).items()
            },
            walls=dict(walls or {}),
            clock=ClockState(
                time_control=TIME_CONTROL,
                white_remaining=white_remaining,
                black_remaining=black_remaining,
                last_move_time=last_move_time,
            ),
            mode=mode,
        )

    return _create_state
