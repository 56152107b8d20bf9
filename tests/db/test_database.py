"""Unit tests for roguechess/db/database.py"""

from sqlalchemy import StaticPool, create_engine, inspect
from sqlalchemy.orm import Session

from roguechess.db.database import get_db, init_db


def test_init_db_creates_rooms_table() -> None:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    assert "rooms" in inspect(engine).get_table_names()


def test_get_db_yields_a_session() -> None:
    sessions = get_db()
    db = next(sessions)
    try:
        assert isinstance(db, Session)
    finally:
        sessions.close()
