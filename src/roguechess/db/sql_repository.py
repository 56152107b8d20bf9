"""Implementation of (Room)Repository using SQLAlchemy"""

import logging
from copy import deepcopy

from sqlalchemy import select
from sqlalchemy.orm import Session

from roguechess.core.exceptions import StaleStateError
from roguechess.core.models import GameModel
from roguechess.db.schema import DBRoom

logger = logging.getLogger(__name__)


class SQLRoomRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_room(self, room_code: str) -> GameModel | None:
        """Get the room's game, if record exists."""
        room_db = self._fetch_room(room_code)
        if room_db:
            return self._to_model(room_db)
        return None

    def create_room(self, room_code: str, game: GameModel) -> GameModel:
        """Store a new room. A code collision simply overwrites the older room."""
        room_db = self._fetch_room(room_code)
        if room_db:
            logger.warning("Room %s already exists, replacing it", room_code)
            room_db.state = game.to_document()
            room_db.version = game.version
        else:
            room_db = DBRoom(
                room_code=room_code, state=game.to_document(), version=game.version
            )
            self.db.add(room_db)
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def update_room(
        self, room_code: str, game: GameModel, expected_version: int
    ) -> GameModel | None:
        """Replace the document, unless somebody else committed in between."""
        room_db = self._fetch_room(room_code)
        if not room_db:
            return None
        if room_db.version != expected_version:
            raise StaleStateError(
                f"Room {room_code} is at version {room_db.version}, expected {expected_version}."
            )
        room_db.state = game.to_document()
        room_db.version = game.version
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def delete_room(self, room_code: str) -> GameModel | None:
        """Remove a room's record."""
        room_db = self._fetch_room(room_code)
        if not room_db:
            return None
        game_model = self._to_model(room_db)
        self.db.delete(room_db)
        self.db.commit()
        return game_model

    def _fetch_room(self, room_code: str) -> DBRoom | None:
        query = select(DBRoom).where(DBRoom.room_code == room_code)
        return self.db.scalar(query)

    def _to_model(self, room_db: DBRoom) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel.from_document(deepcopy(room_db.state), version=room_db.version)
