"""Protocol repository (SQLAlchemy today, a hosted document store could implement the same methods)"""

from typing import Protocol

from roguechess.core.models import GameModel


class RoomRepository(Protocol):
    """Persistence layer orchestration: one game document per room code."""

    def get_room(self, room_code: str) -> GameModel | None:
        """Get the room's game, if record exists."""
        ...

    def create_room(self, room_code: str, game: GameModel) -> GameModel:
        """Store a new room. An existing room with the same code is replaced (last writer wins)."""
        ...

    def update_room(
        self, room_code: str, game: GameModel, expected_version: int
    ) -> GameModel | None:
        """Replace the document if nobody committed since `expected_version`. Raises StaleStateError otherwise."""
        ...

    def delete_room(self, room_code: str) -> GameModel | None:
        """Remove a room's record."""
        ...
