"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import hashlib
import logging
import random
import time
from collections import defaultdict
from string import ascii_uppercase, digits
from typing import Callable, Optional

from roguechess.api.models import (
    AbilityRequest,
    CancelRequest,
    ClaimColorRequest,
    CreateRoomRequest,
    DeleteRoomRequest,
    GetRoomRequest,
    MoveRequest,
    ReleaseColorRequest,
    RoomResponse,
    TargetRequest,
    TimeoutRequest,
)
from roguechess.chess.actions import (
    Action,
    CancelAbility,
    ClaimTimeout,
    FireAbility,
    Move,
    SelectTarget,
)
from roguechess.chess.clock import TimeControl
from roguechess.chess.engine import Resolution, resolve
from roguechess.chess.game import GameState
from roguechess.chess.square import Square
from roguechess.core.config import ROOM_CODE_LENGTH
from roguechess.core.exceptions import GameStateError, RepositoryError
from roguechess.core.models import GameModel
from roguechess.core.shared_types import Color
from roguechess.db.repository import RoomRepository

logger = logging.getLogger(__name__)

RoomListener = Callable[[str, GameModel], None]
Clock = Callable[[], float]


def generate_room_code(rng: random.Random) -> str:
    return "".join(rng.choices(ascii_uppercase + digits, k=ROOM_CODE_LENGTH))


def seeded_rng(room_code: str, version: int) -> random.Random:
    """Same room + same version -> same upgrades, whoever computes the turn."""
    digest = hashlib.sha256(f"{room_code}:{version}".encode()).hexdigest()
    return random.Random(int(digest, 16))


class RoomService:
    """Orchestration of layers for a room of augmented chess."""

    def __init__(
        self,
        repository: RoomRepository,
        clock: Clock = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self._clock = clock
        self._rng = rng or random.Random()
        self._listeners: dict[str, list[RoomListener]] = defaultdict(list)

    # -- Room lifecycle ---
    def create_room(self, request: CreateRoomRequest) -> RoomResponse:
        """Open a new room with the requested time control."""
        room_code = generate_room_code(self._rng)
        time_control = TimeControl(
            base=request.base_seconds, increment=request.increment_seconds
        )
        new_game = GameState.new_game(time_control).to_model()
        stored = self.repo.create_room(room_code, new_game)
        logger.info(
            "Created room %s (%gs + %gs)",
            room_code,
            time_control.base,
            time_control.increment,
        )
        return self._create_room_response(room_code, stored)

    def get_room(self, request: GetRoomRequest) -> RoomResponse:
        """
        Retrieve current game state.
        ----
        Also used by clients that missed a change notification.
        """
        return self._create_room_response(
            request.room_code, self._fetch_room(request.room_code)
        )

    def delete_room(self, request: DeleteRoomRequest) -> None:
        self.repo.delete_room(request.room_code)
        self._listeners.pop(request.room_code, None)

    # -- Lobby ---
    def claim_color(self, request: ClaimColorRequest) -> RoomResponse:
        """First claim wins: each color can be taken by exactly one player."""
        model = self._fetch_room(request.room_code)
        if model.players.get(request.color.value):
            raise GameStateError(f"Color {request.color.value} is already taken.")
        model.players[request.color.value] = True
        return self._commit_lobby(request.room_code, model)

    def release_color(self, request: ReleaseColorRequest) -> RoomResponse:
        """The player aborted: the color becomes available again."""
        model = self._fetch_room(request.room_code)
        model.players[request.color.value] = False
        return self._commit_lobby(request.room_code, model)

    # -- Game actions ---
    def make_move(self, request: MoveRequest) -> RoomResponse:
        action = Move(
            color=request.color,
            from_square=Square.from_algebraic(request.from_square),
            to_square=Square.from_algebraic(request.to_square),
        )
        return self._act(request.room_code, action)

    def fire_ability(self, request: AbilityRequest) -> RoomResponse:
        action = FireAbility(
            color=request.color, square=Square.from_algebraic(request.square)
        )
        return self._act(request.room_code, action)

    def select_target(self, request: TargetRequest) -> RoomResponse:
        action = SelectTarget(
            color=request.color, square=Square.from_algebraic(request.square)
        )
        return self._act(request.room_code, action)

    def cancel_ability(self, request: CancelRequest) -> RoomResponse:
        return self._act(request.room_code, CancelAbility(color=request.color))

    def claim_timeout(self, request: TimeoutRequest) -> RoomResponse:
        return self._act(request.room_code, ClaimTimeout(color=request.color))

    # -- Change notification ---
    def subscribe(self, room_code: str, listener: RoomListener) -> Callable[[], None]:
        """Get called with every committed document of the room. Returns the unsubscribe function."""
        self._listeners[room_code].append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners.get(room_code, []):
                self._listeners[room_code].remove(listener)

        return _unsubscribe

    # -- Internal helpers --
    def _act(self, room_code: str, action: Action) -> RoomResponse:
        """Load, resolve, commit with a version check, notify."""
        stored_model = self._fetch_room(room_code)
        state = GameState.from_model(stored_model)

        resolution: Resolution = resolve(
            state,
            action,
            now=self._clock(),
            rng=seeded_rng(room_code, state.version),
        )

        after_action = resolution.state.to_model()
        committed = self.repo.update_room(
            room_code, after_action, expected_version=stored_model.version
        )
        if committed is None:
            raise RepositoryError(f"Room {room_code} disappeared while playing.")

        self._publish(room_code, committed)
        return self._create_room_response(
            room_code, committed, resolution.text, resolution.is_capture
        )

    def _commit_lobby(self, room_code: str, model: GameModel) -> RoomResponse:
        expected_version = model.version
        model.version += 1
        committed = self.repo.update_room(room_code, model, expected_version)
        if committed is None:
            raise RepositoryError(f"Room {room_code} not found.")
        self._publish(room_code, committed)
        return self._create_room_response(room_code, committed)

    def _publish(self, room_code: str, model: GameModel) -> None:
        for listener in list(self._listeners.get(room_code, [])):
            listener(room_code, model)

    def _create_room_response(
        self,
        room_code: str,
        model: GameModel,
        last_action: Optional[str] = None,
        is_capture: bool = False,
    ) -> RoomResponse:
        """Convert info in GameModel to a RoomResponse"""
        return RoomResponse(
            room_code=room_code,
            fen=model.fen,
            turn=Color(model.turn),
            upgrades=model.upgrades,
            modifiers=model.modifiers,
            walls=model.walls,
            history=model.history,
            winner=Color(model.winner) if model.winner else None,
            time_config=model.time_config,
            time_left=model.time_left,
            mode=model.mode,
            players=model.players,
            version=model.version,
            last_action=last_action,
            is_capture=is_capture,
        )

    def _fetch_room(self, room_code: str) -> GameModel:
        """Attempt to find the room in the repository and raise error if it fails."""
        game_model = self.repo.get_room(room_code)
        if game_model is None:
            raise RepositoryError(f"Room {room_code!r} not found.")
        return game_model
