"""
Custom exceptions.

Every error the domain, persistence or request layers raise derives from GameError,
so the service (and whatever sits on top of it) can catch one type.
All of them are recoverable: a rejected action never changes the stored game.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while playing a game."""


# --- Rule engine ---
class InvalidMoveError(GameError):
    """Illegal by the base chess rules, blocked by a wall, or not your piece."""


class InvalidAbilityTargetError(GameError):
    """Wrong target for the ability that is waiting for one (or no ability to fire)."""


class OutOfTimeError(GameError):
    """The acting side has no time left on the clock."""


class NoSpawnSpaceError(GameError):
    """No empty square left to place an upgrade on. Never fatal."""


class NotYourTurnError(GameError):
    """Wait for your opponent to finish first."""


class GameStateError(GameError):
    """The game is in a state that does not allow the requested action."""


class InvalidSquareError(GameError):
    """Square name that does not exist on an 8x8 board."""


class InvalidFENError(GameError):
    """String cannot be interpreted as a FEN."""


# --- Request layer ---
class InvalidRequestError(GameError):
    """Request data that fails validation."""


# --- Persistence layer ---
class RepositoryError(GameError):
    """Record not found (or cannot be written)."""


class StaleStateError(RepositoryError):
    """Somebody else committed to the room in between. Reload and retry."""
