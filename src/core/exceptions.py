"""
Custom exceptions shared by all layers.

Every expected failure caused by caller input derives from GameError and carries an ErrorKind,
so the API layer can map it onto a status code without knowing the concrete class.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    FORBIDDEN = "forbidden"
    OUT_OF_BOUNDS = "out_of_bounds"
    CELL_OCCUPIED = "cell_occupied"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"


class GameError(Exception):
    """Top level exception for all (recoverable) errors."""

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR


# --- NOT FOUND ---
class NotFoundError(GameError):
    kind = ErrorKind.NOT_FOUND


class GameNotFoundError(NotFoundError):
    pass


class PlayerNotFoundError(NotFoundError):
    pass


# --- STATE / TURN ---
class GameStateError(GameError):
    """Operation is not allowed for the current status of the game."""

    kind = ErrorKind.INVALID_STATE


class NotYourTurnError(GameError):
    kind = ErrorKind.FORBIDDEN


# --- MOVES ---
class IllegalMoveError(GameError):
    """Base class for moves the engine refuses to apply."""


class OutOfBoundsError(IllegalMoveError):
    kind = ErrorKind.OUT_OF_BOUNDS


class CellOccupiedError(IllegalMoveError):
    kind = ErrorKind.CELL_OCCUPIED


# --- INPUT ---
class ConflictError(GameError):
    """Duplicate join, full game, duplicate email..."""

    kind = ErrorKind.CONFLICT


class InvalidRequestError(GameError):
    kind = ErrorKind.VALIDATION_ERROR


class RepositoryError(GameError):
    """Persistence layer could not find / store a record."""

    kind = ErrorKind.NOT_FOUND


# --- FATAL ---
class InternalConsistencyError(RuntimeError):
    """
    A game invariant got broken (ex. the player to move is not one of the participants).
    NOT a GameError: this is a bug, not something a caller can fix by sending a different request.
    """
