"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.COMPLETED, Status.DRAW)


class WinCondition(StrEnum):
    ROW = "row"
    COLUMN = "column"
    DIAGONAL = "diagonal"


class GameResult(StrEnum):
    """Outcome of a finished game, seen from one player."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class LeaderboardType(StrEnum):
    WINS = "wins"
    EFFICIENCY = "efficiency"
