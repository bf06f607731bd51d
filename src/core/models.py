"""
Boundary layer data model(s).

These objects can be used to communicate with the Services.
The registry publishes GameFinishedEvent, the player service consumes it,
and PlayerModel is what the player repository hands back to the player service.
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.core.shared_types import GameResult, Status

# Type aliases to make the models easier to read
PlayerId = str


@dataclass(frozen=True)
class GameFinishedEvent:
    """Emitted exactly once when a game reaches a terminal status."""

    game_id: UUID
    status: Status
    winner_id: PlayerId | None
    move_counts: dict[PlayerId, int]

    def result_for(self, player_id: PlayerId) -> GameResult:
        if self.status == Status.DRAW:
            return GameResult.DRAW
        return GameResult.WIN if player_id == self.winner_id else GameResult.LOSS


@dataclass
class PlayerStats:
    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    games_drawn: int = 0
    total_moves: int = 0

    @property
    def win_rate(self) -> float:
        """Percentage of played games that were won."""
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played * 100

    @property
    def efficiency(self) -> float:
        """Wins per move (higher is better)."""
        if self.total_moves == 0:
            return 0.0
        return self.games_won / self.total_moves

    @property
    def average_moves_per_win(self) -> float:
        if self.games_won == 0:
            return 0.0
        return self.total_moves / self.games_won

    def record(self, result: GameResult, moves: int) -> None:
        self.games_played += 1
        self.total_moves += moves
        match result:
            case GameResult.WIN:
                self.games_won += 1
            case GameResult.LOSS:
                self.games_lost += 1
            case GameResult.DRAW:
                self.games_drawn += 1


@dataclass
class PlayerModel:
    """Transport-safe representation of a player used between API, Service and DB layers."""

    id: PlayerId
    name: str
    email: str
    stats: PlayerStats = field(default_factory=PlayerStats)
    created_at: datetime | None = None
    updated_at: datetime | None = None
