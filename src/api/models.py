"""Requests and Response models"""

from datetime import datetime
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import PlayerModel
from src.core.shared_types import LeaderboardType, Status, WinCondition
from src.tictactoe.game import Game, GameStats, Move
from src.tictactoe.square import Square

PlayerId = str
Cell = Optional[PlayerId]


def _non_empty(value: str, field_name: str) -> str:
    if not value.strip():
        raise InvalidRequestError(f"{field_name} must be a non-empty string.")
    return value.strip()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    name: Optional[str] = None


class JoinGameRequest(BaseModel):
    player_id: PlayerId

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, value: str) -> str:
        return _non_empty(value, "player_id")


class MakeMoveRequest(BaseModel):
    """row / col bounds are left to the engine, which reports them as an out of bounds move."""

    player_id: PlayerId
    row: int
    col: int

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, value: str) -> str:
        return _non_empty(value, "player_id")


class CreatePlayerRequest(BaseModel):
    name: str
    email: str


class UpdatePlayerRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


# --- RESPONSE MODELS ---
class SquareResponse(BaseModel):
    row: int
    col: int

    @classmethod
    def from_square(cls, square: Square) -> Self:
        return cls(row=square.row, col=square.col)


class MoveResponse(BaseModel):
    id: UUID
    game_id: UUID
    player_id: PlayerId
    row: int
    col: int
    sequence: int
    timestamp: datetime

    @classmethod
    def from_move(cls, move: Move) -> Self:
        return cls(
            id=move.id,
            game_id=move.game_id,
            player_id=move.player_id,
            row=move.row,
            col=move.col,
            sequence=move.sequence,
            timestamp=move.timestamp,
        )


class WinResultResponse(BaseModel):
    condition: WinCondition
    index: int


class GameResponse(BaseModel):
    id: UUID
    name: str
    status: Status
    board: list[list[Cell]]
    players: list[PlayerId]
    current_player_id: Optional[PlayerId]
    winner_id: Optional[PlayerId]
    win_result: Optional[WinResultResponse]
    moves: list[MoveResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_game(cls, game: Game) -> Self:
        win_result = None
        if game.win_result is not None and game.win_result.won:
            win_result = WinResultResponse(
                condition=game.win_result.condition, index=game.win_result.index
            )
        return cls(
            id=game.id,
            name=game.name,
            status=game.status,
            board=game.board.to_rows(),
            players=list(game.players),
            current_player_id=game.current_player_id,
            winner_id=game.winner_id,
            win_result=win_result,
            moves=[MoveResponse.from_move(move) for move in game.moves],
            created_at=game.created_at,
            updated_at=game.updated_at,
        )


class GameEnvelope(BaseModel):
    game: GameResponse
    message: Optional[str] = None


class GameListResponse(BaseModel):
    games: list[GameResponse]
    count: int


class GameStatusResponse(BaseModel):
    """Slim version of GameResponse, used in a "polling" loop by the frontend."""

    id: UUID
    status: Status
    board: list[list[Cell]]
    current_player_id: Optional[PlayerId]
    winner_id: Optional[PlayerId]
    players: list[PlayerId]

    @classmethod
    def from_game(cls, game: Game) -> Self:
        return cls(
            id=game.id,
            status=game.status,
            board=game.board.to_rows(),
            current_player_id=game.current_player_id,
            winner_id=game.winner_id,
            players=list(game.players),
        )


class MakeMoveResponse(BaseModel):
    game: GameResponse
    move: MoveResponse
    message: str


class ValidMovesResponse(BaseModel):
    valid_moves: list[SquareResponse]
    count: int


class GameStatsResponse(BaseModel):
    total_moves: int
    duration_ms: float
    average_move_time_ms: float

    @classmethod
    def from_stats(cls, stats: GameStats) -> Self:
        return cls(
            total_moves=stats.total_moves,
            duration_ms=stats.duration_ms,
            average_move_time_ms=stats.average_move_time_ms,
        )


class OverviewResponse(BaseModel):
    active_games: int
    waiting_games: int
    completed_games: int
    draw_games: int
    total_games: int

    @classmethod
    def from_counts(cls, counts: dict[Status, int]) -> Self:
        return cls(
            active_games=counts[Status.ACTIVE],
            waiting_games=counts[Status.WAITING],
            completed_games=counts[Status.COMPLETED],
            draw_games=counts[Status.DRAW],
            total_games=sum(counts.values()),
        )


class PlayerStatsResponse(BaseModel):
    games_played: int
    games_won: int
    games_lost: int
    games_drawn: int
    total_moves: int
    win_rate: float
    efficiency: float
    average_moves_per_win: float


class PlayerResponse(BaseModel):
    id: PlayerId
    name: str
    email: str
    stats: PlayerStatsResponse
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_model(cls, model: PlayerModel) -> Self:
        stats = model.stats
        return cls(
            id=model.id,
            name=model.name,
            email=model.email,
            stats=PlayerStatsResponse(
                games_played=stats.games_played,
                games_won=stats.games_won,
                games_lost=stats.games_lost,
                games_drawn=stats.games_drawn,
                total_moves=stats.total_moves,
                win_rate=stats.win_rate,
                efficiency=stats.efficiency,
                average_moves_per_win=stats.average_moves_per_win,
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class LeaderboardEntry(BaseModel):
    player_id: PlayerId
    player_name: str
    wins: int
    efficiency: float
    win_rate: float

    @classmethod
    def from_model(cls, model: PlayerModel) -> Self:
        return cls(
            player_id=model.id,
            player_name=model.name,
            wins=model.stats.games_won,
            efficiency=model.stats.efficiency,
            win_rate=model.stats.win_rate,
        )


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardEntry]
    type: LeaderboardType


class ErrorResponse(BaseModel):
    error: str
    message: str
    status_code: int
    timestamp: datetime
    path: str
