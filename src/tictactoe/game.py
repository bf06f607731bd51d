"""
The Game class is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating the rules (engine.py) required to join a game and play a turn -->
the registry (service layer) decides when and on which copy these methods run, and stores the result.
"""

from __future__ import annotations

import time
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from src.core.exceptions import (
    ConflictError,
    GameStateError,
    InternalConsistencyError,
    NotYourTurnError,
)
from src.core.models import GameFinishedEvent
from src.core.shared_types import Status
from src.tictactoe import engine
from src.tictactoe.board import Board
from src.tictactoe.engine import WinResult
from src.tictactoe.square import Square

MAX_PLAYERS = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_game_name() -> str:
    return f"Game-{time.time_ns() // 1_000_000}"


@dataclass(frozen=True)
class Move:
    """A single applied move. Never changed after creation."""

    game_id: UUID
    player_id: str
    row: int
    col: int
    sequence: int
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def square(self) -> Square:
        return Square(self.row, self.col)


@dataclass(frozen=True)
class GameStats:
    total_moves: int
    duration_ms: float
    average_move_time_ms: float


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    id: UUID
    name: str
    status: Status
    board: Board
    players: list[str] = field(default_factory=list)
    current_player_id: Optional[str] = None
    winner_id: Optional[str] = None
    win_result: Optional[WinResult] = None
    moves: list[Move] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new_game(cls, name: Optional[str] = None) -> Game:
        """Fresh game, waiting for two players to join."""
        now = utc_now()
        return cls(
            id=uuid4(),
            name=name or default_game_name(),
            status=Status.WAITING,
            board=Board.empty(),
            created_at=now,
            updated_at=now,
        )

    def copy(self) -> Game:
        """Independent copy to mutate: the original stays exactly as it was if the mutation fails halfway."""
        return deepcopy(self)

    def register_player(self, player_id: str) -> None:
        """Add a participant. The second one to join starts the game, and the first one to join moves first."""
        if len(self.players) >= MAX_PLAYERS:
            raise ConflictError("Game is full.")
        if self.status != Status.WAITING:
            raise GameStateError(
                f"Game is not accepting new players. status: {self.status}"
            )
        if player_id in self.players:
            raise ConflictError(f"Player {player_id} already joined this game.")

        self.players.append(player_id)
        if len(self.players) == MAX_PLAYERS:
            self.status = Status.ACTIVE
            self.current_player_id = self.players[0]
        self._touch()

    def legal_moves(self) -> list[Square]:
        """Empty cells of an active game."""
        self._assert_active()
        return engine.valid_moves(self.board)

    def make_move(self, player_id: str, row: int, col: int) -> Move:
        """
        Attempt to make a move
        -----
        1. make sure the game is active
        2. make sure it is your turn
        3. let the engine validate the cell and update the board
        4. record the move
        5. exactly one of: win / draw / hand the turn to the opponent
        """
        self._assert_active()
        self._assert_your_turn(player_id)

        self.board = engine.apply_move(self.board, player_id, row, col)

        move = Move(
            game_id=self.id,
            player_id=player_id,
            row=row,
            col=col,
            sequence=len(self.moves),
        )
        self.moves.append(move)

        result = engine.check_win(self.board, player_id)
        if result.won:
            self.status = Status.COMPLETED
            self.winner_id = player_id
            self.win_result = result
            self.current_player_id = None
        elif engine.is_draw(self.board):
            self.status = Status.DRAW
            self.current_player_id = None
        else:
            self.current_player_id = engine.next_player(self.players, player_id)

        self._touch()
        self._assert_consistent()
        return move

    def move_counts(self) -> dict[str, int]:
        counts = {player: 0 for player in self.players}
        for move in self.moves:
            counts[move.player_id] = counts.get(move.player_id, 0) + 1
        return counts

    def finished_event(self) -> Optional[GameFinishedEvent]:
        """Only a game in a terminal status has something to report."""
        if not self.status.is_terminal:
            return None
        return GameFinishedEvent(
            game_id=self.id,
            status=self.status,
            winner_id=self.winner_id,
            move_counts=self.move_counts(),
        )

    def stats(self) -> GameStats:
        total_moves = len(self.moves)
        duration_ms = (self.updated_at - self.created_at).total_seconds() * 1000
        average = duration_ms / total_moves if total_moves > 0 else 0.0
        return GameStats(
            total_moves=total_moves,
            duration_ms=duration_ms,
            average_move_time_ms=average,
        )

    def has_player(self, player_id: str) -> bool:
        return player_id in self.players

    # -- PRIVATE HELPERS ---
    def _touch(self) -> None:
        self.updated_at = utc_now()

    def _assert_active(self) -> None:
        if self.status != Status.ACTIVE:
            raise GameStateError(f"Game is not active. status: {self.status}")

    def _assert_your_turn(self, player_id: str) -> None:
        if player_id != self.current_player_id:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.current_player_id} to make a move first."
            )

    def _assert_consistent(self) -> None:
        """Invariants that only a bug could break."""
        if len(self.moves) != self.board.occupied_count():
            raise InternalConsistencyError(
                f"Game {self.id}: {len(self.moves)} moves recorded but {self.board.occupied_count()} cells occupied."
            )
        if (self.current_player_id is not None) != (self.status == Status.ACTIVE):
            raise InternalConsistencyError(
                f"Game {self.id}: current player {self.current_player_id!r} does not match status {self.status}."
            )
        if (self.winner_id is not None) != (self.status == Status.COMPLETED):
            raise InternalConsistencyError(
                f"Game {self.id}: winner {self.winner_id!r} does not match status {self.status}."
            )
