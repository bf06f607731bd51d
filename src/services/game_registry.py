"""
Owner of all games for the lifetime of the process.

Orchestrates the domain layer (Game) and guarantees that state-changing calls on the same game run one at a time,
while calls on different games never wait for each other.
"""

import logging
from contextlib import contextmanager
from itertools import count
from threading import Lock
from typing import Callable, Iterator, Optional, Protocol
from uuid import UUID

from src.core.exceptions import (
    ConflictError,
    GameNotFoundError,
    GameStateError,
    InvalidRequestError,
    PlayerNotFoundError,
)
from src.core.models import GameFinishedEvent
from src.core.shared_types import Status
from src.tictactoe.game import Game, GameStats, Move
from src.tictactoe.square import Square

logger = logging.getLogger(__name__)

DEFAULT_MAX_NAME_LENGTH = 100

GameFinishedListener = Callable[[GameFinishedEvent], None]


class PlayerDirectory(Protocol):
    """The only thing the registry needs to know about players."""

    def player_exists(self, player_id: str) -> bool: ...


class GameRegistry:
    """
    In-memory collection of games with one lock per game id.
    ----
    Stored games are never mutated in place: a mutation works on a copy and replaces the stored game when it succeeds.
    Readers therefore need no lock and always see either the state before or after a transition.
    Callers only ever receive copies.
    """

    def __init__(
        self,
        player_directory: Optional[PlayerDirectory] = None,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
    ) -> None:
        self.player_directory = player_directory
        self.max_name_length = max_name_length
        self._games: dict[UUID, Game] = {}
        self._locks: dict[UUID, Lock] = {}
        self._locks_guard = Lock()
        # short section shared by all joins: "is this player already in another active game?" + publish
        self._membership_lock = Lock()
        self._listeners: list[GameFinishedListener] = []
        # creation order, breaks ties between games created within the same clock tick
        self._created_order: dict[UUID, int] = {}
        self._counter = count()

    def subscribe(self, listener: GameFinishedListener) -> None:
        """Be notified once for every game that ends in a win or a draw."""
        self._listeners.append(listener)

    # --- STATE CHANGING OPERATIONS ---
    def create_game(self, name: Optional[str] = None) -> Game:
        clean_name = name.strip() if name is not None else None
        if clean_name is not None and len(clean_name) > self.max_name_length:
            raise InvalidRequestError(
                f"Game name must be {self.max_name_length} characters or less."
            )

        game = Game.new_game(clean_name)
        # brand new id: nobody else can reach it yet
        self._created_order[game.id] = next(self._counter)
        self._games[game.id] = game
        logger.info("Game created: %s (%s)", game.id, game.name)
        return game.copy()

    def join_game(self, game_id: UUID, player_id: str) -> Game:
        self._require(game_id)
        if self.player_directory is not None and not self.player_directory.player_exists(
            player_id
        ):
            raise PlayerNotFoundError(f"Player {player_id} not found.")

        with self._exclusive(game_id):
            current = self._require(game_id)
            updated = current.copy()
            # membership across games: the check and the publish must not interleave with another join
            with self._membership_lock:
                if current.status == Status.WAITING and self._in_other_active_game(
                    player_id, game_id
                ):
                    raise ConflictError(
                        f"Player {player_id} is already in an active game."
                    )
                updated.register_player(player_id)
                self._games[game_id] = updated

        logger.info(
            "Player %s joined game %s (status: %s)", player_id, game_id, updated.status
        )
        return updated.copy()

    def make_move(
        self, game_id: UUID, player_id: str, row: int, col: int
    ) -> tuple[Game, Move]:
        with self._exclusive(game_id):
            current = self._require(game_id)
            updated = current.copy()
            move = updated.make_move(player_id, row, col)
            self._games[game_id] = updated

        logger.info(
            "Player %s moved at (%d, %d) in game %s (move #%d)",
            player_id,
            row,
            col,
            game_id,
            move.sequence,
        )
        event = updated.finished_event()
        if event is not None:
            logger.info(
                "Game %s finished: %s (winner: %s)",
                game_id,
                event.status,
                event.winner_id,
            )
            self._publish(event)
        return updated.copy(), move

    def delete_game(self, game_id: UUID) -> None:
        """In-progress games are protected. Waiting and finished games can be removed."""
        with self._exclusive(game_id):
            current = self._require(game_id)
            if current.status == Status.ACTIVE:
                raise GameStateError("Cannot delete an active game.")
            with self._locks_guard:
                del self._games[game_id]
                self._locks.pop(game_id, None)
            self._created_order.pop(game_id, None)

        logger.info("Game deleted: %s", game_id)

    # --- READ ONLY OPERATIONS ---
    def get_game(self, game_id: UUID) -> Game:
        return self._require(game_id).copy()

    def list_games(self, status: Optional[Status] = None) -> list[Game]:
        """Newest game first."""
        games = [
            game
            for game in list(self._games.values())
            if status is None or game.status == status
        ]
        games.sort(
            key=lambda game: (game.created_at, self._created_order.get(game.id, 0)),
            reverse=True,
        )
        return [game.copy() for game in games]

    def list_games_for_player(self, player_id: str) -> list[Game]:
        return [game for game in self.list_games() if game.has_player(player_id)]

    def get_valid_moves(self, game_id: UUID) -> list[Square]:
        return self._require(game_id).legal_moves()

    def get_game_stats(self, game_id: UUID) -> GameStats:
        return self._require(game_id).stats()

    def count_games(self) -> dict[Status, int]:
        counts = {status: 0 for status in Status}
        for game in list(self._games.values()):
            counts[game.status] += 1
        return counts

    # -- Internal helpers --
    def _require(self, game_id: UUID) -> Game:
        """Stored (published) game. Never hand this object out without copying it."""
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game

    def _lock_for(self, game_id: UUID) -> Lock:
        """Locks are only handed out for stored games, so a deleted id never gets its entry back."""
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                self._require(game_id)
                lock = self._locks[game_id] = Lock()
            return lock

    @contextmanager
    def _exclusive(self, game_id: UUID) -> Iterator[None]:
        """Critical section for one game id. Keep it free of I/O: only pure computation happens inside."""
        with self._lock_for(game_id):
            yield

    def _in_other_active_game(self, player_id: str, game_id: UUID) -> bool:
        return any(
            game.status == Status.ACTIVE and game.has_player(player_id)
            for other_id, game in list(self._games.items())
            if other_id != game_id
        )

    def _publish(self, event: GameFinishedEvent) -> None:
        """A failing listener does not undo the move, nor stop the other listeners."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Game finished listener %r failed for game %s", listener, event.game_id
                )
