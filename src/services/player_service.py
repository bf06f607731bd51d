"""Player records, statistics and leaderboards. Fed by the registry's game-finished events."""

import logging
import re
from threading import Lock
from typing import Optional

from src.core.exceptions import (
    ConflictError,
    InvalidRequestError,
    PlayerNotFoundError,
    RepositoryError,
)
from src.core.models import GameFinishedEvent, PlayerModel
from src.core.shared_types import LeaderboardType
from src.db.repository import PlayerRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_NAME_LENGTH = 100
MIN_LIMIT, MAX_LIMIT = 1, 100


class PlayerService:
    """Orchestration of the player repository."""

    def __init__(self, repository: PlayerRepository) -> None:
        self.repo = repository
        # counters are read-modify-write: two games of the same player may finish at the same time
        self._stats_lock = Lock()

    # --- PLAYER RECORDS ---
    def create_player(self, name: str, email: str) -> PlayerModel:
        clean_name = self._validate_name(name)
        clean_email = self._validate_email(email)
        if self.repo.get_player_by_email(clean_email) is not None:
            raise ConflictError(f"Player with email {clean_email} already exists.")

        player = self.repo.create_player(clean_name, clean_email)
        logger.info("Player created: %s (%s)", player.id, player.name)
        return player

    def get_player(self, player_id: str) -> PlayerModel:
        return self._fetch_player(player_id)

    def player_exists(self, player_id: str) -> bool:
        return self.repo.get_player(player_id) is not None

    def update_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> PlayerModel:
        player = self._fetch_player(player_id)
        new_name = self._validate_name(name) if name is not None else player.name
        new_email = player.email
        if email is not None:
            new_email = self._validate_email(email)
            existing = self.repo.get_player_by_email(new_email)
            if existing is not None and existing.id != player_id:
                raise ConflictError("Email is already in use by another player.")

        updated = self.repo.update_player(player_id, new_name, new_email)
        if updated is None:
            raise RepositoryError(f"Player {player_id} disappeared before the update.")
        logger.info("Player updated: %s", player_id)
        return updated

    def delete_player(self, player_id: str) -> None:
        if self.repo.delete_player(player_id) is None:
            raise PlayerNotFoundError(f"Player {player_id} not found.")
        logger.info("Player deleted: %s", player_id)

    def list_players(self) -> list[PlayerModel]:
        """Most wins first, ties broken by efficiency."""
        return sorted(
            self.repo.list_players(),
            key=lambda p: (p.stats.games_won, p.stats.efficiency),
            reverse=True,
        )

    def search_players(self, query: str, limit: int = 10) -> list[PlayerModel]:
        if not query or not query.strip():
            raise InvalidRequestError("Search query must be a non-empty string.")
        self._validate_limit(limit)

        needle = query.strip().lower()
        matches = [p for p in self.repo.list_players() if needle in p.name.lower()]
        matches.sort(key=lambda p: p.stats.games_won, reverse=True)
        return matches[:limit]

    # --- STATISTICS ---
    def record_game_finished(self, event: GameFinishedEvent) -> None:
        """Subscriber for GameRegistry: one result per participant."""
        with self._stats_lock:
            for player_id, moves in event.move_counts.items():
                player = self.repo.get_player(player_id)
                if player is None:
                    logger.warning(
                        "Skipping stats for unknown player %s (game %s)",
                        player_id,
                        event.game_id,
                    )
                    continue
                result = event.result_for(player_id)
                player.stats.record(result, moves)
                self.repo.update_stats(player_id, player.stats)
                logger.info(
                    "Updated stats for player %s: %s (game %s)",
                    player_id,
                    result,
                    event.game_id,
                )

    def leaderboard(
        self, by: LeaderboardType = LeaderboardType.WINS, limit: int = 10
    ) -> list[PlayerModel]:
        """Only players that finished at least one game are ranked."""
        self._validate_limit(limit)
        ranked = [p for p in self.repo.list_players() if p.stats.games_played > 0]
        if by == LeaderboardType.EFFICIENCY:
            ranked.sort(key=lambda p: p.stats.efficiency, reverse=True)
        else:
            ranked.sort(key=lambda p: p.stats.games_won, reverse=True)
        return ranked[:limit]

    # -- Internal helpers --
    def _fetch_player(self, player_id: str) -> PlayerModel:
        player = self.repo.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player {player_id} not found.")
        return player

    @staticmethod
    def _validate_name(name: str) -> str:
        clean = name.strip()
        if not clean:
            raise InvalidRequestError("Player name must be a non-empty string.")
        if len(clean) > MAX_NAME_LENGTH:
            raise InvalidRequestError(
                f"Player name must be {MAX_NAME_LENGTH} characters or less."
            )
        return clean

    @staticmethod
    def _validate_email(email: str) -> str:
        clean = email.strip().lower()
        if not EMAIL_PATTERN.match(clean):
            raise InvalidRequestError("Valid email address is required.")
        return clean

    @staticmethod
    def _validate_limit(limit: int) -> None:
        if not MIN_LIMIT <= limit <= MAX_LIMIT:
            raise InvalidRequestError(
                f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}."
            )
