"""Protocol repository for player records (implemented with SQL Alchemy, tests use a dictionary)"""

from typing import Protocol

from src.core.models import PlayerModel, PlayerStats


class PlayerRepository(Protocol):
    """Persistence layer orchestration"""

    def get_player(self, player_id: str) -> PlayerModel | None:
        """Get player by ID, if record exists."""
        ...

    def get_player_by_email(self, email: str) -> PlayerModel | None:
        """Emails are unique, so at most one record matches."""
        ...

    def list_players(self) -> list[PlayerModel]:
        """All player records (unsorted)."""
        ...

    def create_player(self, name: str, email: str) -> PlayerModel:
        """Store new player and return the stored data, including the newly created ID. Duplicate email: ConflictError."""
        ...

    def update_player(
        self, player_id: str, name: str, email: str
    ) -> PlayerModel | None:
        """Change profile fields of an existing record. Email taken by another record: ConflictError."""
        ...

    def update_stats(self, player_id: str, stats: PlayerStats) -> PlayerModel | None:
        """Overwrite the stored counters."""
        ...

    def delete_player(self, player_id: str) -> PlayerModel | None:
        """Remove a player's record."""
        ...
