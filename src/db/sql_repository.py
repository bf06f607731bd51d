"""Implementation of (Player)Repository using SQLAlchemy"""

from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.core.exceptions import ConflictError
from src.core.models import PlayerModel, PlayerStats
from src.db.schema import DBPlayer


class SQLPlayerRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_player(self, player_id: str) -> PlayerModel | None:
        """Get player by ID, if record exists."""
        player_db = self._fetch_player(player_id)
        if player_db:
            return self._to_model(player_db)
        return None

    def get_player_by_email(self, email: str) -> PlayerModel | None:
        query = select(DBPlayer).where(DBPlayer.email == email)
        player_db = self.db.scalar(query)
        if player_db:
            return self._to_model(player_db)
        return None

    def list_players(self) -> list[PlayerModel]:
        return [self._to_model(player_db) for player_db in self.db.scalars(select(DBPlayer))]

    def create_player(self, name: str, email: str) -> PlayerModel:
        """Store new player and return the stored data, including the newly created ID."""
        player_db = DBPlayer(id=str(uuid4()), name=name, email=email)
        self.db.add(player_db)
        self._commit(f"Player with email {email} already exists.")
        self.db.refresh(player_db)
        return self._to_model(player_db)

    def update_player(
        self, player_id: str, name: str, email: str
    ) -> PlayerModel | None:
        """Change profile fields of an existing record."""
        player_db = self._fetch_player(player_id)
        if not player_db:
            return None
        player_db.name = name
        player_db.email = email
        self._commit("Email is already in use by another player.")
        self.db.refresh(player_db)
        return self._to_model(player_db)

    def update_stats(self, player_id: str, stats: PlayerStats) -> PlayerModel | None:
        """Overwrite the stored counters."""
        player_db = self._fetch_player(player_id)
        if not player_db:
            return None
        player_db.games_played = stats.games_played
        player_db.games_won = stats.games_won
        player_db.games_lost = stats.games_lost
        player_db.games_drawn = stats.games_drawn
        player_db.total_moves = stats.total_moves
        self.db.commit()
        self.db.refresh(player_db)
        return self._to_model(player_db)

    def delete_player(self, player_id: str) -> PlayerModel | None:
        """Remove a player's record."""
        player_db = self._fetch_player(player_id)
        if not player_db:
            return None
        player_model = self._to_model(player_db)
        self.db.delete(player_db)
        self.db.commit()
        return player_model

    def _commit(self, conflict_message: str) -> None:
        """The unique email index is the final word when two writers pass the service's duplicate check at once."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(conflict_message) from e

    def _fetch_player(self, player_id: str) -> DBPlayer | None:
        query = select(DBPlayer).where(DBPlayer.id == player_id)
        return self.db.scalar(query)

    def _to_model(self, player_db: DBPlayer) -> PlayerModel:
        """Convert SQLAlchemy model to data transfer model."""
        return PlayerModel(
            id=player_db.id,
            name=player_db.name,
            email=player_db.email,
            stats=PlayerStats(
                games_played=player_db.games_played,
                games_won=player_db.games_won,
                games_lost=player_db.games_lost,
                games_drawn=player_db.games_drawn,
                total_moves=player_db.total_moves,
            ),
            created_at=player_db.created_at,
            updated_at=player_db.updated_at,
        )
