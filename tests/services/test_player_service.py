"""Unit tests for src/services/player_service.py"""

from typing import Generator
from uuid import uuid4

import pytest

from src.core.exceptions import (
    ConflictError,
    InvalidRequestError,
    PlayerNotFoundError,
)
from src.core.models import GameFinishedEvent, PlayerModel, PlayerStats
from src.core.shared_types import LeaderboardType, Status
from src.services.game_registry import GameRegistry
from src.services.player_service import PlayerService


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the PlayerRepository using a dictionary of player models."""

    def __init__(self) -> None:
        self._players: dict[str, PlayerModel] = {}

    def get_player(self, player_id: str) -> PlayerModel | None:
        return self._players.get(player_id)

    def get_player_by_email(self, email: str) -> PlayerModel | None:
        return next((p for p in self._players.values() if p.email == email), None)

    def list_players(self) -> list[PlayerModel]:
        return list(self._players.values())

    def create_player(self, name: str, email: str) -> PlayerModel:
        player = PlayerModel(id=str(uuid4()), name=name, email=email)
        self._players[player.id] = player
        return player

    def update_player(
        self, player_id: str, name: str, email: str
    ) -> PlayerModel | None:
        player = self._players.get(player_id)
        if player is None:
            return None
        player.name = name
        player.email = email
        return player

    def update_stats(self, player_id: str, stats: PlayerStats) -> PlayerModel | None:
        player = self._players.get(player_id)
        if player is None:
            return None
        player.stats = stats
        return player

    def delete_player(self, player_id: str) -> PlayerModel | None:
        return self._players.pop(player_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._players.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> PlayerService:
    return PlayerService(mock_repository)


def finished(
    status: Status, winner: str | None, move_counts: dict[str, int]
) -> GameFinishedEvent:
    return GameFinishedEvent(
        game_id=uuid4(), status=status, winner_id=winner, move_counts=move_counts
    )


# --- PLAYER RECORDS ---
def test_create_player_normalizes(service: PlayerService) -> None:
    player = service.create_player("  Mocker M. Mockerson ", " Mocker@Example.COM ")
    assert player.name == "Mocker M. Mockerson"
    assert player.email == "mocker@example.com"
    assert service.player_exists(player.id)
    assert service.get_player(player.id) == player


@pytest.mark.parametrize(
    "name, email",
    [
        ("", "a@b.co"),
        ("   ", "a@b.co"),
        ("x" * 101, "a@b.co"),
        ("Mock", "not-an-email"),
        ("Mock", "two words@b.co"),
        ("Mock", "missing@tld"),
    ],
)
def test_create_player_invalid_input(service: PlayerService, name: str, email: str) -> None:
    with pytest.raises(InvalidRequestError):
        service.create_player(name, email)


def test_duplicate_email(service: PlayerService) -> None:
    service.create_player("Mock", "mock@example.com")
    with pytest.raises(ConflictError):
        service.create_player("Mock McMock", "MOCK@example.com")


def test_unknown_player(service: PlayerService) -> None:
    assert not service.player_exists("nobody")
    with pytest.raises(PlayerNotFoundError):
        service.get_player("nobody")
    with pytest.raises(PlayerNotFoundError):
        service.delete_player("nobody")
    with pytest.raises(PlayerNotFoundError):
        service.update_player("nobody", name="x")


def test_update_player(service: PlayerService) -> None:
    player = service.create_player("Mock", "mock@example.com")
    updated = service.update_player(player.id, name="Mock McMock")
    assert updated.name == "Mock McMock"
    assert updated.email == "mock@example.com"

    updated = service.update_player(player.id, email="New@Example.com")
    assert updated.email == "new@example.com"


def test_update_email_taken(service: PlayerService) -> None:
    first = service.create_player("First", "first@example.com")
    service.create_player("Second", "second@example.com")
    with pytest.raises(ConflictError):
        service.update_player(first.id, email="second@example.com")
    # keeping your own email is fine
    assert service.update_player(first.id, email="first@example.com").email == "first@example.com"


def test_delete_player(service: PlayerService) -> None:
    player = service.create_player("Mock", "mock@example.com")
    service.delete_player(player.id)
    assert not service.player_exists(player.id)


def test_search_players(service: PlayerService) -> None:
    service.create_player("Alice", "alice@example.com")
    service.create_player("Malice", "malice@example.com")
    service.create_player("Bob", "bob@example.com")
    assert sorted(p.name for p in service.search_players("ALIC")) == ["Alice", "Malice"]
    assert len(service.search_players("lic", limit=1)) == 1
    with pytest.raises(InvalidRequestError):
        service.search_players("  ")
    with pytest.raises(InvalidRequestError):
        service.search_players("a", limit=0)


# --- STATISTICS ---
def test_record_win_and_loss(service: PlayerService) -> None:
    winner = service.create_player("Winner", "w@example.com")
    loser = service.create_player("Loser", "l@example.com")

    service.record_game_finished(
        finished(Status.COMPLETED, winner.id, {winner.id: 3, loser.id: 2})
    )

    w = service.get_player(winner.id).stats
    lost = service.get_player(loser.id).stats
    assert (w.games_played, w.games_won, w.games_lost, w.games_drawn) == (1, 1, 0, 0)
    assert (lost.games_played, lost.games_won, lost.games_lost, lost.games_drawn) == (1, 0, 1, 0)
    assert w.total_moves == 3
    assert lost.total_moves == 2
    assert w.win_rate == pytest.approx(100.0)
    assert w.efficiency == pytest.approx(1 / 3)
    assert w.average_moves_per_win == pytest.approx(3.0)
    assert lost.win_rate == 0
    assert lost.efficiency == 0
    assert lost.average_moves_per_win == 0


def test_record_draw(service: PlayerService) -> None:
    a = service.create_player("A", "a@example.com")
    b = service.create_player("B", "b@example.com")
    service.record_game_finished(finished(Status.DRAW, None, {a.id: 5, b.id: 4}))
    for player_id in (a.id, b.id):
        stats = service.get_player(player_id).stats
        assert stats.games_drawn == 1
        assert stats.games_played == 1
        assert stats.games_won == 0


def test_record_skips_unknown_player(service: PlayerService) -> None:
    a = service.create_player("A", "a@example.com")
    service.record_game_finished(
        finished(Status.COMPLETED, a.id, {a.id: 3, "deleted-player": 2})
    )
    assert service.get_player(a.id).stats.games_won == 1


def test_leaderboard(service: PlayerService) -> None:
    champ = service.create_player("Champ", "champ@example.com")
    sharp = service.create_player("Sharp", "sharp@example.com")
    rookie = service.create_player("Rookie", "rookie@example.com")
    service.create_player("Idle", "idle@example.com")

    # champ: 2 wins in 10 moves, sharp: 1 win in 3 moves, rookie: 0 wins
    service.record_game_finished(
        finished(Status.COMPLETED, champ.id, {champ.id: 5, rookie.id: 4})
    )
    service.record_game_finished(
        finished(Status.COMPLETED, champ.id, {champ.id: 5, rookie.id: 4})
    )
    service.record_game_finished(
        finished(Status.COMPLETED, sharp.id, {sharp.id: 3, rookie.id: 2})
    )

    by_wins = service.leaderboard(LeaderboardType.WINS)
    assert [p.name for p in by_wins] == ["Champ", "Sharp", "Rookie"]

    by_efficiency = service.leaderboard(LeaderboardType.EFFICIENCY)
    assert [p.name for p in by_efficiency] == ["Sharp", "Champ", "Rookie"]

    assert len(service.leaderboard(limit=1)) == 1


@pytest.mark.parametrize("limit", [0, 101, -5])
def test_leaderboard_limit(service: PlayerService, limit: int) -> None:
    with pytest.raises(InvalidRequestError):
        service.leaderboard(limit=limit)


def test_list_players_ordered_by_wins(service: PlayerService) -> None:
    a = service.create_player("A", "a@example.com")
    b = service.create_player("B", "b@example.com")
    service.record_game_finished(finished(Status.COMPLETED, b.id, {a.id: 2, b.id: 3}))
    assert [p.id for p in service.list_players()] == [b.id, a.id]


# --- REGISTRY + PLAYER SERVICE ---
def test_registry_feeds_stats(service: PlayerService) -> None:
    """End to end through the event: the registry never touches stats itself."""
    registry = GameRegistry(player_directory=service)
    registry.subscribe(service.record_game_finished)

    a = service.create_player("A", "a@example.com")
    b = service.create_player("B", "b@example.com")
    game = registry.create_game("G1")
    registry.join_game(game.id, a.id)
    registry.join_game(game.id, b.id)
    for player_id, row, col in [
        (a.id, 0, 0),
        (b.id, 1, 0),
        (a.id, 0, 1),
        (b.id, 1, 1),
        (a.id, 0, 2),
    ]:
        registry.make_move(game.id, player_id, row, col)

    assert service.get_player(a.id).stats.games_won == 1
    assert service.get_player(b.id).stats.games_lost == 1
    assert service.get_player(a.id).stats.total_moves == 3

    with pytest.raises(PlayerNotFoundError):
        registry.join_game(registry.create_game().id, "stranger")
