"""
HTTP routes. Kept thin: parse the request, call the registry / player service, wrap the result.

Routes are plain (sync) functions, so FastAPI runs them in its threadpool and concurrent requests
really do hit the registry from several threads at once.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response
from fastapi import status as http_status

from src.api.models import (
    CreatePlayerRequest,
    CreateGameRequest,
    GameEnvelope,
    GameListResponse,
    GameResponse,
    GameStatsResponse,
    GameStatusResponse,
    JoinGameRequest,
    LeaderboardEntry,
    LeaderboardResponse,
    MakeMoveRequest,
    MakeMoveResponse,
    MoveResponse,
    OverviewResponse,
    PlayerResponse,
    PlayerStatsResponse,
    SquareResponse,
    UpdatePlayerRequest,
    ValidMovesResponse,
)
from src.core.shared_types import LeaderboardType, Status
from src.services.game_registry import GameRegistry
from src.services.player_service import PlayerService


# --- DEPENDENCIES ---
def get_registry(request: Request) -> GameRegistry:
    return request.app.state.registry


def get_player_service(request: Request) -> PlayerService:
    return request.app.state.player_service


Registry = Annotated[GameRegistry, Depends(get_registry)]
Players = Annotated[PlayerService, Depends(get_player_service)]


# --- GAMES ---
games_router = APIRouter(prefix="/games", tags=["games"])


@games_router.post("", response_model=GameEnvelope, status_code=http_status.HTTP_201_CREATED)
def create_game(body: CreateGameRequest, registry: Registry) -> GameEnvelope:
    game = registry.create_game(body.name)
    return GameEnvelope(
        game=GameResponse.from_game(game), message="Game created successfully"
    )


@games_router.get("", response_model=GameListResponse)
def list_games(registry: Registry, status: Optional[Status] = None) -> GameListResponse:
    games = [GameResponse.from_game(game) for game in registry.list_games(status)]
    return GameListResponse(games=games, count=len(games))


@games_router.get("/stats/overview", response_model=OverviewResponse)
def overview(registry: Registry) -> OverviewResponse:
    return OverviewResponse.from_counts(registry.count_games())


@games_router.get("/{game_id}", response_model=GameEnvelope)
def get_game(game_id: UUID, registry: Registry) -> GameEnvelope:
    return GameEnvelope(game=GameResponse.from_game(registry.get_game(game_id)))


@games_router.get("/{game_id}/status", response_model=GameStatusResponse)
def get_game_status(game_id: UUID, registry: Registry) -> GameStatusResponse:
    return GameStatusResponse.from_game(registry.get_game(game_id))


@games_router.post("/{game_id}/join", response_model=GameEnvelope)
def join_game(game_id: UUID, body: JoinGameRequest, registry: Registry) -> GameEnvelope:
    game = registry.join_game(game_id, body.player_id)
    return GameEnvelope(
        game=GameResponse.from_game(game), message="Successfully joined game"
    )


@games_router.post("/{game_id}/moves", response_model=MakeMoveResponse)
def make_move(
    game_id: UUID, body: MakeMoveRequest, registry: Registry
) -> MakeMoveResponse:
    game, move = registry.make_move(game_id, body.player_id, body.row, body.col)
    return MakeMoveResponse(
        game=GameResponse.from_game(game),
        move=MoveResponse.from_move(move),
        message="Move made successfully",
    )


@games_router.get("/{game_id}/moves", response_model=ValidMovesResponse)
def get_valid_moves(game_id: UUID, registry: Registry) -> ValidMovesResponse:
    moves = [SquareResponse.from_square(sq) for sq in registry.get_valid_moves(game_id)]
    return ValidMovesResponse(valid_moves=moves, count=len(moves))


@games_router.get("/{game_id}/stats", response_model=GameStatsResponse)
def get_game_stats(game_id: UUID, registry: Registry) -> GameStatsResponse:
    return GameStatsResponse.from_stats(registry.get_game_stats(game_id))


@games_router.delete("/{game_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_game(game_id: UUID, registry: Registry) -> Response:
    registry.delete_game(game_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


# --- PLAYERS ---
players_router = APIRouter(prefix="/players", tags=["players"])


@players_router.post(
    "", response_model=PlayerResponse, status_code=http_status.HTTP_201_CREATED
)
def create_player(body: CreatePlayerRequest, players: Players) -> PlayerResponse:
    return PlayerResponse.from_model(players.create_player(body.name, body.email))


@players_router.get("", response_model=list[PlayerResponse])
def list_players(players: Players) -> list[PlayerResponse]:
    return [PlayerResponse.from_model(p) for p in players.list_players()]


@players_router.get("/search", response_model=list[PlayerResponse])
def search_players(
    players: Players, q: str, limit: int = 10
) -> list[PlayerResponse]:
    return [PlayerResponse.from_model(p) for p in players.search_players(q, limit)]


@players_router.get("/{player_id}", response_model=PlayerResponse)
def get_player(player_id: str, players: Players) -> PlayerResponse:
    return PlayerResponse.from_model(players.get_player(player_id))


@players_router.get("/{player_id}/stats", response_model=PlayerStatsResponse)
def get_player_stats(player_id: str, players: Players) -> PlayerStatsResponse:
    return PlayerResponse.from_model(players.get_player(player_id)).stats


@players_router.get("/{player_id}/games", response_model=GameListResponse)
def get_player_games(player_id: str, registry: Registry) -> GameListResponse:
    games = [
        GameResponse.from_game(game) for game in registry.list_games_for_player(player_id)
    ]
    return GameListResponse(games=games, count=len(games))


@players_router.patch("/{player_id}", response_model=PlayerResponse)
def update_player(
    player_id: str, body: UpdatePlayerRequest, players: Players
) -> PlayerResponse:
    updated = players.update_player(player_id, name=body.name, email=body.email)
    return PlayerResponse.from_model(updated)


@players_router.delete("/{player_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_player(player_id: str, players: Players) -> Response:
    players.delete_player(player_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


# --- LEADERBOARD ---
leaderboard_router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@leaderboard_router.get("", response_model=LeaderboardResponse)
def leaderboard(
    players: Players,
    type: LeaderboardType = LeaderboardType.WINS,
    limit: int = 10,
) -> LeaderboardResponse:
    ranked = players.leaderboard(by=type, limit=limit)
    return LeaderboardResponse(
        leaderboard=[LeaderboardEntry.from_model(p) for p in ranked], type=type
    )
