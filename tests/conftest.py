"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.services.game_registry import GameRegistry
from src.tictactoe.board import Board

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

PLAYER_A = "player-a"
PLAYER_B = "player-b"


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def registry() -> GameRegistry:
    """Registry without a player directory: any player id may join."""
    return GameRegistry()


@pytest.fixture
def board_from_marks() -> Callable[[list[str]], Board]:
    """
    Build a board from three strings, one per row: 'A' / 'B' for PLAYER_A / PLAYER_B, '.' for an empty cell.
    ex. ["AB.", ".A.", "..A"]
    """
    symbols = {"A": PLAYER_A, "B": PLAYER_B, ".": None}

    def _create_board(rows: list[str]) -> Board:
        return Board.from_rows([[symbols[mark] for mark in row] for row in rows])

    return _create_board
