"""
Rules of Tic-Tac-Toe as pure functions.

Nothing in here owns state: every function takes a Board (and player ids) and returns a decision,
which makes the module safe to call from any number of threads at once.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import (
    CellOccupiedError,
    InternalConsistencyError,
    OutOfBoundsError,
)
from src.core.shared_types import WinCondition
from src.tictactoe.board import Board
from src.tictactoe.square import BOARD_SIZE, Square


@dataclass(frozen=True)
class WinningLine:
    condition: WinCondition
    index: int
    squares: tuple[Square, ...]


@dataclass(frozen=True)
class WinResult:
    won: bool
    condition: Optional[WinCondition] = None
    index: Optional[int] = None


NO_WIN = WinResult(won=False)


def _build_winning_lines() -> list[WinningLine]:
    """Scan order matters for reporting: rows, then columns, then main diagonal (0), then anti-diagonal (1)."""
    lines: list[WinningLine] = []
    for row in range(BOARD_SIZE):
        lines.append(
            WinningLine(
                WinCondition.ROW,
                row,
                tuple(Square(row, col) for col in range(BOARD_SIZE)),
            )
        )
    for col in range(BOARD_SIZE):
        lines.append(
            WinningLine(
                WinCondition.COLUMN,
                col,
                tuple(Square(row, col) for row in range(BOARD_SIZE)),
            )
        )
    lines.append(
        WinningLine(
            WinCondition.DIAGONAL, 0, tuple(Square(i, i) for i in range(BOARD_SIZE))
        )
    )
    lines.append(
        WinningLine(
            WinCondition.DIAGONAL,
            1,
            tuple(Square(i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
        )
    )
    return lines


WINNING_LINES: list[WinningLine] = _build_winning_lines()


def apply_move(board: Board, player_id: str, row: int, col: int) -> Board:
    """
    Mark the cell for the player and return the updated board.
    ----
    The input board is left untouched, so a rejected move can never leave a half-updated board behind.
    Turn ownership and game status are the caller's responsibility.
    """
    square = Square(row, col)
    if not square.is_within_bounds():
        raise OutOfBoundsError(
            f"Move coordinates must be between 0 and {BOARD_SIZE - 1}, got ({row}, {col})."
        )
    if not board.is_empty(square):
        raise CellOccupiedError(f"Cell ({row}, {col}) is already occupied.")

    updated = board.copy()
    updated.place(square, player_id)
    return updated


def winning_lines_for(board: Board, player_id: str) -> list[WinningLine]:
    """All lines owned by the player, in scan order. Completing a row and a column (or both diagonals) in one move yields two."""
    return [
        line
        for line in WINNING_LINES
        if all(board.cell(square) == player_id for square in line.squares)
    ]


def check_win(board: Board, player_id: str) -> WinResult:
    """Does the player own a full line? First match in scan order is reported."""
    lines = winning_lines_for(board, player_id)
    if not lines:
        return NO_WIN
    return WinResult(won=True, condition=lines[0].condition, index=lines[0].index)


def is_draw(board: Board) -> bool:
    """Full board. Only meaningful after check_win reported no winner: a full board with a line is a win."""
    return board.is_full()


def valid_moves(board: Board) -> list[Square]:
    """Empty cells in row-major order. Computed fresh on every call."""
    return board.empty_squares()


def next_player(players: list[str], current_player_id: str) -> str:
    """The other one of the two participants."""
    if len(players) != 2 or current_player_id not in players:
        raise InternalConsistencyError(
            f"Cannot rotate turn: {current_player_id!r} is not one of the two players {players!r}."
        )
    index = players.index(current_player_id)
    return players[(index + 1) % 2]
