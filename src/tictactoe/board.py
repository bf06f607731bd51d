"""The Game board holds which player occupies which cell. Rules live in engine.py"""

from __future__ import annotations

from dataclasses import dataclass

from src.tictactoe.square import BOARD_SIZE, Square, all_squares

Cell = str | None
Grid = list[list[Cell]]


@dataclass
class Board:
    cells: Grid

    @classmethod
    def empty(cls) -> Board:
        return cls([[None] * BOARD_SIZE for _ in range(BOARD_SIZE)])

    @classmethod
    def from_rows(cls, rows: Grid) -> Board:
        """Build a board from nested lists (copied, so the caller's lists are never shared)."""
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got {rows!r}")
        return cls([list(row) for row in rows])

    def to_rows(self) -> Grid:
        return [list(row) for row in self.cells]

    def copy(self) -> Board:
        return Board.from_rows(self.cells)

    def cell(self, square: Square) -> Cell:
        return self.cells[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.cell(square) is None

    def place(self, square: Square, player_id: str) -> None:
        self.cells[square.row][square.col] = player_id

    def empty_squares(self) -> list[Square]:
        return [square for square in all_squares() if self.is_empty(square)]

    def occupied_count(self) -> int:
        return sum(1 for square in all_squares() if not self.is_empty(square))

    def is_full(self) -> bool:
        return self.occupied_count() == BOARD_SIZE * BOARD_SIZE
