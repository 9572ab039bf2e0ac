# Board cells, empty-grid construction, and random letter placement.
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

try:
    from .letters import sample_letter
except ImportError:
    from letters import sample_letter


EMPTY = "empty"
SNAKE = "snake"
LETTER = "letter"
COLLISION = "collision"
CELL_TYPES = (EMPTY, SNAKE, LETTER, COLLISION)

# Returned by place_letter when every cell is taken; callers treat it as a no-op.
NO_PLACEMENT = (-1, -1, "A")


@dataclass
class Cell:
    """One board square. `letter` is set for snake/letter cells (and kept on collision)."""
    type: str
    x: int
    y: int
    letter: str | None = None

    @property
    def coordinates(self) -> tuple[int, int]:
        return self.x, self.y

    def to_dict(self) -> dict:
        return {"type": self.type, "x": self.x, "y": self.y, "letter": self.letter}


Grid = list[list[Cell]]


def create_empty_grid(rows: int, cols: int) -> Grid:
    """Build a rows x cols grid of empty cells, indexed [row][col]."""
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid must be at least 1x1, got {rows}x{cols}.")
    return [[Cell(EMPTY, col, row) for col in range(cols)] for row in range(rows)]


def clear_cell(grid: Grid, x: int, y: int) -> None:
    grid[y][x] = Cell(EMPTY, x, y)


def letter_cells(grid: Grid) -> list[Cell]:
    return [cell for row in grid for cell in row if cell.type == LETTER]


def count_letters(grid: Grid) -> int:
    return len(letter_cells(grid))


def place_letter(
    grid: Grid,
    occupied: Iterable[tuple[int, int]],
    rng: np.random.Generator,
) -> tuple[int, int, str]:
    """Pick a random empty, unoccupied cell and pair it with a sampled letter.

    Does not write to the grid. Returns NO_PLACEMENT when no cell qualifies.
    """
    blocked = set(occupied)
    candidates = [
        (row_idx, col_idx)
        for row_idx, row in enumerate(grid)
        for col_idx, cell in enumerate(row)
        if cell.type == EMPTY and (col_idx, row_idx) not in blocked
    ]
    if not candidates:
        return NO_PLACEMENT

    row, col = candidates[int(rng.integers(len(candidates)))]
    return row, col, sample_letter(rng)


def refill_letters(
    grid: Grid,
    occupied: Iterable[tuple[int, int]],
    max_letters: int,
    rng: np.random.Generator,
) -> list[Cell]:
    """Top the board up to `max_letters` letters; returns the newly placed cells."""
    blocked = list(occupied)
    missing = max(0, max_letters - count_letters(grid))
    placed: list[Cell] = []

    for _ in range(missing):
        row, col, letter = place_letter(grid, blocked, rng)
        if row == -1 or col == -1:
            break
        grid[row][col] = Cell(LETTER, col, row, letter)
        placed.append(grid[row][col])

    return placed
