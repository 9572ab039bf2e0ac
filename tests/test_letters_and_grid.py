"""
Tests for letters.py and grid.py - letter sampling and letter placement.
"""

import os
import sys

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from grid import (
    EMPTY,
    LETTER,
    NO_PLACEMENT,
    SNAKE,
    Cell,
    count_letters,
    create_empty_grid,
    place_letter,
    refill_letters,
)
from letters import FALLBACK_LETTER, LETTER_WEIGHTS, is_vowel, sample_letter, top_letters


class FixedDraw:
    """Stand-in generator returning a fixed fraction from random()."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestSampleLetter:
    def test_always_returns_an_uppercase_letter(self):
        rng = np.random.default_rng(7)
        for _ in range(500):
            letter = sample_letter(rng)
            assert letter in LETTER_WEIGHTS

    def test_zero_draw_picks_first_letter(self):
        assert sample_letter(FixedDraw(0.0)) == "A"

    def test_draw_at_total_weight_falls_back(self):
        """A draw that lands past every cumulative weight still yields a letter."""
        assert sample_letter(FixedDraw(1.0)) == FALLBACK_LETTER

    def test_draw_just_past_a_weight_moves_to_next_letter(self):
        total = sum(LETTER_WEIGHTS.values())
        assert sample_letter(FixedDraw((LETTER_WEIGHTS["A"] + 0.01) / total)) == "B"

    def test_same_seed_same_sequence(self):
        rng_a = np.random.default_rng(3)
        rng_b = np.random.default_rng(3)
        assert [sample_letter(rng_a) for _ in range(20)] == [sample_letter(rng_b) for _ in range(20)]

    def test_common_letters_beat_rare_letters(self):
        rng = np.random.default_rng(11)
        draws = [sample_letter(rng) for _ in range(5000)]
        assert draws.count("E") > draws.count("Q") * 10


class TestLetterHelpers:
    @pytest.mark.parametrize("letter", ["A", "e", "I", "O", "U", "Y"])
    def test_vowels(self, letter):
        assert is_vowel(letter)

    @pytest.mark.parametrize("letter", ["B", "z", None])
    def test_not_vowels(self, letter):
        assert not is_vowel(letter)

    def test_top_letters_orders_by_frequency(self):
        assert top_letters(["A", "B", "B", "C", "C", "C", None], count=2) == ["C", "B"]

    def test_top_letters_ties_keep_first_seen(self):
        assert top_letters(["X", "Y", "X", "Y", "Z"]) == ["X", "Y", "Z"]


class TestGrid:
    def test_empty_grid_shape_and_coordinates(self):
        grid = create_empty_grid(3, 4)
        assert len(grid) == 3
        assert all(len(row) == 4 for row in grid)
        for row_idx, row in enumerate(grid):
            for col_idx, cell in enumerate(row):
                assert cell.type == EMPTY
                assert cell.letter is None
                assert cell.coordinates == (col_idx, row_idx)

    def test_invalid_dimensions_raise(self):
        with pytest.raises(ValueError):
            create_empty_grid(0, 5)

    def test_cell_to_dict(self):
        assert Cell(LETTER, 2, 1, "Q").to_dict() == {"type": "letter", "x": 2, "y": 1, "letter": "Q"}


class TestPlaceLetter:
    def test_never_lands_on_snake_or_letter(self):
        rng = np.random.default_rng(0)
        for rows, cols in ((3, 3), (4, 6), (8, 5)):
            for k in range(1, rows * cols):
                grid = create_empty_grid(rows, cols)
                cells = [(i % cols, i // cols) for i in range(rows * cols)]
                snake = cells[:k]
                for x, y in snake:
                    grid[y][x] = Cell(SNAKE, x, y, "S")
                row, col, _ = place_letter(grid, snake, rng)
                assert (col, row) not in snake
                assert grid[row][col].type == EMPTY

    def test_occupied_coordinates_are_skipped_even_if_empty(self):
        grid = create_empty_grid(1, 3)
        rng = np.random.default_rng(1)
        row, col, letter = place_letter(grid, [(0, 0), (2, 0)], rng)
        assert (row, col) == (0, 1)
        assert letter in LETTER_WEIGHTS

    def test_full_grid_returns_sentinel(self):
        grid = create_empty_grid(2, 2)
        for row in grid:
            for cell in row:
                cell.type = LETTER
                cell.letter = "A"
        assert place_letter(grid, [], np.random.default_rng(0)) == NO_PLACEMENT


class TestRefillLetters:
    def test_fills_up_to_max(self):
        grid = create_empty_grid(5, 5)
        placed = refill_letters(grid, [(2, 2)], 6, np.random.default_rng(4))
        assert len(placed) == 6
        assert count_letters(grid) == 6
        assert grid[2][2].type == EMPTY

    def test_only_tops_up_missing_letters(self):
        grid = create_empty_grid(5, 5)
        rng = np.random.default_rng(5)
        refill_letters(grid, [], 4, rng)
        for row in grid:
            for cell in row:
                if cell.type == LETTER:
                    grid[cell.y][cell.x] = Cell(EMPTY, cell.x, cell.y)
                    break
        before = count_letters(grid)
        placed = refill_letters(grid, [], 4, rng)
        assert len(placed) == 4 - before
        assert count_letters(grid) == 4

    def test_never_exceeds_max(self):
        grid = create_empty_grid(4, 4)
        rng = np.random.default_rng(6)
        refill_letters(grid, [], 3, rng)
        assert refill_letters(grid, [], 3, rng) == []
        assert refill_letters(grid, [], 1, rng) == []
        assert count_letters(grid) == 3

    def test_stops_when_board_is_full(self):
        grid = create_empty_grid(3, 3)
        placed = refill_letters(grid, [(1, 1)], 20, np.random.default_rng(8))
        assert len(placed) == 8
        assert count_letters(grid) == 8
