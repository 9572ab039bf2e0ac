# Core Snakes & Letters state and rules, independent from any UI or timer code.
from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

try:
    from .grid import (
        COLLISION,
        LETTER,
        SNAKE,
        Cell,
        clear_cell,
        create_empty_grid,
        letter_cells,
        refill_letters,
    )
    from .letters import sample_letter
    from .words import (
        SCORING_ALL,
        SCORING_MODES,
        Dictionary,
        WordReport,
        find_all_valid_words,
        find_longest_valid_word,
    )
except ImportError:
    from grid import (
        COLLISION,
        LETTER,
        SNAKE,
        Cell,
        clear_cell,
        create_empty_grid,
        letter_cells,
        refill_letters,
    )
    from letters import sample_letter
    from words import (
        SCORING_ALL,
        SCORING_MODES,
        Dictionary,
        WordReport,
        find_all_valid_words,
        find_longest_valid_word,
    )


# Bounds used when validating settings.
MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 60
MIN_SPEED_MS = 40
MAX_SPEED_MS = 2000
MAX_LETTERS = 200

DIRECTION_VECTORS: dict[str, tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
OPPOSITES = {"up": "down", "down": "up", "left": "right", "right": "left"}

# Input keys (lowercased) accepted by queue_direction.
KEY_BINDINGS = {
    "arrowup": "up",
    "w": "up",
    "up": "up",
    "arrowdown": "down",
    "s": "down",
    "down": "down",
    "arrowleft": "left",
    "a": "left",
    "left": "left",
    "arrowright": "right",
    "d": "right",
    "right": "right",
}


@dataclass
class SnakeConfig:
    """Runtime settings shared between the rules, the timer loop, and the CLI."""
    rows: int = 16
    columns: int = 10
    max_letters: int = 20
    speed_ms: int = 500
    speed_step_ms: int = 10
    min_speed_ms: int = MIN_SPEED_MS
    flash_duration_ms: int = 3000
    change_letter_interval_ms: int = 1000
    countdown_seconds: int = 0
    scoring_mode: str = SCORING_ALL


def validate_config(config: SnakeConfig) -> None:
    """Raise ValueError with a readable message for out-of-range settings."""
    for label, value in (("Rows", config.rows), ("Columns", config.columns)):
        if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
            raise ValueError(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
    if not (0 <= config.max_letters <= MAX_LETTERS):
        raise ValueError(f"Max letters must be between 0 and {MAX_LETTERS}.")
    if not (MIN_SPEED_MS <= config.min_speed_ms <= config.speed_ms <= MAX_SPEED_MS):
        raise ValueError(
            f"Speed must satisfy {MIN_SPEED_MS} <= min speed <= speed <= {MAX_SPEED_MS}."
        )
    if config.speed_step_ms < 0:
        raise ValueError("Speed step must be >= 0.")
    if config.flash_duration_ms < 0 or config.change_letter_interval_ms <= 0:
        raise ValueError("Flash duration must be >= 0 and letter interval must be > 0.")
    if config.countdown_seconds < 0:
        raise ValueError("Countdown must be >= 0.")
    if config.scoring_mode not in SCORING_MODES:
        raise ValueError(f"Scoring mode must be one of {SCORING_MODES}.")


class SnakeGame:
    """Pure game state + rules for one session (no rendering or timers)."""
    def __init__(self, config: SnakeConfig, rng: np.random.Generator | None = None) -> None:
        validate_config(config)
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.reset()

    def reset(self) -> None:
        """Start a fresh board: one-segment snake near the center and a full set of letters."""
        rows, cols = self.config.rows, self.config.columns
        self.grid = create_empty_grid(rows, cols)
        self.direction: str | None = None
        self.pending_direction: str | None = None      # queued from input; applied next tick
        self.alive = True
        self.speed_ms = self.config.speed_ms
        self.letters_picked = 0
        self.flash_target: tuple[int, int] | None = None
        self.flash_started_ms: int | None = None
        self.time_remaining = self.config.countdown_seconds
        self.movement_enabled = self.time_remaining == 0

        head = Cell(SNAKE, math.ceil(cols / 2) - 1, math.ceil(rows / 2) - 1, sample_letter(self.rng))
        self.snake: list[Cell] = [head]            # head at index 0
        self._write_snake()
        refill_letters(self.grid, self.snake_coordinates(), self.config.max_letters, self.rng)

    @property
    def game_over(self) -> bool:
        return not self.alive

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def snake_coordinates(self) -> list[tuple[int, int]]:
        return [segment.coordinates for segment in self.snake]

    def direction_vector(self) -> tuple[int, int]:
        if self.direction is None:
            return 0, 0
        return DIRECTION_VECTORS[self.direction]

    def _write_snake(self) -> None:
        for segment in self.snake:
            self.grid[segment.y][segment.x] = Cell(SNAKE, segment.x, segment.y, segment.letter)

    def queue_direction(self, key: str) -> bool:
        """Queue a direction from an input key; reject unknown keys and 180-degree turns."""
        new_direction = KEY_BINDINGS.get(key.lower()) if key else None
        if new_direction is None:
            return False
        if self.direction is not None and OPPOSITES[new_direction] == self.direction:
            return False
        self.pending_direction = new_direction
        return True

    def toggle_movement(self) -> bool:
        self.movement_enabled = not self.movement_enabled
        return self.movement_enabled

    def _next_head(self) -> tuple[int, int]:
        """Translate the head by the current direction with wraparound on both axes."""
        dx, dy = self.direction_vector()
        cols, rows = self.config.columns, self.config.rows
        return (self.head.x + dx + cols) % cols, (self.head.y + dy + rows) % rows

    def move(self) -> bool:
        """Advance one step. Returns False once the snake has collided with itself."""
        if not self.alive:
            return False
        if not self.movement_enabled:
            return True

        # Apply the latest valid input once per tick.
        if self.pending_direction is not None:
            self.direction = self.pending_direction
        if self.direction is None:
            return True

        new_x, new_y = self._next_head()
        if len(self.snake) > 1 and (new_x, new_y) in self.snake_coordinates():
            self._collide()
            return False

        target = self.grid[new_y][new_x]
        growing = target.type == LETTER

        if growing:
            new_head = Cell(SNAKE, new_x, new_y, target.letter)
            clear_cell(self.grid, new_x, new_y)
            new_snake = [new_head] + self.snake
        else:
            new_head = Cell(SNAKE, new_x, new_y, self.head.letter)
            # Each segment slides onto its predecessor's square and keeps its letter slot,
            # so letters move one square toward the head while the word stays the same.
            new_snake = [new_head] + [
                Cell(SNAKE, self.snake[i].x, self.snake[i].y, self.snake[i + 1].letter)
                for i in range(len(self.snake) - 1)
            ]
            tail = self.snake[-1]
            clear_cell(self.grid, tail.x, tail.y)

        self.snake = new_snake
        self._write_snake()

        if growing:
            self._on_pickup(new_x, new_y)
        return True

    def _on_pickup(self, x: int, y: int) -> None:
        self.letters_picked += 1
        self.speed_ms = max(self.config.min_speed_ms, self.speed_ms - self.config.speed_step_ms)
        if self.flash_target == (x, y):
            self.flash_target = None
            self.flash_started_ms = None
        refill_letters(self.grid, self.snake_coordinates(), self.config.max_letters, self.rng)

    def _collide(self) -> None:
        """Freeze the board: every snake cell becomes a collision cell, letters kept."""
        for segment in self.snake:
            self.grid[segment.y][segment.x] = Cell(COLLISION, segment.x, segment.y, segment.letter)
        self.alive = False
        self.movement_enabled = False

    def select_flash_letter(self, now_ms: int) -> tuple[int, int] | None:
        """Mark a random letter cell for replacement unless one is already flashing."""
        if not self.alive or self.flash_target is not None:
            return self.flash_target
        candidates = letter_cells(self.grid)
        if not candidates:
            return None
        chosen = candidates[int(self.rng.integers(len(candidates)))]
        self.flash_target = chosen.coordinates
        self.flash_started_ms = now_ms
        return self.flash_target

    def resolve_flash_letter(self, now_ms: int) -> bool:
        """Swap out the flashing letter once it has flashed long enough."""
        if self.flash_target is None or self.flash_started_ms is None:
            return False
        if now_ms - self.flash_started_ms < self.config.flash_duration_ms:
            return False

        x, y = self.flash_target
        self.flash_target = None
        self.flash_started_ms = None
        if self.grid[y][x].type != LETTER:
            return False

        clear_cell(self.grid, x, y)
        # The vacated square is excluded so the replacement lands somewhere new.
        occupied = self.snake_coordinates() + [(x, y)]
        refill_letters(self.grid, occupied, self.config.max_letters, self.rng)
        return True

    def countdown_tick(self) -> int:
        """Count the start timer down one second; movement unlocks at zero."""
        if self.time_remaining > 0:
            self.time_remaining -= 1
            if self.time_remaining == 0:
                self.movement_enabled = True
        return self.time_remaining

    def evaluate_words(self, dictionary: Dictionary | None) -> WordReport:
        """Score the snake's letters, read tail to head in the order they were eaten."""
        segments = list(reversed(self.snake))
        if self.config.scoring_mode == SCORING_ALL:
            return find_all_valid_words(segments, dictionary)

        longest = find_longest_valid_word(segments, dictionary)
        if longest is None:
            return WordReport()
        return WordReport(words=[longest], total_score=longest.score, total_letters=len(longest.word))

    def snapshot(self) -> dict:
        """JSON-safe view of the full session state."""
        return {
            "rows": self.config.rows,
            "columns": self.config.columns,
            "grid": [[cell.to_dict() for cell in row] for row in self.grid],
            "snake": [segment.to_dict() for segment in self.snake],
            "direction": self.direction,
            "movement_enabled": self.movement_enabled,
            "game_over": self.game_over,
            "speed_ms": self.speed_ms,
            "letters_picked": self.letters_picked,
            "flash_target": list(self.flash_target) if self.flash_target else None,
            "flash_started_ms": self.flash_started_ms,
            "time_remaining": self.time_remaining,
        }
