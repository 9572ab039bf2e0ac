# Shared headless helpers: board encoding/rendering, a greedy autopilot, and full game simulation.
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

try:
    from .game_logic import DIRECTION_VECTORS, OPPOSITES, SnakeConfig, SnakeGame
    from .game_loop import GameLoop, ManualScheduler
    from .grid import COLLISION, LETTER, SNAKE, letter_cells
    from .words import SCORING_ALL, Dictionary, WordReport
except ImportError:
    from game_logic import DIRECTION_VECTORS, OPPOSITES, SnakeConfig, SnakeGame
    from game_loop import GameLoop, ManualScheduler
    from grid import COLLISION, LETTER, SNAKE, letter_cells
    from words import SCORING_ALL, Dictionary, WordReport


ACTIONS = ("up", "down", "left", "right")

# Integer codes used by encode_board_state.
CELL_CODES = {"empty": 0, LETTER: 1, SNAKE: 2, COLLISION: 3}
HEAD_CODE = 4


@dataclass
class PlayConfig:
    rows: int = 16
    columns: int = 10
    max_letters: int = 20
    speed_ms: int = 500
    countdown_seconds: int = 0
    scoring_mode: str = SCORING_ALL
    games: int = 1
    max_ticks: int = 500
    seed: int | None = None


@dataclass
class GameResult:
    ticks: int
    length: int
    letters_picked: int
    collided: bool
    report: WordReport
    board: str = ""


def make_game(cfg: PlayConfig, rng: np.random.Generator | None = None) -> SnakeGame:
    game_cfg = SnakeConfig(
        rows=cfg.rows,
        columns=cfg.columns,
        max_letters=cfg.max_letters,
        speed_ms=cfg.speed_ms,
        countdown_seconds=cfg.countdown_seconds,
        scoring_mode=cfg.scoring_mode,
    )
    return SnakeGame(game_cfg, rng=rng)


def encode_board_state(game: SnakeGame) -> np.ndarray:
    """
    Board as a (rows, columns) int8 array:
    - 0: empty
    - 1: letter
    - 2: snake body
    - 3: collision
    - 4: snake head (while alive)
    """
    board = np.zeros((game.config.rows, game.config.columns), dtype=np.int8)
    for row in game.grid:
        for cell in row:
            board[cell.y, cell.x] = CELL_CODES[cell.type]

    if game.alive:
        board[game.head.y, game.head.x] = HEAD_CODE
    return board


def render_board(game: SnakeGame) -> str:
    """
    Text board for terminals:
    . = empty
    lowercase = letter on the board
    UPPERCASE = snake segment
    # = collision
    """
    lines = []
    for row in game.grid:
        chars = []
        for cell in row:
            if cell.type == LETTER:
                chars.append((cell.letter or "?").lower())
            elif cell.type == SNAKE:
                chars.append((cell.letter or "?").upper())
            elif cell.type == COLLISION:
                chars.append("#")
            else:
                chars.append(".")
        lines.append(" ".join(chars))
    return "\n".join(lines)


def _wrapped_delta(src: int, dst: int, size: int) -> int:
    """Signed shortest step count from src to dst on a ring of `size` squares."""
    delta = (dst - src) % size
    if delta > size // 2:
        delta -= size
    return delta


def wrapped_distance(game: SnakeGame, a: tuple[int, int], b: tuple[int, int]) -> int:
    dx = _wrapped_delta(a[0], b[0], game.config.columns)
    dy = _wrapped_delta(a[1], b[1], game.config.rows)
    return abs(dx) + abs(dy)


def nearest_letter_position(game: SnakeGame) -> tuple[int, int]:
    letters = letter_cells(game.grid)
    head = game.head.coordinates
    if not letters:
        return head
    best = min(letters, key=lambda cell: wrapped_distance(game, head, cell.coordinates))
    return best.coordinates


def _is_collision(game: SnakeGame, x: int, y: int) -> bool:
    return len(game.snake) > 1 and (x, y) in game.snake_coordinates()


def greedy_direction(game: SnakeGame) -> str:
    """Step toward the nearest letter, avoiding the body and 180-degree turns when possible."""
    hx, hy = game.head.coordinates
    tx, ty = nearest_letter_position(game)
    dx = _wrapped_delta(hx, tx, game.config.columns)
    dy = _wrapped_delta(hy, ty, game.config.rows)

    preferred: list[str] = []
    if dx:
        preferred.append("right" if dx > 0 else "left")
    if dy:
        preferred.append("down" if dy > 0 else "up")
    preferred.extend(action for action in ACTIONS if action not in preferred)

    fallback = game.direction or preferred[0]
    for action in preferred:
        if game.direction is not None and OPPOSITES[action] == game.direction:
            continue
        vx, vy = DIRECTION_VECTORS[action]
        nx = (hx + vx) % game.config.columns
        ny = (hy + vy) % game.config.rows
        if not _is_collision(game, nx, ny):
            return action
    return fallback


def play_game(
    cfg: PlayConfig,
    dictionary: Dictionary | None,
    policy: Callable[[SnakeGame], str] = greedy_direction,
    rng: np.random.Generator | None = None,
    render_step: Callable[[SnakeGame, WordReport, int], None] | None = None,
) -> GameResult:
    """Run one game on a manual clock until collision or `max_ticks` movement steps."""
    game = make_game(cfg, rng=rng)
    scheduler = ManualScheduler()
    ticks = 0

    def on_update(updated: SnakeGame, report: WordReport) -> None:
        if render_step is not None:
            render_step(updated, report, ticks)

    loop = GameLoop(game, scheduler, dictionary=dictionary, on_update=on_update)
    loop.start()

    while loop.running and ticks < cfg.max_ticks:
        if game.movement_enabled:
            loop.set_direction(policy(game))
            ticks += 1
        # The movement timer always falls due exactly one interval ahead.
        scheduler.advance(game.speed_ms)

    loop.stop()
    return GameResult(
        ticks=ticks,
        length=len(game.snake),
        letters_picked=game.letters_picked,
        collided=game.game_over,
        report=loop.report,
        board=render_board(game),
    )


def summarize(values: list[float]) -> dict[str, float]:
    """Mean/median/max of a list of per-game numbers (zeros when empty)."""
    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        return {"mean": 0.0, "median": 0.0, "max": 0.0}
    return {
        "mean": float(np.mean(arr)),
        "median": float(np.median(arr)),
        "max": float(np.max(arr)),
    }
