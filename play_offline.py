# Headless entrypoint: load a word list and let the autopilot play Snakes & Letters in the terminal.
from __future__ import annotations

import argparse
import time

import numpy as np

try:
    from .game_logic import MAX_GRID_SIZE, MAX_LETTERS, MAX_SPEED_MS, MIN_GRID_SIZE, MIN_SPEED_MS
    from .utils import GameResult, PlayConfig, play_game, render_board, summarize
    from .words import SCORING_MODES, WordReport, load_dictionary
except ImportError:
    from game_logic import MAX_GRID_SIZE, MAX_LETTERS, MAX_SPEED_MS, MIN_GRID_SIZE, MIN_SPEED_MS
    from utils import GameResult, PlayConfig, play_game, render_board, summarize
    from words import SCORING_MODES, WordReport, load_dictionary


def _print_progress_bar(game_idx: int, total: int, bar_length: int = 40) -> None:
    """Print a compact progress bar in the terminal."""
    total_safe = max(1, int(total))
    percent = min(1.0, max(0.0, game_idx / total_safe))
    filled = int(bar_length * percent)
    bar = "#" * filled + "-" * (bar_length - filled)
    print(f"\rProgress: |{bar}| {game_idx}/{total_safe} ({percent * 100:.1f}%)", end="", flush=True)


def _print_words(report: WordReport) -> None:
    if not report.words:
        print("No words found.")
        return
    for scored in report.words:
        print(f"  {scored.word:<16}{scored.score:>4}")
    print(f"Total score: {report.total_score} ({report.total_letters} letters)")


def play_offline(
    cfg: PlayConfig,
    dictionary_path: str | None = None,
    show_board: bool = True,
    watch_delay: float = 0.0,
) -> list[GameResult]:
    """Play `cfg.games` autopilot games and print per-game and summary stats."""
    dictionary = load_dictionary(dictionary_path) if dictionary_path else None
    if dictionary is None:
        print("No dictionary given; every game will score zero words.")
    else:
        print(f"Loaded {len(dictionary)} words from {dictionary_path}")

    rng = np.random.default_rng(cfg.seed)
    render_step = None
    if watch_delay > 0:
        def render_step(game, report, tick):
            print(f"\nTick {tick}  speed={game.speed_ms}ms  score={report.total_score}")
            print(render_board(game))
            time.sleep(watch_delay)

    results: list[GameResult] = []
    for game_idx in range(1, cfg.games + 1):
        result = play_game(cfg, dictionary, rng=rng, render_step=render_step)
        results.append(result)
        if cfg.games > 1:
            _print_progress_bar(game_idx, cfg.games)

    if cfg.games > 1:
        print()

    last = results[-1]
    if show_board:
        print(f"\nLast game: {last.ticks} ticks, length {last.length}, "
              f"{'collided' if last.collided else 'tick limit reached'}")
        print(last.board)
        _print_words(last.report)

    header = f"{'Metric':<12}{'Mean':>10}{'Median':>10}{'Max':>10}"
    print()
    print(header)
    print("-" * len(header))
    for label, values in (
        ("Score", [r.report.total_score for r in results]),
        ("Length", [r.length for r in results]),
        ("Ticks", [r.ticks for r in results]),
    ):
        stats = summarize(values)
        print(f"{label:<12}{stats['mean']:>10.2f}{stats['median']:>10.2f}{stats['max']:>10.0f}")

    return results


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = PlayConfig()
    parser = argparse.ArgumentParser(description="Headless Snakes & Letters autopilot")
    parser.add_argument("--dictionary", type=str, default="", help="Newline-delimited word list.")
    parser.add_argument("--rows", type=int, default=defaults.rows)
    parser.add_argument("--columns", type=int, default=defaults.columns)
    parser.add_argument("--max-letters", type=int, default=defaults.max_letters)
    parser.add_argument("--speed-ms", type=int, default=defaults.speed_ms)
    parser.add_argument("--countdown", type=int, default=defaults.countdown_seconds)
    parser.add_argument("--scoring-mode", type=str, default=defaults.scoring_mode, choices=SCORING_MODES)
    parser.add_argument("--games", type=int, default=defaults.games)
    parser.add_argument("--max-ticks", type=int, default=defaults.max_ticks)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--watch",
        type=float,
        default=0.0,
        help="Print the board after every update, sleeping this many seconds between frames.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the summary table.")
    return parser.parse_args(argv)


def run_play_cli(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if not (MIN_GRID_SIZE <= args.rows <= MAX_GRID_SIZE and MIN_GRID_SIZE <= args.columns <= MAX_GRID_SIZE):
        raise SystemExit(f"--rows and --columns must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
    if not (0 <= args.max_letters <= MAX_LETTERS):
        raise SystemExit(f"--max-letters must be between 0 and {MAX_LETTERS}.")
    if not (MIN_SPEED_MS <= args.speed_ms <= MAX_SPEED_MS):
        raise SystemExit(f"--speed-ms must be between {MIN_SPEED_MS} and {MAX_SPEED_MS}.")
    if args.games < 1 or args.max_ticks < 1:
        raise SystemExit("--games and --max-ticks must be >= 1.")
    if args.countdown < 0 or args.watch < 0:
        raise SystemExit("--countdown and --watch must be >= 0.")

    cfg = PlayConfig(
        rows=args.rows,
        columns=args.columns,
        max_letters=args.max_letters,
        speed_ms=args.speed_ms,
        countdown_seconds=args.countdown,
        scoring_mode=args.scoring_mode,
        games=args.games,
        max_ticks=args.max_ticks,
        seed=args.seed,
    )
    try:
        play_offline(
            cfg,
            dictionary_path=args.dictionary or None,
            show_board=not args.quiet,
            watch_delay=args.watch,
        )
    except FileNotFoundError as exc:
        raise SystemExit(f"Dictionary not found: {exc.filename}")


if __name__ == "__main__":
    run_play_cli()
