# Cooperative timer loop driving a SnakeGame: movement, letter flashing, and start countdown.
from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, Protocol

try:
    from .game_logic import SnakeGame
    from .words import Dictionary, WordReport
except ImportError:
    from game_logic import SnakeGame
    from words import Dictionary, WordReport


COUNTDOWN_INTERVAL_MS = 1000


class Scheduler(Protocol):
    """Subset of Tk's timer API; a tkinter root satisfies it directly."""
    def after(self, ms: int, func: Callable[[], None]) -> str: ...

    def after_cancel(self, id: str) -> None: ...


class ManualScheduler:
    """Deterministic scheduler for headless runs: time only moves on advance()."""
    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: list[tuple[int, int, str]] = []
        self._callbacks: dict[str, Callable[[], None]] = {}
        self._counter = itertools.count()

    def after(self, ms: int, func: Callable[[], None]) -> str:
        seq = next(self._counter)
        timer_id = f"after#{seq}"
        self._callbacks[timer_id] = func
        heapq.heappush(self._queue, (self.now_ms + max(0, int(ms)), seq, timer_id))
        return timer_id

    def after_cancel(self, id: str) -> None:
        self._callbacks.pop(id, None)

    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, ms: int) -> None:
        """Run every callback due within the next `ms`, one at a time in due order."""
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, timer_id = heapq.heappop(self._queue)
            func = self._callbacks.pop(timer_id, None)
            if func is None:
                continue
            self.now_ms = due
            func()
        self.now_ms = target


class GameLoop:
    """Owns the three session timers; every callback runs to completion before the next."""
    def __init__(
        self,
        game: SnakeGame,
        scheduler: Scheduler,
        dictionary: Dictionary | None = None,
        on_update: Callable[[SnakeGame, WordReport], None] | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.game = game
        self.scheduler = scheduler
        self.dictionary = dictionary
        self.on_update = on_update
        self.clock = clock if clock is not None else self._default_clock
        self.running = False
        self.report = game.evaluate_words(dictionary)
        self.move_id: str | None = None
        self.letter_id: str | None = None
        self.countdown_id: str | None = None

    def _default_clock(self) -> int:
        now_ms = getattr(self.scheduler, "now_ms", None)
        if now_ms is not None:
            return int(now_ms)
        return int(time.monotonic() * 1000)

    def _cancel_loops(self) -> None:
        """Cancel every scheduled callback that exists."""
        for attr in ("move_id", "letter_id", "countdown_id"):
            timer_id = getattr(self, attr)
            if timer_id is not None:
                self.scheduler.after_cancel(timer_id)
                setattr(self, attr, None)

    def _schedule_all(self) -> None:
        """Schedule all timers from fresh intervals."""
        self._cancel_loops()
        self.move_id = self.scheduler.after(self.game.speed_ms, self._move_tick)
        self.letter_id = self.scheduler.after(self.game.config.change_letter_interval_ms, self._letter_tick)
        if self.game.time_remaining > 0:
            self.countdown_id = self.scheduler.after(COUNTDOWN_INTERVAL_MS, self._countdown_tick)

    def _publish(self) -> None:
        self.report = self.game.evaluate_words(self.dictionary)
        if self.on_update is not None:
            self.on_update(self.game, self.report)

    def start(self) -> None:
        """Start or resume ticking; a finished game is reset first."""
        if self.game.game_over:
            self.game.reset()
        self.running = True
        self._schedule_all()
        self._publish()

    def stop(self) -> None:
        self.running = False
        self._cancel_loops()

    def toggle_pause(self) -> None:
        """Pause/resume all timers without losing board state."""
        if self.game.game_over:
            return
        if self.running:
            self.stop()
        else:
            self.running = True
            self._schedule_all()

    def reset(self) -> None:
        """Discard the current session and begin a fresh one."""
        self.stop()
        self.game.reset()
        self._publish()

    def set_direction(self, key: str) -> bool:
        return self.game.queue_direction(key)

    def _move_tick(self) -> None:
        """One movement step; reschedules itself at the current snake speed."""
        self.move_id = None
        if not self.running:
            return

        if not self.game.move():
            self.stop()
            self._publish()
            return

        self._publish()
        self.move_id = self.scheduler.after(self.game.speed_ms, self._move_tick)

    def _letter_tick(self) -> None:
        """Alternate between picking a letter to flash and replacing it."""
        self.letter_id = None
        if not self.running:
            return

        now = self.clock()
        if self.game.flash_target is None:
            self.game.select_flash_letter(now)
        else:
            self.game.resolve_flash_letter(now)

        self._publish()
        self.letter_id = self.scheduler.after(self.game.config.change_letter_interval_ms, self._letter_tick)

    def _countdown_tick(self) -> None:
        self.countdown_id = None
        if not self.running:
            return

        remaining = self.game.countdown_tick()
        self._publish()
        if remaining > 0:
            self.countdown_id = self.scheduler.after(COUNTDOWN_INTERVAL_MS, self._countdown_tick)
