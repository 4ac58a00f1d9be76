# component_locator/utils/timing.py
from __future__ import annotations

import functools
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")

Clock = Callable[[], int]
Sleeper = Callable[[int], None]


# ---------------- Monotonic time helpers ----------------

def now_ms() -> int:
    """Monotonic time in milliseconds."""
    return time.monotonic_ns() // 1_000_000


def sleep_ms(ms: int) -> None:
    """Sleep for `ms` milliseconds (blocking)."""
    if ms <= 0:
        return
    time.sleep(ms / 1000.0)


# ---------------- Stopwatch ----------------

@dataclass
class Stopwatch:
    """Simple stopwatch usable as a context manager."""
    clock: Clock = now_ms
    start_ms: Optional[int] = None

    def start(self) -> "Stopwatch":
        self.start_ms = self.clock()
        return self

    def elapsed_ms(self) -> int:
        if self.start_ms is None:
            return 0
        return max(0, self.clock() - self.start_ms)

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


# ---------------- Deadline ----------------

@dataclass
class Deadline:
    """
    A retry budget measured from construction.

    `expired()` turns true once elapsed time reaches the budget, never before;
    a zero budget is expired immediately.
    """
    budget_ms: int
    clock: Clock = now_ms
    _watch: Stopwatch = field(init=False)

    def __post_init__(self) -> None:
        self._watch = Stopwatch(clock=self.clock).start()

    def elapsed_ms(self) -> int:
        return self._watch.elapsed_ms()

    def remaining_ms(self) -> int:
        return max(0, self.budget_ms - self.elapsed_ms())

    def expired(self) -> bool:
        return self.elapsed_ms() >= self.budget_ms


def format_ms(ms: int) -> str:
    return f"{ms} ms" if ms < 1000 else f"{ms / 1000:.3f} s"


# ---------------- measure decorator ----------------

def measure(label: str = "", level: str = "DEBUG") -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to log the execution time of a function.
    Example:
        @measure("clear")
        def clear(...): ...
    """
    from component_locator.utils.logger import get_logger

    log = get_logger(__name__)
    log_fn = getattr(log, level.lower(), log.debug)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with Stopwatch() as sw:
                try:
                    return func(*args, **kwargs)
                finally:
                    log_fn(f"{label or func.__name__} took {format_ms(sw.elapsed_ms())}")
        return wrapper
    return decorator
