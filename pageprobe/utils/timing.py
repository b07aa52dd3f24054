# pageprobe/utils/timing.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar, ParamSpec

from pageprobe.utils.config import get_settings
from pageprobe.utils.logger import get_logger

P = ParamSpec("P")
T = TypeVar("T")


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
    start_ms: Optional[int] = None

    def start(self) -> "Stopwatch":
        self.start_ms = now_ms()
        return self

    def elapsed_ms(self) -> int:
        if self.start_ms is None:
            return 0
        return max(0, now_ms() - self.start_ms)

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


# ---------------- retry (polling) ----------------

def retry(
    probe: Callable[[], bool],
    *,
    interval_ms: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    description: Optional[str] = None,
) -> bool:
    """
    Poll `probe()` until it returns True or `timeout_ms` has elapsed since
    the first call.

    The probe is called immediately, then every `interval_ms`; one last poll
    happens at the deadline. `interval_ms` / `timeout_ms` default to the
    RETRY_INTERVAL_MS / RETRY_TIMEOUT_MS settings. With `timeout_ms=0` the
    probe runs exactly once.

    Returns:
        True as soon as the probe does, False once the budget is spent.

    Exceptions raised by the probe are not caught: they abort polling and
    reach the caller on the poll where they happened.
    """
    settings = get_settings()
    interval = settings.RETRY_INTERVAL_MS if interval_ms is None else interval_ms
    timeout = settings.RETRY_TIMEOUT_MS if timeout_ms is None else timeout_ms

    with Stopwatch() as sw:
        deadline = sw.start_ms + max(0, timeout)
        polls = 0
        while True:
            polls += 1
            if probe():
                return True
            remaining = deadline - now_ms()
            if remaining <= 0:
                break
            sleep_ms(max(1, min(interval, remaining)))

    desc = f" ({description})" if description else ""
    get_logger(__name__).debug(f"retry gave up after {polls} poll(s) in {sw.elapsed_ms()} ms{desc}")
    return False


# ---------------- measure decorator ----------------

def measure(label: str = "", level: str = "INFO") -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to log the execution time of a function.
    Example:
        @measure("run suite")
        def run_suite(...): ...
    """
    level = level.upper()
    log = get_logger(__name__)
    log_fn = getattr(log, level.lower(), log.info)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with Stopwatch() as sw:
                try:
                    return func(*args, **kwargs)
                finally:
                    ms = sw.elapsed_ms()
                    human = f"{ms} ms" if ms < 1000 else f"{ms/1000:.3f} s"
                    name = label or func.__name__
                    log_fn(f"{name} took {human}")
        return wrapper
    return decorator
