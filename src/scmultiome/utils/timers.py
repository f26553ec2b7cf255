"""Timing utilities"""
import time
from contextlib import contextmanager
from typing import Any, Generator

from .log import get_logger

logger = get_logger(__name__)


class Timer:
    """Simple timer for profiling pipeline steps"""

    def __init__(self, name: str = "Operation"):
        self.name = name
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time


@contextmanager
def step_timer(step: str) -> Generator[Timer, None, None]:
    """Time a pipeline step and log its duration, even when it fails"""
    timer = Timer(step)
    logger.info("step_started", step=step)
    with timer:
        try:
            yield timer
        except Exception:
            logger.error("step_failed", step=step)
            raise
    logger.info("step_completed", step=step, elapsed_s=round(timer.elapsed, 3))
