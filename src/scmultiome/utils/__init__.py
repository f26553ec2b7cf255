"""Utility functions and helpers"""

from .io import ensure_output_dir, save_data
from .log import get_logger, setup_logging
from .timers import Timer, step_timer

__all__ = [
    "ensure_output_dir",
    "save_data",
    "get_logger",
    "setup_logging",
    "Timer",
    "step_timer",
]
