"""Console logging utilities for the CHIP-8 machine.

This module provides a small leveled console logger used by ROM loading and
the cycle driver, plus a tqdm progress bar for long frame runs.
"""

import os
import time
import sys
from typing import Optional

from tqdm import tqdm

LOG_LEVEL_ENV = "CHIPJAX_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConsoleLogger:
    """Leveled console logger with optional colors and timestamps."""

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream or sys.stderr
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order.keys())}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def get_logger(name: str = "chipjax", log_level: Optional[str] = None, **kwargs) -> ConsoleLogger:
    """Create a logger, taking the level from ``CHIPJAX_LOG_LEVEL`` unless given.

    An unrecognised environment value falls back to ``DEFAULT_LOG_LEVEL``; an
    explicit ``log_level`` must be valid.
    """
    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
        if log_level.upper() not in LOG_LEVELS:
            log_level = DEFAULT_LOG_LEVEL
    return ConsoleLogger(name, log_level=log_level, **kwargs)


def progress_bar(total: int, desc: Optional[str] = None, enabled: bool = True, **kwargs) -> tqdm:
    """tqdm bar counting emulated frames."""
    if desc is None:
        desc = f"Running ({total:,} frames)"

    for kwarg in ("total", "disable"):
        kwargs.pop(kwarg, None)

    return tqdm(total=total, desc=desc, unit="frame", disable=not enabled, **kwargs)
