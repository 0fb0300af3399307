# logger_utils.py - logging setup for the CLI/runner and timing of code blocks

import logging
import os
import time
from typing import Optional

from colorama import Fore, Style
from colorama import just_fix_windows_console

# Directory where log files are written when file logging is requested
LOG_DIR = "logs"
DEFAULT_LOG_PATH = os.path.join(LOG_DIR, "fuzzy_counter.log")

LOG_FORMAT = "[%(asctime)s] %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("fuzzy_counter")


class ColorFormatter(logging.Formatter):
    """Formatter that colors the whole line by level (console only)."""

    COLORS = {
        "DEBUG": Style.DIM,
        "INFO": Fore.BLUE,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.COLORS.get(record.levelname)
        if not color:
            return line
        return f"{color}{line}{Style.RESET_ALL}"


def setup_logging(level: str = "INFO", path: Optional[str] = None, use_color: bool = True) -> logging.Logger:
    """
    Configure the package logger once: a console handler (colored if asked)
    and, when `path` is given, an appending file handler.
    Calling it again replaces the previous handlers.
    """
    logger.setLevel(level.upper())
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    if use_color:
        just_fix_windows_console()
        console.setFormatter(ColorFormatter(LOG_FORMAT, DATE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console)

    if path:
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)  # create the folder if it doesn't already exist
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(fh)

    logger.propagate = False
    return logger


def metric(tag: str, value, unit: str = "") -> None:
    """Record a metric line (timings, counts) through the package logger."""
    logger.info("%s: %s%s", tag, value, unit)


def time_block(label: str) -> "_Timer":
    """
    Measure how long a block takes and log it as a metric:
        with time_block("assign"):
            do_some_work()
    The elapsed seconds are also available as `.elapsed` afterwards.
    """
    return _Timer(label)


class _Timer:
    """Context manager used by time_block()."""

    def __init__(self, label: str):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        metric(f"{self.label} done", round(self.elapsed, 3), "s")
