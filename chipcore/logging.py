"""Console logging for emulator sessions.

Messages go to stderr so screen and register dumps on stdout stay clean.
Long headless runs get a tqdm progress bar counting instruction cycles.
"""

import sys
import time
from functools import partialmethod
from typing import Optional, TextIO

from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ANSI foreground colour codes, in LEVELS order
_COLOR_CODES = (36, 32, 33, 31, 35)


class ConsoleLogger:
    """Level-filtered console logger.

    Args:
        name: Tag printed after the level
        log_level: Minimum level printed, one of LEVELS (case-insensitive)
        use_colors: Colour the level tag when the stream is a terminal
        show_timestamps: Prefix seconds elapsed since the logger was created
        stream: Output stream, stderr if None
    """

    def __init__(
        self,
        name: str = "chipcore",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.stream = sys.stderr if stream is None else stream
        self.colored = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.timestamps = show_timestamps
        self.created = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.threshold = LEVELS.index(level)

    @property
    def log_level(self) -> str:
        return LEVELS[self.threshold]

    @staticmethod
    def _rank(level: str) -> int:
        """Position in LEVELS; unknown levels rank as INFO."""
        return LEVELS.index(level) if level in LEVELS else LEVELS.index("INFO")

    def enabled_for(self, level: str) -> bool:
        return self._rank(level.upper()) >= self.threshold

    def format(self, level: str, message: str) -> str:
        tag = f"[{level:>8s}]"
        if self.colored:
            tag = f"\033[{_COLOR_CODES[self._rank(level)]}m{tag}\033[0m"
        prefix = f"[{time.time() - self.created:8.2f}s]" if self.timestamps else ""
        return f"{prefix}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.enabled_for(level):
            self.stream.write(self.format(level, message) + "\n")
            self.stream.flush()

    debug = partialmethod(log, "DEBUG")
    info = partialmethod(log, "INFO")
    warning = partialmethod(log, "WARNING")
    error = partialmethod(log, "ERROR")
    critical = partialmethod(log, "CRITICAL")


def progress_bar(total: int, desc: Optional[str] = None, disable: bool = False, **kwargs) -> tqdm:
    """tqdm bar over ``total`` instruction cycles; ``unit`` is always "cycle"."""
    kwargs.pop("unit", None)
    return tqdm(
        total=total,
        desc=desc or f"Running ({total:,} cycles)",
        unit="cycle",
        disable=disable,
        **kwargs,
    )
