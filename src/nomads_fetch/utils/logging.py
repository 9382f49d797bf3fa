"""Package logger and per-stage timing for NOMADS fetches.

The ``nomads_fetch`` logger does not propagate to the root logger. It writes
to stderr through a rich handler (WARNING until :func:`configure_logger`
raises it) and optionally to a plain-text file that also records the worker
thread of each message.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Iterator

    LevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


__all__ = [
    "FetchMonitor",
    "StageTiming",
    "configure_logger",
    "get_log_file_path",
    "logger",
]

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_FILE_FORMAT = "[%(asctime)s] %(levelname)-8s %(threadName)-8s %(message)s"
_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"

logger = logging.getLogger("nomads_fetch")
logger.setLevel(logging.DEBUG)  # handlers filter
logger.propagate = False

_console_handler: logging.Handler | None = None
_file_handler: logging.FileHandler | None = None


def _console() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True, soft_wrap=True),
        show_path=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(logging.WARNING)
    return handler


if not logger.handlers:
    _console_handler = _console()
    logger.addHandler(_console_handler)


def _to_level(level: LevelName | int) -> int:
    """Return the numeric value of a level name or constant.

    Raises
    ------
    ValueError
        If the level is not one of the five standard levels.
    TypeError
        If the level is neither a string nor an integer.
    """
    if isinstance(level, str):
        try:
            return _LEVELS[level.upper()]
        except KeyError:
            raise ValueError(
                f"Invalid log level: {level}. Must be one of: {', '.join(_LEVELS)}"
            ) from None
    if isinstance(level, int):
        if level not in _LEVELS.values():
            raise ValueError(f"Invalid log level: {level}. Must be a logging level constant.")
        return level
    raise TypeError(f"Level must be str or int, got {type(level).__name__}")


def _close_file_handler() -> None:
    global _file_handler  # noqa: PLW0603
    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None


def get_log_file_path() -> Path | None:
    """Path of the active log file, or None when only the console is logged to."""
    return Path(_file_handler.baseFilename) if _file_handler is not None else None


def configure_logger(
    *,
    verbose: bool | None = None,
    level: LevelName | int | None = None,
    file: str | Path | None = None,
    file_level: LevelName | int = "DEBUG",
    file_mode: Literal["a", "w"] = "a",
) -> None:
    """Set the console level and (re)open or close the log file.

    Parameters
    ----------
    verbose : bool, optional
        DEBUG on the console when True, WARNING when False. Ignored if
        ``level`` is given.
    level : str or int, optional
        Console level.
    file : str or Path, optional
        Log file. Any previous file is closed first; ``None`` disables file
        logging.
    file_level : str or int, optional
        Level of the file handler, DEBUG by default.
    file_mode : {'a', 'w'}, optional
        Append to or overwrite the log file.

    Examples
    --------
    >>> configure_logger(level="INFO", file="sf.log")
    >>> configure_logger(verbose=True, file=None)
    """
    global _file_handler  # noqa: PLW0603

    if level is not None:
        console_level = _to_level(level)
    elif verbose is not None:
        console_level = logging.DEBUG if verbose else logging.WARNING
    else:
        console_level = None
    if console_level is not None and _console_handler is not None:
        _console_handler.setLevel(console_level)

    if file_mode not in ("a", "w"):
        raise ValueError(f"Invalid file_mode: {file_mode}. Must be 'a' or 'w'.")
    _close_file_handler()
    if file is None:
        return

    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.FileHandler(path, mode=file_mode)
    _file_handler.setLevel(_to_level(file_level))
    _file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(_file_handler)


@dataclass
class StageTiming:
    """Wall-clock span of one pipeline stage."""

    name: str
    started: float | None = None
    finished: float | None = None
    failed: bool = False

    @property
    def done(self) -> bool:
        return self.finished is not None

    @property
    def duration(self) -> timedelta | None:
        """Stage duration; a running stage is measured up to now."""
        if self.started is None:
            return None
        end = self.finished if self.finished is not None else time.monotonic()
        return timedelta(seconds=end - self.started)

    def describe(self) -> str:
        d = self.duration
        if d is None:
            return "-"
        seconds = d.total_seconds()
        if seconds < 60:
            return f"{seconds:.1f}s"
        return "{}m {}s".format(*divmod(int(seconds), 60))


class FetchMonitor:
    """Time the resolve, reconcile, fetch and assemble stages of one fetch."""

    def __init__(self, enable_timing: bool = True) -> None:
        self.enable_timing = enable_timing
        self.stages: dict[str, StageTiming] = {}

    @contextmanager
    def stage(self, name: str) -> Iterator[StageTiming]:
        """Time the enclosed block as stage *name*; exceptions mark it failed."""
        timing = self.stages.setdefault(name, StageTiming(name))
        timing.started = time.monotonic()
        logger.debug("Stage: %s", name)
        try:
            yield timing
        except Exception:
            timing.failed = True
            raise
        finally:
            timing.finished = time.monotonic()

    def log_timing_summary(self) -> None:
        if not self.enable_timing:
            return
        logger.debug("Timing Summary:")
        for timing in self.stages.values():
            mark = "✗" if timing.failed else "✓" if timing.done else "..."
            logger.debug("  [%s] %s: %s", mark, timing.name, timing.describe())
