"""Log levels, well-known field keys, defaults and the global exit handlers."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from datetime import datetime
from enum import IntEnum
from typing import ClassVar


class Level(int):
    """A log level. Smaller values are more severe."""

    __slots__ = ()

    PANIC: ClassVar[Level]
    FATAL: ClassVar[Level]
    ERROR: ClassVar[Level]
    WARN: ClassVar[Level]
    NOTICE: ClassVar[Level]
    INFO: ClassVar[Level]
    DEBUG: ClassVar[Level]
    TRACE: ClassVar[Level]

    @property
    def name(self) -> str:
        """Upper case level name, e.g. ``INFO``."""
        return level_name(self)

    def lower_name(self) -> str:
        """Lower case level name, e.g. ``info``; ``unknown`` if not defined."""
        return _LOWER_LEVEL_NAMES.get(self, "unknown")

    def should_handling(self, cur_level: int) -> bool:
        """Return True if ``cur_level`` is at or above this level's severity."""
        return cur_level <= self

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Level({int(self)}, {self.name!r})"


Level.PANIC = Level(100)
Level.FATAL = Level(200)
Level.ERROR = Level(300)
Level.WARN = Level(400)
Level.NOTICE = Level(500)
Level.INFO = Level(600)
Level.DEBUG = Level(700)
Level.TRACE = Level(800)


class CallerFlag(IntEnum):
    """How the caller of a log call is reported."""

    FNL_FCN = 0  # "logger_test.py:48,test_func"
    FULL = 1  # "logger_test.test_func(),logger_test.py:48"
    FUNC = 2  # "logger_test.test_func"
    FC_LINE = 3  # "logger_test.test_func:48"
    PKG = 4  # "logger_test"
    PKG_FNL = 5  # "logger_test,logger_test.py:48"
    FP_LINE = 6  # "/work/app/logger_test.py:48"
    FN_LINE = 7  # "logger_test.py:48"
    FC_NAME = 8  # "test_func"


FIELD_KEY_DATA = "data"
FIELD_KEY_TIME = "time"
FIELD_KEY_DATE = "date"
FIELD_KEY_DATETIME = "datetime"
FIELD_KEY_TIMESTAMP = "timestamp"
FIELD_KEY_CALLER = "caller"
FIELD_KEY_LEVEL = "level"
FIELD_KEY_ERROR = "error"
FIELD_KEY_EXTRA = "extra"
FIELD_KEY_CHANNEL = "channel"
FIELD_KEY_MESSAGE = "message"

DEFAULT_CHANNEL_NAME = "application"
# strftime layout; "%L" stands for zero padded milliseconds.
DEFAULT_TIME_FORMAT = "%Y/%m/%dT%H:%M:%S.%L"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "on", "yes"}


DEBUG_MODE = _env_bool("OPEN_SLOG_DEBUG", False)

DEFAULT_CLOCK: Callable[[], datetime] = datetime.now

PRINT_LEVEL = Level.INFO

ALL_LEVELS: tuple[Level, ...] = (
    Level.PANIC,
    Level.FATAL,
    Level.ERROR,
    Level.WARN,
    Level.NOTICE,
    Level.INFO,
    Level.DEBUG,
    Level.TRACE,
)
DANGER_LEVELS: tuple[Level, ...] = (Level.PANIC, Level.FATAL, Level.ERROR, Level.WARN)
NORMAL_LEVELS: tuple[Level, ...] = (Level.INFO, Level.NOTICE, Level.DEBUG, Level.TRACE)

LEVEL_NAMES: dict[int, str] = {
    Level.PANIC: "PANIC",
    Level.FATAL: "FATAL",
    Level.ERROR: "ERROR",
    Level.WARN: "WARN",
    Level.NOTICE: "NOTICE",
    Level.INFO: "INFO",
    Level.DEBUG: "DEBUG",
    Level.TRACE: "TRACE",
}

_LOWER_LEVEL_NAMES: dict[int, str] = {lv: n.lower() for lv, n in LEVEL_NAMES.items()}

_NAME_TO_LEVEL: dict[str, Level] = {
    "panic": Level.PANIC,
    "fatal": Level.FATAL,
    "err": Level.ERROR,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "note": Level.NOTICE,
    "notice": Level.NOTICE,
    "info": Level.INFO,
    "": Level.INFO,
    "debug": Level.DEBUG,
    "trace": Level.TRACE,
}


def level_name(level: int) -> str:
    """Return the upper case name of ``level``, or ``UNKNOWN``."""
    return LEVEL_NAMES.get(level, "UNKNOWN")


def name_to_level(name: str) -> Level:
    """Convert a level name to a Level; raise ValueError for an unknown name."""
    try:
        return _NAME_TO_LEVEL[name.lower()]
    except KeyError:
        raise ValueError(f"invalid log level name: {name}") from None


def level_by_name(name: str) -> Level:
    """Convert a level name to a Level, falling back to INFO."""
    try:
        return name_to_level(name)
    except ValueError:
        return Level.INFO


_exit_handlers: list[Callable[[], None]] = []


def exit_handlers() -> list[Callable[[], None]]:
    """Return the registered global exit handlers."""
    return list(_exit_handlers)


def register_exit_handler(handler: Callable[[], None]) -> None:
    """Append an exit handler."""
    _exit_handlers.append(handler)


def prepend_exit_handler(handler: Callable[[], None]) -> None:
    """Insert an exit handler before all others."""
    _exit_handlers.insert(0, handler)


def reset_exit_handlers() -> None:
    """Remove all global exit handlers."""
    _exit_handlers.clear()


def run_exit_handlers() -> None:
    """Run the exit handlers in order; a failing handler stops the run."""
    try:
        for handler in _exit_handlers:
            handler()
    except Exception as err:  # noqa: BLE001 - report and carry on exiting
        print("slog: run exit handler(global) recovered, error:", err, file=sys.stderr)